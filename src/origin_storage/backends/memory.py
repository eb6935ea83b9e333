"""EphemeralBackend — dict-backed fallback used when persistence is unavailable."""

from __future__ import annotations

import threading

from origin_storage.backends.base import Backend
from origin_storage.codec import byte_size
from origin_storage.exceptions import QuotaExceededError

DEFAULT_EPHEMERAL_QUOTA = 5 * 1024 * 1024


class EphemeralBackend(Backend):
    """In-memory store with an aggregate size cap.  Data is lost on process exit.

    A write that would push the total size of all stored values past
    *quota_bytes* raises :class:`QuotaExceededError` and leaves the store
    untouched.  The value being replaced does not count towards the total.

    Parameters:
        quota_bytes: Maximum combined UTF-8 size of all values.
    """

    def __init__(self, quota_bytes: int = DEFAULT_EPHEMERAL_QUOTA) -> None:
        self._data: dict[str, str] = {}
        self._quota_bytes = quota_bytes
        self._lock = threading.Lock()

    @property
    def quota_bytes(self) -> int:
        return self._quota_bytes

    def used_bytes(self) -> int:
        with self._lock:
            return sum(byte_size(v) for v in self._data.values())

    async def get(self, key: str) -> str | None:
        with self._lock:
            return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        with self._lock:
            size = byte_size(value)
            size += sum(byte_size(v) for k, v in self._data.items() if k != key)
            if size > self._quota_bytes:
                detail = f"ephemeral store limited to {self._quota_bytes} bytes"
                raise QuotaExceededError(key, detail)
            self._data[key] = value

    async def remove(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    async def clear(self) -> None:
        with self._lock:
            self._data.clear()

    async def items(self) -> list[tuple[str, str]]:
        with self._lock:
            return list(self._data.items())
