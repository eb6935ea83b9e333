"""Custom exceptions for the origin_storage package."""

from __future__ import annotations

from typing import ClassVar

from origin_storage.result import ErrorPayload


class StorageError(Exception):
    """Base exception for all storage errors.

    Every subclass carries a numeric ``code`` so the error can be handed to
    ``on_error`` callbacks as an :class:`ErrorPayload`.
    """

    code: ClassVar[int] = 0

    def payload(self) -> ErrorPayload:
        return ErrorPayload(code=self.code, message=str(self))


class EntryTooLargeError(StorageError):
    """Raised when a serialized aggregate exceeds the per-origin ceiling.

    Checked before the backend is touched, so nothing is written.
    """

    code = 21

    def __init__(self, size: int, limit: int) -> None:
        self.size = size
        self.limit = limit
        super().__init__(f"storage space needs to be less than {limit} bytes (got {size})")


class QuotaExceededError(StorageError):
    """Raised when a backend has no room left for a write."""

    code = 22

    def __init__(self, key: str, detail: str = "") -> None:
        self.key = key
        msg = f"Setting the value of '{key}' exceeded the quota"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class StorageConfigError(StorageError):
    """Raised when a storage is misconfigured."""

    def __init__(self, message: str) -> None:
        super().__init__(f"Storage misconfigured: {message}")
