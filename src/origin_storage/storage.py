"""OriginStorage — the quota-aware key-value facade."""

from __future__ import annotations

import logging
import math
import re
from typing import TYPE_CHECKING, Any

from origin_storage import codec
from origin_storage._internal.clock import Clock, SystemClock, epoch_millis
from origin_storage.backends.capability import BackendHandle, negotiate_backend
from origin_storage.backends.memory import EphemeralBackend
from origin_storage.entry import RESERVED_FIELDS, StorageEntry
from origin_storage.eviction import EvictionPolicy
from origin_storage.exceptions import EntryTooLargeError, QuotaExceededError
from origin_storage.quota import guard_quota
from origin_storage.result import ErrorCallback, ErrorPayload

if TYPE_CHECKING:
    from origin_storage.backends.base import Backend

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 4 * 1024

_INT_PREFIX = re.compile(r"\s*[+-]?\d+")


def parse_ttl(ttl: Any) -> int | None:
    """Return *ttl* as a positive number of whole seconds, or ``None``.

    Strings are read up to the first non-digit (``"10s"`` is ten seconds).
    Anything non-numeric or non-positive means "never expires".
    """
    if ttl is None or isinstance(ttl, bool):
        return None
    if isinstance(ttl, int):
        seconds = ttl
    elif isinstance(ttl, float):
        if not math.isfinite(ttl):
            return None
        seconds = int(ttl)
    elif isinstance(ttl, str):
        match = _INT_PREFIX.match(ttl)
        if match is None:
            return None
        seconds = int(match.group())
    else:
        return None
    return seconds if seconds > 0 else None


def _notify(on_error: ErrorCallback | None, exc: Exception) -> None:
    if on_error is not None:
        on_error(ErrorPayload.from_exception(exc))


class OriginStorage:
    """Key-value storage scoped to one origin.

    In **aggregated** mode every key of the origin lives inside a single
    serialized :class:`StorageEntry` stored under the origin name.  The
    entry is bounded by *capacity*, may carry an expiry, and is subject to
    eviction when the persistent backend runs out of quota.

    In **direct** mode keys map straight onto the backend with no wrapping
    aggregate, no expiry and no eviction.

    The persistent backend is probed once, on first use.  If it is missing
    or fails the probe, the storage works against *ephemeral* for the rest
    of its life.

    Every operation that fails hands an :class:`ErrorPayload` to its
    ``on_error`` callback (when given) and then raises.

    Parameters:
        origin:          Scope under which the aggregate is stored.
        aggregated:      ``True`` for aggregated mode, ``False`` for direct.
        persistent:      Persistent backend, or ``None`` if unavailable.
        ephemeral:       Fallback store.  A fresh one is created if omitted.
        capacity:        Maximum serialized size of the aggregate in bytes.
        clock:           Injectable clock for testing.
        eviction:        Eviction policy used after quota failures.
    """

    def __init__(
        self,
        origin: str,
        *,
        aggregated: bool = True,
        persistent: Backend | None = None,
        ephemeral: EphemeralBackend | None = None,
        capacity: int = DEFAULT_CAPACITY,
        clock: Clock | None = None,
        eviction: EvictionPolicy | None = None,
    ) -> None:
        self._origin = origin
        self._aggregated = aggregated
        self._persistent = persistent
        self._ephemeral = ephemeral or EphemeralBackend()
        self._capacity = capacity
        self._clock = clock or SystemClock()
        self._eviction = eviction or EvictionPolicy(clock=self._clock)
        self._handle: BackendHandle | None = None

    @property
    def origin(self) -> str:
        return self._origin

    @property
    def aggregated(self) -> bool:
        return self._aggregated

    @property
    def capacity(self) -> int:
        return self._capacity

    async def backend(self) -> BackendHandle:
        """Return the negotiated backend, probing on first call."""
        if self._handle is None:
            self._handle = await negotiate_backend(self._persistent, self._ephemeral)
            logger.debug("Origin %r bound to %s backend", self._origin, self._handle.kind.value)
        return self._handle

    async def close(self) -> None:
        if self._persistent is not None:
            await self._persistent.close()

    # ── public API ───────────────────────────────────────────

    async def set(
        self,
        key: str,
        value: Any,
        ttl: Any = None,
        *,
        on_error: ErrorCallback | None = None,
    ) -> None:
        """Store *value* under *key*.

        Empty or non-string keys and empty values are ignored.  *ttl* (seconds) applies
        to the whole aggregate and only in aggregated mode.

        Raises:
            EntryTooLargeError: The aggregate would exceed ``capacity``.
            QuotaExceededError: The backend is full, even after eviction.
        """
        if not isinstance(key, str) or not key or value is None or value == "":
            return
        try:
            handle = await self.backend()
            if self._aggregated:
                await self._set_aggregated(handle, key, value, ttl)
            else:
                raw = value if isinstance(value, str) else codec.encode(value)
                await self._write(handle, key, raw, evict=False)
        except Exception as exc:
            _notify(on_error, exc)
            raise

    async def get(self, key: str) -> Any | None:
        """Return the value stored under *key*, or ``None``."""
        if not isinstance(key, str):
            return None
        handle = await self.backend()
        if not self._aggregated:
            return await handle.backend.get(key)
        entry = await self._load(handle)
        return entry.values.get(key)

    async def rm(self, key: str, *, on_error: ErrorCallback | None = None) -> None:
        """Remove *key*.  In aggregated mode the whole aggregate is rewritten."""
        if not isinstance(key, str):
            return
        try:
            handle = await self.backend()
            if not self._aggregated:
                await handle.backend.remove(key)
                return
            entry = await self._load(handle)
            if key not in entry.values:
                return
            del entry.values[key]
            await self._write(handle, self._origin, entry.encode(), evict=True)
        except Exception as exc:
            _notify(on_error, exc)
            raise

    async def clear(self, *, on_error: ErrorCallback | None = None) -> None:
        """Remove the origin's aggregate, or every key in direct mode."""
        try:
            handle = await self.backend()
            if self._aggregated:
                await handle.backend.remove(self._origin)
            else:
                await handle.backend.clear()
        except Exception as exc:
            _notify(on_error, exc)
            raise

    async def sweep_expired(self) -> bool:
        """Remove every expired aggregate of every origin in the backend.

        Returns ``False`` in direct mode, where nothing carries an expiry.
        """
        if not self._aggregated:
            return False
        handle = await self.backend()
        return await self._eviction.sweep_expired(handle.backend)

    # ── internals ────────────────────────────────────────────

    async def _load(self, handle: BackendHandle) -> StorageEntry:
        entry = StorageEntry.decode(await handle.backend.get(self._origin))
        entry.last_used = epoch_millis(self._clock)
        return entry

    async def _set_aggregated(self, handle: BackendHandle, key: str, value: Any, ttl: Any) -> None:
        if key in RESERVED_FIELDS:
            raise ValueError(f"'{key}' is a reserved field name")
        entry = await self._load(handle)
        entry.values[key] = value
        seconds = parse_ttl(ttl)
        if seconds is not None:
            entry.expires_at = epoch_millis(self._clock) + seconds * 1000
        else:
            entry.expires_at = None

        payload = entry.encode()
        size = codec.byte_size(payload)
        if size > self._capacity:
            raise EntryTooLargeError(size, self._capacity)
        await self._write(handle, self._origin, payload, evict=True)

    async def _write(self, handle: BackendHandle, key: str, raw: str, *, evict: bool) -> None:
        try:
            with guard_quota(key):
                await handle.backend.set(key, raw)
            return
        except QuotaExceededError:
            if not (evict and handle.persistent):
                raise

        removed = await self._eviction.evict(handle.backend)
        logger.debug("Retrying write of %r after evicting %s", key, removed)
        with guard_quota(key):
            await handle.backend.set(key, raw)
