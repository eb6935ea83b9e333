"""EvictionPolicy — reclaims room after a quota failure.

Expired aggregates are always reclaimed before live ones.  Only when
nothing has expired does the policy fall back to removing the single least
recently used aggregate.  It never removes more than that, so a write that
still does not fit after one eviction fails for good.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from origin_storage._internal.clock import Clock, SystemClock, epoch_millis
from origin_storage.entry import StorageEntry

if TYPE_CHECKING:
    from origin_storage.backends.base import Backend

logger = logging.getLogger(__name__)


class EvictionPolicy:
    """Expire-then-oldest eviction over every aggregate in a backend.

    Parameters:
        clock:           Injectable clock for testing.
        evict_unstamped: When no stored entry carries a ``lastUsed`` stamp,
                         remove the first enumerated entry instead of
                         removing nothing.
    """

    def __init__(self, *, clock: Clock | None = None, evict_unstamped: bool = False) -> None:
        self._clock = clock or SystemClock()
        self.evict_unstamped = evict_unstamped

    async def sweep_expired(self, backend: Backend) -> bool:
        """Remove every aggregate whose expiry has passed.

        Returns:
            ``True`` if at least one aggregate was removed.
        """
        return bool(await self._remove_expired(backend))

    async def _remove_expired(self, backend: Backend) -> list[str]:
        now = epoch_millis(self._clock)
        removed: list[str] = []
        for key, raw in await backend.items():
            if StorageEntry.decode(raw).is_expired(now):
                logger.debug("Removing expired aggregate %r", key)
                await backend.remove(key)
                removed.append(key)
        return removed

    async def least_recently_used(self, backend: Backend) -> str | None:
        """Return the key of the aggregate with the smallest ``lastUsed``."""
        victim: str | None = None
        oldest: int | None = None
        first: str | None = None
        for key, raw in await backend.items():
            if first is None:
                first = key
            last_used = StorageEntry.decode(raw).last_used
            if last_used is None:
                continue
            if oldest is None or last_used < oldest:
                victim, oldest = key, last_used
        if victim is None and self.evict_unstamped:
            return first
        return victim

    async def evict(self, backend: Backend) -> list[str]:
        """Run one eviction round and return the keys that were removed."""
        removed = await self._remove_expired(backend)
        if removed:
            logger.info("Quota exceeded; reclaimed %d expired aggregate(s)", len(removed))
            return removed

        victim = await self.least_recently_used(backend)
        if victim is None:
            logger.warning("Quota exceeded but no aggregate carries a lastUsed stamp")
            return []
        logger.info("Quota exceeded; evicting least recently used aggregate %r", victim)
        await backend.remove(victim)
        return [victim]
