"""Capability negotiation — choose the persistent or the ephemeral backend once."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from origin_storage.backends.base import Backend
from origin_storage.backends.memory import EphemeralBackend

logger = logging.getLogger(__name__)

PROBE_KEY = "__origin_storage_probe__"


class BackendKind(str, Enum):
    PERSISTENT = "persistent"
    EPHEMERAL = "ephemeral"


@dataclass(frozen=True)
class BackendHandle:
    """The backend a storage talks to, tagged with its kind."""

    kind: BackendKind
    backend: Backend

    @property
    def persistent(self) -> bool:
        return self.kind is BackendKind.PERSISTENT


async def probe(backend: Backend) -> bool:
    """Return ``True`` if *backend* accepts a trivial write-then-remove."""
    try:
        await backend.set(PROBE_KEY, "1")
        await backend.remove(PROBE_KEY)
    except Exception as exc:
        logger.warning("Persistent backend failed capability probe: %s", exc)
        return False
    return True


async def negotiate_backend(
    persistent: Backend | None,
    ephemeral: EphemeralBackend,
) -> BackendHandle:
    """Probe *persistent* and fall back to *ephemeral* when it is unusable.

    ``persistent=None`` means the environment has no persistent store at all.
    """
    if persistent is not None and await probe(persistent):
        return BackendHandle(BackendKind.PERSISTENT, persistent)
    logger.info("Using ephemeral backend; data will not survive the process")
    return BackendHandle(BackendKind.EPHEMERAL, ephemeral)
