"""StorageEntry — the per-origin aggregate stored under a single backend key."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

from origin_storage import codec

LAST_USED_FIELD = "lastUsed"
EXPIRES_AT_FIELD = "expiresAt"
RESERVED_FIELDS = frozenset({LAST_USED_FIELD, EXPIRES_AT_FIELD})


def _as_millis(raw: Any) -> int | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if math.isfinite(raw) else None
    if isinstance(raw, str):
        try:
            return int(raw.strip())
        except ValueError:
            return None
    return None


@dataclass
class StorageEntry:
    """Logical key/value pairs of one origin plus two bookkeeping fields.

    Attributes:
        values:     Logical key -> value mapping.
        last_used:  Epoch milliseconds of the last load of this aggregate.
        expires_at: Absolute expiry in epoch milliseconds, ``None`` for never.
    """

    values: dict[str, Any] = field(default_factory=dict)
    last_used: int | None = None
    expires_at: int | None = None

    @classmethod
    def from_payload(cls, payload: Any) -> StorageEntry:
        """Build an entry from a decoded payload.  Non-objects yield an empty entry."""
        if not isinstance(payload, dict):
            return cls()
        values = {k: v for k, v in payload.items() if k not in RESERVED_FIELDS}
        return cls(
            values=values,
            last_used=_as_millis(payload.get(LAST_USED_FIELD)),
            expires_at=_as_millis(payload.get(EXPIRES_AT_FIELD)),
        )

    @classmethod
    def decode(cls, raw: str | None) -> StorageEntry:
        if not raw:
            return cls()
        return cls.from_payload(codec.decode(raw))

    def is_expired(self, now_ms: int) -> bool:
        return bool(self.expires_at) and now_ms >= (self.expires_at or 0)

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = dict(self.values)
        if self.last_used is not None:
            payload[LAST_USED_FIELD] = self.last_used
        if self.expires_at is not None:
            payload[EXPIRES_AT_FIELD] = self.expires_at
        return payload

    def encode(self) -> str:
        return codec.encode(self.to_payload())
