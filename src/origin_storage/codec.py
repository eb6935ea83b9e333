"""JSON codec for stored values.

Values reach the codec from callers that may have already decoded them,
so :func:`decode` never raises for a ``str`` input: anything that is not a
JSON document is treated as a plain string scalar.
"""

from __future__ import annotations

import json
from typing import Any


def encode(value: Any) -> str:
    """Serialize *value* to compact JSON text."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def decode(text: str) -> Any:
    """Parse *text* as JSON, falling back to the raw string on failure."""
    try:
        return json.loads(text)
    except (TypeError, ValueError):
        return json.loads(json.dumps(text))


def byte_size(text: str) -> int:
    """Return the UTF-8 encoded size of *text*."""
    return len(text.encode("utf-8"))
