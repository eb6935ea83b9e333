"""ErrorPayload — the structured value handed to ``on_error`` callbacks."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True)
class ErrorPayload:
    """Immutable description of a failed storage operation.

    Attributes:
        code:    Numeric error code (``21`` entry too large, ``22`` quota
                 exceeded, ``0`` anything else).
        message: Human-readable explanation.
    """

    code: int
    message: str

    @staticmethod
    def from_exception(exc: BaseException) -> ErrorPayload:
        code = getattr(exc, "code", 0)
        return ErrorPayload(code=code if isinstance(code, int) else 0, message=str(exc))


ErrorCallback = Callable[[ErrorPayload], object]
