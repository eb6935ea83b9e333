"""Backend protocol — a flat, string-keyed store of string values."""

from __future__ import annotations

from abc import ABC, abstractmethod


class Backend(ABC):
    """Abstract base for all storage backends.

    Backends know nothing about origins, aggregates or expiry; they persist
    ``str`` values under ``str`` keys.  A backend that runs out of room
    raises :class:`~origin_storage.exceptions.QuotaExceededError` or a
    backend-native signal recognized by :mod:`origin_storage.quota`.
    """

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the stored value, or ``None`` if not found."""
        ...

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Create or overwrite a value."""
        ...

    @abstractmethod
    async def remove(self, key: str) -> None:
        """Delete a value.  No-op if the key does not exist."""
        ...

    @abstractmethod
    async def clear(self) -> None:
        """Delete every key."""
        ...

    @abstractmethod
    async def items(self) -> list[tuple[str, str]]:
        """Return every ``(key, value)`` pair in enumeration order."""
        ...

    async def close(self) -> None:
        """Release any resources held by the backend."""
        return None
