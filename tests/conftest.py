"""Shared test fixtures."""

from datetime import UTC, datetime

import pytest

from origin_storage import OriginStorage
from origin_storage.backends import Backend, EphemeralBackend


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self._now = start

    def now(self) -> datetime:
        return datetime.fromtimestamp(self._now, tz=UTC)

    def advance(self, seconds: float) -> None:
        self._now += seconds


class DOMQuotaError(Exception):
    """Mimics the DOMException a browser raises when localStorage is full."""

    code = 22
    name = "QuotaExceededError"


class FakePersistentBackend(Backend):
    """Dict-backed persistent backend with a browser-style entry limit.

    ``max_entries`` caps the number of distinct keys; ``full`` rejects every
    write; ``fail_probe`` makes the capability probe fail; ``error`` is
    raised from every write when set.
    """

    def __init__(self, max_entries: int | None = None):
        self.data: dict[str, str] = {}
        self.max_entries = max_entries
        self.full = False
        self.fail_probe = False
        self.error: Exception | None = None
        self.set_calls: list[str] = []
        self.closed = False

    async def get(self, key):
        return self.data.get(key)

    async def set(self, key, value):
        self.set_calls.append(key)
        if self.fail_probe:
            raise PermissionError("storage disabled")
        if self.error is not None:
            raise self.error
        if self.full:
            raise DOMQuotaError("quota exceeded")
        if (
            self.max_entries is not None
            and key not in self.data
            and len(self.data) >= self.max_entries
        ):
            raise DOMQuotaError("quota exceeded")
        self.data[key] = value

    async def remove(self, key):
        self.data.pop(key, None)

    async def clear(self):
        self.data.clear()

    async def items(self):
        return list(self.data.items())

    async def close(self):
        self.closed = True


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def persistent():
    return FakePersistentBackend()


@pytest.fixture
def ephemeral():
    return EphemeralBackend()


@pytest.fixture
def make_storage(persistent, ephemeral, clock):
    """Build storages sharing one backend, negotiated up front."""

    async def _make(origin: str = "example.com", **kwargs) -> OriginStorage:
        kwargs.setdefault("persistent", persistent)
        kwargs.setdefault("ephemeral", ephemeral)
        kwargs.setdefault("clock", clock)
        storage = OriginStorage(origin, **kwargs)
        await storage.backend()
        return storage

    return _make


@pytest.fixture
async def storage(make_storage):
    return await make_storage()
