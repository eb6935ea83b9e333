"""Tests for SQLiteBackend."""

import pytest

from origin_storage import OriginStorage, QuotaExceededError
from origin_storage.backends import SQLiteBackend


@pytest.fixture
async def backend(tmp_path):
    db = SQLiteBackend(str(tmp_path / "storage.db"), quota_bytes=None)
    yield db
    await db.close()


async def test_get_nonexistent(backend):
    assert await backend.get("k") is None


async def test_set_and_get(backend):
    await backend.set("k", "v")
    assert await backend.get("k") == "v"


async def test_overwrite_keeps_position(backend):
    await backend.set("a", "1")
    await backend.set("b", "2")
    await backend.set("a", "3")
    assert await backend.items() == [("a", "3"), ("b", "2")]


async def test_remove(backend):
    await backend.set("k", "v")
    await backend.remove("k")
    assert await backend.get("k") is None
    await backend.remove("k")  # should not raise


async def test_clear(backend):
    await backend.set("a", "1")
    await backend.set("b", "2")
    await backend.clear()
    assert await backend.items() == []


async def test_survives_reconnect(tmp_path):
    path = str(tmp_path / "storage.db")
    first = SQLiteBackend(path)
    await first.set("k", "v")
    await first.close()

    second = SQLiteBackend(path)
    try:
        assert await second.get("k") == "v"
    finally:
        await second.close()


async def test_quota_counts_keys_and_values(tmp_path):
    backend = SQLiteBackend(str(tmp_path / "q.db"), quota_bytes=10)
    try:
        await backend.set("ab", "cdef")
        with pytest.raises(QuotaExceededError):
            await backend.set("gh", "ijkl")
        assert await backend.get("gh") is None
        await backend.set("ab", "cdefghij")
        assert await backend.get("ab") == "cdefghij"
    finally:
        await backend.close()


async def test_close_is_idempotent(backend):
    await backend.close()
    await backend.close()


async def test_storage_evicts_oldest_origin_on_quota(tmp_path, clock):
    # Each aggregate row costs 33 bytes, so two fit and a third does not.
    backend = SQLiteBackend(str(tmp_path / "evict.db"), quota_bytes=80)
    a = OriginStorage("a.com", persistent=backend, clock=clock)
    b = OriginStorage("b.com", persistent=backend, clock=clock)
    c = OriginStorage("c.com", persistent=backend, clock=clock)
    try:
        for storage in (a, b, c):
            await storage.backend()
        await a.set("k", "v")
        clock.advance(10)
        await b.set("k", "v")
        clock.advance(10)
        await c.set("k", "v")

        assert [key for key, _ in await backend.items()] == ["b.com", "c.com"]
        assert await a.get("k") is None
        assert await c.get("k") == "v"
    finally:
        await backend.close()
