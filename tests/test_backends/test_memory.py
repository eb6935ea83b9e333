"""Tests for EphemeralBackend."""

import pytest

from origin_storage import QuotaExceededError
from origin_storage.backends import EphemeralBackend


@pytest.fixture
def backend():
    return EphemeralBackend(quota_bytes=10)


async def test_get_nonexistent(backend):
    assert await backend.get("k") is None


async def test_set_and_get(backend):
    await backend.set("k", "v")
    assert await backend.get("k") == "v"


async def test_remove(backend):
    await backend.set("k", "v")
    await backend.remove("k")
    assert await backend.get("k") is None


async def test_remove_nonexistent(backend):
    await backend.remove("nope")  # should not raise


async def test_clear(backend):
    await backend.set("a", "1")
    await backend.set("b", "2")
    await backend.clear()
    assert await backend.items() == []


async def test_items_in_insertion_order(backend):
    await backend.set("b", "1")
    await backend.set("a", "2")
    assert await backend.items() == [("b", "1"), ("a", "2")]


async def test_quota_rejects_write(backend):
    await backend.set("a", "12345")
    with pytest.raises(QuotaExceededError):
        await backend.set("b", "123456")
    assert await backend.get("b") is None
    assert backend.used_bytes() == 5


async def test_quota_at_exact_limit(backend):
    await backend.set("a", "12345")
    await backend.set("b", "12345")
    assert backend.used_bytes() == 10


async def test_replaced_value_does_not_count(backend):
    await backend.set("a", "1234567890")
    await backend.set("a", "0987654321")
    assert await backend.get("a") == "0987654321"


def test_default_quota_is_five_mebibytes():
    assert EphemeralBackend().quota_bytes == 5 * 1024 * 1024
