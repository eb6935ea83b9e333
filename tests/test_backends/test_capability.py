"""Tests for backend capability negotiation."""

from origin_storage.backends import BackendKind, EphemeralBackend, negotiate_backend, probe


async def test_probe_leaves_no_trace(persistent):
    assert await probe(persistent)
    assert persistent.data == {}


async def test_probe_failure(persistent):
    persistent.fail_probe = True
    assert not await probe(persistent)


async def test_negotiate_persistent(persistent, ephemeral):
    handle = await negotiate_backend(persistent, ephemeral)
    assert handle.kind is BackendKind.PERSISTENT
    assert handle.persistent
    assert handle.backend is persistent


async def test_negotiate_without_persistent(ephemeral):
    handle = await negotiate_backend(None, ephemeral)
    assert handle.kind is BackendKind.EPHEMERAL
    assert not handle.persistent
    assert handle.backend is ephemeral


async def test_negotiate_failed_probe(persistent):
    persistent.fail_probe = True
    fallback = EphemeralBackend()
    handle = await negotiate_backend(persistent, fallback)
    assert handle.backend is fallback
