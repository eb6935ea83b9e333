"""Tests for ErrorPayload and exception payloads."""

import pytest

from origin_storage import (
    EntryTooLargeError,
    ErrorPayload,
    QuotaExceededError,
    StorageConfigError,
)


def test_payload_is_frozen():
    payload = ErrorPayload(code=22, message="full")
    with pytest.raises(AttributeError):
        payload.code = 21  # type: ignore[misc]


def test_entry_too_large_payload():
    payload = EntryTooLargeError(5000, 4096).payload()
    assert payload.code == 21
    assert "4096" in payload.message


def test_quota_exceeded_payload():
    payload = QuotaExceededError("site.com", "disk full").payload()
    assert payload == ErrorPayload(
        code=22,
        message="Setting the value of 'site.com' exceeded the quota: disk full",
    )


def test_from_generic_exception():
    payload = ErrorPayload.from_exception(RuntimeError("boom"))
    assert payload == ErrorPayload(code=0, message="boom")


def test_config_error_code():
    assert StorageConfigError("bad").payload().code == 0
