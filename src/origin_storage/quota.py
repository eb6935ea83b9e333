"""Quota guard — normalizes backend "storage full" signals.

Backends report capacity exhaustion in different shapes: browser bridges
raise DOM-style exceptions carrying ``code``/``name``/``number``
attributes, SQLite raises ``SQLITE_FULL`` and the filesystem raises
``ENOSPC``.  :func:`is_quota_exceeded` recognizes all of them and
:func:`guard_quota` re-raises them as :class:`QuotaExceededError`.
Every other failure passes through untouched.
"""

from __future__ import annotations

import errno
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager

from origin_storage.exceptions import QuotaExceededError

# DOMException.QUOTA_EXCEEDED_ERR
DOM_QUOTA_EXCEEDED_CODE = 22

# Firefox reports quota exhaustion with a legacy code and a named error.
FIREFOX_QUOTA_CODE = 1014
FIREFOX_QUOTA_NAME = "NS_ERROR_DOM_QUOTA_REACHED"

# Internet Explorer 8 HRESULT for "not enough storage".
IE_QUOTA_NUMBER = -2147024882

_SQLITE_FULL = getattr(sqlite3, "SQLITE_FULL", 13)
_SQLITE_FULL_MESSAGE = "database or disk is full"

_DISK_FULL_ERRNOS = frozenset(
    code for code in (errno.ENOSPC, getattr(errno, "EDQUOT", None)) if code is not None
)


def is_quota_exceeded(exc: BaseException | None) -> bool:
    """Return ``True`` if *exc* signals that the backend is out of space."""
    if exc is None:
        return False
    if isinstance(exc, QuotaExceededError):
        return True
    if isinstance(exc, sqlite3.Error):
        if getattr(exc, "sqlite_errorcode", None) == _SQLITE_FULL:
            return True
        return _SQLITE_FULL_MESSAGE in str(exc)
    if isinstance(exc, OSError):
        return exc.errno in _DISK_FULL_ERRNOS

    code = getattr(exc, "code", None)
    if code is not None:
        if code == DOM_QUOTA_EXCEEDED_CODE:
            return True
        return code == FIREFOX_QUOTA_CODE and getattr(exc, "name", None) == FIREFOX_QUOTA_NAME
    return getattr(exc, "number", None) == IE_QUOTA_NUMBER


@contextmanager
def guard_quota(key: str) -> Iterator[None]:
    """Translate quota signals raised inside the block into ``QuotaExceededError``."""
    try:
        yield
    except QuotaExceededError:
        raise
    except Exception as exc:
        if is_quota_exceeded(exc):
            raise QuotaExceededError(key, str(exc)) from exc
        raise
