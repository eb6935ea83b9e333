"""Storage backends and capability negotiation."""

from origin_storage.backends.base import Backend
from origin_storage.backends.capability import (
    BackendHandle,
    BackendKind,
    negotiate_backend,
    probe,
)
from origin_storage.backends.memory import EphemeralBackend
from origin_storage.backends.sqlite import SQLiteBackend

__all__ = [
    "Backend",
    "BackendHandle",
    "BackendKind",
    "EphemeralBackend",
    "SQLiteBackend",
    "negotiate_backend",
    "probe",
]
