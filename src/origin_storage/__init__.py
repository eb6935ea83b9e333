"""origin_storage — quota-constrained, per-origin key-value storage.

Values live in a persistent backend when one is available and in an
in-memory store otherwise.  Aggregated storage bounds each origin's data,
honors expiry and evicts expired, then least recently used, aggregates
when the backend runs out of quota.
"""

from origin_storage.config import StorageConfigSchema, StorageType, create_storage
from origin_storage.entry import StorageEntry
from origin_storage.eviction import EvictionPolicy
from origin_storage.exceptions import (
    EntryTooLargeError,
    QuotaExceededError,
    StorageConfigError,
    StorageError,
)
from origin_storage.remote import RemoteRequestor, RemoteStorage, RequestOptions
from origin_storage.result import ErrorPayload
from origin_storage.storage import OriginStorage

__all__ = [
    "EntryTooLargeError",
    "ErrorPayload",
    "EvictionPolicy",
    "OriginStorage",
    "QuotaExceededError",
    "RemoteRequestor",
    "RemoteStorage",
    "RequestOptions",
    "StorageConfigError",
    "StorageConfigSchema",
    "StorageEntry",
    "StorageError",
    "StorageType",
    "create_storage",
]
