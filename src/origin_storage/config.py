"""Configuration schema and factory for storage instances.

The ``type`` field selects the variant: ``local`` builds an
:class:`OriginStorage` (SQLite with ephemeral fallback, eviction on quota
failure); ``remote`` builds a :class:`RemoteStorage` that delegates all
state to a server.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from origin_storage.backends.memory import DEFAULT_EPHEMERAL_QUOTA, EphemeralBackend
from origin_storage.backends.sqlite import DEFAULT_PERSISTENT_QUOTA, SQLiteBackend
from origin_storage.eviction import EvictionPolicy
from origin_storage.exceptions import StorageConfigError
from origin_storage.origin import DEFAULT_CACHE_HOSTS, is_cache_url, resolve_origin
from origin_storage.remote import RemoteRequestor, RemoteStorage
from origin_storage.storage import DEFAULT_CAPACITY, OriginStorage


class StorageType(str, Enum):
    LOCAL = "local"
    REMOTE = "remote"


class StorageConfigSchema(BaseModel):
    """Storage configuration.

    Attributes:
        type: Variant to build ("local" or "remote")
        origin: Explicit origin; derived from ``url`` when empty
        url: Page URL used to derive origin and mode
        cache_hosts: Hosts whose pages use aggregated storage
        aggregated: Force aggregated (True) or direct (False) mode;
            derived from ``url`` when unset
        path: SQLite database file; empty means no persistent backend
        capacity: Maximum serialized aggregate size in bytes
        quota_bytes: Persistent backend quota in bytes (None disables)
        ephemeral_quota_bytes: Ephemeral store cap in bytes
        evict_unstamped: Evict the first entry when none has a lastUsed stamp
        base_url: Base URL for remote requests
        timeout: Remote request timeout in seconds (None waits indefinitely)
    """

    type: StorageType = StorageType.LOCAL
    origin: str = ""
    url: str = ""
    cache_hosts: list[str] = Field(default_factory=lambda: list(DEFAULT_CACHE_HOSTS))
    aggregated: bool | None = None
    path: str = ""
    capacity: int = Field(default=DEFAULT_CAPACITY, gt=0)
    quota_bytes: int | None = Field(default=DEFAULT_PERSISTENT_QUOTA, gt=0)
    ephemeral_quota_bytes: int = Field(default=DEFAULT_EPHEMERAL_QUOTA, gt=0)
    evict_unstamped: bool = False
    base_url: str = ""
    timeout: float | None = None

    def resolved_origin(self) -> str:
        if self.origin:
            return self.origin
        if self.url:
            return resolve_origin(self.url, self.cache_hosts)
        return ""

    def resolved_aggregated(self) -> bool:
        if self.aggregated is not None:
            return self.aggregated
        return bool(self.url) and is_cache_url(self.url, self.cache_hosts)


def create_storage(config: StorageConfigSchema) -> OriginStorage | RemoteStorage:
    """Build the storage variant described by *config*.

    Raises:
        StorageConfigError: If aggregated mode is requested without an origin.
    """
    if config.type is StorageType.REMOTE:
        return RemoteStorage(RemoteRequestor(base_url=config.base_url, timeout=config.timeout))

    aggregated = config.resolved_aggregated()
    origin = config.resolved_origin()
    if aggregated and not origin:
        raise StorageConfigError("aggregated mode requires 'origin' or 'url'")

    persistent = SQLiteBackend(config.path, quota_bytes=config.quota_bytes) if config.path else None
    return OriginStorage(
        origin,
        aggregated=aggregated,
        persistent=persistent,
        ephemeral=EphemeralBackend(config.ephemeral_quota_bytes),
        capacity=config.capacity,
        eviction=EvictionPolicy(evict_unstamped=config.evict_unstamped),
    )
