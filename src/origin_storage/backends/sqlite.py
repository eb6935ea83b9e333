"""SQLiteBackend — durable, single-file persistent backend using aiosqlite."""

from __future__ import annotations

try:
    import aiosqlite
except ImportError as exc:
    raise ImportError(
        "SQLiteBackend requires the 'aiosqlite' package. "
        "Install it with: pip install origin-storage"
    ) from exc

from origin_storage.backends.base import Backend
from origin_storage.codec import byte_size
from origin_storage.exceptions import QuotaExceededError

DEFAULT_PERSISTENT_QUOTA = 5 * 1024 * 1024

_CREATE_TABLE = """
CREATE TABLE IF NOT EXISTS origin_storage (
    seq   INTEGER PRIMARY KEY AUTOINCREMENT,
    key   TEXT NOT NULL UNIQUE,
    value TEXT NOT NULL
)
"""

_USED_BYTES = """
SELECT COALESCE(SUM(LENGTH(CAST(key AS BLOB)) + LENGTH(CAST(value AS BLOB))), 0)
FROM origin_storage WHERE key != ?
"""


class SQLiteBackend(Backend):
    """Persistent backend backed by a single SQLite file.

    Mirrors browser ``localStorage`` semantics: a flat key space with a
    quota on the combined size of keys and values.  Rows enumerate in
    insertion order; overwriting a key keeps its original position.

    Parameters:
        db_path:     Path to the SQLite database file.  Use ``":memory:"``
                     for an in-memory database (useful for testing).
        quota_bytes: Combined UTF-8 size of keys and values the backend
                     accepts.  ``None`` disables the check, leaving only
                     the disk itself as a limit.
    """

    def __init__(
        self,
        db_path: str = "origin_storage.db",
        quota_bytes: int | None = DEFAULT_PERSISTENT_QUOTA,
    ) -> None:
        self._db_path = db_path
        self._quota_bytes = quota_bytes
        self._db: aiosqlite.Connection | None = None

    async def _connect(self) -> aiosqlite.Connection:
        if self._db is None:
            self._db = await aiosqlite.connect(self._db_path)
            await self._db.execute(_CREATE_TABLE)
            await self._db.commit()
        return self._db

    async def close(self) -> None:
        if self._db:
            await self._db.close()
            self._db = None

    # ── Backend protocol ─────────────────────────────────────

    async def get(self, key: str) -> str | None:
        db = await self._connect()
        cursor = await db.execute("SELECT value FROM origin_storage WHERE key = ?", (key,))
        row = await cursor.fetchone()
        if row is None:
            return None
        value: str = row[0]
        return value

    async def set(self, key: str, value: str) -> None:
        db = await self._connect()
        if self._quota_bytes is not None:
            cursor = await db.execute(_USED_BYTES, (key,))
            row = await cursor.fetchone()
            used = row[0] if row else 0
            if used + byte_size(key) + byte_size(value) > self._quota_bytes:
                detail = f"persistent store limited to {self._quota_bytes} bytes"
                raise QuotaExceededError(key, detail)
        await db.execute(
            "INSERT INTO origin_storage (key, value) VALUES (?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
            (key, value),
        )
        await db.commit()

    async def remove(self, key: str) -> None:
        db = await self._connect()
        await db.execute("DELETE FROM origin_storage WHERE key = ?", (key,))
        await db.commit()

    async def clear(self) -> None:
        db = await self._connect()
        await db.execute("DELETE FROM origin_storage")
        await db.commit()

    async def items(self) -> list[tuple[str, str]]:
        db = await self._connect()
        cursor = await db.execute("SELECT key, value FROM origin_storage ORDER BY seq")
        rows = await cursor.fetchall()
        return [(row[0], row[1]) for row in rows]
