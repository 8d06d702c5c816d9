"""SQLite connection and schema for users, tasks and comments."""

import asyncio
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import aiosqlite

from taskboard.utils.logging import get_logger

logger = get_logger(__name__)

SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS users (
        id TEXT PRIMARY KEY,
        username TEXT NOT NULL,
        password_hash TEXT NOT NULL,
        name TEXT NOT NULL,
        email TEXT NOT NULL,
        role TEXT NOT NULL DEFAULT 'USER',
        expired INTEGER NOT NULL DEFAULT 0,
        locked INTEGER NOT NULL DEFAULT 0,
        credentials_expired INTEGER NOT NULL DEFAULT 0,
        enabled INTEGER NOT NULL DEFAULT 1,
        created_at TEXT NOT NULL,
        updated_at TEXT
    )
    """,
    "CREATE UNIQUE INDEX IF NOT EXISTS ux_users_username ON users(username)",
    "CREATE UNIQUE INDEX IF NOT EXISTS ux_users_email ON users(email)",
    """
    CREATE TABLE IF NOT EXISTS tasks (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        description TEXT NOT NULL,
        status TEXT NOT NULL,
        priority TEXT NOT NULL,
        creator_id TEXT NOT NULL,
        executor_id TEXT,
        expires_on TEXT NOT NULL,
        created_at TEXT NOT NULL,
        updated_at TEXT
    )
    """,
    "CREATE UNIQUE INDEX IF NOT EXISTS ux_tasks_creator_name ON tasks(creator_id, name)",
    "CREATE INDEX IF NOT EXISTS idx_tasks_created_at ON tasks(created_at, id)",
    """
    CREATE TABLE IF NOT EXISTS comments (
        id TEXT PRIMARY KEY,
        task_id TEXT NOT NULL REFERENCES tasks(id) ON DELETE CASCADE,
        user_id TEXT NOT NULL,
        content TEXT NOT NULL,
        created_at TEXT NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_comments_task ON comments(task_id, created_at)",
)


class Database:
    """Single shared aiosqlite connection guarded by a lock.

    Repositories run every statement through :meth:`execute`,
    :meth:`fetch_one` and :meth:`fetch_all` so writes are committed
    immediately and concurrent requests never interleave on the cursor.
    """

    def __init__(self, path: str | Path) -> None:
        """Initialize the database handle.

        Args:
            path: SQLite file path, or ":memory:"
        """
        self.path = str(path)
        self._db: aiosqlite.Connection | None = None
        self._lock = asyncio.Lock()

    @property
    def is_open(self) -> bool:
        return self._db is not None

    async def initialize(self) -> None:
        """Open the connection and create the schema if missing."""
        if self._db is not None:
            return

        if self.path != ":memory:":
            Path(self.path).parent.mkdir(parents=True, exist_ok=True)

        async with self._lock:
            self._db = await aiosqlite.connect(self.path)
            self._db.row_factory = aiosqlite.Row

            await self._db.execute("PRAGMA foreign_keys=ON")
            if self.path != ":memory:":
                await self._db.execute("PRAGMA journal_mode=WAL")
                await self._db.execute("PRAGMA synchronous=NORMAL")

            for statement in SCHEMA:
                await self._db.execute(statement)

            await self._db.commit()
            logger.info("database_initialized", path=self.path)

    async def close(self) -> None:
        if self._db is not None:
            await self._db.close()
            self._db = None
            logger.info("database_closed", path=self.path)

    async def health_check(self) -> bool:
        """Run a trivial query to confirm the connection is usable."""
        if self._db is None:
            return False
        try:
            row = await self.fetch_one("SELECT 1")
            return row is not None
        except aiosqlite.Error as e:
            logger.warning("database_health_check_failed", error=str(e))
            return False

    def _connection(self) -> aiosqlite.Connection:
        if self._db is None:
            raise RuntimeError("Database not initialized")
        return self._db

    async def execute(self, sql: str, params: Iterable[Any] = ()) -> int:
        """Execute a write statement and commit.

        Returns:
            Number of affected rows

        Raises:
            aiosqlite.IntegrityError: When a constraint is violated
        """
        db = self._connection()
        async with self._lock:
            try:
                cursor = await db.execute(sql, tuple(params))
                await db.commit()
            except aiosqlite.Error:
                await db.rollback()
                raise
            return cursor.rowcount

    async def fetch_one(self, sql: str, params: Iterable[Any] = ()) -> aiosqlite.Row | None:
        db = self._connection()
        async with self._lock:
            cursor = await db.execute(sql, tuple(params))
            return await cursor.fetchone()

    async def fetch_all(self, sql: str, params: Iterable[Any] = ()) -> list[aiosqlite.Row]:
        db = self._connection()
        async with self._lock:
            cursor = await db.execute(sql, tuple(params))
            rows = await cursor.fetchall()
            return list(rows)

    async def fetch_value(self, sql: str, params: Iterable[Any] = ()) -> Any:
        """Return the first column of the first row, or None."""
        row = await self.fetch_one(sql, params)
        return row[0] if row is not None else None
