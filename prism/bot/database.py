"""
Database connection management.

Two interchangeable backends implement the same DatabaseContext interface:
SQLite through aiosqlite and PostgreSQL through asyncpg. SQL is written once
with ``?`` placeholders; the PostgreSQL context rewrites them to ``$n``.
"""

import itertools
import re
import sqlite3
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import aiosqlite
import asyncpg

from prism.bot.config import Config
from prism.utils.errors import DatabaseError, DuplicateEntryError
from prism.utils.logger import get_logger

logger = get_logger("Database")

SQLITE_SCHEMA = [
    """
    CREATE TABLE IF NOT EXISTS quote (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        guild_id VARCHAR(32) NOT NULL,
        author_id VARCHAR(32) NOT NULL,
        channel_id VARCHAR(32) NOT NULL,
        message_id VARCHAR(32) NOT NULL UNIQUE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS ignored_user (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id VARCHAR(32) NOT NULL UNIQUE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS topic_category (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        guild_id VARCHAR(32) NOT NULL,
        category_id VARCHAR(32) NOT NULL UNIQUE,
        primary_channel_id VARCHAR(32) NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS topic (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        guild_id VARCHAR(32) NOT NULL,
        name VARCHAR(100) NOT NULL,
        topic_category_id VARCHAR(32) NOT NULL,
        UNIQUE (guild_id, name)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS topic_role (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        role_id VARCHAR(32) NOT NULL UNIQUE,
        topic_id INTEGER NOT NULL
    )
    """,
]

POSTGRES_SCHEMA = [
    statement.replace("INTEGER PRIMARY KEY AUTOINCREMENT", "BIGSERIAL PRIMARY KEY")
    .replace("topic_id INTEGER", "topic_id BIGINT")
    for statement in SQLITE_SCHEMA
]


class DatabaseContext(ABC):
    """
    Minimal row-store interface used by the repositories.

    Rows are returned as plain dicts keyed by column name.
    """

    backend = "abstract"

    @abstractmethod
    async def connect(self) -> None:
        """Open the connection and create missing tables."""

    @abstractmethod
    async def close(self) -> None:
        """Close the connection."""

    @abstractmethod
    def is_connected(self) -> bool:
        """Check if the database is connected."""

    @abstractmethod
    async def query_all(self, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        """Run a query and return every row."""

    @abstractmethod
    async def query_one(self, sql: str, params: Sequence[Any] = ()) -> Optional[Dict[str, Any]]:
        """Run a query and return the first row, or None."""

    @abstractmethod
    async def execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        """
        Run a statement.

        Returns:
            The new row id for an INSERT, the affected row count otherwise
        """


def _is_insert(sql: str) -> bool:
    return sql.lstrip().upper().startswith("INSERT")


class SqliteDbContext(DatabaseContext):
    """SQLite backend using aiosqlite."""

    backend = "sqlite"

    def __init__(self, path: str):
        self.path = path
        self._conn: Optional[aiosqlite.Connection] = None

    async def connect(self) -> None:
        if self.path != ":memory:":
            Path(self.path).parent.mkdir(parents=True, exist_ok=True)

        try:
            # Autocommit: every statement is its own transaction
            self._conn = await aiosqlite.connect(self.path, isolation_level=None)
            self._conn.row_factory = aiosqlite.Row
            for statement in SQLITE_SCHEMA:
                await self._conn.execute(statement)
        except sqlite3.Error as e:
            raise DatabaseError(f"Failed to open SQLite database {self.path}: {e}") from e

        logger.success(f"SQLite database ready: {self.path}")

    async def close(self) -> None:
        if self._conn is not None:
            await self._conn.close()
            self._conn = None
            logger.info("SQLite connection closed")

    def is_connected(self) -> bool:
        return self._conn is not None

    def _require(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise DatabaseError("Database not connected")
        return self._conn

    async def query_all(self, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        conn = self._require()
        try:
            async with conn.execute(sql, tuple(params)) as cursor:
                rows = await cursor.fetchall()
        except sqlite3.Error as e:
            raise DatabaseError(f"Query failed: {e}") from e
        return [dict(row) for row in rows]

    async def query_one(self, sql: str, params: Sequence[Any] = ()) -> Optional[Dict[str, Any]]:
        conn = self._require()
        try:
            async with conn.execute(sql, tuple(params)) as cursor:
                row = await cursor.fetchone()
        except sqlite3.Error as e:
            raise DatabaseError(f"Query failed: {e}") from e
        return dict(row) if row is not None else None

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        conn = self._require()
        try:
            async with conn.execute(sql, tuple(params)) as cursor:
                if _is_insert(sql):
                    return cursor.lastrowid
                return cursor.rowcount
        except sqlite3.IntegrityError as e:
            if "UNIQUE" in str(e).upper():
                raise DuplicateEntryError(str(e)) from e
            raise DatabaseError(f"Statement failed: {e}") from e
        except sqlite3.Error as e:
            raise DatabaseError(f"Statement failed: {e}") from e


class PostgresDbContext(DatabaseContext):
    """PostgreSQL backend using an asyncpg connection pool."""

    backend = "postgres"

    def __init__(self, dsn: str):
        self.dsn = dsn
        self._pool: Optional[asyncpg.Pool] = None

    async def connect(self) -> None:
        try:
            self._pool = await asyncpg.create_pool(
                self.dsn,
                min_size=1,
                max_size=10,
                command_timeout=60,
            )
            async with self._pool.acquire() as conn:
                for statement in POSTGRES_SCHEMA:
                    await conn.execute(statement)
        except (asyncpg.PostgresError, OSError) as e:
            raise DatabaseError(f"Failed to connect to database: {e}") from e

        logger.success("PostgreSQL database connected successfully")

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
            logger.info("PostgreSQL connection pool closed")

    def is_connected(self) -> bool:
        return self._pool is not None

    def _require(self) -> asyncpg.Pool:
        if self._pool is None:
            raise DatabaseError("Database not connected")
        return self._pool

    @staticmethod
    def to_postgres_placeholders(sql: str) -> str:
        """Rewrite ``?`` placeholders to asyncpg's ``$1, $2, ...``."""
        counter = itertools.count(1)
        return re.sub(r"\?", lambda _: f"${next(counter)}", sql)

    async def query_all(self, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        pool = self._require()
        try:
            async with pool.acquire() as conn:
                rows = await conn.fetch(self.to_postgres_placeholders(sql), *params)
        except (asyncpg.PostgresError, OSError) as e:
            raise DatabaseError(f"Query failed: {e}") from e
        return [dict(row) for row in rows]

    async def query_one(self, sql: str, params: Sequence[Any] = ()) -> Optional[Dict[str, Any]]:
        pool = self._require()
        try:
            async with pool.acquire() as conn:
                row = await conn.fetchrow(self.to_postgres_placeholders(sql), *params)
        except (asyncpg.PostgresError, OSError) as e:
            raise DatabaseError(f"Query failed: {e}") from e
        return dict(row) if row is not None else None

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        pool = self._require()
        statement = self.to_postgres_placeholders(sql)
        try:
            async with pool.acquire() as conn:
                if _is_insert(sql):
                    return await conn.fetchval(f"{statement} RETURNING id", *params)
                # Status is typically "DELETE N" / "UPDATE N"
                status = await conn.execute(statement, *params)
        except asyncpg.UniqueViolationError as e:
            raise DuplicateEntryError(str(e)) from e
        except (asyncpg.PostgresError, OSError) as e:
            raise DatabaseError(f"Statement failed: {e}") from e

        last = status.split()[-1] if status else ""
        return int(last) if last.isdigit() else 0


def create_database(settings: Config) -> DatabaseContext:
    """
    Build the database context selected by configuration.

    Args:
        settings: Bot configuration

    Returns:
        An unconnected DatabaseContext
    """
    if settings.DATABASE_BACKEND == "postgres":
        return PostgresDbContext(settings.DATABASE_URL)
    if settings.DATABASE_BACKEND == "sqlite":
        return SqliteDbContext(settings.SQLITE_PATH)
    raise ValueError(f"Unknown database backend: {settings.DATABASE_BACKEND}")


# Process-wide database instance
_database: Optional[DatabaseContext] = None


async def init_database(settings: Config) -> DatabaseContext:
    """Create and connect the process-wide database."""
    global _database

    database = create_database(settings)
    logger.info(f"Connecting to {database.backend} database...")
    await database.connect()
    _database = database
    return database


async def close_database() -> None:
    """Close the process-wide database."""
    global _database

    if _database is not None:
        await _database.close()
        _database = None


def is_connected() -> bool:
    """Check if database is connected."""
    return _database is not None and _database.is_connected()
