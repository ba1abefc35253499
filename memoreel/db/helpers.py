"""
Query helpers used by the repositories.

Each helper borrows a pooled connection, runs one parameterized statement
and turns any psycopg.Error into DatabaseError (original error chained as
__cause__) so callers can inspect SQLSTATE and constraint details.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import psycopg

from memoreel.db.pool import DatabasePoolManager
from memoreel.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parent / "schema.sql"


class DatabaseError(Exception):
    """Unclassified storage failure."""

    def __init__(self, message: str, operation: str = "unknown"):
        super().__init__(message)
        self.operation = operation

    @property
    def sqlstate(self) -> str | None:
        return getattr(self.__cause__, "sqlstate", None)


@contextmanager
def _storage_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except psycopg.Error as e:
        logger.error("Database query failed", operation=operation, sqlstate=e.sqlstate, error=str(e))
        raise DatabaseError(f"{operation} failed: {e}", operation=operation) from e


async def fetch_one(db: DatabasePoolManager, query, params: tuple = ()) -> dict[str, Any] | None:
    """
    Run a query and return its first row, or None when it matched nothing.

    Args:
        db: Pool to borrow the connection from
        query: str or psycopg.sql.Composable with %s placeholders
        params: Values for the placeholders
    """
    with _storage_errors("fetch_one"):
        async with db.connection() as conn:
            cursor = await conn.execute(query, params)
            return await cursor.fetchone()


async def fetch_all(db: DatabasePoolManager, query, params: tuple = ()) -> list[dict[str, Any]]:
    with _storage_errors("fetch_all"):
        async with db.connection() as conn:
            cursor = await conn.execute(query, params)
            return await cursor.fetchall()


async def execute_query(db: DatabasePoolManager, query, params: tuple = ()) -> int:
    """Run a write statement and return the affected row count."""
    with _storage_errors("execute"):
        async with db.connection() as conn:
            cursor = await conn.execute(query, params)
            return cursor.rowcount


async def apply_schema(db: DatabasePoolManager) -> None:
    """Create the users, videos and reels tables and indexes if missing."""
    ddl = SCHEMA_PATH.read_text(encoding="utf-8")

    with _storage_errors("apply_schema"):
        async with db.transaction() as conn:
            await conn.execute(ddl)

    logger.info("Database schema applied", path=str(SCHEMA_PATH))
