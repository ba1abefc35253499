"""
PostgreSQL connection pool for memoreel, built on psycopg_pool.

Every pooled connection returns rows as dicts, runs in autocommit, reports
times in UTC and hands jsonb columns back as raw bytes (see RawJsonbLoader).
"""

import asyncio
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

import psycopg
from psycopg import sql
from psycopg.adapt import Loader
from psycopg.rows import dict_row
from psycopg_pool import AsyncConnectionPool

from memoreel.config import Settings
from memoreel.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

CLOSE_TIMEOUT_S = 30.0
UTILIZATION_WARN_PERCENT = 80
UTILIZATION_UNHEALTHY_PERCENT = 90


class RawJsonbLoader(Loader):
    """Hand jsonb columns back as the bytes Postgres sent, undecoded."""

    def load(self, data) -> bytes:
        return bytes(data)


class DatabasePoolManager:
    """
    Owns the application's AsyncConnectionPool.

    Built by create_app() from the explicit Settings object, opened in the
    lifespan startup and shared by every repository through app.state.
    The manager cannot be reopened once closed.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.pool: AsyncConnectionPool | None = None
        self._initialized = False
        self._closed = False

    async def initialize(self) -> None:
        if self._initialized:
            logger.warning("Database pool already open")
            return
        if self._closed:
            raise RuntimeError("Cannot reinitialize closed pool")

        limits = self.settings.get_db_pool_config()
        logger.info(
            "Opening database pool",
            environment=self.settings.environment,
            min_size=limits["min_size"],
            max_size=limits["max_size"],
        )

        self.pool = AsyncConnectionPool(
            conninfo=self.settings.build_dsn(),
            open=False,
            check=AsyncConnectionPool.check_connection,
            configure=self._configure_connection,
            **limits,
        )

        try:
            await self.pool.open()
            await self.pool.wait()
            self._initialized = True
            await self._ping()
        except Exception as e:
            logger.error("Database pool failed to open", error=str(e))
            await self._discard_pool()
            raise RuntimeError(f"Database pool initialization failed: {e}") from e

        logger.info("Database pool ready")

    async def _discard_pool(self) -> None:
        self._initialized = False
        pool, self.pool = self.pool, None
        if pool is None:
            return
        try:
            await pool.close()
        except Exception as e:
            logger.warning("Error closing half-open pool", error=str(e))

    async def _configure_connection(self, conn: psycopg.AsyncConnection) -> None:
        conn.row_factory = dict_row
        # decode_recipients() works on the stored bytes
        conn.adapters.register_loader("jsonb", RawJsonbLoader)
        await conn.set_autocommit(True)

        for name, value in (
            ("application_name", f"memoreel-{self.settings.environment}"),
            ("timezone", "UTC"),
            ("statement_timeout", self.settings.DB_STATEMENT_TIMEOUT),
        ):
            # SET does not accept bind parameters
            await conn.execute(
                sql.SQL("SET {} = {}").format(sql.Identifier(name), sql.Literal(value))
            )

    async def _ping(self) -> None:
        async with self.connection() as conn:
            cursor = await conn.execute("SELECT 1 AS ok")
            row = await cursor.fetchone()
        if not row or row["ok"] != 1:
            raise RuntimeError(f"Unexpected ping result: {row}")

    async def close(self) -> None:
        if not self._initialized or self._closed:
            return

        logger.info("Closing database pool")
        try:
            await asyncio.wait_for(self.pool.close(), timeout=CLOSE_TIMEOUT_S)
        except TimeoutError:
            logger.warning("Database pool close timed out", timeout_s=CLOSE_TIMEOUT_S)
        finally:
            self._initialized = False
            self._closed = True

    @asynccontextmanager
    async def connection(self) -> AsyncGenerator[psycopg.AsyncConnection, None]:
        """
        Borrow a pooled connection for the duration of the block.

        Usage:
            async with db.connection() as conn:
                await conn.execute("SELECT 1")
        """
        if self._closed:
            raise RuntimeError("Database pool is closed")
        if not self._initialized:
            raise RuntimeError("Database pool not initialized. Call initialize() first.")

        async with self.pool.connection() as conn:
            yield conn

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[psycopg.AsyncConnection, None]:
        """Borrow a connection inside a transaction: commit on success, roll back on error."""
        async with self.connection() as conn:
            async with conn.transaction():
                yield conn

    async def health_check(self) -> dict[str, Any]:
        """
        Ping the database and summarise pool usage for /readyz.

        Returns:
            dict with "healthy" plus either "error" or "connection_time_ms",
            "pool_stats" and, when usage is high, "warnings"
        """
        if self._closed:
            return {"healthy": False, "error": "Pool is closed"}
        if not self._initialized:
            return {"healthy": False, "error": "Pool not initialized"}

        started = time.perf_counter()
        try:
            await self._ping()
        except Exception as e:
            logger.error("Database health check failed", error=str(e))
            return {"healthy": False, "error": str(e), "error_type": type(e).__name__}
        elapsed_ms = (time.perf_counter() - started) * 1000

        stats = self.pool.get_stats()
        size = stats.get("pool_size", 0)
        available = stats.get("pool_available", 0)
        waiting = stats.get("requests_waiting", 0)
        utilization = (size - available) / size * 100 if size else 0.0

        warnings = []
        if utilization > UTILIZATION_WARN_PERCENT:
            warnings.append(f"High pool utilization: {utilization:.1f}%")
        if waiting:
            warnings.append(f"Requests waiting for connections: {waiting}")

        health = {
            "healthy": utilization < UTILIZATION_UNHEALTHY_PERCENT,
            "connection_time_ms": round(elapsed_ms, 2),
            "pool_stats": {
                "pool_size": size,
                "pool_available": available,
                "pool_utilization_percent": round(utilization, 2),
                "requests_waiting": waiting,
            },
        }
        if warnings:
            health["warnings"] = warnings
        return health
