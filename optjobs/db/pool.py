"""asyncpg pool shared by the job store and running maintenance statements.

Job bookkeeping queries are short and carry their own timeout; maintenance
statements hold a connection for as long as the build takes. Both draw from
the one pool owned by the job service, so its occupancy is reported when a
job starts.
"""

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import asyncpg

from optjobs.db.errors import ConnectionError
from optjobs.observability.logging import get_logger

logger = get_logger(__name__)

DATABASE_URL_ENVS = ("OPTJOBS_DATABASE_URL", "DATABASE_URL")


def resolve_dsn() -> str:
    """Database DSN from the environment.

    OPTJOBS_DATABASE_URL, then DATABASE_URL, then a DSN assembled from the
    libpq-style POSTGRES_* variables.
    """
    for name in DATABASE_URL_ENVS:
        dsn = os.environ.get(name)
        if dsn:
            return dsn

    return "postgresql://{user}:{password}@{host}:{port}/{db}".format(
        user=os.environ.get("POSTGRES_USER", "optjobs"),
        password=os.environ.get("POSTGRES_PASSWORD", "optjobs"),
        host=os.environ.get("POSTGRES_HOST", "localhost"),
        port=os.environ.get("POSTGRES_PORT", "5432"),
        db=os.environ.get("POSTGRES_DB", "optjobs"),
    )


class PostgresPool:
    """Lazily connected asyncpg pool without a client-side command timeout.

    Usage:
        pool = PostgresPool(dsn="postgresql://...")
        await pool.connect()
        try:
            async with pool.acquire() as conn:
                await conn.fetchval("SELECT 1", timeout=5)
        finally:
            await pool.close()
    """

    def __init__(
        self,
        dsn: str | None = None,
        min_size: int = 2,
        max_size: int = 10,
        max_inactive_connection_lifetime: float = 300.0,
        command_timeout: float | None = None,
    ) -> None:
        """Initialize pool configuration.

        Args:
            dsn: Connection string; resolve_dsn() when omitted
            min_size: Connections kept open
            max_size: Upper bound shared by store queries and running jobs
            max_inactive_connection_lifetime: Idle seconds before a connection is closed
            command_timeout: Default per-query timeout; None leaves statements unbounded
        """
        self._dsn = dsn or resolve_dsn()
        self._min_size = min_size
        self._max_size = max_size
        self._max_inactive_connection_lifetime = max_inactive_connection_lifetime
        self._command_timeout = command_timeout
        self._pool: asyncpg.Pool | None = None

    @property
    def dsn(self) -> str:
        return self._dsn

    @property
    def is_connected(self) -> bool:
        return self._pool is not None

    def usage(self) -> dict[str, int]:
        """Connection counts for log context: open, idle and busy."""
        if self._pool is None:
            return {"pool_size": 0, "pool_idle": 0, "pool_busy": 0}
        size = self._pool.get_size()
        idle = self._pool.get_idle_size()
        return {"pool_size": size, "pool_idle": idle, "pool_busy": size - idle}

    async def connect(self) -> None:
        """Create the pool; a no-op when already connected.

        Raises:
            ConnectionError: If the server cannot be reached
        """
        if self._pool is not None:
            return

        try:
            self._pool = await asyncpg.create_pool(
                dsn=self._dsn,
                min_size=self._min_size,
                max_size=self._max_size,
                max_inactive_connection_lifetime=self._max_inactive_connection_lifetime,
                command_timeout=self._command_timeout,
            )
        except Exception as e:
            logger.error("postgres_pool_connection_failed", dsn=self._dsn, error=str(e))
            raise ConnectionError(f"Failed to connect to PostgreSQL: {e}", cause=e) from e

        logger.info(
            "postgres_pool_connected",
            min_size=self._min_size,
            max_size=self._max_size,
            command_timeout=self._command_timeout,
        )

    async def close(self) -> None:
        """Close every connection; safe to call twice."""
        if self._pool is None:
            return
        pool, self._pool = self._pool, None
        await pool.close()
        logger.info("postgres_pool_closed")

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[asyncpg.Connection]:
        """Borrow a connection, connecting first if needed.

        The connection is returned on every exit path. Driver errors raised
        inside the block surface as ConnectionError.
        """
        if self._pool is None:
            await self.connect()

        try:
            async with self._pool.acquire() as connection:
                yield connection
        except asyncpg.PostgresError as e:
            logger.error("postgres_connection_error", error=str(e))
            raise ConnectionError(f"PostgreSQL error: {e}", cause=e) from e

    async def health_check(self) -> bool:
        """True when connected and `SELECT 1` answers within five seconds."""
        if self._pool is None:
            return False

        try:
            async with self._pool.acquire() as conn:
                await conn.fetchval("SELECT 1", timeout=5)
        except Exception as e:
            logger.warning("postgres_health_check_failed", error=str(e))
            return False
        return True
