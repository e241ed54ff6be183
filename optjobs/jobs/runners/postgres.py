"""Run maintenance statements on a dedicated pooled connection."""

import asyncpg

from optjobs.db.pool import PostgresPool
from optjobs.jobs.errors import ExecutionError
from optjobs.jobs.runner import MaintenanceRunner
from optjobs.observability.logging import get_logger

logger = get_logger(__name__)


class PostgresMaintenanceRunner(MaintenanceRunner):
    """Runs a statement with no timeout and no surrounding transaction.

    CREATE INDEX CONCURRENTLY and REINDEX CONCURRENTLY are rejected by
    PostgreSQL inside a transaction block, so any open transaction on the
    acquired connection is committed first. The server-side
    statement_timeout is cleared for the session; asyncpg resets session
    state when the connection returns to the pool.
    """

    def __init__(self, pool: PostgresPool) -> None:
        """Initialize with connection pool.

        Args:
            pool: Pool created without a client-side command timeout
        """
        self._pool = pool

    async def run(self, sql: str) -> None:
        async with self._pool.acquire() as conn:
            logger.debug("maintenance_connection_acquired", **self._pool.usage())
            try:
                await conn.execute("SET statement_timeout = 0")
                if conn.is_in_transaction():
                    logger.warning("maintenance_connection_in_transaction")
                    await conn.execute("COMMIT")
                await conn.execute(sql, timeout=None)
            except asyncpg.PostgresError as e:
                raise ExecutionError(str(e), cause=e) from e
