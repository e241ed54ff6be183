"""PostgreSQL implementation of JobStore.

Uses asyncpg for async database access against the optimization_jobs table.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from optjobs.db.errors import ConflictError, ConnectionError, NotFoundError, StoreError
from optjobs.db.pool import PostgresPool
from optjobs.jobs.models import Job, JobCreate, JobStatus, JobType, utc_now
from optjobs.jobs.store import DEFAULT_PAGE_SIZE, JobStore
from optjobs.jobs.validation import check_required_fields
from optjobs.observability.logging import get_logger

logger = get_logger(__name__)

JOB_COLUMNS = """
    id, slow_query_id, agent_name, schema_name, job_type, description,
    sql, status, created_by, created_at, started_at, completed_at,
    error_message
"""


class PostgresJobStore(JobStore):
    """PostgreSQL implementation of JobStore.

    Every query carries an explicit timeout because the shared pool has
    none (it also serves long-running maintenance statements).
    Status transitions are checked inside the UPDATE itself, so a
    concurrent writer can never move a job backwards.
    """

    def __init__(self, pool: PostgresPool, query_timeout: float = 30.0) -> None:
        """Initialize with connection pool.

        Args:
            pool: PostgreSQL connection pool
            query_timeout: Per-query timeout in seconds
        """
        self._pool = pool
        self._timeout = query_timeout

    async def create(self, request: JobCreate) -> Job:
        """Persist a new pending job."""
        check_required_fields(request)
        job = Job.from_request(request)
        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"""
                    INSERT INTO optimization_jobs (
                        id, slow_query_id, agent_name, schema_name, job_type,
                        description, sql, status, created_by, created_at
                    ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10)
                    RETURNING {JOB_COLUMNS}
                    """,
                    job.id,
                    job.slow_query_id,
                    job.agent_name,
                    job.schema_name,
                    job.job_type.value,
                    job.description,
                    job.sql,
                    job.status.value,
                    job.created_by,
                    job.created_at,
                    timeout=self._timeout,
                )
                logger.debug("job_row_inserted", job_id=str(job.id))
                return self._row_to_job(row)
        except StoreError:
            raise
        except Exception as e:
            logger.error("postgres_create_job_error", job_id=str(job.id), error=str(e))
            raise ConnectionError(f"Failed to create job: {e}", cause=e) from e

    async def get(self, job_id: UUID) -> Job | None:
        """Get a job by ID."""
        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"SELECT {JOB_COLUMNS} FROM optimization_jobs WHERE id = $1",
                    job_id,
                    timeout=self._timeout,
                )
                if row:
                    return self._row_to_job(row)
                return None
        except StoreError:
            raise
        except Exception as e:
            logger.error("postgres_get_job_error", job_id=str(job_id), error=str(e))
            raise ConnectionError(f"Failed to get job: {e}", cause=e) from e

    async def list(
        self,
        *,
        agent_name: str | None = None,
        limit: int = DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> list[Job]:
        """List jobs newest first, optionally for one agent."""
        query = f"SELECT {JOB_COLUMNS} FROM optimization_jobs"
        params: list = []

        if agent_name is not None:
            params.append(agent_name)
            query += f" WHERE agent_name = ${len(params)}"

        params.extend([limit, offset])
        query += (
            " ORDER BY created_at DESC, id DESC"
            f" LIMIT ${len(params) - 1} OFFSET ${len(params)}"
        )

        try:
            async with self._pool.acquire() as conn:
                rows = await conn.fetch(query, *params, timeout=self._timeout)
                return [self._row_to_job(row) for row in rows]
        except StoreError:
            raise
        except Exception as e:
            logger.error("postgres_list_jobs_error", agent_name=agent_name, error=str(e))
            raise ConnectionError(f"Failed to list jobs: {e}", cause=e) from e

    async def update_status(
        self,
        job_id: UUID,
        status: JobStatus,
        *,
        started_at: datetime | None = None,
        completed_at: datetime | None = None,
        error_message: str | None = None,
    ) -> Job:
        """Apply one legal status transition.

        GREATEST() keeps created_at <= started_at <= completed_at even if
        the application clock steps backwards between updates.
        """
        sources = [s.value for s in JobStatus.sources_for(status)]
        if status == JobStatus.RUNNING:
            query = f"""
                UPDATE optimization_jobs
                SET status = $2, started_at = GREATEST($3, created_at)
                WHERE id = $1 AND status = ANY($4::text[])
                RETURNING {JOB_COLUMNS}
            """
            args: tuple[Any, ...] = (job_id, status.value, started_at or utc_now(), sources)
        else:
            query = f"""
                UPDATE optimization_jobs
                SET status = $2,
                    completed_at = GREATEST($3, COALESCE(started_at, created_at)),
                    error_message = $4
                WHERE id = $1 AND status = ANY($5::text[])
                RETURNING {JOB_COLUMNS}
            """
            args = (
                job_id,
                status.value,
                completed_at or utc_now(),
                error_message if status == JobStatus.FAILED else None,
                sources,
            )

        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(query, *args, timeout=self._timeout)
                if row is not None:
                    return self._row_to_job(row)

                current = await conn.fetchval(
                    "SELECT status FROM optimization_jobs WHERE id = $1",
                    job_id,
                    timeout=self._timeout,
                )
        except StoreError:
            raise
        except Exception as e:
            logger.error(
                "postgres_update_job_status_error",
                job_id=str(job_id),
                status=status.value,
                error=str(e),
            )
            raise ConnectionError(f"Failed to update job status: {e}", cause=e) from e

        if current is None:
            raise NotFoundError(f"Job {job_id} not found")
        raise ConflictError(f"Job {job_id} cannot move from {current} to {status.value}")

    def _row_to_job(self, row: Any) -> Job:
        """Convert a database row to a Job."""
        try:
            return Job(
                id=row["id"],
                slow_query_id=row["slow_query_id"],
                agent_name=row["agent_name"],
                schema_name=row["schema_name"],
                job_type=JobType(row["job_type"]),
                description=row["description"],
                sql=row["sql"],
                status=JobStatus(row["status"]),
                created_by=row["created_by"],
                created_at=row["created_at"],
                started_at=row["started_at"],
                completed_at=row["completed_at"],
                error_message=row["error_message"],
            )
        except (KeyError, ValueError) as e:
            raise StoreError(f"Malformed optimization_jobs row: {e}", cause=e) from e
