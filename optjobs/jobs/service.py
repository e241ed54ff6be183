"""Optimization job service.

The entry point the HTTP layer talks to: submits maintenance jobs and
answers status queries. Construct one instance at start-up (see
optjobs.bootstrap) and share it.
"""

import asyncio
from uuid import UUID

from optjobs.db.errors import ValidationError
from optjobs.db.pool import PostgresPool
from optjobs.jobs.executor import ExecutorClosedError, JobExecutor
from optjobs.jobs.models import Job, JobCreate
from optjobs.jobs.store import DEFAULT_PAGE_SIZE, JobStore
from optjobs.jobs.validation import check_required_fields, validate_job_sql
from optjobs.observability.logging import get_logger
from optjobs.observability.metrics import JOBS_CREATED, JOBS_REJECTED

logger = get_logger(__name__)


class OptimizationJobService:
    """Creates maintenance jobs and exposes their progress.

    Creation returns as soon as the pending record is stored; execution
    happens in the executor's background task and is observable only by
    polling get_job / list_jobs.
    """

    def __init__(
        self,
        store: JobStore,
        executor: JobExecutor,
        pool: PostgresPool | None = None,
        shutdown_timeout: float | None = None,
    ) -> None:
        """Initialize service.

        Args:
            store: Durable job records
            executor: Runs jobs in the background
            pool: Connection pool owned by this service, closed by close()
            shutdown_timeout: Seconds close() waits for in-flight jobs
        """
        self._store = store
        self._executor = executor
        self._pool = pool
        self._shutdown_timeout = shutdown_timeout
        self._closed = False
        self._creating = 0
        self._creations_done = asyncio.Event()
        self._creations_done.set()

    @property
    def executor(self) -> JobExecutor:
        return self._executor

    async def create_job(self, request: JobCreate) -> Job:
        """Validate, persist and schedule a maintenance job.

        Raises:
            ValidationError: Missing fields or SQL outside the whitelist.
                No record is created.
            ExecutorClosedError: The service is closing. No record is created.
            ConnectionError: The pending record could not be stored
        """
        if self._closed or self._executor.closed:
            raise ExecutorClosedError("Job service is closed")

        try:
            check_required_fields(request)
            validate_job_sql(request.sql)
        except ValidationError as e:
            JOBS_REJECTED.labels(reason="missing_fields" if request.missing_fields() else "sql").inc()
            logger.warning("job_rejected", agent_name=request.agent_name, error=str(e))
            raise

        self._creating += 1
        self._creations_done.clear()
        try:
            job = await self._store.create(request)
            JOBS_CREATED.labels(job_type=job.job_type.value).inc()
            logger.info(
                "job_created",
                job_id=str(job.id),
                job_type=job.job_type.value,
                agent_name=job.agent_name,
                schema_name=job.schema_name,
            )
            self._executor.submit(job)
        finally:
            self._creating -= 1
            if self._creating == 0:
                self._creations_done.set()
        return job

    async def list_jobs(
        self,
        *,
        agent_name: str | None = None,
        limit: int = DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> list[Job]:
        """List jobs newest first.

        Raises:
            ValidationError: If limit < 1 or offset < 0
        """
        if limit < 1:
            raise ValidationError(f"limit must be positive, got {limit}")
        if offset < 0:
            raise ValidationError(f"offset must not be negative, got {offset}")
        return await self._store.list(agent_name=agent_name, limit=limit, offset=offset)

    async def get_job(self, job_id: UUID | str) -> Job | None:
        """Get a job by ID; None when it does not exist."""
        if isinstance(job_id, str):
            try:
                job_id = UUID(job_id)
            except ValueError:
                return None
        return await self._store.get(job_id)

    async def close(self) -> None:
        """Stop accepting jobs, wait for in-flight ones, then release the owned pool.

        Creations already past the closed check finish storing and
        scheduling their job before the executor shuts down.
        """
        self._closed = True
        await self._creations_done.wait()
        await self._executor.shutdown(self._shutdown_timeout)
        if self._pool is not None and self._pool.is_connected:
            await self._pool.close()
        logger.info("job_service_closed")
