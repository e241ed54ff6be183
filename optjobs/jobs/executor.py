"""Detached execution of maintenance jobs.

Each submitted job runs in its own asyncio task. The task reports back
only by updating the job record; nothing it raises reaches the code that
submitted the job.
"""

import asyncio
import time
from uuid import UUID

import structlog

from optjobs.jobs.models import Job, JobStatus, utc_now
from optjobs.jobs.runner import MaintenanceRunner
from optjobs.jobs.store import JobStore
from optjobs.observability.logging import get_logger
from optjobs.observability.metrics import JOB_DURATION, JOB_EXECUTIONS, JOBS_IN_FLIGHT

logger = get_logger(__name__)


class ExecutorClosedError(RuntimeError):
    """Raised when a job is submitted after shutdown()."""


class JobExecutor:
    """Runs each submitted job exactly once, off the caller's path.

    Lifecycle per job:
    1. pending -> running, started_at recorded
    2. the runner executes the stored SQL on its own connection
    3. running -> completed, or running -> failed with error_message

    There is no queue and no retry. Concurrency is unbounded unless
    `max_concurrent` is given; jobs waiting for a slot stay pending.
    """

    def __init__(
        self,
        store: JobStore,
        runner: MaintenanceRunner,
        max_concurrent: int | None = None,
    ) -> None:
        """Initialize executor.

        Args:
            store: Store the executor reports job progress to
            runner: Executes maintenance statements
            max_concurrent: Optional cap on simultaneously running statements
        """
        self._store = store
        self._runner = runner
        self._semaphore = asyncio.Semaphore(max_concurrent) if max_concurrent else None
        self._tasks: set[asyncio.Task[None]] = set()
        self._closed = False

    def submit(self, job: Job) -> asyncio.Task[None]:
        """Schedule the job and return without waiting for it.

        Must be called from inside a running event loop.
        """
        if self._closed:
            raise ExecutorClosedError("Executor is shut down")

        task = asyncio.create_task(self._execute(job.id), name=f"optjob-{job.id}")
        self._tasks.add(task)
        JOBS_IN_FLIGHT.inc()
        task.add_done_callback(self._on_task_done)
        logger.debug("job_scheduled", job_id=str(job.id))
        return task

    @property
    def in_flight(self) -> int:
        """Number of jobs scheduled and not yet finished."""
        return len(self._tasks)

    @property
    def closed(self) -> bool:
        return self._closed

    async def join(self, timeout: float | None = None) -> bool:
        """Wait for every in-flight job to finish.

        Jobs submitted while waiting are waited for too, within the same
        overall `timeout`.

        Returns:
            True if all jobs finished, False if the timeout expired first
        """
        loop = asyncio.get_running_loop()
        deadline = None if timeout is None else loop.time() + timeout
        while self._tasks:
            remaining = None if deadline is None else deadline - loop.time()
            if remaining is not None and remaining <= 0:
                return False
            _, not_done = await asyncio.wait(set(self._tasks), timeout=remaining)
            if not_done:
                return False
        return True

    async def shutdown(self, timeout: float | None = None) -> None:
        """Stop accepting jobs and wait for running ones.

        Jobs still running after `timeout` are left to finish on their own;
        there is no cancellation.
        """
        self._closed = True
        finished = await self.join(timeout)
        if not finished:
            logger.warning("executor_shutdown_timeout", in_flight=self.in_flight)

    def _on_task_done(self, task: asyncio.Task[None]) -> None:
        self._tasks.discard(task)
        JOBS_IN_FLIGHT.dec()
        if task.cancelled():
            logger.warning("job_task_cancelled", task=task.get_name())
            return
        exc = task.exception()
        if exc is not None:
            logger.error("job_task_crashed", task=task.get_name(), error=str(exc))

    async def _execute(self, job_id: UUID) -> None:
        structlog.contextvars.bind_contextvars(job_id=str(job_id))
        if self._semaphore is None:
            await self._run_job(job_id)
            return
        async with self._semaphore:
            await self._run_job(job_id)

    async def _run_job(self, job_id: UUID) -> None:
        try:
            job = await self._store.update_status(
                job_id, JobStatus.RUNNING, started_at=utc_now()
            )
        except Exception as e:
            logger.error("job_start_failed", error=str(e))
            return

        logger.info("job_started", job_type=job.job_type.value, label=job.label)

        started = time.monotonic()
        try:
            await self._runner.run(job.sql)
        except Exception as e:
            elapsed = time.monotonic() - started
            message = str(e) or type(e).__name__
            logger.error("job_failed", error=message, duration_s=round(elapsed, 3))
            await self._finish(job, JobStatus.FAILED, elapsed, error_message=message)
            return

        elapsed = time.monotonic() - started
        logger.info("job_completed", duration_s=round(elapsed, 3))
        await self._finish(job, JobStatus.COMPLETED, elapsed)

    async def _finish(
        self,
        job: Job,
        status: JobStatus,
        elapsed: float,
        error_message: str | None = None,
    ) -> None:
        JOB_EXECUTIONS.labels(job_type=job.job_type.value, status=status.value).inc()
        JOB_DURATION.labels(job_type=job.job_type.value).observe(elapsed)
        try:
            await self._store.update_status(
                job.id,
                status,
                completed_at=utc_now(),
                error_message=error_message,
            )
        except Exception as e:
            # The statement already ran; the record stays "running"
            logger.error(
                "job_status_update_failed",
                status=status.value,
                error=str(e),
            )
