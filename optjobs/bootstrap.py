"""Composition root for the job service.

Builds the store, runner, executor and (for the postgres backend) the
connection pool from configuration. Call once at process start-up and
pass the returned service to the HTTP layer, scripts and tests.

Example usage:

    from optjobs.bootstrap import create_job_service

    service = await create_job_service()
    try:
        job = await service.create_job(JobCreate(...))
    finally:
        await service.close()
"""

from optjobs.config import Settings, get_settings
from optjobs.db.pool import PostgresPool
from optjobs.jobs.executor import JobExecutor
from optjobs.jobs.runner import MaintenanceRunner
from optjobs.jobs.runners import InMemoryMaintenanceRunner, PostgresMaintenanceRunner
from optjobs.jobs.service import OptimizationJobService
from optjobs.jobs.store import JobStore
from optjobs.jobs.stores import InMemoryJobStore, PostgresJobStore
from optjobs.observability.logging import get_logger, setup_logging

logger = get_logger(__name__)


async def create_job_service(
    settings: Settings | None = None,
    *,
    configure_logging: bool = True,
) -> OptimizationJobService:
    """Create a ready-to-use OptimizationJobService.

    Args:
        settings: Configuration; loaded with get_settings() when omitted
        configure_logging: Apply observability.logging settings to structlog

    Returns:
        Service that owns its pool; call close() on shutdown

    Raises:
        ConnectionError: If the postgres backend cannot connect
    """
    settings = settings or get_settings()

    if configure_logging:
        log_config = settings.observability.logging
        setup_logging(
            level=log_config.level,
            format=log_config.format,
            redact_secrets=log_config.redact_secrets,
        )

    jobs_config = settings.storage.jobs
    pool: PostgresPool | None = None
    store: JobStore
    runner: MaintenanceRunner

    if jobs_config.backend == "postgres":
        pool = PostgresPool(
            dsn=jobs_config.connection_url,
            min_size=jobs_config.min_pool_size,
            max_size=jobs_config.max_pool_size,
            max_inactive_connection_lifetime=jobs_config.max_inactive_connection_lifetime,
            command_timeout=None,
        )
        await pool.connect()
        store = PostgresJobStore(pool, query_timeout=jobs_config.query_timeout)
        runner = PostgresMaintenanceRunner(pool)
    else:
        store = InMemoryJobStore()
        runner = InMemoryMaintenanceRunner()

    executor = JobExecutor(
        store,
        runner,
        max_concurrent=settings.execution.max_concurrent_jobs,
    )

    logger.info(
        "job_service_bootstrapped",
        backend=jobs_config.backend,
        max_concurrent_jobs=settings.execution.max_concurrent_jobs,
        **(pool.usage() if pool is not None else {}),
    )

    return OptimizationJobService(
        store,
        executor,
        pool=pool,
        shutdown_timeout=settings.execution.shutdown_timeout,
    )
