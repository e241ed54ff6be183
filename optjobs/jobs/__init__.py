"""Maintenance jobs: models, validation, storage and execution.

Usage:
    from optjobs.jobs import JobCreate, OptimizationJobService

    job = await service.create_job(JobCreate(
        agent_name="acme",
        schema_name="public",
        sql="CREATE INDEX CONCURRENTLY idx_orders_customer ON orders(customer_id)",
    ))
    later = await service.get_job(job.id)
"""

from optjobs.jobs.errors import ExecutionError
from optjobs.jobs.executor import ExecutorClosedError, JobExecutor
from optjobs.jobs.models import Job, JobCreate, JobStatus, JobType
from optjobs.jobs.runner import MaintenanceRunner
from optjobs.jobs.service import OptimizationJobService
from optjobs.jobs.store import JobStore
from optjobs.jobs.validation import ALLOWED_STATEMENT_PREFIXES, validate_job_sql

__all__ = [
    "ALLOWED_STATEMENT_PREFIXES",
    "ExecutionError",
    "ExecutorClosedError",
    "Job",
    "JobCreate",
    "JobExecutor",
    "JobStatus",
    "JobStore",
    "JobType",
    "MaintenanceRunner",
    "OptimizationJobService",
    "validate_job_sql",
]
