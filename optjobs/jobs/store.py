"""JobStore abstract interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from uuid import UUID

from optjobs.jobs.models import Job, JobCreate, JobStatus

DEFAULT_PAGE_SIZE = 50


class JobStore(ABC):
    """Abstract interface for durable job records.

    Records are created pending, moved forward by the executor and never
    deleted. Only status, started_at, completed_at and error_message change
    after creation.
    """

    @abstractmethod
    async def create(self, request: JobCreate) -> Job:
        """Persist a new pending job.

        Raises:
            ValidationError: If agent_name, schema_name or sql is missing.
                Nothing is written in that case.
        """
        pass

    @abstractmethod
    async def get(self, job_id: UUID) -> Job | None:
        """Get a job by ID, None if it does not exist."""
        pass

    @abstractmethod
    async def list(
        self,
        *,
        agent_name: str | None = None,
        limit: int = DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> list[Job]:
        """List jobs newest first, optionally for one agent."""
        pass

    @abstractmethod
    async def update_status(
        self,
        job_id: UUID,
        status: JobStatus,
        *,
        started_at: datetime | None = None,
        completed_at: datetime | None = None,
        error_message: str | None = None,
    ) -> Job:
        """Apply one legal status transition and return the updated job.

        Raises:
            NotFoundError: If the job does not exist
            ConflictError: If the job's current status cannot move to `status`
        """
        pass
