"""In-memory implementation of JobStore."""

import asyncio
from datetime import datetime
from itertools import count
from uuid import UUID

from optjobs.db.errors import NotFoundError
from optjobs.jobs.models import Job, JobCreate, JobStatus, not_before, utc_now
from optjobs.jobs.store import DEFAULT_PAGE_SIZE, JobStore
from optjobs.jobs.validation import check_required_fields, check_transition


class InMemoryJobStore(JobStore):
    """In-memory implementation of JobStore for testing and development.

    Uses dict storage with linear scan for listing. Status updates are
    serialized with an asyncio.Lock so the read-check-write of a
    transition is atomic within the event loop.
    Not suitable for production use.
    """

    def __init__(self) -> None:
        """Initialize empty storage."""
        self._jobs: dict[UUID, Job] = {}
        self._sequence: dict[UUID, int] = {}
        self._counter = count()
        self._lock = asyncio.Lock()

    async def create(self, request: JobCreate) -> Job:
        """Persist a new pending job."""
        check_required_fields(request)
        job = Job.from_request(request)
        self._jobs[job.id] = job
        self._sequence[job.id] = next(self._counter)
        return job

    async def get(self, job_id: UUID) -> Job | None:
        """Get a job by ID."""
        return self._jobs.get(job_id)

    async def list(
        self,
        *,
        agent_name: str | None = None,
        limit: int = DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> list[Job]:
        """List jobs newest first, optionally for one agent."""
        results = [
            job for job in self._jobs.values()
            if agent_name is None or job.agent_name == agent_name
        ]
        # Insertion order breaks created_at ties
        results.sort(key=lambda j: (j.created_at, self._sequence[j.id]), reverse=True)
        return results[offset:offset + limit]

    async def update_status(
        self,
        job_id: UUID,
        status: JobStatus,
        *,
        started_at: datetime | None = None,
        completed_at: datetime | None = None,
        error_message: str | None = None,
    ) -> Job:
        """Apply one legal status transition."""
        async with self._lock:
            job = self._jobs.get(job_id)
            if job is None:
                raise NotFoundError(f"Job {job_id} not found")
            check_transition(job, status)

            changes: dict[str, object] = {"status": status}
            if status == JobStatus.RUNNING:
                changes["started_at"] = not_before(job.created_at, started_at or utc_now())
            else:
                changes["completed_at"] = not_before(
                    job.started_at or job.created_at, completed_at or utc_now()
                )
                if status == JobStatus.FAILED:
                    changes["error_message"] = error_message

            updated = job.model_copy(update=changes)
            self._jobs[job_id] = updated
            return updated
