"""Maintenance job models."""

from datetime import UTC, datetime
from enum import Enum
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


def not_before(earlier: datetime | None, candidate: datetime) -> datetime:
    """Return candidate, moved forward to `earlier` if the clock stepped back."""
    if earlier is not None and candidate < earlier:
        return earlier
    return candidate


class JobType(str, Enum):
    """Kind of maintenance operation a job performs."""

    CREATE_INDEX = "create_index"
    CREATE_MATERIALIZED_VIEW = "create_materialized_view"
    REINDEX = "reindex"


class JobStatus(str, Enum):
    """Job lifecycle state.

    - PENDING: persisted, execution scheduled but not started
    - RUNNING: statement issued against the target database
    - COMPLETED: statement finished successfully (terminal)
    - FAILED: statement raised; see error_message (terminal)
    """

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.FAILED)

    def can_transition_to(self, target: "JobStatus") -> bool:
        """Whether moving from this status to `target` is a legal step."""
        return target in _TRANSITIONS[self]

    @classmethod
    def sources_for(cls, target: "JobStatus") -> tuple["JobStatus", ...]:
        """Statuses from which `target` can be reached."""
        return tuple(status for status in cls if target in _TRANSITIONS[status])


_TRANSITIONS: dict[JobStatus, frozenset[JobStatus]] = {
    JobStatus.PENDING: frozenset({JobStatus.RUNNING}),
    JobStatus.RUNNING: frozenset({JobStatus.COMPLETED, JobStatus.FAILED}),
    JobStatus.COMPLETED: frozenset(),
    JobStatus.FAILED: frozenset(),
}

REQUIRED_FIELDS: tuple[str, ...] = ("agent_name", "schema_name", "sql")


class JobCreate(BaseModel):
    """Submission payload for a new maintenance job.

    Identifying fields are optional here so that a missing value is
    reported by the store as a ValidationError rather than a parsing error.
    """

    slow_query_id: int | None = Field(
        default=None, description="Slow-query diagnostic that motivated the job"
    )
    agent_name: str | None = Field(default=None, description="Target agent / tenant")
    schema_name: str | None = Field(default=None, description="Target database schema")
    job_type: JobType = Field(default=JobType.CREATE_INDEX, description="Operation kind")
    description: str | None = Field(default=None, description="Operator-facing label")
    sql: str | None = Field(default=None, description="Statement to execute verbatim")
    created_by: str | None = Field(default=None, description="Requester identity")

    def missing_fields(self) -> list[str]:
        """Required fields that are absent or blank."""
        missing = []
        for name in REQUIRED_FIELDS:
            value = getattr(self, name)
            if value is None or not value.strip():
                missing.append(name)
        return missing


class Job(BaseModel):
    """A persisted maintenance job and its lifecycle state."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4, description="Unique identifier")
    slow_query_id: int | None = Field(default=None, description="Motivating slow query")
    agent_name: str = Field(..., description="Target agent / tenant")
    schema_name: str = Field(..., description="Target database schema")
    job_type: JobType = Field(default=JobType.CREATE_INDEX, description="Operation kind")
    description: str | None = Field(default=None, description="Operator-facing label")
    sql: str = Field(..., description="Statement to execute verbatim")
    status: JobStatus = Field(default=JobStatus.PENDING, description="Lifecycle state")
    created_by: str | None = Field(default=None, description="Requester identity")
    created_at: datetime = Field(default_factory=utc_now, description="Creation time")
    started_at: datetime | None = Field(default=None, description="Execution start")
    completed_at: datetime | None = Field(default=None, description="Execution end")
    error_message: str | None = Field(default=None, description="Failure text")

    @classmethod
    def from_request(cls, request: JobCreate) -> "Job":
        """Build a pending job from a complete submission."""
        return cls(
            slow_query_id=request.slow_query_id,
            agent_name=request.agent_name,
            schema_name=request.schema_name,
            job_type=request.job_type,
            description=request.description,
            sql=request.sql,
            created_by=request.created_by,
        )

    @property
    def label(self) -> str:
        """Short text for log lines."""
        return self.description or self.job_type.value
