"""Execution engine configuration."""

from pydantic import BaseModel, Field


class ExecutionConfig(BaseModel):
    """How detached maintenance jobs are run."""

    max_concurrent_jobs: int | None = Field(
        default=None,
        ge=1,
        description="Upper bound on simultaneously executing jobs (unset = unbounded)",
    )
    shutdown_timeout: float = Field(
        default=600.0,
        gt=0,
        description="Seconds to wait for in-flight jobs when the service closes",
    )
