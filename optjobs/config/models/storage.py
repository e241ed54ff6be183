"""Storage backend configuration models."""

from typing import Literal

from pydantic import BaseModel, Field, model_validator

BackendType = Literal["inmemory", "postgres"]


class JobStoreConfig(BaseModel):
    """Backend for the jobs table and the maintenance connection pool.

    The pool carries no client-side command timeout because maintenance
    statements may run for minutes; `query_timeout` bounds the short
    bookkeeping queries issued by the job store instead.
    """

    backend: BackendType = Field(
        default="postgres",
        description="Backend type",
    )
    connection_url: str | None = Field(
        default=None,
        description="PostgreSQL DSN (falls back to OPTJOBS_DATABASE_URL / DATABASE_URL)",
    )
    min_pool_size: int = Field(
        default=2,
        gt=0,
        description="Minimum connections to keep open",
    )
    max_pool_size: int = Field(
        default=10,
        gt=0,
        description="Maximum connections in pool, shared by store queries and running jobs",
    )
    max_inactive_connection_lifetime: float = Field(
        default=300.0,
        gt=0,
        description="Close connections idle longer than this (seconds)",
    )
    query_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Timeout for job store queries (seconds)",
    )

    @model_validator(mode="after")
    def check_pool_bounds(self) -> "JobStoreConfig":
        if self.min_pool_size > self.max_pool_size:
            raise ValueError("min_pool_size must not exceed max_pool_size")
        return self


class StorageConfig(BaseModel):
    """Configuration for all storage backends."""

    jobs: JobStoreConfig = Field(
        default_factory=JobStoreConfig,
        description="JobStore backend",
    )
