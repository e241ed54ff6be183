"""JobStore implementations."""

from optjobs.jobs.stores.inmemory import InMemoryJobStore
from optjobs.jobs.stores.postgres import PostgresJobStore

__all__ = [
    "InMemoryJobStore",
    "PostgresJobStore",
]
