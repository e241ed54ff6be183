"""MaintenanceRunner implementations."""

from optjobs.jobs.runners.inmemory import InMemoryMaintenanceRunner
from optjobs.jobs.runners.postgres import PostgresMaintenanceRunner

__all__ = [
    "InMemoryMaintenanceRunner",
    "PostgresMaintenanceRunner",
]
