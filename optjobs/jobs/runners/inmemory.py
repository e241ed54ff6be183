"""In-memory implementation of MaintenanceRunner."""

import asyncio
from collections.abc import Iterable

from optjobs.jobs.errors import ExecutionError
from optjobs.jobs.runner import MaintenanceRunner


class InMemoryMaintenanceRunner(MaintenanceRunner):
    """Records statements instead of executing them.

    For testing and development: statements containing any of
    `fail_on` raise ExecutionError, and `delay` simulates a slow build.
    """

    def __init__(self, fail_on: Iterable[str] = (), delay: float = 0.0) -> None:
        self.fail_on = list(fail_on)
        self.delay = delay
        self.executed: list[str] = []
        self.active = 0
        self.max_active = 0

    async def run(self, sql: str) -> None:
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            for marker in self.fail_on:
                if marker in sql:
                    raise ExecutionError(f"statement rejected: {marker}")
            self.executed.append(sql)
        finally:
            self.active -= 1
