"""MaintenanceRunner abstract interface."""

from abc import ABC, abstractmethod


class MaintenanceRunner(ABC):
    """Executes one maintenance statement against the target database.

    Implementations acquire their own session for the statement and must
    release it on every exit path.
    """

    @abstractmethod
    async def run(self, sql: str) -> None:
        """Execute `sql` verbatim.

        Raises:
            ExecutionError: If the statement fails
        """
        pass
