"""Errors raised while executing a maintenance statement.

These never reach the submitter; the executor records them on the job.
"""


class ExecutionError(Exception):
    """Raised by a runner when the maintenance statement fails."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause
