"""Store error hierarchy.

Every store and service operation raises these errors so callers can
handle failures without knowing which backend is configured.
"""


class StoreError(Exception):
    """Base exception for all store errors.

    Backend-specific errors (asyncpg, pool exhaustion) are wrapped in one
    of the subclasses below, with the original exception kept on `cause`.
    """

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class ConnectionError(StoreError):
    """Raised when the backing database cannot be reached or a query fails.

    Examples:
        - Pool creation failure
        - Server closed the connection
        - Query timeout on a synchronous store call
    """

    pass


class NotFoundError(StoreError):
    """Raised when a write targets a job id that does not exist.

    Reads never raise this; `get` returns None for unknown ids.
    """

    pass


class ConflictError(StoreError):
    """Raised when a status update would break the job state machine.

    Examples:
        - completed -> running
        - pending -> completed (skipping running)
    """

    pass


class ValidationError(StoreError):
    """Raised on a submission that must not be persisted.

    Examples:
        - agent_name, schema_name or sql missing
        - SQL that is not a whitelisted maintenance statement
        - Negative pagination values
    """

    pass
