"""Admission check for maintenance SQL.

Jobs run on a connection with no statement timeout and outside any
transaction, so only re-runnable schema maintenance is accepted.
"""

from optjobs.db.errors import ConflictError, ValidationError
from optjobs.jobs.models import Job, JobCreate, JobStatus

ALLOWED_STATEMENT_PREFIXES: tuple[str, ...] = (
    "CREATE INDEX",
    "CREATE UNIQUE INDEX",
    "CREATE MATERIALIZED VIEW",
    "REINDEX",
)


def is_allowed_job_sql(sql: str | None) -> bool:
    """Whether the statement starts with a whitelisted prefix (case-insensitive)."""
    if not sql:
        return False
    normalized = sql.strip().upper()
    return normalized.startswith(ALLOWED_STATEMENT_PREFIXES)


def validate_job_sql(sql: str | None) -> None:
    """Reject anything that is not a whitelisted maintenance statement.

    Raises:
        ValidationError: If the statement does not start with one of
            ALLOWED_STATEMENT_PREFIXES
    """
    if not is_allowed_job_sql(sql):
        raise ValidationError(
            f"Job SQL must start with one of: {', '.join(ALLOWED_STATEMENT_PREFIXES)}"
        )


def check_required_fields(request: JobCreate) -> None:
    """Reject a submission with missing identifying fields.

    Raises:
        ValidationError: Naming every required field that is absent or blank
    """
    missing = request.missing_fields()
    if missing:
        raise ValidationError(f"{', '.join(missing)} required")


def check_transition(job: Job, status: JobStatus) -> None:
    """Reject a status change the job state machine does not allow.

    Raises:
        ConflictError: If `job.status` cannot move to `status`
    """
    if not job.status.can_transition_to(status):
        raise ConflictError(
            f"Job {job.id} cannot move from {job.status.value} to {status.value}"
        )
