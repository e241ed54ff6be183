"""Tests for the maintenance SQL whitelist."""

import pytest

from optjobs.db.errors import ValidationError
from optjobs.jobs.validation import (
    ALLOWED_STATEMENT_PREFIXES,
    check_required_fields,
    is_allowed_job_sql,
    validate_job_sql,
)
from optjobs.jobs.models import JobCreate


class TestValidateJobSql:
    """Tests for validate_job_sql."""

    @pytest.mark.parametrize(
        "sql",
        [
            "CREATE INDEX idx_x ON t(x)",
            "CREATE INDEX CONCURRENTLY idx_x ON t(x)",
            "create unique index idx_u ON t(u)",
            "  \n CREATE MATERIALIZED VIEW mv_sales AS SELECT 1",
            "Reindex TABLE t",
            "REINDEX INDEX CONCURRENTLY idx_x",
        ],
    )
    def test_accepts_maintenance_statements(self, sql: str) -> None:
        validate_job_sql(sql)
        assert is_allowed_job_sql(sql)

    @pytest.mark.parametrize(
        "sql",
        [
            "DROP TABLE t",
            "DELETE FROM t",
            "UPDATE t SET x = 1",
            "INSERT INTO t VALUES (1)",
            "ALTER TABLE t ADD COLUMN y int",
            "TRUNCATE t",
            "SELECT * FROM t",
            "CREATE TABLE t2 (x int)",
            "REFRESH MATERIALIZED VIEW mv_sales",
            "-- CREATE INDEX idx ON t(x)\nDROP TABLE t",
            "",
            "   ",
        ],
    )
    def test_rejects_everything_else(self, sql: str) -> None:
        with pytest.raises(ValidationError):
            validate_job_sql(sql)

    def test_rejects_none(self) -> None:
        with pytest.raises(ValidationError):
            validate_job_sql(None)

    def test_error_names_allowed_prefixes(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_job_sql("DROP TABLE t")
        for prefix in ALLOWED_STATEMENT_PREFIXES:
            assert prefix in str(exc_info.value)


class TestCheckRequiredFields:
    """Tests for check_required_fields."""

    def test_passes_complete_request(self) -> None:
        check_required_fields(
            JobCreate(agent_name="acme", schema_name="public", sql="REINDEX TABLE t")
        )

    def test_names_missing_fields(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            check_required_fields(JobCreate(agent_name="acme"))
        assert "schema_name" in str(exc_info.value)
        assert "sql" in str(exc_info.value)
        assert "agent_name" not in str(exc_info.value)
