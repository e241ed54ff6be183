"""Create optimization_jobs table.

Revision ID: 001
Revises:
Create Date: 2026-10-19

Tables: optimization_jobs
"""

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects.postgresql import UUID

revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create the job lifecycle table."""
    op.create_table(
        "optimization_jobs",
        sa.Column("id", UUID, primary_key=True),
        # slow_queries lives outside this service; no foreign key
        sa.Column("slow_query_id", sa.Integer),
        sa.Column("agent_name", sa.Text, nullable=False),
        sa.Column("schema_name", sa.Text, nullable=False),
        sa.Column("job_type", sa.Text, nullable=False, server_default="create_index"),
        sa.Column("description", sa.Text),
        sa.Column("sql", sa.Text, nullable=False),
        sa.Column("status", sa.Text, nullable=False, server_default="pending"),
        sa.Column("created_by", sa.Text),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column("started_at", sa.TIMESTAMP(timezone=True)),
        sa.Column("completed_at", sa.TIMESTAMP(timezone=True)),
        sa.Column("error_message", sa.Text),
        sa.CheckConstraint(
            "status IN ('pending', 'running', 'completed', 'failed')",
            name="ck_optimization_jobs_status",
        ),
        sa.CheckConstraint(
            "job_type IN ('create_index', 'create_materialized_view', 'reindex')",
            name="ck_optimization_jobs_job_type",
        ),
    )
    op.create_index("idx_optimization_jobs_status", "optimization_jobs", ["status"])
    op.create_index("idx_optimization_jobs_agent", "optimization_jobs", ["agent_name"])
    op.create_index(
        "idx_optimization_jobs_created",
        "optimization_jobs",
        [sa.text("created_at DESC")],
    )


def downgrade() -> None:
    """Drop the job lifecycle table."""
    op.drop_table("optimization_jobs")
