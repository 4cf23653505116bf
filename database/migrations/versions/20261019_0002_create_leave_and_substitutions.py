"""create leave requests, substitutions and activity logs

Revision ID: 20261019_0002
Revises: 20261019_0001
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261019_0002"
down_revision = "20261019_0001"
branch_labels = None
depends_on = None


leave_status = sa.Enum("pending", "approved", "rejected", name="leave_status")
substitution_status = sa.Enum("assigned", "completed", "cancelled", name="substitution_status")


def upgrade() -> None:
    op.create_table(
        "leave_requests",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("teacher_id", sa.String(length=36), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column("status", leave_status, nullable=False, server_default="pending"),
        sa.Column("affected_periods", sa.JSON(), nullable=False),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_leave_requests_teacher_id", "leave_requests", ["teacher_id"], unique=False)

    op.create_table(
        "substitutions",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("period_id", sa.String(length=36), nullable=False),
        sa.Column("original_teacher_id", sa.String(length=36), nullable=False),
        sa.Column("substitute_teacher_id", sa.String(length=36), nullable=False),
        sa.Column("leave_request_id", sa.String(length=36), nullable=True),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", substitution_status, nullable=False, server_default="assigned"),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column("auto_assigned", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_substitutions_period_id", "substitutions", ["period_id"], unique=False)
    op.create_index(
        "ix_substitutions_substitute_teacher_id",
        "substitutions",
        ["substitute_teacher_id"],
        unique=False,
    )
    op.create_index("ix_substitutions_leave_request_id", "substitutions", ["leave_request_id"], unique=False)

    op.create_table(
        "activity_logs",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("actor", sa.String(length=200), nullable=True),
        sa.Column("action", sa.String(length=100), nullable=False),
        sa.Column("entity_type", sa.String(length=100), nullable=True),
        sa.Column("entity_id", sa.String(length=100), nullable=True),
        sa.Column("details", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table("activity_logs")
    op.drop_index("ix_substitutions_leave_request_id", table_name="substitutions")
    op.drop_index("ix_substitutions_substitute_teacher_id", table_name="substitutions")
    op.drop_index("ix_substitutions_period_id", table_name="substitutions")
    op.drop_table("substitutions")
    op.drop_index("ix_leave_requests_teacher_id", table_name="leave_requests")
    op.drop_table("leave_requests")
    substitution_status.drop(op.get_bind(), checkfirst=True)
    leave_status.drop(op.get_bind(), checkfirst=True)
