"""create school timetable

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


teacher_post = sa.Enum("PGT", "TGT", name="teacher_post")


def upgrade() -> None:
    op.create_table(
        "teachers",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("phone", sa.String(length=50), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("post", teacher_post, nullable=False),
        sa.Column("subjects", sa.JSON(), nullable=False),
        sa.Column("eligible_grades", sa.JSON(), nullable=False),
        sa.Column("current_periods", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("max_periods", sa.Integer(), nullable=False, server_default="6"),
        sa.Column("is_available", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_teachers_name", "teachers", ["name"], unique=False)
    op.create_index("ix_teachers_email", "teachers", ["email"], unique=True)

    op.create_table(
        "school_classes",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("grade", sa.Integer(), nullable=False),
        sa.Column("section", sa.String(length=10), nullable=False),
        sa.Column("subjects", sa.JSON(), nullable=False),
        sa.Column("strength", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("class_teacher_id", sa.String(length=36), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("grade", "section", name="uq_school_class_grade_section"),
    )
    op.create_index("ix_school_classes_grade", "school_classes", ["grade"], unique=False)

    op.create_table(
        "subjects",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("periods_per_week", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_subjects_name", "subjects", ["name"], unique=True)
    op.create_index("ix_subjects_code", "subjects", ["code"], unique=True)

    op.create_table(
        "periods",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("day", sa.String(length=20), nullable=False),
        sa.Column("period_number", sa.Integer(), nullable=False),
        sa.Column("start_time", sa.String(length=5), nullable=True),
        sa.Column("end_time", sa.String(length=5), nullable=True),
        sa.Column("class_id", sa.String(length=36), nullable=False),
        sa.Column("subject_id", sa.String(length=36), nullable=False),
        sa.Column("teacher_id", sa.String(length=36), nullable=False),
        sa.Column("is_substitution", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("original_teacher_id", sa.String(length=36), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("class_id", "day", "period_number", name="uq_period_class_slot"),
    )
    op.create_index("ix_periods_day", "periods", ["day"], unique=False)
    op.create_index("ix_periods_class_id", "periods", ["class_id"], unique=False)
    op.create_index("ix_periods_teacher_id", "periods", ["teacher_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_periods_teacher_id", table_name="periods")
    op.drop_index("ix_periods_class_id", table_name="periods")
    op.drop_index("ix_periods_day", table_name="periods")
    op.drop_table("periods")
    op.drop_index("ix_subjects_code", table_name="subjects")
    op.drop_index("ix_subjects_name", table_name="subjects")
    op.drop_table("subjects")
    op.drop_index("ix_school_classes_grade", table_name="school_classes")
    op.drop_table("school_classes")
    op.drop_index("ix_teachers_email", table_name="teachers")
    op.drop_index("ix_teachers_name", table_name="teachers")
    op.drop_table("teachers")
    teacher_post.drop(op.get_bind(), checkfirst=True)
