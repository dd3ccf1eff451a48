"""create catalog tables

Revision ID: 20261019_0001
Revises: None
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


year_level_enum = sa.Enum("FY", "SY", "TY", "Final Year", name="year_level")
room_type_enum = sa.Enum("lecture", "lab", "tutorial", name="room_type")


def upgrade() -> None:
    op.create_table(
        "faculty",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_faculty_email", "faculty", ["email"], unique=True)

    op.create_table(
        "subjects",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("year_level", year_level_enum, nullable=False),
        sa.Column("weekly_hours", sa.Integer(), nullable=False, server_default="3"),
        sa.Column("has_lab", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("has_tutorial", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_subjects_code", "subjects", ["code"], unique=True)
    op.create_index("ix_subjects_year_level", "subjects", ["year_level"])

    op.create_table(
        "sections",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column("year_level", year_level_enum, nullable=False),
        sa.Column("student_count", sa.Integer(), nullable=False, server_default="60"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_sections_name", "sections", ["name"], unique=True)
    op.create_index("ix_sections_year_level", "sections", ["year_level"])

    op.create_table(
        "classrooms",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("room_type", room_type_enum, nullable=False, server_default="lecture"),
        sa.Column("capacity", sa.Integer(), nullable=False, server_default="60"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_classrooms_name", "classrooms", ["name"], unique=True)
    op.create_index("ix_classrooms_room_type", "classrooms", ["room_type"])

    op.create_table(
        "faculty_subjects",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("faculty_id", sa.String(length=36), nullable=False),
        sa.Column("subject_id", sa.String(length=36), nullable=False),
        sa.Column("subject_types", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("faculty_id", "subject_id", name="uq_faculty_subjects_faculty_subject"),
    )
    op.create_index("ix_faculty_subjects_faculty_id", "faculty_subjects", ["faculty_id"])
    op.create_index("ix_faculty_subjects_subject_id", "faculty_subjects", ["subject_id"])


def downgrade() -> None:
    op.drop_index("ix_faculty_subjects_subject_id", table_name="faculty_subjects")
    op.drop_index("ix_faculty_subjects_faculty_id", table_name="faculty_subjects")
    op.drop_table("faculty_subjects")
    op.drop_index("ix_classrooms_room_type", table_name="classrooms")
    op.drop_index("ix_classrooms_name", table_name="classrooms")
    op.drop_table("classrooms")
    op.drop_index("ix_sections_year_level", table_name="sections")
    op.drop_index("ix_sections_name", table_name="sections")
    op.drop_table("sections")
    op.drop_index("ix_subjects_year_level", table_name="subjects")
    op.drop_index("ix_subjects_code", table_name="subjects")
    op.drop_table("subjects")
    op.drop_index("ix_faculty_email", table_name="faculty")
    op.drop_table("faculty")
    room_type_enum.drop(op.get_bind(), checkfirst=True)
    year_level_enum.drop(op.get_bind(), checkfirst=True)
