"""create timetable entries

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


day_of_week_enum = sa.Enum(
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday", name="day_of_week"
)
session_type_enum = sa.Enum("lecture", "lab", "tutorial", name="session_type")


def upgrade() -> None:
    op.create_table(
        "timetable_entries",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("section_id", sa.String(length=36), nullable=False),
        sa.Column("subject_id", sa.String(length=36), nullable=False),
        sa.Column("faculty_id", sa.String(length=36), nullable=False),
        sa.Column("classroom_id", sa.String(length=36), nullable=False),
        sa.Column("day_of_week", day_of_week_enum, nullable=False),
        sa.Column("start_time", sa.String(length=5), nullable=False),
        sa.Column("end_time", sa.String(length=5), nullable=False),
        sa.Column("session_type", session_type_enum, nullable=False, server_default="lecture"),
        sa.Column("batch_number", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_timetable_entries_section_id", "timetable_entries", ["section_id"])
    op.create_index("ix_timetable_entries_subject_id", "timetable_entries", ["subject_id"])
    op.create_index("ix_timetable_entries_faculty_id", "timetable_entries", ["faculty_id"])
    op.create_index("ix_timetable_entries_classroom_id", "timetable_entries", ["classroom_id"])
    op.create_index(
        "ix_timetable_entries_day_time", "timetable_entries", ["day_of_week", "start_time", "end_time"]
    )
    op.create_index(
        "ix_timetable_entries_faculty_day_time", "timetable_entries", ["faculty_id", "day_of_week", "start_time"]
    )
    op.create_index(
        "ix_timetable_entries_classroom_day_time",
        "timetable_entries",
        ["classroom_id", "day_of_week", "start_time"],
    )


def downgrade() -> None:
    for index_name in (
        "ix_timetable_entries_classroom_day_time",
        "ix_timetable_entries_faculty_day_time",
        "ix_timetable_entries_day_time",
        "ix_timetable_entries_classroom_id",
        "ix_timetable_entries_faculty_id",
        "ix_timetable_entries_subject_id",
        "ix_timetable_entries_section_id",
    ):
        op.drop_index(index_name, table_name="timetable_entries")
    op.drop_table("timetable_entries")
    session_type_enum.drop(op.get_bind(), checkfirst=True)
    day_of_week_enum.drop(op.get_bind(), checkfirst=True)
