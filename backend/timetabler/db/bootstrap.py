from __future__ import annotations

import logging

from sqlalchemy import inspect, text

import timetabler.models  # noqa: F401
from timetabler.db.base import Base
from timetabler.db.session import engine

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS: dict[str, set[str]] = {
    "faculty": {"id", "name", "email"},
    "subjects": {"id", "code", "year_level", "weekly_hours", "has_lab", "has_tutorial"},
    "sections": {"id", "name", "year_level", "student_count"},
    "classrooms": {"id", "name", "room_type", "capacity"},
    "faculty_subjects": {"id", "faculty_id", "subject_id", "subject_types"},
    "timetable_entries": {
        "id",
        "section_id",
        "subject_id",
        "faculty_id",
        "classroom_id",
        "day_of_week",
        "start_time",
        "end_time",
        "session_type",
        "batch_number",
    },
}


def _ensure_faculty_subject_types_column() -> None:
    with engine.begin() as connection:
        inspector = inspect(connection)
        if "faculty_subjects" not in set(inspector.get_table_names()):
            return
        column_names = {item["name"] for item in inspector.get_columns("faculty_subjects")}
        if "subject_types" in column_names:
            return

        if connection.dialect.name == "postgresql":
            connection.execute(
                text(
                    "ALTER TABLE faculty_subjects "
                    "ADD COLUMN subject_types JSONB NOT NULL DEFAULT '[\"lecture\"]'::jsonb"
                )
            )
            return

        connection.execute(
            text(
                "ALTER TABLE faculty_subjects "
                "ADD COLUMN subject_types JSON NOT NULL DEFAULT '[\"lecture\"]'"
            )
        )


def _ensure_classroom_room_type_column() -> None:
    with engine.begin() as connection:
        inspector = inspect(connection)
        if "classrooms" not in set(inspector.get_table_names()):
            return
        column_names = {item["name"] for item in inspector.get_columns("classrooms")}
        if "room_type" in column_names:
            return
        # Rooms created before typed classrooms existed are treated as lecture rooms.
        connection.execute(
            text("ALTER TABLE classrooms ADD COLUMN room_type VARCHAR(20) NOT NULL DEFAULT 'lecture'")
        )


def _assert_required_columns() -> None:
    with engine.begin() as connection:
        inspector = inspect(connection)
        table_names = set(inspector.get_table_names())
        missing_tables = [name for name in REQUIRED_COLUMNS if name not in table_names]
        if missing_tables:
            raise RuntimeError(f"Missing required tables: {', '.join(sorted(missing_tables))}")

        missing_columns: list[str] = []
        for table_name, required in REQUIRED_COLUMNS.items():
            existing = {item["name"] for item in inspector.get_columns(table_name)}
            for column_name in sorted(required - existing):
                missing_columns.append(f"{table_name}.{column_name}")
        if missing_columns:
            raise RuntimeError(f"Missing required columns: {', '.join(missing_columns)}")


def ensure_runtime_schema_compatibility() -> None:
    try:
        # Ensure missing tables are present before additive compatibility patches.
        Base.metadata.create_all(bind=engine)
        _ensure_faculty_subject_types_column()
        _ensure_classroom_room_type_column()
        _assert_required_columns()
    except Exception as exc:  # pragma: no cover - runtime environment dependent
        logger.exception("Runtime schema compatibility bootstrap failed")
        raise RuntimeError("Runtime schema compatibility bootstrap failed") from exc
