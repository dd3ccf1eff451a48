import json

import pytest
from sqlalchemy import create_engine, inspect, text
from sqlalchemy.pool import StaticPool

from timetabler.db import bootstrap


def _raise_error(message: str):
    raise RuntimeError(message)


def test_runtime_schema_bootstrap_raises_on_validation_failure(monkeypatch):
    monkeypatch.setattr(bootstrap.Base.metadata, "create_all", lambda bind: None)
    monkeypatch.setattr(bootstrap, "_ensure_faculty_subject_types_column", lambda: None)
    monkeypatch.setattr(bootstrap, "_ensure_classroom_room_type_column", lambda: None)
    monkeypatch.setattr(
        bootstrap,
        "_assert_required_columns",
        lambda: _raise_error("missing required schema"),
    )

    with pytest.raises(RuntimeError, match="Runtime schema compatibility bootstrap failed"):
        bootstrap.ensure_runtime_schema_compatibility()


def test_required_columns_cover_scheduler_tables():
    assert {"faculty_subjects", "timetable_entries", "classrooms"} <= set(bootstrap.REQUIRED_COLUMNS)
    assert "subject_types" in bootstrap.REQUIRED_COLUMNS["faculty_subjects"]
    assert "batch_number" in bootstrap.REQUIRED_COLUMNS["timetable_entries"]


def test_runtime_schema_bootstrap_adds_columns_missing_from_legacy_tables(monkeypatch):
    legacy_engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    with legacy_engine.begin() as connection:
        connection.execute(
            text(
                "CREATE TABLE faculty_subjects ("
                "id VARCHAR(36) PRIMARY KEY, faculty_id VARCHAR(36) NOT NULL, subject_id VARCHAR(36) NOT NULL)"
            )
        )
        connection.execute(
            text("CREATE TABLE classrooms (id VARCHAR(36) PRIMARY KEY, name VARCHAR(100) NOT NULL, capacity INTEGER)")
        )
        connection.execute(text("INSERT INTO faculty_subjects VALUES ('fs-1', 'fac-1', 'sub-1')"))
        connection.execute(text("INSERT INTO classrooms VALUES ('room-1', 'Room 101', 60)"))
    monkeypatch.setattr(bootstrap, "engine", legacy_engine)

    bootstrap.ensure_runtime_schema_compatibility()

    inspector = inspect(legacy_engine)
    assert "subject_types" in {item["name"] for item in inspector.get_columns("faculty_subjects")}
    assert "room_type" in {item["name"] for item in inspector.get_columns("classrooms")}
    assert set(bootstrap.REQUIRED_COLUMNS) <= set(inspector.get_table_names())
    with legacy_engine.connect() as connection:
        assert connection.execute(text("SELECT room_type FROM classrooms")).scalar_one() == "lecture"
        assert json.loads(connection.execute(text("SELECT subject_types FROM faculty_subjects")).scalar_one()) == [
            "lecture"
        ]
    legacy_engine.dispose()


def test_runtime_schema_bootstrap_leaves_current_tables_alone(monkeypatch):
    current_engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    bootstrap.Base.metadata.create_all(bind=current_engine)
    monkeypatch.setattr(bootstrap, "engine", current_engine)

    bootstrap.ensure_runtime_schema_compatibility()

    columns = [item["name"] for item in inspect(current_engine).get_columns("classrooms")]
    assert columns.count("room_type") == 1
    current_engine.dispose()
