from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from timetabler.models.classroom import Classroom
from timetabler.models.faculty import Faculty
from timetabler.models.section import Section
from timetabler.models.subject import Subject
from timetabler.models.timetable_entry import DayOfWeek, TimetableEntry
from timetabler.schemas.timetable import TimetableEntryOut
from timetabler.services.batches import split_batches

DAY_ORDER = {day.value: index for index, day in enumerate(DayOfWeek)}


def _by_id(db: Session, model, ids: set[str]) -> dict:
    if not ids:
        return {}
    return {item.id: item for item in db.execute(select(model).where(model.id.in_(ids))).scalars()}


def sort_entries(entries: Sequence[TimetableEntry]) -> list[TimetableEntry]:
    return sorted(
        entries,
        key=lambda item: (
            DAY_ORDER.get(getattr(item.day_of_week, "value", item.day_of_week), len(DAY_ORDER)),
            item.start_time,
            item.batch_number or 0,
        ),
    )


def build_entry_views(db: Session, entries: Sequence[TimetableEntry]) -> list[TimetableEntryOut]:
    """Attach display names to entries; dangling references come back as ``None``."""
    sections = _by_id(db, Section, {item.section_id for item in entries})
    subjects = _by_id(db, Subject, {item.subject_id for item in entries})
    faculty = _by_id(db, Faculty, {item.faculty_id for item in entries})
    classrooms = _by_id(db, Classroom, {item.classroom_id for item in entries})

    views: list[TimetableEntryOut] = []
    for entry in sort_entries(entries):
        section = sections.get(entry.section_id)
        subject = subjects.get(entry.subject_id)
        instructor = faculty.get(entry.faculty_id)
        classroom = classrooms.get(entry.classroom_id)
        batch_name = None
        if entry.batch_number is not None and section is not None:
            batch_names = {batch.number: batch.name for batch in split_batches(section.id, section.name)}
            batch_name = batch_names.get(entry.batch_number)
        views.append(
            TimetableEntryOut(
                id=entry.id,
                section_id=entry.section_id,
                subject_id=entry.subject_id,
                faculty_id=entry.faculty_id,
                classroom_id=entry.classroom_id,
                day_of_week=entry.day_of_week,
                start_time=entry.start_time,
                end_time=entry.end_time,
                session_type=entry.session_type,
                batch_number=entry.batch_number,
                batch_name=batch_name,
                section_name=section.name if section is not None else None,
                subject_code=subject.code if subject is not None else None,
                subject_name=subject.name if subject is not None else None,
                faculty_name=instructor.name if instructor is not None else None,
                classroom_name=classroom.name if classroom is not None else None,
            )
        )
    return views
