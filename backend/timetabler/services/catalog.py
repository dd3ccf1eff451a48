from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from timetabler.core.exceptions import InputLoadError, ResourceNotFoundError
from timetabler.models.classroom import Classroom, RoomType
from timetabler.models.faculty_subject import FacultySubject
from timetabler.models.section import Section
from timetabler.models.subject import Subject, YearLevel
from timetabler.models.timetable_entry import SessionType, TimetableEntry
from timetabler.services.availability_grid import ExistingBooking
from timetabler.services.timetable_scheduler import (
    CapabilitySnapshot,
    ClassroomSnapshot,
    GenerationInputs,
    SectionSnapshot,
    SubjectSnapshot,
)

logger = logging.getLogger(__name__)


def _enum_value(value: object) -> str:
    if hasattr(value, "value"):
        return str(getattr(value, "value"))
    return str(value)


def parse_session_types(raw: list[str] | None) -> frozenset[SessionType]:
    parsed: set[SessionType] = set()
    for item in raw or []:
        try:
            parsed.add(SessionType(str(item).strip().lower()))
        except ValueError:
            logger.warning("Ignoring unknown session type on capability | value=%s", item)
    return frozenset(parsed)


def _load_section(db: Session, section_id: str) -> SectionSnapshot:
    section = db.get(Section, section_id)
    if section is None:
        raise ResourceNotFoundError("Section", section_id)
    return SectionSnapshot(
        id=section.id,
        name=section.name,
        year_level=_enum_value(section.year_level),
        student_count=section.student_count,
    )


def _load_subjects(db: Session, year_level: str) -> tuple[SubjectSnapshot, ...]:
    rows = (
        db.execute(select(Subject).where(Subject.year_level == YearLevel(year_level)).order_by(Subject.code))
        .scalars()
        .all()
    )
    return tuple(
        SubjectSnapshot(
            id=row.id,
            code=row.code,
            name=row.name,
            weekly_hours=row.weekly_hours,
            has_lab=row.has_lab,
            has_tutorial=row.has_tutorial,
        )
        for row in rows
    )


def _load_capabilities(db: Session) -> tuple[CapabilitySnapshot, ...]:
    rows = (
        db.execute(select(FacultySubject).order_by(FacultySubject.faculty_id, FacultySubject.subject_id))
        .scalars()
        .all()
    )
    return tuple(
        CapabilitySnapshot(
            faculty_id=row.faculty_id,
            subject_id=row.subject_id,
            session_types=parse_session_types(row.subject_types),
        )
        for row in rows
    )


def _load_classrooms(db: Session) -> tuple[ClassroomSnapshot, ...]:
    classrooms: list[ClassroomSnapshot] = []
    for room_type in RoomType:
        rows = (
            db.execute(
                select(Classroom)
                .where(Classroom.room_type == room_type)
                .order_by(Classroom.name, Classroom.id)
            )
            .scalars()
            .all()
        )
        classrooms.extend(
            ClassroomSnapshot(
                id=row.id,
                name=row.name,
                room_type=SessionType(room_type.value),
                capacity=row.capacity,
            )
            for row in rows
        )
    return tuple(classrooms)


def _load_other_section_bookings(db: Session, section_id: str) -> tuple[ExistingBooking, ...]:
    rows = (
        db.execute(select(TimetableEntry).where(TimetableEntry.section_id != section_id))
        .scalars()
        .all()
    )
    return tuple(
        ExistingBooking(
            section_id=row.section_id,
            faculty_id=row.faculty_id,
            classroom_id=row.classroom_id,
            day=_enum_value(row.day_of_week),
            start_time=row.start_time,
            end_time=row.end_time,
        )
        for row in rows
    )


def load_generation_inputs(db: Session, section_id: str) -> GenerationInputs:
    """Read everything one generation run needs, before anything is mutated.

    Entries of the target section are excluded from the bookings: they are about to be replaced.
    """
    try:
        section = _load_section(db, section_id)
        inputs = GenerationInputs(
            section=section,
            subjects=_load_subjects(db, section.year_level),
            capabilities=_load_capabilities(db),
            classrooms=_load_classrooms(db),
            existing_bookings=_load_other_section_bookings(db, section_id),
        )
    except SQLAlchemyError as exc:
        logger.exception("Catalog read failed | section_id=%s", section_id)
        raise InputLoadError(
            "Timetable inputs could not be loaded; existing schedule left untouched",
            details={"section_id": section_id, "error": str(exc)},
        ) from exc

    logger.info(
        "Generation inputs loaded | section_id=%s subjects=%s capabilities=%s classrooms=%s bookings=%s",
        section_id,
        len(inputs.subjects),
        len(inputs.capabilities),
        len(inputs.classrooms),
        len(inputs.existing_bookings),
    )
    return inputs
