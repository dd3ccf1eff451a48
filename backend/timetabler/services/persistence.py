from __future__ import annotations

import logging

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from timetabler.core.exceptions import WriteError
from timetabler.models.timetable_entry import DayOfWeek, TimetableEntry
from timetabler.services.time_grid import WeeklyGrid
from timetabler.services.timetable_scheduler import PlannedSession

logger = logging.getLogger(__name__)


def build_entry(session: PlannedSession, weekly_grid: WeeklyGrid) -> TimetableEntry:
    start_time, end_time = weekly_grid.interval_times(session.start_slot, session.end_slot)
    return TimetableEntry(
        section_id=session.section_id,
        subject_id=session.subject_id,
        faculty_id=session.faculty_id,
        classroom_id=session.classroom_id,
        day_of_week=DayOfWeek(session.day),
        start_time=start_time,
        end_time=end_time,
        session_type=session.session_type,
        batch_number=session.batch_number,
    )


def replace_section_entries(
    db: Session,
    *,
    section_id: str,
    sessions: list[PlannedSession],
    weekly_grid: WeeklyGrid,
) -> list[TimetableEntry]:
    """Delete every entry of the section, insert the new ones and commit.

    Anything already staged on the session (e.g. an activity log row) commits with them.
    """
    entries = [build_entry(item, weekly_grid) for item in sessions]
    try:
        db.execute(delete(TimetableEntry).where(TimetableEntry.section_id == section_id))
        db.add_all(entries)
        db.commit()
    except SQLAlchemyError as exc:
        logger.exception("Timetable write failed | section_id=%s entries=%s", section_id, len(entries))
        db.rollback()
        raise WriteError(
            "Timetable could not be saved; the section's schedule may now be empty, retry generation",
            section_id=section_id,
            details={"error": str(exc)},
        ) from exc

    for entry in entries:
        db.refresh(entry)
    logger.info("Timetable replaced | section_id=%s entries=%s", section_id, len(entries))
    return entries
