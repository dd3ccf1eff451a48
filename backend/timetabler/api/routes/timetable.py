from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from timetabler.api.deps import get_db
from timetabler.core.config import get_settings
from timetabler.models.classroom import Classroom
from timetabler.models.section import Section
from timetabler.models.timetable_entry import TimetableEntry
from timetabler.schemas.conflict import ConflictReport
from timetabler.schemas.timetable import (
    ClassroomTimetableOut,
    SectionTimetableOut,
    TimeSlotOut,
    WeeklyGridOut,
)
from timetabler.services.conflict_service import audit_timetable
from timetabler.services.generation import build_weekly_grid
from timetabler.services.timetable_view import build_entry_views

router = APIRouter()


@router.get("/grid", response_model=WeeklyGridOut)
def get_weekly_grid() -> WeeklyGridOut:
    grid = build_weekly_grid(get_settings())
    return WeeklyGridOut(
        days=list(grid.days),
        slot_minutes=grid.slot_minutes,
        break_slot=grid.break_slot,
        slots=[
            TimeSlotOut(
                index=slot,
                start_time=grid.slot_start_time(slot),
                end_time=grid.slot_end_time(slot),
                is_break=slot == grid.break_slot,
            )
            for slot in range(grid.slot_count)
        ],
    )


@router.get("/sections/{section_id}", response_model=SectionTimetableOut)
def get_section_timetable(section_id: str, db: Session = Depends(get_db)) -> SectionTimetableOut:
    section = db.get(Section, section_id)
    if section is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Section not found")
    entries = list(db.execute(select(TimetableEntry).where(TimetableEntry.section_id == section_id)).scalars())
    return SectionTimetableOut(
        section_id=section.id,
        section_name=section.name,
        entries=build_entry_views(db, entries),
    )


@router.get("/classrooms/{classroom_id}", response_model=ClassroomTimetableOut)
def get_classroom_timetable(classroom_id: str, db: Session = Depends(get_db)) -> ClassroomTimetableOut:
    classroom = db.get(Classroom, classroom_id)
    if classroom is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Classroom not found")
    entries = list(
        db.execute(select(TimetableEntry).where(TimetableEntry.classroom_id == classroom_id)).scalars()
    )
    return ClassroomTimetableOut(
        classroom_id=classroom.id,
        classroom_name=classroom.name,
        entries=build_entry_views(db, entries),
    )


@router.get("/conflicts", response_model=ConflictReport)
def get_timetable_conflicts(db: Session = Depends(get_db)) -> ConflictReport:
    return audit_timetable(db, build_weekly_grid(get_settings()))
