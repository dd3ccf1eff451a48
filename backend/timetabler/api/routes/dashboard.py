from fastapi import APIRouter, Depends
from sqlalchemy import distinct, func, select
from sqlalchemy.orm import Session

from timetabler.api.deps import get_db
from timetabler.models.classroom import Classroom
from timetabler.models.faculty import Faculty
from timetabler.models.section import Section
from timetabler.models.subject import Subject
from timetabler.models.timetable_entry import TimetableEntry
from timetabler.schemas.dashboard import DashboardStats

router = APIRouter()


def _count(db: Session, model) -> int:
    return int(db.execute(select(func.count()).select_from(model)).scalar_one())


@router.get("/stats", response_model=DashboardStats)
def get_dashboard_stats(db: Session = Depends(get_db)) -> DashboardStats:
    scheduled_sections = db.execute(select(func.count(distinct(TimetableEntry.section_id)))).scalar_one()
    return DashboardStats(
        faculty=_count(db, Faculty),
        subjects=_count(db, Subject),
        sections=_count(db, Section),
        classrooms=_count(db, Classroom),
        timetable_entries=_count(db, TimetableEntry),
        sections_with_timetable=int(scheduled_sections),
    )
