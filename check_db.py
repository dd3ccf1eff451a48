from sqlalchemy import func, select

from timetabler.core.config import get_settings
from timetabler.db.session import SessionLocal
from timetabler.models.classroom import Classroom
from timetabler.models.faculty import Faculty
from timetabler.models.section import Section
from timetabler.models.subject import Subject
from timetabler.models.timetable_entry import TimetableEntry
from timetabler.services.conflict_service import audit_timetable
from timetabler.services.generation import build_weekly_grid

db = SessionLocal()
try:
    for model in (Faculty, Subject, Section, Classroom, TimetableEntry):
        count = db.execute(select(func.count()).select_from(model)).scalar_one()
        print(f"{model.__tablename__}: {count}")

    report = audit_timetable(db, build_weekly_grid(get_settings()))
    print(f"Checked entries: {report.checked_entries}")
    print(f"Conflicts: {len(report.conflicts)}")
    for conflict in report.conflicts[:20]:
        print(f"  - [{conflict.conflict_type}] {conflict.description}")
finally:
    db.close()
