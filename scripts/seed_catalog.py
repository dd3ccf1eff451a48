"""Seed a small sample catalog for Timetabler.

Run:
  PYTHONPATH=backend python scripts/seed_catalog.py
"""

from __future__ import annotations

from sqlalchemy import func, select

from timetabler.db.bootstrap import ensure_runtime_schema_compatibility
from timetabler.db.session import SessionLocal
from timetabler.models.classroom import Classroom, RoomType
from timetabler.models.faculty import Faculty
from timetabler.models.faculty_subject import FacultySubject
from timetabler.models.section import Section
from timetabler.models.subject import Subject, YearLevel

CLASSROOMS = [
    ("Room 101", RoomType.lecture, 60),
    ("Room 102", RoomType.lecture, 60),
    ("Lab 201", RoomType.lab, 30),
    ("Lab 202", RoomType.lab, 30),
    ("Room 301", RoomType.tutorial, 80),
]

FACULTY = [
    ("Dr. John Smith", "john.smith@college.edu"),
    ("Prof. Sarah Johnson", "sarah.johnson@college.edu"),
    ("Dr. Mike Wilson", "mike.wilson@college.edu"),
    ("Prof. Lisa Davis", "lisa.davis@college.edu"),
]

# name, code, year level, weekly hours, has lab, has tutorial
SUBJECTS = [
    ("Mathematics I", "MATH101", YearLevel.FY, 4, False, True),
    ("Physics I", "PHY101", YearLevel.FY, 3, True, False),
    ("Programming in C", "CS101", YearLevel.FY, 4, True, True),
    ("Data Structures", "CS201", YearLevel.SY, 4, True, False),
    ("Database Systems", "CS301", YearLevel.TY, 3, True, True),
]

SECTIONS = [
    ("FY-A", YearLevel.FY, 60),
    ("FY-B", YearLevel.FY, 60),
    ("SY-A", YearLevel.SY, 55),
    ("TY-A", YearLevel.TY, 50),
]

# faculty email -> {subject code: session types}
CAPABILITIES = {
    "john.smith@college.edu": {"MATH101": ["lecture", "tutorial"], "CS301": ["lecture", "tutorial"]},
    "sarah.johnson@college.edu": {"PHY101": ["lecture", "lab"], "CS101": ["tutorial"]},
    "mike.wilson@college.edu": {"CS101": ["lecture", "lab"], "CS201": ["lecture", "lab"]},
    "lisa.davis@college.edu": {"CS301": ["lab"], "MATH101": ["tutorial"], "CS201": ["lab"]},
}


def upsert_classrooms(session) -> None:
    for name, room_type, capacity in CLASSROOMS:
        room = session.execute(select(Classroom).where(Classroom.name == name)).scalar_one_or_none()
        if room is None:
            session.add(Classroom(name=name, room_type=room_type, capacity=capacity))
            continue
        room.room_type = room_type
        room.capacity = capacity


def upsert_faculty(session) -> dict[str, Faculty]:
    faculty_by_email: dict[str, Faculty] = {}
    for name, email in FACULTY:
        item = session.execute(select(Faculty).where(Faculty.email == email)).scalar_one_or_none()
        if item is None:
            item = Faculty(name=name, email=email)
            session.add(item)
        else:
            item.name = name
        faculty_by_email[email] = item
    session.flush()
    return faculty_by_email


def upsert_subjects(session) -> dict[str, Subject]:
    subjects_by_code: dict[str, Subject] = {}
    for name, code, year_level, weekly_hours, has_lab, has_tutorial in SUBJECTS:
        subject = session.execute(select(Subject).where(Subject.code == code)).scalar_one_or_none()
        if subject is None:
            subject = Subject(code=code)
            session.add(subject)
        subject.name = name
        subject.year_level = year_level
        subject.weekly_hours = weekly_hours
        subject.has_lab = has_lab
        subject.has_tutorial = has_tutorial
        subjects_by_code[code] = subject
    session.flush()
    return subjects_by_code


def upsert_sections(session) -> None:
    for name, year_level, student_count in SECTIONS:
        section = session.execute(select(Section).where(Section.name == name)).scalar_one_or_none()
        if section is None:
            session.add(Section(name=name, year_level=year_level, student_count=student_count))
            continue
        section.year_level = year_level
        section.student_count = student_count


def upsert_capabilities(session, faculty_by_email: dict[str, Faculty], subjects_by_code: dict[str, Subject]) -> None:
    for email, assignments in CAPABILITIES.items():
        faculty = faculty_by_email[email]
        for code, session_types in assignments.items():
            subject = subjects_by_code[code]
            assignment = session.execute(
                select(FacultySubject).where(
                    FacultySubject.faculty_id == faculty.id,
                    FacultySubject.subject_id == subject.id,
                )
            ).scalar_one_or_none()
            if assignment is None:
                session.add(FacultySubject(faculty_id=faculty.id, subject_id=subject.id, subject_types=session_types))
                continue
            assignment.subject_types = session_types


def main() -> None:
    ensure_runtime_schema_compatibility()
    with SessionLocal() as session:
        upsert_classrooms(session)
        faculty_by_email = upsert_faculty(session)
        subjects_by_code = upsert_subjects(session)
        upsert_sections(session)
        upsert_capabilities(session, faculty_by_email, subjects_by_code)

        session.commit()

        counts = {
            model.__tablename__: session.execute(select(func.count()).select_from(model)).scalar_one()
            for model in (Faculty, Subject, Section, Classroom, FacultySubject)
        }

    print("Sample catalog seeded successfully.")
    print("")
    for table_name, count in counts.items():
        print(f"  {table_name}: {count}")
    print("")
    print("Generate a section timetable with:")
    print("  POST /api/timetable/sections/{section_id}/generate")


if __name__ == "__main__":
    main()
