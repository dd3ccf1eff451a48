from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from timetabler.api.deps import get_db
from timetabler.models.faculty import Faculty
from timetabler.models.faculty_subject import FacultySubject
from timetabler.models.subject import Subject
from timetabler.models.timetable_entry import TimetableEntry
from timetabler.schemas.faculty import (
    FacultyCreate,
    FacultyOut,
    FacultySubjectCreate,
    FacultySubjectOut,
    FacultyUpdate,
)

router = APIRouter()


def _get_faculty_or_404(db: Session, faculty_id: str) -> Faculty:
    faculty = db.get(Faculty, faculty_id)
    if faculty is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Faculty member not found")
    return faculty


def _assignment_out(assignment: FacultySubject, subject: Subject | None) -> FacultySubjectOut:
    return FacultySubjectOut(
        id=assignment.id,
        faculty_id=assignment.faculty_id,
        subject_id=assignment.subject_id,
        subject_code=subject.code if subject is not None else None,
        subject_name=subject.name if subject is not None else None,
        subject_types=list(assignment.subject_types or []),
    )


@router.get("/", response_model=list[FacultyOut])
def list_faculty(db: Session = Depends(get_db)) -> list[FacultyOut]:
    return list(db.execute(select(Faculty).order_by(Faculty.name)).scalars())


@router.post("/", response_model=FacultyOut, status_code=status.HTTP_201_CREATED)
def create_faculty(payload: FacultyCreate, db: Session = Depends(get_db)) -> FacultyOut:
    if payload.email is not None:
        existing = db.execute(select(Faculty).where(Faculty.email == payload.email)).scalar_one_or_none()
        if existing:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Faculty email already exists")
    faculty = Faculty(**payload.model_dump())
    db.add(faculty)
    db.commit()
    db.refresh(faculty)
    return faculty


@router.put("/{faculty_id}", response_model=FacultyOut)
def update_faculty(faculty_id: str, payload: FacultyUpdate, db: Session = Depends(get_db)) -> FacultyOut:
    faculty = _get_faculty_or_404(db, faculty_id)
    data = payload.model_dump(exclude_unset=True)
    if data.get("email") is not None:
        existing = db.execute(
            select(Faculty).where(Faculty.email == data["email"], Faculty.id != faculty_id)
        ).scalar_one_or_none()
        if existing:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Faculty email already exists")
    for key, value in data.items():
        setattr(faculty, key, value)
    db.commit()
    db.refresh(faculty)
    return faculty


@router.delete("/{faculty_id}")
def delete_faculty(faculty_id: str, db: Session = Depends(get_db)) -> dict:
    faculty = _get_faculty_or_404(db, faculty_id)
    db.execute(delete(FacultySubject).where(FacultySubject.faculty_id == faculty_id))
    db.execute(delete(TimetableEntry).where(TimetableEntry.faculty_id == faculty_id))
    db.delete(faculty)
    db.commit()
    return {"success": True}


@router.get("/{faculty_id}/subjects", response_model=list[FacultySubjectOut])
def list_faculty_subjects(faculty_id: str, db: Session = Depends(get_db)) -> list[FacultySubjectOut]:
    _get_faculty_or_404(db, faculty_id)
    rows = db.execute(
        select(FacultySubject, Subject)
        .outerjoin(Subject, Subject.id == FacultySubject.subject_id)
        .where(FacultySubject.faculty_id == faculty_id)
        .order_by(Subject.code)
    ).all()
    return [_assignment_out(assignment, subject) for assignment, subject in rows]


@router.post(
    "/{faculty_id}/subjects",
    response_model=FacultySubjectOut,
    status_code=status.HTTP_201_CREATED,
)
def assign_faculty_subject(
    faculty_id: str,
    payload: FacultySubjectCreate,
    db: Session = Depends(get_db),
) -> FacultySubjectOut:
    _get_faculty_or_404(db, faculty_id)
    subject = db.get(Subject, payload.subject_id)
    if subject is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Subject not found")
    existing = db.execute(
        select(FacultySubject).where(
            FacultySubject.faculty_id == faculty_id,
            FacultySubject.subject_id == payload.subject_id,
        )
    ).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Subject already assigned to faculty")

    assignment = FacultySubject(
        faculty_id=faculty_id,
        subject_id=payload.subject_id,
        subject_types=[item.value for item in payload.subject_types],
    )
    db.add(assignment)
    db.commit()
    db.refresh(assignment)
    return _assignment_out(assignment, subject)


@router.delete("/{faculty_id}/subjects/{assignment_id}")
def remove_faculty_subject(faculty_id: str, assignment_id: str, db: Session = Depends(get_db)) -> dict:
    assignment = db.get(FacultySubject, assignment_id)
    if assignment is None or assignment.faculty_id != faculty_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Subject assignment not found")
    db.delete(assignment)
    db.commit()
    return {"success": True}
