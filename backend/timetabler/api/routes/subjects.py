from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from timetabler.api.deps import get_db
from timetabler.models.faculty_subject import FacultySubject
from timetabler.models.subject import Subject, YearLevel
from timetabler.models.timetable_entry import TimetableEntry
from timetabler.schemas.subject import SubjectCreate, SubjectOut, SubjectUpdate

router = APIRouter()


@router.get("/", response_model=list[SubjectOut])
def list_subjects(
    year_level: YearLevel | None = Query(default=None),
    db: Session = Depends(get_db),
) -> list[SubjectOut]:
    query = select(Subject).order_by(Subject.code)
    if year_level is not None:
        query = query.where(Subject.year_level == year_level)
    return list(db.execute(query).scalars())


@router.post("/", response_model=SubjectOut, status_code=status.HTTP_201_CREATED)
def create_subject(payload: SubjectCreate, db: Session = Depends(get_db)) -> SubjectOut:
    existing = db.execute(select(Subject).where(Subject.code == payload.code)).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Subject code already exists")
    subject = Subject(**payload.model_dump())
    db.add(subject)
    db.commit()
    db.refresh(subject)
    return subject


@router.put("/{subject_id}", response_model=SubjectOut)
def update_subject(subject_id: str, payload: SubjectUpdate, db: Session = Depends(get_db)) -> SubjectOut:
    subject = db.get(Subject, subject_id)
    if subject is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Subject not found")

    data = payload.model_dump(exclude_unset=True)
    if "code" in data:
        existing = db.execute(
            select(Subject).where(Subject.code == data["code"], Subject.id != subject_id)
        ).scalar_one_or_none()
        if existing:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Subject code already exists")

    for key, value in data.items():
        setattr(subject, key, value)
    db.commit()
    db.refresh(subject)
    return subject


@router.delete("/{subject_id}")
def delete_subject(subject_id: str, db: Session = Depends(get_db)) -> dict:
    subject = db.get(Subject, subject_id)
    if subject is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Subject not found")
    db.execute(delete(FacultySubject).where(FacultySubject.subject_id == subject_id))
    db.execute(delete(TimetableEntry).where(TimetableEntry.subject_id == subject_id))
    db.delete(subject)
    db.commit()
    return {"success": True}
