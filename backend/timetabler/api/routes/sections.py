from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from timetabler.api.deps import get_db
from timetabler.models.section import Section
from timetabler.models.timetable_entry import TimetableEntry
from timetabler.schemas.section import SectionCreate, SectionOut, SectionUpdate

router = APIRouter()


@router.get("/", response_model=list[SectionOut])
def list_sections(db: Session = Depends(get_db)) -> list[SectionOut]:
    return list(db.execute(select(Section).order_by(Section.name)).scalars())


@router.get("/{section_id}", response_model=SectionOut)
def get_section(section_id: str, db: Session = Depends(get_db)) -> SectionOut:
    section = db.get(Section, section_id)
    if section is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Section not found")
    return section


@router.post("/", response_model=SectionOut, status_code=status.HTTP_201_CREATED)
def create_section(payload: SectionCreate, db: Session = Depends(get_db)) -> SectionOut:
    existing = db.execute(select(Section).where(Section.name == payload.name)).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Section name already exists")
    section = Section(**payload.model_dump())
    db.add(section)
    db.commit()
    db.refresh(section)
    return section


@router.put("/{section_id}", response_model=SectionOut)
def update_section(section_id: str, payload: SectionUpdate, db: Session = Depends(get_db)) -> SectionOut:
    section = db.get(Section, section_id)
    if section is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Section not found")

    data = payload.model_dump(exclude_unset=True)
    if "name" in data:
        existing = db.execute(
            select(Section).where(Section.name == data["name"], Section.id != section_id)
        ).scalar_one_or_none()
        if existing:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Section name already exists")

    for key, value in data.items():
        setattr(section, key, value)
    db.commit()
    db.refresh(section)
    return section


@router.delete("/{section_id}")
def delete_section(section_id: str, db: Session = Depends(get_db)) -> dict:
    section = db.get(Section, section_id)
    if section is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Section not found")
    db.execute(delete(TimetableEntry).where(TimetableEntry.section_id == section_id))
    db.delete(section)
    db.commit()
    return {"success": True}
