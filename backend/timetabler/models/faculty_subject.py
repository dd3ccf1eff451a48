import uuid
from datetime import datetime

from sqlalchemy import DateTime, JSON, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from timetabler.db.base import Base


class FacultySubject(Base):
    """Capability row: which session types a faculty member may teach for a subject."""

    __tablename__ = "faculty_subjects"
    __table_args__ = (
        UniqueConstraint("faculty_id", "subject_id", name="uq_faculty_subjects_faculty_subject"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    faculty_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    subject_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    subject_types: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=lambda: ["lecture"])
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
