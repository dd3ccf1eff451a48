import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, Enum as SAEnum, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from timetabler.db.base import Base


class SessionType(str, Enum):
    lecture = "lecture"
    lab = "lab"
    tutorial = "tutorial"


class DayOfWeek(str, Enum):
    Monday = "Monday"
    Tuesday = "Tuesday"
    Wednesday = "Wednesday"
    Thursday = "Thursday"
    Friday = "Friday"
    Saturday = "Saturday"
    Sunday = "Sunday"


class TimetableEntry(Base):
    __tablename__ = "timetable_entries"
    __table_args__ = (
        Index("ix_timetable_entries_day_time", "day_of_week", "start_time", "end_time"),
        Index("ix_timetable_entries_faculty_day_time", "faculty_id", "day_of_week", "start_time"),
        Index("ix_timetable_entries_classroom_day_time", "classroom_id", "day_of_week", "start_time"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    section_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    subject_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    faculty_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    classroom_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    day_of_week: Mapped[DayOfWeek] = mapped_column(SAEnum(DayOfWeek, name="day_of_week"), nullable=False)
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)
    end_time: Mapped[str] = mapped_column(String(5), nullable=False)
    session_type: Mapped[SessionType] = mapped_column(
        SAEnum(SessionType, name="session_type"), nullable=False, default=SessionType.lecture
    )
    # Null for lectures, 1..3 for lab and tutorial batches.
    batch_number: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
