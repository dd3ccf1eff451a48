import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, DateTime, Enum as SAEnum, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from timetabler.db.base import Base


class YearLevel(str, Enum):
    FY = "FY"
    SY = "SY"
    TY = "TY"
    final_year = "Final Year"


class Subject(Base):
    __tablename__ = "subjects"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    code: Mapped[str] = mapped_column(String(50), unique=True, index=True, nullable=False)
    year_level: Mapped[YearLevel] = mapped_column(
        SAEnum(YearLevel, name="year_level", values_callable=lambda items: [item.value for item in items]),
        nullable=False,
        index=True,
    )
    weekly_hours: Mapped[int] = mapped_column(Integer, nullable=False, default=3)
    has_lab: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    has_tutorial: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())
