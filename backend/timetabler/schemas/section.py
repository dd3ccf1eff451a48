from pydantic import BaseModel, Field

from timetabler.models.subject import YearLevel


class SectionBase(BaseModel):
    name: str = Field(min_length=1, max_length=50)
    year_level: YearLevel
    student_count: int = Field(default=60, ge=1, le=1000)


class SectionCreate(SectionBase):
    pass


class SectionUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=50)
    year_level: YearLevel | None = None
    student_count: int | None = Field(default=None, ge=1, le=1000)


class SectionOut(SectionBase):
    id: str

    model_config = {"from_attributes": True}
