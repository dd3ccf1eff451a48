from pydantic import BaseModel, EmailStr, Field, field_validator

from timetabler.models.timetable_entry import SessionType


class FacultyBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    email: EmailStr | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        name = value.strip()
        if not name:
            raise ValueError("Name cannot be blank")
        return name


class FacultyCreate(FacultyBase):
    pass


class FacultyUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    email: EmailStr | None = None


class FacultyOut(FacultyBase):
    id: str

    model_config = {"from_attributes": True}


class FacultySubjectCreate(BaseModel):
    subject_id: str = Field(min_length=1, max_length=36)
    subject_types: list[SessionType] = Field(default_factory=lambda: [SessionType.lecture], min_length=1, max_length=3)

    @field_validator("subject_types")
    @classmethod
    def dedupe_subject_types(cls, value: list[SessionType]) -> list[SessionType]:
        seen: set[SessionType] = set()
        ordered: list[SessionType] = []
        for item in value:
            if item in seen:
                continue
            seen.add(item)
            ordered.append(item)
        return ordered


class FacultySubjectOut(BaseModel):
    id: str
    faculty_id: str
    subject_id: str
    subject_code: str | None = None
    subject_name: str | None = None
    subject_types: list[str]
