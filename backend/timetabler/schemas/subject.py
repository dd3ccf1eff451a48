from pydantic import BaseModel, Field, field_validator

from timetabler.models.subject import YearLevel


class SubjectBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    code: str = Field(min_length=1, max_length=50)
    year_level: YearLevel
    weekly_hours: int = Field(ge=1, le=40)
    has_lab: bool = False
    has_tutorial: bool = False

    @field_validator("code")
    @classmethod
    def normalize_code(cls, value: str) -> str:
        code = value.strip().upper()
        if not code:
            raise ValueError("Subject code cannot be blank")
        return code


class SubjectCreate(SubjectBase):
    pass


class SubjectUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    code: str | None = Field(default=None, min_length=1, max_length=50)
    year_level: YearLevel | None = None
    weekly_hours: int | None = Field(default=None, ge=1, le=40)
    has_lab: bool | None = None
    has_tutorial: bool | None = None

    @field_validator("code")
    @classmethod
    def normalize_code(cls, value: str | None) -> str | None:
        if value is None:
            return value
        code = value.strip().upper()
        if not code:
            raise ValueError("Subject code cannot be blank")
        return code


class SubjectOut(SubjectBase):
    id: str

    model_config = {"from_attributes": True}
