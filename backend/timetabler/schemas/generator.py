from pydantic import BaseModel, Field

from timetabler.models.timetable_entry import SessionType
from timetabler.schemas.timetable import TimetableEntryOut


class GenerateTimetableRequest(BaseModel):
    random_seed: int | None = Field(default=None, ge=0, le=2**63 - 1)


class CoverageItemOut(BaseModel):
    subject_id: str
    subject_code: str
    session_type: SessionType
    target_sessions: int
    scheduled_sessions: int
    faculty_id: str | None = None
    shortfall_reason: str | None = None

    model_config = {"from_attributes": True}


class CoverageReport(BaseModel):
    items: list[CoverageItemOut]
    target_sessions: int
    scheduled_sessions: int
    is_complete: bool


class GenerateTimetableResponse(BaseModel):
    section_id: str
    section_name: str
    seed: int
    runtime_ms: int
    entries: list[TimetableEntryOut]
    coverage: CoverageReport
