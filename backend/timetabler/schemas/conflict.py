from typing import Literal

from pydantic import BaseModel


class ConflictDetail(BaseModel):
    id: str
    conflict_type: Literal[
        "room_conflict",
        "faculty_conflict",
        "section_conflict",
        "room_type",
        "break_overlap",
        "invalid_duration",
        "duplicate_daily_lecture",
    ]
    description: str
    severity: Literal["hard", "soft"] = "hard"
    affected_entries: list[str]


class ConflictReport(BaseModel):
    conflicts: list[ConflictDetail]
    checked_entries: int
    is_clean: bool
