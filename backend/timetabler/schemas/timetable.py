from pydantic import BaseModel

from timetabler.models.timetable_entry import DayOfWeek, SessionType


class TimeSlotOut(BaseModel):
    index: int
    start_time: str
    end_time: str
    is_break: bool


class WeeklyGridOut(BaseModel):
    days: list[str]
    slot_minutes: int
    break_slot: int
    slots: list[TimeSlotOut]


class TimetableEntryOut(BaseModel):
    id: str
    section_id: str
    subject_id: str
    faculty_id: str
    classroom_id: str
    day_of_week: DayOfWeek
    start_time: str
    end_time: str
    session_type: SessionType
    batch_number: int | None = None
    batch_name: str | None = None
    section_name: str | None = None
    subject_code: str | None = None
    subject_name: str | None = None
    faculty_name: str | None = None
    classroom_name: str | None = None


class SectionTimetableOut(BaseModel):
    section_id: str
    section_name: str
    entries: list[TimetableEntryOut]


class ClassroomTimetableOut(BaseModel):
    classroom_id: str
    classroom_name: str
    entries: list[TimetableEntryOut]
