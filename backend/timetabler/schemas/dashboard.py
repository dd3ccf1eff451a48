from pydantic import BaseModel


class DashboardStats(BaseModel):
    faculty: int
    subjects: int
    sections: int
    classrooms: int
    timetable_entries: int
    sections_with_timetable: int
