from timetabler.models.activity_log import ActivityLog  # noqa: F401
from timetabler.models.classroom import Classroom, RoomType  # noqa: F401
from timetabler.models.faculty import Faculty  # noqa: F401
from timetabler.models.faculty_subject import FacultySubject  # noqa: F401
from timetabler.models.section import Section  # noqa: F401
from timetabler.models.subject import Subject, YearLevel  # noqa: F401
from timetabler.models.timetable_entry import DayOfWeek, SessionType, TimetableEntry  # noqa: F401
