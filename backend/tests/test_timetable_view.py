from timetabler.models.classroom import Classroom, RoomType
from timetabler.models.faculty import Faculty
from timetabler.models.section import Section
from timetabler.models.subject import Subject, YearLevel
from timetabler.models.timetable_entry import DayOfWeek, SessionType, TimetableEntry
from timetabler.services.batches import split_batches
from timetabler.services.timetable_view import build_entry_views


def _entry(section_id, subject_id, faculty_id, room_id, day, start, end, session_type, batch_number=None):
    return TimetableEntry(
        section_id=section_id,
        subject_id=subject_id,
        faculty_id=faculty_id,
        classroom_id=room_id,
        day_of_week=day,
        start_time=start,
        end_time=end,
        session_type=session_type,
        batch_number=batch_number,
    )


def test_entry_views_label_batches_like_the_batch_splitter(db_session):
    section = Section(name="SY-C", year_level=YearLevel.SY, student_count=45)
    subject = Subject(name="Chemistry", code="CHEM201", year_level=YearLevel.SY, weekly_hours=3, has_lab=True)
    instructor = Faculty(name="Dr. Ada Park", email="ada.park@example.com")
    lab = Classroom(name="Lab 9", room_type=RoomType.lab, capacity=30)
    lecture_room = Classroom(name="Room 9", room_type=RoomType.lecture, capacity=60)
    db_session.add_all([section, subject, instructor, lab, lecture_room])
    db_session.flush()

    entries = [
        _entry(section.id, subject.id, instructor.id, lab.id, DayOfWeek.Tuesday, "09:00", "11:00", SessionType.lab, 2),
        _entry(
            section.id, subject.id, instructor.id, lecture_room.id, DayOfWeek.Monday, "08:00", "09:00", SessionType.lecture
        ),
        _entry("missing-section", subject.id, instructor.id, lab.id, DayOfWeek.Friday, "09:00", "11:00", SessionType.lab, 1),
    ]
    db_session.add_all(entries)
    db_session.commit()

    views = build_entry_views(db_session, entries)

    assert [view.day_of_week for view in views] == [DayOfWeek.Monday, DayOfWeek.Tuesday, DayOfWeek.Friday]
    lecture, lab_view, orphan = views
    assert lecture.batch_name is None
    assert lecture.section_name == "SY-C"
    assert lab_view.batch_name == split_batches(section.id, section.name)[1].name == "SY-C2"
    assert lab_view.classroom_name == "Lab 9"
    assert orphan.section_name is None
    assert orphan.batch_name is None
