from __future__ import annotations

from collections import defaultdict
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from timetabler.models.classroom import Classroom
from timetabler.models.faculty import Faculty
from timetabler.models.section import Section
from timetabler.models.subject import Subject
from timetabler.models.timetable_entry import SessionType, TimetableEntry
from timetabler.schemas.conflict import ConflictDetail, ConflictReport
from timetabler.services.time_grid import WeeklyGrid, parse_time_to_minutes
from timetabler.services.timetable_scheduler import SESSION_DURATION


def _value(item: object) -> str:
    return str(getattr(item, "value", item))


class ConflictService:
    """Audits stored timetable entries across every section."""

    def __init__(
        self,
        entries: Sequence[TimetableEntry],
        *,
        weekly_grid: WeeklyGrid,
        room_map: dict[str, dict],
        faculty_map: dict[str, dict],
        section_map: dict[str, dict],
        subject_map: dict[str, dict],
    ):
        self.entries = list(entries)
        self.weekly_grid = weekly_grid
        self.room_map = room_map
        self.faculty_map = faculty_map
        self.section_map = section_map
        self.subject_map = subject_map

    def _subject_label(self, subject_id: str) -> str:
        return self.subject_map.get(subject_id, {}).get("code", subject_id)

    def detect_conflicts(self) -> ConflictReport:
        conflicts: list[ConflictDetail] = []
        break_start = self.weekly_grid.slot_start_minutes(self.weekly_grid.break_slot)
        break_end = break_start + self.weekly_grid.slot_minutes

        entries_by_day: dict[str, list[TimetableEntry]] = defaultdict(list)
        lectures_per_day: dict[tuple[str, str, str], list[str]] = defaultdict(list)
        for entry in self.entries:
            day = _value(entry.day_of_week)
            entries_by_day[day].append(entry)
            session_type = SessionType(_value(entry.session_type))
            start, end = parse_time_to_minutes(entry.start_time), parse_time_to_minutes(entry.end_time)
            subject_label = self._subject_label(entry.subject_id)

            room = self.room_map.get(entry.classroom_id)
            if room and room.get("room_type") != session_type.value:
                conflicts.append(
                    ConflictDetail(
                        id=f"type-{entry.id}",
                        conflict_type="room_type",
                        description=(
                            f"{session_type.value.title()} session of {subject_label} held in "
                            f"{room.get('room_type')} room {room.get('name')}"
                        ),
                        affected_entries=[entry.id],
                    )
                )

            if start < break_end and break_start < end:
                conflicts.append(
                    ConflictDetail(
                        id=f"break-{entry.id}",
                        conflict_type="break_overlap",
                        description=f"{subject_label} on {day} {entry.start_time}-{entry.end_time} overlaps the break",
                        affected_entries=[entry.id],
                    )
                )

            expected_minutes = SESSION_DURATION[session_type] * self.weekly_grid.slot_minutes
            if end - start != expected_minutes:
                conflicts.append(
                    ConflictDetail(
                        id=f"dur-{entry.id}",
                        conflict_type="invalid_duration",
                        description=(
                            f"{session_type.value.title()} session of {subject_label} lasts {end - start} minutes, "
                            f"expected {expected_minutes}"
                        ),
                        affected_entries=[entry.id],
                    )
                )

            if session_type == SessionType.lecture:
                lectures_per_day[(entry.section_id, entry.subject_id, day)].append(entry.id)

        for (section_id, subject_id, day), entry_ids in lectures_per_day.items():
            if len(entry_ids) > 1:
                section_name = self.section_map.get(section_id, {}).get("name", section_id)
                conflicts.append(
                    ConflictDetail(
                        id=f"lec-{section_id}-{subject_id}-{day}",
                        conflict_type="duplicate_daily_lecture",
                        description=(
                            f"{len(entry_ids)} lectures of {self._subject_label(subject_id)} "
                            f"for {section_name} on {day}"
                        ),
                        affected_entries=sorted(entry_ids),
                    )
                )

        for day, day_entries in entries_by_day.items():
            n = len(day_entries)
            for i in range(n):
                e1 = day_entries[i]
                start1, end1 = parse_time_to_minutes(e1.start_time), parse_time_to_minutes(e1.end_time)
                for j in range(i + 1, n):
                    e2 = day_entries[j]
                    start2, end2 = parse_time_to_minutes(e2.start_time), parse_time_to_minutes(e2.end_time)
                    if max(start1, start2) >= min(end1, end2):
                        continue
                    label = f"{self._subject_label(e1.subject_id)} and {self._subject_label(e2.subject_id)}"
                    if e1.classroom_id == e2.classroom_id:
                        room_name = self.room_map.get(e1.classroom_id, {}).get("name", e1.classroom_id)
                        conflicts.append(
                            ConflictDetail(
                                id=f"room-{e1.id}-{e2.id}",
                                conflict_type="room_conflict",
                                description=f"Room overlap in {room_name} on {day}: {label}",
                                affected_entries=[e1.id, e2.id],
                            )
                        )
                    if e1.faculty_id == e2.faculty_id:
                        faculty_name = self.faculty_map.get(e1.faculty_id, {}).get("name", e1.faculty_id)
                        conflicts.append(
                            ConflictDetail(
                                id=f"fac-{e1.id}-{e2.id}",
                                conflict_type="faculty_conflict",
                                description=f"Faculty overlap for {faculty_name} on {day}: {label}",
                                affected_entries=[e1.id, e2.id],
                            )
                        )
                    if e1.section_id == e2.section_id:
                        # Different batches of a section may run in parallel.
                        if e1.batch_number and e2.batch_number and e1.batch_number != e2.batch_number:
                            continue
                        section_name = self.section_map.get(e1.section_id, {}).get("name", e1.section_id)
                        conflicts.append(
                            ConflictDetail(
                                id=f"sec-{e1.id}-{e2.id}",
                                conflict_type="section_conflict",
                                description=f"Section overlap for {section_name} on {day}: {label}",
                                affected_entries=[e1.id, e2.id],
                            )
                        )

        return ConflictReport(
            conflicts=conflicts,
            checked_entries=len(self.entries),
            is_clean=not conflicts,
        )


def audit_timetable(db: Session, weekly_grid: WeeklyGrid) -> ConflictReport:
    entries = list(db.execute(select(TimetableEntry)).scalars())
    room_map = {
        room.id: {"name": room.name, "room_type": _value(room.room_type)}
        for room in db.execute(select(Classroom)).scalars()
    }
    faculty_map = {item.id: {"name": item.name} for item in db.execute(select(Faculty)).scalars()}
    section_map = {item.id: {"name": item.name} for item in db.execute(select(Section)).scalars()}
    subject_map = {item.id: {"code": item.code} for item in db.execute(select(Subject)).scalars()}
    return ConflictService(
        entries,
        weekly_grid=weekly_grid,
        room_map=room_map,
        faculty_map=faculty_map,
        section_map=section_map,
        subject_map=subject_map,
    ).detect_conflicts()
