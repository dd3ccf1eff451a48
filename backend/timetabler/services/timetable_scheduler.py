from __future__ import annotations

from collections import defaultdict
import logging
import random
from dataclasses import dataclass, field
from typing import Literal

from timetabler.models.timetable_entry import SessionType
from timetabler.services.availability_grid import AvailabilityGrid, ExistingBooking, ResourceKind
from timetabler.services.batches import split_batches
from timetabler.services.time_grid import WeeklyGrid

logger = logging.getLogger(__name__)

SESSION_DURATION: dict[SessionType, int] = {
    SessionType.lecture: 1,
    SessionType.lab: 2,
    SessionType.tutorial: 1,
}

ShortfallReason = Literal["no_qualified_faculty", "no_rooms", "insufficient_capacity"]


@dataclass(frozen=True)
class SectionSnapshot:
    id: str
    name: str
    year_level: str
    student_count: int


@dataclass(frozen=True)
class SubjectSnapshot:
    id: str
    code: str
    name: str
    weekly_hours: int
    has_lab: bool
    has_tutorial: bool


@dataclass(frozen=True)
class CapabilitySnapshot:
    faculty_id: str
    subject_id: str
    session_types: frozenset[SessionType]


@dataclass(frozen=True)
class ClassroomSnapshot:
    id: str
    name: str
    room_type: SessionType
    capacity: int


@dataclass(frozen=True)
class GenerationInputs:
    section: SectionSnapshot
    subjects: tuple[SubjectSnapshot, ...]
    capabilities: tuple[CapabilitySnapshot, ...]
    classrooms: tuple[ClassroomSnapshot, ...]
    existing_bookings: tuple[ExistingBooking, ...] = ()

    def classrooms_of(self, session_type: SessionType) -> list[ClassroomSnapshot]:
        return [room for room in self.classrooms if room.room_type == session_type]


@dataclass(frozen=True)
class PlannedSession:
    section_id: str
    subject_id: str
    faculty_id: str
    classroom_id: str
    day: str
    start_slot: int
    end_slot: int
    session_type: SessionType
    batch_number: int | None = None

    @property
    def duration(self) -> int:
        return self.end_slot - self.start_slot


@dataclass
class CoverageItem:
    subject_id: str
    subject_code: str
    session_type: SessionType
    target_sessions: int
    scheduled_sessions: int = 0
    faculty_id: str | None = None
    shortfall_reason: ShortfallReason | None = None

    @property
    def is_short(self) -> bool:
        return self.scheduled_sessions < self.target_sessions


@dataclass
class ScheduleResult:
    entries: list[PlannedSession] = field(default_factory=list)
    coverage: list[CoverageItem] = field(default_factory=list)

    @property
    def under_coverage(self) -> list[CoverageItem]:
        return [item for item in self.coverage if item.is_short]

    @property
    def is_complete(self) -> bool:
        return not self.under_coverage


class TimetableScheduler:
    """Two-phase greedy allocator for one section's weekly timetable.

    Phase 1 places one-slot lectures (at most one per subject per day). Phase 2 places
    lab (two-slot) and tutorial (one-slot) sessions for each of the section's three batches.
    Every placement is checked against the shared availability grid, so faculty and rooms
    already committed by other sections are never double-booked. Missing faculty, rooms or
    free slots reduce coverage but never abort the run.
    """

    def __init__(
        self,
        *,
        inputs: GenerationInputs,
        weekly_grid: WeeklyGrid,
        availability: AvailabilityGrid,
        rng: random.Random,
    ) -> None:
        self.inputs = inputs
        self.section = inputs.section
        self.weekly_grid = weekly_grid
        self.availability = availability
        self.random = rng

        self.rooms_by_type = {session_type: inputs.classrooms_of(session_type) for session_type in SessionType}
        self.faculty_load: dict[str, int] = defaultdict(int)
        self.room_cursor: dict[SessionType, int] = defaultdict(int)
        self.lectured_subjects_by_day: dict[str, set[str]] = defaultdict(set)
        self.result = ScheduleResult()

    def run(self) -> ScheduleResult:
        logger.info(
            "Scheduler run | section_id=%s section=%s subjects=%s classrooms=%s",
            self.section.id,
            self.section.name,
            len(self.inputs.subjects),
            len(self.inputs.classrooms),
        )
        for subject in self.inputs.subjects:
            self._schedule_lectures(subject)

        for subject in self.inputs.subjects:
            if subject.has_lab:
                self._schedule_batch_sessions(subject, SessionType.lab)
            if subject.has_tutorial:
                self._schedule_batch_sessions(subject, SessionType.tutorial)

        target = sum(item.target_sessions for item in self.result.coverage)
        scheduled = sum(item.scheduled_sessions for item in self.result.coverage)
        logger.info(
            "Scheduler finished | section_id=%s entries=%s scheduled=%s target=%s under_covered=%s",
            self.section.id,
            len(self.result.entries),
            scheduled,
            target,
            len(self.result.under_coverage),
        )
        return self.result

    def qualified_faculty(self, subject_id: str, session_type: SessionType) -> list[str]:
        return sorted(
            {
                capability.faculty_id
                for capability in self.inputs.capabilities
                if capability.subject_id == subject_id and session_type in capability.session_types
            }
        )

    def least_loaded(self, faculty_ids: list[str]) -> str:
        return min(faculty_ids, key=lambda faculty_id: (self.faculty_load[faculty_id], faculty_id))

    def _open_coverage(self, subject: SubjectSnapshot, session_type: SessionType, target: int) -> CoverageItem:
        item = CoverageItem(
            subject_id=subject.id,
            subject_code=subject.code,
            session_type=session_type,
            target_sessions=target,
        )
        self.result.coverage.append(item)
        return item

    def _assign_faculty(self, subject: SubjectSnapshot, item: CoverageItem) -> str | None:
        qualified = self.qualified_faculty(subject.id, item.session_type)
        if not qualified:
            item.shortfall_reason = "no_qualified_faculty"
            logger.warning(
                "No qualified faculty; skipping | section_id=%s subject=%s session_type=%s",
                self.section.id,
                subject.code,
                item.session_type.value,
            )
            return None
        if not self.rooms_by_type[item.session_type]:
            item.shortfall_reason = "no_rooms"
            logger.warning(
                "No classrooms of required type; skipping | section_id=%s subject=%s room_type=%s",
                self.section.id,
                subject.code,
                item.session_type.value,
            )
            return None
        faculty_id = self.least_loaded(qualified)
        item.faculty_id = faculty_id
        return faculty_id

    def _schedule_lectures(self, subject: SubjectSnapshot) -> None:
        item = self._open_coverage(subject, SessionType.lecture, subject.weekly_hours)
        faculty_id = self._assign_faculty(subject, item)
        if faculty_id is None:
            return

        remaining = subject.weekly_hours
        candidate_days = list(self.weekly_grid.days)
        self.random.shuffle(candidate_days)
        for day in candidate_days:
            if remaining <= 0:
                break
            if subject.id in self.lectured_subjects_by_day[day]:
                continue
            placement = self._find_placement(SessionType.lecture, day, faculty_id)
            if placement is None:
                continue
            room, start_slot = placement
            self._commit(subject, faculty_id, room, day, start_slot, SessionType.lecture, None)
            self.lectured_subjects_by_day[day].add(subject.id)
            item.scheduled_sessions += 1
            remaining -= 1

        if item.is_short:
            item.shortfall_reason = "insufficient_capacity"
            logger.warning(
                "Lecture quota not met | section_id=%s subject=%s scheduled=%s target=%s",
                self.section.id,
                subject.code,
                item.scheduled_sessions,
                item.target_sessions,
            )

    def _schedule_batch_sessions(self, subject: SubjectSnapshot, session_type: SessionType) -> None:
        batches = split_batches(self.section.id, self.section.name)
        item = self._open_coverage(subject, session_type, len(batches))
        # One instructor teaches every batch of the subject.
        faculty_id = self._assign_faculty(subject, item)
        if faculty_id is None:
            return

        self.random.shuffle(batches)
        for batch in batches:
            days = list(self.weekly_grid.days)
            self.random.shuffle(days)
            placed = False
            for day in days:
                placement = self._find_placement(session_type, day, faculty_id)
                if placement is None:
                    continue
                room, start_slot = placement
                self._commit(subject, faculty_id, room, day, start_slot, session_type, batch.number)
                item.scheduled_sessions += 1
                placed = True
                break
            if not placed:
                logger.warning(
                    "Batch session omitted | section_id=%s subject=%s session_type=%s batch=%s",
                    self.section.id,
                    subject.code,
                    session_type.value,
                    batch.name,
                )

        if item.is_short:
            item.shortfall_reason = "insufficient_capacity"

    def _find_placement(
        self,
        session_type: SessionType,
        day: str,
        faculty_id: str,
    ) -> tuple[ClassroomSnapshot, int] | None:
        rooms = self.rooms_by_type[session_type]
        if not rooms:
            return None
        duration = SESSION_DURATION[session_type]
        start_slots = self.weekly_grid.candidate_starts(duration)
        self.random.shuffle(start_slots)

        cursor = self.room_cursor[session_type]
        for offset in range(len(rooms)):
            room_index = (cursor + offset) % len(rooms)
            room = rooms[room_index]
            for start_slot in start_slots:
                if self._slot_is_free(faculty_id, room.id, day, start_slot, duration):
                    self.room_cursor[session_type] = (room_index + 1) % len(rooms)
                    return room, start_slot
        return None

    def _slot_is_free(self, faculty_id: str, room_id: str, day: str, start_slot: int, duration: int) -> bool:
        return (
            self.availability.is_free(ResourceKind.faculty, faculty_id, day, start_slot, duration)
            and self.availability.is_free(ResourceKind.room, room_id, day, start_slot, duration)
            and self.availability.is_free(ResourceKind.section, self.section.id, day, start_slot, duration)
        )

    def _commit(
        self,
        subject: SubjectSnapshot,
        faculty_id: str,
        room: ClassroomSnapshot,
        day: str,
        start_slot: int,
        session_type: SessionType,
        batch_number: int | None,
    ) -> None:
        duration = SESSION_DURATION[session_type]
        self.result.entries.append(
            PlannedSession(
                section_id=self.section.id,
                subject_id=subject.id,
                faculty_id=faculty_id,
                classroom_id=room.id,
                day=day,
                start_slot=start_slot,
                end_slot=start_slot + duration,
                session_type=session_type,
                batch_number=batch_number,
            )
        )
        self.availability.reserve(faculty_id, room.id, day, start_slot, duration, section_id=self.section.id)
        self.faculty_load[faculty_id] += duration
