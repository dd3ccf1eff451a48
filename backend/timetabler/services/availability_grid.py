from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from timetabler.services.time_grid import WeeklyGrid, parse_time_to_minutes

logger = logging.getLogger(__name__)


class ResourceKind(str, Enum):
    faculty = "faculty"
    room = "room"
    section = "section"


@dataclass(frozen=True)
class ExistingBooking:
    """A committed entry of another section, as read from the catalog."""

    section_id: str
    faculty_id: str
    classroom_id: str
    day: str
    start_time: str
    end_time: str


class AvailabilityGrid:
    """Per-day, per-slot busy sets for faculty, rooms and the section being generated.

    One grid belongs to exactly one generation run. It is seeded from other sections'
    entries and then mutated as the engine commits sessions.
    """

    def __init__(self, weekly_grid: WeeklyGrid) -> None:
        self.weekly_grid = weekly_grid
        self._busy: dict[tuple[ResourceKind, str, int], set[str]] = defaultdict(set)

    @classmethod
    def seeded(cls, weekly_grid: WeeklyGrid, bookings: Iterable[ExistingBooking]) -> "AvailabilityGrid":
        grid = cls(weekly_grid)
        seeded_count = 0
        for booking in bookings:
            slots = weekly_grid.slots_overlapping(
                parse_time_to_minutes(booking.start_time),
                parse_time_to_minutes(booking.end_time),
            )
            if not slots:
                logger.warning(
                    "Existing entry lies outside the slot grid | section_id=%s day=%s start=%s end=%s",
                    booking.section_id,
                    booking.day,
                    booking.start_time,
                    booking.end_time,
                )
                continue
            grid.mark_busy(ResourceKind.faculty, booking.faculty_id, booking.day, slots)
            grid.mark_busy(ResourceKind.room, booking.classroom_id, booking.day, slots)
            seeded_count += 1
        logger.debug("Availability grid seeded | bookings=%s", seeded_count)
        return grid

    def mark_busy(self, kind: ResourceKind, resource_id: str, day: str, slots: Iterable[int]) -> None:
        for slot in slots:
            self._busy[(kind, day, slot)].add(resource_id)

    def busy_ids(self, kind: ResourceKind, day: str, slot: int) -> frozenset[str]:
        return frozenset(self._busy.get((kind, day, slot), ()))

    def is_free(self, kind: ResourceKind, resource_id: str, day: str, start_slot: int, duration: int) -> bool:
        if day not in self.weekly_grid.days:
            return False
        if not self.weekly_grid.is_placeable(start_slot, duration):
            return False
        for slot in range(start_slot, start_slot + duration):
            if resource_id in self._busy.get((kind, day, slot), ()):
                return False
        return True

    def reserve(
        self,
        faculty_id: str,
        room_id: str,
        day: str,
        start_slot: int,
        duration: int,
        *,
        section_id: str | None = None,
    ) -> None:
        # Callers check is_free first; reserve does not re-validate.
        slots = range(start_slot, start_slot + duration)
        self.mark_busy(ResourceKind.faculty, faculty_id, day, slots)
        self.mark_busy(ResourceKind.room, room_id, day, slots)
        if section_id is not None:
            self.mark_busy(ResourceKind.section, section_id, day, slots)
