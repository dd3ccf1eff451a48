from __future__ import annotations

from dataclasses import dataclass

from timetabler.core.config import TIME_PATTERN, Settings


def parse_time_to_minutes(value: str) -> int:
    if not TIME_PATTERN.match(value):
        raise ValueError("Time must be in HH:MM 24-hour format")
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def minutes_to_time(value: int) -> str:
    hours = value // 60
    minutes = value % 60
    return f"{hours:02d}:{minutes:02d}"


@dataclass(frozen=True)
class WeeklyGrid:
    """The repeating weekly template: working days by equal-width slots, one of them a break.

    Slot ``i`` covers ``[day_start + i * slot_minutes, day_start + (i + 1) * slot_minutes)``.
    """

    days: tuple[str, ...]
    day_start_minutes: int
    slot_minutes: int
    slot_count: int
    break_slot: int

    @classmethod
    def from_settings(cls, settings: Settings) -> "WeeklyGrid":
        return cls(
            days=tuple(settings.working_days),
            day_start_minutes=parse_time_to_minutes(settings.day_start_time),
            slot_minutes=settings.slot_minutes,
            slot_count=settings.slots_per_day,
            break_slot=settings.break_slot_index,
        )

    def slot_start_minutes(self, slot: int) -> int:
        return self.day_start_minutes + slot * self.slot_minutes

    def slot_start_time(self, slot: int) -> str:
        return minutes_to_time(self.slot_start_minutes(slot))

    def slot_end_time(self, slot: int) -> str:
        return minutes_to_time(self.slot_start_minutes(slot + 1))

    def interval_times(self, start_slot: int, end_slot: int) -> tuple[str, str]:
        return self.slot_start_time(start_slot), self.slot_start_time(end_slot)

    def within_bounds(self, start_slot: int, duration: int) -> bool:
        return duration >= 1 and start_slot >= 0 and start_slot + duration <= self.slot_count

    def includes_break(self, start_slot: int, duration: int) -> bool:
        return start_slot <= self.break_slot < start_slot + duration

    def is_placeable(self, start_slot: int, duration: int) -> bool:
        return self.within_bounds(start_slot, duration) and not self.includes_break(start_slot, duration)

    def candidate_starts(self, duration: int) -> list[int]:
        return [slot for slot in range(self.slot_count) if self.is_placeable(slot, duration)]

    def slots_overlapping(self, start_min: int, end_min: int) -> list[int]:
        """Grid slots that intersect a wall-clock interval, for entries that may not align to slots."""
        if end_min <= start_min:
            return []
        overlapping: list[int] = []
        for slot in range(self.slot_count):
            slot_start = self.slot_start_minutes(slot)
            slot_end = slot_start + self.slot_minutes
            if start_min < slot_end and slot_start < end_min:
                overlapping.append(slot)
        return overlapping

    def slot_range_for_times(self, start_time: str, end_time: str) -> tuple[int, int] | None:
        slots = self.slots_overlapping(parse_time_to_minutes(start_time), parse_time_to_minutes(end_time))
        if not slots:
            return None
        return slots[0], slots[-1] + 1
