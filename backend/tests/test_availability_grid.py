import pytest

from timetabler.core.config import Settings
from timetabler.services.availability_grid import AvailabilityGrid, ExistingBooking, ResourceKind
from timetabler.services.time_grid import WeeklyGrid


@pytest.fixture
def weekly_grid():
    return WeeklyGrid.from_settings(Settings(_env_file=None))


def test_reserve_marks_faculty_room_and_section(weekly_grid):
    grid = AvailabilityGrid(weekly_grid)
    assert grid.is_free(ResourceKind.faculty, "f1", "Monday", 0, 2)

    grid.reserve("f1", "r1", "Monday", 0, 2, section_id="s1")

    assert not grid.is_free(ResourceKind.faculty, "f1", "Monday", 1, 1)
    assert not grid.is_free(ResourceKind.room, "r1", "Monday", 0, 1)
    assert not grid.is_free(ResourceKind.section, "s1", "Monday", 1, 1)
    assert grid.is_free(ResourceKind.faculty, "f1", "Monday", 2, 1)
    assert grid.is_free(ResourceKind.faculty, "f1", "Tuesday", 0, 2)
    assert grid.is_free(ResourceKind.faculty, "f2", "Monday", 0, 2)
    assert grid.busy_ids(ResourceKind.room, "Monday", 1) == frozenset({"r1"})


def test_break_slot_is_never_free(weekly_grid):
    grid = AvailabilityGrid(weekly_grid)

    assert not grid.is_free(ResourceKind.room, "r1", "Monday", 4, 1)
    assert not grid.is_free(ResourceKind.room, "r1", "Monday", 3, 2)
    assert not grid.is_free(ResourceKind.room, "r1", "Saturday", 0, 1)


def test_seeding_blocks_other_section_bookings_only(weekly_grid):
    bookings = [
        ExistingBooking(
            section_id="other",
            faculty_id="f1",
            classroom_id="r1",
            day="Tuesday",
            start_time="09:00",
            end_time="11:00",
        ),
        ExistingBooking(
            section_id="other",
            faculty_id="f2",
            classroom_id="r2",
            day="Wednesday",
            start_time="13:30",
            end_time="14:15",
        ),
    ]
    grid = AvailabilityGrid.seeded(weekly_grid, bookings)

    assert not grid.is_free(ResourceKind.faculty, "f1", "Tuesday", 1, 1)
    assert not grid.is_free(ResourceKind.room, "r1", "Tuesday", 2, 1)
    assert grid.is_free(ResourceKind.faculty, "f1", "Tuesday", 3, 1)
    # Misaligned bookings block every slot they touch.
    assert not grid.is_free(ResourceKind.faculty, "f2", "Wednesday", 5, 1)
    assert not grid.is_free(ResourceKind.faculty, "f2", "Wednesday", 6, 1)
    assert grid.is_free(ResourceKind.faculty, "f2", "Wednesday", 7, 1)
    # Section occupancy is never seeded from other sections.
    assert grid.is_free(ResourceKind.section, "other", "Tuesday", 1, 1)
