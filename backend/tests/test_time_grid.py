import pytest

from timetabler.core.config import Settings
from timetabler.services.time_grid import WeeklyGrid, minutes_to_time, parse_time_to_minutes


@pytest.fixture
def grid():
    return WeeklyGrid.from_settings(Settings(_env_file=None))


def test_default_grid_shape(grid):
    assert grid.days == ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday")
    assert grid.slot_count == 10
    assert grid.break_slot == 4
    assert grid.slot_start_time(0) == "08:00"
    assert grid.slot_end_time(9) == "18:00"
    assert grid.interval_times(4, 5) == ("12:00", "13:00")


def test_time_parsing_round_trip_and_rejection():
    assert parse_time_to_minutes("09:30") == 570
    assert minutes_to_time(570) == "09:30"
    with pytest.raises(ValueError):
        parse_time_to_minutes("9:30")
    with pytest.raises(ValueError):
        parse_time_to_minutes("24:00")


def test_break_and_bounds_exclusion(grid):
    assert not grid.is_placeable(4, 1)
    assert not grid.is_placeable(3, 2)
    assert grid.is_placeable(2, 2)
    assert grid.is_placeable(5, 2)
    assert not grid.is_placeable(9, 2)
    assert not grid.is_placeable(-1, 1)


def test_candidate_starts_skip_break_spanning_windows(grid):
    assert grid.candidate_starts(1) == [0, 1, 2, 3, 5, 6, 7, 8, 9]
    assert grid.candidate_starts(2) == [0, 1, 2, 5, 6, 7, 8]


def test_misaligned_interval_maps_to_every_overlapping_slot(grid):
    assert grid.slots_overlapping(parse_time_to_minutes("09:30"), parse_time_to_minutes("10:15")) == [1, 2]
    assert grid.slot_range_for_times("09:00", "11:00") == (1, 3)
    assert grid.slot_range_for_times("19:00", "20:00") is None


def test_settings_reject_break_outside_grid():
    with pytest.raises(ValueError):
        Settings(_env_file=None, slots_per_day=4, break_slot_index=4)


def test_settings_reject_grid_running_past_midnight():
    with pytest.raises(ValueError, match="before midnight"):
        Settings(_env_file=None, day_start_time="16:00")
    with pytest.raises(ValueError, match="before midnight"):
        Settings(_env_file=None, day_start_time="14:00")

    latest = Settings(_env_file=None, day_start_time="13:59")
    grid = WeeklyGrid.from_settings(latest)
    assert grid.slot_end_time(grid.slot_count - 1) == "23:59"


def test_settings_reject_malformed_day_start():
    for value in ("8:00", "08:60", "25:00", "morning"):
        with pytest.raises(ValueError, match="day_start_time"):
            Settings(_env_file=None, day_start_time=value)


def test_settings_accept_comma_separated_working_days():
    settings = Settings(_env_file=None, working_days="Monday, Wednesday")
    assert settings.working_days == ["Monday", "Wednesday"]

    with pytest.raises(ValueError):
        Settings(_env_file=None, working_days="Funday")
