from __future__ import annotations

from datetime import datetime, time, timedelta

import pytest

from data_models import TimeWindow
from recurrence_system.errors import ConfigurationError
from recurrence_system.time_grid import create_time_grid, generate_time_grid, is_schedulable
from tests.helpers import MONDAY, UNIT, make_horizon


def _unit_at(units, day: int, hour: int, minute: int):
    target = MONDAY + timedelta(days=day, hours=hour, minutes=minute)
    return next(u for u in units if u.start == target)


def test_units_are_contiguous_and_equal_width() -> None:
    units = create_time_grid(make_horizon())

    assert len(units) == 5 * 96
    for i, unit in enumerate(units):
        assert unit.index == i
        assert unit.end - unit.start == UNIT
    for prev, nxt in zip(units, units[1:]):
        assert prev.end == nxt.start


def test_break_boundaries_match_reference_example() -> None:
    units = create_time_grid(make_horizon())

    assert _unit_at(units, 0, 11, 15).schedulable is True
    assert _unit_at(units, 0, 11, 30).schedulable is False
    assert _unit_at(units, 0, 12, 45).schedulable is False
    assert _unit_at(units, 0, 13, 0).schedulable is True


def test_operating_window_edges() -> None:
    units = create_time_grid(make_horizon())

    assert _unit_at(units, 2, 7, 45).schedulable is False
    assert _unit_at(units, 2, 8, 0).schedulable is True
    assert _unit_at(units, 2, 16, 45).schedulable is True
    assert _unit_at(units, 2, 17, 0).schedulable is False
    assert _unit_at(units, 4, 23, 45).schedulable is False


def test_schedulable_units_per_day() -> None:
    units = create_time_grid(make_horizon())
    open_per_day = {}
    for unit in units:
        open_per_day.setdefault(unit.start.date(), 0)
        open_per_day[unit.start.date()] += unit.schedulable

    # 3.5h morning + 4h afternoon
    assert set(open_per_day.values()) == {30}
    assert [u.weekday for u in units[::96]] == [0, 1, 2, 3, 4]


def test_unit_spanning_break_start_is_blocked() -> None:
    window = TimeWindow(time(8, 0), time(17, 0))
    breaks = [TimeWindow(time(11, 20), time(13, 0))]
    start = datetime(2024, 1, 1, 11, 15)

    assert is_schedulable(start, start + UNIT, window, breaks) is False
    assert is_schedulable(start - UNIT, start, window, breaks) is True


def test_trailing_partial_unit_is_dropped() -> None:
    window = TimeWindow(time(0, 0), time(23, 0))
    units = generate_time_grid(MONDAY, MONDAY + timedelta(minutes=50), UNIT, window, [])

    assert len(units) == 3
    assert units[-1].end == MONDAY + timedelta(minutes=45)


@pytest.mark.parametrize(
    "unit, open_at, close_at, breaks",
    [
        (timedelta(0), time(8), time(17), []),
        (timedelta(minutes=7), time(8), time(17), []),
        (UNIT, time(17), time(8), []),
        (UNIT, time(8), time(17), [TimeWindow(time(13), time(12))]),
    ],
)
def test_invalid_grid_configuration(unit, open_at, close_at, breaks) -> None:
    with pytest.raises(ConfigurationError):
        generate_time_grid(MONDAY, MONDAY + timedelta(days=1), unit, TimeWindow(open_at, close_at), breaks)
