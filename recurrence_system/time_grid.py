"""
Time Grid - Core Interface Layer

This module partitions the planning horizon into fixed-width time units and
classifies each one as SCHEDULABLE (inside operating hours, outside every
break) or BLOCKED.

The grid is generated once per model build and never mutated. Every other
layer (decision space, recurrence enumeration, coverage constraints, result
projection) refers to units by their zero-based index into this sequence.
"""

from datetime import datetime, timedelta

import pandas as pd

from data_models import TimeUnit
from recurrence_system.errors import ConfigurationError

ONE_DAY = timedelta(days=1)


def is_schedulable(unit_start, unit_end, operating_window, break_windows):
    """
    A unit is schedulable when both of its endpoints lie inside the operating
    window of its calendar day and it does not overlap any break window.

    Windows are half-open: a unit ending exactly where a break starts, or
    starting exactly where a break ends, is still schedulable.
    """
    day = unit_start.date()
    open_at = datetime.combine(day, operating_window.start)
    close_at = datetime.combine(day, operating_window.end)

    if unit_start < open_at or unit_end > close_at:
        return False

    for window in break_windows:
        break_start = datetime.combine(day, window.start)
        break_end = datetime.combine(day, window.end)
        if unit_start < break_end and unit_end > break_start:
            return False

    return True


def _validate_grid_config(horizon_start, horizon_end, unit_width, operating_window, break_windows):
    if unit_width <= timedelta(0):
        raise ConfigurationError(f"Unit width must be positive, got {unit_width}")
    if ONE_DAY % unit_width != timedelta(0):
        raise ConfigurationError(f"Unit width {unit_width} does not divide a day evenly")
    if horizon_end - horizon_start < unit_width:
        raise ConfigurationError(
            f"Horizon [{horizon_start}, {horizon_end}) is shorter than one unit ({unit_width})"
        )
    if operating_window.start >= operating_window.end:
        raise ConfigurationError(
            f"Operating window {operating_window.start}-{operating_window.end} is empty"
        )
    for window in break_windows:
        if window.start >= window.end:
            raise ConfigurationError(f"Break window {window.start}-{window.end} is empty")


def generate_time_grid(horizon_start, horizon_end, unit_width, operating_window, break_windows):
    """
    Generate the ordered, contiguous sequence of time units for the horizon.

    Args:
        horizon_start: datetime where unit 0 begins
        horizon_end: datetime (exclusive); a trailing partial unit is dropped
        unit_width: timedelta width of every unit (must divide a day)
        operating_window: TimeWindow of daily operating hours
        break_windows: List of TimeWindow entries closed every day

    Returns:
        Tuple of TimeUnit objects, index i at position i
    """
    _validate_grid_config(horizon_start, horizon_end, unit_width, operating_window, break_windows)

    num_units = (horizon_end - horizon_start) // unit_width
    starts = pd.date_range(start=horizon_start, periods=num_units, freq=pd.Timedelta(unit_width))

    units = []
    for idx, ts in enumerate(starts):
        unit_start = ts.to_pydatetime()
        unit_end = unit_start + unit_width
        units.append(TimeUnit(
            index=idx,
            start=unit_start,
            end=unit_end,
            schedulable=is_schedulable(unit_start, unit_end, operating_window, break_windows),
        ))

    return tuple(units)


def create_time_grid(horizon):
    """Build the grid described by a HorizonConfig."""
    units = generate_time_grid(
        horizon.horizon_start,
        horizon.horizon_end,
        horizon.unit_width,
        horizon.operating_window,
        horizon.break_windows,
    )

    num_open = sum(1 for u in units if u.schedulable)
    print(f"[Time Grid] {len(units)} units of {int(horizon.unit_width.total_seconds() // 60)} min "
          f"({num_open} schedulable, {len(units) - num_open} blocked)")
    return units
