"""
Activity Catalog

Validates the activities to schedule and resolves each one's duration and gap
into whole time units for a given grid.
"""

import math
from dataclasses import replace
from datetime import timedelta

from recurrence_system.errors import ConfigurationError


def units_for_duration(duration_hours, unit_width):
    """Convert an hour duration to whole units; fractional units are rejected."""
    try:
        hours = float(duration_hours)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Duration must be a number of hours, got {duration_hours!r}") from e
    if not math.isfinite(hours) or hours <= 0:
        raise ConfigurationError(f"Duration must be positive, got {duration_hours}")

    unit_minutes = unit_width.total_seconds() / 60
    units = (hours * 60) / unit_minutes
    if abs(units - round(units)) > 1e-9:
        raise ConfigurationError(
            f"Duration {duration_hours}h is not a multiple of the {unit_minutes:g}-minute unit"
        )
    return int(round(units))


class ActivityCatalog:
    """
    Ordered, validated list of activities with units_needed and gap_units set.

    Args:
        activities: Iterable of Activity objects
        unit_width: timedelta width of one time unit
        horizon_units: Total number of units in the horizon
        default_gap_units: Gap applied when an activity leaves gap_units unset
    """

    def __init__(self, activities, unit_width, horizon_units, default_gap_units):
        self.unit_width = unit_width
        self.horizon_units = horizon_units
        self.default_gap_units = default_gap_units
        self.activities = tuple(self._resolve(a) for a in activities)

        if not self.activities:
            raise ConfigurationError("Activity catalog is empty")

        seen = set()
        for activity in self.activities:
            if activity.activity_id in seen:
                raise ConfigurationError(f"Duplicate activity id {activity.activity_id}")
            seen.add(activity.activity_id)

    def _resolve(self, activity):
        if activity.repetitions is None or activity.repetitions < 1:
            raise ConfigurationError(
                f"Activity {activity.activity_id} needs at least one repetition, got {activity.repetitions}"
            )

        units_needed = units_for_duration(activity.duration_hours, self.unit_width)
        gap_units = self.default_gap_units if activity.gap_units is None else int(activity.gap_units)

        if gap_units < 0:
            raise ConfigurationError(f"Activity {activity.activity_id} has negative gap {gap_units}")
        if activity.repetitions > 1 and gap_units < units_needed:
            # Repetitions would overlap each other
            raise ConfigurationError(
                f"Activity {activity.activity_id}: gap of {gap_units} units is shorter than "
                f"its duration of {units_needed} units"
            )

        footprint = (activity.repetitions - 1) * gap_units + units_needed
        if footprint > self.horizon_units:
            raise ConfigurationError(
                f"Activity {activity.activity_id} ({activity.name}) spans {footprint} units "
                f"but the horizon only has {self.horizon_units}"
            )

        return replace(activity, units_needed=units_needed, gap_units=gap_units)

    def __iter__(self):
        return iter(self.activities)

    def __len__(self):
        return len(self.activities)

    def get(self, activity_id):
        for activity in self.activities:
            if activity.activity_id == activity_id:
                return activity
        raise KeyError(activity_id)

    def duration(self, activity):
        return activity.units_needed * self.unit_width

    def gap(self, activity) -> timedelta:
        return activity.gap_units * self.unit_width
