"""Fixtures and helpers for model-building tests."""
from __future__ import annotations

from datetime import datetime, time, timedelta
from typing import Iterable, List, Sequence, Tuple

from data_models import Activity, HorizonConfig, TimeWindow

MONDAY = datetime(2024, 1, 1)
UNIT = timedelta(minutes=15)
UNITS_PER_DAY = 96


def make_horizon(
    *,
    days: int = 5,
    start: datetime = MONDAY,
    open_at: time = time(8, 0),
    close_at: time = time(17, 0),
    breaks: Sequence[Tuple[time, time]] = ((time(11, 30), time(13, 0)),),
    unit: timedelta = UNIT,
    default_gap_days: int = 2,
) -> HorizonConfig:
    """Monday-based horizon with the reference 08:00-17:00 day and 11:30-13:00 break."""
    return HorizonConfig(
        horizon_start=start,
        horizon_end=start + timedelta(days=days),
        unit_width=unit,
        operating_window=TimeWindow(open_at, close_at),
        break_windows=[TimeWindow(b_start, b_end) for b_start, b_end in breaks],
        default_gap_days=default_gap_days,
    )


def make_activity(
    activity_id: int,
    *,
    hours: float = 1.0,
    repetitions: int = 1,
    gap_units: int | None = None,
    name: str | None = None,
) -> Activity:
    return Activity(
        activity_id=activity_id,
        name=name or f"Activity {activity_id}",
        duration_hours=hours,
        repetitions=repetitions,
        gap_units=gap_units,
    )


def reference_catalog() -> List[Activity]:
    return [
        make_activity(1, hours=1, repetitions=3, name="Mathematics"),
        make_activity(2, hours=1.5, repetitions=2, name="Physics"),
        make_activity(3, hours=2, repetitions=2, name="Chemistry"),
        make_activity(4, hours=3, repetitions=1, name="Biology Lab"),
        make_activity(5, hours=0.75, repetitions=3, name="History"),
    ]


def assignment_lookup(selected: Iterable[Tuple[int, int]]):
    """value_of callable for decisions keyed by their own (activity_id, unit_index)."""
    chosen = set(selected)
    return lambda var: 1 if var in chosen else 0


def token_decisions(activity_ids: Iterable[int], num_units: int):
    return {(a, u): (a, u) for a in activity_ids for u in range(num_units)}
