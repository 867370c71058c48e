# data_models.py
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import List, Tuple

WEEKDAY_NAMES = ["MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY", "FRIDAY", "SATURDAY", "SUNDAY"]


@dataclass(frozen=True)
class TimeUnit:
    """One fixed-width slice of the planning horizon."""
    index: int
    start: datetime
    end: datetime
    schedulable: bool

    @property
    def weekday(self):
        return self.start.weekday()


@dataclass
class Activity:
    activity_id: int
    name: str
    duration_hours: float
    repetitions: int = 1
    gap_units: int = None  # None -> DEFAULT_GAP_DAYS expressed in units
    units_needed: int = None  # Filled in by ActivityCatalog


@dataclass(frozen=True)
class RecurrenceGroup:
    """Candidate placement of every repetition of one activity."""
    start: int
    spans: Tuple[range, ...]

    def units(self):
        for span in self.spans:
            yield from span


@dataclass
class TimeWindow:
    start: time
    end: time


@dataclass
class HorizonConfig:
    horizon_start: datetime
    horizon_end: datetime
    unit_width: timedelta
    operating_window: TimeWindow
    break_windows: List[TimeWindow] = field(default_factory=list)
    default_gap_days: int = 2

    @property
    def units_per_day(self):
        return int(timedelta(days=1) / self.unit_width)

    @property
    def default_gap_units(self):
        return self.default_gap_days * self.units_per_day

    @property
    def first_day(self) -> date:
        return self.horizon_start.date()


@dataclass
class ScheduledActivity:
    activity_id: int
    name: str
    start_time: datetime
    end_time: datetime
    recurrence_days: List[int] = field(default_factory=list)  # Monday = 0
    occurrences: List[Tuple[datetime, datetime]] = field(default_factory=list)

    @property
    def recurrence_day_names(self):
        return [WEEKDAY_NAMES[d] for d in self.recurrence_days]
