"""
Recurrence Enumerator - Rolling Window Placement

For an activity needing k units per occurrence, g units between repetition
starts and r repetitions, every start index i along the unit sequence defines
one candidate RecurrenceGroup:

    spans = [i, i+k), [i+g, i+g+k), ..., [i+(r-1)g, i+(r-1)g+k)

A candidate is kept only when every span fits inside the sequence. Groups are
produced in increasing order of i.

The coverage query runs the other way: given a unit, which group starts put
any of their spans on top of it? Those starts are the "representative"
decisions summed by the no-overlap constraint for that unit.
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, Tuple

from data_models import RecurrenceGroup


def enumerate_recurrence_groups(sequence, units_needed, gap_units, repetitions):
    """
    Lazily yield every RecurrenceGroup that fits in the sequence.

    Args:
        sequence: Ordered sequence of TimeUnit objects (only its length is used)
        units_needed: Units per occurrence (k >= 1)
        gap_units: Units between consecutive repetition starts (g >= 0)
        repetitions: Number of occurrences (r >= 1)

    Yields:
        RecurrenceGroup objects, ascending by start index
    """
    n = len(sequence)
    for i in range(n):
        spans = []
        for j in range(repetitions):
            span_start = i + j * gap_units
            span = range(span_start, span_start + units_needed)
            if span.stop > n:
                break
            spans.append(span)

        if len(spans) == repetitions:
            yield RecurrenceGroup(start=i, spans=tuple(spans))


def affecting_starts(unit_index, group_starts, units_needed, gap_units, repetitions):
    """
    Backward-looking coverage query.

    Returns the ascending start indices of every group (among group_starts)
    whose j-th span covers unit_index for some j.
    """
    found = set()
    for j in range(repetitions):
        offset = unit_index - j * gap_units
        for i in range(offset - units_needed + 1, offset + 1):
            if i in group_starts:
                found.add(i)
    return sorted(found)


@dataclass(frozen=True)
class RecurrenceIndex:
    """Everything the constraint builder needs about one activity, computed once."""
    activity_id: int
    groups: Tuple[RecurrenceGroup, ...]
    group_starts: FrozenSet[int]
    viable_starts: FrozenSet[int]  # starts whose every unit is schedulable
    coverage: Dict[int, Tuple[int, ...]]  # unit_index -> affecting group starts


def build_recurrence_index(time_units, activity):
    groups = tuple(enumerate_recurrence_groups(
        time_units, activity.units_needed, activity.gap_units, activity.repetitions
    ))

    group_starts = frozenset(g.start for g in groups)

    coverage = {}
    for unit in time_units:
        starts = affecting_starts(
            unit.index, group_starts, activity.units_needed, activity.gap_units, activity.repetitions
        )
        if starts:
            coverage[unit.index] = tuple(starts)

    viable = {
        group.start for group in groups
        if all(time_units[unit_idx].schedulable for unit_idx in group.units())
    }

    return RecurrenceIndex(
        activity_id=activity.activity_id,
        groups=groups,
        group_starts=group_starts,
        viable_starts=frozenset(viable),
        coverage=coverage,
    )
