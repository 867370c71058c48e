"""
Result Projector

Maps the settled start indicators back onto calendar time.
"""

from data_models import ScheduledActivity
from recurrence_system.errors import InconsistentSolutionError


def selected_start(value_of, decisions, time_units, activity_id):
    """Return the single unit whose start indicator settled to 1."""
    selected = [
        unit for unit in time_units
        if value_of(decisions[(activity_id, unit.index)]) == 1
    ]
    if len(selected) != 1:
        raise InconsistentSolutionError(activity_id, [u.index for u in selected])
    return selected[0]


def project_schedule(value_of, decisions, time_units, catalog):
    """
    Build the externally consumed schedule from a solved assignment.

    Args:
        value_of: Callable mapping a decision variable to its 0/1 value
            (e.g. solver.Value)
        decisions: Dict of (activity_id, unit_index) -> decision variable
        time_units: Sequence of TimeUnit objects
        catalog: ActivityCatalog used to build the model

    Returns:
        List of ScheduledActivity, in catalog order
    """
    schedule = []
    for activity in catalog:
        unit = selected_start(value_of, decisions, time_units, activity.activity_id)

        duration = catalog.duration(activity)
        gap = catalog.gap(activity)
        occurrences = []
        for i in range(activity.repetitions):
            occ_start = unit.start + i * gap
            occurrences.append((occ_start, occ_start + duration))

        schedule.append(ScheduledActivity(
            activity_id=activity.activity_id,
            name=activity.name,
            start_time=unit.start,
            end_time=unit.start + duration,
            recurrence_days=sorted({occ_start.weekday() for occ_start, _ in occurrences}),
            occurrences=occurrences,
        ))

    return schedule


def unit_occupancy(schedule, time_units):
    """
    Map every unit index to the names of the scheduled activities covering it.

    Occurrences are located on the grid arithmetically from the first unit's
    start and the unit width; units outside the horizon are ignored.
    """
    occupancy = {u.index: [] for u in time_units}
    if not time_units:
        return occupancy

    origin = time_units[0].start
    width = time_units[0].end - time_units[0].start

    for item in schedule:
        for occ_start, occ_end in item.occurrences:
            first = (occ_start - origin) // width
            last = -((origin - occ_end) // width)  # ceil division
            for unit_idx in range(max(first, 0), min(last, len(time_units))):
                occupancy[unit_idx].append(item.name)

    return occupancy
