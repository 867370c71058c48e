"""
Recurrence Constraints - Logical Constraint Layer

Compiles the recurrence groups of every activity into linear constraints over
the start indicators.

Hard Constraints:
    - Exactly one start per activity
    - Orphan starts (units that begin no full group) pinned to 0
    - Day anchors for the default gap, when every viable start already lies
      on an anchor weekday (symmetry breaking)
    - Per-unit coverage: at most one chosen group occupies a schedulable unit;
      any group touching a blocked unit has its start pinned to 0

All recurrence indexes are built and checked before the first constraint is
added, so an infeasible activity aborts the build without leaving a partial
model behind.
"""

from recurrence_system.errors import InfeasibleActivityError
from recurrence_system.recurrence_enumerator import build_recurrence_index

ANCHOR_DAYS_BY_REPETITIONS = {
    3: 1,  # Mon / Wed / Fri
    2: 3,  # Mon-Wed, Tue-Thu or Wed-Fri
}


def build_activity_indexes(time_units, activities):
    """
    Precompute the recurrence index of every activity.

    Raises:
        InfeasibleActivityError: if every group of an activity touches a blocked unit
    """
    indexes = {}
    for activity in activities:
        index = build_recurrence_index(time_units, activity)

        if not index.viable_starts:
            raise InfeasibleActivityError(
                activity.activity_id,
                f"every placement of {activity.units_needed} contiguous units "
                f"overlaps a closed period",
            )

        print(f"   {activity.name}: {len(index.groups)} candidate groups, "
              f"{len(index.viable_starts)} fully inside operating hours")
        indexes[activity.activity_id] = index

    return indexes


def anchor_units(time_units, repetitions):
    """Unit indices on the weekdays a default-gap activity is anchored to, or None."""
    num_days = ANCHOR_DAYS_BY_REPETITIONS.get(repetitions)
    if num_days is None:
        return None

    first_weekday = time_units[0].weekday
    anchor_weekdays = {(first_weekday + d) % 7 for d in range(num_days)}
    return [u.index for u in time_units if u.weekday in anchor_weekdays]


def add_recurrence_constraints(assembly, time_units, catalog, symmetry_breaking=True):
    """
    Add every hard constraint of the recurrence model.

    Args:
        assembly: ModelAssembly holding the decisions from create_decision_space()
        time_units: Sequence of TimeUnit objects
        catalog: ActivityCatalog (resolved activities + default gap)
        symmetry_breaking: Add day-anchor constraints for default-gap activities

    Returns:
        Dictionary with the recurrence indexes and constraint counts for reporting
    """
    print("\n[Recurrence Constraints] Enumerating recurrence groups...")
    indexes = build_activity_indexes(time_units, catalog)

    print("[Recurrence Constraints] Adding hard constraints...")

    # Exactly one start per activity
    for activity in catalog:
        starts = [assembly.decision(activity.activity_id, u.index) for u in time_units]
        assembly.add_constraint("exactly_one_start", activity.activity_id, sum(starts) == 1)

    # Orphan starts: no full group begins here
    total_orphans = 0
    for activity in catalog:
        index = indexes[activity.activity_id]
        for unit in time_units:
            if unit.schedulable and unit.index not in index.group_starts:
                assembly.fix_to_zero("orphan_start", activity.activity_id, unit.index)
                total_orphans += 1

    # Day anchors
    total_anchors = 0
    if symmetry_breaking:
        for activity in catalog:
            if activity.gap_units != catalog.default_gap_units:
                continue
            units = anchor_units(time_units, activity.repetitions)
            if units is None:
                continue
            anchor_weekdays = {time_units[u].weekday for u in units}
            start_weekdays = {time_units[s].weekday for s in indexes[activity.activity_id].viable_starts}
            if not start_weekdays <= anchor_weekdays:
                # Every viable start must already lie on an anchor day
                print(f"   Skipping day anchor for {activity.name}: viable starts fall outside anchor days")
                continue
            anchored = [assembly.decision(activity.activity_id, u) for u in units]
            assembly.add_constraint("day_anchor", activity.activity_id, sum(anchored) == 1)
            total_anchors += 1

    # Coverage
    total_coverage = 0
    total_blocked_starts = 0
    for unit in time_units:
        representatives = []
        for activity in catalog:
            starts = indexes[activity.activity_id].coverage.get(unit.index, ())
            if unit.schedulable:
                representatives.extend(assembly.decision(activity.activity_id, s) for s in starts)
            else:
                for s in starts:
                    if not assembly.is_fixed_to_zero(activity.activity_id, s):
                        total_blocked_starts += 1
                    assembly.fix_to_zero("blocked_start", activity.activity_id, s)

        if unit.schedulable and representatives:
            assembly.add_coverage(unit.index, representatives)
            total_coverage += 1

    print(f"   Exactly-one constraints: {len(catalog)}")
    print(f"   Orphan starts pinned: {total_orphans:,}")
    print(f"   Day anchors: {total_anchors}")
    print(f"   Coverage constraints: {total_coverage:,}")
    print(f"   Starts pinned by blocked units: {total_blocked_starts:,}")

    return {
        'indexes': indexes,
        'exactly_one': len(catalog),
        'orphan_starts': total_orphans,
        'day_anchors': total_anchors,
        'coverage': total_coverage,
        'blocked_starts': total_blocked_starts,
    }
