"""
Decision Space - Start Indicator Variables

One BoolVar per (activity, time unit) pair meaning "the first occurrence of
this activity starts at this unit". Only START positions get variables; the
units an occurrence occupies are derived later by the coverage query, which
keeps the model linear in horizon size.

Blocked units are pinned to 0 here, before any constraint references them,
so they can never be selected as a start.
"""


def create_decision_space(assembly, time_units, activities):
    """
    Create the start-indicator BoolVars for every activity and unit.

    Args:
        assembly: ModelAssembly receiving the variables
        time_units: Sequence of TimeUnit objects from the time grid
        activities: Iterable of resolved Activity objects

    Returns:
        Dict of (activity_id, unit_index) -> BoolVar
    """
    print("\n[Decision Space] Creating start indicators...")

    num_blocked = 0
    for activity in activities:
        for unit in time_units:
            assembly.new_decision(activity.activity_id, unit.index)

            if not unit.schedulable:
                assembly.fix_to_zero("blocked_unit", activity.activity_id, unit.index)
                num_blocked += 1

    print(f"   Start indicators: {len(assembly.decisions):,} ({num_blocked:,} pinned to 0 on blocked units)")
    return assembly.decisions
