"""
Occupancy Grid Debug Exporter

Writes a per-day listing of every unit between the first and last schedulable
unit of the day, showing which activity (if any) occupies it.
"""

import collections
import os
from datetime import datetime

from data_models import WEEKDAY_NAMES
from recurrence_system.result_projector import unit_occupancy


def export_occupancy_grid(schedule, time_units, output_dir=None, pass_name=""):
    """
    Export the solved schedule as a unit-by-unit occupancy grid.

    Args:
        schedule: List of ScheduledActivity objects
        time_units: Sequence of TimeUnit objects the model was built on
        output_dir: Directory to save the grid file (current directory if None)
        pass_name: Label appended to the file name

    Returns:
        Path of the written file
    """
    occupancy = unit_occupancy(schedule, time_units)

    units_by_day = collections.defaultdict(list)
    for unit in time_units:
        units_by_day[unit.start.date()].append(unit)

    filename = f"occupancy_grid_{pass_name}.txt" if pass_name else "occupancy_grid.txt"
    filepath = os.path.join(output_dir, filename) if output_dir else filename

    with open(filepath, 'w', encoding='utf-8') as f:
        f.write("=" * 80 + "\n")
        title = f"OCCUPANCY GRID - {pass_name.upper()}" if pass_name else "OCCUPANCY GRID"
        f.write(title + "\n")
        f.write(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n")
        f.write("=" * 80 + "\n\n")

        f.write("LEGEND:\n")
        f.write("  # = Occupied by an activity\n")
        f.write("  . = Free (schedulable)\n")
        f.write("  x = Blocked (outside operating hours or inside a break)\n")
        f.write("  ! = Conflict (blocked but occupied, or double booked)\n")
        f.write("-" * 80 + "\n\n")

        for day in sorted(units_by_day):
            day_units = units_by_day[day]
            open_idx = [i for i, u in enumerate(day_units) if u.schedulable]
            if not open_idx:
                continue

            f.write(f"{WEEKDAY_NAMES[day.weekday()]} {day.isoformat()}:\n")
            f.write(f"{'Time Range':<15} | {'Status':<6} | {'Activity'}\n")
            f.write(f"{'-'*15} | {'-'*6} | {'-'*40}\n")

            for unit in day_units[open_idx[0]:open_idx[-1] + 1]:
                names = occupancy[unit.index]
                if len(names) > 1 or (names and not unit.schedulable):
                    status = "!"
                elif names:
                    status = "#"
                elif unit.schedulable:
                    status = "."
                else:
                    status = "x"

                time_range = f"{unit.start.strftime('%H:%M')} - {unit.end.strftime('%H:%M')}"
                f.write(f"{time_range:<15} | {status:<6} | {', '.join(names)}\n")

            f.write("\n")

        f.write("=" * 80 + "\n")

    print(f"[Occupancy Grid] {pass_name or 'Schedule'} exported to: {filepath}")
    return filepath
