# export_reports.py
"""
Report generation functions for checking and exporting solved schedules.
Includes an independent conflict check, a tabular export and a human-readable
summary.
"""

import os

import pandas as pd

from data_models import WEEKDAY_NAMES
from recurrence_system.result_projector import unit_occupancy

SCHEDULE_COLUMNS = ["activity_id", "name", "occurrence", "day", "start", "end"]


def schedule_to_dataframe(schedule):
    """One row per occurrence of every scheduled activity."""
    rows = []
    for item in schedule:
        for occ_idx, (occ_start, occ_end) in enumerate(item.occurrences, start=1):
            rows.append({
                "activity_id": item.activity_id,
                "name": item.name,
                "occurrence": occ_idx,
                "day": WEEKDAY_NAMES[occ_start.weekday()],
                "start": pd.Timestamp(occ_start),
                "end": pd.Timestamp(occ_end),
            })

    df = pd.DataFrame(rows, columns=SCHEDULE_COLUMNS)
    if not df.empty:
        df = df.sort_values(["start", "activity_id"]).reset_index(drop=True)
    return df


def find_schedule_conflicts(schedule, time_units):
    """
    Re-check a projected schedule against the grid, independently of the model.

    Returns:
        List of conflict descriptions (empty when the schedule is valid)
    """
    conflicts = []
    occupancy = unit_occupancy(schedule, time_units)

    for unit in time_units:
        names = occupancy[unit.index]
        when = f"{WEEKDAY_NAMES[unit.weekday]} {unit.start.strftime('%H:%M')}-{unit.end.strftime('%H:%M')}"
        if names and not unit.schedulable:
            conflicts.append(f"Blocked unit {unit.index} ({when}) occupied by {', '.join(names)}")
        if len(names) > 1:
            conflicts.append(f"Unit {unit.index} ({when}) double booked: {', '.join(names)}")

    horizon_end = time_units[-1].end if time_units else None
    for item in schedule:
        for occ_start, occ_end in item.occurrences:
            if horizon_end is not None and occ_end > horizon_end:
                conflicts.append(f"{item.name} runs past the end of the horizon ({occ_end})")

    return conflicts


def human_readable_schedule_report(schedule, time_units, output_file=None):
    """
    Build (and optionally write) a plain-text summary of the schedule.

    Returns:
        The report text
    """
    lines = []
    lines.append("=" * 80)
    lines.append("SCHEDULE REPORT")
    lines.append("=" * 80)
    lines.append("")

    for item in schedule:
        days = ", ".join(day.title() for day in item.recurrence_day_names)
        lines.append(f"{item.name} (id {item.activity_id})")
        lines.append(f"   Days:  {days}")
        lines.append(f"   Time:  {item.start_time.strftime('%H:%M')} - {item.end_time.strftime('%H:%M')}")
        lines.append("")

    conflicts = find_schedule_conflicts(schedule, time_units)
    lines.append("-" * 80)
    if conflicts:
        lines.append(f"CONFLICTS ({len(conflicts)}):")
        for conflict in conflicts:
            lines.append(f"   {conflict}")
    else:
        lines.append("No conflicts detected.")
    lines.append("=" * 80)

    report = "\n".join(lines)
    if output_file:
        with open(output_file, "w", encoding="utf-8") as f:
            f.write(report + "\n")
    return report


def write_schedule_report(schedule, time_units, output_folder):
    """
    Write schedule.csv and schedule_report.txt to output_folder.

    Returns:
        Dict with the written file paths
    """
    os.makedirs(output_folder, exist_ok=True)
    csv_path = os.path.join(output_folder, "schedule.csv")
    report_path = os.path.join(output_folder, "schedule_report.txt")

    schedule_to_dataframe(schedule).to_csv(csv_path, index=False)
    human_readable_schedule_report(schedule, time_units, output_file=report_path)

    print(f"Schedule exported to: {csv_path}")
    print(f"Report saved to: {report_path}")
    return {"csv": csv_path, "report": report_path}
