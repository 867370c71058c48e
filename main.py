# main.py
import os
import sys

import pandas as pd

from data_models import Activity
from export_reports import human_readable_schedule_report, write_schedule_report
from recurrence_system.debug import export_occupancy_grid
from recurrence_system.errors import ConfigurationError, SchedulingError
from scheduler import run_scheduler
from utils import build_horizon_config, create_output_folder, flush_print, load_config

ACTIVITY_COLUMNS = ['id', 'name', 'duration_hours', 'repetitions', 'gap_units']


def load_activities(path):
    """
    Read the activity catalog CSV.

    Required columns: id, name, duration_hours. Optional: repetitions (default 1),
    gap_units (default: DEFAULT_GAP_DAYS expressed in units).
    """
    try:
        df = pd.read_csv(path)
        print(f"Successfully loaded {path}")
    except FileNotFoundError as e:
        raise ConfigurationError(f"Activity file {path} not found") from e
    except pd.errors.EmptyDataError as e:
        raise ConfigurationError(f"Activity file {path} is empty") from e

    missing = [col for col in ACTIVITY_COLUMNS[:3] if col not in df.columns]
    if missing:
        raise ConfigurationError(f"{path} is missing columns: {', '.join(missing)}")

    for col in ACTIVITY_COLUMNS:
        if col not in df.columns:
            continue
        numeric = pd.to_numeric(df[col], errors='coerce') if col != 'name' else df[col]
        required = col in ACTIVITY_COLUMNS[:3]
        bad = numeric.isna() if required else numeric.isna() & df[col].notna()
        if bad.any():
            rows = ', '.join(str(i + 2) for i in df.index[bad])
            raise ConfigurationError(f"{path}: missing or non-numeric '{col}' on line(s) {rows}")
        df[col] = numeric

    activities = []
    for _, row in df.iterrows():
        repetitions = int(row['repetitions']) if pd.notna(row.get('repetitions')) else 1
        gap_units = int(row['gap_units']) if pd.notna(row.get('gap_units')) else None

        activities.append(Activity(
            activity_id=int(row['id']),
            name=str(row['name']),
            duration_hours=float(row['duration_hours']),
            repetitions=repetitions,
            gap_units=gap_units,
        ))

    print(f"Loaded {len(activities)} activities")
    return activities


def main(config_path='config.json'):
    print("Starting scheduler...")
    try:
        config = load_config(config_path)
        horizon = build_horizon_config(config)
        data_folder = config.get("DATA_FOLDER", "data")
        activities = load_activities(os.path.join(data_folder, config.get("ACTIVITIES_FILE", "activities.csv")))
    except ConfigurationError as e:
        print(f"FATAL: {e}")
        return 1

    output_folder = create_output_folder(
        config.get("RANDOM_SEED"),
        config.get("DETERMINISTIC_MODE", False),
        num_activities=len(activities),
    )
    print(f"Output folder: {output_folder}")

    try:
        status, solver, results = run_scheduler(config, horizon, activities, output_folder=output_folder)
    except SchedulingError as e:
        print(f"\nNo feasible schedule: {e}")
        print("No outputs generated.")
        return 1

    schedule = results['schedule']
    time_units = results['time_units']

    flush_print("\n" + human_readable_schedule_report(schedule, time_units))
    write_schedule_report(schedule, time_units, output_folder)
    export_occupancy_grid(schedule, time_units, output_dir=output_folder)

    print(f"\nAll outputs saved to: {output_folder}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
