# utils.py
"""
Utility functions used across the scheduling system.
"""

import json
import os
import sys
from datetime import datetime, time, timedelta

from data_models import HorizonConfig, TimeWindow
from recurrence_system.errors import ConfigurationError

REQUIRED_CONFIG_KEYS = [
    "TIME_GRANULARITY_MINUTES",
    "HORIZON_START",
    "HORIZON_DAYS",
    "DAY_START_MINUTES",
    "DAY_END_MINUTES",
]


def flush_print(*args, **kwargs):
    """Enable immediate output flushing for debugging hangs."""
    print(*args, **kwargs)
    sys.stdout.flush()


def create_output_folder(seed, is_deterministic, num_activities=0, base_dir=None):
    """
    Creates a unique output folder for this scheduler run.

    Folder naming: outputs/{seed}_{YYYYMMDD}_{HHMMSS}_{mode}_A{activities}/

    Returns:
        str: Absolute path to the created output folder
    """
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    mode = "deterministic" if is_deterministic else "nondeterministic"

    folder_name = f"{seed}_{timestamp}_{mode}_A{num_activities}"

    if base_dir is None:
        base_dir = os.path.dirname(os.path.abspath(__file__))
    outputs_dir = os.path.join(base_dir, "outputs")
    os.makedirs(outputs_dir, exist_ok=True)

    run_folder = os.path.join(outputs_dir, folder_name)
    os.makedirs(run_folder, exist_ok=True)

    return run_folder


def load_config(path='config.json'):
    """Load configuration from JSON file."""
    try:
        with open(path, 'r') as f:
            return json.load(f)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Could not load or parse {path}. Error: {e}") from e


def parse_clock(value):
    """'HH:MM' -> datetime.time"""
    try:
        hours, minutes = map(int, str(value).split(':'))
        return time(hours, minutes)
    except ValueError as e:
        raise ConfigurationError(f"Invalid clock time '{value}', expected HH:MM") from e


def minutes_to_clock(minutes):
    """Minutes after midnight -> datetime.time"""
    if not 0 <= minutes < 24 * 60:
        raise ConfigurationError(f"Minutes after midnight out of range: {minutes}")
    return time(minutes // 60, minutes % 60)


def build_horizon_config(config):
    """
    Translate the config dictionary into a HorizonConfig.

    The horizon starts at midnight of HORIZON_START and covers HORIZON_DAYS
    whole days; the operating window comes from DAY_START_MINUTES /
    DAY_END_MINUTES and every BREAK_WINDOWS entry closes the same period on
    each day.
    """
    missing = [key for key in REQUIRED_CONFIG_KEYS if key not in config]
    if missing:
        raise ConfigurationError(f"Missing config keys: {', '.join(missing)}")

    try:
        horizon_start = datetime.fromisoformat(str(config["HORIZON_START"]))
    except ValueError as e:
        raise ConfigurationError(f"Invalid HORIZON_START '{config['HORIZON_START']}'") from e
    horizon_start = horizon_start.replace(hour=0, minute=0, second=0, microsecond=0)

    horizon_days = int(config["HORIZON_DAYS"])
    if horizon_days < 1:
        raise ConfigurationError(f"HORIZON_DAYS must be at least 1, got {horizon_days}")

    granularity = int(config["TIME_GRANULARITY_MINUTES"])
    if granularity <= 0:
        raise ConfigurationError(f"TIME_GRANULARITY_MINUTES must be positive, got {granularity}")

    operating_window = TimeWindow(
        start=minutes_to_clock(config["DAY_START_MINUTES"]),
        end=minutes_to_clock(config["DAY_END_MINUTES"]),
    )

    break_windows = []
    for entry in config.get("BREAK_WINDOWS", []):
        if len(entry) != 2:
            raise ConfigurationError(f"Break window {entry} must be [start, end]")
        break_windows.append(TimeWindow(start=parse_clock(entry[0]), end=parse_clock(entry[1])))

    return HorizonConfig(
        horizon_start=horizon_start,
        horizon_end=horizon_start + timedelta(days=horizon_days),
        unit_width=timedelta(minutes=granularity),
        operating_window=operating_window,
        break_windows=break_windows,
        default_gap_days=int(config.get("DEFAULT_GAP_DAYS", 2)),
    )
