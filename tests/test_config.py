from __future__ import annotations

import json
import os
from datetime import datetime, time, timedelta
from pathlib import Path

import pytest

from main import load_activities, main
from recurrence_system.errors import ConfigurationError
from utils import build_horizon_config, create_output_folder, load_config

ROOT = Path(__file__).resolve().parents[1]

BASE_CONFIG = {
    "TIME_GRANULARITY_MINUTES": 15,
    "HORIZON_START": "2024-01-01",
    "HORIZON_DAYS": 5,
    "DAY_START_MINUTES": 480,
    "DAY_END_MINUTES": 1020,
    "BREAK_WINDOWS": [["11:30", "13:00"]],
}


def test_repository_config_builds_reference_horizon() -> None:
    config = load_config(str(ROOT / "config.json"))
    horizon = build_horizon_config(config)

    assert horizon.horizon_start == datetime(2024, 1, 1)
    assert horizon.horizon_end - horizon.horizon_start == timedelta(days=5)
    assert horizon.unit_width == timedelta(minutes=15)
    assert horizon.operating_window.start == time(8, 0)
    assert horizon.operating_window.end == time(17, 0)
    assert [(w.start, w.end) for w in horizon.break_windows] == [(time(11, 30), time(13, 0))]
    assert horizon.units_per_day == 96
    assert horizon.default_gap_units == 192


def test_missing_config_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError):
        load_config(str(tmp_path / "missing.json"))


def test_malformed_config_file(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_config(str(path))


def test_missing_keys_are_reported() -> None:
    config = {k: v for k, v in BASE_CONFIG.items() if k != "HORIZON_DAYS"}

    with pytest.raises(ConfigurationError, match="HORIZON_DAYS"):
        build_horizon_config(config)


@pytest.mark.parametrize(
    "override",
    [
        {"HORIZON_START": "first monday"},
        {"HORIZON_DAYS": 0},
        {"TIME_GRANULARITY_MINUTES": 0},
        {"DAY_END_MINUTES": 1440},
        {"BREAK_WINDOWS": [["11:30"]]},
        {"BREAK_WINDOWS": [["noon", "13:00"]]},
    ],
)
def test_invalid_config_values(override) -> None:
    with pytest.raises(ConfigurationError):
        build_horizon_config({**BASE_CONFIG, **override})


def test_custom_default_gap() -> None:
    horizon = build_horizon_config({**BASE_CONFIG, "DEFAULT_GAP_DAYS": 1, "TIME_GRANULARITY_MINUTES": 30})

    assert horizon.default_gap_units == 48


def test_load_activities_defaults(tmp_path: Path) -> None:
    path = tmp_path / "activities.csv"
    path.write_text(
        "id,name,duration_hours,repetitions,gap_units\n"
        "1,Mathematics,1,3,\n"
        "2,Seminar,1.5,,96\n",
        encoding="utf-8",
    )

    first, second = load_activities(str(path))

    assert (first.activity_id, first.name, first.duration_hours) == (1, "Mathematics", 1.0)
    assert (first.repetitions, first.gap_units) == (3, None)
    assert (second.repetitions, second.gap_units) == (1, 96)


def test_load_activities_without_optional_columns(tmp_path: Path) -> None:
    path = tmp_path / "activities.csv"
    path.write_text("id,name,duration_hours\n7,Lab,3\n", encoding="utf-8")

    (activity,) = load_activities(str(path))

    assert activity.repetitions == 1
    assert activity.gap_units is None


@pytest.mark.parametrize(
    "content",
    [
        None,
        "",
        "id,name\n1,Lab\n",
        "id,name,duration_hours\n1,Lab,\n",
        "id,name,duration_hours\n,Lab,1\n",
        "id,name,duration_hours\n1,Lab,one hour\n",
        "id,name,duration_hours,repetitions\n1,Lab,1,twice\n",
    ],
)
def test_load_activities_errors(tmp_path: Path, content) -> None:
    path = tmp_path / "activities.csv"
    if content is not None:
        path.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_activities(str(path))


def test_repository_activities_file_loads() -> None:
    activities = load_activities(str(ROOT / "data" / "activities.csv"))

    assert len(activities) == 6
    assert len({a.activity_id for a in activities}) == 6


def test_create_output_folder(tmp_path: Path) -> None:
    folder = create_output_folder(42, True, num_activities=3, base_dir=str(tmp_path))

    assert os.path.isdir(folder)
    assert os.path.basename(folder).startswith("42_")
    assert os.path.basename(folder).endswith("_deterministic_A3")
    assert os.path.dirname(folder) == str(tmp_path / "outputs")


def test_main_reports_blank_duration_as_fatal(tmp_path: Path, capsys) -> None:
    data = tmp_path / "data"
    data.mkdir()
    (data / "activities.csv").write_text("id,name,duration_hours\n1,Lab,\n", encoding="utf-8")
    config_path = tmp_path / "config.json"
    config_path.write_text(
        json.dumps({**BASE_CONFIG, "DATA_FOLDER": str(data), "ACTIVITIES_FILE": "activities.csv"}),
        encoding="utf-8",
    )

    assert main(str(config_path)) == 1
    assert "FATAL:" in capsys.readouterr().out
