from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

import pytest

from recurrence_system.activity_catalog import ActivityCatalog, units_for_duration
from recurrence_system.errors import ConfigurationError
from tests.helpers import UNIT, make_activity


def _catalog(activities, horizon_units: int = 480, default_gap_units: int = 192) -> ActivityCatalog:
    return ActivityCatalog(activities, UNIT, horizon_units, default_gap_units)


@pytest.mark.parametrize("hours, expected", [(1, 4), (0.25, 1), (1.5, 6), (0.75, 3), (Decimal("2.5"), 10)])
def test_duration_converted_to_units(hours, expected) -> None:
    assert units_for_duration(hours, UNIT) == expected


@pytest.mark.parametrize("hours", [0.1, 1.1, 0, -1, float("nan"), float("inf"), None, "two"])
def test_duration_must_be_positive_multiple_of_unit(hours) -> None:
    with pytest.raises(ConfigurationError):
        units_for_duration(hours, UNIT)


def test_catalog_resolves_units_and_default_gap() -> None:
    catalog = _catalog([
        make_activity(1, hours=1, repetitions=2),
        make_activity(2, hours=2, repetitions=3, gap_units=96),
    ])

    first, second = catalog.activities
    assert (first.units_needed, first.gap_units) == (4, 192)
    assert (second.units_needed, second.gap_units) == (8, 96)
    assert catalog.duration(second) == timedelta(hours=2)
    assert catalog.gap(first) == timedelta(days=2)
    assert catalog.get(2) is second
    assert len(catalog) == 2


def test_catalog_does_not_mutate_input_activities() -> None:
    original = make_activity(1, hours=1, repetitions=2)
    _catalog([original])

    assert original.units_needed is None
    assert original.gap_units is None


def test_empty_catalog_rejected() -> None:
    with pytest.raises(ConfigurationError, match="empty"):
        _catalog([])


def test_duplicate_ids_rejected() -> None:
    with pytest.raises(ConfigurationError, match="Duplicate"):
        _catalog([make_activity(1), make_activity(1)])


def test_footprint_longer_than_horizon_rejected() -> None:
    # 3 repetitions two days apart need more than 4 days
    with pytest.raises(ConfigurationError, match="horizon"):
        _catalog([make_activity(1, repetitions=3)], horizon_units=4 * 96)


def test_overlapping_repetitions_rejected() -> None:
    with pytest.raises(ConfigurationError, match="shorter than"):
        _catalog([make_activity(1, hours=2, repetitions=2, gap_units=4)])


def test_zero_repetitions_rejected() -> None:
    with pytest.raises(ConfigurationError):
        _catalog([make_activity(1, repetitions=0)])


def test_zero_gap_allowed_for_single_repetition() -> None:
    catalog = _catalog([make_activity(1, repetitions=1, gap_units=0)])

    assert catalog.activities[0].gap_units == 0
