from __future__ import annotations

from datetime import date

import pytest

from visitrota.core.errors import FeasibilityError, LowWorkloadWarning
from visitrota.scenario.io import build_config
from visitrota.validation.feasibility import (
    MAX_TOTAL_VISITS,
    check_feasibility,
    total_visits_needed,
)


def _config(deacons: int, households, *, frequency: int, num_weeks: int):
    return build_config(
        deacons=[f"D{index}" for index in range(deacons)],
        households=households if isinstance(households, list) else [f"H{i}" for i in range(households)],
        start_date=date(2025, 1, 6),
        num_weeks=num_weeks,
        default_visit_frequency=frequency,
    )


def test_workload_figures():
    report = check_feasibility(_config(3, 2, frequency=2, num_weeks=12))
    assert report.total_visits == 12
    assert report.visits_per_deacon == pytest.approx(4.0)
    assert report.weeks_per_visit == pytest.approx(3.0)
    assert report.warnings == []
    assert not report.has_warnings


def test_too_frequent_rejected():
    with pytest.raises(FeasibilityError, match="too frequent") as excinfo:
        check_feasibility(_config(2, 10, frequency=1, num_weeks=4))
    error = excinfo.value
    assert error.reason == "too frequent"
    assert error.total_visits == 40
    assert error.visits_per_deacon == pytest.approx(20.0)
    assert error.weeks_per_visit == pytest.approx(0.2)


def test_exactly_max_visits_accepted():
    config = _config(20, 4, frequency=1, num_weeks=500)
    report = check_feasibility(config)
    assert report.total_visits == MAX_TOTAL_VISITS


def test_one_over_max_visits_rejected():
    config = _config(100, 23, frequency=1, num_weeks=87)
    assert total_visits_needed(config) == MAX_TOTAL_VISITS + 1
    with pytest.raises(FeasibilityError, match="too large") as excinfo:
        check_feasibility(config)
    assert excinfo.value.reason == "too large"
    assert excinfo.value.total_visits == 2001


def test_low_workload_is_a_warning_not_an_error():
    report = check_feasibility(_config(10, 2, frequency=4, num_weeks=52))
    assert report.weeks_per_visit == pytest.approx(20.0)
    assert len(report.warnings) == 1
    warning = report.warnings[0]
    assert isinstance(warning, LowWorkloadWarning)
    assert warning.weeks_per_visit == pytest.approx(20.0)
    assert "20.0 weeks" in str(warning)


def test_override_frequencies_count_per_household():
    config = _config(
        4,
        [{"name": "X", "frequency": 1}, {"name": "Y", "frequency": 3}],
        frequency=2,
        num_weeks=6,
    )
    assert total_visits_needed(config) == 8
