from __future__ import annotations

import warnings
from collections import Counter, defaultdict
from datetime import date

import pytest

from visitrota.core.errors import (
    FeasibilityError,
    GenerationTimeoutError,
    LowWorkloadWarning,
)
from visitrota.optimization import generate_schedule, schedule_mode
from visitrota.scenario.io import build_config
from visitrota.scheduling.records import visit_weeks
from visitrota.telemetry import read_jsonl
from visitrota.validation import total_visits_needed


def _pairs(schedule):
    return [(record.week, record.household, record.deacon) for record in schedule]


def test_uniform_example_schedule(uniform_config):
    schedule = generate_schedule(uniform_config)

    assert schedule_mode(uniform_config) == "uniform"
    assert _pairs(schedule) == [
        (1, "X", "A"),
        (1, "Y", "B"),
        (3, "X", "C"),
        (3, "Y", "A"),
        (5, "X", "B"),
        (5, "Y", "C"),
    ]
    assert [record.cycle for record in schedule] == [1, 1, 2, 2, 3, 3]
    assert [record.date for record in schedule[::2]] == [
        date(2025, 1, 6),
        date(2025, 1, 20),
        date(2025, 2, 3),
    ]
    assert all(not record.is_custom_frequency for record in schedule)
    assert all(record.household_frequency == 2 for record in schedule)
    assert Counter(record.deacon for record in schedule) == {"A": 2, "B": 2, "C": 2}


def test_variable_example_schedule(variable_config):
    schedule = generate_schedule(variable_config)

    assert schedule_mode(variable_config) == "variable"
    assert _pairs(schedule) == [
        (1, "X", "A"),
        (1, "Y", "B"),
        (2, "X", "C"),
        (3, "X", "D"),
        (4, "X", "E"),
        (4, "Y", "A"),
        (5, "X", "B"),
        (6, "X", "C"),
    ]


def test_generation_is_deterministic(variable_config):
    assert generate_schedule(variable_config) == generate_schedule(variable_config)


@pytest.mark.parametrize(
    "households",
    [
        ["H1", "H2", "H3", "H4"],
        ["H1", {"name": "H2", "frequency": 3}, {"name": "H3", "frequency": 4}, "H4"],
    ],
)
def test_every_household_visited_on_its_cadence(households):
    config = build_config(
        deacons=[f"D{index}" for index in range(9)],
        households=households,
        start_date=date(2025, 3, 3),
        num_weeks=26,
        default_visit_frequency=2,
    )
    schedule = generate_schedule(config)

    assert len(schedule) == total_visits_needed(config)
    weeks_by_household = defaultdict(list)
    for record in schedule:
        weeks_by_household[record.household].append(record.week)
    for household in config.resolved_households():
        assert weeks_by_household[household.name] == visit_weeks(household.frequency, 26)
    assert schedule == sorted(schedule, key=lambda record: (record.week, record.household))
    assert all(record.deacon == config.deacons[record.deacon_index] for record in schedule)


def test_infeasible_config_rejected_before_generation(tmp_path):
    config = build_config(
        deacons=["A", "B"],
        households=[f"H{index}" for index in range(10)],
        start_date=date(2025, 1, 6),
        num_weeks=4,
        default_visit_frequency=1,
    )
    log_path = tmp_path / "runs.jsonl"
    with pytest.raises(FeasibilityError, match="too frequent"):
        generate_schedule(config, telemetry_log=log_path)
    assert not log_path.exists()


def test_size_ceiling_is_inclusive():
    config = build_config(
        deacons=[f"D{index}" for index in range(20)],
        households=["H1", "H2", "H3", "H4"],
        start_date=date(2025, 1, 6),
        num_weeks=500,
        default_visit_frequency=1,
    )
    assert len(generate_schedule(config)) == 2000


def test_low_workload_warns_and_still_generates():
    config = build_config(
        deacons=[f"D{index}" for index in range(10)],
        households=["H1", "H2"],
        start_date=date(2025, 1, 6),
        num_weeks=52,
        default_visit_frequency=4,
    )
    with pytest.warns(LowWorkloadWarning):
        schedule = generate_schedule(config)
    assert len(schedule) == 26


def test_low_workload_warning_can_be_escalated():
    config = build_config(
        deacons=[f"D{index}" for index in range(10)],
        households=["H1", "H2"],
        start_date=date(2025, 1, 6),
        num_weeks=52,
        default_visit_frequency=4,
    )
    with warnings.catch_warnings():
        warnings.simplefilter("error", LowWorkloadWarning)
        with pytest.raises(LowWorkloadWarning):
            generate_schedule(config)


def test_uniform_timeout_reports_cycle(uniform_config, ticking_clock):
    with pytest.raises(GenerationTimeoutError) as excinfo:
        generate_schedule(uniform_config, time_budget=2.5, clock=ticking_clock())
    assert excinfo.value.position == 3
    assert excinfo.value.week == 5
    assert excinfo.value.budget == 2.5


def test_variable_timeout_reports_timeline_position(variable_config, ticking_clock):
    with pytest.raises(GenerationTimeoutError, match="position 3") as excinfo:
        generate_schedule(variable_config, time_budget=2.5, clock=ticking_clock())
    assert excinfo.value.week == 2
    assert isinstance(excinfo.value, TimeoutError)


def test_generous_budget_with_fake_clock(variable_config, ticking_clock):
    schedule = generate_schedule(variable_config, time_budget=100, clock=ticking_clock())
    assert len(schedule) == 8


def test_telemetry_records_successful_run(tmp_path, uniform_config):
    log_path = tmp_path / "telemetry" / "runs.jsonl"
    generate_schedule(uniform_config, telemetry_log=log_path, telemetry_context={"source": "test"})

    (record,) = read_jsonl(log_path)
    assert record["record_type"] == "run"
    assert record["status"] == "ok"
    assert record["mode"] == "uniform"
    assert record["metrics"]["visits"] == 6
    assert record["metrics"]["expected_visits"] == 6
    assert record["metrics"]["imbalance"] == 0
    assert record["config"]["deacons"] == 3
    assert record["config"]["custom_frequencies"] == 0
    assert record["context"] == {"source": "test"}
    assert record["error"] is None


def test_telemetry_records_timeout(tmp_path, variable_config, ticking_clock):
    log_path = tmp_path / "runs.jsonl"
    with pytest.raises(GenerationTimeoutError):
        generate_schedule(
            variable_config, time_budget=2.5, clock=ticking_clock(), telemetry_log=log_path
        )

    (record,) = read_jsonl(log_path)
    assert record["status"] == "timeout"
    assert record["mode"] == "variable"
    assert record["error_type"] == "GenerationTimeoutError"
    assert "position 3" in record["error"]
    assert record["metrics"] == {}


def test_runs_append_to_the_same_log(tmp_path, uniform_config):
    log_path = tmp_path / "runs.jsonl"
    generate_schedule(uniform_config, telemetry_log=log_path)
    generate_schedule(uniform_config, telemetry_log=log_path)
    records = read_jsonl(log_path)
    assert len(records) == 2
    assert records[0]["run_id"] != records[1]["run_id"]
