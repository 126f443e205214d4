"""Schedule generation entry point (mode dispatch, feasibility gate, telemetry)."""

from __future__ import annotations

import warnings
from collections import Counter
from contextlib import nullcontext
from pathlib import Path
from typing import Any

from visitrota.optimization.heuristics.common import (
    DEFAULT_TIME_BUDGET_SECONDS,
    Clock,
    RunDeadline,
)
from visitrota.optimization.heuristics.rotation import generate_rotation_pattern
from visitrota.optimization.heuristics.timeline import assign_timeline, build_timeline
from visitrota.scenario.contract.models import RotationConfig
from visitrota.scheduling.records import VisitRecord, sort_records, visit_date
from visitrota.telemetry import RunTelemetryLogger
from visitrota.validation.feasibility import check_feasibility

__all__ = ["UNIFORM_MODE", "VARIABLE_MODE", "generate_schedule", "schedule_mode"]

UNIFORM_MODE = "uniform"
VARIABLE_MODE = "variable"


def schedule_mode(config: RotationConfig) -> str:
    """Return ``"variable"`` when any household overrides the default cadence."""
    return VARIABLE_MODE if config.has_custom_frequencies else UNIFORM_MODE


def _uniform_schedule(config: RotationConfig, deadline: RunDeadline) -> list[VisitRecord]:
    frequency = config.default_visit_frequency
    pattern = generate_rotation_pattern(
        config.deacon_count,
        config.household_count,
        config.total_cycles(),
        weights=config.scoring.uniform,
        deadline=deadline,
        cycle_weeks=frequency,
    )
    records: list[VisitRecord] = []
    for cycle, cycle_deacons in enumerate(pattern.assignments):
        week = cycle * frequency + 1
        if week > config.num_weeks:
            break
        when = visit_date(config.start_date, week)
        for household, deacon_index in zip(config.households, cycle_deacons):
            records.append(
                VisitRecord(
                    cycle=cycle + 1,
                    week=week,
                    date=when,
                    household=household.name,
                    deacon=config.deacons[deacon_index],
                    deacon_index=deacon_index,
                    household_frequency=frequency,
                    is_custom_frequency=False,
                )
            )
    return sort_records(records)


def _variable_schedule(config: RotationConfig, deadline: RunDeadline) -> list[VisitRecord]:
    timeline = build_timeline(config)
    return assign_timeline(
        config, timeline, weights=config.scoring.timeline, deadline=deadline
    )


def _config_summary(config: RotationConfig) -> dict[str, Any]:
    return {
        "deacons": config.deacon_count,
        "households": config.household_count,
        "num_weeks": config.num_weeks,
        "default_visit_frequency": config.default_visit_frequency,
        "start_date": config.start_date.isoformat(),
        "custom_frequencies": sum(1 for household in config.households if household.is_custom),
    }


def generate_schedule(
    config: RotationConfig,
    *,
    time_budget: float = DEFAULT_TIME_BUDGET_SECONDS,
    clock: Clock | None = None,
    telemetry_log: str | Path | None = None,
    telemetry_context: dict[str, Any] | None = None,
) -> list[VisitRecord]:
    """Generate the full visit schedule for ``config``.

    Parameters
    ----------
    config:
        Validated :class:`RotationConfig`.
    time_budget:
        Wall-clock seconds allowed for assignment before the run is abandoned.
    clock:
        Monotonic clock used for the budget (defaults to ``time.perf_counter``).
    telemetry_log:
        Optional JSONL path; one run record is appended whether the run succeeds or fails.
    telemetry_context:
        Extra metadata stored with the telemetry record.

    Returns
    -------
    list[VisitRecord]
        Records ordered by week, then household name. Identical configs yield identical lists.

    Raises
    ------
    FeasibilityError
        Raised before generation when the workload is too frequent or too large.
    GenerationTimeoutError
        Raised when the budget is exceeded; no partial schedule is returned.
    InternalInvariantError
        Raised on an internal logic defect.

    Warns
    -----
    LowWorkloadWarning
        When each deacon would visit less often than every twelve weeks. Turn it into an error with
        ``warnings.simplefilter("error", LowWorkloadWarning)`` to stop instead.
    """
    report = check_feasibility(config)
    for warning in report.warnings:
        warnings.warn(warning, stacklevel=2)

    mode = schedule_mode(config)
    logger_cm = (
        RunTelemetryLogger(
            log_path=Path(telemetry_log),
            mode=mode,
            config=_config_summary(config),
            context=telemetry_context,
        )
        if telemetry_log
        else nullcontext()
    )
    with logger_cm as run_logger:
        if clock is None:
            deadline = RunDeadline(budget=time_budget)
        else:
            deadline = RunDeadline(budget=time_budget, clock=clock)
        if mode == VARIABLE_MODE:
            records = _variable_schedule(config, deadline)
        else:
            records = _uniform_schedule(config, deadline)

        if run_logger is not None:
            workload = Counter(record.deacon for record in records)
            counts = [workload.get(name, 0) for name in config.deacons]
            run_logger.finalize(
                status="ok",
                metrics={
                    "visits": len(records),
                    "expected_visits": report.total_visits,
                    "weeks_per_visit": round(report.weeks_per_visit, 3),
                    "min_visits": min(counts),
                    "max_visits": max(counts),
                    "imbalance": max(counts) - min(counts),
                },
                warnings=[str(warning) for warning in report.warnings],
            )
    return records
