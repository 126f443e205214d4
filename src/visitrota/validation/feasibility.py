"""Workload feasibility checks run before any schedule generation."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from visitrota.core.errors import FeasibilityError, LowWorkloadWarning
from visitrota.scenario.contract.models import RotationConfig

MIN_WEEKS_PER_VISIT = 3.0
LOW_WORKLOAD_WEEKS_PER_VISIT = 12.0
MAX_TOTAL_VISITS = 2000


@dataclass(slots=True)
class FeasibilityReport:
    """Workload figures for a configuration that passed the hard checks.

    Attributes
    ----------
    total_visits:
        Visits the horizon requires across all households.
    visits_per_deacon:
        ``total_visits / deacon_count``.
    weeks_per_visit:
        Average weeks between visits for one deacon (``num_weeks / visits_per_deacon``).
    warnings:
        Continuable conditions (currently only :class:`LowWorkloadWarning`).
    """

    total_visits: int
    visits_per_deacon: float
    weeks_per_visit: float
    warnings: list[LowWorkloadWarning] = field(default_factory=list)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)


def total_visits_needed(config: RotationConfig) -> int:
    """Number of visits the horizon requires.

    Each household contributes ``ceil(num_weeks / frequency)`` visits; with a single shared
    frequency this equals ``ceil(num_weeks / frequency) * household_count``.
    """
    return sum(
        math.ceil(config.num_weeks / entry.frequency) for entry in config.resolved_households()
    )


def check_feasibility(config: RotationConfig) -> FeasibilityReport:
    """Reject degenerate or oversized workloads.

    Raises
    ------
    FeasibilityError
        ``reason="too frequent"`` when each deacon would visit more often than every
        ``MIN_WEEKS_PER_VISIT`` weeks; ``reason="too large"`` when the schedule needs more than
        ``MAX_TOTAL_VISITS`` visits.
    """
    total = total_visits_needed(config)
    per_deacon = total / config.deacon_count
    weeks_per_visit = config.num_weeks / per_deacon

    if weeks_per_visit < MIN_WEEKS_PER_VISIT:
        raise FeasibilityError(
            "too frequent",
            f"Each deacon would visit every {weeks_per_visit:.1f} weeks "
            f"(minimum {MIN_WEEKS_PER_VISIT:g}). Add deacons (current: {config.deacon_count}), "
            f"reduce visit frequency (default: every {config.default_visit_frequency} weeks), "
            f"reduce households (current: {config.household_count}) or shorten the schedule "
            f"(current: {config.num_weeks} weeks)",
            total_visits=total,
            visits_per_deacon=per_deacon,
            weeks_per_visit=weeks_per_visit,
        )

    if total > MAX_TOTAL_VISITS:
        raise FeasibilityError(
            "too large",
            f"{total} total visits would exceed the limit of {MAX_TOTAL_VISITS}. "
            "Try reducing the number of weeks or visit frequency",
            total_visits=total,
            visits_per_deacon=per_deacon,
            weeks_per_visit=weeks_per_visit,
        )

    report = FeasibilityReport(
        total_visits=total,
        visits_per_deacon=per_deacon,
        weeks_per_visit=weeks_per_visit,
    )
    if weeks_per_visit > LOW_WORKLOAD_WEEKS_PER_VISIT:
        report.warnings.append(LowWorkloadWarning(weeks_per_visit, LOW_WORKLOAD_WEEKS_PER_VISIT))
    return report


__all__ = [
    "MIN_WEEKS_PER_VISIT",
    "LOW_WORKLOAD_WEEKS_PER_VISIT",
    "MAX_TOTAL_VISITS",
    "FeasibilityReport",
    "check_feasibility",
    "total_visits_needed",
]
