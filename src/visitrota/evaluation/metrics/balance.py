"""Balance and coverage diagnostics for generated schedules."""

from __future__ import annotations

import math
from collections import defaultdict
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import pandas as pd

from visitrota.scenario.contract.models import RotationConfig
from visitrota.scheduling.records import VisitRecord

__all__ = [
    "BalanceRating",
    "HarmonicInfo",
    "SameWeekBooking",
    "Diagnostics",
    "analyze_harmonics",
    "analyze_schedule",
    "classify_balance",
]

EXCELLENT_MAX_IMBALANCE = 1
EXCELLENT_MIN_COVERAGE = 80.0
GOOD_MAX_IMBALANCE = 2
GOOD_MIN_COVERAGE = 60.0
HARMONIC_LOCK_MAX_COVERAGE = 30.0


class BalanceRating(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    HARMONIC_LOCK = "harmonic_lock"
    NEEDS_IMPROVEMENT = "needs_improvement"


@dataclass(frozen=True, slots=True)
class HarmonicInfo:
    """Shared-factor structure between the deacon and household counts.

    A common factor is what locks a subset of deacons onto a subset of households under naive
    modular assignment.
    """

    deacon_count: int
    household_count: int
    common_factor: int
    lcm: int
    ratio: float
    is_simple_harmonic: bool
    is_complex_harmonic: bool
    cycles_for_full_rotation: int

    @property
    def is_harmonic(self) -> bool:
        return self.common_factor > 1


@dataclass(frozen=True, slots=True)
class SameWeekBooking:
    """A deacon holding more than one household in the same week."""

    week: int
    deacon: str
    households: tuple[str, ...]


@dataclass(slots=True)
class Diagnostics:
    """Structured result of :func:`analyze_schedule`.

    Attributes
    ----------
    visit_counts:
        Visits per deacon, in configuration order (deacons without visits report ``0``).
    households_visited:
        Distinct households per deacon, sorted by name.
    min_visits / max_visits / imbalance:
        Workload spread across deacons.
    coverage_percentage:
        Share of deacons that visited every household at least once.
    rating:
        :class:`BalanceRating` derived from imbalance and coverage.
    double_bookings:
        Same-week multi-household assignments (only possible when deacons < households).
    """

    total_visits: int
    visit_counts: dict[str, int]
    households_visited: dict[str, tuple[str, ...]]
    min_visits: int
    max_visits: int
    imbalance: int
    avg_visits_per_deacon: float
    avg_households_per_deacon: float
    deacons_with_full_coverage: int
    coverage_percentage: float
    rating: BalanceRating
    harmonic: HarmonicInfo
    double_bookings: list[SameWeekBooking] = field(default_factory=list)
    frequency_distribution: dict[int, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Return scalar totals as a plain dictionary."""
        return {
            "total_visits": self.total_visits,
            "min_visits": self.min_visits,
            "max_visits": self.max_visits,
            "imbalance": self.imbalance,
            "avg_visits_per_deacon": round(self.avg_visits_per_deacon, 3),
            "avg_households_per_deacon": round(self.avg_households_per_deacon, 3),
            "deacons_with_full_coverage": self.deacons_with_full_coverage,
            "coverage_percentage": round(self.coverage_percentage, 3),
            "rating": self.rating.value,
            "harmonic": self.harmonic.is_harmonic,
            "common_factor": self.harmonic.common_factor,
            "double_bookings": len(self.double_bookings),
        }

    def to_dataframe(self) -> pd.DataFrame:
        """Per-deacon table with visit and distinct-household counts."""
        rows = [
            {
                "deacon": deacon,
                "visits": count,
                "households": len(self.households_visited[deacon]),
                "household_names": ", ".join(self.households_visited[deacon]),
            }
            for deacon, count in self.visit_counts.items()
        ]
        return pd.DataFrame(rows, columns=["deacon", "visits", "households", "household_names"])


def analyze_harmonics(deacon_count: int, household_count: int) -> HarmonicInfo:
    common = math.gcd(deacon_count, household_count)
    lcm = deacon_count * household_count // common
    simple = deacon_count % household_count == 0
    return HarmonicInfo(
        deacon_count=deacon_count,
        household_count=household_count,
        common_factor=common,
        lcm=lcm,
        ratio=deacon_count / household_count,
        is_simple_harmonic=simple,
        is_complex_harmonic=common > 1 and not simple,
        cycles_for_full_rotation=lcm // household_count,
    )


def classify_balance(imbalance: int, coverage_percentage: float) -> BalanceRating:
    if imbalance <= EXCELLENT_MAX_IMBALANCE and coverage_percentage >= EXCELLENT_MIN_COVERAGE:
        return BalanceRating.EXCELLENT
    if imbalance <= GOOD_MAX_IMBALANCE and coverage_percentage >= GOOD_MIN_COVERAGE:
        return BalanceRating.GOOD
    if coverage_percentage < HARMONIC_LOCK_MAX_COVERAGE:
        return BalanceRating.HARMONIC_LOCK
    return BalanceRating.NEEDS_IMPROVEMENT


def _same_week_bookings(schedule: Sequence[VisitRecord]) -> list[SameWeekBooking]:
    grouped: dict[tuple[int, str], list[str]] = defaultdict(list)
    for record in schedule:
        grouped[(record.week, record.deacon)].append(record.household)
    return [
        SameWeekBooking(week=week, deacon=deacon, households=tuple(sorted(households)))
        for (week, deacon), households in sorted(grouped.items())
        if len(households) > 1
    ]


def analyze_schedule(schedule: Sequence[VisitRecord], config: RotationConfig) -> Diagnostics:
    """Compute workload balance and household coverage for ``schedule``.

    Pure function: the schedule is neither modified nor gated.

    Raises
    ------
    ValueError
        When the schedule references deacons that are not part of ``config``.
    """
    known = set(config.deacons)
    unknown = sorted({record.deacon for record in schedule} - known)
    if unknown:
        raise ValueError(f"Schedule references unknown deacons: {', '.join(unknown)}")

    counts: dict[str, int] = {deacon: 0 for deacon in config.deacons}
    visited: dict[str, set[str]] = {deacon: set() for deacon in config.deacons}
    for record in schedule:
        counts[record.deacon] += 1
        visited[record.deacon].add(record.household)

    household_total = config.household_count
    full_coverage = sum(1 for households in visited.values() if len(households) == household_total)
    coverage = full_coverage / config.deacon_count * 100
    min_visits = min(counts.values())
    max_visits = max(counts.values())
    imbalance = max_visits - min_visits

    distribution = {
        frequency: len(names) for frequency, names in config.frequency_distribution().items()
    }

    return Diagnostics(
        total_visits=len(schedule),
        visit_counts=counts,
        households_visited={deacon: tuple(sorted(names)) for deacon, names in visited.items()},
        min_visits=min_visits,
        max_visits=max_visits,
        imbalance=imbalance,
        avg_visits_per_deacon=len(schedule) / config.deacon_count,
        avg_households_per_deacon=sum(len(names) for names in visited.values())
        / config.deacon_count,
        deacons_with_full_coverage=full_coverage,
        coverage_percentage=coverage,
        rating=classify_balance(imbalance, coverage),
        harmonic=analyze_harmonics(config.deacon_count, household_total),
        double_bookings=_same_week_bookings(schedule),
        frequency_distribution=distribution,
    )
