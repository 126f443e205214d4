"""Variable-frequency timeline scheduler.

Households carry individual cadences, so visits are laid out on one merged week timeline and
assigned sequentially. Each slot goes to the deacon with the lowest
:class:`visitrota.scenario.contract.models.TimelineWeights` score (ties to the lowest index).
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from visitrota.optimization.heuristics.common import PairTable, RunDeadline
from visitrota.scenario.contract.models import RotationConfig, TimelineWeights
from visitrota.scheduling.records import TimelineEntry, VisitRecord, visit_date, visit_weeks

__all__ = ["TimelineState", "build_timeline", "assign_timeline"]


def build_timeline(config: RotationConfig) -> list[TimelineEntry]:
    """Merge every household's visit weeks into one ``(week, household name)`` ordered list."""
    entries: list[TimelineEntry] = []
    for household in config.resolved_households():
        for week in visit_weeks(household.frequency, config.num_weeks):
            entries.append(
                TimelineEntry(
                    household=household.name,
                    household_index=household.index,
                    week=week,
                    frequency=household.frequency,
                    is_custom=household.is_custom,
                )
            )
    entries.sort(key=lambda entry: (entry.week, entry.household))
    return entries


@dataclass(slots=True)
class TimelineState:
    """Per-run counters; discarded once the run completes or fails."""

    workload: list[int]
    last_week: list[int | None]
    pairs: PairTable

    @classmethod
    def empty(cls, deacon_count: int, household_count: int) -> TimelineState:
        return cls(
            workload=[0] * deacon_count,
            last_week=[None] * deacon_count,
            pairs=PairTable(deacon_count, household_count),
        )

    def best_deacon(self, entry: TimelineEntry, weights: TimelineWeights) -> int:
        best_deacon = -1
        best_score = math.inf
        for deacon_index, workload in enumerate(self.workload):
            score = weights.score(
                workload=workload,
                week=entry.week,
                last_week=self.last_week[deacon_index],
                pair_count=self.pairs.get(deacon_index, entry.household_index),
                frequency=entry.frequency,
            )
            if score < best_score:
                best_score = score
                best_deacon = deacon_index
        return best_deacon

    def record(self, deacon_index: int, entry: TimelineEntry) -> None:
        self.workload[deacon_index] += 1
        self.last_week[deacon_index] = entry.week
        self.pairs.increment(deacon_index, entry.household_index)


def assign_timeline(
    config: RotationConfig,
    timeline: list[TimelineEntry] | None = None,
    *,
    weights: TimelineWeights | None = None,
    deadline: RunDeadline | None = None,
) -> list[VisitRecord]:
    """Assign a deacon to every timeline entry.

    Parameters
    ----------
    config:
        Validated configuration supplying deacons, start date and horizon.
    timeline:
        Pre-built timeline; defaults to :func:`build_timeline`.
    weights:
        Score weights; defaults to ``config.scoring.timeline``.
    deadline:
        Optional :class:`RunDeadline` checked before each entry. A timeout propagates before any
        record leaves this function.

    Returns
    -------
    list[VisitRecord]
        One record per timeline entry, in timeline order.
    """
    if timeline is None:
        timeline = build_timeline(config)
    weights = weights or config.scoring.timeline
    state = TimelineState.empty(config.deacon_count, config.household_count)
    records: list[VisitRecord] = []

    for position, entry in enumerate(timeline, start=1):
        if deadline is not None:
            deadline.check(position=position, week=entry.week)
        deacon_index = state.best_deacon(entry, weights)
        state.record(deacon_index, entry)
        records.append(
            VisitRecord(
                cycle=math.ceil(entry.week / entry.frequency),
                week=entry.week,
                date=visit_date(config.start_date, entry.week),
                household=entry.household,
                deacon=config.deacons[deacon_index],
                deacon_index=deacon_index,
                household_frequency=entry.frequency,
                is_custom_frequency=entry.is_custom,
            )
        )
    return records
