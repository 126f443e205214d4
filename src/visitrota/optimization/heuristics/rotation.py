"""Uniform rotation pattern generator.

Every household shares one cadence, so the horizon splits into ``ceil(num_weeks / f)`` cycles and
each cycle visits every household once. Deacons are chosen greedily per (cycle, household) by the
score in :class:`visitrota.scenario.contract.models.UniformWeights`; lower is better and ties go to
the lowest deacon index.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from visitrota.core.errors import InternalInvariantError
from visitrota.optimization.heuristics.common import PairTable, RunDeadline
from visitrota.scenario.contract.models import UniformWeights

__all__ = ["DoubleBooking", "RotationPattern", "generate_rotation_pattern"]


@dataclass(frozen=True, slots=True)
class DoubleBooking:
    """A deacon given a second household within one cycle (only when deacons < households)."""

    cycle: int
    household_index: int
    deacon_index: int


@dataclass(slots=True)
class RotationPattern:
    """Cycle-indexed assignment table.

    Attributes
    ----------
    assignments:
        ``assignments[cycle][household_index]`` is the assigned deacon index.
    usage:
        Total assignments per deacon.
    pair_counts:
        ``pair_counts[deacon_index][household_index]`` visit counts.
    double_bookings:
        Fallback assignments that reuse a deacon within a cycle.
    """

    assignments: list[list[int]]
    usage: list[int]
    pair_counts: list[list[int]]
    double_bookings: list[DoubleBooking] = field(default_factory=list)

    @property
    def imbalance(self) -> int:
        return max(self.usage) - min(self.usage) if self.usage else 0


def _fallback_deacon(
    cycle: int,
    household_index: int,
    household_count: int,
    cycle_load: list[int],
    capacity: int,
) -> int:
    deacon_count = len(cycle_load)
    candidate = (cycle * household_count + household_index) % deacon_count
    for _ in range(deacon_count):
        if cycle_load[candidate] < capacity:
            return candidate
        candidate = (candidate + 1) % deacon_count
    raise InternalInvariantError(
        f"No deacon has capacity left in cycle {cycle + 1} for household index {household_index} "
        f"(deacons={deacon_count}, households={household_count}, per-cycle capacity={capacity}, "
        f"loads={cycle_load})"
    )


def generate_rotation_pattern(
    deacon_count: int,
    household_count: int,
    total_cycles: int,
    *,
    weights: UniformWeights | None = None,
    deadline: RunDeadline | None = None,
    cycle_weeks: int = 1,
) -> RotationPattern:
    """Build the uniform-mode assignment table.

    Parameters
    ----------
    deacon_count, household_count:
        Sizes of the deacon and household lists (household order is fixed 0..H-1).
    total_cycles:
        Number of cycles to generate.
    weights:
        Score weights; defaults to :class:`UniformWeights`.
    deadline:
        Optional :class:`RunDeadline` checked at each cycle boundary.
    cycle_weeks:
        Cycle length in weeks, only used to report the week of a timeout.

    Notes
    -----
    Within a cycle a deacon is reused only once every deacon has been used. The round-robin
    fallback then picks ``(cycle * H + h) mod D`` and advances past deacons that already hold
    ``ceil(H / D)`` households this cycle. Those reuses are recorded as :class:`DoubleBooking`.
    """
    if deacon_count < 1 or household_count < 1:
        raise ValueError(
            f"deacon_count and household_count must be positive "
            f"(got {deacon_count}, {household_count})"
        )
    weights = weights or UniformWeights()
    usage = [0] * deacon_count
    pairs = PairTable(deacon_count, household_count)
    capacity = math.ceil(household_count / deacon_count)
    assignments: list[list[int]] = []
    double_bookings: list[DoubleBooking] = []

    for cycle in range(total_cycles):
        if deadline is not None:
            deadline.check(position=cycle + 1, week=cycle * cycle_weeks + 1)
        cycle_load = [0] * deacon_count
        cycle_assignments: list[int] = []
        for household_index in range(household_count):
            best_deacon = -1
            best_score = math.inf
            for deacon_index in range(deacon_count):
                if cycle_load[deacon_index]:
                    continue
                score = weights.score(usage[deacon_index], pairs.get(deacon_index, household_index))
                if score < best_score:
                    best_score = score
                    best_deacon = deacon_index
            if best_deacon == -1:
                best_deacon = _fallback_deacon(
                    cycle, household_index, household_count, cycle_load, capacity
                )
                double_bookings.append(
                    DoubleBooking(cycle=cycle, household_index=household_index, deacon_index=best_deacon)
                )
            cycle_assignments.append(best_deacon)
            cycle_load[best_deacon] += 1
            usage[best_deacon] += 1
            pairs.increment(best_deacon, household_index)
        assignments.append(cycle_assignments)

    return RotationPattern(
        assignments=assignments,
        usage=usage,
        pair_counts=pairs.as_lists(),
        double_bookings=double_bookings,
    )
