from __future__ import annotations

import pytest

from visitrota.core.errors import GenerationTimeoutError
from visitrota.optimization.heuristics.common import RunDeadline
from visitrota.optimization.heuristics.rotation import (
    DoubleBooking,
    generate_rotation_pattern,
)
from visitrota.scenario.contract.models import UniformWeights


def _ticking_clock(step: float = 1.0):
    state = {"now": 0.0}

    def clock() -> float:
        now = state["now"]
        state["now"] += step
        return now

    return clock


def test_three_deacons_two_households_balance_perfectly():
    pattern = generate_rotation_pattern(3, 2, 3)
    assert pattern.assignments == [[0, 1], [2, 0], [1, 2]]
    assert pattern.usage == [2, 2, 2]
    assert pattern.imbalance == 0
    assert pattern.double_bookings == []


def test_no_deacon_repeats_within_a_cycle():
    pattern = generate_rotation_pattern(7, 5, 20)
    for cycle in pattern.assignments:
        assert len(cycle) == 5
        assert len(set(cycle)) == 5
    assert sum(pattern.usage) == 5 * 20


def test_harmonic_counts_do_not_lock_deacons_to_one_household():
    # Naive (cycle * H + h) mod D with 12 deacons and 6 households pins each deacon to one household.
    pattern = generate_rotation_pattern(12, 6, 24)
    for deacon_row in pattern.pair_counts:
        assert sum(1 for count in deacon_row if count > 0) >= 3
    assert pattern.imbalance <= 1


def test_pair_counts_match_assignments():
    pattern = generate_rotation_pattern(4, 3, 6)
    rebuilt = [[0] * 3 for _ in range(4)]
    for cycle in pattern.assignments:
        for household_index, deacon_index in enumerate(cycle):
            rebuilt[deacon_index][household_index] += 1
    assert rebuilt == pattern.pair_counts


def test_fewer_deacons_than_households_records_double_bookings():
    pattern = generate_rotation_pattern(2, 3, 2)
    assert pattern.assignments == [[0, 1, 0], [1, 0, 1]]
    assert pattern.double_bookings == [
        DoubleBooking(cycle=0, household_index=2, deacon_index=0),
        DoubleBooking(cycle=1, household_index=2, deacon_index=1),
    ]
    assert pattern.usage == [3, 3]


def test_fallback_respects_per_cycle_capacity():
    pattern = generate_rotation_pattern(2, 5, 4)
    for cycle in pattern.assignments:
        assert max(cycle.count(0), cycle.count(1)) <= 3


def test_custom_weights_change_selection():
    # Without the new-pair bonus and pair penalty only usage matters: ties fall to index order.
    weights = UniformWeights(usage=1.0, pair_repeat=0.0, new_pair_bonus=0.0)
    pattern = generate_rotation_pattern(2, 1, 4, weights=weights)
    assert [cycle[0] for cycle in pattern.assignments] == [0, 1, 0, 1]


def test_deadline_checked_at_cycle_boundaries():
    deadline = RunDeadline(budget=2.5, clock=_ticking_clock())
    with pytest.raises(GenerationTimeoutError) as excinfo:
        generate_rotation_pattern(3, 2, 10, deadline=deadline, cycle_weeks=2)
    assert excinfo.value.position == 3
    assert excinfo.value.week == 5


def test_rejects_empty_dimensions():
    with pytest.raises(ValueError):
        generate_rotation_pattern(0, 2, 1)
