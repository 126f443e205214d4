from __future__ import annotations

import warnings
from collections import defaultdict
from datetime import date

from hypothesis import HealthCheck, assume, given, settings, strategies as st

from visitrota.core.errors import FeasibilityError, LowWorkloadWarning
from visitrota.optimization import generate_schedule
from visitrota.scenario.io import build_config
from visitrota.scheduling.records import visit_weeks
from visitrota.validation import check_feasibility, total_visits_needed


@st.composite
def rotation_configs(draw):
    deacon_count = draw(st.integers(min_value=2, max_value=10))
    household_count = draw(st.integers(min_value=1, max_value=6))
    overrides = draw(
        st.lists(
            st.one_of(st.none(), st.integers(min_value=1, max_value=8)),
            min_size=household_count,
            max_size=household_count,
        )
    )
    households = [
        {"name": f"H{index:02d}", "frequency": frequency}
        for index, frequency in enumerate(overrides)
    ]
    return build_config(
        deacons=[f"D{index:02d}" for index in range(deacon_count)],
        households=households,
        start_date=date(2025, 1, 6),
        num_weeks=draw(st.integers(min_value=1, max_value=60)),
        default_visit_frequency=draw(st.integers(min_value=1, max_value=8)),
    )


def _generate(config):
    try:
        check_feasibility(config)
    except FeasibilityError:
        assume(False)
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", LowWorkloadWarning)
        return generate_schedule(config)


@settings(max_examples=60, deadline=None, suppress_health_check=[HealthCheck.filter_too_much])
@given(config=rotation_configs())
def test_schedule_properties(config):
    schedule = _generate(config)

    assert schedule == _generate(config)
    assert len(schedule) == total_visits_needed(config)
    assert schedule == sorted(schedule, key=lambda record: (record.week, record.household))

    weeks_by_household = defaultdict(list)
    for record in schedule:
        weeks_by_household[record.household].append(record.week)
        assert record.deacon == config.deacons[record.deacon_index]
    for household in config.resolved_households():
        assert weeks_by_household[household.name] == visit_weeks(
            household.frequency, config.num_weeks
        )

    if not config.has_custom_frequencies and config.deacon_count >= config.household_count:
        by_cycle = defaultdict(list)
        for record in schedule:
            by_cycle[record.cycle].append(record.deacon_index)
        for deacon_indices in by_cycle.values():
            assert len(deacon_indices) == len(set(deacon_indices))
