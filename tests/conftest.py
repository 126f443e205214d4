from __future__ import annotations

from datetime import date
from itertools import count

import pytest

from visitrota.scenario.io import build_config

START = date(2025, 1, 6)


@pytest.fixture
def ticking_clock():
    """Factory for clocks that advance ``step`` seconds every time they are read."""

    def factory(step: float = 1.0):
        ticks = count()
        return lambda: next(ticks) * step

    return factory


@pytest.fixture
def uniform_config():
    """Three deacons rotating over two households every other week for six weeks."""
    return build_config(
        deacons=["A", "B", "C"],
        households=["X", "Y"],
        start_date=START,
        num_weeks=6,
        default_visit_frequency=2,
    )


@pytest.fixture
def variable_config():
    """Weekly household X alongside household Y every third week."""
    return build_config(
        deacons=["A", "B", "C", "D", "E"],
        households=[{"name": "Y", "frequency": 3}, {"name": "X", "frequency": 1}],
        start_date=START,
        num_weeks=6,
        default_visit_frequency=2,
    )
