"""Visit records and week-level timeline primitives."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date, timedelta
from typing import Any


@dataclass(frozen=True, slots=True)
class VisitRecord:
    """One deacon visit to one household.

    ``cycle`` is only meaningful in uniform mode; variable-mode records carry
    ``ceil(week / household_frequency)`` so uniform-mode consumers keep working.
    """

    cycle: int
    week: int
    date: date
    household: str
    deacon: str
    deacon_index: int
    household_frequency: int
    is_custom_frequency: bool

    def sort_key(self) -> tuple[int, str]:
        return (self.week, self.household)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class TimelineEntry:
    """A single (household, week) visit slot awaiting a deacon."""

    household: str
    household_index: int
    week: int
    frequency: int
    is_custom: bool


def visit_weeks(frequency: int, num_weeks: int) -> list[int]:
    """Return ``{1, 1+f, 1+2f, ...}`` clipped to ``[1, num_weeks]``."""
    if frequency < 1:
        raise ValueError(f"frequency must be >= 1, got {frequency}")
    return list(range(1, num_weeks + 1, frequency))


def visit_date(start_date: date, week: int) -> date:
    """Calendar date of a 1-based week offset from ``start_date``."""
    return start_date + timedelta(days=(week - 1) * 7)


def sort_records(records: list[VisitRecord]) -> list[VisitRecord]:
    """Order records by week, then household name."""
    return sorted(records, key=VisitRecord.sort_key)


__all__ = ["VisitRecord", "TimelineEntry", "visit_weeks", "visit_date", "sort_records"]
