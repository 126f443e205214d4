"""Tabular views of visit schedules."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import pandas as pd

from visitrota.scheduling.records import VisitRecord

SCHEDULE_COLUMNS: tuple[str, ...] = (
    "cycle",
    "week",
    "date",
    "household",
    "deacon",
    "deacon_index",
    "household_frequency",
    "is_custom_frequency",
)


def schedule_to_dataframe(schedule: Sequence[VisitRecord]) -> pd.DataFrame:
    """Return the schedule as a DataFrame with one row per visit."""
    rows = [record.to_dict() for record in schedule]
    return pd.DataFrame(rows, columns=list(SCHEDULE_COLUMNS))


def schedule_from_dataframe(frame: pd.DataFrame) -> list[VisitRecord]:
    """Rebuild :class:`VisitRecord` objects from an exported table."""
    missing = set(SCHEDULE_COLUMNS) - set(frame.columns)
    if missing:
        raise ValueError(f"Schedule table missing columns: {sorted(missing)}")
    dates = pd.to_datetime(frame["date"]).dt.date
    records: list[VisitRecord] = []
    for row, when in zip(frame.itertuples(index=False), dates):
        records.append(
            VisitRecord(
                cycle=int(row.cycle),
                week=int(row.week),
                date=when,
                household=str(row.household),
                deacon=str(row.deacon),
                deacon_index=int(row.deacon_index),
                household_frequency=int(row.household_frequency),
                is_custom_frequency=str(row.is_custom_frequency).strip().lower() in {"true", "1"},
            )
        )
    return records


def write_schedule_csv(schedule: Sequence[VisitRecord], path: str | Path) -> Path:
    """Write the schedule to CSV, creating parent directories as needed."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    schedule_to_dataframe(schedule).to_csv(path, index=False)
    return path


def read_schedule_csv(path: str | Path) -> list[VisitRecord]:
    """Read a schedule written by :func:`write_schedule_csv`; names are kept as text."""
    frame = pd.read_csv(
        path, dtype={"household": str, "deacon": str}, keep_default_na=False
    )
    return schedule_from_dataframe(frame)


__all__ = [
    "SCHEDULE_COLUMNS",
    "schedule_to_dataframe",
    "schedule_from_dataframe",
    "write_schedule_csv",
    "read_schedule_csv",
]
