"""Evaluation layer (balance metrics, quality review, exports)."""

from .export import (
    SCHEDULE_COLUMNS,
    read_schedule_csv,
    schedule_from_dataframe,
    schedule_to_dataframe,
    write_schedule_csv,
)
from .metrics.balance import BalanceRating, Diagnostics, analyze_schedule
from .quality import QualityReport, review_quality

__all__ = [
    "analyze_schedule",
    "Diagnostics",
    "BalanceRating",
    "review_quality",
    "QualityReport",
    "SCHEDULE_COLUMNS",
    "schedule_to_dataframe",
    "schedule_from_dataframe",
    "write_schedule_csv",
    "read_schedule_csv",
]
