"""Schedule metrics."""

from .balance import (
    BalanceRating,
    Diagnostics,
    HarmonicInfo,
    SameWeekBooking,
    analyze_harmonics,
    analyze_schedule,
    classify_balance,
)

__all__ = [
    "BalanceRating",
    "Diagnostics",
    "HarmonicInfo",
    "SameWeekBooking",
    "analyze_harmonics",
    "analyze_schedule",
    "classify_balance",
]
