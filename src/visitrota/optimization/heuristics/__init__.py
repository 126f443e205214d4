"""Assignment heuristics for rotation schedules."""

from .common import DEFAULT_TIME_BUDGET_SECONDS, PairTable, RunDeadline
from .rotation import DoubleBooking, RotationPattern, generate_rotation_pattern
from .timeline import TimelineState, assign_timeline, build_timeline

__all__ = [
    "DEFAULT_TIME_BUDGET_SECONDS",
    "PairTable",
    "RunDeadline",
    "DoubleBooking",
    "RotationPattern",
    "generate_rotation_pattern",
    "TimelineState",
    "assign_timeline",
    "build_timeline",
]
