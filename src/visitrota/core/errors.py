"""Exceptions and warnings raised by the rotation scheduler."""

from __future__ import annotations


class VisitRotaError(Exception):
    """Base class for all scheduler failures."""


class ConfigurationError(VisitRotaError, ValueError):
    """Raised when the rotation configuration is missing or malformed."""


class FeasibilityError(VisitRotaError, ValueError):
    """Raised when the requested workload cannot be scheduled.

    Attributes
    ----------
    reason:
        ``"too frequent"`` when deacons would visit more often than every three weeks,
        ``"too large"`` when the total visit count exceeds the size ceiling.
    total_visits / visits_per_deacon / weeks_per_visit:
        Values computed by the feasibility check that triggered the failure.
    """

    def __init__(
        self,
        reason: str,
        message: str,
        *,
        total_visits: int,
        visits_per_deacon: float,
        weeks_per_visit: float,
    ) -> None:
        super().__init__(f"{reason}: {message}")
        self.reason = reason
        self.total_visits = total_visits
        self.visits_per_deacon = visits_per_deacon
        self.weeks_per_visit = weeks_per_visit


class GenerationTimeoutError(VisitRotaError, TimeoutError):
    """Raised when a generation run exceeds its wall-clock budget.

    ``position`` is the 1-based timeline index (variable mode) or cycle (uniform mode)
    being processed when the budget ran out.
    """

    def __init__(self, *, position: int, week: int, elapsed: float, budget: float) -> None:
        super().__init__(
            f"Schedule too large - exceeded {budget:.1f}s time limit at position {position} "
            f"(week {week}) after {elapsed:.2f}s"
        )
        self.position = position
        self.week = week
        self.elapsed = elapsed
        self.budget = budget


class InternalInvariantError(VisitRotaError, RuntimeError):
    """Raised when the scheduler reaches a state that valid input cannot produce."""


class LowWorkloadWarning(UserWarning):
    """Each deacon would visit less often than every twelve weeks.

    Emitted as a warning rather than raised: callers decide whether to proceed.
    """

    def __init__(self, weeks_per_visit: float, threshold: float) -> None:
        super().__init__(
            f"Each deacon will only visit every {weeks_per_visit:.1f} weeks "
            f"(more than {threshold:g}); this may be too infrequent"
        )
        self.weeks_per_visit = weeks_per_visit
        self.threshold = threshold


__all__ = [
    "VisitRotaError",
    "ConfigurationError",
    "FeasibilityError",
    "GenerationTimeoutError",
    "InternalInvariantError",
    "LowWorkloadWarning",
]
