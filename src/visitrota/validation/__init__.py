"""Pre-generation validation."""

from .feasibility import FeasibilityReport, check_feasibility, total_visits_needed

__all__ = ["FeasibilityReport", "check_feasibility", "total_visits_needed"]
