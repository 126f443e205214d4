"""Scheduling primitives (visit records, week timeline helpers)."""

from .records import TimelineEntry, VisitRecord, sort_records, visit_date, visit_weeks

__all__ = ["VisitRecord", "TimelineEntry", "visit_weeks", "visit_date", "sort_records"]
