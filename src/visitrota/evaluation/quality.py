"""Pairing-gap review of a generated schedule."""

from __future__ import annotations

import math
from collections import defaultdict
from collections.abc import Sequence
from dataclasses import dataclass, field

from visitrota.scenario.contract.models import RotationConfig
from visitrota.scheduling.records import VisitRecord

ISSUE_MAX_GAP_WEEKS = 3
WARNING_MAX_GAP_WEEKS = 6
REPEAT_WINDOW_WEEKS = 12


@dataclass(slots=True)
class QualityReport:
    """Findings from :func:`review_quality`; ``issues`` are stronger than ``warnings``."""

    issues: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.issues and not self.warnings


def review_quality(schedule: Sequence[VisitRecord], config: RotationConfig) -> QualityReport:
    """Flag deacons revisiting a household too soon or too often, and back-to-back weeks.

    For each deacon/household pair, a gap of at most ``ISSUE_MAX_GAP_WEEKS`` weeks between
    consecutive visits is an issue and a gap of at most ``WARNING_MAX_GAP_WEEKS`` weeks is a
    warning. More than ``ceil(num_weeks / REPEAT_WINDOW_WEEKS)`` visits to the same household is a
    warning, as is any deacon assigned in two consecutive weeks.
    """
    report = QualityReport()
    pair_weeks: dict[tuple[str, str], list[int]] = defaultdict(list)
    deacon_weeks: dict[str, list[int]] = defaultdict(list)
    for record in schedule:
        pair_weeks[(record.deacon, record.household)].append(record.week)
        deacon_weeks[record.deacon].append(record.week)

    repeat_limit = math.ceil(config.num_weeks / REPEAT_WINDOW_WEEKS)
    for (deacon, household), weeks in sorted(pair_weeks.items()):
        if len(weeks) < 2:
            continue
        weeks = sorted(weeks)
        for previous, current in zip(weeks, weeks[1:]):
            gap = current - previous
            if gap <= ISSUE_MAX_GAP_WEEKS:
                report.issues.append(
                    f"{deacon} visits {household} too frequently: "
                    f"week {previous} -> week {current} ({gap} week gap)"
                )
            elif gap <= WARNING_MAX_GAP_WEEKS:
                report.warnings.append(
                    f"{deacon} visits {household} relatively soon: "
                    f"week {previous} -> week {current} ({gap} week gap)"
                )
        if len(weeks) > repeat_limit:
            report.warnings.append(
                f"{deacon} visits {household} {len(weeks)} times (may be too often)"
            )

    for deacon in config.deacons:
        weeks = sorted(set(deacon_weeks.get(deacon, [])))
        for previous, current in zip(weeks, weeks[1:]):
            if current - previous == 1:
                report.warnings.append(
                    f"{deacon} has assignments in consecutive weeks: {previous} -> {current}"
                )
    return report


__all__ = [
    "ISSUE_MAX_GAP_WEEKS",
    "WARNING_MAX_GAP_WEEKS",
    "REPEAT_WINDOW_WEEKS",
    "QualityReport",
    "review_quality",
]
