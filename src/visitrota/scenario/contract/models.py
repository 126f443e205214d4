"""Pydantic models describing rotation inputs."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

MIN_FREQUENCY_WEEKS = 1
MAX_FREQUENCY_WEEKS = 8
MAX_NUM_WEEKS = 520
MIN_DEACONS = 2

# Characters that break downstream key encoding (sheet ranges, calendar tags).
ILLEGAL_NAME_CHARS = re.compile(r"[\[\]{}|\\]")


def _check_name(value: str, label: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{label} names must be strings, got {value!r}")
    stripped = value.strip()
    if not stripped:
        raise ValueError(f"{label} names must be non-empty")
    if ILLEGAL_NAME_CHARS.search(stripped):
        raise ValueError(f"{label} name {stripped!r} contains problematic characters ([]{{}}|\\)")
    return stripped


def _check_frequency(value: int, label: str) -> int:
    if value < MIN_FREQUENCY_WEEKS or value > MAX_FREQUENCY_WEEKS:
        raise ValueError(
            f"{label} must be between {MIN_FREQUENCY_WEEKS} and {MAX_FREQUENCY_WEEKS} weeks. "
            f"Got: {value}"
        )
    return value


def _duplicates(names: list[str]) -> list[str]:
    seen: set[str] = set()
    dupes: list[str] = []
    for name in names:
        if name in seen and name not in dupes:
            dupes.append(name)
        seen.add(name)
    return dupes


class FrequencySource(str, Enum):
    DEFAULT = "default"
    OVERRIDE = "override"


class DefaultFrequency(BaseModel):
    """Household follows the configuration-wide ``default_visit_frequency``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["default"] = "default"


class OverrideFrequency(BaseModel):
    """Household carries its own visit cadence in weeks."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["override"] = "override"
    weeks: int

    @field_validator("weeks")
    @classmethod
    def _weeks_in_range(cls, value: int) -> int:
        return _check_frequency(value, "Override frequency")


FrequencySetting = DefaultFrequency | OverrideFrequency


class Household(BaseModel):
    """Household visited on a recurring cadence.

    Attributes
    ----------
    name:
        Unique household name; doubles as the secondary ordering key of the timeline.
    frequency:
        Either :class:`DefaultFrequency` or :class:`OverrideFrequency`. Plain integers are accepted
        on input and become overrides; ``None`` means default.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    frequency: FrequencySetting = Field(default_factory=DefaultFrequency, discriminator="kind")

    @model_validator(mode="before")
    @classmethod
    def _coerce_shorthand(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"name": data}
        if isinstance(data, dict):
            value = data.get("frequency")
            if value is None or (isinstance(value, str) and not value.strip()):
                data = {**data, "frequency": {"kind": "default"}}
            elif isinstance(value, bool):
                raise ValueError("Household frequency must be an integer number of weeks")
            elif isinstance(value, int | str):
                data = {**data, "frequency": {"kind": "override", "weeks": int(value)}}
        return data

    @field_validator("name")
    @classmethod
    def _name_valid(cls, value: str) -> str:
        return _check_name(value, "Household")

    @property
    def is_custom(self) -> bool:
        return isinstance(self.frequency, OverrideFrequency)


class UniformWeights(BaseModel):
    """Score weights for the uniform rotation pattern.

    ``score = usage_count * usage + pair_count * pair_repeat``, minus ``new_pair_bonus`` for a
    deacon that has never visited the household.
    """

    model_config = ConfigDict(frozen=True)

    usage: float = 100.0
    pair_repeat: float = 10.0
    new_pair_bonus: float = 50.0

    @field_validator("usage", "pair_repeat", "new_pair_bonus")
    @classmethod
    def _non_negative(cls, value: float) -> float:
        if value < 0:
            raise ValueError("Uniform weight components must be non-negative")
        return value

    def score(self, usage_count: int, pair_count: int) -> float:
        value = usage_count * self.usage + pair_count * self.pair_repeat
        if pair_count == 0:
            value -= self.new_pair_bonus
        return value


class TimelineWeights(BaseModel):
    """Score weights for the variable-frequency timeline scheduler.

    Attributes
    ----------
    workload:
        Penalty per visit already carried by the deacon.
    recency_per_week:
        Reward per week elapsed since the deacon's last assignment.
    never_assigned_bonus:
        Reward for a deacon that has no assignment yet (replaces the recency term).
    pair_repeat:
        Penalty per previous visit of this deacon to this household.
    weekly_bonus:
        Reward applied to every candidate when the household is visited weekly.
    """

    model_config = ConfigDict(frozen=True)

    workload: float = 100.0
    recency_per_week: float = 10.0
    never_assigned_bonus: float = 50.0
    pair_repeat: float = 200.0
    weekly_bonus: float = 5.0

    @field_validator(
        "workload", "recency_per_week", "never_assigned_bonus", "pair_repeat", "weekly_bonus"
    )
    @classmethod
    def _non_negative(cls, value: float) -> float:
        if value < 0:
            raise ValueError("Timeline weight components must be non-negative")
        return value

    def recency(self, week: int, last_week: int | None) -> float:
        if last_week is None:
            return -self.never_assigned_bonus
        return -(week - last_week) * self.recency_per_week

    def score(
        self,
        *,
        workload: int,
        week: int,
        last_week: int | None,
        pair_count: int,
        frequency: int,
    ) -> float:
        value = workload * self.workload + self.recency(week, last_week)
        value += pair_count * self.pair_repeat
        if frequency == 1:
            value -= self.weekly_bonus
        return value


class ScoringWeights(BaseModel):
    """Weight policy for both generators."""

    model_config = ConfigDict(frozen=True)

    uniform: UniformWeights = Field(default_factory=UniformWeights)
    timeline: TimelineWeights = Field(default_factory=TimelineWeights)


@dataclass(frozen=True, slots=True)
class ResolvedHousehold:
    """Household with its effective cadence resolved against the configuration default."""

    name: str
    index: int
    frequency: int
    source: FrequencySource

    @property
    def is_custom(self) -> bool:
        return self.source is FrequencySource.OVERRIDE


class RotationConfig(BaseModel):
    """Validated, immutable configuration for one generation run.

    Attributes
    ----------
    deacons:
        Ordered deacon names; the order is the deterministic tie-break key.
    households:
        Ordered :class:`Household` entries.
    start_date:
        Calendar date of week 1. Visit dates are ``start_date + (week - 1) * 7`` days.
    num_weeks:
        Horizon length in weeks (1..520).
    default_visit_frequency:
        Cadence in weeks (1..8) applied to households without an override.
    scoring:
        Optional :class:`ScoringWeights` overrides for the assignment heuristics.
    """

    model_config = ConfigDict(frozen=True)

    deacons: tuple[str, ...]
    households: tuple[Household, ...]
    start_date: date
    num_weeks: int
    default_visit_frequency: int
    scoring: ScoringWeights = Field(default_factory=ScoringWeights)

    @field_validator("deacons")
    @classmethod
    def _deacons_valid(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if not value:
            raise ValueError("No deacons configured")
        names = [_check_name(name, "Deacon") for name in value]
        if len(names) < MIN_DEACONS:
            raise ValueError(
                f"At least {MIN_DEACONS} deacons are needed for a rotation. Current deacons: {len(names)}"
            )
        dupes = _duplicates(names)
        if dupes:
            raise ValueError(f"Duplicate deacon names found: {', '.join(dupes)}")
        return tuple(names)

    @field_validator("households")
    @classmethod
    def _households_valid(cls, value: tuple[Household, ...]) -> tuple[Household, ...]:
        if not value:
            raise ValueError("No households configured")
        dupes = _duplicates([household.name for household in value])
        if dupes:
            raise ValueError(f"Duplicate household names found: {', '.join(dupes)}")
        return value

    @field_validator("num_weeks")
    @classmethod
    def _weeks_in_range(cls, value: int) -> int:
        if value < 1 or value > MAX_NUM_WEEKS:
            raise ValueError(
                f"Number of weeks must be between 1 and {MAX_NUM_WEEKS}. Got: {value}"
            )
        return value

    @field_validator("default_visit_frequency")
    @classmethod
    def _default_frequency_in_range(cls, value: int) -> int:
        return _check_frequency(value, "Default visit frequency")

    @property
    def deacon_count(self) -> int:
        return len(self.deacons)

    @property
    def household_count(self) -> int:
        return len(self.households)

    @property
    def has_custom_frequencies(self) -> bool:
        """Return ``True`` when any household overrides the default cadence."""
        return any(household.is_custom for household in self.households)

    def household_names(self) -> list[str]:
        return [household.name for household in self.households]

    def frequency_for(self, household: Household) -> int:
        """Return the effective cadence in weeks for ``household``."""
        setting = household.frequency
        if isinstance(setting, OverrideFrequency):
            return setting.weeks
        return self.default_visit_frequency

    def resolved_households(self) -> list[ResolvedHousehold]:
        """Return households with their effective frequency and its source, in config order."""
        resolved: list[ResolvedHousehold] = []
        for index, household in enumerate(self.households):
            source = FrequencySource.OVERRIDE if household.is_custom else FrequencySource.DEFAULT
            resolved.append(
                ResolvedHousehold(
                    name=household.name,
                    index=index,
                    frequency=self.frequency_for(household),
                    source=source,
                )
            )
        return resolved

    def total_cycles(self) -> int:
        """Number of uniform-mode cycles covering the horizon."""
        return math.ceil(self.num_weeks / self.default_visit_frequency)

    def frequency_distribution(self) -> dict[int, list[str]]:
        """Map each effective frequency to the households that use it."""
        distribution: dict[int, list[str]] = {}
        for entry in self.resolved_households():
            distribution.setdefault(entry.frequency, []).append(entry.name)
        return dict(sorted(distribution.items()))


__all__ = [
    "MIN_FREQUENCY_WEEKS",
    "MAX_FREQUENCY_WEEKS",
    "MAX_NUM_WEEKS",
    "MIN_DEACONS",
    "FrequencySource",
    "DefaultFrequency",
    "OverrideFrequency",
    "FrequencySetting",
    "Household",
    "UniformWeights",
    "TimelineWeights",
    "ScoringWeights",
    "ResolvedHousehold",
    "RotationConfig",
]
