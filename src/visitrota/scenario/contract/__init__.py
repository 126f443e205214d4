"""Rotation contract models (Pydantic schemas, validators)."""

from .models import (
    DefaultFrequency,
    FrequencySource,
    Household,
    OverrideFrequency,
    ResolvedHousehold,
    RotationConfig,
    ScoringWeights,
    TimelineWeights,
    UniformWeights,
)

__all__ = [
    "DefaultFrequency",
    "OverrideFrequency",
    "FrequencySource",
    "Household",
    "ResolvedHousehold",
    "RotationConfig",
    "ScoringWeights",
    "TimelineWeights",
    "UniformWeights",
]
