"""Core utilities shared across visitrota modules."""

from .errors import (
    ConfigurationError,
    FeasibilityError,
    GenerationTimeoutError,
    InternalInvariantError,
    LowWorkloadWarning,
    VisitRotaError,
)

__all__ = [
    "VisitRotaError",
    "ConfigurationError",
    "FeasibilityError",
    "GenerationTimeoutError",
    "InternalInvariantError",
    "LowWorkloadWarning",
]
