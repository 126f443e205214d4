"""Rotation scheduling for recurring household visits."""

from visitrota.core.errors import (
    ConfigurationError,
    FeasibilityError,
    GenerationTimeoutError,
    InternalInvariantError,
    LowWorkloadWarning,
    VisitRotaError,
)
from visitrota.evaluation import Diagnostics, analyze_schedule, review_quality
from visitrota.optimization import generate_schedule
from visitrota.scenario.contract import Household, RotationConfig
from visitrota.scenario.io import build_config, load_config
from visitrota.scheduling import VisitRecord
from visitrota.validation import check_feasibility

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "RotationConfig",
    "Household",
    "VisitRecord",
    "Diagnostics",
    "build_config",
    "load_config",
    "check_feasibility",
    "generate_schedule",
    "analyze_schedule",
    "review_quality",
    "VisitRotaError",
    "ConfigurationError",
    "FeasibilityError",
    "GenerationTimeoutError",
    "InternalInvariantError",
    "LowWorkloadWarning",
]
