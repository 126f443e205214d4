"""Schedule generation (uniform rotation and variable-frequency timeline)."""

from .generate import UNIFORM_MODE, VARIABLE_MODE, generate_schedule, schedule_mode

__all__ = ["UNIFORM_MODE", "VARIABLE_MODE", "generate_schedule", "schedule_mode"]
