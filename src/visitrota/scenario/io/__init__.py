"""Configuration IO helpers."""

from .loaders import build_config, config_from_mapping, load_config, read_households_csv

__all__ = ["build_config", "config_from_mapping", "load_config", "read_households_csv"]
