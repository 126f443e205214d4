"""Configuration loading utilities (YAML metadata + optional households CSV)."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import pandas as pd
import yaml
from pydantic import ValidationError

from visitrota.core.errors import ConfigurationError
from visitrota.scenario.contract.models import RotationConfig

__all__ = ["build_config", "config_from_mapping", "load_config", "read_households_csv"]


def _format_validation_error(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()))
        message = error.get("msg", "invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts)


def config_from_mapping(data: Mapping[str, Any]) -> RotationConfig:
    """Validate a raw mapping into a :class:`RotationConfig`.

    Raises
    ------
    ConfigurationError
        When any field is missing, out of range, duplicated, or contains illegal characters.
    """
    try:
        return RotationConfig.model_validate(dict(data))
    except ValidationError as exc:
        raise ConfigurationError(
            f"Configuration error: {_format_validation_error(exc)}"
        ) from exc


def build_config(**fields: Any) -> RotationConfig:
    """Keyword form of :func:`config_from_mapping`."""
    return config_from_mapping(fields)


def _as_optional_string(value: str) -> str | None:
    stripped = value.strip()
    return stripped or None


def read_households_csv(path: Path) -> list[dict[str, object]]:
    """Load household rows (``name`` plus optional ``frequency``) from a CSV table.

    Cells are read as text, so names such as ``NA`` or ``None`` are kept verbatim. Blank frequency
    cells mean the household follows the default cadence.
    """
    frame = pd.read_csv(path, dtype=str, keep_default_na=False)
    if "name" not in frame.columns:
        raise ConfigurationError(f"Households table {path} must contain a 'name' column")
    rows: list[dict[str, object]] = []
    for record in frame.to_dict(orient="records"):
        name = _as_optional_string(record["name"])
        if name is None:
            continue
        rows.append({"name": name, "frequency": _as_optional_string(record.get("frequency", ""))})
    return rows


def _resolve_path(root: Path, value: str) -> Path:
    path = Path(value)
    if not path.is_absolute():
        path = root / path
    if not path.exists():
        raise ConfigurationError(f"Referenced file not found: {path}")
    return path


def load_config(path: str | Path) -> RotationConfig:
    """Load a rotation configuration from YAML.

    The YAML mapping mirrors :class:`RotationConfig`. Households may be listed inline (strings or
    ``{name, frequency}`` mappings) or supplied through ``households_csv`` relative to the YAML
    file.
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")
    with path.open("r", encoding="utf-8") as handle:
        meta = yaml.safe_load(handle) or {}
    if not isinstance(meta, dict):
        raise ConfigurationError(f"Configuration {path} must be a YAML mapping")

    data = dict(meta)
    csv_ref = data.pop("households_csv", None)
    if csv_ref is not None:
        if data.get("households"):
            raise ConfigurationError(
                "Specify households inline or via households_csv, not both"
            )
        data["households"] = read_households_csv(_resolve_path(path.parent, str(csv_ref)))
    return config_from_mapping(data)
