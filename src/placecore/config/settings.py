# src/placecore/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/placecore/config/defaults.yaml`, then optionally overridden by:
- an external YAML file via `PLACECORE_CONFIG_PATH`
- environment variables (e.g., `PLACECORE_LOG_LEVEL`, `PLACECORE_DISTANCE_UNIT`)

Design rule:
- Display knobs (units, precision, clock style) live in YAML, not hard-coded in formatters.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Literal
from placecore.core.env import load_dotenv_if_present

import yaml
from pydantic import BaseModel, Field

from placecore.domain.models import UnitSystem


ClockStyle = Literal["24h", "12h"]


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `placecore.config`."""
    text = resources.files("placecore.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


class AppSettings(BaseModel):
    name: str = "placecore"
    timezone: str = "UTC"
    log_level: str = "INFO"


class CatalogSettings(BaseModel):
    path: str = "data/catalogs/places.json"


class DistanceSettings(BaseModel):
    unit: UnitSystem = "metric"
    precision_km: int = Field(1, ge=0, le=6)
    precision_mi: int = Field(1, ge=0, le=6)
    label_suffix: str = "away"
    nearby_m: float = Field(1_000, gt=0)
    moderate_m: float = Field(10_000, gt=0)
    default_radius_m: float = Field(5_000, gt=0)


class HoursSettings(BaseModel):
    clock: ClockStyle = "24h"


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)
    distance: DistanceSettings = Field(default_factory=DistanceSettings)
    hours: HoursSettings = Field(default_factory=HoursSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload.

    Note: We intentionally keep this whitelist small.
    """
    load_dotenv_if_present()
    data = dict(data)

    log_level = os.getenv("PLACECORE_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    catalog_path = os.getenv("PLACECORE_CATALOG_PATH")
    if catalog_path:
        data.setdefault("catalog", {})["path"] = catalog_path

    unit = os.getenv("PLACECORE_DISTANCE_UNIT")
    if unit:
        data.setdefault("distance", {})["unit"] = unit.strip().lower()

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("PLACECORE_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
