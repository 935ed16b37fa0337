# src/geokmeans/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/geokmeans/config/defaults.yaml`, then optionally overridden by:
- an external YAML file via `GEOKMEANS_CONFIG_PATH`
- environment variables (`GEOKMEANS_LOG_LEVEL`, `GEOKMEANS_UNITS`, `GEOKMEANS_PRECISION`,
  `GEOKMEANS_SEED`)

Settings only provide defaults; every value can also be passed to `run()` directly.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, field_validator

from geokmeans.core.env import load_dotenv_if_present, resolve_project_path
from geokmeans.core.numeric import Units, get_precision


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `geokmeans.config`."""
    text = resources.files("geokmeans.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(resolve_project_path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


class AppSettings(BaseModel):
    name: str = "GeoKMeans"
    log_level: str = "INFO"


class ClusteringSettings(BaseModel):
    rounds: int = Field(10, ge=1)
    units: Literal["miles", "kilometers"] = "miles"
    precision: Literal["float32", "float64"] = "float64"
    init: Literal["bounding_box", "sample_points"] = "bounding_box"
    seed: int | None = None

    @field_validator("units", mode="before")
    @classmethod
    def _normalize_units(cls, value: Any) -> str:
        return Units.parse(value).value

    @field_validator("precision", mode="before")
    @classmethod
    def _normalize_precision(cls, value: Any) -> str:
        return get_precision(value).name


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    clustering: ClusteringSettings = Field(default_factory=ClusteringSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay the whitelisted environment variables onto the raw settings payload."""
    data = dict(data)

    log_level = os.getenv("GEOKMEANS_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    for env_name, key in (
        ("GEOKMEANS_UNITS", "units"),
        ("GEOKMEANS_PRECISION", "precision"),
        ("GEOKMEANS_SEED", "seed"),
    ):
        value = os.getenv(env_name)
        if value:
            data.setdefault("clustering", {})[key] = value

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("GEOKMEANS_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
