# src/powerprox/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/powerprox/config/defaults.yaml`, then optionally overridden by:
- environment variables (e.g., `POWERPROX_LOG_LEVEL`, `POWERPROX_GEOCODE_API_KEY`)
- an external YAML file via `POWERPROX_CONFIG_PATH`

Design rule:
- The projection origin, search radius and service endpoints live in YAML, not in the
  geometry engine.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any
from powerprox.core.env import load_dotenv_if_present

import yaml
from pydantic import BaseModel, Field


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `powerprox.config`."""
    text = resources.files("powerprox.config").joinpath(filename).read_text(encoding="utf-8")
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
    name: str = "powerprox"
    http_timeout_seconds: float = 15
    log_level: str = "INFO"


class CacheSettings(BaseModel):
    enabled: bool = True
    path: str = ".cache/powerprox/cache.json"
    ttl_days: int = Field(32, ge=0)
    version: str = "v1"


class RegionSettings(BaseModel):
    # Sydney CBD
    origin_lat_deg: float = Field(-33.88243560003056, ge=-90, le=90)
    origin_lon_deg: float = Field(151.2064118987779, ge=-180, le=180)
    search_radius_m: float = Field(5_000.0, gt=0)


class GeocodeSettings(BaseModel):
    base_url: str = "https://geocode.maps.co/search"
    api_key: str | None = None


class PropertyDataSettings(BaseModel):
    init_url: str
    select_url: str
    init_suburb_code: str = "4167"
    form_defaults: dict[str, str] = Field(
        default_factory=lambda: {
            "Local_Language": "ZHS",
            "Local_Country": "AUS",
            "Local_State": "NSW",
            "Menu_Lv1": "Utilities",
            "Menu_Lv2": "Electricity Line",
            "CurrentLocation_Lat": "",
            "CurrentLocation_Lon": "",
        }
    )


class EngineSettings(BaseModel):
    workers: int = Field(2, ge=1)


class ExportSettings(BaseModel):
    circle_radii_m: list[float] = Field(default_factory=lambda: [100.0, 200.0])
    circle_samples: int = Field(64, ge=3)


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    region: RegionSettings = Field(default_factory=RegionSettings)
    geocode: GeocodeSettings = Field(default_factory=GeocodeSettings)
    property_data: PropertyDataSettings
    engine: EngineSettings = Field(default_factory=EngineSettings)
    export: ExportSettings = Field(default_factory=ExportSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload."""
    load_dotenv_if_present()
    data = dict(data)
    cache_path = os.getenv("POWERPROX_CACHE_PATH")
    if cache_path:
        data.setdefault("cache", {})["path"] = cache_path

    log_level = os.getenv("POWERPROX_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    api_key = os.getenv("POWERPROX_GEOCODE_API_KEY")
    if api_key:
        data.setdefault("geocode", {})["api_key"] = api_key

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("POWERPROX_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
