"""YAML-backed settings for the patcher CLI."""

from __future__ import annotations

from pathlib import Path
from typing import Any, List, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

DEFAULT_CONFIG_NAME = "zpatch.yaml"


class SettingsModel(BaseModel):
    """Base model rejecting unknown keys."""

    model_config = ConfigDict(extra="forbid")


class PatchSettings(SettingsModel):
    lookback_window: int = Field(default=200, gt=0)
    backup_suffix: str = Field(default=".bak", min_length=1)


class RuntimeSettings(SettingsModel):
    command_timeout: float = Field(default=10.0, gt=0)
    pane_init_delay_ms: int = Field(default=200, ge=0)


class LocatorSettings(SettingsModel):
    search_paths: List[str] = Field(default_factory=list)


class LoggingSettings(SettingsModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"


class Settings(SettingsModel):
    """Top-level configuration; every section is optional."""

    patch: PatchSettings = Field(default_factory=PatchSettings)
    runtime: RuntimeSettings = Field(default_factory=RuntimeSettings)
    locator: LocatorSettings = Field(default_factory=LocatorSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


class ConfigError(ValueError):
    """Raised when the configuration file cannot be parsed or validated."""


def load_settings(config_path: Path | None) -> Settings:
    """Load settings from ``config_path``; a missing file yields defaults."""

    if config_path is None or not config_path.exists():
        return Settings()

    try:
        with config_path.open("r", encoding="utf-8") as handle:
            data: Any = yaml.safe_load(handle) or {}
    except yaml.YAMLError as error:
        raise ConfigError(f"Failed to parse {config_path}: {error}") from error

    if not isinstance(data, dict):
        raise ConfigError(f"Configuration in {config_path} must be a mapping at the top level.")

    try:
        return Settings.model_validate(data)
    except ValidationError as error:
        raise ConfigError(f"Invalid configuration in {config_path}: {error}") from error


__all__ = ["ConfigError", "DEFAULT_CONFIG_NAME", "Settings", "load_settings"]
