from __future__ import annotations

import os
from dataclasses import asdict
from pathlib import Path
from typing import Mapping

try:  # Python 3.11+
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for older runtimes
    import tomli as tomllib  # type: ignore

from app_config_parser import parse_app_config
from app_config_schema import (
    DEFAULT_CONFIG_FILE,
    AlertSettings,
    AppConfig,
    AppConfigurationError,
    SchedulerSettings,
    StorageSettings,
    TimerDefaultsSettings,
)
from pomodoro import DEFAULT_SETTINGS, TimerSettings, merge_settings

CONFIG_FILE_ENV = "APP_CONFIG_FILE"

__all__ = [
    "AlertSettings",
    "AppConfig",
    "AppConfigurationError",
    "SchedulerSettings",
    "StorageSettings",
    "TimerDefaultsSettings",
    "build_timer_settings",
    "load_app_config",
    "resolve_config_path",
]


def resolve_config_path(config_path: str | None = None) -> Path:
    raw = config_path or os.getenv(CONFIG_FILE_ENV) or DEFAULT_CONFIG_FILE
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = (Path.cwd() / path).resolve()
    return path


def load_app_config(config_path: str | None = None) -> AppConfig:
    """Load `config.toml`.

    A missing default config file yields built-in defaults; a missing file
    that was named explicitly (argument or environment) is an error.
    """
    explicit = config_path is not None or bool(os.getenv(CONFIG_FILE_ENV))
    path = resolve_config_path(config_path)
    if not path.exists():
        if explicit:
            raise AppConfigurationError(f"Config file not found: {path}")
        return parse_app_config({}, base_dir=path.parent, source_file="")
    if not path.is_file():
        raise AppConfigurationError(f"Config path is not a file: {path}")

    try:
        with open(path, "rb") as fh:
            raw = tomllib.load(fh)
    except Exception as error:
        raise AppConfigurationError(f"Failed to parse config TOML: {error}") from error

    if not isinstance(raw, Mapping):
        raise AppConfigurationError("Root config TOML object must be a table.")

    return parse_app_config(raw, base_dir=path.parent, source_file=str(path))


def build_timer_settings(defaults: TimerDefaultsSettings) -> TimerSettings:
    """Turn `[timer]` values into clamped timer settings."""
    return merge_settings(DEFAULT_SETTINGS, asdict(defaults))
