"""Dataclass schema objects used by runtime configuration loading."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional

from pomodoro.constants import (
    DEFAULT_ALARM_SOUND_ID,
    DEFAULT_ALARM_VOLUME,
    DEFAULT_AUTO_START_BREAKS,
    DEFAULT_AUTO_START_FOCUS,
    DEFAULT_FOCUS_MINUTES,
    DEFAULT_LONG_BREAK_INTERVAL,
    DEFAULT_LONG_BREAK_MINUTES,
    DEFAULT_SHORT_BREAK_MINUTES,
    TICK_INTERVAL_SECONDS,
)
from storage import DEFAULT_STORAGE_KEY

DEFAULT_CONFIG_FILE = "config.toml"
DEFAULT_STATE_FILE = "~/.local/state/pomodoro/timer.json"


class AppConfigurationError(Exception):
    """Raised when application configuration fails."""


@dataclass(frozen=True)
class TimerDefaultsSettings:
    """Initial timer settings from `[timer]`, used when nothing was persisted."""
    focus_minutes: int = DEFAULT_FOCUS_MINUTES
    short_break_minutes: int = DEFAULT_SHORT_BREAK_MINUTES
    long_break_minutes: int = DEFAULT_LONG_BREAK_MINUTES
    long_break_interval: int = DEFAULT_LONG_BREAK_INTERVAL
    auto_start_breaks: bool = DEFAULT_AUTO_START_BREAKS
    auto_start_focus: bool = DEFAULT_AUTO_START_FOCUS
    alarm_sound_id: str = DEFAULT_ALARM_SOUND_ID
    alarm_volume: float = DEFAULT_ALARM_VOLUME
    theme_colors: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class StorageSettings:
    """Snapshot persistence settings from `[storage]`."""
    enabled: bool = True
    path: str = ""
    key: str = DEFAULT_STORAGE_KEY


@dataclass(frozen=True)
class SchedulerSettings:
    """Tick source settings from `[scheduler]`."""
    tick_interval_seconds: float = TICK_INTERVAL_SECONDS


@dataclass(frozen=True)
class AlertSettings:
    """Completion sound and notification settings from `[alerts]`."""
    sound_enabled: bool = True
    output_device: Optional[int] = None
    notifications_enabled: bool = True
    notification_timeout_seconds: float = 5.0


@dataclass(frozen=True)
class AppConfig:
    """Complete typed runtime configuration loaded from `config.toml`."""
    timer: TimerDefaultsSettings
    storage: StorageSettings
    scheduler: SchedulerSettings
    alerts: AlertSettings
    source_file: str
