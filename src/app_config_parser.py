"""Typed parser for config.toml sections into immutable app settings."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

from app_config_schema import (
    DEFAULT_STATE_FILE,
    DEFAULT_STORAGE_KEY,
    AlertSettings,
    AppConfig,
    AppConfigurationError,
    SchedulerSettings,
    StorageSettings,
    TimerDefaultsSettings,
)
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
    TimerMode,
)

_ALLOWED_THEME_KEYS = {mode.value for mode in TimerMode}


def parse_app_config(
    raw: Mapping[str, Any],
    *,
    base_dir: Path,
    source_file: str,
) -> AppConfig:
    """Parse raw TOML mappings into strongly typed application settings."""
    timer = _parse_timer_settings(_section(raw, "timer"))
    storage = _parse_storage_settings(_section(raw, "storage"), base_dir=base_dir)
    scheduler = _parse_scheduler_settings(_section(raw, "scheduler"))
    alerts = _parse_alert_settings(_section(raw, "alerts"))

    return AppConfig(
        timer=timer,
        storage=storage,
        scheduler=scheduler,
        alerts=alerts,
        source_file=source_file,
    )


def _parse_timer_settings(section: Mapping[str, Any]) -> TimerDefaultsSettings:
    return TimerDefaultsSettings(
        focus_minutes=_as_int(
            section.get("focus_minutes", DEFAULT_FOCUS_MINUTES),
            "timer.focus_minutes",
        ),
        short_break_minutes=_as_int(
            section.get("short_break_minutes", DEFAULT_SHORT_BREAK_MINUTES),
            "timer.short_break_minutes",
        ),
        long_break_minutes=_as_int(
            section.get("long_break_minutes", DEFAULT_LONG_BREAK_MINUTES),
            "timer.long_break_minutes",
        ),
        long_break_interval=_as_int(
            section.get("long_break_interval", DEFAULT_LONG_BREAK_INTERVAL),
            "timer.long_break_interval",
        ),
        auto_start_breaks=_as_bool(
            section.get("auto_start_breaks", DEFAULT_AUTO_START_BREAKS),
            "timer.auto_start_breaks",
        ),
        auto_start_focus=_as_bool(
            section.get("auto_start_focus", DEFAULT_AUTO_START_FOCUS),
            "timer.auto_start_focus",
        ),
        alarm_sound_id=(
            _as_str(section.get("alarm_sound_id", DEFAULT_ALARM_SOUND_ID), "timer.alarm_sound_id")
            or DEFAULT_ALARM_SOUND_ID
        ),
        alarm_volume=_as_float(
            section.get("alarm_volume", DEFAULT_ALARM_VOLUME),
            "timer.alarm_volume",
        ),
        theme_colors=_as_theme_colors(section.get("theme_colors"), "timer.theme_colors"),
    )


def _parse_storage_settings(
    section: Mapping[str, Any],
    *,
    base_dir: Path,
) -> StorageSettings:
    path = _as_str(section.get("path", DEFAULT_STATE_FILE), "storage.path")
    return StorageSettings(
        enabled=_as_bool(section.get("enabled", True), "storage.enabled"),
        path=_resolve_path(base_dir, path or DEFAULT_STATE_FILE),
        key=_as_str(section.get("key", DEFAULT_STORAGE_KEY), "storage.key") or DEFAULT_STORAGE_KEY,
    )


def _parse_scheduler_settings(section: Mapping[str, Any]) -> SchedulerSettings:
    interval = _as_float(
        section.get("tick_interval_seconds", TICK_INTERVAL_SECONDS),
        "scheduler.tick_interval_seconds",
    )
    if interval <= 0:
        raise AppConfigurationError("scheduler.tick_interval_seconds must be greater than zero.")
    return SchedulerSettings(tick_interval_seconds=interval)


def _parse_alert_settings(section: Mapping[str, Any]) -> AlertSettings:
    timeout = _as_float(
        section.get("notification_timeout_seconds", 5.0),
        "alerts.notification_timeout_seconds",
    )
    if timeout <= 0:
        raise AppConfigurationError(
            "alerts.notification_timeout_seconds must be greater than zero."
        )
    return AlertSettings(
        sound_enabled=_as_bool(section.get("sound_enabled", True), "alerts.sound_enabled"),
        output_device=(
            _as_int(section.get("output_device"), "alerts.output_device")
            if "output_device" in section
            else None
        ),
        notifications_enabled=_as_bool(
            section.get("notifications_enabled", True),
            "alerts.notifications_enabled",
        ),
        notification_timeout_seconds=timeout,
    )


def _section(root: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    raw = root.get(name, {})
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise AppConfigurationError(f"[{name}] must be a table.")
    return raw


def _as_str(value: Any, field: str) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    raise AppConfigurationError(f"{field} must be a string.")


def _as_bool(value: Any, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes", "on"):
            return True
        if lowered in ("false", "0", "no", "off"):
            return False
    raise AppConfigurationError(f"{field} must be a boolean.")


def _as_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise AppConfigurationError(f"{field} must be an integer.")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as error:
            raise AppConfigurationError(f"{field} must be an integer.") from error
    raise AppConfigurationError(f"{field} must be an integer.")


def _as_float(value: Any, field: str) -> float:
    if isinstance(value, bool):
        raise AppConfigurationError(f"{field} must be a float.")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError as error:
            raise AppConfigurationError(f"{field} must be a float.") from error
    raise AppConfigurationError(f"{field} must be a float.")


def _as_theme_colors(value: Any, field: str) -> dict[str, str]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise AppConfigurationError(f"{field} must be a table.")

    colors: dict[str, str] = {}
    for key, color in value.items():
        if key not in _ALLOWED_THEME_KEYS:
            allowed = ", ".join(sorted(_ALLOWED_THEME_KEYS))
            raise AppConfigurationError(f"{field} keys must be one of: {allowed}.")
        colors[key] = _as_str(color, f"{field}.{key}")
    return colors


def _resolve_path(base_dir: Path, raw: str) -> str:
    if not raw:
        return ""
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = (base_dir / path).resolve()
    return str(path)
