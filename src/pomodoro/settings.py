"""Immutable timer settings with merge-and-clamp updates."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Mapping, Optional

from .constants import (
    DEFAULT_ALARM_SOUND_ID,
    DEFAULT_ALARM_VOLUME,
    DEFAULT_AUTO_START_BREAKS,
    DEFAULT_AUTO_START_FOCUS,
    DEFAULT_FOCUS_MINUTES,
    DEFAULT_LONG_BREAK_INTERVAL,
    DEFAULT_LONG_BREAK_MINUTES,
    DEFAULT_SHORT_BREAK_MINUTES,
    DEFAULT_THEME_COLORS,
    MAX_ALARM_VOLUME,
    MAX_DURATION_MINUTES,
    MIN_ALARM_VOLUME,
    MIN_DURATION_MINUTES,
    MIN_LONG_BREAK_INTERVAL,
    SECONDS_PER_MINUTE,
    TimerMode,
)
from .errors import SettingsFormatError

_logger = logging.getLogger("pomodoro.settings")

# Attribute name -> persisted (camelCase) key.
WIRE_KEYS: dict[str, str] = {
    "focus_minutes": "focusMinutes",
    "short_break_minutes": "shortBreakMinutes",
    "long_break_minutes": "longBreakMinutes",
    "long_break_interval": "longBreakInterval",
    "auto_start_breaks": "autoStartBreaks",
    "auto_start_focus": "autoStartFocus",
    "alarm_sound_id": "alarmSoundId",
    "alarm_volume": "alarmVolume",
    "theme_colors": "themeColors",
}
_ATTRIBUTE_NAMES: dict[str, str] = {wire: attr for attr, wire in WIRE_KEYS.items()}

DURATION_FIELDS: dict[TimerMode, str] = {
    TimerMode.FOCUS: "focus_minutes",
    TimerMode.SHORT_BREAK: "short_break_minutes",
    TimerMode.LONG_BREAK: "long_break_minutes",
}

_BOOL_FIELDS = ("auto_start_breaks", "auto_start_focus")


def _default_theme_colors() -> Mapping[TimerMode, str]:
    return MappingProxyType(dict(DEFAULT_THEME_COLORS))


@dataclass(frozen=True)
class TimerSettings:
    """Validated timer configuration. Build new values with `merge_settings`."""
    focus_minutes: int = DEFAULT_FOCUS_MINUTES
    short_break_minutes: int = DEFAULT_SHORT_BREAK_MINUTES
    long_break_minutes: int = DEFAULT_LONG_BREAK_MINUTES
    long_break_interval: int = DEFAULT_LONG_BREAK_INTERVAL
    auto_start_breaks: bool = DEFAULT_AUTO_START_BREAKS
    auto_start_focus: bool = DEFAULT_AUTO_START_FOCUS
    alarm_sound_id: str = DEFAULT_ALARM_SOUND_ID
    alarm_volume: float = DEFAULT_ALARM_VOLUME
    theme_colors: Mapping[TimerMode, str] = field(default_factory=_default_theme_colors)

    def minutes_for(self, mode: TimerMode) -> int:
        return int(getattr(self, DURATION_FIELDS[mode]))

    def duration_seconds(self, mode: TimerMode) -> int:
        return self.minutes_for(mode) * SECONDS_PER_MINUTE


DEFAULT_SETTINGS = TimerSettings()


def merge_settings(
    settings: TimerSettings,
    patch: Mapping[str, Any],
    *,
    logger: Optional[logging.Logger] = None,
) -> TimerSettings:
    """Merge a partial patch into `settings`, clamping numeric fields into range.

    Keys may be attribute names (`focus_minutes`) or persisted names
    (`focusMinutes`). Fields missing from the patch keep their value; values
    that cannot be interpreted keep the previous value as well.
    """
    merged, _ = merge_settings_reporting(settings, patch, logger=logger)
    return merged


def merge_settings_reporting(
    settings: TimerSettings,
    patch: Mapping[str, Any],
    *,
    logger: Optional[logging.Logger] = None,
) -> tuple[TimerSettings, frozenset[str]]:
    """Like `merge_settings`, also returning the attribute names that were accepted."""
    log = logger or _logger
    changes: dict[str, Any] = {}

    for raw_key, value in patch.items():
        name = _attribute_name(raw_key)
        if name is None:
            log.warning("Ignoring unknown settings field: %s", raw_key)
            continue

        if name in DURATION_FIELDS.values():
            minutes = _as_int(value)
            if minutes is None:
                log.warning("Ignoring non-numeric %s: %r", name, value)
                continue
            changes[name] = _clamp_int(
                minutes,
                MIN_DURATION_MINUTES,
                MAX_DURATION_MINUTES,
                name,
                log,
            )
        elif name == "long_break_interval":
            interval = _as_int(value)
            if interval is None:
                log.warning("Ignoring non-numeric %s: %r", name, value)
                continue
            changes[name] = _clamp_int(interval, MIN_LONG_BREAK_INTERVAL, None, name, log)
        elif name in _BOOL_FIELDS:
            if not isinstance(value, bool):
                log.warning("Ignoring non-boolean %s: %r", name, value)
                continue
            changes[name] = value
        elif name == "alarm_sound_id":
            if not isinstance(value, str) or not value.strip():
                log.warning("Ignoring invalid alarm sound id: %r", value)
                continue
            changes[name] = value.strip()
        elif name == "alarm_volume":
            volume = _as_float(value)
            if volume is None:
                log.warning("Ignoring non-numeric alarm volume: %r", value)
                continue
            clamped = min(MAX_ALARM_VOLUME, max(MIN_ALARM_VOLUME, volume))
            if clamped != volume:
                log.debug("Clamped alarm_volume from %s to %s", volume, clamped)
            changes[name] = clamped
        elif name == "theme_colors":
            colors = _merge_theme_colors(settings.theme_colors, value, log)
            if colors is not None:
                changes[name] = colors

    if not changes:
        return settings, frozenset()
    return replace(settings, **changes), frozenset(changes)


def settings_to_dict(settings: TimerSettings) -> dict[str, Any]:
    """Serialize settings into the persisted camelCase representation."""
    return {
        "focusMinutes": settings.focus_minutes,
        "shortBreakMinutes": settings.short_break_minutes,
        "longBreakMinutes": settings.long_break_minutes,
        "longBreakInterval": settings.long_break_interval,
        "autoStartBreaks": settings.auto_start_breaks,
        "autoStartFocus": settings.auto_start_focus,
        "alarmSoundId": settings.alarm_sound_id,
        "alarmVolume": settings.alarm_volume,
        "themeColors": {mode.value: color for mode, color in settings.theme_colors.items()},
    }


def settings_from_dict(raw: Any) -> TimerSettings:
    """Strictly parse persisted settings; raise on missing or mistyped fields."""
    if not isinstance(raw, Mapping):
        raise SettingsFormatError("settings must be an object")

    values: dict[str, Any] = {}
    for attr, wire in WIRE_KEYS.items():
        if attr == "theme_colors":
            continue
        if wire not in raw:
            raise SettingsFormatError(f"settings.{wire} is missing")
        value = raw[wire]
        if attr in _BOOL_FIELDS:
            if not isinstance(value, bool):
                raise SettingsFormatError(f"settings.{wire} must be a boolean")
        elif attr == "alarm_sound_id":
            if not isinstance(value, str):
                raise SettingsFormatError(f"settings.{wire} must be a string")
        elif attr == "alarm_volume":
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise SettingsFormatError(f"settings.{wire} must be a number")
        elif isinstance(value, bool) or not isinstance(value, int):
            raise SettingsFormatError(f"settings.{wire} must be an integer")
        values[attr] = value

    theme_colors = raw.get("themeColors")
    if theme_colors is not None:
        if not isinstance(theme_colors, Mapping):
            raise SettingsFormatError("settings.themeColors must be an object")
        for key, color in theme_colors.items():
            if parse_mode(key) is None or not isinstance(color, str):
                raise SettingsFormatError(f"settings.themeColors.{key} is invalid")
        values["theme_colors"] = theme_colors

    return merge_settings(DEFAULT_SETTINGS, values)


def parse_mode(value: Any) -> Optional[TimerMode]:
    if isinstance(value, TimerMode):
        return value
    if isinstance(value, str):
        try:
            return TimerMode(value.strip())
        except ValueError:
            return None
    return None


def _attribute_name(key: Any) -> Optional[str]:
    if not isinstance(key, str):
        return None
    if key in WIRE_KEYS:
        return key
    return _ATTRIBUTE_NAMES.get(key)


def _merge_theme_colors(
    current: Mapping[TimerMode, str],
    value: Any,
    log: logging.Logger,
) -> Optional[Mapping[TimerMode, str]]:
    if not isinstance(value, Mapping):
        log.warning("Ignoring invalid theme colors: %r", value)
        return None
    merged = dict(current)
    for key, color in value.items():
        mode = parse_mode(key)
        if mode is None or not isinstance(color, str) or not color.strip():
            log.warning("Ignoring invalid theme color %r=%r", key, color)
            continue
        merged[mode] = color.strip()
    return MappingProxyType(merged)


def _clamp_int(
    value: int,
    lower: int,
    upper: Optional[int],
    name: str,
    log: logging.Logger,
) -> int:
    clamped = max(lower, value)
    if upper is not None:
        clamped = min(upper, clamped)
    if clamped != value:
        log.debug("Clamped %s from %s to %s", name, value, clamped)
    return clamped


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return None
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if number != number:
        return None
    return number

