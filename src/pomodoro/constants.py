"""Mode, action, reason, and default-setting constants used by pomodoro logic."""

from __future__ import annotations

from enum import Enum


class TimerMode(str, Enum):
    """Closed set of countdown periods."""

    FOCUS = "Focus"
    SHORT_BREAK = "ShortBreak"
    LONG_BREAK = "LongBreak"


SECONDS_PER_MINUTE = 60
TICK_INTERVAL_SECONDS = 1.0

MIN_DURATION_MINUTES = 1
MAX_DURATION_MINUTES = 60
MIN_LONG_BREAK_INTERVAL = 1
MIN_ALARM_VOLUME = 0.0
MAX_ALARM_VOLUME = 1.0

DEFAULT_FOCUS_MINUTES = 25
DEFAULT_SHORT_BREAK_MINUTES = 5
DEFAULT_LONG_BREAK_MINUTES = 15
DEFAULT_LONG_BREAK_INTERVAL = 4
DEFAULT_AUTO_START_BREAKS = True
DEFAULT_AUTO_START_FOCUS = False
DEFAULT_ALARM_SOUND_ID = "bell"
DEFAULT_ALARM_VOLUME = 0.7

DEFAULT_THEME_COLORS: dict[TimerMode, str] = {
    TimerMode.FOCUS: "#BA4949",
    TimerMode.SHORT_BREAK: "#388588",
    TimerMode.LONG_BREAK: "#397097",
}

MODE_LABELS: dict[TimerMode, str] = {
    TimerMode.FOCUS: "Focus Time",
    TimerMode.SHORT_BREAK: "Short Break",
    TimerMode.LONG_BREAK: "Long Break",
}

ACTION_START = "start"
ACTION_PAUSE = "pause"
ACTION_RESET = "reset"
ACTION_SKIP = "skip"
ACTION_TICK = "tick"
ACTION_UPDATE_SETTINGS = "update_settings"

REASON_STARTED = "started"
REASON_PAUSED = "paused"
REASON_RESET = "reset"
REASON_SKIPPED = "skipped"
REASON_TICK = "tick"
REASON_COMPLETED = "completed"
REASON_SETTINGS_UPDATED = "settings_updated"
REASON_ALREADY_RUNNING = "already_running"
REASON_NOT_RUNNING = "not_running"
REASON_NOTHING_REMAINING = "nothing_remaining"
REASON_UNSUPPORTED_ACTION = "unsupported_action"
REASON_INVALID_MODE = "invalid_mode"
