from .constants import TimerMode
from .contracts import CompletionSink, PersistedSnapshot, TickScheduler, TimerRepository
from .errors import PomodoroError, SettingsFormatError
from .reducer import TimerState, Transition
from .scheduler import ManualTickScheduler, ThreadTickScheduler, VirtualClock
from .service import (
    PomodoroAction,
    PomodoroActionResult,
    PomodoroSnapshot,
    PomodoroTimer,
)
from .settings import DEFAULT_SETTINGS, TimerSettings, merge_settings

__all__ = [
    "CompletionSink",
    "DEFAULT_SETTINGS",
    "ManualTickScheduler",
    "PersistedSnapshot",
    "PomodoroAction",
    "PomodoroActionResult",
    "PomodoroError",
    "PomodoroSnapshot",
    "PomodoroTimer",
    "SettingsFormatError",
    "ThreadTickScheduler",
    "TickScheduler",
    "TimerMode",
    "TimerRepository",
    "TimerSettings",
    "TimerState",
    "Transition",
    "VirtualClock",
    "merge_settings",
]
