from __future__ import annotations

from pomodoro import PomodoroSnapshot
from pomodoro.constants import MODE_LABELS


def format_clock(seconds: int) -> str:
    minutes, remainder = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{remainder:02d}"


def format_status_line(snapshot: PomodoroSnapshot) -> str:
    if snapshot.remaining_seconds <= 0:
        return "Time's up!"

    clock = format_clock(snapshot.remaining_seconds)
    label = MODE_LABELS[snapshot.mode]
    if snapshot.running:
        return f"{clock} - {label}"
    return f"{clock} (Paused) - {label}"


def progress_percent(snapshot: PomodoroSnapshot) -> float:
    if snapshot.duration_seconds <= 0:
        return 0.0
    progress = snapshot.elapsed_seconds / snapshot.duration_seconds * 100.0
    return min(100.0, max(0.0, progress))
