"""Pure state transitions for the focus/break countdown.

Every function takes the current `TimerState` and `TimerSettings` and returns
a `Transition`; nothing here touches clocks, threads, storage or sound.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional

from .constants import TimerMode
from .settings import DURATION_FIELDS, TimerSettings, merge_settings_reporting


@dataclass(frozen=True)
class TimerState:
    """Countdown state owned by a single timer engine."""
    mode: TimerMode
    remaining_seconds: int
    running: bool
    completed_focus_count: int = 0
    completed_cycle_count: int = 0


@dataclass(frozen=True)
class Transition:
    """Result of applying one operation to `(state, settings)`."""
    state: TimerState
    settings: TimerSettings
    ended_mode: Optional[TimerMode] = None

    @property
    def completed(self) -> bool:
        return self.ended_mode is not None


def duration_seconds(mode: TimerMode, settings: TimerSettings) -> int:
    return settings.duration_seconds(mode)


def initial_state(
    settings: TimerSettings,
    *,
    mode: TimerMode = TimerMode.FOCUS,
    completed_focus_count: int = 0,
    completed_cycle_count: int = 0,
) -> TimerState:
    """Build a paused state with the full duration for `mode`."""
    return TimerState(
        mode=mode,
        remaining_seconds=duration_seconds(mode, settings),
        running=False,
        completed_focus_count=max(0, int(completed_focus_count)),
        completed_cycle_count=max(0, int(completed_cycle_count)),
    )


def start(state: TimerState, settings: TimerSettings) -> Transition:
    if state.running or state.remaining_seconds <= 0:
        return Transition(state, settings)
    return Transition(replace(state, running=True), settings)


def pause(state: TimerState, settings: TimerSettings) -> Transition:
    if not state.running:
        return Transition(state, settings)
    return Transition(replace(state, running=False), settings)


def reset(
    state: TimerState,
    settings: TimerSettings,
    mode: Optional[TimerMode] = None,
) -> Transition:
    target = mode or state.mode
    return Transition(
        replace(
            state,
            mode=target,
            remaining_seconds=duration_seconds(target, settings),
            running=False,
        ),
        settings,
    )


def advance(state: TimerState, settings: TimerSettings) -> Transition:
    """End the current period and move to the next one.

    Shared by manual skips and countdown expiry, so both count the period as
    completed.
    """
    focus_count = state.completed_focus_count
    cycle_count = state.completed_cycle_count
    interval = max(1, settings.long_break_interval)

    if state.mode == TimerMode.FOCUS:
        focus_count += 1
        if focus_count % interval == 0:
            next_mode = TimerMode.LONG_BREAK
        else:
            next_mode = TimerMode.SHORT_BREAK
    else:
        if state.mode == TimerMode.LONG_BREAK:
            cycle_count += 1
        next_mode = TimerMode.FOCUS

    if next_mode == TimerMode.FOCUS:
        running = settings.auto_start_focus
    else:
        running = settings.auto_start_breaks

    return Transition(
        TimerState(
            mode=next_mode,
            remaining_seconds=duration_seconds(next_mode, settings),
            running=running,
            completed_focus_count=focus_count,
            completed_cycle_count=cycle_count,
        ),
        settings,
        ended_mode=state.mode,
    )


def skip(state: TimerState, settings: TimerSettings) -> Transition:
    return advance(state, settings)


def tick(state: TimerState, settings: TimerSettings) -> Transition:
    """Count down one second; expire into the next period at zero."""
    if not state.running or state.remaining_seconds <= 0:
        return Transition(state, settings)

    remaining = state.remaining_seconds - 1
    if remaining > 0:
        return Transition(replace(state, remaining_seconds=remaining), settings)
    return advance(replace(state, remaining_seconds=0), settings)


def update_settings(
    state: TimerState,
    settings: TimerSettings,
    patch: Mapping[str, Any],
) -> Transition:
    """Merge `patch` into settings.

    An accepted value for the active mode's duration restarts that period
    from its new full length, even when the value is unchanged; elapsed time
    is never prorated. Rejected values leave the countdown alone.
    """
    merged, accepted = merge_settings_reporting(settings, patch)
    if DURATION_FIELDS[state.mode] in accepted:
        state = replace(state, remaining_seconds=duration_seconds(state.mode, merged))
    return Transition(state, merged)
