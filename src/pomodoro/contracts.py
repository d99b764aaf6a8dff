"""Collaborator protocols consumed by the pomodoro engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional, Protocol

from .constants import TimerMode
from .settings import TimerSettings

if TYPE_CHECKING:
    from .reducer import TimerState


class TickScheduler(Protocol):
    """Periodic wake source that calls its tick callback while active."""
    @property
    def is_active(self) -> bool:
        ...

    def start(self) -> None:
        ...

    def stop(self) -> None:
        ...

    def join(self, timeout: Optional[float] = None) -> None:
        """Wait for a stopped scheduler to finish its last delivery."""
        ...


SchedulerFactory = Callable[[Callable[[], None]], TickScheduler]


class CompletionSink(Protocol):
    """Receives a notice whenever a countdown period runs out.

    Implementations must return without waiting for sound or notification
    delivery.
    """
    def session_completed(self, mode: TimerMode, settings: TimerSettings) -> None:
        ...


@dataclass(frozen=True)
class PersistedSnapshot:
    """Restorable subset of timer state. Remaining time is never stored."""
    settings: TimerSettings
    mode: TimerMode
    completed_focus_count: int
    completed_cycle_count: int


class TimerRepository(Protocol):
    """Persistence port for timer snapshots."""
    def load(self) -> Optional[PersistedSnapshot]:
        ...

    def save(self, state: "TimerState", settings: TimerSettings) -> None:
        """Persist settings, mode and counters; remaining time and running are dropped."""
        ...
