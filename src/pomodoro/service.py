"""Thread-safe focus/break timer engine built on the pure reducer."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Literal, Mapping, Optional, Union

from . import reducer
from .constants import (
    ACTION_PAUSE,
    ACTION_RESET,
    ACTION_SKIP,
    ACTION_START,
    ACTION_TICK,
    ACTION_UPDATE_SETTINGS,
    REASON_ALREADY_RUNNING,
    REASON_COMPLETED,
    REASON_INVALID_MODE,
    REASON_NOT_RUNNING,
    REASON_NOTHING_REMAINING,
    REASON_PAUSED,
    REASON_RESET,
    REASON_SETTINGS_UPDATED,
    REASON_SKIPPED,
    REASON_STARTED,
    REASON_TICK,
    REASON_UNSUPPORTED_ACTION,
    TICK_INTERVAL_SECONDS,
    TimerMode,
)
from .contracts import (
    CompletionSink,
    PersistedSnapshot,
    SchedulerFactory,
    TickScheduler,
    TimerRepository,
)
from .reducer import TimerState, Transition
from .scheduler import thread_scheduler_factory
from .settings import DEFAULT_SETTINGS, TimerSettings, parse_mode

PomodoroAction = Literal["start", "pause", "reset", "skip", "tick", "update_settings"]
StateListener = Callable[["PomodoroActionResult"], None]


@dataclass(frozen=True)
class PomodoroSnapshot:
    """Immutable timer snapshot exposed to UI and runtime publishers."""
    mode: TimerMode
    remaining_seconds: int
    running: bool
    completed_focus_count: int
    completed_cycle_count: int
    duration_seconds: int
    settings: TimerSettings

    @property
    def elapsed_seconds(self) -> int:
        return max(0, self.duration_seconds - self.remaining_seconds)


@dataclass(frozen=True)
class PomodoroActionResult:
    """Result envelope returned after applying a timer action."""
    action: str
    accepted: bool
    reason: str
    snapshot: PomodoroSnapshot
    ended_mode: Optional[TimerMode] = None

    @property
    def completed(self) -> bool:
        return self.ended_mode is not None


class PomodoroTimer:
    """Focus/break state machine with injected scheduler, storage and alerts.

    All operations are serialised under one lock. Listeners run after the
    lock is released and receive every accepted result.
    """

    def __init__(
        self,
        *,
        settings: Optional[TimerSettings] = None,
        state: Optional[TimerState] = None,
        repository: Optional[TimerRepository] = None,
        completion_sink: Optional[CompletionSink] = None,
        scheduler_factory: Optional[SchedulerFactory] = None,
        tick_interval_seconds: float = TICK_INTERVAL_SECONDS,
        logger: Optional[logging.Logger] = None,
    ):
        self._logger = logger or logging.getLogger("pomodoro")
        self._settings = settings or DEFAULT_SETTINGS
        self._state = state or reducer.initial_state(self._settings)
        self._repository = repository
        self._completion_sink = completion_sink
        self._scheduler_factory = scheduler_factory or thread_scheduler_factory(
            tick_interval_seconds,
            logger=self._logger.getChild("scheduler"),
        )
        self._lock = threading.Lock()
        self._listeners: list[StateListener] = []
        self._listeners_lock = threading.Lock()
        self._scheduler: Optional[TickScheduler] = None
        self._scheduler_generation = 0

        with self._lock:
            self._sync_scheduler_locked()

    @classmethod
    def from_repository(
        cls,
        repository: TimerRepository,
        *,
        default_settings: Optional[TimerSettings] = None,
        logger: Optional[logging.Logger] = None,
        **kwargs: Any,
    ) -> "PomodoroTimer":
        """Rehydrate from the last persisted snapshot.

        Remaining time is always recomputed from the restored settings and
        the timer always starts paused.
        """
        log = logger or logging.getLogger("pomodoro")
        persisted = repository.load()
        if persisted is None:
            settings = default_settings or DEFAULT_SETTINGS
            state = reducer.initial_state(settings)
            log.info("No saved timer state, starting fresh in %s", state.mode.value)
        else:
            settings = persisted.settings
            state = reducer.initial_state(
                settings,
                mode=persisted.mode,
                completed_focus_count=persisted.completed_focus_count,
                completed_cycle_count=persisted.completed_cycle_count,
            )
            log.info(
                "Timer rehydrated: mode=%s remaining=%ss focus=%d cycles=%d",
                state.mode.value,
                state.remaining_seconds,
                state.completed_focus_count,
                state.completed_cycle_count,
            )
        return cls(
            settings=settings,
            state=state,
            repository=repository,
            logger=log,
            **kwargs,
        )

    @property
    def settings(self) -> TimerSettings:
        with self._lock:
            return self._settings

    @property
    def state(self) -> TimerState:
        with self._lock:
            return self._state

    @property
    def scheduler_active(self) -> bool:
        with self._lock:
            return self._scheduler is not None and self._scheduler.is_active

    def snapshot(self) -> PomodoroSnapshot:
        with self._lock:
            return self._snapshot_locked()

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a listener; returns a callable that removes it again."""
        with self._listeners_lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._listeners_lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def start(self) -> PomodoroActionResult:
        return self.apply(ACTION_START)

    def pause(self) -> PomodoroActionResult:
        return self.apply(ACTION_PAUSE)

    def reset(self, mode: Union[TimerMode, str, None] = None) -> PomodoroActionResult:
        return self.apply(ACTION_RESET, mode=mode)

    def skip(self) -> PomodoroActionResult:
        return self.apply(ACTION_SKIP)

    def tick(self) -> PomodoroActionResult:
        return self.apply(ACTION_TICK)

    def update_settings(self, patch: Mapping[str, Any]) -> PomodoroActionResult:
        return self.apply(ACTION_UPDATE_SETTINGS, patch=patch)

    def apply(
        self,
        action: PomodoroAction,
        *,
        mode: Union[TimerMode, str, None] = None,
        patch: Optional[Mapping[str, Any]] = None,
    ) -> PomodoroActionResult:
        with self._lock:
            result = self._apply_locked(action, mode=mode, patch=patch)
        if result.accepted:
            self._notify(result)
        return result

    def close(self, timeout: Optional[float] = 2.0) -> None:
        """Pause the countdown, tear down the tick source and wait for it."""
        with self._lock:
            scheduler = self._scheduler
            self._commit_locked(reducer.pause(self._state, self._settings))
        # Joined outside the lock; an in-flight tick may still be waiting on it.
        if scheduler is not None:
            scheduler.join(timeout)

    def _on_scheduled_tick(self, generation: int) -> None:
        with self._lock:
            # Ticks from a scheduler that has since been replaced are dropped.
            if generation != self._scheduler_generation:
                return
            result = self._apply_locked(ACTION_TICK)
        if result.accepted:
            self._notify(result)

    def _apply_locked(
        self,
        action: str,
        *,
        mode: Union[TimerMode, str, None] = None,
        patch: Optional[Mapping[str, Any]] = None,
    ) -> PomodoroActionResult:
        state = self._state
        settings = self._settings

        if action == ACTION_START:
            if state.running:
                return self._result_locked(action, False, REASON_ALREADY_RUNNING)
            if state.remaining_seconds <= 0:
                return self._result_locked(action, False, REASON_NOTHING_REMAINING)

            self._commit_locked(reducer.start(state, settings))
            self._logger.info(
                "Pomodoro started: mode=%s remaining=%ss",
                self._state.mode.value,
                self._state.remaining_seconds,
            )
            return self._result_locked(action, True, REASON_STARTED)

        if action == ACTION_PAUSE:
            if not state.running:
                return self._result_locked(action, False, REASON_NOT_RUNNING)

            self._commit_locked(reducer.pause(state, settings))
            self._logger.info(
                "Pomodoro paused: mode=%s remaining=%ss",
                self._state.mode.value,
                self._state.remaining_seconds,
            )
            return self._result_locked(action, True, REASON_PAUSED)

        if action == ACTION_RESET:
            target = state.mode if mode is None else parse_mode(mode)
            if target is None:
                return self._result_locked(action, False, REASON_INVALID_MODE)

            self._commit_locked(reducer.reset(state, settings, target))
            self._logger.info(
                "Pomodoro reset: mode=%s duration=%ss",
                target.value,
                self._state.remaining_seconds,
            )
            return self._result_locked(action, True, REASON_RESET)

        if action == ACTION_SKIP:
            transition = reducer.skip(state, settings)
            self._commit_locked(transition)
            self._log_transition("skipped", transition)
            return self._result_locked(
                action,
                True,
                REASON_SKIPPED,
                ended_mode=transition.ended_mode,
            )

        if action == ACTION_TICK:
            if not state.running:
                return self._result_locked(action, False, REASON_NOT_RUNNING)
            if state.remaining_seconds <= 0:
                return self._result_locked(action, False, REASON_NOTHING_REMAINING)

            transition = reducer.tick(state, settings)
            if not transition.completed:
                self._commit_locked(transition)
                return self._result_locked(action, True, REASON_TICK)

            self._signal_completion_locked(state.mode)
            self._commit_locked(transition)
            self._log_transition("completed", transition)
            return self._result_locked(
                action,
                True,
                REASON_COMPLETED,
                ended_mode=transition.ended_mode,
            )

        if action == ACTION_UPDATE_SETTINGS:
            transition = reducer.update_settings(state, settings, patch or {})
            self._commit_locked(transition)
            if transition.state.remaining_seconds != state.remaining_seconds:
                self._logger.info(
                    "Active %s duration changed, remaining reset to %ss",
                    transition.state.mode.value,
                    transition.state.remaining_seconds,
                )
            return self._result_locked(action, True, REASON_SETTINGS_UPDATED)

        return self._result_locked(action, False, REASON_UNSUPPORTED_ACTION)

    def _commit_locked(self, transition: Transition) -> None:
        before = self._persisted_view_locked()
        self._state = transition.state
        self._settings = transition.settings
        self._sync_scheduler_locked()

        after = self._persisted_view_locked()
        if self._repository is not None and after != before:
            self._repository.save(self._state, self._settings)

    def _sync_scheduler_locked(self) -> None:
        if self._state.running:
            if self._scheduler is None:
                self._scheduler_generation += 1
                generation = self._scheduler_generation
                self._scheduler = self._scheduler_factory(
                    lambda: self._on_scheduled_tick(generation)
                )
                self._scheduler.start()
            return

        if self._scheduler is not None:
            scheduler = self._scheduler
            self._scheduler = None
            self._scheduler_generation += 1
            scheduler.stop()

    def _signal_completion_locked(self, mode: TimerMode) -> None:
        if self._completion_sink is None:
            return
        try:
            self._completion_sink.session_completed(mode, self._settings)
        except Exception as error:
            self._logger.error(
                "Completion alert failed: mode=%s error=%s",
                mode.value,
                error,
            )

    def _notify(self, result: PomodoroActionResult) -> None:
        with self._listeners_lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(result)
            except Exception:
                self._logger.exception("Timer listener failed for action=%s", result.action)

    def _log_transition(self, verb: str, transition: Transition) -> None:
        ended = transition.ended_mode.value if transition.ended_mode else "-"
        self._logger.info(
            "Pomodoro %s: ended=%s next=%s running=%s focus=%d cycles=%d",
            verb,
            ended,
            transition.state.mode.value,
            transition.state.running,
            transition.state.completed_focus_count,
            transition.state.completed_cycle_count,
        )

    def _persisted_view_locked(self) -> PersistedSnapshot:
        return PersistedSnapshot(
            settings=self._settings,
            mode=self._state.mode,
            completed_focus_count=self._state.completed_focus_count,
            completed_cycle_count=self._state.completed_cycle_count,
        )

    def _result_locked(
        self,
        action: str,
        accepted: bool,
        reason: str,
        *,
        ended_mode: Optional[TimerMode] = None,
    ) -> PomodoroActionResult:
        return PomodoroActionResult(
            action=action,
            accepted=accepted,
            reason=reason,
            snapshot=self._snapshot_locked(),
            ended_mode=ended_mode,
        )

    def _snapshot_locked(self) -> PomodoroSnapshot:
        state = self._state
        return PomodoroSnapshot(
            mode=state.mode,
            remaining_seconds=state.remaining_seconds,
            running=state.running,
            completed_focus_count=state.completed_focus_count,
            completed_cycle_count=state.completed_cycle_count,
            duration_seconds=self._settings.duration_seconds(state.mode),
            settings=self._settings,
        )
