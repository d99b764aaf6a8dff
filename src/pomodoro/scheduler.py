"""Tick sources that drive the countdown once per interval."""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional

from .constants import TICK_INTERVAL_SECONDS


class ThreadTickScheduler:
    """Daemon-thread ticker with monotonic deadlines.

    Each delivered tick stands for exactly one interval. Deadlines advance
    from a fixed anchor so wakeup jitter does not accumulate; when a wakeup
    is late by more than a full interval (suspended process) the anchor is
    moved to now and the missed ticks are dropped.
    """

    def __init__(
        self,
        callback: Callable[[], None],
        *,
        interval_seconds: float = TICK_INTERVAL_SECONDS,
        logger: Optional[logging.Logger] = None,
        monotonic_fn: Optional[Callable[[], float]] = None,
        name: str = "pomodoro-ticker",
    ):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be greater than zero")

        self._callback = callback
        self._interval_seconds = float(interval_seconds)
        self._logger = logger or logging.getLogger("pomodoro.scheduler")
        self._monotonic = monotonic_fn or time.monotonic
        self._name = name
        self._lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self._stop_event: Optional[threading.Event] = None

    @property
    def is_active(self) -> bool:
        with self._lock:
            return self._is_active_locked()

    def start(self) -> None:
        with self._lock:
            if self._is_active_locked():
                return
            stop_event = threading.Event()
            thread = threading.Thread(
                target=self._run,
                args=(stop_event,),
                name=self._name,
                daemon=True,
            )
            self._stop_event = stop_event
            self._thread = thread
            thread.start()
        self._logger.debug("Tick scheduler started: interval=%ss", self._interval_seconds)

    def stop(self) -> None:
        """Stop delivering ticks. Does not wait for the worker thread."""
        with self._lock:
            stop_event = self._stop_event
        if stop_event is not None and not stop_event.is_set():
            stop_event.set()
            self._logger.debug("Tick scheduler stopped")

    def join(self, timeout: Optional[float] = None) -> None:
        with self._lock:
            thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)

    def _is_active_locked(self) -> bool:
        return (
            self._thread is not None
            and self._stop_event is not None
            and not self._stop_event.is_set()
        )

    def _run(self, stop_event: threading.Event) -> None:
        next_deadline = self._monotonic() + self._interval_seconds
        while True:
            delay = max(0.0, next_deadline - self._monotonic())
            if stop_event.wait(delay):
                return

            try:
                self._callback()
            except Exception:
                self._logger.exception("Tick callback failed")

            next_deadline += self._interval_seconds
            now = self._monotonic()
            if now - next_deadline > self._interval_seconds:
                self._logger.warning(
                    "Tick scheduler fell behind by %.1fs, resyncing",
                    now - next_deadline,
                )
                next_deadline = now + self._interval_seconds


def thread_scheduler_factory(
    interval_seconds: float = TICK_INTERVAL_SECONDS,
    *,
    logger: Optional[logging.Logger] = None,
) -> Callable[[Callable[[], None]], ThreadTickScheduler]:
    def factory(callback: Callable[[], None]) -> ThreadTickScheduler:
        return ThreadTickScheduler(
            callback,
            interval_seconds=interval_seconds,
            logger=logger,
        )

    return factory


class ManualTickScheduler:
    """Scheduler whose ticks are delivered explicitly through `fire()`."""

    def __init__(self, callback: Callable[[], None]):
        self._callback = callback
        self._active = False
        self.start_count = 0
        self.stop_count = 0
        self.join_count = 0

    @property
    def is_active(self) -> bool:
        return self._active

    def start(self) -> None:
        if self._active:
            return
        self._active = True
        self.start_count += 1

    def stop(self) -> None:
        if not self._active:
            return
        self._active = False
        self.stop_count += 1

    def join(self, timeout: Optional[float] = None) -> None:
        self.join_count += 1

    def fire(self) -> bool:
        if not self._active:
            return False
        self._callback()
        return True


class VirtualClock:
    """Scheduler factory plus driver for deterministic countdowns.

    Pass the instance as a scheduler factory; `advance(seconds)` then fires
    one tick per second on every scheduler that is active at that moment.
    """

    def __init__(self):
        self.schedulers: list[ManualTickScheduler] = []

    def __call__(self, callback: Callable[[], None]) -> ManualTickScheduler:
        scheduler = ManualTickScheduler(callback)
        self.schedulers.append(scheduler)
        return scheduler

    @property
    def active_count(self) -> int:
        return sum(1 for scheduler in self.schedulers if scheduler.is_active)

    def advance(self, seconds: int = 1) -> int:
        """Deliver `seconds` ticks and return how many callbacks ran."""
        delivered = 0
        for _ in range(max(0, int(seconds))):
            for scheduler in list(self.schedulers):
                if scheduler.fire():
                    delivered += 1
        return delivered
