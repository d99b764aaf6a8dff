"""Completion alerts: alarm sound plus desktop notification, off the timer thread."""

from __future__ import annotations

import concurrent.futures
import logging
from typing import Optional

from pomodoro import TimerMode, TimerSettings

from .contracts import NotificationSink, SoundPlayer
from .errors import AlertError

FOCUS_COMPLETE_TITLE = "Pomodoro Complete!"
FOCUS_COMPLETE_BODY = "Time to take a break!"
BREAK_COMPLETE_TITLE = "Break Complete!"
BREAK_COMPLETE_BODY = "Ready to focus again?"


def completion_message(mode: TimerMode) -> tuple[str, str]:
    if mode == TimerMode.FOCUS:
        return FOCUS_COMPLETE_TITLE, FOCUS_COMPLETE_BODY
    return BREAK_COMPLETE_TITLE, BREAK_COMPLETE_BODY


class CompletionAlerts:
    """Completion sink that plays the alarm and shows a notification.

    `session_completed` only submits work to a single worker thread and
    returns immediately; delivery failures are logged and never reach the
    timer.
    """

    def __init__(
        self,
        *,
        sound_player: Optional[SoundPlayer] = None,
        notification_sink: Optional[NotificationSink] = None,
        executor: Optional[concurrent.futures.Executor] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._sound_player = sound_player
        self._notification_sink = notification_sink
        self._owns_executor = executor is None
        self._executor = executor or concurrent.futures.ThreadPoolExecutor(
            max_workers=1,
            thread_name_prefix="completion-alerts",
        )
        self._logger = logger or logging.getLogger("alerts")

    def session_completed(self, mode: TimerMode, settings: TimerSettings) -> None:
        future = self._executor.submit(
            self.deliver,
            mode,
            settings.alarm_sound_id,
            settings.alarm_volume,
        )
        future.add_done_callback(self._log_unexpected_failure)

    def deliver(self, mode: TimerMode, sound_id: str, volume: float) -> None:
        """Play the alarm and show the notification; each step is best-effort."""
        if self._sound_player is not None:
            try:
                self._sound_player.play(sound_id, volume)
            except AlertError as error:
                self._logger.warning("Alarm sound %s failed: %s", sound_id, error)

        if self._notification_sink is not None:
            title, body = completion_message(mode)
            try:
                shown = self._notification_sink.show(title, body)
            except AlertError as error:
                self._logger.warning("Completion notification failed: %s", error)
            else:
                if not shown:
                    self._logger.debug("Completion notification declined: %s", title)

    def close(self, wait: bool = True) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=wait)

    def _log_unexpected_failure(self, future: concurrent.futures.Future) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            self._logger.error("Completion alert delivery crashed: %s", error, exc_info=error)
