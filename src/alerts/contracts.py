"""Capability protocols for completion alerts."""

from __future__ import annotations

from typing import Protocol


class SoundPlayer(Protocol):
    """Plays an alarm sound. Raises `AlertError` when playback fails."""
    def play(self, sound_id: str, volume: float) -> None:
        ...


class NotificationSink(Protocol):
    """Shows a desktop notification.

    Returns False when notifications are not permitted; raises `AlertError`
    when delivery was attempted and failed.
    """
    def show(self, title: str, body: str) -> bool:
        ...
