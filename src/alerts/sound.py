"""Sounddevice-backed alarm playback."""

from __future__ import annotations

import logging
from typing import Any, Optional

from .errors import AlertDependencyError, AlertDeliveryError
from .tones import DEFAULT_SAMPLE_RATE_HZ, synthesize_alarm


class SoundDeviceAlarmPlayer:
    """Plays synthesized alarm tones through a selected sounddevice output."""

    def __init__(
        self,
        output_device_index: Optional[int] = None,
        *,
        sample_rate_hz: int = DEFAULT_SAMPLE_RATE_HZ,
        backend: Any = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._output_device_index = output_device_index
        self._sample_rate_hz = int(sample_rate_hz)
        self._logger = logger or logging.getLogger("alerts.sound")
        self._backend = backend if backend is not None else self._load_backend()

    def _load_backend(self):
        try:
            import sounddevice
        except (ImportError, OSError) as error:  # pragma: no cover - depends on audio env
            raise AlertDependencyError(
                f"sounddevice import failed ({error}). Install sounddevice and PortAudio."
            ) from error
        return sounddevice

    def play(self, sound_id: str, volume: float) -> None:
        if volume <= 0:
            self._logger.debug("Alarm volume is zero, skipping %s", sound_id)
            return

        wav = synthesize_alarm(sound_id, volume, sample_rate_hz=self._sample_rate_hz)
        if len(wav) == 0:
            raise AlertDeliveryError(f"Alarm sound {sound_id!r} produced no audio")

        try:
            self._backend.play(
                wav,
                samplerate=self._sample_rate_hz,
                device=self._output_device_index,
                blocking=False,
            )
        except Exception as error:
            raise AlertDeliveryError(f"Alarm playback failed: {error}") from error

        self._logger.debug(
            "Playing alarm %s: %d samples at %d Hz, volume=%.2f",
            sound_id,
            len(wav),
            self._sample_rate_hz,
            volume,
        )
