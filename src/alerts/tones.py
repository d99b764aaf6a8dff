"""Synthesized alarm tones, one per selectable alarm sound id."""

from __future__ import annotations

from typing import Callable

import numpy as np

from pomodoro.constants import DEFAULT_ALARM_SOUND_ID

DEFAULT_SAMPLE_RATE_HZ = 44_100


def _timeline(seconds: float, sample_rate_hz: int) -> np.ndarray:
    return np.arange(int(seconds * sample_rate_hz), dtype=np.float32) / sample_rate_hz


def _strike(
    frequency_hz: float,
    seconds: float,
    decay: float,
    sample_rate_hz: int,
    *,
    overtone: float = 0.0,
) -> np.ndarray:
    t = _timeline(seconds, sample_rate_hz)
    wave = np.sin(2 * np.pi * frequency_hz * t)
    if overtone:
        wave += overtone * np.sin(2 * np.pi * frequency_hz * 2.0 * t)
    return (wave * np.exp(-decay * t)).astype(np.float32)


def _silence(seconds: float, sample_rate_hz: int) -> np.ndarray:
    return np.zeros(int(seconds * sample_rate_hz), dtype=np.float32)


def _bell(sample_rate_hz: int) -> np.ndarray:
    return _strike(880.0, 1.6, 2.5, sample_rate_hz, overtone=0.4)


def _digital(sample_rate_hz: int) -> np.ndarray:
    t = _timeline(0.1, sample_rate_hz)
    beep = np.sign(np.sin(2 * np.pi * 1000.0 * t)).astype(np.float32) * 0.5
    gap = _silence(0.1, sample_rate_hz)
    burst = np.concatenate([beep, gap] * 4)
    return np.concatenate([burst, _silence(0.4, sample_rate_hz), burst])


def _kitchen(sample_rate_hz: int) -> np.ndarray:
    t = _timeline(1.2, sample_rate_hz)
    carrier = np.sin(2 * np.pi * 1500.0 * t)
    rattle = 0.5 * (1.0 + np.sign(np.sin(2 * np.pi * 20.0 * t)))
    return (carrier * rattle * 0.8).astype(np.float32)


def _analog(sample_rate_hz: int) -> np.ndarray:
    strike = _strike(660.0, 0.5, 6.0, sample_rate_hz, overtone=0.2)
    return np.concatenate([strike, strike])


def _wood(sample_rate_hz: int) -> np.ndarray:
    knock = _strike(400.0, 0.12, 40.0, sample_rate_hz)
    gap = _silence(0.15, sample_rate_hz)
    return np.concatenate([knock, gap, knock, gap, knock])


ALARM_TONES: dict[str, Callable[[int], np.ndarray]] = {
    "bell": _bell,
    "digital": _digital,
    "kitchen": _kitchen,
    "analog": _analog,
    "wood": _wood,
}


def synthesize_alarm(
    sound_id: str,
    volume: float,
    *,
    sample_rate_hz: int = DEFAULT_SAMPLE_RATE_HZ,
) -> np.ndarray:
    """Return a mono float32 buffer for `sound_id`, scaled by `volume`.

    Unknown ids fall back to the bell.
    """
    builder = ALARM_TONES.get(sound_id.strip().lower(), ALARM_TONES[DEFAULT_ALARM_SOUND_ID])
    wav = builder(sample_rate_hz)
    peak = float(np.max(np.abs(wav))) if len(wav) else 0.0
    if peak > 0:
        wav = wav / peak
    gain = min(1.0, max(0.0, float(volume)))
    return (wav * gain).astype(np.float32)
