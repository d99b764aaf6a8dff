"""Snapshot persistence for the pomodoro timer over a key-value store."""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Optional

from pomodoro import PersistedSnapshot, SettingsFormatError, TimerSettings, TimerState
from pomodoro.settings import parse_mode, settings_from_dict, settings_to_dict

from .contracts import KeyValueStore
from .errors import StorageCorruptionError, StorageError

DEFAULT_STORAGE_KEY = "pomodoro-timer-storage"


def encode_snapshot(state: TimerState, settings: TimerSettings) -> str:
    """Serialize the restorable part of the timer state as JSON."""
    payload = {
        "settings": settings_to_dict(settings),
        "mode": state.mode.value,
        "completedFocusCount": state.completed_focus_count,
        "completedCycleCount": state.completed_cycle_count,
    }
    return json.dumps(payload, sort_keys=True)


def decode_snapshot(raw: str) -> PersistedSnapshot:
    """Parse a stored snapshot; raise `StorageCorruptionError` when malformed."""
    try:
        payload = json.loads(raw)
    except (ValueError, RecursionError) as error:
        raise StorageCorruptionError(f"Snapshot is not valid JSON: {error}") from error
    if not isinstance(payload, Mapping):
        raise StorageCorruptionError("Snapshot must be a JSON object")

    mode = parse_mode(payload.get("mode"))
    if mode is None:
        raise StorageCorruptionError(f"Snapshot mode is invalid: {payload.get('mode')!r}")

    try:
        settings = settings_from_dict(payload.get("settings"))
    except SettingsFormatError as error:
        raise StorageCorruptionError(f"Snapshot settings are invalid: {error}") from error

    return PersistedSnapshot(
        settings=settings,
        mode=mode,
        completed_focus_count=_counter(payload, "completedFocusCount"),
        completed_cycle_count=_counter(payload, "completedCycleCount"),
    )


class SnapshotRepository:
    """Persistence port: saves and loads timer snapshots without failing the caller."""

    def __init__(
        self,
        store: KeyValueStore,
        *,
        key: str = DEFAULT_STORAGE_KEY,
        logger: Optional[logging.Logger] = None,
    ):
        self._store = store
        self._key = key
        self._logger = logger or logging.getLogger("storage")

    def save(self, state: TimerState, settings: TimerSettings) -> None:
        try:
            self._store.set(self._key, encode_snapshot(state, settings))
        except (StorageError, OSError) as error:
            self._logger.error("Failed to persist timer snapshot: %s", error)
            return
        self._logger.debug(
            "Timer snapshot saved: mode=%s focus=%d cycles=%d",
            state.mode.value,
            state.completed_focus_count,
            state.completed_cycle_count,
        )

    def load(self) -> Optional[PersistedSnapshot]:
        try:
            raw = self._store.get(self._key)
        except StorageCorruptionError as error:
            self._logger.warning("Discarding unreadable timer store: %s", error)
            return None
        except (StorageError, OSError) as error:
            self._logger.error("Failed to read timer snapshot, using defaults: %s", error)
            return None

        if raw is None:
            return None

        try:
            return decode_snapshot(raw)
        except StorageCorruptionError as error:
            self._logger.warning("Discarding corrupt timer snapshot: %s", error)
            return None


def _counter(payload: Mapping[str, Any], field: str) -> int:
    value = payload.get(field)
    if isinstance(value, bool) or not isinstance(value, int):
        raise StorageCorruptionError(f"Snapshot {field} must be an integer")
    if value < 0:
        raise StorageCorruptionError(f"Snapshot {field} must not be negative")
    return value
