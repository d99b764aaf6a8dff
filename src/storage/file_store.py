"""JSON-file backed key-value store."""

from __future__ import annotations

import json
import logging
import os
import threading
from pathlib import Path
from typing import Optional

from .errors import StorageCorruptionError, StorageError


class JsonFileKeyValueStore:
    """Stores string values in a single JSON object on disk.

    Writes go to a sibling temp file that is renamed over the target, so a
    crash mid-write leaves the previous document intact.
    """

    def __init__(self, path: str | Path, logger: Optional[logging.Logger] = None):
        self._path = Path(path).expanduser()
        self._logger = logger or logging.getLogger("storage")
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            document = self._read_document()
        value = document.get(key)
        if value is None:
            return None
        if not isinstance(value, str):
            raise StorageCorruptionError(f"Stored value for {key!r} is not a string")
        return value

    def set(self, key: str, value: str) -> None:
        with self._lock:
            try:
                document = self._read_document()
            except StorageCorruptionError as error:
                self._logger.warning("Overwriting unreadable store %s: %s", self._path, error)
                document = {}
            document[key] = value
            self._write_document(document)

    def _read_document(self) -> dict[str, object]:
        if not self._path.exists():
            return {}
        try:
            raw = self._path.read_text(encoding="utf-8")
        except UnicodeDecodeError as error:
            raise StorageCorruptionError(
                f"Store {self._path} is not valid UTF-8: {error}"
            ) from error
        except OSError as error:
            raise StorageError(f"Failed to read store {self._path}: {error}") from error

        if not raw.strip():
            return {}
        try:
            document = json.loads(raw)
        except (ValueError, RecursionError) as error:
            raise StorageCorruptionError(
                f"Store {self._path} is not valid JSON: {error}"
            ) from error
        if not isinstance(document, dict):
            raise StorageCorruptionError(f"Store {self._path} must contain a JSON object")
        return document

    def _write_document(self, document: dict[str, object]) -> None:
        temp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            temp_path.write_text(
                json.dumps(document, indent=2, sort_keys=True),
                encoding="utf-8",
            )
            os.replace(temp_path, self._path)
        except OSError as error:
            if temp_path.exists():
                try:
                    temp_path.unlink()
                except OSError:
                    self._logger.debug("Could not remove temp file %s", temp_path)
            raise StorageError(f"Failed to write store {self._path}: {error}") from error
