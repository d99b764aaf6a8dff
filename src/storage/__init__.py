"""Key-value persistence for timer snapshots."""

from .contracts import KeyValueStore
from .errors import StorageCorruptionError, StorageError
from .file_store import JsonFileKeyValueStore
from .memory_store import InMemoryKeyValueStore
from .repository import (
    DEFAULT_STORAGE_KEY,
    SnapshotRepository,
    decode_snapshot,
    encode_snapshot,
)

__all__ = [
    "DEFAULT_STORAGE_KEY",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "SnapshotRepository",
    "StorageCorruptionError",
    "StorageError",
    "decode_snapshot",
    "encode_snapshot",
]
