"""Key-value store protocol backing timer persistence."""

from __future__ import annotations

from typing import Optional, Protocol


class KeyValueStore(Protocol):
    """String key-value store. Implementations raise `StorageError` on failure."""
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...
