class StorageError(Exception):
    """Base exception for key-value persistence."""


class StorageCorruptionError(StorageError):
    """Raised when a stored document cannot be decoded."""
