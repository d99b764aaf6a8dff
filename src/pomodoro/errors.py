class PomodoroError(Exception):
    """Base exception for pomodoro timer logic."""


class SettingsFormatError(PomodoroError):
    """Raised when serialized timer settings are missing fields or mistyped."""
