"""Desktop notifications through the platform's notification command."""

from __future__ import annotations

import logging
import platform
import subprocess
from typing import Callable, Optional

from .errors import AlertDeliveryError


def _escape_applescript(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


class DesktopNotificationSink:
    """Shows notifications via `notify-send` (Linux) or `osascript` (macOS).

    Without a permission grant `show` declines silently and returns False.
    """

    def __init__(
        self,
        *,
        permission_granted: bool = True,
        timeout_seconds: float = 5.0,
        platform_name: Optional[str] = None,
        runner: Optional[Callable[..., subprocess.CompletedProcess]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._permission_granted = permission_granted
        self._timeout_seconds = float(timeout_seconds)
        self._platform_name = platform_name or platform.system()
        self._runner = runner or subprocess.run
        self._logger = logger or logging.getLogger("alerts.notifications")

    @property
    def permission_granted(self) -> bool:
        return self._permission_granted

    def grant_permission(self) -> None:
        self._permission_granted = True

    def revoke_permission(self) -> None:
        self._permission_granted = False

    def show(self, title: str, body: str) -> bool:
        if not self._permission_granted:
            self._logger.debug("Notification permission not granted, skipping: %s", title)
            return False

        command = self._build_command(title, body)
        if command is None:
            self._logger.debug(
                "Desktop notifications unsupported on %s, skipping: %s",
                self._platform_name,
                title,
            )
            return False

        try:
            self._runner(
                command,
                capture_output=True,
                timeout=self._timeout_seconds,
                check=True,
            )
        except (subprocess.SubprocessError, FileNotFoundError, OSError) as error:
            raise AlertDeliveryError(f"Notification delivery failed: {error}") from error
        return True

    def _build_command(self, title: str, body: str) -> Optional[list[str]]:
        if self._platform_name == "Linux":
            return ["notify-send", title, body]
        if self._platform_name == "Darwin":
            script = (
                f'display notification "{_escape_applescript(body)}" '
                f'with title "{_escape_applescript(title)}"'
            )
            return ["osascript", "-e", script]
        return None
