import subprocess
import unittest
from unittest.mock import MagicMock

from alerts import AlertDeliveryError, DesktopNotificationSink


class DesktopNotificationSinkTests(unittest.TestCase):
    def test_linux_uses_notify_send(self) -> None:
        runner = MagicMock()
        sink = DesktopNotificationSink(platform_name="Linux", runner=runner, timeout_seconds=2.0)

        shown = sink.show("Break Complete!", "Ready to focus again?")

        self.assertTrue(shown)
        runner.assert_called_once_with(
            ["notify-send", "Break Complete!", "Ready to focus again?"],
            capture_output=True,
            timeout=2.0,
            check=True,
        )

    def test_macos_escapes_quotes_for_osascript(self) -> None:
        runner = MagicMock()
        sink = DesktopNotificationSink(platform_name="Darwin", runner=runner)

        sink.show('Say "hi"', "Body")

        command = runner.call_args.args[0]
        self.assertEqual(["osascript", "-e"], command[:2])
        self.assertEqual(
            'display notification "Body" with title "Say \\"hi\\""',
            command[2],
        )

    def test_declines_without_permission(self) -> None:
        runner = MagicMock()
        sink = DesktopNotificationSink(
            permission_granted=False,
            platform_name="Linux",
            runner=runner,
        )

        self.assertFalse(sink.show("Title", "Body"))
        runner.assert_not_called()

        sink.grant_permission()
        self.assertTrue(sink.show("Title", "Body"))
        sink.revoke_permission()
        self.assertFalse(sink.permission_granted)

    def test_unsupported_platform_declines(self) -> None:
        runner = MagicMock()
        sink = DesktopNotificationSink(platform_name="Windows", runner=runner)

        self.assertFalse(sink.show("Title", "Body"))
        runner.assert_not_called()

    def test_command_failures_raise_delivery_error(self) -> None:
        for error in (
            FileNotFoundError("notify-send"),
            subprocess.TimeoutExpired(["notify-send"], 5.0),
            subprocess.CalledProcessError(1, ["notify-send"]),
        ):
            with self.subTest(error=type(error).__name__):
                sink = DesktopNotificationSink(
                    platform_name="Linux",
                    runner=MagicMock(side_effect=error),
                )
                with self.assertRaises(AlertDeliveryError):
                    sink.show("Title", "Body")


if __name__ == "__main__":
    unittest.main()
