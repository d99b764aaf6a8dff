import logging
import signal
import sys
from typing import Any, Optional

from alerts import (
    AlertDependencyError,
    CompletionAlerts,
    DesktopNotificationSink,
    SoundDeviceAlarmPlayer,
)
from app_config import (
    AlertSettings,
    AppConfig,
    AppConfigurationError,
    StorageSettings,
    build_timer_settings,
    load_app_config,
)
from pomodoro import PomodoroActionResult, PomodoroTimer
from pomodoro.constants import ACTION_TICK
from pomodoro.scheduler import thread_scheduler_factory
from storage import InMemoryKeyValueStore, JsonFileKeyValueStore, SnapshotRepository
from time_format import format_status_line, progress_percent

HELP_TEXT = """Commands:
  start | pause | skip | status
  reset [Focus|ShortBreak|LongBreak]
  set <field>=<value>   e.g. set focus_minutes=50
  quit"""


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Configure logging for the application."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    return logging.getLogger("pomodoro_app")


def setup_signal_handlers() -> None:
    """Set up graceful shutdown on SIGTERM and SIGINT.

    The handler only raises `SystemExit`; cleanup runs in `main`'s `finally`
    once the interrupted call has released the timer lock.
    """

    def signal_handler(signum: int, frame) -> None:
        signal_name = signal.Signals(signum).name
        print(f"\n{signal_name} received, stopping...\n")
        sys.exit(0)

    signal.signal(signal.SIGTERM, signal_handler)
    signal.signal(signal.SIGINT, signal_handler)


def build_repository(settings: StorageSettings) -> SnapshotRepository:
    logger = logging.getLogger("storage")
    if settings.enabled:
        store = JsonFileKeyValueStore(settings.path, logger=logger)
    else:
        store = InMemoryKeyValueStore()
    return SnapshotRepository(store, key=settings.key, logger=logger)


def build_completion_alerts(settings: AlertSettings) -> CompletionAlerts:
    logger = logging.getLogger("alerts")
    sound_player: Optional[SoundDeviceAlarmPlayer] = None
    if settings.sound_enabled:
        try:
            sound_player = SoundDeviceAlarmPlayer(
                output_device_index=settings.output_device,
                logger=logging.getLogger("alerts.sound"),
            )
        except AlertDependencyError as error:
            logger.warning("Alarm sound disabled: %s", error)

    notification_sink = DesktopNotificationSink(
        permission_granted=settings.notifications_enabled,
        timeout_seconds=settings.notification_timeout_seconds,
        logger=logging.getLogger("alerts.notifications"),
    )
    return CompletionAlerts(
        sound_player=sound_player,
        notification_sink=notification_sink,
        logger=logger,
    )


def build_timer(app_config: AppConfig, completion_alerts: CompletionAlerts) -> PomodoroTimer:
    timer_logger = logging.getLogger("pomodoro")
    return PomodoroTimer.from_repository(
        build_repository(app_config.storage),
        default_settings=build_timer_settings(app_config.timer),
        completion_sink=completion_alerts,
        scheduler_factory=thread_scheduler_factory(
            app_config.scheduler.tick_interval_seconds,
            logger=logging.getLogger("pomodoro.scheduler"),
        ),
        logger=timer_logger,
    )


def _parse_setting_value(text: str) -> Any:
    lowered = text.strip().lower()
    if lowered in ("true", "on", "yes"):
        return True
    if lowered in ("false", "off", "no"):
        return False
    return text.strip()


def _print_result(result: PomodoroActionResult) -> None:
    if result.action == ACTION_TICK and not result.completed:
        return
    snapshot = result.snapshot
    print(
        f"[{result.reason}] {format_status_line(snapshot)} "
        f"(focus sessions: {snapshot.completed_focus_count}, "
        f"cycles: {snapshot.completed_cycle_count})"
    )


def handle_command(timer: PomodoroTimer, line: str) -> bool:
    """Run one console command. Returns False when the user asked to quit."""
    parts = line.strip().split(maxsplit=1)
    if not parts:
        return True

    command = parts[0].lower()
    argument = parts[1].strip() if len(parts) > 1 else ""

    if command in ("quit", "exit", "q"):
        return False
    if command == "start":
        result = timer.start()
    elif command == "pause":
        result = timer.pause()
    elif command == "skip":
        result = timer.skip()
    elif command == "reset":
        result = timer.reset(argument or None)
    elif command == "status":
        snapshot = timer.snapshot()
        print(f"{format_status_line(snapshot)} [{progress_percent(snapshot):.0f}%]")
        return True
    elif command == "set":
        field, separator, value = argument.partition("=")
        if not separator or not field.strip():
            print("Usage: set <field>=<value>")
            return True
        result = timer.update_settings({field.strip(): _parse_setting_value(value)})
    else:
        print(HELP_TEXT)
        return True

    if not result.accepted:
        print(f"[{result.reason}] {format_status_line(result.snapshot)}")
    return True


def main() -> int:
    logger = setup_logging(level=logging.INFO)

    try:
        app_config = load_app_config()
    except AppConfigurationError as error:
        logger.error("Configuration error: %s", error)
        return 1

    if app_config.source_file:
        logger.info("Loaded config from %s", app_config.source_file)
    else:
        logger.info("No config file found, using defaults")

    completion_alerts = build_completion_alerts(app_config.alerts)
    timer = build_timer(app_config, completion_alerts)
    timer.subscribe(_print_result)

    try:
        setup_signal_handlers()
        print(HELP_TEXT)
        print(format_status_line(timer.snapshot()))
        for line in sys.stdin:
            if not handle_command(timer, line):
                break
    finally:
        timer.close()
        completion_alerts.close(wait=False)
    return 0


if __name__ == "__main__":
    sys.exit(main())
