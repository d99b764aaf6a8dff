"""Completion alerts delivered when a countdown period ends."""

from .contracts import NotificationSink, SoundPlayer
from .errors import AlertDeliveryError, AlertDependencyError, AlertError
from .notifications import DesktopNotificationSink
from .service import CompletionAlerts, completion_message
from .sound import SoundDeviceAlarmPlayer
from .tones import ALARM_TONES, synthesize_alarm

__all__ = [
    "ALARM_TONES",
    "AlertDeliveryError",
    "AlertDependencyError",
    "AlertError",
    "CompletionAlerts",
    "DesktopNotificationSink",
    "NotificationSink",
    "SoundDeviceAlarmPlayer",
    "SoundPlayer",
    "completion_message",
    "synthesize_alarm",
]
