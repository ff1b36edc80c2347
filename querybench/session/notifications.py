"""
Notification sink for user-facing session messages.

Notifications are fire-and-forget: the core never waits for, or reads back,
an acknowledgment.
"""
from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Literal

from querybench.utils.log_utils import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Notification:
    title: str
    message: str
    variant: Literal["default", "destructive"] = "default"

    def to_dict(self) -> dict:
        return {"title": self.title, "message": self.message, "variant": self.variant}


class Notifier:
    """Sink interface. The base implementation drops everything."""

    def notify(self, notification: Notification) -> None:
        pass

    def info(self, title: str, message: str) -> None:
        self.notify(Notification(title, message))

    def error(self, title: str, message: str) -> None:
        self.notify(Notification(title, message, "destructive"))


class LoggingNotifier(Notifier):
    """Writes every notification to the session log."""

    def notify(self, notification: Notification) -> None:
        if notification.variant == "destructive":
            logger.warning(f"{notification.title}: {notification.message}")
        else:
            logger.info(f"{notification.title}: {notification.message}")


class RecordingNotifier(LoggingNotifier):
    """Logs and keeps the most recent notifications for the HTTP layer."""

    def __init__(self, maxlen: int = 20):
        self._recent: Deque[Notification] = deque(maxlen=maxlen)

    def notify(self, notification: Notification) -> None:
        super().notify(notification)
        self._recent.append(notification)

    def recent(self) -> List[Notification]:
        return list(self._recent)

    def latest(self):
        return self._recent[-1] if self._recent else None
