"""User-facing notifications (toasts) raised by the workflow."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class NotificationLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Notification:
    level: NotificationLevel
    title: str
    description: Optional[str] = None
    duration_ms: Optional[int] = None
    # Success styling with a warning marker, e.g. an approximate route
    warning: bool = False


class Notifier:
    """Collects notifications in order; a UI drains ``history`` to render them."""

    def __init__(self) -> None:
        self.history: list[Notification] = []

    def notify(self, notification: Notification) -> Notification:
        self.history.append(notification)
        if notification.level is NotificationLevel.ERROR:
            logger.warning(f"{notification.title}: {notification.description or ''}")
        else:
            logger.info(notification.title)
        return notification

    def success(self, title: str, description: str | None = None, *, warning: bool = False) -> Notification:
        return self.notify(Notification(NotificationLevel.SUCCESS, title, description, warning=warning))

    def error(self, title: str, description: str | None = None, *, duration_ms: int | None = None) -> Notification:
        return self.notify(Notification(NotificationLevel.ERROR, title, description, duration_ms))

    def clear(self) -> None:
        self.history.clear()
