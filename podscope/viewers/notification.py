"""Auto-expiring toast notifications."""

from __future__ import annotations

import itertools
from dataclasses import dataclass

from podscope.constants.enums import NotificationLevel
from podscope.constants.timeouts import NOTIFICATION_TTL
from podscope.core.messages import NotificationExpired
from podscope.core.tasks import Task


@dataclass(frozen=True)
class Notification:
    id: int
    message: str
    level: NotificationLevel = NotificationLevel.INFO


class NotificationCenter:
    """Shows one toast at a time; a newer toast replaces the current one."""

    def __init__(self, ttl: float = NOTIFICATION_TTL) -> None:
        self.ttl = ttl
        self.current: Notification | None = None
        self._ids = itertools.count(1)

    def push(self, message: str, level: NotificationLevel = NotificationLevel.INFO) -> Task:
        """Show ``message`` and return the timer task that expires it."""
        notification = Notification(next(self._ids), message, level)
        self.current = notification
        return Task.after(self.ttl, NotificationExpired(notification.id), name="toast-expiry")

    def expire(self, notification_id: int) -> bool:
        if self.current is None or self.current.id != notification_id:
            return False
        self.current = None
        return True
