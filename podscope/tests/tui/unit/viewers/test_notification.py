"""Tests for NotificationCenter."""

from __future__ import annotations

import pytest

from podscope.constants.enums import NotificationLevel
from podscope.core.messages import NotificationExpired
from podscope.viewers.notification import NotificationCenter


class TestNotificationCenter:
    """Tests for toast replacement and expiry."""

    @pytest.mark.asyncio
    async def test_push_returns_expiry_timer(self) -> None:
        center = NotificationCenter(ttl=0.01)
        task = center.push("saved", NotificationLevel.SUCCESS)
        assert center.current is not None
        assert center.current.message == "saved"

        message = await task.run()

        assert isinstance(message, NotificationExpired)
        assert center.expire(message.notification_id)
        assert center.current is None

    def test_newer_toast_survives_older_expiry(self) -> None:
        center = NotificationCenter()
        center.push("first")
        first_id = center.current.id
        center.push("second")
        assert not center.expire(first_id)
        assert center.current.message == "second"

    def test_default_level_is_info(self) -> None:
        center = NotificationCenter()
        center.push("hello")
        assert center.current.level is NotificationLevel.INFO
