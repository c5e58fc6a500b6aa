from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from application.dtos.notification_dtos import Notification
    from application.ports.notification_sink import NotificationSink

logger = structlog.get_logger()


class Notifier:
    """Fire-and-forget wrapper around the notification sink."""

    def __init__(self, sink: NotificationSink | None = None) -> None:
        self.sink = sink

    async def notify(self, notification: Notification) -> bool:
        if self.sink is None:
            return False
        try:
            await self.sink.send(notification)
        except Exception:
            # Delivery problems never fail the operation that triggered them
            logger.exception(
                "notification_failed",
                receiver_id=str(notification.receiver_id),
                type=notification.type.value,
            )
            return False
        return True
