import structlog

from application.dtos.notification_dtos import Notification
from application.ports.notification_sink import NotificationSink

logger = structlog.get_logger()


class NullNotificationSink(NotificationSink):
    """Drops notifications. Used when NOTIFICATION_BACKEND is ``none``."""

    async def send(self, notification: Notification) -> None:
        logger.debug(
            "notification_dropped",
            receiver_id=str(notification.receiver_id),
            type=notification.type.value,
        )
