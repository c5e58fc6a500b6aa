from uuid import uuid4

from motor.motor_asyncio import AsyncIOMotorClient

from application.dtos.notification_dtos import Notification
from application.ports.notification_sink import NotificationSink
from infrastructure.config import Settings
from infrastructure.mongo_repositories.mongo_errors import mongo_errors


class MongoNotificationSink(NotificationSink):
    """Writes notifications into the collection the records system reads them from."""

    def __init__(self, client: AsyncIOMotorClient, settings: Settings) -> None:
        self.client = client
        self.db = self.client[settings.mongo_db]
        self.notifications = self.db[settings.mongo_notifications_collection]

    async def send(self, notification: Notification) -> None:
        with mongo_errors("insert_notification"):
            await self.notifications.insert_one(
                {
                    "_id": str(uuid4()),
                    "receiver_id": str(notification.receiver_id),
                    "sender_id": str(notification.sender_id),
                    "title": notification.title,
                    "message": notification.message,
                    "type": notification.type.value,
                    "priority": notification.priority.value,
                    "is_read": False,
                    "created_at": notification.created_at,
                },
            )
