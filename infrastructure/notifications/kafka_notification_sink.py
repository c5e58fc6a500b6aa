from application.dtos.notification_dtos import Notification
from application.ports.notification_sink import NotificationSink
from infrastructure.notifications.kafka_publisher import KafkaPublisher


class KafkaNotificationSink(NotificationSink):
    """Publishes notifications as events for an external delivery service."""

    def __init__(self, publisher: KafkaPublisher) -> None:
        self.publisher = publisher

    async def send(self, notification: Notification) -> None:
        event = {
            "event_type": "NotificationRequested",
            "data": notification.model_dump(mode="json"),
        }
        await self.publisher.publish(subject=str(notification.receiver_id), payload=event)
