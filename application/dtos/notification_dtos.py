from datetime import UTC, datetime
from uuid import UUID

from pydantic import BaseModel, Field

from domain.value_objects.notification_kind import NotificationPriority, NotificationType


class Notification(BaseModel):
    """Message handed to the notification sink."""

    receiver_id: UUID = Field(..., description="User receiving the notification")
    sender_id: UUID = Field(..., description="User whose action triggered it")
    title: str = Field(..., description="Short headline")
    message: str = Field(..., description="Body text")
    type: NotificationType = Field(NotificationType.GENERAL, description="Kind of notification")
    priority: NotificationPriority = Field(NotificationPriority.MEDIUM, description="Priority")
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
