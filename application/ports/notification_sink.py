from abc import ABC, abstractmethod

from application.dtos.notification_dtos import Notification


class NotificationSink(ABC):
    """Port for handing notifications to whatever delivers them to users."""

    @abstractmethod
    async def send(self, notification: Notification) -> None:
        """Deliver one notification.

        Callers treat this as fire-and-forget and only log failures.
        """
