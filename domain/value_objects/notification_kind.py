from enum import Enum


class NotificationType(str, Enum):
    GENERAL = "general"
    DOCUMENT_SHARE = "document_share"
    ADMIN_ACTION = "admin_action"


class NotificationPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"
