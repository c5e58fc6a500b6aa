from .byte_range import ByteRange
from .folder_status import FolderStatus
from .notification_kind import NotificationPriority, NotificationType
from .user_role import UserRole
from .visibility import Visibility

__all__ = [
    "ByteRange",
    "FolderStatus",
    "NotificationPriority",
    "NotificationType",
    "UserRole",
    "Visibility",
]
