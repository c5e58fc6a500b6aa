"""Domain layer exports."""

from domain.aggregates import Document, Folder, FolderMembership, ShareGrant, User
from domain.exceptions import DomainError, ValidationError
from domain.value_objects import (
    ByteRange,
    FolderStatus,
    NotificationPriority,
    NotificationType,
    UserRole,
    Visibility,
)

__all__ = [
    "ByteRange",
    "Document",
    "DomainError",
    "Folder",
    "FolderMembership",
    "FolderStatus",
    "NotificationPriority",
    "NotificationType",
    "ShareGrant",
    "User",
    "UserRole",
    "ValidationError",
    "Visibility",
]
