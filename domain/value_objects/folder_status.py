from enum import Enum


class FolderStatus(str, Enum):
    PENDING = "Pending"
    COMPLETED = "Completed"
