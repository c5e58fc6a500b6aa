from .document import Document
from .folder import Folder, FolderMembership
from .share_grant import ShareGrant
from .user import User

__all__ = ["Document", "Folder", "FolderMembership", "ShareGrant", "User"]
