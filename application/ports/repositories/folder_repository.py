from abc import ABC, abstractmethod
from uuid import UUID

from domain.aggregates.folder import Folder, FolderMembership
from domain.value_objects.folder_status import FolderStatus


class FolderRepository(ABC):
    """Interface for folders and their document memberships.

    - RecordNotFoundError: When a folder is not found
    - DuplicateRecordError: When a (folder, document) membership already exists
    """

    async def ensure_indexes(self) -> None:  # noqa: B027
        """Create the indexes the store relies on. Nothing to do by default."""

    @abstractmethod
    async def create(self, folder: Folder) -> None: ...

    @abstractmethod
    async def get_by_id(self, folder_id: UUID) -> Folder:
        """Retrieve a folder by its ID.

        Raises:
            RecordNotFoundError: If the folder does not exist.

        """

    @abstractmethod
    async def update(self, folder: Folder) -> None: ...

    @abstractmethod
    async def delete(self, folder_id: UUID) -> bool: ...

    @abstractmethod
    async def list_by_owner(  # noqa: PLR0913
        self,
        owner_id: UUID,
        *,
        status: FolderStatus | None = None,
        search: str | None = None,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[Folder], int]:
        """List folders of one owner, newest first, with the total match count."""

    @abstractmethod
    async def add_membership(self, membership: FolderMembership) -> None:
        """Insert a membership.

        Raises:
            DuplicateRecordError: If the document is already in the folder.

        """

    @abstractmethod
    async def get_membership(self, folder_id: UUID, document_id: UUID) -> FolderMembership | None:
        ...

    @abstractmethod
    async def list_memberships(
        self,
        folder_id: UUID,
        *,
        skip: int = 0,
        limit: int | None = None,
    ) -> list[FolderMembership]:
        """List memberships of a folder, oldest first."""

    @abstractmethod
    async def count_memberships(self, folder_id: UUID) -> int: ...

    @abstractmethod
    async def remove_membership(self, folder_id: UUID, document_id: UUID) -> bool: ...

    @abstractmethod
    async def remove_memberships_for_document(self, document_id: UUID) -> int:
        """Remove the document from every folder; return how many memberships went."""

    @abstractmethod
    async def remove_memberships_for_folder(self, folder_id: UUID) -> int:
        """Empty the folder; return how many memberships went."""
