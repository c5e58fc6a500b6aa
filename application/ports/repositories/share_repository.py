from abc import ABC, abstractmethod
from uuid import UUID

from domain.aggregates.share_grant import ShareGrant


class ShareRepository(ABC):
    """Interface for share grants between documents and users."""

    async def ensure_indexes(self) -> None:  # noqa: B027
        """Create the indexes the store relies on. Nothing to do by default."""

    @abstractmethod
    async def add(self, grant: ShareGrant) -> None:
        """Insert a grant.

        Raises:
            DuplicateRecordError: If the grantee already holds a grant on the document.

        """

    @abstractmethod
    async def get_by_id(self, share_id: UUID) -> ShareGrant:
        """Retrieve a grant by its ID.

        Raises:
            RecordNotFoundError: If the grant does not exist.

        """

    @abstractmethod
    async def exists(self, document_id: UUID, grantee_id: UUID) -> bool:
        """Check whether ``grantee_id`` already holds a grant on the document, from anyone."""

    @abstractmethod
    async def list_by_document(
        self,
        document_id: UUID,
        grantor_id: UUID | None = None,
    ) -> list[ShareGrant]:
        """List grants on a document, optionally only those made by ``grantor_id``."""

    @abstractmethod
    async def grantee_ids(self, document_id: UUID) -> set[UUID]:
        """Return every user holding a grant on the document."""

    @abstractmethod
    async def count_by_document(self, document_id: UUID) -> int: ...

    @abstractmethod
    async def document_ids_for_grantee(self, grantee_id: UUID) -> set[UUID]:
        """Return the ids of every document shared with ``grantee_id``."""

    @abstractmethod
    async def list_by_grantee(
        self,
        grantee_id: UUID,
        *,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[ShareGrant], int]:
        """Grants received by a user, newest first, with the total count."""

    @abstractmethod
    async def list_by_grantor(
        self,
        grantor_id: UUID,
        *,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[ShareGrant], int]:
        """Grants made by a user, newest first, with the total count."""

    @abstractmethod
    async def delete(self, share_id: UUID) -> bool:
        """Delete one grant. Returns False if it was already gone."""

    @abstractmethod
    async def delete_by_document(self, document_id: UUID) -> int:
        """Delete every grant on a document and return how many were removed."""
