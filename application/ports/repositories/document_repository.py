"""Repository interfaces (ports) for the application layer."""

from abc import ABC, abstractmethod
from collections.abc import Collection
from uuid import UUID

from domain.aggregates.document import Document
from domain.value_objects.visibility import Visibility


class DocumentRepository(ABC):
    """Interface for the document registry.

    The repository raises domain exceptions to allow proper error handling
    at the application and interface layers:
    - RecordNotFoundError: When a document is not found
    - InfrastructureError: When infrastructure operations fail (DB, network, etc.)
    """

    async def ensure_indexes(self) -> None:  # noqa: B027
        """Create the indexes the store relies on. Nothing to do by default."""

    @abstractmethod
    async def create(self, document: Document) -> None:
        """Insert a new document record.

        Raises:
            InfrastructureError: If the insert fails.

        """

    @abstractmethod
    async def get_by_id(self, document_id: UUID) -> Document:
        """Retrieve a document by its ID.

        Raises:
            RecordNotFoundError: If the document does not exist.

        """

    @abstractmethod
    async def update(self, document: Document) -> None:
        """Persist changed fields of an existing document.

        Raises:
            RecordNotFoundError: If the document does not exist.

        """

    @abstractmethod
    async def delete(self, document_id: UUID) -> bool:
        """Remove the record only. Returns False if it was already gone."""

    @abstractmethod
    async def list_by_owner(  # noqa: PLR0913
        self,
        owner_id: UUID,
        *,
        search: str | None = None,
        content_type: str | None = None,
        visibility: Visibility | None = None,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[Document], int]:
        """List documents of one owner, newest first, with the total match count.

        ``search`` and ``content_type`` are case-insensitive substring filters.
        """

    @abstractmethod
    async def list_by_ids(self, document_ids: Collection[UUID]) -> list[Document]:
        """Fetch every existing document among ``document_ids``."""

    @abstractmethod
    async def list_candidates(  # noqa: PLR0913
        self,
        *,
        owner_ids: Collection[UUID] = (),
        document_ids: Collection[UUID] = (),
        include_public: bool = True,
        include_all: bool = False,
        search: str | None = None,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[Document], int]:
        """List documents owned by any of ``owner_ids``, listed in ``document_ids``,
        or public; every document when ``include_all`` is set. Newest first.
        """
