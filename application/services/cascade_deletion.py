"""Cascading deletes across the document registry, folders, shares and blobs.

Nothing here is transactional. Each step is attempted in order and the
outcome of every step ends up in the returned report, so a caller can tell a
clean delete from one that left content behind in storage.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from application.dtos.deletion_dtos import (
    DeletionItemError,
    DocumentDeletionReport,
    FolderDeletionReport,
)
from domain.exceptions import (
    BlobNotFoundError,
    BlobStorageError,
    DomainError,
    RecordNotFoundError,
)

if TYPE_CHECKING:
    from uuid import UUID

    from application.ports.blob_store import BlobStore
    from application.ports.repositories.document_repository import DocumentRepository
    from application.ports.repositories.folder_repository import FolderRepository
    from application.ports.repositories.share_repository import ShareRepository
    from domain.aggregates.document import Document
    from domain.aggregates.folder import Folder

logger = structlog.get_logger()


class CascadeDeletionService:
    def __init__(
        self,
        document_repository: DocumentRepository,
        folder_repository: FolderRepository,
        share_repository: ShareRepository,
        blob_store: BlobStore,
        *,
        strict_blob_deletion: bool = False,
    ) -> None:
        self.document_repository = document_repository
        self.folder_repository = folder_repository
        self.share_repository = share_repository
        self.blob_store = blob_store
        self.strict_blob_deletion = strict_blob_deletion

    def _delete_blob(self, document: Document, *, force: bool) -> str | None:
        """Delete the document content. Returns a warning instead of raising.

        Raises:
            BlobStorageError: In strict mode without ``force``, so that no
                metadata is touched while the content is still stored.

        """
        try:
            self.blob_store.delete(document.blob_id)
        except BlobNotFoundError:
            logger.warning(
                "blob_already_missing",
                document_id=str(document.id),
                blob_id=document.blob_id,
            )
            return "File content was already missing from storage"
        except BlobStorageError as e:
            logger.exception(
                "blob_delete_failed",
                document_id=str(document.id),
                blob_id=document.blob_id,
                force=force,
            )
            if self.strict_blob_deletion and not force:
                raise
            return f"Failed to delete file content from storage: {e!s}"
        return None

    async def delete_document(self, document: Document, *, force: bool) -> DocumentDeletionReport:
        """Delete content, grants, folder memberships and finally the record."""
        warnings: list[str] = []

        warning = self._delete_blob(document, force=force)
        if warning:
            warnings.append(warning)

        shares_removed = await self.share_repository.delete_by_document(document.id)
        memberships_removed = await self.folder_repository.remove_memberships_for_document(
            document.id,
        )
        await self.document_repository.delete(document.id)

        logger.info(
            "document_deleted",
            document_id=str(document.id),
            blob_deleted=warning is None,
            shares_removed=shares_removed,
            folder_associations_removed=memberships_removed,
        )
        return DocumentDeletionReport(
            document_id=document.id,
            title=document.title,
            blob_deleted=warning is None,
            shares_removed=shares_removed,
            folder_associations_removed=memberships_removed,
            warnings=warnings,
        )

    async def delete_folder(self, folder: Folder, *, delete_documents: bool) -> FolderDeletionReport:
        """Delete a folder, and its documents too when ``delete_documents`` is set.

        Documents are processed one at a time. A failure on one document is
        recorded in ``errors`` and the loop moves on to the next.
        """
        report = FolderDeletionReport(folder_id=folder.id, folder_name=folder.name)

        if delete_documents:
            memberships = await self.folder_repository.list_memberships(folder.id)
            for membership in memberships:
                report.documents_processed += 1
                await self._delete_folder_document(folder, membership.document_id, report)

        # Whatever is left (force without delete_documents, or failed documents)
        report.folder_associations_removed += (
            await self.folder_repository.remove_memberships_for_folder(folder.id)
        )
        await self.folder_repository.delete(folder.id)

        logger.info(
            "folder_deleted",
            folder_id=str(folder.id),
            documents_processed=report.documents_processed,
            documents_deleted=report.documents_deleted,
            folder_associations_removed=report.folder_associations_removed,
            error_count=len(report.errors),
        )
        return report

    async def _delete_folder_document(
        self,
        folder: Folder,
        document_id: UUID,
        report: FolderDeletionReport,
    ) -> None:
        try:
            document = await self.document_repository.get_by_id(document_id)
        except RecordNotFoundError:
            removed = await self.folder_repository.remove_membership(folder.id, document_id)
            report.folder_associations_removed += int(removed)
            report.errors.append(
                DeletionItemError(
                    document_id=document_id,
                    error="Document no longer exists; folder association removed",
                ),
            )
            return

        try:
            document_report = await self.delete_document(document, force=True)
        except DomainError as e:
            logger.exception(
                "folder_document_delete_failed",
                folder_id=str(folder.id),
                document_id=str(document.id),
            )
            report.errors.append(
                DeletionItemError(document_id=document.id, title=document.title, error=str(e)),
            )
            return

        report.deleted_documents.append(document)
        report.folder_associations_removed += document_report.folder_associations_removed
        if document_report.blob_deleted:
            report.documents_deleted += 1
        else:
            report.errors.append(
                DeletionItemError(
                    document_id=document.id,
                    title=document.title,
                    error="; ".join(document_report.warnings),
                ),
            )
