from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from returns.result import Failure, Result, Success

from application.dtos.deletion_dtos import DocumentDeletionReport, FolderDeletionReport
from application.dtos.errors import AppError
from application.dtos.notification_dtos import Notification
from domain.exceptions import BlobStorageError, RecordNotFoundError
from domain.services.access_policy import can_manage
from domain.value_objects.notification_kind import NotificationPriority, NotificationType

if TYPE_CHECKING:
    from uuid import UUID

    from application.ports.repositories.document_repository import DocumentRepository
    from application.ports.repositories.folder_repository import FolderRepository
    from application.ports.repositories.share_repository import ShareRepository
    from application.services.cascade_deletion import CascadeDeletionService
    from application.services.notifier import Notifier
    from domain.aggregates.user import User

logger = structlog.get_logger()


class DeleteDocumentUseCase:
    """Delete a document with its content, share grants and folder memberships.

    A document that is still shared is only deleted with ``force``.
    """

    def __init__(
        self,
        document_repository: DocumentRepository,
        share_repository: ShareRepository,
        cascade_deletion: CascadeDeletionService,
        notifier: Notifier | None = None,
    ) -> None:
        self.document_repository = document_repository
        self.share_repository = share_repository
        self.cascade_deletion = cascade_deletion
        self.notifier = notifier

    async def execute(
        self,
        document_id: UUID,
        actor: User,
        *,
        force: bool = False,
    ) -> Result[DocumentDeletionReport, AppError]:
        try:
            document = await self.document_repository.get_by_id(document_id)
        except RecordNotFoundError:
            return Failure(AppError("not_found", "Document not found"))

        if not can_manage(actor, document.owner_id):
            return Failure(AppError("access_denied", "Only the owner can delete this document"))

        share_count = await self.share_repository.count_by_document(document.id)
        if share_count > 0 and not force:
            return Failure(
                AppError(
                    "conflict",
                    f"Document is shared with {share_count} user(s). "
                    "Use force=true to delete anyway.",
                    data={
                        "share_count": share_count,
                        "document": {"id": str(document.id), "title": document.title},
                    },
                ),
            )

        try:
            report = await self.cascade_deletion.delete_document(document, force=force)
        except BlobStorageError as e:
            return Failure(AppError("storage", f"Failed to delete file from storage: {e!s}"))

        if self.notifier and document.owner_id != actor.id:
            await self.notifier.notify(
                Notification(
                    receiver_id=document.owner_id,
                    sender_id=actor.id,
                    title="Document Deleted",
                    message=f'Your document "{document.title}" was deleted by an administrator.',
                    type=NotificationType.ADMIN_ACTION,
                    priority=NotificationPriority.HIGH,
                ),
            )
        return Success(report)


class DeleteFolderUseCase:
    """Delete a folder.

    A non-empty folder needs either ``delete_documents`` (cascade into every
    contained document) or ``force`` (drop the memberships, keep the documents).
    """

    def __init__(
        self,
        folder_repository: FolderRepository,
        document_repository: DocumentRepository,
        cascade_deletion: CascadeDeletionService,
        notifier: Notifier | None = None,
    ) -> None:
        self.folder_repository = folder_repository
        self.document_repository = document_repository
        self.cascade_deletion = cascade_deletion
        self.notifier = notifier

    async def execute(
        self,
        folder_id: UUID,
        actor: User,
        *,
        delete_documents: bool = False,
        force: bool = False,
    ) -> Result[FolderDeletionReport, AppError]:
        try:
            folder = await self.folder_repository.get_by_id(folder_id)
        except RecordNotFoundError:
            return Failure(AppError("not_found", "Folder not found"))

        if not can_manage(actor, folder.owner_id):
            return Failure(AppError("access_denied", "Only the owner can delete this folder"))

        memberships = await self.folder_repository.list_memberships(folder.id)
        if memberships and not delete_documents and not force:
            documents = await self.document_repository.list_by_ids(
                [m.document_id for m in memberships],
            )
            return Failure(
                AppError(
                    "conflict",
                    f"Folder contains {len(memberships)} document(s). "
                    "Use delete_documents=true or force=true.",
                    data={
                        "folder": {
                            "id": str(folder.id),
                            "name": folder.name,
                            "document_count": len(memberships),
                        },
                        "documents": [{"id": str(d.id), "title": d.title} for d in documents],
                    },
                ),
            )

        report = await self.cascade_deletion.delete_folder(
            folder,
            delete_documents=delete_documents,
        )

        if not self.notifier:
            return Success(report)

        for document in report.deleted_documents:
            if document.owner_id == actor.id:
                continue
            await self.notifier.notify(
                Notification(
                    receiver_id=document.owner_id,
                    sender_id=actor.id,
                    title="Documents Deleted with Folder",
                    message=(
                        f'Your document "{document.title}" was deleted when folder '
                        f'"{folder.name}" was removed by an administrator.'
                    ),
                    type=NotificationType.ADMIN_ACTION,
                    priority=NotificationPriority.HIGH,
                ),
            )

        if folder.owner_id != actor.id:
            await self.notifier.notify(
                Notification(
                    receiver_id=folder.owner_id,
                    sender_id=actor.id,
                    title="Folder Deleted",
                    message=f'Your folder "{folder.name}" was deleted by an administrator.',
                    type=NotificationType.ADMIN_ACTION,
                    priority=NotificationPriority.HIGH,
                ),
            )
        return Success(report)
