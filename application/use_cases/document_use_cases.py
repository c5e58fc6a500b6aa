from __future__ import annotations

from typing import TYPE_CHECKING, BinaryIO

import structlog
from returns.result import Failure, Result, Success

from application.dtos.common_dtos import PageResult
from application.dtos.document_dtos import (
    DocumentResponse,
    UpdateDocumentRequest,
    UploadDocumentRequest,
)
from application.dtos.errors import AppError
from application.dtos.notification_dtos import Notification
from application.mappers.document_mappers import DocumentMapper
from domain.aggregates.document import Document
from domain.aggregates.folder import FolderMembership
from domain.exceptions import (
    BlobNotFoundError,
    BlobStorageError,
    RecordNotFoundError,
    ValidationError,
)
from domain.services.access_policy import can_manage
from domain.value_objects.notification_kind import NotificationPriority, NotificationType
from domain.value_objects.user_role import UserRole

if TYPE_CHECKING:
    from collections.abc import Collection
    from uuid import UUID

    from application.ports.blob_store import BlobStore, StoredBlob
    from application.ports.repositories.document_repository import DocumentRepository
    from application.ports.repositories.folder_repository import FolderRepository
    from application.ports.repositories.share_repository import ShareRepository
    from application.ports.user_directory import UserDirectory
    from application.services.access_evaluator import AccessEvaluator
    from application.services.notifier import Notifier
    from domain.aggregates.user import User
    from domain.value_objects.visibility import Visibility

logger = structlog.get_logger()

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024
HOD_VISIBLE_OWNER_ROLES = frozenset(set(UserRole) - {UserRole.ADMIN})


def _stream_size(stream: BinaryIO) -> int | None:
    """Size of a seekable stream, leaving the position at the start."""
    try:
        if not stream.seekable():
            return None
        stream.seek(0, 2)
        size = stream.tell()
        stream.seek(0)
    except (AttributeError, OSError):
        return None
    return size


class UploadDocumentUseCase:
    """Store uploaded content in the blob store and register a document for it.

    If anything fails after the content was written, the blob is deleted again.
    """

    def __init__(
        self,
        document_repository: DocumentRepository,
        folder_repository: FolderRepository,
        blob_store: BlobStore,
        *,
        max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
        allowed_content_types: Collection[str] = (),
    ) -> None:
        self.document_repository = document_repository
        self.folder_repository = folder_repository
        self.blob_store = blob_store
        self.max_upload_bytes = max_upload_bytes
        self.allowed_content_types = frozenset(allowed_content_types)

    def _validate_upload(self, stream: BinaryIO, request: UploadDocumentRequest) -> None:
        if self.allowed_content_types and request.content_type not in self.allowed_content_types:
            msg = f"File type {request.content_type or 'unknown'} is not allowed"
            raise ValidationError(msg)
        size = _stream_size(stream)
        if size is not None:
            self._validate_size(size)

    def _validate_size(self, size: int) -> None:
        if size == 0:
            msg = "Uploaded file is empty"
            raise ValidationError(msg)
        if size > self.max_upload_bytes:
            msg = f"File exceeds the maximum upload size of {self.max_upload_bytes} bytes"
            raise ValidationError(msg)

    def _discard_blob(self, blob_id: str) -> None:
        try:
            self.blob_store.delete(blob_id)
            logger.info("upload_blob_discarded", blob_id=blob_id)
        except (BlobNotFoundError, BlobStorageError):
            logger.exception("upload_blob_discard_failed", blob_id=blob_id)

    async def execute(
        self,
        stream: BinaryIO,
        request: UploadDocumentRequest,
        owner: User,
    ) -> Result[DocumentResponse, AppError]:
        """Execute the upload.

        Args:
            stream: Binary stream of the uploaded file
            request: Upload metadata (filename, content type, title, visibility, folder)
            owner: The uploading user; becomes the document owner

        Returns:
            Result containing the created document or an error

        """
        try:
            self._validate_upload(stream, request)

            if request.folder_id is not None:
                folder = await self.folder_repository.get_by_id(request.folder_id)
                if not can_manage(owner, folder.owner_id):
                    return Failure(AppError("access_denied", "Access denied to this folder"))

            stored: StoredBlob = self.blob_store.store(
                stream,
                content_type=request.content_type,
                filename=request.filename,
                metadata={
                    "uploaded_by": str(owner.id),
                    "user_role": owner.role.value,
                    "department": owner.department_id,
                },
            )
        except ValidationError as e:
            return Failure(AppError("validation", f"Validation error: {e!s}"))
        except RecordNotFoundError as e:
            return Failure(AppError("not_found", f"Folder not found: {e!s}"))
        except BlobStorageError as e:
            logger.exception("upload_store_failed", filename=request.filename)
            return Failure(AppError("storage", f"Failed to store file: {e!s}"))

        try:
            self._validate_size(stored.size_bytes)
            document = Document.create(
                owner_id=owner.id,
                title=request.title,
                blob_id=stored.blob_id,
                visibility=request.visibility,
                content_type=request.content_type or stored.content_type,
                size=stored.size_bytes,
                original_name=request.filename,
            )
            await self.document_repository.create(document)
        except ValidationError as e:
            self._discard_blob(stored.blob_id)
            return Failure(AppError("validation", f"Validation error: {e!s}"))
        except Exception:
            self._discard_blob(stored.blob_id)
            raise

        if request.folder_id is not None:
            await self.folder_repository.add_membership(
                FolderMembership(folder_id=request.folder_id, document_id=document.id),
            )

        logger.info(
            "document_uploaded",
            document_id=str(document.id),
            owner_id=str(owner.id),
            blob_id=stored.blob_id,
            size=stored.size_bytes,
        )
        return Success(DocumentMapper.to_document_response(document))


class GetDocumentUseCase:
    """Read document metadata, gated by the access evaluator."""

    def __init__(
        self,
        document_repository: DocumentRepository,
        access_evaluator: AccessEvaluator,
    ) -> None:
        self.document_repository = document_repository
        self.access_evaluator = access_evaluator

    async def execute(self, document_id: UUID, user: User) -> Result[DocumentResponse, AppError]:
        try:
            document = await self.document_repository.get_by_id(document_id)
        except RecordNotFoundError:
            return Failure(AppError("not_found", "Document not found"))

        if not await self.access_evaluator.check_read(user, document):
            return Failure(AppError("access_denied", "Access denied to this document"))
        return Success(DocumentMapper.to_document_response(document))


class ListMyDocumentsUseCase:
    def __init__(self, document_repository: DocumentRepository) -> None:
        self.document_repository = document_repository

    async def execute(  # noqa: PLR0913
        self,
        user: User,
        *,
        search: str | None = None,
        content_type: str | None = None,
        visibility: Visibility | None = None,
        skip: int = 0,
        limit: int = 20,
    ) -> Result[PageResult[DocumentResponse], AppError]:
        documents, total = await self.document_repository.list_by_owner(
            user.id,
            search=search,
            content_type=content_type,
            visibility=visibility,
            skip=skip,
            limit=limit,
        )
        return Success(
            PageResult[DocumentResponse](
                items=[DocumentMapper.to_document_response(d) for d in documents],
                total=total,
                skip=skip,
                limit=limit,
            ),
        )


class ListAccessibleDocumentsUseCase:
    """Everything a user may read: owned, public, shared with them, and role-visible."""

    def __init__(
        self,
        document_repository: DocumentRepository,
        share_repository: ShareRepository,
        user_directory: UserDirectory,
        access_evaluator: AccessEvaluator,
    ) -> None:
        self.document_repository = document_repository
        self.share_repository = share_repository
        self.user_directory = user_directory
        self.access_evaluator = access_evaluator

    async def execute(
        self,
        user: User,
        *,
        search: str | None = None,
        skip: int = 0,
        limit: int = 20,
    ) -> Result[PageResult[DocumentResponse], AppError]:
        owner_ids = {user.id}
        if user.role == UserRole.HOD and user.department_id:
            # Mirrors the department rule: Admin-owned documents stay out of reach
            owner_ids.update(
                await self.user_directory.list_ids_in_department(
                    user.department_id,
                    roles=HOD_VISIBLE_OWNER_ROLES,
                ),
            )
        shared_ids = await self.share_repository.document_ids_for_grantee(user.id)

        candidates, total = await self.document_repository.list_candidates(
            owner_ids=owner_ids,
            document_ids=shared_ids,
            include_public=True,
            include_all=user.is_admin,
            search=search,
            skip=skip,
            limit=limit,
        )
        readable = await self.access_evaluator.filter_readable(user, candidates)
        dropped = len(candidates) - len(readable)
        if dropped:
            logger.warning(
                "accessible_candidates_filtered",
                user_id=str(user.id),
                dropped=dropped,
            )
        return Success(
            PageResult[DocumentResponse](
                items=[DocumentMapper.to_document_response(d) for d in readable],
                total=total - dropped,
                skip=skip,
                limit=limit,
            ),
        )


class UpdateDocumentUseCase:
    """Change the title or visibility of a document. Owner or Admin only."""

    def __init__(
        self,
        document_repository: DocumentRepository,
        notifier: Notifier | None = None,
    ) -> None:
        self.document_repository = document_repository
        self.notifier = notifier

    async def execute(
        self,
        document_id: UUID,
        request: UpdateDocumentRequest,
        user: User,
    ) -> Result[DocumentResponse, AppError]:
        try:
            document = await self.document_repository.get_by_id(document_id)
            if not can_manage(user, document.owner_id):
                return Failure(AppError("access_denied", "Only the owner can update this document"))

            if request.title is not None:
                document.rename(request.title)
            if request.visibility is not None:
                document.change_visibility(request.visibility)

            await self.document_repository.update(document)
        except RecordNotFoundError:
            return Failure(AppError("not_found", "Document not found"))
        except ValidationError as e:
            return Failure(AppError("validation", f"Validation error: {e!s}"))

        if self.notifier and document.owner_id != user.id:
            await self.notifier.notify(
                Notification(
                    receiver_id=document.owner_id,
                    sender_id=user.id,
                    title="Document Updated",
                    message=f'Your document "{document.title}" was updated by an administrator.',
                    type=NotificationType.ADMIN_ACTION,
                    priority=NotificationPriority.MEDIUM,
                ),
            )

        logger.info("document_updated", document_id=str(document.id), actor_id=str(user.id))
        return Success(DocumentMapper.to_document_response(document))
