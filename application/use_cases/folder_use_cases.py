from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from returns.result import Failure, Result, Success

from application.dtos.common_dtos import PageResult
from application.dtos.document_dtos import DocumentResponse
from application.dtos.errors import AppError
from application.dtos.folder_dtos import (
    CreateFolderRequest,
    FolderMembershipResponse,
    FolderResponse,
    UpdateFolderRequest,
)
from application.mappers.document_mappers import DocumentMapper
from application.mappers.folder_mappers import FolderMapper
from domain.aggregates.folder import Folder, FolderMembership
from domain.exceptions import DuplicateRecordError, RecordNotFoundError, ValidationError
from domain.services.access_policy import can_manage

if TYPE_CHECKING:
    from uuid import UUID

    from application.ports.repositories.document_repository import DocumentRepository
    from application.ports.repositories.folder_repository import FolderRepository
    from domain.aggregates.user import User
    from domain.value_objects.folder_status import FolderStatus

logger = structlog.get_logger()


class CreateFolderUseCase:
    def __init__(self, folder_repository: FolderRepository) -> None:
        self.folder_repository = folder_repository

    async def execute(
        self,
        request: CreateFolderRequest,
        owner: User,
    ) -> Result[FolderResponse, AppError]:
        try:
            folder = Folder.create(owner_id=owner.id, name=request.name, status=request.status)
            await self.folder_repository.create(folder)
        except ValidationError as e:
            return Failure(AppError("validation", f"Validation error: {e!s}"))

        logger.info("folder_created", folder_id=str(folder.id), owner_id=str(owner.id))
        return Success(FolderMapper.to_folder_response(folder))


class ListFoldersUseCase:
    """Folders owned by the user, each with its document count."""

    def __init__(self, folder_repository: FolderRepository) -> None:
        self.folder_repository = folder_repository

    async def execute(
        self,
        owner: User,
        *,
        status: FolderStatus | None = None,
        search: str | None = None,
        skip: int = 0,
        limit: int = 20,
    ) -> Result[PageResult[FolderResponse], AppError]:
        folders, total = await self.folder_repository.list_by_owner(
            owner.id,
            status=status,
            search=search,
            skip=skip,
            limit=limit,
        )
        items = [
            FolderMapper.to_folder_response(
                folder,
                document_count=await self.folder_repository.count_memberships(folder.id),
            )
            for folder in folders
        ]
        return Success(
            PageResult[FolderResponse](items=items, total=total, skip=skip, limit=limit),
        )


class UpdateFolderUseCase:
    def __init__(self, folder_repository: FolderRepository) -> None:
        self.folder_repository = folder_repository

    async def execute(
        self,
        folder_id: UUID,
        request: UpdateFolderRequest,
        user: User,
    ) -> Result[FolderResponse, AppError]:
        try:
            folder = await self.folder_repository.get_by_id(folder_id)
            if not can_manage(user, folder.owner_id):
                return Failure(AppError("access_denied", "Only the owner can update this folder"))

            if request.name is not None:
                folder.rename(request.name)
            if request.status is not None:
                folder.change_status(request.status)
            await self.folder_repository.update(folder)
        except RecordNotFoundError:
            return Failure(AppError("not_found", "Folder not found"))
        except ValidationError as e:
            return Failure(AppError("validation", f"Validation error: {e!s}"))

        count = await self.folder_repository.count_memberships(folder.id)
        return Success(FolderMapper.to_folder_response(folder, document_count=count))


class AddDocumentToFolderUseCase:
    """Move a document into a folder.

    A document lives in at most one folder: any existing membership is
    removed before the new one is created.
    """

    def __init__(
        self,
        folder_repository: FolderRepository,
        document_repository: DocumentRepository,
    ) -> None:
        self.folder_repository = folder_repository
        self.document_repository = document_repository

    async def execute(
        self,
        folder_id: UUID,
        document_id: UUID,
        user: User,
    ) -> Result[FolderMembershipResponse, AppError]:
        try:
            folder = await self.folder_repository.get_by_id(folder_id)
        except RecordNotFoundError:
            return Failure(AppError("not_found", "Folder not found"))
        try:
            document = await self.document_repository.get_by_id(document_id)
        except RecordNotFoundError:
            return Failure(AppError("not_found", "Document not found"))

        if not can_manage(user, folder.owner_id) or not can_manage(user, document.owner_id):
            return Failure(AppError("access_denied", "Access denied to this folder or document"))

        if await self.folder_repository.get_membership(folder.id, document.id) is not None:
            return Failure(AppError("conflict", "Document is already in this folder"))

        moved = await self.folder_repository.remove_memberships_for_document(document.id)
        membership = FolderMembership(folder_id=folder.id, document_id=document.id)
        try:
            await self.folder_repository.add_membership(membership)
        except DuplicateRecordError:
            return Failure(AppError("conflict", "Document is already in this folder"))

        logger.info(
            "document_moved_to_folder",
            folder_id=str(folder.id),
            document_id=str(document.id),
            previous_memberships=moved,
        )
        return Success(FolderMapper.to_membership_response(membership))


class RemoveDocumentFromFolderUseCase:
    def __init__(self, folder_repository: FolderRepository) -> None:
        self.folder_repository = folder_repository

    async def execute(
        self,
        folder_id: UUID,
        document_id: UUID,
        user: User,
    ) -> Result[FolderMembershipResponse, AppError]:
        try:
            folder = await self.folder_repository.get_by_id(folder_id)
        except RecordNotFoundError:
            return Failure(AppError("not_found", "Folder not found"))
        if not can_manage(user, folder.owner_id):
            return Failure(AppError("access_denied", "Only the owner can change this folder"))

        membership = await self.folder_repository.get_membership(folder.id, document_id)
        if membership is None:
            return Failure(AppError("not_found", "Document is not in this folder"))

        await self.folder_repository.remove_membership(folder.id, document_id)
        return Success(FolderMapper.to_membership_response(membership))


class ListFolderDocumentsUseCase:
    def __init__(
        self,
        folder_repository: FolderRepository,
        document_repository: DocumentRepository,
    ) -> None:
        self.folder_repository = folder_repository
        self.document_repository = document_repository

    async def execute(
        self,
        folder_id: UUID,
        user: User,
        *,
        skip: int = 0,
        limit: int = 20,
    ) -> Result[PageResult[DocumentResponse], AppError]:
        try:
            folder = await self.folder_repository.get_by_id(folder_id)
        except RecordNotFoundError:
            return Failure(AppError("not_found", "Folder not found"))
        if not can_manage(user, folder.owner_id):
            return Failure(AppError("access_denied", "Access denied to this folder"))

        total = await self.folder_repository.count_memberships(folder.id)
        memberships = await self.folder_repository.list_memberships(
            folder.id,
            skip=skip,
            limit=limit,
        )
        documents = {
            d.id: d
            for d in await self.document_repository.list_by_ids(
                [m.document_id for m in memberships],
            )
        }
        items = [
            DocumentMapper.to_document_response(documents[m.document_id])
            for m in memberships
            if m.document_id in documents
        ]
        return Success(
            PageResult[DocumentResponse](items=items, total=total, skip=skip, limit=limit),
        )
