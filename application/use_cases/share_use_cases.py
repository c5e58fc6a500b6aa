from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from returns.result import Failure, Result, Success

from application.dtos.common_dtos import PageResult
from application.dtos.errors import AppError
from application.dtos.notification_dtos import Notification
from application.dtos.share_dtos import (
    ShareGrantResponse,
    ShareItemError,
    ShareResult,
    SharedDocumentResponse,
)
from application.mappers.document_mappers import DocumentMapper
from application.mappers.share_mappers import ShareMapper
from domain.aggregates.share_grant import ShareGrant
from domain.exceptions import DuplicateRecordError, RecordNotFoundError, ValidationError
from domain.services.access_policy import can_manage
from domain.value_objects.notification_kind import NotificationPriority, NotificationType

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from application.ports.repositories.document_repository import DocumentRepository
    from application.ports.repositories.share_repository import ShareRepository
    from application.ports.user_directory import UserDirectory
    from application.services.access_evaluator import AccessEvaluator
    from application.services.notifier import Notifier
    from domain.aggregates.document import Document
    from domain.aggregates.user import User

logger = structlog.get_logger()

SELF_SHARE_ERROR = "cannot share with self"
UNKNOWN_USER_ERROR = "user not found"
ALREADY_SHARED_ERROR = "already shared"


class ShareDocumentUseCase:
    """Grant read access on a document to several users at once.

    Each grantee is handled on its own: a bad entry ends up in ``errors`` and
    never prevents the others from being granted.
    """

    def __init__(
        self,
        document_repository: DocumentRepository,
        share_repository: ShareRepository,
        user_directory: UserDirectory,
        access_evaluator: AccessEvaluator,
        notifier: Notifier | None = None,
    ) -> None:
        self.document_repository = document_repository
        self.share_repository = share_repository
        self.user_directory = user_directory
        self.access_evaluator = access_evaluator
        self.notifier = notifier

    async def execute(
        self,
        document_id: UUID,
        grantee_ids: Sequence[UUID],
        grantor: User,
    ) -> Result[ShareResult, AppError]:
        try:
            document = await self.document_repository.get_by_id(document_id)
        except RecordNotFoundError:
            return Failure(AppError("not_found", "Document not found"))

        if not await self.access_evaluator.check_share(grantor, document):
            return Failure(AppError("access_denied", "You are not allowed to share this document"))

        result = ShareResult()
        for grantee_id in grantee_ids:
            error = await self._grant(document, grantor, grantee_id, result)
            if error:
                result.errors.append(ShareItemError(user_id=grantee_id, error=error))

        logger.info(
            "document_shared",
            document_id=str(document.id),
            grantor_id=str(grantor.id),
            granted=len(result.granted),
            errors=len(result.errors),
        )
        return Success(result)

    async def _grant(
        self,
        document: Document,
        grantor: User,
        grantee_id: UUID,
        result: ShareResult,
    ) -> str | None:
        try:
            grant = ShareGrant.create(document.id, grantor.id, grantee_id)
        except ValidationError:
            return SELF_SHARE_ERROR

        if await self.user_directory.get_user(grantee_id) is None:
            return UNKNOWN_USER_ERROR
        if await self.share_repository.exists(document.id, grantee_id):
            return ALREADY_SHARED_ERROR
        try:
            await self.share_repository.add(grant)
        except DuplicateRecordError:
            return ALREADY_SHARED_ERROR

        result.granted.append(ShareMapper.to_share_response(grant))
        if self.notifier:
            await self.notifier.notify(
                Notification(
                    receiver_id=grantee_id,
                    sender_id=grantor.id,
                    title="Document Shared",
                    message=f'{grantor.name or "A user"} shared "{document.title}" with you.',
                    type=NotificationType.DOCUMENT_SHARE,
                    priority=NotificationPriority.MEDIUM,
                ),
            )
        return None


class RevokeShareUseCase:
    """Remove a grant. Only the user who created it may revoke it."""

    def __init__(
        self,
        share_repository: ShareRepository,
        document_repository: DocumentRepository,
        notifier: Notifier | None = None,
    ) -> None:
        self.share_repository = share_repository
        self.document_repository = document_repository
        self.notifier = notifier

    async def execute(
        self,
        document_id: UUID,
        share_id: UUID,
        actor: User,
    ) -> Result[ShareGrantResponse, AppError]:
        try:
            grant = await self.share_repository.get_by_id(share_id)
        except RecordNotFoundError:
            return Failure(AppError("not_found", "Share not found"))
        if grant.document_id != document_id:
            return Failure(AppError("not_found", "Share not found"))
        if grant.grantor_id != actor.id:
            return Failure(AppError("access_denied", "Only the user who shared can revoke"))

        await self.share_repository.delete(grant.id)

        if self.notifier:
            title = "a document"
            try:
                document = await self.document_repository.get_by_id(document_id)
                title = f'"{document.title}"'
            except RecordNotFoundError:
                logger.debug(
                    "revoked_share_document_missing",
                    share_id=str(grant.id),
                    document_id=str(document_id),
                )
            await self.notifier.notify(
                Notification(
                    receiver_id=grant.grantee_id,
                    sender_id=actor.id,
                    title="Document Access Revoked",
                    message=f"Your access to {title} has been revoked.",
                    type=NotificationType.DOCUMENT_SHARE,
                    priority=NotificationPriority.MEDIUM,
                ),
            )

        logger.info("share_revoked", share_id=str(grant.id), actor_id=str(actor.id))
        return Success(ShareMapper.to_share_response(grant))


class ListDocumentSharesUseCase:
    """Grants on one document. Owners and admins see all of them, other sharers their own."""

    def __init__(
        self,
        document_repository: DocumentRepository,
        share_repository: ShareRepository,
        access_evaluator: AccessEvaluator,
    ) -> None:
        self.document_repository = document_repository
        self.share_repository = share_repository
        self.access_evaluator = access_evaluator

    async def execute(
        self,
        document_id: UUID,
        user: User,
    ) -> Result[list[ShareGrantResponse], AppError]:
        try:
            document = await self.document_repository.get_by_id(document_id)
        except RecordNotFoundError:
            return Failure(AppError("not_found", "Document not found"))

        if can_manage(user, document.owner_id):
            grants = await self.share_repository.list_by_document(document.id)
        elif await self.access_evaluator.check_share(user, document):
            grants = await self.share_repository.list_by_document(document.id, grantor_id=user.id)
        else:
            return Failure(AppError("access_denied", "Access denied to this document"))

        return Success([ShareMapper.to_share_response(g) for g in grants])


class _SharedListingUseCase:
    def __init__(
        self,
        share_repository: ShareRepository,
        document_repository: DocumentRepository,
    ) -> None:
        self.share_repository = share_repository
        self.document_repository = document_repository

    async def _with_documents(
        self,
        grants: list[ShareGrant],
        total: int,
        skip: int,
        limit: int,
    ) -> PageResult[SharedDocumentResponse]:
        documents = {
            d.id: d
            for d in await self.document_repository.list_by_ids({g.document_id for g in grants})
        }
        items = [
            SharedDocumentResponse(
                share=ShareMapper.to_share_response(grant),
                document=DocumentMapper.to_document_response(documents[grant.document_id]),
            )
            for grant in grants
            # Grants left behind by a document that is gone are skipped
            if grant.document_id in documents
        ]
        return PageResult[SharedDocumentResponse](items=items, total=total, skip=skip, limit=limit)


class ListReceivedSharesUseCase(_SharedListingUseCase):
    """Documents shared with the user."""

    async def execute(
        self,
        user: User,
        *,
        skip: int = 0,
        limit: int = 20,
    ) -> Result[PageResult[SharedDocumentResponse], AppError]:
        grants, total = await self.share_repository.list_by_grantee(user.id, skip=skip, limit=limit)
        return Success(await self._with_documents(grants, total, skip, limit))


class ListSentSharesUseCase(_SharedListingUseCase):
    """Documents the user has shared with others."""

    async def execute(
        self,
        user: User,
        *,
        skip: int = 0,
        limit: int = 20,
    ) -> Result[PageResult[SharedDocumentResponse], AppError]:
        grants, total = await self.share_repository.list_by_grantor(user.id, skip=skip, limit=limit)
        return Success(await self._with_documents(grants, total, skip, limit))
