from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from domain.services.access_policy import AccessDecision, can_share, decide
from domain.value_objects.user_role import UserRole

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from application.ports.repositories.share_repository import ShareRepository
    from application.ports.user_directory import UserDirectory
    from domain.aggregates.document import Document
    from domain.aggregates.user import User

logger = structlog.get_logger()


class AccessEvaluator:
    """Gathers the inputs of the access policy and asks it for a decision.

    This is the only gate in front of document bytes, document metadata and
    "accessible to me" listings.
    """

    def __init__(self, user_directory: UserDirectory, share_repository: ShareRepository) -> None:
        self.user_directory = user_directory
        self.share_repository = share_repository

    async def _owner_of(self, user: User, document: Document) -> User | None:
        # Only the department rule looks at the owner.
        if user.role != UserRole.HOD or document.owner_id == user.id:
            return None
        return await self.user_directory.get_user(document.owner_id)

    async def check_read(self, user: User, document: Document) -> AccessDecision:
        owner = await self._owner_of(user, document)
        grantee_ids = await self.share_repository.grantee_ids(document.id)
        decision = decide(user, document, owner=owner, grantee_ids=grantee_ids)
        logger.debug(
            "access_decision",
            user_id=str(user.id),
            document_id=str(document.id),
            allowed=decision.allowed,
            rule=decision.rule.value if decision.rule else None,
        )
        return decision

    async def check_share(self, user: User, document: Document) -> AccessDecision:
        owner = await self._owner_of(user, document)
        grantee_ids = await self.share_repository.grantee_ids(document.id)
        return can_share(user, document, owner=owner, grantee_ids=grantee_ids)

    async def filter_readable(self, user: User, documents: Sequence[Document]) -> list[Document]:
        """Keep the documents ``user`` may read, in their original order."""
        shared_with_user = await self.share_repository.document_ids_for_grantee(user.id)
        owners: dict[UUID, User | None] = {}
        readable = []
        for document in documents:
            owner = None
            if user.role == UserRole.HOD and document.owner_id != user.id:
                if document.owner_id not in owners:
                    owners[document.owner_id] = await self.user_directory.get_user(
                        document.owner_id,
                    )
                owner = owners[document.owner_id]
            grantee_ids = {user.id} if document.id in shared_with_user else set()
            if decide(user, document, owner=owner, grantee_ids=grantee_ids):
                readable.append(document)
        return readable
