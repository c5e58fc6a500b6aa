from __future__ import annotations

from datetime import UTC, datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from domain.exceptions import ValidationError


class ShareGrant(BaseModel):
    """Explicit read permission on one document, from a grantor to a grantee."""

    id: UUID = Field(default_factory=uuid4)
    document_id: UUID
    grantor_id: UUID
    grantee_id: UUID
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def create(cls, document_id: UUID, grantor_id: UUID, grantee_id: UUID) -> ShareGrant:
        if grantor_id == grantee_id:
            msg = "cannot share with self"
            raise ValidationError(msg)
        return cls(document_id=document_id, grantor_id=grantor_id, grantee_id=grantee_id)
