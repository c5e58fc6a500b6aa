from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from application.dtos.document_dtos import DocumentResponse


class ShareDocumentRequest(BaseModel):
    """Request DTO for sharing a document with one or more users."""

    user_ids: list[UUID] = Field(..., min_length=1, description="Users to grant read access")


class ShareGrantResponse(BaseModel):
    """Response DTO representing a share grant."""

    share_id: UUID = Field(..., description="Unique identifier of the grant")
    document_id: UUID = Field(..., description="Shared document")
    grantor_id: UUID = Field(..., description="User who created the grant")
    grantee_id: UUID = Field(..., description="User who received access")
    created_at: datetime = Field(..., description="When the grant was created")


class ShareItemError(BaseModel):
    user_id: UUID = Field(..., description="Requested grantee")
    error: str = Field(..., description="Why no grant was created for this user")


class ShareResult(BaseModel):
    """Per-grantee outcome of a share request."""

    granted: list[ShareGrantResponse] = Field(default_factory=list)
    errors: list[ShareItemError] = Field(default_factory=list)


class SharedDocumentResponse(BaseModel):
    """A grant together with the document it points at."""

    share: ShareGrantResponse = Field(..., description="The share grant")
    document: DocumentResponse = Field(..., description="The shared document")
