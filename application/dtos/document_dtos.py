from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.value_objects.visibility import Visibility


class UploadDocumentRequest(BaseModel):
    """Request DTO for uploading a new document."""

    filename: str | None = Field(None, description="Original filename of the upload")
    content_type: str | None = Field(None, description="MIME type reported by the client")
    title: str | None = Field(None, description="Title; defaults to the original filename")
    visibility: Visibility = Field(Visibility.PRIVATE, description="Visibility of the document")
    folder_id: UUID | None = Field(None, description="Owned folder to place the document in")


class UpdateDocumentRequest(BaseModel):
    """Mutable document fields. Anything else in the payload is ignored."""

    model_config = ConfigDict(extra="ignore")

    title: str | None = Field(None, description="New title")
    visibility: Visibility | None = Field(None, description="New visibility")


class DocumentResponse(BaseModel):
    """Response DTO representing a document record."""

    document_id: UUID = Field(..., description="Unique identifier of the document")
    owner_id: UUID = Field(..., description="Identifier of the owning user")
    title: str = Field(..., description="Title of the document")
    original_name: str | None = Field(None, description="Original filename")
    visibility: Visibility = Field(..., description="Visibility of the document")
    content_type: str | None = Field(None, description="MIME type of the content")
    size: int = Field(..., description="Size of the content in bytes")
    blob_id: str = Field(..., description="Identifier of the content in the blob store")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")
