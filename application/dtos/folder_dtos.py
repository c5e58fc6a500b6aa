from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.value_objects.folder_status import FolderStatus


class CreateFolderRequest(BaseModel):
    """Request DTO for creating a folder."""

    name: str = Field(..., description="Name of the folder")
    status: FolderStatus = Field(FolderStatus.PENDING, description="Initial status")


class UpdateFolderRequest(BaseModel):
    """Mutable folder fields. Anything else in the payload is ignored."""

    model_config = ConfigDict(extra="ignore")

    name: str | None = Field(None, description="New name")
    status: FolderStatus | None = Field(None, description="New status")


class AddDocumentToFolderRequest(BaseModel):
    document_id: UUID = Field(..., description="Document to move into the folder")


class FolderResponse(BaseModel):
    """Response DTO representing a folder."""

    folder_id: UUID = Field(..., description="Unique identifier of the folder")
    owner_id: UUID = Field(..., description="Identifier of the owning user")
    name: str = Field(..., description="Name of the folder")
    status: FolderStatus = Field(..., description="Status of the folder")
    document_count: int = Field(0, description="Number of documents in the folder")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")


class FolderMembershipResponse(BaseModel):
    membership_id: UUID = Field(..., description="Unique identifier of the membership")
    folder_id: UUID = Field(..., description="Folder holding the document")
    document_id: UUID = Field(..., description="Document placed in the folder")
    created_at: datetime = Field(..., description="When the document was added")
