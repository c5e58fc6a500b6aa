from uuid import UUID

from pydantic import BaseModel, Field

from domain.aggregates.document import Document


class DocumentDeletionReport(BaseModel):
    """Outcome of deleting one document and everything hanging off it."""

    document_id: UUID = Field(..., description="Deleted document")
    title: str = Field(..., description="Title of the deleted document")
    blob_deleted: bool = Field(..., description="Whether the content was removed from storage")
    shares_removed: int = Field(0, description="Share grants removed")
    folder_associations_removed: int = Field(0, description="Folder memberships removed")
    warnings: list[str] = Field(default_factory=list, description="Non-fatal problems")


class DeletionItemError(BaseModel):
    document_id: UUID = Field(..., description="Document the error refers to")
    title: str | None = Field(None, description="Title of the document, when known")
    error: str = Field(..., description="What went wrong")


class FolderDeletionReport(BaseModel):
    """Outcome of deleting a folder, including per-document partial failures."""

    folder_id: UUID = Field(..., description="Deleted folder")
    folder_name: str = Field(..., description="Name of the deleted folder")
    documents_processed: int = Field(0, description="Documents the cascade visited")
    documents_deleted: int = Field(0, description="Documents fully deleted, content included")
    folder_associations_removed: int = Field(0, description="Folder memberships removed")
    errors: list[DeletionItemError] = Field(default_factory=list)
    # Records the cascade removed, kept for owner notifications
    deleted_documents: list[Document] = Field(default_factory=list, exclude=True)
