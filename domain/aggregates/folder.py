from __future__ import annotations

from datetime import UTC, datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from domain.exceptions import ValidationError
from domain.value_objects.folder_status import FolderStatus


def _now() -> datetime:
    return datetime.now(UTC)


class Folder(BaseModel):
    """A named grouping of documents owned by one user."""

    id: UUID = Field(default_factory=uuid4)
    owner_id: UUID
    name: str
    status: FolderStatus = FolderStatus.PENDING
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)

    @classmethod
    def create(
        cls,
        *,
        owner_id: UUID,
        name: str,
        status: FolderStatus = FolderStatus.PENDING,
    ) -> Folder:
        name = (name or "").strip()
        if not name:
            msg = "Folder name is required"
            raise ValidationError(msg)
        return cls(owner_id=owner_id, name=name, status=status)

    def rename(self, name: str) -> None:
        name = name.strip()
        if not name:
            msg = "Folder name must not be empty"
            raise ValidationError(msg)
        self.name = name
        self.updated_at = _now()

    def change_status(self, status: FolderStatus) -> None:
        self.status = status
        self.updated_at = _now()


class FolderMembership(BaseModel):
    """Join record placing a document into a folder. Unique per (folder, document)."""

    id: UUID = Field(default_factory=uuid4)
    folder_id: UUID
    document_id: UUID
    created_at: datetime = Field(default_factory=_now)
