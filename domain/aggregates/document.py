from __future__ import annotations

from datetime import UTC, datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from domain.exceptions import ValidationError
from domain.value_objects.visibility import Visibility


def _now() -> datetime:
    return datetime.now(UTC)


class Document(BaseModel):
    """Metadata record for one stored document.

    ``blob_id`` is a non-owning pointer into the blob store: deleting the record
    does not guarantee the blob is gone, and the pointer may dangle after a
    best-effort blob delete failed.
    """

    id: UUID = Field(default_factory=uuid4)
    owner_id: UUID
    title: str
    blob_id: str
    original_name: str | None = None
    visibility: Visibility = Visibility.PRIVATE
    content_type: str | None = None
    size: int = 0
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        *,
        owner_id: UUID,
        title: str | None,
        blob_id: str,
        visibility: Visibility = Visibility.PRIVATE,
        content_type: str | None = None,
        size: int = 0,
        original_name: str | None = None,
    ) -> Document:
        """Create a new Document record (Factory Method).

        The title falls back to the original filename when none is given.
        """
        title = (title or "").strip() or (original_name or "").strip()
        if not title:
            msg = "Document title is required"
            raise ValidationError(msg)
        if not blob_id.strip():
            msg = "blob_id must be provided"
            raise ValidationError(msg)
        if size < 0:
            msg = "size must not be negative"
            raise ValidationError(msg)

        return cls(
            owner_id=owner_id,
            title=title,
            blob_id=blob_id,
            visibility=visibility,
            content_type=content_type,
            size=size,
            original_name=original_name,
        )

    def rename(self, title: str) -> None:
        title = title.strip()
        if not title:
            msg = "Document title must not be empty"
            raise ValidationError(msg)
        self.title = title
        self.updated_at = _now()

    def change_visibility(self, visibility: Visibility) -> None:
        self.visibility = visibility
        self.updated_at = _now()

    def is_owned_by(self, user_id: UUID) -> bool:
        return self.owner_id == user_id
