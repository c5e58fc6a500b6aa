"""Blob store port: chunked content addressed by an opaque blob id."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any, BinaryIO

if TYPE_CHECKING:
    from collections.abc import Iterator

    from domain.value_objects.byte_range import ByteRange


@dataclass(frozen=True)
class StoredBlob:
    blob_id: str
    size_bytes: int
    sha256: str
    content_type: str | None


@dataclass(frozen=True)
class BlobInfo:
    """Contents of a blob manifest."""

    blob_id: str
    length: int
    chunk_size: int
    chunk_count: int
    sha256: str
    content_type: str | None
    filename: str | None
    uploaded_at: datetime
    metadata: dict[str, Any] = field(default_factory=dict)


class BlobStore(ABC):
    """Interface for chunked binary storage.

    Blobs are immutable once written; the only mutation is a whole-object delete.
    Implementations raise domain exceptions:
    - BlobNotFoundError: When no manifest exists for the blob id
    - BlobStorageError: When the underlying storage fails
    """

    @abstractmethod
    def store(
        self,
        stream: BinaryIO,
        *,
        content_type: str | None = None,
        filename: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> StoredBlob:
        """Write ``stream`` as a new blob and return its reference.

        Raises:
            BlobStorageError: If any chunk or the manifest cannot be written.

        """

    @abstractmethod
    def open_read(self, blob_id: str, byte_range: ByteRange | None = None) -> Iterator[bytes]:
        """Return a lazy iterator over the blob bytes, or over ``byte_range`` only.

        The manifest is loaded and the range validated before this returns.

        Raises:
            BlobNotFoundError: If the blob does not exist.
            RangeNotSatisfiableError: If the range ends beyond the blob.
            BlobStorageError: While iterating, if a chunk cannot be read.

        """

    @abstractmethod
    def delete(self, blob_id: str) -> None:
        """Delete the manifest and every chunk of the blob.

        Raises:
            BlobNotFoundError: If the blob does not exist.
            BlobStorageError: If the storage refuses the delete.

        """

    @abstractmethod
    def info(self, blob_id: str) -> BlobInfo | None:
        """Return the blob manifest, or None if the blob does not exist."""
