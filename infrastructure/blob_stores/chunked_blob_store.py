"""Chunked blob storage on top of any fsspec filesystem.

Layout under the base URL::

    {blob_id}/chunks/00000000
    {blob_id}/chunks/00000001
    ...
    {blob_id}/manifest.json

Chunk ``i`` holds bytes ``[i * chunk_size, (i + 1) * chunk_size)``. The
manifest is written after the last chunk and removed before the first one, so
a blob is visible exactly while it is complete.
"""

from __future__ import annotations

import hashlib
import json
import re
from collections.abc import Iterator
from datetime import UTC, datetime
from typing import Any, BinaryIO
from uuid import uuid4

import fsspec
import structlog

from application.ports.blob_store import BlobInfo, BlobStore, StoredBlob
from domain.exceptions import BlobNotFoundError, BlobStorageError
from domain.value_objects.byte_range import ByteRange

logger = structlog.get_logger()

DEFAULT_CHUNK_SIZE = 255 * 1024
MANIFEST_NAME = "manifest.json"
_BLOB_ID = re.compile(r"[0-9a-f]{32}")


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    """Read up to ``size`` bytes, looping over short reads until EOF."""
    parts = []
    remaining = size
    while remaining > 0:
        data = stream.read(remaining)
        if not data:
            break
        parts.append(data)
        remaining -= len(data)
    return b"".join(parts)


class ChunkedBlobStore(BlobStore):
    def __init__(
        self,
        base_url: str,
        *,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        storage_options: dict | None = None,
    ) -> None:
        if chunk_size <= 0:
            msg = "chunk_size must be positive"
            raise ValueError(msg)
        self.base_url = base_url.rstrip("/")
        self.chunk_size = chunk_size
        self.storage_options = storage_options or {}
        self.fs, self.root = fsspec.core.url_to_fs(self.base_url, **self.storage_options)
        self.root = self.root.rstrip("/")

    def _blob_path(self, blob_id: str) -> str:
        if not _BLOB_ID.fullmatch(blob_id):
            msg = f"Blob {blob_id!r} not found"
            raise BlobNotFoundError(msg)
        return f"{self.root}/{blob_id}"

    def _manifest_path(self, blob_id: str) -> str:
        return f"{self._blob_path(blob_id)}/{MANIFEST_NAME}"

    def _chunk_path(self, blob_id: str, index: int) -> str:
        return f"{self._blob_path(blob_id)}/chunks/{index:08d}"

    def _remove_partial(self, blob_path: str) -> None:
        try:
            if self.fs.exists(blob_path):
                self.fs.rm(blob_path, recursive=True)
        except OSError:
            logger.exception("blob_partial_cleanup_failed", path=blob_path)

    def store(
        self,
        stream: BinaryIO,
        *,
        content_type: str | None = None,
        filename: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> StoredBlob:
        blob_id = uuid4().hex
        blob_path = self._blob_path(blob_id)

        h = hashlib.sha256()
        size = 0
        chunk_count = 0
        try:
            self.fs.makedirs(f"{blob_path}/chunks", exist_ok=True)
            while True:
                chunk = _read_exact(stream, self.chunk_size)
                if not chunk:
                    break
                with self.fs.open(self._chunk_path(blob_id, chunk_count), "wb") as out:
                    out.write(chunk)
                h.update(chunk)
                size += len(chunk)
                chunk_count += 1

            manifest = {
                "blob_id": blob_id,
                "length": size,
                "chunk_size": self.chunk_size,
                "chunk_count": chunk_count,
                "sha256": h.hexdigest(),
                "content_type": content_type,
                "filename": filename,
                "uploaded_at": datetime.now(UTC).isoformat(),
                "metadata": metadata or {},
            }
            self.fs.pipe_file(self._manifest_path(blob_id), json.dumps(manifest).encode())
        except Exception as e:
            self._remove_partial(blob_path)
            logger.exception("blob_store_failed", blob_id=blob_id, chunks_written=chunk_count)
            msg = f"Failed to store blob: {e!s}"
            raise BlobStorageError(msg) from e

        logger.debug("blob_stored", blob_id=blob_id, size=size, chunk_count=chunk_count)
        return StoredBlob(
            blob_id=blob_id,
            size_bytes=size,
            sha256=manifest["sha256"],
            content_type=content_type,
        )

    def _load_manifest(self, blob_id: str) -> BlobInfo:
        path = self._manifest_path(blob_id)
        try:
            raw = json.loads(self.fs.cat_file(path))
        except FileNotFoundError as e:
            msg = f"Blob {blob_id} not found"
            raise BlobNotFoundError(msg) from e
        except (OSError, ValueError) as e:
            msg = f"Failed to read manifest of blob {blob_id}: {e!s}"
            raise BlobStorageError(msg) from e

        return BlobInfo(
            blob_id=raw["blob_id"],
            length=raw["length"],
            chunk_size=raw["chunk_size"],
            chunk_count=raw["chunk_count"],
            sha256=raw["sha256"],
            content_type=raw.get("content_type"),
            filename=raw.get("filename"),
            uploaded_at=datetime.fromisoformat(raw["uploaded_at"]),
            metadata=raw.get("metadata") or {},
        )

    def info(self, blob_id: str) -> BlobInfo | None:
        try:
            return self._load_manifest(blob_id)
        except BlobNotFoundError:
            return None

    def open_read(self, blob_id: str, byte_range: ByteRange | None = None) -> Iterator[bytes]:
        manifest = self._load_manifest(blob_id)
        if byte_range is not None:
            byte_range.check_within(manifest.length)
            start, end = byte_range.start, byte_range.end
        elif manifest.length == 0:
            return iter(())
        else:
            start, end = 0, manifest.length - 1
        return self._iter_window(manifest, start, end)

    def _iter_window(self, manifest: BlobInfo, start: int, end: int) -> Iterator[bytes]:
        """Yield bytes ``start..end`` (inclusive), touching only overlapping chunks."""
        chunk_size = manifest.chunk_size
        for index in range(start // chunk_size, end // chunk_size + 1):
            chunk_start = index * chunk_size
            lo = max(start - chunk_start, 0)
            hi = min(end - chunk_start + 1, chunk_size)
            path = self._chunk_path(manifest.blob_id, index)
            try:
                data = self.fs.cat_file(path, start=lo, end=hi)
            except FileNotFoundError as e:
                # The blob was deleted while this reader was iterating
                logger.warning("blob_chunk_missing", blob_id=manifest.blob_id, chunk=index)
                msg = f"Chunk {index} of blob {manifest.blob_id} is missing"
                raise BlobStorageError(msg) from e
            except OSError as e:
                msg = f"Failed to read chunk {index} of blob {manifest.blob_id}: {e!s}"
                raise BlobStorageError(msg) from e
            if len(data) != hi - lo:
                msg = f"Chunk {index} of blob {manifest.blob_id} is truncated"
                raise BlobStorageError(msg)
            yield data

    def delete(self, blob_id: str) -> None:
        manifest_path = self._manifest_path(blob_id)
        blob_path = self._blob_path(blob_id)
        try:
            exists = self.fs.exists(manifest_path)
        except OSError as e:
            msg = f"Failed to look up blob {blob_id}: {e!s}"
            raise BlobStorageError(msg) from e
        if not exists:
            msg = f"Blob {blob_id} not found"
            raise BlobNotFoundError(msg)

        try:
            self.fs.rm(manifest_path)
            self.fs.rm(blob_path, recursive=True)
        except OSError as e:
            logger.exception("blob_delete_failed", blob_id=blob_id)
            msg = f"Failed to delete blob {blob_id}: {e!s}"
            raise BlobStorageError(msg) from e
        logger.debug("blob_deleted", blob_id=blob_id)
