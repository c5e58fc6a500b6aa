"""Tests for the fsspec-backed chunked blob store."""

from __future__ import annotations

import hashlib
import io
from uuid import uuid4

import pytest

from domain.exceptions import BlobNotFoundError, BlobStorageError, RangeNotSatisfiableError
from domain.value_objects.byte_range import ByteRange
from infrastructure.blob_stores.chunked_blob_store import ChunkedBlobStore


class _TrickleStream(io.RawIOBase):
    """Returns at most two bytes per read, like a slow socket."""

    def __init__(self, data: bytes) -> None:
        self._data = io.BytesIO(data)

    def readable(self) -> bool:
        return True

    def read(self, size: int = -1) -> bytes:
        return self._data.read(min(size, 2) if size > 0 else 2)


@pytest.fixture
def store() -> ChunkedBlobStore:
    return ChunkedBlobStore(f"memory://store-{uuid4().hex}", chunk_size=4)


class TestStore:
    def test_store_and_read_back(self, store) -> None:
        payload = b"The quick brown fox"

        stored = store.store(
            io.BytesIO(payload),
            content_type="text/plain",
            filename="fox.txt",
            metadata={"uploaded_by": "u1"},
        )

        assert stored.size_bytes == len(payload)
        assert stored.sha256 == hashlib.sha256(payload).hexdigest()
        assert b"".join(store.open_read(stored.blob_id)) == payload

        info = store.info(stored.blob_id)
        assert info.length == len(payload)
        assert info.chunk_size == 4
        assert info.chunk_count == 5
        assert info.filename == "fox.txt"
        assert info.content_type == "text/plain"
        assert info.metadata == {"uploaded_by": "u1"}

    def test_short_reads_still_fill_chunks(self, store) -> None:
        stored = store.store(_TrickleStream(b"abcdefghij"))

        info = store.info(stored.blob_id)
        assert info.chunk_count == 3
        assert b"".join(store.open_read(stored.blob_id)) == b"abcdefghij"

    def test_empty_blob(self, store) -> None:
        stored = store.store(io.BytesIO(b""))

        assert stored.size_bytes == 0
        assert list(store.open_read(stored.blob_id)) == []

    def test_ids_are_unique(self, store) -> None:
        first = store.store(io.BytesIO(b"same"))
        second = store.store(io.BytesIO(b"same"))

        assert first.blob_id != second.blob_id

    def test_rejects_non_positive_chunk_size(self) -> None:
        with pytest.raises(ValueError, match="chunk_size"):
            ChunkedBlobStore("memory://bad", chunk_size=0)


class TestRangedReads:
    @pytest.mark.parametrize(
        ("start", "end", "expected"),
        [
            (0, 0, b"0"),
            (1, 3, b"123"),
            (3, 4, b"34"),
            (2, 9, b"23456789"),
            (8, 9, b"89"),
            (0, 9, b"0123456789"),
        ],
    )
    def test_window(self, store, start, end, expected) -> None:
        stored = store.store(io.BytesIO(b"0123456789"))

        chunks = list(store.open_read(stored.blob_id, ByteRange(start=start, end=end)))

        assert b"".join(chunks) == expected

    def test_only_overlapping_chunks_are_read(self, store) -> None:
        stored = store.store(io.BytesIO(b"0123456789"))

        chunks = list(store.open_read(stored.blob_id, ByteRange(start=5, end=6)))

        assert chunks == [b"56"]

    def test_window_beyond_end(self, store) -> None:
        stored = store.store(io.BytesIO(b"0123"))

        with pytest.raises(RangeNotSatisfiableError):
            store.open_read(stored.blob_id, ByteRange(start=2, end=4))

    def test_missing_chunk_fails_mid_stream(self, store) -> None:
        stored = store.store(io.BytesIO(b"0123456789"))
        store.fs.rm(store._chunk_path(stored.blob_id, 1))

        reader = store.open_read(stored.blob_id)

        assert next(reader) == b"0123"
        with pytest.raises(BlobStorageError):
            next(reader)


class TestDeleteAndMissing:
    def test_delete(self, store) -> None:
        stored = store.store(io.BytesIO(b"bye"))

        store.delete(stored.blob_id)

        assert store.info(stored.blob_id) is None
        assert not store.fs.exists(f"{store.root}/{stored.blob_id}")
        with pytest.raises(BlobNotFoundError):
            store.open_read(stored.blob_id)

    def test_delete_missing(self, store) -> None:
        with pytest.raises(BlobNotFoundError):
            store.delete(uuid4().hex)

    @pytest.mark.parametrize("blob_id", ["../etc", "not-a-blob", ""])
    def test_malformed_ids_are_not_found(self, store, blob_id) -> None:
        assert store.info(blob_id) is None
        with pytest.raises(BlobNotFoundError):
            store.open_read(blob_id)

    def test_incomplete_blob_is_invisible(self, store) -> None:
        stored = store.store(io.BytesIO(b"partial"))
        store.fs.rm(store._manifest_path(stored.blob_id))

        assert store.info(stored.blob_id) is None
