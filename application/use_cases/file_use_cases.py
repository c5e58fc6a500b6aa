from __future__ import annotations

import unicodedata
from typing import TYPE_CHECKING
from urllib.parse import quote

import structlog
from returns.result import Failure, Result, Success

from application.dtos.errors import AppError
from application.dtos.file_dtos import FileStream
from domain.exceptions import BlobNotFoundError, RangeNotSatisfiableError, RecordNotFoundError
from domain.value_objects.byte_range import ByteRange

if TYPE_CHECKING:
    from uuid import UUID

    from application.ports.blob_store import BlobInfo, BlobStore
    from application.ports.repositories.document_repository import DocumentRepository
    from application.services.access_evaluator import AccessEvaluator
    from domain.aggregates.document import Document
    from domain.aggregates.user import User

logger = structlog.get_logger()

DEFAULT_MEDIA_TYPE = "application/octet-stream"


def content_disposition(disposition: str, filename: str | None, *, default: str = "download") -> str:
    """Build a ``Content-Disposition`` value with an ASCII fallback name.

    Non-ASCII names are additionally sent as an RFC 5987 ``filename*`` parameter.
    """
    name = "".join(ch for ch in (filename or "") if unicodedata.category(ch)[0] != "C").strip()
    name = name or default
    fallback = "".join(
        ch if 32 <= ord(ch) < 127 and ch not in '"\\;' else "_" for ch in name
    ).strip("_ ")
    fallback = fallback[:255] or default
    if fallback == name:
        return f'{disposition}; filename="{fallback}"'
    return f"{disposition}; filename=\"{fallback}\"; filename*=UTF-8''{quote(name, safe='')}"


class _FileAccessUseCase:
    def __init__(
        self,
        document_repository: DocumentRepository,
        blob_store: BlobStore,
        access_evaluator: AccessEvaluator,
    ) -> None:
        self.document_repository = document_repository
        self.blob_store = blob_store
        self.access_evaluator = access_evaluator

    async def _authorize(
        self,
        document_id: UUID,
        user: User,
    ) -> Result[tuple[Document, BlobInfo], AppError]:
        try:
            document = await self.document_repository.get_by_id(document_id)
        except RecordNotFoundError:
            return Failure(AppError("not_found", "Document not found"))

        if not await self.access_evaluator.check_read(user, document):
            logger.info("file_access_denied", document_id=str(document_id), user_id=str(user.id))
            return Failure(AppError("access_denied", "Access denied to this document"))

        info = self.blob_store.info(document.blob_id)
        if info is None:
            logger.warning(
                "file_missing_in_storage",
                document_id=str(document.id),
                blob_id=document.blob_id,
            )
            return Failure(AppError("not_found", "File not found in storage"))
        return Success((document, info))

    @staticmethod
    def _media_type(document: Document, info: BlobInfo) -> str:
        return document.content_type or info.content_type or DEFAULT_MEDIA_TYPE


class DownloadFileUseCase(_FileAccessUseCase):
    """Send the whole document content as an attachment."""

    async def execute(self, document_id: UUID, user: User) -> Result[FileStream, AppError]:
        authorized = await self._authorize(document_id, user)
        if isinstance(authorized, Failure):
            return authorized
        document, info = authorized.unwrap()

        try:
            body = self.blob_store.open_read(document.blob_id)
        except BlobNotFoundError:
            return Failure(AppError("not_found", "File not found in storage"))

        logger.info("file_download_started", document_id=str(document.id), size=info.length)
        return Success(
            FileStream(
                status_code=200,
                body=body,
                media_type=self._media_type(document, info),
                headers={
                    "Content-Length": str(info.length),
                    "Content-Disposition": content_disposition(
                        "attachment",
                        document.original_name or info.filename or document.title,
                    ),
                },
            ),
        )


class StreamFileUseCase(_FileAccessUseCase):
    """Serve document content inline, honouring a single byte range."""

    async def execute(
        self,
        document_id: UUID,
        user: User,
        range_header: str | None = None,
    ) -> Result[FileStream, AppError]:
        authorized = await self._authorize(document_id, user)
        if isinstance(authorized, Failure):
            return authorized
        document, info = authorized.unwrap()

        headers = {
            "Accept-Ranges": "bytes",
            "Content-Disposition": content_disposition(
                "inline",
                document.original_name or info.filename or document.title,
            ),
        }

        byte_range = None
        if range_header:
            try:
                byte_range = ByteRange.parse(range_header, info.length)
            except RangeNotSatisfiableError as e:
                return Failure(
                    AppError("range_not_satisfiable", str(e), data={"length": info.length}),
                )

        try:
            body = self.blob_store.open_read(document.blob_id, byte_range)
        except BlobNotFoundError:
            return Failure(AppError("not_found", "File not found in storage"))
        except RangeNotSatisfiableError as e:
            return Failure(AppError("range_not_satisfiable", str(e), data={"length": info.length}))

        if byte_range is None:
            headers["Content-Length"] = str(info.length)
            status_code = 200
        else:
            headers["Content-Length"] = str(byte_range.length)
            headers["Content-Range"] = byte_range.content_range(info.length)
            status_code = 206

        logger.info(
            "file_stream_started",
            document_id=str(document.id),
            status_code=status_code,
            range=headers.get("Content-Range"),
        )
        return Success(
            FileStream(
                status_code=status_code,
                body=body,
                media_type=self._media_type(document, info),
                headers=headers,
            ),
        )
