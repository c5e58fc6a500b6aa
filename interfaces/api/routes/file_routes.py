from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Header, status
from fastapi.responses import StreamingResponse
from lagom import Container

from application.dtos.file_dtos import FileStream
from application.use_cases.file_use_cases import DownloadFileUseCase, StreamFileUseCase
from interfaces.api.middleware import handle_use_case_errors
from interfaces.dependencies import CurrentUser, get_container

router = APIRouter(prefix="/files", tags=["files"])


def _to_streaming_response(file_stream: FileStream) -> StreamingResponse:
    return StreamingResponse(
        file_stream.body,
        status_code=file_stream.status_code,
        media_type=file_stream.media_type,
        headers=file_stream.headers,
    )


@router.get("/download/{document_id}", status_code=status.HTTP_200_OK)
@handle_use_case_errors
async def download_file(
    document_id: UUID,
    container: Annotated[Container, Depends(get_container)],
    user: CurrentUser,
) -> StreamingResponse:
    """Download the whole document as an attachment."""
    use_case = container[DownloadFileUseCase]
    result = await use_case.execute(document_id, user)
    return result.map(_to_streaming_response)


@router.get("/stream/{document_id}", status_code=status.HTTP_200_OK)
@handle_use_case_errors
async def stream_file(
    document_id: UUID,
    container: Annotated[Container, Depends(get_container)],
    user: CurrentUser,
    range_header: Annotated[str | None, Header(alias="Range")] = None,
) -> StreamingResponse:
    """Stream document content, honouring a single ``Range: bytes=...`` request.

    Returns:
        200 OK: Whole content
        206 Partial Content: The requested window with ``Content-Range``
        416 Range Not Satisfiable: Malformed or out-of-bounds range

    """
    use_case = container[StreamFileUseCase]
    result = await use_case.execute(document_id, user, range_header=range_header)
    return result.map(_to_streaming_response)
