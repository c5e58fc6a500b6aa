from typing import Annotated
from uuid import UUID

import structlog
from fastapi import APIRouter, Body, Depends, File, Form, Query, UploadFile, status
from lagom import Container

from application.dtos.common_dtos import ApiResponse
from application.dtos.document_dtos import UpdateDocumentRequest, UploadDocumentRequest
from application.use_cases.deletion_use_cases import DeleteDocumentUseCase
from application.use_cases.document_use_cases import (
    GetDocumentUseCase,
    ListAccessibleDocumentsUseCase,
    ListMyDocumentsUseCase,
    UpdateDocumentUseCase,
    UploadDocumentUseCase,
)
from domain.value_objects.visibility import Visibility
from interfaces.api.middleware import handle_use_case_errors
from interfaces.dependencies import CurrentUser, get_container

logger = structlog.get_logger()

router = APIRouter(prefix="/documents", tags=["documents"])


@router.post("", status_code=status.HTTP_201_CREATED)
@handle_use_case_errors
async def upload_document(  # noqa: PLR0913
    container: Annotated[Container, Depends(get_container)],
    user: CurrentUser,
    file: Annotated[UploadFile, File()],
    title: Annotated[str | None, Form()] = None,
    visibility: Annotated[Visibility, Form()] = Visibility.PRIVATE,
    folder_id: Annotated[UUID | None, Form()] = None,
) -> ApiResponse:
    """Upload a file and register it as a document owned by the caller.

    Returns:
        201 Created: Document stored
        400 Bad Request: Disallowed type, empty or oversized file
        404 Not Found: Target folder does not exist
        500 Internal Server Error: Storage failure

    """
    use_case = container[UploadDocumentUseCase]
    result = await use_case.execute(
        stream=file.file,
        request=UploadDocumentRequest(
            filename=file.filename,
            content_type=file.content_type,
            title=title,
            visibility=visibility,
            folder_id=folder_id,
        ),
        owner=user,
    )
    return result.map(lambda doc: ApiResponse.ok("Document uploaded successfully", doc))


@router.get("", status_code=status.HTTP_200_OK)
@handle_use_case_errors
async def list_my_documents(  # noqa: PLR0913
    container: Annotated[Container, Depends(get_container)],
    user: CurrentUser,
    search: Annotated[str | None, Query()] = None,
    content_type: Annotated[str | None, Query()] = None,
    visibility: Annotated[Visibility | None, Query()] = None,
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
) -> ApiResponse:
    """List the caller's own documents, newest first."""
    use_case = container[ListMyDocumentsUseCase]
    result = await use_case.execute(
        user,
        search=search,
        content_type=content_type,
        visibility=visibility,
        skip=skip,
        limit=limit,
    )
    return result.map(lambda page: ApiResponse.ok("Documents retrieved successfully", page))


@router.get("/accessible", status_code=status.HTTP_200_OK)
@handle_use_case_errors
async def list_accessible_documents(
    container: Annotated[Container, Depends(get_container)],
    user: CurrentUser,
    search: Annotated[str | None, Query()] = None,
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
) -> ApiResponse:
    """List every document the caller may read."""
    use_case = container[ListAccessibleDocumentsUseCase]
    result = await use_case.execute(user, search=search, skip=skip, limit=limit)
    return result.map(lambda page: ApiResponse.ok("Documents retrieved successfully", page))


@router.get("/{document_id}", status_code=status.HTTP_200_OK)
@handle_use_case_errors
async def get_document(
    document_id: UUID,
    container: Annotated[Container, Depends(get_container)],
    user: CurrentUser,
) -> ApiResponse:
    use_case = container[GetDocumentUseCase]
    result = await use_case.execute(document_id, user)
    return result.map(lambda doc: ApiResponse.ok("Document retrieved successfully", doc))


@router.patch("/{document_id}", status_code=status.HTTP_200_OK)
@handle_use_case_errors
async def update_document(
    document_id: UUID,
    request: Annotated[UpdateDocumentRequest, Body()],
    container: Annotated[Container, Depends(get_container)],
    user: CurrentUser,
) -> ApiResponse:
    """Change title or visibility. Owner or Admin only."""
    use_case = container[UpdateDocumentUseCase]
    result = await use_case.execute(document_id, request, user)
    return result.map(lambda doc: ApiResponse.ok("Document updated successfully", doc))


@router.delete("/{document_id}", status_code=status.HTTP_200_OK)
@handle_use_case_errors
async def delete_document(
    document_id: UUID,
    container: Annotated[Container, Depends(get_container)],
    user: CurrentUser,
    force: Annotated[bool, Query()] = False,  # noqa: FBT002
) -> ApiResponse:
    """Delete a document together with its content, shares and folder memberships.

    Returns:
        200 OK: Deletion report (``warnings`` lists content that could not be removed)
        403 Forbidden: Caller is neither owner nor Admin
        409 Conflict: Document is still shared and ``force`` was not set

    """
    use_case = container[DeleteDocumentUseCase]
    result = await use_case.execute(document_id, user, force=force)
    return result.map(lambda report: ApiResponse.ok("Document deleted successfully", report))
