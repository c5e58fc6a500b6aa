from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query, status
from lagom import Container

from application.dtos.common_dtos import ApiResponse
from application.dtos.folder_dtos import (
    AddDocumentToFolderRequest,
    CreateFolderRequest,
    UpdateFolderRequest,
)
from application.use_cases.deletion_use_cases import DeleteFolderUseCase
from application.use_cases.folder_use_cases import (
    AddDocumentToFolderUseCase,
    CreateFolderUseCase,
    ListFolderDocumentsUseCase,
    ListFoldersUseCase,
    RemoveDocumentFromFolderUseCase,
    UpdateFolderUseCase,
)
from domain.value_objects.folder_status import FolderStatus
from interfaces.api.middleware import handle_use_case_errors
from interfaces.dependencies import CurrentUser, get_container

router = APIRouter(prefix="/folders", tags=["folders"])


@router.post("", status_code=status.HTTP_201_CREATED)
@handle_use_case_errors
async def create_folder(
    request: CreateFolderRequest,
    container: Annotated[Container, Depends(get_container)],
    user: CurrentUser,
) -> ApiResponse:
    use_case = container[CreateFolderUseCase]
    result = await use_case.execute(request, user)
    return result.map(lambda folder: ApiResponse.ok("Folder created successfully", folder))


@router.get("", status_code=status.HTTP_200_OK)
@handle_use_case_errors
async def list_folders(  # noqa: PLR0913
    container: Annotated[Container, Depends(get_container)],
    user: CurrentUser,
    folder_status: Annotated[FolderStatus | None, Query(alias="status")] = None,
    search: Annotated[str | None, Query()] = None,
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
) -> ApiResponse:
    """List the caller's folders with their document counts."""
    use_case = container[ListFoldersUseCase]
    result = await use_case.execute(
        user,
        status=folder_status,
        search=search,
        skip=skip,
        limit=limit,
    )
    return result.map(lambda page: ApiResponse.ok("Folders retrieved successfully", page))


@router.patch("/{folder_id}", status_code=status.HTTP_200_OK)
@handle_use_case_errors
async def update_folder(
    folder_id: UUID,
    request: Annotated[UpdateFolderRequest, Body()],
    container: Annotated[Container, Depends(get_container)],
    user: CurrentUser,
) -> ApiResponse:
    use_case = container[UpdateFolderUseCase]
    result = await use_case.execute(folder_id, request, user)
    return result.map(lambda folder: ApiResponse.ok("Folder updated successfully", folder))


@router.delete("/{folder_id}", status_code=status.HTTP_200_OK)
@handle_use_case_errors
async def delete_folder(
    folder_id: UUID,
    container: Annotated[Container, Depends(get_container)],
    user: CurrentUser,
    delete_documents: Annotated[bool, Query()] = False,  # noqa: FBT002
    force: Annotated[bool, Query()] = False,  # noqa: FBT002
) -> ApiResponse:
    """Delete a folder.

    Returns:
        200 OK: Deletion report; ``errors`` lists documents that were only partly removed
        409 Conflict: Folder is not empty and neither flag was set

    """
    use_case = container[DeleteFolderUseCase]
    result = await use_case.execute(
        folder_id,
        user,
        delete_documents=delete_documents,
        force=force,
    )
    return result.map(lambda report: ApiResponse.ok("Folder deleted successfully", report))


@router.get("/{folder_id}/documents", status_code=status.HTTP_200_OK)
@handle_use_case_errors
async def list_folder_documents(
    folder_id: UUID,
    container: Annotated[Container, Depends(get_container)],
    user: CurrentUser,
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
) -> ApiResponse:
    use_case = container[ListFolderDocumentsUseCase]
    result = await use_case.execute(folder_id, user, skip=skip, limit=limit)
    return result.map(lambda page: ApiResponse.ok("Folder documents retrieved successfully", page))


@router.post("/{folder_id}/documents", status_code=status.HTTP_201_CREATED)
@handle_use_case_errors
async def add_document_to_folder(
    folder_id: UUID,
    request: AddDocumentToFolderRequest,
    container: Annotated[Container, Depends(get_container)],
    user: CurrentUser,
) -> ApiResponse:
    """Move a document into the folder, out of any folder it was in before."""
    use_case = container[AddDocumentToFolderUseCase]
    result = await use_case.execute(folder_id, request.document_id, user)
    return result.map(lambda membership: ApiResponse.ok("Document moved to folder", membership))


@router.delete("/{folder_id}/documents/{document_id}", status_code=status.HTTP_200_OK)
@handle_use_case_errors
async def remove_document_from_folder(
    folder_id: UUID,
    document_id: UUID,
    container: Annotated[Container, Depends(get_container)],
    user: CurrentUser,
) -> ApiResponse:
    use_case = container[RemoveDocumentFromFolderUseCase]
    result = await use_case.execute(folder_id, document_id, user)
    return result.map(
        lambda membership: ApiResponse.ok("Document removed from folder", membership),
    )
