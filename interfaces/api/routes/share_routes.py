from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from lagom import Container

from application.dtos.common_dtos import ApiResponse
from application.dtos.share_dtos import ShareDocumentRequest
from application.use_cases.share_use_cases import (
    ListDocumentSharesUseCase,
    ListReceivedSharesUseCase,
    ListSentSharesUseCase,
    RevokeShareUseCase,
    ShareDocumentUseCase,
)
from interfaces.api.middleware import handle_use_case_errors
from interfaces.dependencies import CurrentUser, get_container

router = APIRouter(tags=["shares"])


@router.post("/documents/{document_id}/share", status_code=status.HTTP_201_CREATED)
@handle_use_case_errors
async def share_document(
    document_id: UUID,
    request: ShareDocumentRequest,
    container: Annotated[Container, Depends(get_container)],
    user: CurrentUser,
) -> ApiResponse:
    """Grant read access to several users; per-user failures are listed in ``errors``."""
    use_case = container[ShareDocumentUseCase]
    result = await use_case.execute(document_id, request.user_ids, user)
    return result.map(
        lambda outcome: ApiResponse.ok(
            f"Document shared with {len(outcome.granted)} user(s)",
            outcome,
        ),
    )


@router.get("/documents/{document_id}/shares", status_code=status.HTTP_200_OK)
@handle_use_case_errors
async def list_document_shares(
    document_id: UUID,
    container: Annotated[Container, Depends(get_container)],
    user: CurrentUser,
) -> ApiResponse:
    use_case = container[ListDocumentSharesUseCase]
    result = await use_case.execute(document_id, user)
    return result.map(lambda shares: ApiResponse.ok("Shares retrieved successfully", shares))


@router.delete("/documents/{document_id}/shares/{share_id}", status_code=status.HTTP_200_OK)
@handle_use_case_errors
async def revoke_share(
    document_id: UUID,
    share_id: UUID,
    container: Annotated[Container, Depends(get_container)],
    user: CurrentUser,
) -> ApiResponse:
    use_case = container[RevokeShareUseCase]
    result = await use_case.execute(document_id, share_id, user)
    return result.map(lambda share: ApiResponse.ok("Share revoked successfully", share))


@router.get("/shares/received", status_code=status.HTTP_200_OK)
@handle_use_case_errors
async def list_received_shares(
    container: Annotated[Container, Depends(get_container)],
    user: CurrentUser,
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
) -> ApiResponse:
    """Documents shared with the caller."""
    use_case = container[ListReceivedSharesUseCase]
    result = await use_case.execute(user, skip=skip, limit=limit)
    return result.map(lambda page: ApiResponse.ok("Shared documents retrieved successfully", page))


@router.get("/shares/sent", status_code=status.HTTP_200_OK)
@handle_use_case_errors
async def list_sent_shares(
    container: Annotated[Container, Depends(get_container)],
    user: CurrentUser,
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
) -> ApiResponse:
    """Documents the caller has shared with others."""
    use_case = container[ListSentSharesUseCase]
    result = await use_case.execute(user, skip=skip, limit=limit)
    return result.map(lambda page: ApiResponse.ok("Shared documents retrieved successfully", page))
