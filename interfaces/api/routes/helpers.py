from typing import Any

from fastapi import HTTPException, status

from application.dtos.errors import AppError

_STATUS_BY_CATEGORY = {
    "validation": status.HTTP_400_BAD_REQUEST,
    "not_found": status.HTTP_404_NOT_FOUND,
    "access_denied": status.HTTP_403_FORBIDDEN,
    "conflict": status.HTTP_409_CONFLICT,
    "range_not_satisfiable": status.HTTP_416_REQUESTED_RANGE_NOT_SATISFIABLE,
    "storage": status.HTTP_500_INTERNAL_SERVER_ERROR,
}

_CATEGORY_BY_STATUS = {
    status.HTTP_400_BAD_REQUEST: "validation",
    status.HTTP_401_UNAUTHORIZED: "unauthorized",
    status.HTTP_403_FORBIDDEN: "access_denied",
    status.HTTP_404_NOT_FOUND: "not_found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "method_not_allowed",
    status.HTTP_409_CONFLICT: "conflict",
    status.HTTP_416_REQUESTED_RANGE_NOT_SATISFIABLE: "range_not_satisfiable",
    status.HTTP_422_UNPROCESSABLE_ENTITY: "validation",
}


class ApiHTTPException(HTTPException):
    """HTTPException that remembers the application error category and payload."""

    def __init__(
        self,
        status_code: int,
        detail: str,
        *,
        category: str,
        data: Any = None,  # noqa: ANN401
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.category = category
        self.data = data


def category_for_status(status_code: int) -> str:
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        return "internal"
    return _CATEGORY_BY_STATUS.get(status_code, "error")


def _map_app_error_to_http_exception(error: AppError) -> HTTPException:
    """Map application layer errors to appropriate HTTP exceptions."""
    status_code = _STATUS_BY_CATEGORY.get(error.category)
    if status_code is None:
        # Unknown error category
        return ApiHTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
            category="internal",
        )

    if error.category == "range_not_satisfiable":
        length = (error.data or {}).get("length")
        return ApiHTTPException(
            status_code=status_code,
            detail=error.message,
            category=error.category,
            headers={"Content-Range": f"bytes */{length}"} if length is not None else None,
        )

    return ApiHTTPException(
        status_code=status_code,
        detail=error.message,
        category=error.category,
        data=error.data,
    )
