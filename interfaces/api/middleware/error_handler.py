"""Error handling decorator for API routes and the envelope exception handlers."""

import functools
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

import structlog
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from returns.result import Failure, Success
from starlette.exceptions import HTTPException as StarletteHTTPException

from application.dtos.common_dtos import ApiResponse
from domain.exceptions import InfrastructureError
from interfaces.api.routes.helpers import (
    ApiHTTPException,
    _map_app_error_to_http_exception,
    category_for_status,
)

if TYPE_CHECKING:
    from typing import Any

logger = structlog.get_logger()


def _raise_mapped_http_error(failure: object) -> None:
    error = _map_app_error_to_http_exception(failure)
    raise error from None


def _raise_unexpected_result_type() -> None:
    detail = "Unexpected result type"
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=detail,
    ) from None


def handle_use_case_errors[T_co](
    func: Callable[..., Awaitable[T_co]],
) -> Callable[..., Awaitable[T_co]]:
    """Handle common use case error patterns.

    This decorator centralizes error handling for use case execution:
    - Unwraps Success results
    - Maps Failure results to HTTP exceptions
    - Handles InfrastructureError
    - Catches and logs unexpected errors

    Args:
        func: An async endpoint function that executes a use case

    Returns:
        Wrapped function with centralized error handling

    """

    @functools.wraps(func)
    async def wrapper(*args: "Any", **kwargs: "Any") -> T_co:  # noqa: ANN401
        try:
            result = await func(*args, **kwargs)

            if isinstance(result, Success):
                return result.unwrap()

            if isinstance(result, Failure):
                _raise_mapped_http_error(result.failure())

            _raise_unexpected_result_type()

        except HTTPException:
            raise
        except InfrastructureError as exc:
            logger.exception(
                "infrastructure_error",
                error=str(exc),
                function=func.__name__,
            )
            raise ApiHTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Service temporarily unavailable",
                category="infrastructure",
            ) from exc
        except Exception as exc:
            logger.exception(
                "unexpected_error",
                error=str(exc),
                error_type=type(exc).__name__,
                function=func.__name__,
            )
            raise ApiHTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Internal server error",
                category="internal",
            ) from exc

    return wrapper


async def _http_exception_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    if isinstance(exc, ApiHTTPException):
        category, data = exc.category, exc.data
    else:
        category, data = category_for_status(exc.status_code), None
    body = ApiResponse.fail(message=str(exc.detail), error=category, data=data)
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(body, exclude_none=True),
        headers=exc.headers,
    )


async def _validation_exception_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    body = ApiResponse.fail(
        message="Request validation failed",
        error="validation",
        data=exc.errors(),
    )
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=jsonable_encoder(body, exclude_none=True),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Render every error response in the ``{success, message, error, data}`` envelope."""
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
