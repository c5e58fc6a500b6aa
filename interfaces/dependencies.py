"""FastAPI dependency injection integration with Lagom."""

from functools import lru_cache
from typing import Annotated
from uuid import UUID

import structlog
from fastapi import Depends, Header, status
from lagom import Container

from application.ports.user_directory import UserDirectory
from domain.aggregates.user import User
from infrastructure.di.container import create_container
from interfaces.api.routes.helpers import ApiHTTPException

logger = structlog.get_logger()


@lru_cache
def get_container() -> Container:
    """Get the DI container instance.

    Cached to ensure singleton behavior across requests.
    """
    return create_container()


def _unauthorized(detail: str) -> ApiHTTPException:
    return ApiHTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        category="unauthorized",
    )


async def get_current_user(
    container: Annotated[Container, Depends(get_container)],
    x_user_id: Annotated[str | None, Header()] = None,
) -> User:
    """Resolve the caller from the ``X-User-Id`` header through the user directory."""
    if not x_user_id:
        raise _unauthorized("Authentication required")
    try:
        user_id = UUID(x_user_id)
    except ValueError:
        raise _unauthorized("Invalid user id") from None

    user = await container[UserDirectory].get_user(user_id)
    if user is None:
        logger.info("unknown_user_rejected", user_id=str(user_id))
        raise _unauthorized("Unknown user")
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]
