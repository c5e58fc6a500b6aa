import re
from collections.abc import Iterator
from contextlib import contextmanager

import structlog
from pymongo.errors import DuplicateKeyError, PyMongoError

from domain.exceptions import DuplicateRecordError, InfrastructureError

logger = structlog.get_logger()


@contextmanager
def mongo_errors(operation: str) -> Iterator[None]:
    """Translate pymongo errors raised inside the block into domain exceptions."""
    try:
        yield
    except DuplicateKeyError as e:
        raise DuplicateRecordError(str(e)) from e
    except PyMongoError as e:
        logger.exception("mongo_operation_failed", operation=operation)
        msg = f"MongoDB {operation} failed: {e!s}"
        raise InfrastructureError(msg) from e


def contains(value: str) -> dict:
    """Case-insensitive substring match."""
    return {"$regex": re.escape(value), "$options": "i"}
