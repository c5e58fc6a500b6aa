from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ApiResponse(BaseModel):
    """Envelope wrapping every JSON response of the API."""

    success: bool = Field(..., description="Whether the request succeeded")
    message: str = Field(..., description="Human readable outcome")
    data: Any | None = Field(None, description="Response payload")
    error: str | None = Field(None, description="Error category when success is false")

    @classmethod
    def ok(cls, message: str, data: Any = None) -> "ApiResponse":  # noqa: ANN401
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(cls, message: str, error: str, data: Any = None) -> "ApiResponse":  # noqa: ANN401
        return cls(success=False, message=message, error=error, data=data)


class PageResult(BaseModel, Generic[T]):
    """One page of an offset/limit listing."""

    items: list[T] = Field(default_factory=list, description="Items on this page")
    total: int = Field(..., description="Total number of matching items")
    skip: int = Field(0, description="Number of items skipped")
    limit: int = Field(..., description="Maximum number of items per page")
