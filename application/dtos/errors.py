from typing import Any


class AppError:
    """Represents different categories of application errors."""

    def __init__(self, category: str, message: str, data: dict[str, Any] | None = None) -> None:
        # 'validation', 'not_found', 'access_denied', 'conflict',
        # 'range_not_satisfiable', 'storage', 'infrastructure'
        self.category = category
        self.message = message
        self.data = data

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"AppError({self.category!r}, {self.message!r})"
