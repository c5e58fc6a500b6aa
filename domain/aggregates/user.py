from uuid import UUID

from pydantic import BaseModel

from domain.value_objects.user_role import UserRole


class User(BaseModel):
    """User as resolved from the external user directory. Never mutated here."""

    model_config = {"frozen": True}

    id: UUID
    name: str | None = None
    role: UserRole
    department_id: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
