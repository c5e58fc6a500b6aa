from abc import ABC, abstractmethod
from collections.abc import Collection
from uuid import UUID

from domain.aggregates.user import User
from domain.value_objects.user_role import UserRole


class UserDirectory(ABC):
    """Read-only port to the external user directory."""

    @abstractmethod
    async def get_user(self, user_id: UUID) -> User | None:
        """Resolve a user by id, or None if unknown.

        Raises:
            InfrastructureError: If the directory cannot be queried.

        """

    @abstractmethod
    async def list_ids_in_department(
        self,
        department_id: str,
        *,
        roles: Collection[UserRole] | None = None,
    ) -> list[UUID]:
        """Return the ids of every user in ``department_id``, optionally only those in ``roles``."""
