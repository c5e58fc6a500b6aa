from collections.abc import Collection
from uuid import UUID

import structlog
from motor.motor_asyncio import AsyncIOMotorClient
from pydantic import ValidationError as PydanticValidationError

from application.ports.user_directory import UserDirectory
from domain.aggregates.user import User
from domain.value_objects.user_role import UserRole
from infrastructure.config import Settings
from infrastructure.mongo_repositories.mongo_errors import mongo_errors

logger = structlog.get_logger()


class MongoUserDirectory(UserDirectory):
    """Reads users maintained by the surrounding records system. Never writes."""

    def __init__(self, client: AsyncIOMotorClient, settings: Settings) -> None:
        self.client = client
        self.db = self.client[settings.mongo_db]
        self.users = self.db[settings.mongo_users_collection]

    async def get_user(self, user_id: UUID) -> User | None:
        with mongo_errors("find_user"):
            doc = await self.users.find_one(
                {"_id": str(user_id)},
                projection={"name": 1, "role": 1, "department_id": 1},
            )
        if not doc:
            return None
        try:
            return User(
                id=doc["_id"],
                name=doc.get("name"),
                role=doc.get("role"),
                department_id=(
                    str(doc["department_id"]) if doc.get("department_id") is not None else None
                ),
            )
        except PydanticValidationError:
            logger.warning("user_record_invalid", user_id=str(user_id), role=doc.get("role"))
            return None

    async def list_ids_in_department(
        self,
        department_id: str,
        *,
        roles: Collection[UserRole] | None = None,
    ) -> list[UUID]:
        query: dict = {"department_id": department_id}
        if roles is not None:
            query["role"] = {"$in": [r.value for r in roles]}
        with mongo_errors("list_department_users"):
            values = await self.users.distinct("_id", query)
        return [UUID(str(v)) for v in values]
