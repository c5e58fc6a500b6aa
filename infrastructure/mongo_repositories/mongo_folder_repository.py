from typing import Any
from uuid import UUID

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING, DESCENDING

from application.ports.repositories.folder_repository import FolderRepository
from domain.aggregates.folder import Folder, FolderMembership
from domain.exceptions import RecordNotFoundError
from domain.value_objects.folder_status import FolderStatus
from infrastructure.config import Settings
from infrastructure.mongo_repositories.mongo_errors import contains, mongo_errors


def _folder_to_doc(folder: Folder) -> dict[str, Any]:
    return {
        "_id": str(folder.id),
        "owner_id": str(folder.owner_id),
        "name": folder.name,
        "status": folder.status.value,
        "created_at": folder.created_at,
        "updated_at": folder.updated_at,
    }


def _membership_to_doc(membership: FolderMembership) -> dict[str, Any]:
    return {
        "_id": str(membership.id),
        "folder_id": str(membership.folder_id),
        "document_id": str(membership.document_id),
        "created_at": membership.created_at,
    }


def _from_doc[T: (Folder, FolderMembership)](model: type[T], doc: dict[str, Any]) -> T:
    doc["id"] = doc.pop("_id")
    return model(**doc)


class MongoFolderRepository(FolderRepository):
    """Folders and the join records placing documents into them."""

    def __init__(self, client: AsyncIOMotorClient, settings: Settings) -> None:
        self.client = client
        self.db = self.client[settings.mongo_db]
        self.folders = self.db[settings.mongo_folders_collection]
        self.memberships = self.db[settings.mongo_folder_documents_collection]

    async def ensure_indexes(self) -> None:
        await self.folders.create_index([("owner_id", ASCENDING), ("created_at", DESCENDING)])
        await self.memberships.create_index(
            [("folder_id", ASCENDING), ("document_id", ASCENDING)],
            unique=True,
            name="unique_folder_document",
        )
        await self.memberships.create_index("document_id")

    async def create(self, folder: Folder) -> None:
        with mongo_errors("insert_folder"):
            await self.folders.insert_one(_folder_to_doc(folder))

    async def get_by_id(self, folder_id: UUID) -> Folder:
        with mongo_errors("find_folder"):
            doc = await self.folders.find_one({"_id": str(folder_id)})
        if not doc:
            msg = f"Folder with id {folder_id} not found"
            raise RecordNotFoundError(msg)
        return _from_doc(Folder, doc)

    async def update(self, folder: Folder) -> None:
        data = _folder_to_doc(folder)
        data.pop("_id")
        with mongo_errors("update_folder"):
            result = await self.folders.update_one({"_id": str(folder.id)}, {"$set": data})
        if result.matched_count == 0:
            msg = f"Folder with id {folder.id} not found"
            raise RecordNotFoundError(msg)

    async def delete(self, folder_id: UUID) -> bool:
        with mongo_errors("delete_folder"):
            result = await self.folders.delete_one({"_id": str(folder_id)})
        return result.deleted_count > 0

    async def list_by_owner(  # noqa: PLR0913
        self,
        owner_id: UUID,
        *,
        status: FolderStatus | None = None,
        search: str | None = None,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[Folder], int]:
        query: dict[str, Any] = {"owner_id": str(owner_id)}
        if status is not None:
            query["status"] = status.value
        if search:
            query["name"] = contains(search)
        with mongo_errors("list_folders"):
            total = await self.folders.count_documents(query)
            cursor = (
                self.folders.find(query)
                .sort([("created_at", DESCENDING), ("_id", DESCENDING)])
                .skip(skip)
                .limit(limit)
            )
            items = [_from_doc(Folder, doc) async for doc in cursor]
        return items, total

    async def add_membership(self, membership: FolderMembership) -> None:
        with mongo_errors("insert_folder_document"):
            await self.memberships.insert_one(_membership_to_doc(membership))

    async def get_membership(self, folder_id: UUID, document_id: UUID) -> FolderMembership | None:
        with mongo_errors("find_folder_document"):
            doc = await self.memberships.find_one(
                {"folder_id": str(folder_id), "document_id": str(document_id)},
            )
        return _from_doc(FolderMembership, doc) if doc else None

    async def list_memberships(
        self,
        folder_id: UUID,
        *,
        skip: int = 0,
        limit: int | None = None,
    ) -> list[FolderMembership]:
        with mongo_errors("list_folder_documents"):
            cursor = (
                self.memberships.find({"folder_id": str(folder_id)})
                .sort([("created_at", ASCENDING), ("_id", ASCENDING)])
                .skip(skip)
            )
            if limit is not None:
                cursor = cursor.limit(limit)
            return [_from_doc(FolderMembership, doc) async for doc in cursor]

    async def count_memberships(self, folder_id: UUID) -> int:
        with mongo_errors("count_folder_documents"):
            return await self.memberships.count_documents({"folder_id": str(folder_id)})

    async def remove_membership(self, folder_id: UUID, document_id: UUID) -> bool:
        with mongo_errors("delete_folder_document"):
            result = await self.memberships.delete_one(
                {"folder_id": str(folder_id), "document_id": str(document_id)},
            )
        return result.deleted_count > 0

    async def remove_memberships_for_document(self, document_id: UUID) -> int:
        with mongo_errors("delete_folder_documents"):
            result = await self.memberships.delete_many({"document_id": str(document_id)})
        return result.deleted_count

    async def remove_memberships_for_folder(self, folder_id: UUID) -> int:
        with mongo_errors("delete_folder_documents"):
            result = await self.memberships.delete_many({"folder_id": str(folder_id)})
        return result.deleted_count
