from typing import Any
from uuid import UUID

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING, DESCENDING

from application.ports.repositories.share_repository import ShareRepository
from domain.aggregates.share_grant import ShareGrant
from domain.exceptions import RecordNotFoundError
from infrastructure.config import Settings
from infrastructure.mongo_repositories.mongo_errors import mongo_errors

_NEWEST_FIRST = [("created_at", DESCENDING), ("_id", DESCENDING)]


def _to_doc(grant: ShareGrant) -> dict[str, Any]:
    return {
        "_id": str(grant.id),
        "document_id": str(grant.document_id),
        "grantor_id": str(grant.grantor_id),
        "grantee_id": str(grant.grantee_id),
        "created_at": grant.created_at,
    }


def _from_doc(doc: dict[str, Any]) -> ShareGrant:
    doc["id"] = doc.pop("_id")
    return ShareGrant(**doc)


class MongoShareRepository(ShareRepository):
    def __init__(self, client: AsyncIOMotorClient, settings: Settings) -> None:
        self.client = client
        self.db = self.client[settings.mongo_db]
        self.shares = self.db[settings.mongo_shares_collection]

    async def ensure_indexes(self) -> None:
        await self.shares.create_index(
            [("document_id", ASCENDING), ("grantee_id", ASCENDING)],
            unique=True,
            name="unique_document_grantee",
        )
        await self.shares.create_index([("grantee_id", ASCENDING), ("created_at", DESCENDING)])
        await self.shares.create_index([("grantor_id", ASCENDING), ("created_at", DESCENDING)])

    async def add(self, grant: ShareGrant) -> None:
        with mongo_errors("insert_share"):
            await self.shares.insert_one(_to_doc(grant))

    async def get_by_id(self, share_id: UUID) -> ShareGrant:
        with mongo_errors("find_share"):
            doc = await self.shares.find_one({"_id": str(share_id)})
        if not doc:
            msg = f"Share with id {share_id} not found"
            raise RecordNotFoundError(msg)
        return _from_doc(doc)

    async def exists(self, document_id: UUID, grantee_id: UUID) -> bool:
        with mongo_errors("find_share"):
            doc = await self.shares.find_one(
                {
                    "document_id": str(document_id),
                    "grantee_id": str(grantee_id),
                },
                projection={"_id": 1},
            )
        return doc is not None

    async def list_by_document(
        self,
        document_id: UUID,
        grantor_id: UUID | None = None,
    ) -> list[ShareGrant]:
        query = {"document_id": str(document_id)}
        if grantor_id is not None:
            query["grantor_id"] = str(grantor_id)
        with mongo_errors("list_shares"):
            cursor = self.shares.find(query).sort(_NEWEST_FIRST)
            return [_from_doc(doc) async for doc in cursor]

    async def grantee_ids(self, document_id: UUID) -> set[UUID]:
        with mongo_errors("list_grantees"):
            values = await self.shares.distinct("grantee_id", {"document_id": str(document_id)})
        return {UUID(v) for v in values}

    async def count_by_document(self, document_id: UUID) -> int:
        with mongo_errors("count_shares"):
            return await self.shares.count_documents({"document_id": str(document_id)})

    async def document_ids_for_grantee(self, grantee_id: UUID) -> set[UUID]:
        with mongo_errors("list_shared_documents"):
            values = await self.shares.distinct("document_id", {"grantee_id": str(grantee_id)})
        return {UUID(v) for v in values}

    async def _page(self, query: dict, skip: int, limit: int) -> tuple[list[ShareGrant], int]:
        with mongo_errors("list_shares"):
            total = await self.shares.count_documents(query)
            cursor = self.shares.find(query).sort(_NEWEST_FIRST).skip(skip).limit(limit)
            items = [_from_doc(doc) async for doc in cursor]
        return items, total

    async def list_by_grantee(
        self,
        grantee_id: UUID,
        *,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[ShareGrant], int]:
        return await self._page({"grantee_id": str(grantee_id)}, skip, limit)

    async def list_by_grantor(
        self,
        grantor_id: UUID,
        *,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[ShareGrant], int]:
        return await self._page({"grantor_id": str(grantor_id)}, skip, limit)

    async def delete(self, share_id: UUID) -> bool:
        with mongo_errors("delete_share"):
            result = await self.shares.delete_one({"_id": str(share_id)})
        return result.deleted_count > 0

    async def delete_by_document(self, document_id: UUID) -> int:
        with mongo_errors("delete_shares"):
            result = await self.shares.delete_many({"document_id": str(document_id)})
        return result.deleted_count
