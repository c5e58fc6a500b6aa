from collections.abc import Collection
from typing import Any
from uuid import UUID

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import DESCENDING

from application.ports.repositories.document_repository import DocumentRepository
from domain.aggregates.document import Document
from domain.exceptions import RecordNotFoundError
from domain.value_objects.visibility import Visibility
from infrastructure.config import Settings
from infrastructure.mongo_repositories.mongo_errors import contains, mongo_errors

_NEWEST_FIRST = [("created_at", DESCENDING), ("_id", DESCENDING)]


def _to_doc(document: Document) -> dict[str, Any]:
    data = document.model_dump(exclude={"id"})
    data["_id"] = str(document.id)
    data["owner_id"] = str(document.owner_id)
    data["visibility"] = document.visibility.value
    return data


def _from_doc(doc: dict[str, Any]) -> Document:
    doc["id"] = doc.pop("_id")
    return Document(**doc)


class MongoDocumentRepository(DocumentRepository):
    def __init__(self, client: AsyncIOMotorClient, settings: Settings) -> None:
        self.client = client
        self.db = self.client[settings.mongo_db]
        self.documents = self.db[settings.mongo_documents_collection]

    async def ensure_indexes(self) -> None:
        await self.documents.create_index([("owner_id", 1), ("created_at", DESCENDING)])
        await self.documents.create_index("visibility")

    async def create(self, document: Document) -> None:
        with mongo_errors("insert_document"):
            await self.documents.insert_one(_to_doc(document))

    async def get_by_id(self, document_id: UUID) -> Document:
        with mongo_errors("find_document"):
            doc = await self.documents.find_one({"_id": str(document_id)})
        if not doc:
            msg = f"Document with id {document_id} not found"
            raise RecordNotFoundError(msg)
        return _from_doc(doc)

    async def update(self, document: Document) -> None:
        data = _to_doc(document)
        data.pop("_id")
        with mongo_errors("update_document"):
            result = await self.documents.update_one({"_id": str(document.id)}, {"$set": data})
        if result.matched_count == 0:
            msg = f"Document with id {document.id} not found"
            raise RecordNotFoundError(msg)

    async def delete(self, document_id: UUID) -> bool:
        with mongo_errors("delete_document"):
            result = await self.documents.delete_one({"_id": str(document_id)})
        return result.deleted_count > 0

    async def _page(self, query: dict, skip: int, limit: int) -> tuple[list[Document], int]:
        with mongo_errors("list_documents"):
            total = await self.documents.count_documents(query)
            cursor = self.documents.find(query).sort(_NEWEST_FIRST).skip(skip).limit(limit)
            items = [_from_doc(doc) async for doc in cursor]
        return items, total

    async def list_by_owner(  # noqa: PLR0913
        self,
        owner_id: UUID,
        *,
        search: str | None = None,
        content_type: str | None = None,
        visibility: Visibility | None = None,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[Document], int]:
        query: dict[str, Any] = {"owner_id": str(owner_id)}
        if search:
            query["title"] = contains(search)
        if content_type:
            query["content_type"] = contains(content_type)
        if visibility is not None:
            query["visibility"] = visibility.value
        return await self._page(query, skip, limit)

    async def list_by_ids(self, document_ids: Collection[UUID]) -> list[Document]:
        if not document_ids:
            return []
        with mongo_errors("list_documents_by_id"):
            cursor = self.documents.find({"_id": {"$in": [str(d) for d in document_ids]}})
            return [_from_doc(doc) async for doc in cursor]

    async def list_candidates(  # noqa: PLR0913
        self,
        *,
        owner_ids: Collection[UUID] = (),
        document_ids: Collection[UUID] = (),
        include_public: bool = True,
        include_all: bool = False,
        search: str | None = None,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[Document], int]:
        query: dict[str, Any] = {}
        if not include_all:
            branches: list[dict[str, Any]] = []
            if owner_ids:
                branches.append({"owner_id": {"$in": [str(o) for o in owner_ids]}})
            if document_ids:
                branches.append({"_id": {"$in": [str(d) for d in document_ids]}})
            if include_public:
                branches.append({"visibility": Visibility.PUBLIC.value})
            if not branches:
                return [], 0
            query["$or"] = branches
        if search:
            query["title"] = contains(search)
        return await self._page(query, skip, limit)
