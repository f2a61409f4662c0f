"""
Document store used by the services.

``DocumentStore`` is the narrow interface the services depend on. The
duplicate-key and identifier checks live on the base class so that any
implementation reports them the same way. ``MongoStore`` is the Motor
implementation used by the running application.
"""
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

Sort = Sequence[Tuple[str, int]]

NEWEST_FIRST: Sort = (("created_at", -1),)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DocumentStore(ABC):
    """Async CRUD over a single collection of documents."""

    @abstractmethod
    async def find_one(self, filter: Dict[str, Any]) -> Optional[dict]:
        ...

    @abstractmethod
    async def find_by_id(self, id: str) -> Optional[dict]:
        ...

    @abstractmethod
    async def find(self, filter: Dict[str, Any], sort: Sort = NEWEST_FIRST) -> List[dict]:
        ...

    @abstractmethod
    async def create(self, doc: Dict[str, Any]) -> dict:
        ...

    @abstractmethod
    async def find_by_id_and_update(self, id: str, patch: Dict[str, Any]) -> Optional[dict]:
        ...

    @abstractmethod
    async def find_by_id_and_delete(self, id: str) -> Optional[dict]:
        ...

    @staticmethod
    def is_valid_id(id: Any) -> bool:
        """Structural check only; says nothing about whether a record exists."""
        return isinstance(id, (str, ObjectId)) and ObjectId.is_valid(id)

    @staticmethod
    def is_duplicate_key(error: BaseException, field: str) -> bool:
        """True when ``error`` is a unique index violation on ``field``."""
        if not isinstance(error, DuplicateKeyError):
            return False
        details = error.details or {}
        for key in ("keyPattern", "keyValue"):
            if field in (details.get(key) or {}):
                return True
        # Older servers only report the index name in the message
        return f"{field}_1" in str(error)


class MongoStore(DocumentStore):
    def __init__(self, collection: AsyncIOMotorCollection):
        self.collection = collection

    async def find_one(self, filter: Dict[str, Any]) -> Optional[dict]:
        return await self.collection.find_one(filter)

    async def find_by_id(self, id: str) -> Optional[dict]:
        return await self.collection.find_one({"_id": ObjectId(id)})

    async def find(self, filter: Dict[str, Any], sort: Sort = NEWEST_FIRST) -> List[dict]:
        cursor = self.collection.find(filter)
        if sort:
            cursor = cursor.sort(list(sort))
        return await cursor.to_list(None)

    async def create(self, doc: Dict[str, Any]) -> dict:
        now = utcnow()
        document = {**doc, "created_at": now, "updated_at": now}
        result = await self.collection.insert_one(document)
        document["_id"] = result.inserted_id
        return document

    async def find_by_id_and_update(self, id: str, patch: Dict[str, Any]) -> Optional[dict]:
        return await self.collection.find_one_and_update(
            {"_id": ObjectId(id)},
            {"$set": {**patch, "updated_at": utcnow()}},
            return_document=ReturnDocument.AFTER,
        )

    async def find_by_id_and_delete(self, id: str) -> Optional[dict]:
        return await self.collection.find_one_and_delete({"_id": ObjectId(id)})
