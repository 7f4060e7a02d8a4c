from typing import Any, Protocol

from bson.int64 import Int64
from pydantic import BaseModel, ConfigDict
from pymongo import ReturnDocument
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError, PyMongoError

from mongoseq.errors import StoreUnavailableError

Document = dict[str, Any]


class MongoModel(BaseModel):
    """Model read from a MongoDB document, fields may be filled by alias (`_id`) or by name."""

    model_config = ConfigDict(populate_by_name=True)


class Store(Protocol):
    """Point operations on records keyed by a string primary key."""

    async def find_one(self, collection_name: str, key: str) -> Document | None: ...

    async def upsert(self, collection_name: str, key: str, fields: Document) -> None: ...

    async def insert_if_absent(self, collection_name: str, key: str, fields: Document) -> bool: ...

    async def atomic_increment(self, collection_name: str, key: str, field: str, amount: int) -> Document | None: ...


def _to_bson(fields: Document) -> Document:
    # Plain ints are stored as int32 when they fit; counters must stay int64
    return {k: Int64(v) if isinstance(v, int) and not isinstance(v, bool) else v for k, v in fields.items()}


class MongoStore:
    """Store backed by a MongoDB database, one document per key in `_id`.

    The database handle is borrowed; closing the client is the caller's job.
    """

    def __init__(self, database: AsyncDatabase[Document]) -> None:
        self.database = database

    async def find_one(self, collection_name: str, key: str) -> Document | None:
        try:
            return await self.database.get_collection(collection_name).find_one({"_id": key})
        except PyMongoError as e:
            raise StoreUnavailableError(f"find_one on '{collection_name}' failed: {e}") from e

    async def upsert(self, collection_name: str, key: str, fields: Document) -> None:
        """Create or replace the given fields of the record."""
        try:
            await self.database.get_collection(collection_name).update_one(
                {"_id": key}, {"$set": _to_bson(fields)}, upsert=True
            )
        except PyMongoError as e:
            raise StoreUnavailableError(f"upsert on '{collection_name}' failed: {e}") from e

    async def insert_if_absent(self, collection_name: str, key: str, fields: Document) -> bool:
        """Create the record only if no record with this key exists. Return True if created."""
        try:
            result = await self.database.get_collection(collection_name).update_one(
                {"_id": key}, {"$setOnInsert": _to_bson(fields)}, upsert=True
            )
        except DuplicateKeyError:
            # Concurrent upserts on the same _id: the other one won
            return False
        except PyMongoError as e:
            raise StoreUnavailableError(f"insert_if_absent on '{collection_name}' failed: {e}") from e
        return result.upserted_id is not None

    async def atomic_increment(self, collection_name: str, key: str, field: str, amount: int) -> Document | None:
        """Atomically add amount to field and return the updated record, or None if absent."""
        try:
            return await self.database.get_collection(collection_name).find_one_and_update(
                {"_id": key},
                {"$inc": {field: Int64(amount)}},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            raise StoreUnavailableError(f"atomic_increment on '{collection_name}' failed: {e}") from e
