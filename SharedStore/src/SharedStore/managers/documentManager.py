import logging
import uuid

from bson.errors import BSONError
from pymongo import AsyncMongoClient
from pymongo.errors import ConnectionFailure, OperationFailure, PyMongoError

from SharedStore.exc.base import StoreErrorCode
from SharedStore.managers.base import Clock, Record, StoreResult, utcnow, isoformat, strip_readonly

logger = logging.getLogger(__name__)

# Unauthorized, AuthenticationFailed
AUTHORIZATION_DENIED_CODES = frozenset({13, 18})


class DocumentRecordStore:
    """Primary Record Store on a MongoDB database, one collection per entity type."""

    name = "mongodb"

    def __init__(self, database, *, client: AsyncMongoClient = None, clock: Clock = utcnow):
        self.database = database
        self.client = client
        self.clock = clock

    @classmethod
    def from_uri(cls, uri: str, database: str, **kwargs) -> "DocumentRecordStore":
        client = AsyncMongoClient(uri, serverSelectionTimeoutMS=7000)
        return cls(client[database], client=client, **kwargs)

    async def close(self):
        """Close the client opened by ``from_uri``; a store built on a bare database has none."""
        if self.client is not None:
            await self.client.close()
            self.client = None

    @staticmethod
    def classify(error: Exception) -> StoreErrorCode:
        if isinstance(error, OperationFailure) and error.code in AUTHORIZATION_DENIED_CODES:
            return StoreErrorCode.AUTHORIZATION_DENIED
        if isinstance(error, ConnectionFailure):
            return StoreErrorCode.TRANSIENT
        if isinstance(error, BSONError):
            return StoreErrorCode.MALFORMED
        return StoreErrorCode.UNKNOWN

    @staticmethod
    def _to_record(document: dict) -> Record:
        data = dict(document)
        uid = data.pop("_id")
        return {**data, "id": str(uid)}

    async def _call(self, collection: str, operation: str, call) -> StoreResult:
        try:
            return StoreResult.success(await call(self.database[collection]))
        except (PyMongoError, BSONError) as e:
            kind = self.classify(e)
            logger.error(f"❌ MongoDB {operation} on {collection} failed ({kind.name}): {e}")
            return StoreResult.failure(kind, str(e))

    async def get_all(self, collection: str) -> StoreResult[list[Record]]:
        async def call(coll):
            documents = await coll.find({}).to_list(None)
            return [self._to_record(document) for document in documents]

        return await self._call(collection, "get_all", call)

    async def get_by_id(self, collection: str, uid: str) -> StoreResult[Record | None]:
        async def call(coll):
            document = await coll.find_one({"_id": uid})
            return self._to_record(document) if document else None

        return await self._call(collection, "get_by_id", call)

    async def create(self, collection: str, fields: dict) -> StoreResult[str]:
        async def call(coll):
            uid = f"{uuid.uuid4()}"
            now = isoformat(self.clock())
            await coll.insert_one({**strip_readonly(fields), "_id": uid, "createdAt": now, "updatedAt": now})
            return uid

        return await self._call(collection, "create", call)

    async def update(self, collection: str, uid: str, partial: dict) -> StoreResult[bool]:
        async def call(coll):
            changes = {**strip_readonly(partial), "updatedAt": isoformat(self.clock())}
            result = await coll.update_one({"_id": uid}, {"$set": changes})
            return result.matched_count > 0

        return await self._call(collection, "update", call)

    async def delete(self, collection: str, uid: str) -> StoreResult[bool]:
        async def call(coll):
            result = await coll.delete_one({"_id": uid})
            return result.deleted_count > 0

        return await self._call(collection, "delete", call)
