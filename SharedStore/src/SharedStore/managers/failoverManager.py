import logging

from SharedStore.exc.base import StoreErrorCode
from SharedStore.managers.base import Record, RecordStore

logger = logging.getLogger(__name__)


class FailoverRepository:
    """One logical store over a primary and an optional fallback backend.

    The fallback is consulted only when the primary answers with
    ``AUTHORIZATION_DENIED``. Every other failure resolves to the operation's
    empty result without touching the fallback. No state is kept between calls.
    """

    def __init__(self, primary: RecordStore, fallback: RecordStore = None):
        self.primary = primary
        self.fallback = fallback

    async def _resolve(self, operation: str, collection: str, empty, *args):
        result = await getattr(self.primary, operation)(collection, *args)
        if result.ok:
            return result.value

        if result.error is StoreErrorCode.AUTHORIZATION_DENIED and self.fallback is not None:
            logger.info(
                f"🔁 {self.primary.name} denied {operation} on {collection}, "
                f"falling back to {self.fallback.name}"
            )
            fallback_result = await getattr(self.fallback, operation)(collection, *args)
            if fallback_result.ok:
                return fallback_result.value
            logger.error(
                f"❌ {self.fallback.name} {operation} on {collection} failed too: "
                f"{fallback_result.error.name}"
            )
            return empty

        logger.warning(f"⚠️  {self.primary.name} {operation} on {collection} failed: {result.error.name}")
        return empty

    async def get_all(self, collection: str) -> list[Record]:
        return await self._resolve("get_all", collection, [])

    async def get_by_id(self, collection: str, uid: str) -> Record | None:
        return await self._resolve("get_by_id", collection, None, uid)

    async def create(self, collection: str, fields: dict) -> str | None:
        return await self._resolve("create", collection, None, fields)

    async def update(self, collection: str, uid: str, partial: dict) -> bool:
        return await self._resolve("update", collection, False, uid, partial)

    async def delete(self, collection: str, uid: str) -> bool:
        return await self._resolve("delete", collection, False, uid)
