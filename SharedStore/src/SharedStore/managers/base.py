import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, UTC
from typing import Callable, Protocol, Any

import sqlalchemy as db
from sqlalchemy.exc import SQLAlchemyError, OperationalError, InterfaceError
from sqlalchemy.ext.asyncio import AsyncSession, AsyncEngine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from SharedStore.exc.base import StoreErrorCode


logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
Record = dict[str, Any]

READONLY_FIELDS = frozenset({"id", "_id", "createdAt", "updatedAt"})


def utcnow() -> datetime:
    return datetime.now(UTC)


def isoformat(value: datetime) -> str:
    # sqlite hands back naive datetimes
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat()


def strip_readonly(fields: dict) -> dict:
    return {key: value for key, value in fields.items() if key not in READONLY_FIELDS}


@dataclass(frozen=True)
class StoreResult[T]:
    """Outcome of one Record Store call: either a value or a closed error kind.

    A missing record is not an error: ``get_by_id`` succeeds with ``None`` and
    ``update``/``delete`` succeed with ``False``.
    """
    value: T | None = None
    error: StoreErrorCode | None = None
    detail: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "StoreResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: StoreErrorCode, detail: str = None) -> "StoreResult[T]":
        return cls(error=error, detail=detail)


class RecordStore(Protocol):
    name: str

    async def get_all(self, collection: str) -> StoreResult[list[Record]]: ...

    async def get_by_id(self, collection: str, uid: str) -> StoreResult[Record | None]: ...

    async def create(self, collection: str, fields: dict) -> StoreResult[str]: ...

    async def update(self, collection: str, uid: str, partial: dict) -> StoreResult[bool]: ...

    async def delete(self, collection: str, uid: str) -> StoreResult[bool]: ...


class BaseSchema(DeclarativeBase):
    __abstract__ = True

    uid = db.Column(db.String, primary_key=True, default=lambda: f"{uuid.uuid4()}")
    created_at = db.Column(db.DateTime(timezone=True), nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False)


class RecordSchema(BaseSchema):
    __tablename__ = "records"

    collection = db.Column(db.String, nullable=False, index=True)
    data = db.Column(db.JSON, nullable=False, default=dict)

    def model_dump(self) -> Record:
        return {
            **(self.data or {}),
            "id": self.uid,
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }


class RecordManager:
    """SQL-backed Record Store, one ``records`` table shared by every collection."""

    name = "sql"

    def __init__(self, engine: AsyncEngine, *, clock: Clock = utcnow):
        self.engine = engine
        self.clock = clock
        self.session_factory = sessionmaker(  # noqa
            bind=self.engine, class_=AsyncSession, expire_on_commit=False,
        )

    async def init_db(self):
        async with self.engine.begin() as conn:
            await conn.run_sync(BaseSchema.metadata.create_all)

    async def _with_session(self, collection: str, call, *, commit: bool = False) -> StoreResult:
        try:
            async with self.session_factory() as session:
                result = await call(session)
                if commit and result.ok:
                    await session.commit()
                return result
        except (OperationalError, InterfaceError) as e:
            logger.error(f"❌ SQL store unreachable for {collection}: {e}")
            return StoreResult.failure(StoreErrorCode.TRANSIENT, str(e))
        except SQLAlchemyError as e:
            logger.error(f"❌ SQL store error for {collection}: {e}")
            return StoreResult.failure(StoreErrorCode.UNKNOWN, str(e))

    async def _fetch(self, session: AsyncSession, collection: str, uid: str) -> RecordSchema | None:
        record = await session.get(RecordSchema, uid)
        if record is None or record.collection != collection:
            return None
        return record

    async def get_all(self, collection: str, *, session: AsyncSession = None) -> StoreResult[list[Record]]:
        if session:
            query = db.select(RecordSchema).filter_by(collection=collection)
            records = await session.execute(query)
            return StoreResult.success([record.model_dump() for record in records.scalars()])
        return await self._with_session(
            collection, lambda s: RecordManager.get_all(self, collection, session=s)
        )

    async def get_by_id(self, collection: str, uid: str, *, session: AsyncSession = None) -> StoreResult[Record | None]:
        if session:
            record = await self._fetch(session, collection, uid)
            return StoreResult.success(record.model_dump() if record else None)
        return await self._with_session(
            collection, lambda s: RecordManager.get_by_id(self, collection, uid, session=s)
        )

    async def create(self, collection: str, fields: dict, *, session: AsyncSession = None) -> StoreResult[str]:
        if session:
            now = self.clock()
            record = RecordSchema(
                uid=f"{uuid.uuid4()}",
                collection=collection,
                data=strip_readonly(fields),
                created_at=now,
                updated_at=now,
            )
            session.add(record)
            await session.flush()
            return StoreResult.success(record.uid)
        return await self._with_session(
            collection, lambda s: RecordManager.create(self, collection, fields, session=s), commit=True
        )

    async def update(self, collection: str, uid: str, partial: dict, *, session: AsyncSession = None) -> StoreResult[bool]:
        if session:
            record = await self._fetch(session, collection, uid)
            if record is None:
                return StoreResult.success(False)
            # reassign so the JSON column is flagged dirty
            record.data = {**(record.data or {}), **strip_readonly(partial)}
            record.updated_at = self.clock()
            await session.flush()
            return StoreResult.success(True)
        return await self._with_session(
            collection, lambda s: RecordManager.update(self, collection, uid, partial, session=s), commit=True
        )

    async def delete(self, collection: str, uid: str, *, session: AsyncSession = None) -> StoreResult[bool]:
        if session:
            record = await self._fetch(session, collection, uid)
            if record is None:
                return StoreResult.success(False)
            await session.delete(record)
            await session.flush()
            return StoreResult.success(True)
        return await self._with_session(
            collection, lambda s: RecordManager.delete(self, collection, uid, session=s), commit=True
        )


__all__ = [
    "Record", "RecordStore", "StoreResult",
    "BaseSchema", "RecordSchema", "RecordManager",
    "utcnow", "isoformat", "strip_readonly",
]
