from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine
from sqlalchemy.pool import StaticPool

from SharedStore.managers import RecordManager


def create_engine(url: str, *, echo: bool = False) -> AsyncEngine:
    kwargs = {"echo": echo, "pool_pre_ping": True}
    # in-memory sqlite lives in one connection
    if url.startswith("sqlite") and (url.endswith("://") or ":memory:" in url):
        kwargs["poolclass"] = StaticPool
    return create_async_engine(url, **kwargs)


def create_record_manager(url: str, *, echo: bool = False) -> RecordManager:
    return RecordManager(create_engine(url, echo=echo))
