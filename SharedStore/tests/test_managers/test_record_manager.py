import unittest
from datetime import datetime, timedelta, UTC

from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from SharedStore.exc.base import StoreErrorCode
from SharedStore.managers import RecordManager


class TickingClock:
    """Advances one second per reading so every write gets a later timestamp."""

    def __init__(self):
        self.now = datetime(2025, 1, 1, tzinfo=UTC)

    def __call__(self):
        self.now += timedelta(seconds=1)
        return self.now


class TestRecordManager(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        """Fresh in-memory database for each test."""
        self.engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
        self.manager = RecordManager(self.engine, clock=TickingClock())
        await self.manager.init_db()

    async def asyncTearDown(self):
        await self.engine.dispose()

    async def test_create_then_get(self):
        created = await self.manager.create("chemicals", {"name": "X", "type": "Fungicide"})
        self.assertTrue(created.ok)

        fetched = await self.manager.get_by_id("chemicals", created.value)
        self.assertTrue(fetched.ok)
        record = fetched.value
        self.assertEqual(created.value, record["id"])
        self.assertEqual("X", record["name"])
        self.assertEqual("Fungicide", record["type"])
        self.assertEqual(record["createdAt"], record["updatedAt"])

    async def test_create_ignores_readonly_fields(self):
        created = await self.manager.create("chemicals", {"id": "mine", "createdAt": "yesterday", "name": "X"})
        record = (await self.manager.get_by_id("chemicals", created.value)).value
        self.assertNotEqual("mine", record["id"])
        self.assertNotEqual("yesterday", record["createdAt"])

    async def test_update_bumps_updated_at_and_keeps_other_fields(self):
        uid = (await self.manager.create("chemicals", {"name": "X", "type": "Fungicide"})).value

        updated = await self.manager.update("chemicals", uid, {"name": "Y"})
        self.assertTrue(updated.ok)
        self.assertTrue(updated.value)

        record = (await self.manager.get_by_id("chemicals", uid)).value
        self.assertEqual("Y", record["name"])
        self.assertEqual("Fungicide", record["type"])
        self.assertGreater(
            datetime.fromisoformat(record["updatedAt"]),
            datetime.fromisoformat(record["createdAt"]),
        )

    async def test_update_missing_record(self):
        result = await self.manager.update("chemicals", "missing", {"name": "Y"})
        self.assertTrue(result.ok)
        self.assertFalse(result.value)

    async def test_delete(self):
        uid = (await self.manager.create("markets", {"name": "Robe"})).value

        self.assertTrue((await self.manager.delete("markets", uid)).value)
        self.assertIsNone((await self.manager.get_by_id("markets", uid)).value)

        again = await self.manager.delete("markets", uid)
        self.assertTrue(again.ok)
        self.assertFalse(again.value)

    async def test_collections_are_isolated(self):
        uid = (await self.manager.create("chemicals", {"name": "X"})).value

        self.assertIsNone((await self.manager.get_by_id("markets", uid)).value)
        self.assertEqual([], (await self.manager.get_all("markets")).value)
        self.assertEqual(1, len((await self.manager.get_all("chemicals")).value))

    async def test_unreachable_database_is_transient(self):
        engine = create_async_engine("sqlite+aiosqlite:////nonexistent-dir/agroguard.db")
        manager = RecordManager(engine)

        result = await manager.get_all("chemicals")
        self.assertFalse(result.ok)
        self.assertIs(StoreErrorCode.TRANSIENT, result.error)
        await engine.dispose()


if __name__ == '__main__':
    unittest.main()
