import unittest

from SharedStore.exc.base import StoreErrorCode
from SharedStore.managers import FailoverRepository, StoreResult


class ScriptedStore:
    """Answers every operation with the same result and counts the calls."""

    def __init__(self, name: str, result: StoreResult):
        self.name = name
        self.result = result
        self.calls = []

    def _answer(self, operation):
        async def call(collection, *args):
            self.calls.append((operation, collection, *args))
            return self.result

        return call

    def __getattr__(self, operation):
        if operation in {"get_all", "get_by_id", "create", "update", "delete"}:
            return self._answer(operation)
        raise AttributeError(operation)


def denied():
    return StoreResult.failure(StoreErrorCode.AUTHORIZATION_DENIED, "permission denied")


class TestFailoverRepository(unittest.IsolatedAsyncioTestCase):
    async def test_primary_success_never_touches_fallback(self):
        primary = ScriptedStore("primary", StoreResult.success([{"id": "1"}]))
        fallback = ScriptedStore("fallback", StoreResult.success([{"id": "2"}]))
        repository = FailoverRepository(primary, fallback)

        self.assertEqual([{"id": "1"}], await repository.get_all("diseases"))
        self.assertEqual(1, len(primary.calls))
        self.assertEqual(0, len(fallback.calls))

    async def test_authorization_denied_uses_fallback(self):
        primary = ScriptedStore("primary", denied())
        fallback = ScriptedStore("fallback", StoreResult.success([{"id": "2"}]))
        repository = FailoverRepository(primary, fallback)

        self.assertEqual([{"id": "2"}], await repository.get_all("diseases"))
        self.assertEqual([("get_all", "diseases")], fallback.calls)

    async def test_fallback_receives_the_same_arguments(self):
        primary = ScriptedStore("primary", denied())
        fallback = ScriptedStore("fallback", StoreResult.success(True))
        repository = FailoverRepository(primary, fallback)

        self.assertTrue(await repository.update("markets", "m1", {"name": "Robe"}))
        self.assertEqual([("update", "markets", "m1", {"name": "Robe"})], fallback.calls)

    async def test_other_errors_yield_empty_results_without_fallback(self):
        for error in (StoreErrorCode.TRANSIENT, StoreErrorCode.UNKNOWN, StoreErrorCode.MALFORMED,
                      StoreErrorCode.VALIDATION):
            with self.subTest(error=error):
                primary = ScriptedStore("primary", StoreResult.failure(error))
                fallback = ScriptedStore("fallback", StoreResult.success("unused"))
                repository = FailoverRepository(primary, fallback)

                self.assertEqual([], await repository.get_all("diseases"))
                self.assertIsNone(await repository.get_by_id("diseases", "d1"))
                self.assertIsNone(await repository.create("diseases", {"name": {"en": "X"}}))
                self.assertFalse(await repository.update("diseases", "d1", {}))
                self.assertFalse(await repository.delete("diseases", "d1"))
                self.assertEqual(0, len(fallback.calls))

    async def test_fallback_failure_yields_empty_result(self):
        primary = ScriptedStore("primary", denied())
        fallback = ScriptedStore("fallback", StoreResult.failure(StoreErrorCode.TRANSIENT))
        repository = FailoverRepository(primary, fallback)

        self.assertIsNone(await repository.get_by_id("comments", "c1"))
        self.assertEqual(1, len(fallback.calls))

    async def test_denied_without_fallback_yields_empty_result(self):
        repository = FailoverRepository(ScriptedStore("primary", denied()))
        self.assertFalse(await repository.delete("comments", "c1"))

    async def test_missing_record_is_not_an_error(self):
        primary = ScriptedStore("primary", StoreResult.success(None))
        fallback = ScriptedStore("fallback", StoreResult.success({"id": "c1"}))
        repository = FailoverRepository(primary, fallback)

        self.assertIsNone(await repository.get_by_id("comments", "c1"))
        self.assertEqual(0, len(fallback.calls))


if __name__ == '__main__':
    unittest.main()
