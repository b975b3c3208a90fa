import asyncio
import unittest

from agroguard.config import Settings
from agroguard.exceptions import AnalysisInputError, ProviderError, ProviderFailure
from agroguard.schemas.analysis import AnalysisResult
from agroguard.services.analysis import AnalysisOrchestrator, AnalysisState, build_orchestrator
from agroguard.services.gemini import GeminiProvider

from fakes import FakeGenaiClient, instant_simulator, make_settings

IDLE, REMOTE, FALLBACK, DONE = (
    AnalysisState.IDLE, AnalysisState.REMOTE_ATTEMPT, AnalysisState.FALLBACK, AnalysisState.DONE,
)


class StubRemote:
    name = "stub"

    def __init__(self, result: AnalysisResult = None, error: Exception = None, delay: float = 0):
        self.result = result
        self.error = error
        self.delay = delay
        self.calls = 0

    async def analyze(self, image_bytes, mime_type="image/jpeg"):
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return self.result


class TestAnalysisOrchestrator(unittest.IsolatedAsyncioTestCase):
    async def test_without_remote_uses_simulator(self):
        orchestrator = AnalysisOrchestrator(instant_simulator())
        outcome = await orchestrator.analyze(bytes(5000))

        self.assertEqual("simulator", outcome.provider)
        self.assertEqual([IDLE, FALLBACK, DONE], outcome.states)
        self.assertIsNone(outcome.remote_failure)

    async def test_remote_success(self):
        remote = StubRemote(AnalysisResult(detected=True, disease_name="Wheat Rust", confidence=91))
        outcome = await AnalysisOrchestrator(instant_simulator(), remote).analyze(bytes(5000))

        self.assertEqual("stub", outcome.provider)
        self.assertEqual("Wheat Rust", outcome.result.disease_name)
        self.assertEqual([IDLE, REMOTE, DONE], outcome.states)

    async def test_quota_message_falls_back_to_simulator(self):
        client = FakeGenaiClient(error=RuntimeError("Quota exceeded for requests per minute"))
        remote = GeminiProvider(client=client)
        outcome = await AnalysisOrchestrator(instant_simulator(), remote).analyze(bytes(5000))

        self.assertEqual("simulator", outcome.provider)
        self.assertEqual("Late Blight", outcome.result.disease_name)
        self.assertIs(ProviderFailure.QUOTA_EXHAUSTED, outcome.remote_failure)
        self.assertEqual([IDLE, REMOTE, FALLBACK, DONE], outcome.states)
        self.assertEqual(1, len(client.models.calls))

    async def test_any_provider_failure_falls_back_once(self):
        for failure in ProviderFailure:
            with self.subTest(failure=failure):
                remote = StubRemote(error=ProviderError(failure))
                outcome = await AnalysisOrchestrator(instant_simulator(), remote).analyze(bytes(5000))
                self.assertEqual("simulator", outcome.provider)
                self.assertIs(failure, outcome.remote_failure)
                self.assertEqual(1, remote.calls)
                self.assertEqual(len(outcome.states), len(set(outcome.states)))

    async def test_simulator_only_skips_remote(self):
        remote = StubRemote(AnalysisResult(detected=True))
        orchestrator = AnalysisOrchestrator(instant_simulator(), remote, simulator_only=True)
        outcome = await orchestrator.analyze(bytes(5000))

        self.assertEqual(0, remote.calls)
        self.assertEqual([IDLE, FALLBACK, DONE], outcome.states)

    async def test_caller_timeout_bounds_remote(self):
        remote = StubRemote(AnalysisResult(detected=True), delay=1)
        orchestrator = AnalysisOrchestrator(instant_simulator(), remote)
        outcome = await orchestrator.analyze(bytes(5000), timeout=0.01)

        self.assertEqual("simulator", outcome.provider)
        self.assertIs(ProviderFailure.TIMEOUT, outcome.remote_failure)

    async def test_invalid_input_propagates(self):
        with self.assertRaises(AnalysisInputError):
            await AnalysisOrchestrator(instant_simulator()).analyze(bytes(10))

    def test_build_orchestrator_from_settings(self):
        orchestrator = build_orchestrator(make_settings(GEMINI_API_KEY=None, USE_MOCK_AI=False))
        self.assertIsNone(orchestrator.remote)
        self.assertFalse(orchestrator.remote_enabled)

        orchestrator = build_orchestrator(make_settings(GEMINI_API_KEY="key", USE_MOCK_AI=True, ANALYSIS_TIMEOUT=5))
        self.assertIsInstance(orchestrator.remote, GeminiProvider)
        self.assertFalse(orchestrator.remote_enabled)
        self.assertEqual(5, orchestrator.timeout)

    def test_blank_api_key_means_not_configured(self):
        settings = make_settings(GEMINI_API_KEY="   ", USE_MOCK_AI=False)
        self.assertIsInstance(settings, Settings)
        self.assertIsNone(settings.GEMINI_API_KEY)
        self.assertFalse(settings.remote_analysis_enabled)


if __name__ == '__main__':
    unittest.main()
