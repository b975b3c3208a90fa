import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from agroguard.exceptions import ProviderError, ProviderFailure
from agroguard.schemas.analysis import AnalysisResult
from agroguard.services.gemini import GeminiProvider
from agroguard.services.simulator import SimulatorProvider

logger = logging.getLogger(__name__)


class AnalysisState(str, Enum):
    IDLE = "idle"
    REMOTE_ATTEMPT = "remote_attempt"
    FALLBACK = "fallback"
    DONE = "done"


@dataclass
class AnalysisOutcome:
    result: AnalysisResult
    provider: str
    states: list[AnalysisState] = field(default_factory=list)
    remote_failure: Optional[ProviderFailure] = None


class AnalysisOrchestrator:
    """
    Picks the provider for one analysis.

    IDLE -> REMOTE_ATTEMPT when a remote provider is configured and
    simulator-only mode is off, otherwise IDLE -> FALLBACK. Any provider
    failure in REMOTE_ATTEMPT moves to FALLBACK. The remote provider is
    called at most once per analysis; invalid input raised by the simulator
    propagates to the caller.
    """

    def __init__(
        self,
        simulator: SimulatorProvider,
        remote=None,
        *,
        simulator_only: bool = False,
        timeout: Optional[float] = None,
    ):
        self.simulator = simulator
        self.remote = remote
        self.simulator_only = simulator_only
        self.timeout = timeout

    @property
    def remote_enabled(self) -> bool:
        return self.remote is not None and not self.simulator_only

    async def _attempt_remote(self, image_bytes: bytes, mime_type: str, timeout: Optional[float]) -> AnalysisResult:
        call = self.remote.analyze(image_bytes, mime_type=mime_type)
        if timeout is None:
            return await call
        try:
            return await asyncio.wait_for(call, timeout)
        except TimeoutError as e:
            raise ProviderError(ProviderFailure.TIMEOUT, f"no answer within {timeout}s") from e

    async def analyze(
        self,
        image_bytes: bytes,
        mime_type: str = "image/jpeg",
        timeout: Optional[float] = None,
    ) -> AnalysisOutcome:
        states = [AnalysisState.IDLE]
        remote_failure = None

        if self.remote_enabled:
            states.append(AnalysisState.REMOTE_ATTEMPT)
            try:
                result = await self._attempt_remote(
                    image_bytes, mime_type, timeout if timeout is not None else self.timeout
                )
                states.append(AnalysisState.DONE)
                logger.info(f"✅ {self.remote.name} verdict: {result.disease_name}")
                return AnalysisOutcome(result=result, provider=self.remote.name, states=states)
            except ProviderError as e:
                remote_failure = e.failure
                logger.warning(f"🔄 {self.remote.name} failed ({e.failure.name}), falling back to simulator: {e}")
        else:
            logger.info("🤖 Using simulator for analysis...")

        states.append(AnalysisState.FALLBACK)
        result = await self.simulator.analyze(image_bytes)
        states.append(AnalysisState.DONE)
        return AnalysisOutcome(
            result=result,
            provider=self.simulator.name,
            states=states,
            remote_failure=remote_failure,
        )


def build_orchestrator(settings) -> AnalysisOrchestrator:
    remote = None
    if settings.GEMINI_API_KEY:
        remote = GeminiProvider(api_key=settings.GEMINI_API_KEY, model=settings.GEMINI_MODEL)
    else:
        logger.warning("⚠️  GEMINI_API_KEY not found. Using the simulator for analysis.")

    return AnalysisOrchestrator(
        SimulatorProvider(),
        remote,
        simulator_only=settings.USE_MOCK_AI,
        timeout=settings.ANALYSIS_TIMEOUT,
    )
