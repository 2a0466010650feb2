"""Process-wide match session for the API."""

import logging
from typing import Optional

from chaosball.ai.generation import GenerationClient
from chaosball.audio import AudioPlaybackScheduler, PygameAudioOutput, SilentAudioOutput
from chaosball.config import BroadcastSettings, get_settings
from chaosball.game import MatchOrchestrator
from chaosball.logging import BroadcastLog

logger = logging.getLogger(__name__)


def build_orchestrator(settings: Optional[BroadcastSettings] = None) -> MatchOrchestrator:
    """Wire an orchestrator, its audio output and a broadcast log from settings."""
    settings = settings or get_settings()
    output = PygameAudioOutput if settings.audio_enabled else SilentAudioOutput
    return MatchOrchestrator(
        GenerationClient.from_settings(settings),
        settings=settings,
        audio=AudioPlaybackScheduler(output_factory=output),
    )


class MatchSessionManager:
    """
    Holds the single match of this process.

    The orchestrator is created lazily on first request.
    """

    def __init__(self) -> None:
        self._orchestrator: Optional[MatchOrchestrator] = None
        self.log = BroadcastLog()

    @property
    def is_active(self) -> bool:
        return self._orchestrator is not None

    def get(self) -> MatchOrchestrator:
        if self._orchestrator is None:
            self.set(build_orchestrator())
        return self._orchestrator

    def set(self, orchestrator: MatchOrchestrator) -> None:
        """Install an orchestrator (replacing any previous one)."""
        self._orchestrator = orchestrator
        self.log = BroadcastLog()
        self.log.connect_to_event_bus(orchestrator.events)
        logger.info(f"Match session {orchestrator.state.id} installed")

    async def close(self) -> None:
        if self._orchestrator is not None:
            await self._orchestrator.close()
            self._orchestrator = None


match_session = MatchSessionManager()


def get_orchestrator() -> MatchOrchestrator:
    """FastAPI dependency returning the process-wide orchestrator."""
    return match_session.get()
