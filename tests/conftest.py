"""Shared pytest fixtures for ChaosBall tests."""

import asyncio
from typing import Callable, Optional

import pytest

from chaosball.audio import AudioPlaybackScheduler, SilentAudioOutput
from chaosball.betting import ResolutionPolicy, WagerLedger
from chaosball.config import BroadcastSettings
from chaosball.core.models import (
    AudioClip,
    GameState,
    MatchSetup,
    Odds,
    PlayUpdate,
    Team,
)
from chaosball.errors import GenerationError
from chaosball.game import MatchOrchestrator


# =============================================================================
# Model Builders
# =============================================================================


def make_update(
    home: int = 0,
    away: int = 0,
    elapsed: int = 30,
    description: str = "Droid drives the lane",
    commentary: str = "What a move!",
    visual_prompt: str = "robot dunking under neon lights",
    is_big_play: bool = False,
    odds: Optional[Odds] = None,
) -> PlayUpdate:
    """Build a PlayUpdate with sensible defaults."""
    return PlayUpdate(
        home_score_delta=home,
        away_score_delta=away,
        time_elapsed_seconds=elapsed,
        play_description=description,
        commentary=commentary,
        visual_prompt=visual_prompt,
        is_big_play=is_big_play,
        new_odds=odds or Odds(home_win=1.8, away_win=2.1, over_under=1.9),
    )


SETUP = MatchSetup(
    home=Team(name="Neon Knights", color="purple", mascot="Knight"),
    away=Team(name="Chrome Crushers", color="silver", mascot="Crusher"),
    venue="The Grid Dome",
)

# 0.1s of silent 16-bit mono PCM at 24kHz
SILENT_CLIP = AudioClip(data=b"\x00\x00" * 2400)


class FixedPolicy(ResolutionPolicy):
    """Settles every pending slip the same way on every scoring play."""

    def __init__(self, outcome: Optional[bool]):
        self.outcome = outcome
        self.seen_odds: list[Odds] = []

    def applies(self, home_score_delta: int, away_score_delta: int) -> bool:
        return home_score_delta > 0 or away_score_delta > 0

    def decide(self, bet, current_odds):
        self.seen_odds.append(current_odds)
        return self.outcome


# =============================================================================
# Fake Generator
# =============================================================================


class FakeGenerator:
    """
    In-process stand-in for GenerationClient.

    Each operation pops the next queued result (or returns a default);
    queued exceptions are raised. Optional gates block a call until the
    test releases them.
    """

    def __init__(self) -> None:
        self.setup_results: list = []
        self.play_results: list = []
        self.keyframe_results: list = []
        self.audio_results: list = []
        self.replay_results: list = []

        self.calls: dict[str, int] = {
            "generate_match_setup": 0,
            "generate_next_play": 0,
            "generate_keyframe": 0,
            "generate_commentary_audio": 0,
            "generate_replay": 0,
        }
        self.play_states: list[GameState] = []
        self.keyframe_prompts: list[str] = []
        self.replay_prompts: list[str] = []

        # Called at keyframe request time; its results land in keyframe_observations.
        self.on_keyframe: Optional[Callable[[], object]] = None
        self.keyframe_observations: list = []

        self.play_gate: Optional[asyncio.Event] = None
        self.keyframe_gate: Optional[asyncio.Event] = None
        self.audio_gate: Optional[asyncio.Event] = None
        self.replay_gate: Optional[asyncio.Event] = None
        self.closed = False

    @staticmethod
    def _next(queue: list, default):
        result = queue.pop(0) if queue else default
        if isinstance(result, BaseException):
            raise result
        return result

    async def generate_match_setup(self, theme: str) -> MatchSetup:
        self.calls["generate_match_setup"] += 1
        return self._next(self.setup_results, SETUP)

    async def generate_next_play(self, state: GameState) -> PlayUpdate:
        self.calls["generate_next_play"] += 1
        self.play_states.append(state)
        if self.play_gate is not None:
            await self.play_gate.wait()
        return self._next(self.play_results, make_update())

    async def generate_keyframe(self, prompt: str) -> str:
        self.calls["generate_keyframe"] += 1
        self.keyframe_prompts.append(prompt)
        index = self.calls["generate_keyframe"]
        if self.on_keyframe is not None:
            self.keyframe_observations.append(self.on_keyframe())
        if self.keyframe_gate is not None:
            await self.keyframe_gate.wait()
        return self._next(self.keyframe_results, f"data:image/png;base64,frame{index}")

    async def generate_commentary_audio(self, text: str) -> AudioClip:
        self.calls["generate_commentary_audio"] += 1
        if self.audio_gate is not None:
            await self.audio_gate.wait()
        return self._next(self.audio_results, SILENT_CLIP)

    async def generate_replay(self, prompt: str, on_phase=None) -> str:
        self.calls["generate_replay"] += 1
        self.replay_prompts.append(prompt)
        if self.replay_gate is not None:
            await self.replay_gate.wait()
        return self._next(self.replay_results, "https://video.example/replay.mp4?key=test-key")

    async def close(self) -> None:
        self.closed = True


def generation_error(operation: str = "generate_next_play") -> GenerationError:
    return GenerationError(operation, "upstream unavailable")


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def settings() -> BroadcastSettings:
    """Deterministic settings with no real credentials or delays."""
    return BroadcastSettings(
        api_key="test-key",
        starting_wallet=1000.0,
        quarters_per_match=4,
        quarter_length="15:00",
        replay_poll_interval_seconds=0.0,
        replay_max_polls=3,
        max_retries=3,
        audio_enabled=False,
    )


@pytest.fixture
def generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture
def policy() -> FixedPolicy:
    """Leaves every slip pending."""
    return FixedPolicy(None)


@pytest.fixture
def orchestrator(generator, settings, policy) -> MatchOrchestrator:
    """Orchestrator wired to fakes and silent audio."""
    return MatchOrchestrator(
        generator,
        settings=settings,
        ledger=WagerLedger(starting_balance=settings.starting_wallet, policy=policy),
        audio=AudioPlaybackScheduler(output_factory=SilentAudioOutput),
        match_id="match-test",
    )


@pytest.fixture
def live_orchestrator(orchestrator) -> MatchOrchestrator:
    """Orchestrator whose match has already been initialized."""
    result = asyncio.run(orchestrator.initialize("Test Theme"))
    assert result.ok
    return orchestrator
