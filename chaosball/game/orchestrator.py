"""
Match Orchestrator

Owns the match state, the on-screen visual and the wager ledger, and
sequences the broadcast:

    initialize()    setup call -> arena keyframe -> PLAYING
    advance_play()  play call -> atomic commit -> image + audio fan-out
                    -> bet resolution
    request_replay() background video job, polled to completion

At most one setup or play call is in flight; a second request while
busy is rejected as a no-op, never queued. Replays have their own busy
state. Failures are caught at each operation boundary, logged, emitted
as OperationFailedEvent and returned to the caller; none of them leave
a busy state stuck.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from chaosball.ai.generation import GenerationClient
from chaosball.ai.prompts import ARENA_PROMPT_TEMPLATE, INTRO_COMMENTARY_TEMPLATE
from chaosball.ai.replay import ReplayJob
from chaosball.audio.scheduler import AudioPlaybackScheduler
from chaosball.betting.ledger import WagerLedger
from chaosball.betting.policy import RandomResolutionPolicy
from chaosball.config import BroadcastSettings, get_settings
from chaosball.core.models import (
    Bet,
    BetType,
    GameState,
    GameStatus,
    GeneratedVisual,
    PlayUpdate,
)
from chaosball.errors import (
    BetRejected,
    ChaosBallError,
    MediaGenerationFailure,
    PlayGenerationFailure,
    ReplayFailure,
    SetupFailure,
)
from chaosball.events import (
    BetPlacedEvent,
    BetsResolvedEvent,
    CommentaryPlayedEvent,
    EventBus,
    MatchFinishedEvent,
    MatchStartedEvent,
    OperationFailedEvent,
    ReplayStatusEvent,
    StateCommittedEvent,
    VisualChangedEvent,
)
from chaosball.game.rules import apply_play, roll_quarter

logger = logging.getLogger(__name__)


class Activity(Enum):
    """Play/setup activity. PROCESSING blocks re-entry."""

    IDLE = "idle"
    PROCESSING = "processing"


@dataclass
class OperationResult:
    """What an orchestrator operation did."""

    operation: str
    accepted: bool = True
    reason: Optional[str] = None  # Why a request was rejected or discarded
    error: Optional[ChaosBallError] = None

    @property
    def ok(self) -> bool:
        return self.accepted and self.error is None


@dataclass
class PlayOutcome(OperationResult):
    """Result of one advance_play() call."""

    update: Optional[PlayUpdate] = None
    state: Optional[GameState] = None
    media_error: Optional[MediaGenerationFailure] = None
    resolved_bets: list[Bet] = field(default_factory=list)

    @property
    def advanced(self) -> bool:
        """Whether a play was committed (media may still have failed)."""
        return self.ok and self.state is not None


class MatchOrchestrator:
    """
    Runs one ChaosBall match.

    Usage:
        orchestrator = MatchOrchestrator(GenerationClient.from_settings())
        await orchestrator.initialize()
        outcome = await orchestrator.advance_play()
        orchestrator.place_bet(BetType.HOME_WIN, 100)
    """

    def __init__(
        self,
        generator: GenerationClient,
        settings: Optional[BroadcastSettings] = None,
        ledger: Optional[WagerLedger] = None,
        audio: Optional[AudioPlaybackScheduler] = None,
        event_bus: Optional[EventBus] = None,
        match_id: Optional[str] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.generator = generator
        self.ledger = ledger or WagerLedger(
            starting_balance=self.settings.starting_wallet,
            policy=RandomResolutionPolicy(
                resolve_probability=self.settings.resolve_probability,
                win_probability=self.settings.win_probability,
            ),
        )
        self.audio = audio or AudioPlaybackScheduler()
        self.events = event_bus or EventBus()

        self._state = GameState.initial(match_id, quarter_length=self.settings.quarter_length)
        self._visual: Optional[GeneratedVisual] = None
        self._activity = Activity.IDLE
        self._replaying = False
        self._replay_task: Optional[asyncio.Task] = None

    # =========================================================================
    # Snapshots
    # =========================================================================

    @property
    def state(self) -> GameState:
        """Current immutable match snapshot."""
        return self._state

    @property
    def visual(self) -> Optional[GeneratedVisual]:
        return self._visual

    @property
    def is_processing(self) -> bool:
        return self._activity is Activity.PROCESSING

    @property
    def is_replaying(self) -> bool:
        return self._replaying

    @property
    def replay_task(self) -> Optional[asyncio.Task]:
        """The most recent replay task, if any."""
        return self._replay_task

    @property
    def wallet(self) -> float:
        return self.ledger.wallet

    @property
    def bets(self) -> tuple[Bet, ...]:
        return self.ledger.bets

    async def close(self) -> None:
        """Release the generation client."""
        await self.generator.close()

    # =========================================================================
    # Notifications
    # =========================================================================

    def _emit(self, event_type, **kwargs) -> None:
        self.events.emit(event_type.from_state(self._state, **kwargs))

    def _report_failure(self, operation: str, error: ChaosBallError) -> None:
        cause = error.__cause__
        if cause is not None and not isinstance(cause, ChaosBallError):
            logger.error(f"{operation} failed: {error}", exc_info=cause)
        else:
            logger.error(f"{operation} failed: {error}")
        self._emit(OperationFailedEvent, operation=operation, error=error)

    # =========================================================================
    # Setup
    # =========================================================================

    async def initialize(self, theme: Optional[str] = None) -> OperationResult:
        """
        Generate teams and venue, render the arena and go live.

        Nothing is applied unless both the setup call and the arena
        keyframe succeed; on failure the match stays IDLE with its
        placeholder teams.
        """
        operation = "initialize"
        if self.is_processing:
            return OperationResult(operation, accepted=False, reason="busy")
        if self._state.status is not GameStatus.IDLE:
            return OperationResult(
                operation, accepted=False, reason=f"match is {self._state.status.value}"
            )

        self._activity = Activity.PROCESSING
        try:
            theme = theme or self.settings.theme
            try:
                setup = await self.generator.generate_match_setup(theme)
                arena_prompt = ARENA_PROMPT_TEMPLATE.format(venue=setup.venue)
                image_url = await self.generator.generate_keyframe(arena_prompt)
            except Exception as e:
                failure = SetupFailure(f"Match setup failed: {e}")
                failure.__cause__ = e
                self._report_failure(operation, failure)
                return OperationResult(operation, error=failure)

            self._state = GameState(
                id=self._state.id,
                home_team=setup.home,
                away_team=setup.away,
                time_remaining=self._state.time_remaining,
                commentary=INTRO_COMMENTARY_TEMPLATE.format(
                    venue=setup.venue, home=setup.home.name, away=setup.away.name
                ),
                status=GameStatus.PLAYING,
                venue=setup.venue,
            )
            self._visual = GeneratedVisual.image(image_url, arena_prompt)
            logger.info(f"Match {self._state.id} live from {setup.venue}")
            self._emit(MatchStartedEvent, venue=setup.venue)
            self._emit(VisualChangedEvent, visual=self._visual)
            return OperationResult(operation)
        finally:
            self._activity = Activity.IDLE

    # =========================================================================
    # Play loop
    # =========================================================================

    async def advance_play(self) -> PlayOutcome:
        """
        Run one play.

        Rejected as a no-op while another setup/play call is in flight
        or when the match is not PLAYING.
        """
        operation = "advance_play"
        if self.is_processing:
            return PlayOutcome(operation, accepted=False, reason="busy")
        if self._state.status is not GameStatus.PLAYING:
            return PlayOutcome(
                operation, accepted=False, reason=f"match is {self._state.status.value}"
            )

        self._activity = Activity.PROCESSING
        try:
            return await self._play_turn(operation)
        finally:
            self._activity = Activity.IDLE

    async def _play_turn(self, operation: str) -> PlayOutcome:
        base = roll_quarter(
            self._state,
            quarter_length=self.settings.quarter_length,
            quarters_per_match=self.settings.quarters_per_match,
        )

        try:
            update = await self.generator.generate_next_play(base)
        except Exception as e:
            failure = PlayGenerationFailure(f"Play generation failed: {e}")
            failure.__cause__ = e
            self._report_failure(operation, failure)
            return PlayOutcome(operation, error=failure)

        new_state = apply_play(base, update, self.settings.quarters_per_match)
        home_delta = new_state.home_score - base.home_score
        away_delta = new_state.away_score - base.away_score

        # Single assignment: observers see the whole play or none of it
        self._state = new_state
        logger.info(
            f"Play {new_state.play_count}: Q{new_state.quarter} {new_state.time_remaining} "
            f"{new_state.home_score}-{new_state.away_score} | {update.play_description}"
        )
        self._emit(
            StateCommittedEvent,
            home_score_delta=home_delta,
            away_score_delta=away_delta,
            is_big_play=update.is_big_play,
        )
        if new_state.status is GameStatus.FINISHED:
            logger.info(f"Match {new_state.id} finished {new_state.home_score}-{new_state.away_score}")
            self._emit(MatchFinishedEvent)

        media_error = await self._render_media(update)

        resolved = self.ledger.resolve_pending(home_delta, away_delta, update.new_odds)
        if resolved:
            self._emit(BetsResolvedEvent, bets=resolved, wallet=self.ledger.wallet)

        return PlayOutcome(
            operation,
            update=update,
            state=new_state,
            media_error=media_error,
            resolved_bets=resolved,
        )

    async def _render_media(self, update: PlayUpdate) -> Optional[MediaGenerationFailure]:
        """
        Fan out keyframe and speech requests and join them.

        Neither request cancels the other. The visual swaps and audio
        starts only after both have finished; each channel that failed is
        reported without rolling back the committed play.
        """
        image_task = asyncio.create_task(self.generator.generate_keyframe(update.visual_prompt))
        audio_task = asyncio.create_task(
            self.generator.generate_commentary_audio(update.commentary)
        )
        image_result, audio_result = await asyncio.gather(
            image_task, audio_task, return_exceptions=True
        )

        failures: dict[str, Exception] = {}

        if isinstance(image_result, BaseException):
            failures["image"] = image_result
        else:
            self._visual = GeneratedVisual.image(image_result, update.visual_prompt)
            self._emit(VisualChangedEvent, visual=self._visual)

        if isinstance(audio_result, BaseException):
            failures["audio"] = audio_result
        else:
            try:
                pcm = await self.audio.play_audio(audio_result)
            except Exception as e:
                failures["audio"] = e
            else:
                self._emit(
                    CommentaryPlayedEvent,
                    text=update.commentary,
                    duration_seconds=pcm.duration_seconds,
                )

        if not failures:
            return None
        failure = MediaGenerationFailure(failures)
        self._report_failure("render_media", failure)
        return failure

    # =========================================================================
    # Replay
    # =========================================================================

    def request_replay(self) -> Optional[asyncio.Task]:
        """
        Start an instant replay of the current visual in the background.

        Must be called from a running event loop. Returns the replay task
        (resolving to an OperationResult), or None when rejected: no
        visual, a replay already running, or a play in flight.
        """
        if self._visual is None or not self._visual.prompt:
            logger.info("Replay rejected: nothing on screen to replay")
            return None
        if self._replaying:
            logger.info("Replay rejected: replay already in progress")
            return None
        if self.is_processing:
            logger.info("Replay rejected: play in progress")
            return None

        self._replaying = True
        self._replay_task = asyncio.create_task(self._run_replay(self._visual))
        return self._replay_task

    def _on_replay_phase(self, job: ReplayJob) -> None:
        self._emit(ReplayStatusEvent, phase=job.phase, polls=job.polls)

    async def _run_replay(self, source: GeneratedVisual) -> OperationResult:
        operation = "request_replay"
        try:
            try:
                video_url = await self.generator.generate_replay(
                    source.prompt, on_phase=self._on_replay_phase
                )
            except Exception as e:
                failure = ReplayFailure(f"Replay failed: {e}")
                failure.__cause__ = e
                self._report_failure(operation, failure)
                return OperationResult(operation, error=failure)

            if self._visual != source:
                # A newer play replaced the keyframe while the video rendered
                logger.info("Replay discarded: visual changed while rendering")
                return OperationResult(operation, reason="superseded")

            self._visual = GeneratedVisual.video(video_url, source.prompt)
            self._emit(VisualChangedEvent, visual=self._visual)
            return OperationResult(operation)
        finally:
            self._replaying = False

    # =========================================================================
    # Wagers
    # =========================================================================

    def place_bet(self, bet_type: BetType, amount: float, odds: Optional[float] = None) -> Bet:
        """
        Place a wager.

        Args:
            bet_type: Category of the wager.
            amount: Stake, deducted immediately.
            odds: Multiplier to lock in. Defaults to the current line.

        Raises:
            BetRejected: Betting is closed or the ledger refused the slip.
        """
        if self._state.status is GameStatus.FINISHED:
            raise BetRejected("Betting is closed: match finished")
        if odds is None:
            odds = self._state.odds.for_bet(bet_type)
        bet = self.ledger.place_bet(bet_type, amount, odds)
        self._emit(BetPlacedEvent, bet=bet, wallet=self.ledger.wallet)
        return bet

    def to_dict(self) -> dict:
        """Snapshot for viewers."""
        return {
            "state": self._state.to_dict(),
            "visual": self._visual.to_dict() if self._visual else None,
            "wallet": self.ledger.wallet,
            "processing": self.is_processing,
            "replaying": self.is_replaying,
        }
