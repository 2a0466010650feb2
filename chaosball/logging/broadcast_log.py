"""In-memory broadcast log for accumulating play-by-play events."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from chaosball.events import (
    BetsResolvedEvent,
    EventBus,
    MatchFinishedEvent,
    MatchStartedEvent,
    OperationFailedEvent,
    ReplayStatusEvent,
    StateCommittedEvent,
    VisualChangedEvent,
)


@dataclass
class LogEntry:
    """Single entry in the broadcast log."""

    timestamp: datetime
    quarter: int
    time_remaining: str
    event_type: str  # "START", "PLAY", "VISUAL", "REPLAY", "BETS", "ERROR", "FINAL"
    description: str
    home_score: int
    away_score: int

    # Optional play details
    is_scoring_play: bool = False
    is_big_play: bool = False
    visual_prompt: Optional[str] = None


@dataclass
class ScoringPlay:
    """Record of a scoring play."""

    quarter: int
    time_remaining: str
    home_points: int
    away_points: int
    description: str
    home_score_after: int
    away_score_after: int


class BroadcastLog:
    """
    In-memory accumulator for broadcast events.

    Subscribes to the orchestrator's EventBus and records one line per
    event: plays, keyframe prompts, replay progress, bet settlements and
    failures.
    """

    def __init__(self) -> None:
        self.entries: list[LogEntry] = []
        self.scoring_plays: list[ScoringPlay] = []

    def connect_to_event_bus(self, event_bus: EventBus) -> None:
        """Subscribe to events from an event bus."""
        event_bus.subscribe(MatchStartedEvent, self._handle_match_started)
        event_bus.subscribe(StateCommittedEvent, self._handle_state_committed)
        event_bus.subscribe(VisualChangedEvent, self._handle_visual_changed)
        event_bus.subscribe(ReplayStatusEvent, self._handle_replay_status)
        event_bus.subscribe(BetsResolvedEvent, self._handle_bets_resolved)
        event_bus.subscribe(OperationFailedEvent, self._handle_failure)
        event_bus.subscribe(MatchFinishedEvent, self._handle_finished)

    def add_entry(
        self,
        quarter: int,
        time_remaining: str,
        event_type: str,
        description: str,
        home_score: int,
        away_score: int,
        **kwargs,
    ) -> None:
        """Add a log entry manually."""
        entry = LogEntry(
            timestamp=datetime.now(),
            quarter=quarter,
            time_remaining=time_remaining,
            event_type=event_type,
            description=description,
            home_score=home_score,
            away_score=away_score,
            **kwargs,
        )
        self.entries.append(entry)

    def _add_from_event(self, event, event_type: str, description: str, **kwargs) -> None:
        self.add_entry(
            quarter=event.quarter,
            time_remaining=event.time_remaining,
            event_type=event_type,
            description=description,
            home_score=event.home_score,
            away_score=event.away_score,
            **kwargs,
        )

    def _handle_match_started(self, event: MatchStartedEvent) -> None:
        self._add_from_event(event, "START", event.state.commentary)

    def _handle_state_committed(self, event: StateCommittedEvent) -> None:
        scored = event.home_score_delta > 0 or event.away_score_delta > 0
        self._add_from_event(
            event,
            "PLAY",
            event.state.last_play_description,
            is_scoring_play=scored,
            is_big_play=event.is_big_play,
        )
        if scored:
            self.scoring_plays.append(
                ScoringPlay(
                    quarter=event.quarter,
                    time_remaining=event.time_remaining,
                    home_points=event.home_score_delta,
                    away_points=event.away_score_delta,
                    description=event.state.last_play_description,
                    home_score_after=event.home_score,
                    away_score_after=event.away_score,
                )
            )

    def _handle_visual_changed(self, event: VisualChangedEvent) -> None:
        visual = event.visual
        self._add_from_event(
            event,
            "VISUAL",
            f"{visual.type.value.title()}: {visual.prompt}",
            visual_prompt=visual.prompt,
        )

    def _handle_replay_status(self, event: ReplayStatusEvent) -> None:
        self._add_from_event(event, "REPLAY", f"Replay {event.phase.value} (polls: {event.polls})")

    def _handle_bets_resolved(self, event: BetsResolvedEvent) -> None:
        summary = ", ".join(f"{bet.type.value} {bet.status.value}" for bet in event.bets)
        self._add_from_event(event, "BETS", f"{summary} | wallet {event.wallet:.0f}")

    def _handle_failure(self, event: OperationFailedEvent) -> None:
        self._add_from_event(event, "ERROR", f"{event.operation}: {event.error}")

    def _handle_finished(self, event: MatchFinishedEvent) -> None:
        self._add_from_event(
            event, "FINAL", f"Final: {event.home_score} - {event.away_score}"
        )

    def get_plays_by_quarter(self) -> dict[int, list[LogEntry]]:
        """Group play entries by quarter."""
        by_quarter: dict[int, list[LogEntry]] = {}
        for entry in self.entries:
            if entry.event_type != "PLAY":
                continue
            by_quarter.setdefault(entry.quarter, []).append(entry)
        return by_quarter

    def get_scoring_summary(self) -> list[ScoringPlay]:
        """Get all scoring plays."""
        return self.scoring_plays.copy()

    def recent(self, limit: int = 10) -> list[LogEntry]:
        """Most recent entries, newest first. A non-positive limit yields nothing."""
        if limit <= 0:
            return []
        return list(reversed(self.entries[-limit:]))

    @property
    def play_count(self) -> int:
        """Total number of plays logged."""
        return len([e for e in self.entries if e.event_type == "PLAY"])

    @property
    def last_visual_prompt(self) -> Optional[str]:
        for entry in reversed(self.entries):
            if entry.visual_prompt:
                return entry.visual_prompt
        return None
