"""Event types emitted by the match orchestrator."""

from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from chaosball.ai.replay import ReplayPhase
    from chaosball.core.models import Bet, GameState, GeneratedVisual


@dataclass
class MatchEvent:
    """Base class for all match events."""

    timestamp: datetime = field(default_factory=datetime.now)
    match_id: str = ""

    # Match context at time of event
    quarter: int = 1
    time_remaining: str = "15:00"
    home_score: int = 0
    away_score: int = 0

    @classmethod
    def from_state(cls, snapshot: "GameState", **kwargs) -> "MatchEvent":
        """
        Build an event stamped with the context of a snapshot.

        Event types with a `state` field also carry the snapshot itself.
        """
        if "state" in {f.name for f in fields(cls)}:
            kwargs.setdefault("state", snapshot)
        return cls(
            match_id=snapshot.id,
            quarter=snapshot.quarter,
            time_remaining=snapshot.time_remaining,
            home_score=snapshot.home_score,
            away_score=snapshot.away_score,
            **kwargs,
        )


@dataclass
class MatchStartedEvent(MatchEvent):
    """Fired once setup succeeds and the match goes live."""

    state: "GameState" = None
    venue: str = ""


@dataclass
class StateCommittedEvent(MatchEvent):
    """Fired after a play is merged into the authoritative state."""

    state: "GameState" = None
    home_score_delta: int = 0
    away_score_delta: int = 0
    is_big_play: bool = False


@dataclass
class MatchFinishedEvent(MatchEvent):
    """Fired when the clock expires in the final quarter."""

    state: "GameState" = None


@dataclass
class VisualChangedEvent(MatchEvent):
    """Fired when the on-screen keyframe or replay is swapped."""

    visual: "GeneratedVisual" = None


@dataclass
class CommentaryPlayedEvent(MatchEvent):
    """Fired when voiced commentary starts playing."""

    text: str = ""
    duration_seconds: float = 0.0


@dataclass
class BetPlacedEvent(MatchEvent):
    """Fired when a slip is accepted."""

    bet: "Bet" = None
    wallet: float = 0.0


@dataclass
class BetsResolvedEvent(MatchEvent):
    """Fired when one or more slips settle after a play."""

    bets: list = field(default_factory=list)
    wallet: float = 0.0


@dataclass
class ReplayStatusEvent(MatchEvent):
    """Fired on every replay phase change."""

    phase: Optional["ReplayPhase"] = None
    polls: int = 0


@dataclass
class OperationFailedEvent(MatchEvent):
    """Fired when an orchestrator operation fails at its boundary."""

    operation: str = ""
    error: Exception = None
