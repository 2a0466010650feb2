"""Event system for the broadcast."""

from chaosball.events.bus import EventBus
from chaosball.events.types import (
    BetPlacedEvent,
    BetsResolvedEvent,
    CommentaryPlayedEvent,
    MatchEvent,
    MatchFinishedEvent,
    MatchStartedEvent,
    OperationFailedEvent,
    ReplayStatusEvent,
    StateCommittedEvent,
    VisualChangedEvent,
)

__all__ = [
    "BetPlacedEvent",
    "BetsResolvedEvent",
    "CommentaryPlayedEvent",
    "EventBus",
    "MatchEvent",
    "MatchFinishedEvent",
    "MatchStartedEvent",
    "OperationFailedEvent",
    "ReplayStatusEvent",
    "StateCommittedEvent",
    "VisualChangedEvent",
]
