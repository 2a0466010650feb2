"""Core domain models for a ChaosBall match."""

from chaosball.core.clock import advance_clock, format_clock, parse_clock
from chaosball.core.models import (
    AudioClip,
    Bet,
    BetStatus,
    BetType,
    GameState,
    GameStatus,
    GeneratedVisual,
    MatchSetup,
    Odds,
    PlayUpdate,
    Possession,
    Team,
    VisualType,
)

__all__ = [
    "AudioClip",
    "Bet",
    "BetStatus",
    "BetType",
    "GameState",
    "GameStatus",
    "GeneratedVisual",
    "MatchSetup",
    "Odds",
    "PlayUpdate",
    "Possession",
    "Team",
    "VisualType",
    "advance_clock",
    "format_clock",
    "parse_clock",
]
