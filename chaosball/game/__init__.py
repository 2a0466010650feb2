"""Match orchestration and play rules."""

from chaosball.game.orchestrator import (
    Activity,
    MatchOrchestrator,
    OperationResult,
    PlayOutcome,
)
from chaosball.game.rules import apply_play, clamp_score_delta, roll_quarter

__all__ = [
    "Activity",
    "MatchOrchestrator",
    "OperationResult",
    "PlayOutcome",
    "apply_play",
    "clamp_score_delta",
    "roll_quarter",
]
