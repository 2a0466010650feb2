"""
Domain rules for merging a generated play into the match state.

All functions are pure: they take a snapshot and return a new one.
"""

import logging
from dataclasses import replace

from chaosball.core.clock import advance_clock
from chaosball.core.models import GameState, GameStatus, PlayUpdate

logger = logging.getLogger(__name__)


def clamp_score_delta(delta: int, side: str) -> int:
    """Scores never go backwards; negative deltas from the model become 0."""
    if delta < 0:
        logger.warning(f"Clamping negative {side} score delta {delta} to 0")
        return 0
    return delta


def roll_quarter(state: GameState, quarter_length: str, quarters_per_match: int) -> GameState:
    """
    Start the next quarter if the clock has run out.

    The final quarter never rolls over; the match finishes instead.
    """
    if state.is_clock_expired and state.quarter < quarters_per_match:
        return replace(state, quarter=state.quarter + 1, time_remaining=quarter_length)
    return state


def apply_play(state: GameState, update: PlayUpdate, quarters_per_match: int) -> GameState:
    """
    Merge one play into a snapshot.

    Runs the clock down (clamped at 0:00), adds the clamped score
    deltas, replaces narrative and odds wholesale and hands possession
    to the other side. A clock that expires in the final quarter
    finishes the match.
    """
    home_delta = clamp_score_delta(update.home_score_delta, "home")
    away_delta = clamp_score_delta(update.away_score_delta, "away")
    time_remaining = advance_clock(state.time_remaining, update.time_elapsed_seconds)

    status = state.status
    if time_remaining == "0:00" and state.quarter >= quarters_per_match:
        status = GameStatus.FINISHED

    return replace(
        state,
        home_score=state.home_score + home_delta,
        away_score=state.away_score + away_delta,
        time_remaining=time_remaining,
        last_play_description=update.play_description,
        commentary=update.commentary,
        odds=update.new_odds,
        possession=state.possession.other,
        status=status,
        play_count=state.play_count + 1,
    )
