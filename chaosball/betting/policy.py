"""
Bet resolution policies.

Settlement is a pluggable policy. The default is a demo placeholder: it
is not a fair settlement engine and has no relation to the match result.
"""

import random
from typing import Optional

from chaosball.core.models import Bet, Odds


class ResolutionPolicy:
    """
    Decides how pending slips settle after a play.

    Subclasses implement applies() and decide().
    """

    def applies(self, home_score_delta: int, away_score_delta: int) -> bool:
        """Whether this play triggers any settlement at all."""
        raise NotImplementedError

    def decide(self, bet: Bet, current_odds: Odds) -> Optional[bool]:
        """
        Settle one pending slip.

        Returns:
            True for a win, False for a loss, None to leave it pending.
        """
        raise NotImplementedError


class RandomResolutionPolicy(ResolutionPolicy):
    """
    Settles slips at random on scoring plays.

    Each pending slip independently settles with resolve_probability and,
    once settled, wins with win_probability. current_odds is accepted but
    not consulted; winners are paid at their placement odds.
    """

    def __init__(
        self,
        resolve_probability: float = 0.1,
        win_probability: float = 0.5,
        rng: Optional[random.Random] = None,
    ):
        self.resolve_probability = resolve_probability
        self.win_probability = win_probability
        self._rng = rng or random.Random()

    def applies(self, home_score_delta: int, away_score_delta: int) -> bool:
        return home_score_delta > 0 or away_score_delta > 0

    def decide(self, bet: Bet, current_odds: Odds) -> Optional[bool]:
        if self._rng.random() >= self.resolve_probability:
            return None
        return self._rng.random() < self.win_probability
