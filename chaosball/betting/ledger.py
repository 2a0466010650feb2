"""Wallet balance and bet slips."""

import logging
import math
from typing import Optional

from chaosball.betting.policy import RandomResolutionPolicy, ResolutionPolicy
from chaosball.core.models import Bet, BetStatus, BetType, Odds
from chaosball.errors import BetRejected

logger = logging.getLogger(__name__)


class WagerLedger:
    """
    Tracks the wallet and every slip placed during a session.

    Stakes leave the wallet at placement and are never refunded; winners
    are credited amount * placement odds when the policy settles them.
    """

    def __init__(
        self,
        starting_balance: float = 1000.0,
        policy: Optional[ResolutionPolicy] = None,
    ) -> None:
        self._wallet = float(starting_balance)
        self._bets: list[Bet] = []  # Most recent first
        self.policy = policy or RandomResolutionPolicy()

    @property
    def wallet(self) -> float:
        return self._wallet

    @property
    def bets(self) -> tuple[Bet, ...]:
        """All slips, most recent first."""
        return tuple(self._bets)

    @property
    def pending(self) -> list[Bet]:
        return [bet for bet in self._bets if bet.status is BetStatus.PENDING]

    def place_bet(self, bet_type: BetType, amount: float, odds: float) -> Bet:
        """
        Place a wager at the odds currently offered.

        Raises:
            BetRejected: Non-finite or non-positive amount or odds, or
                insufficient funds.
        """
        if not math.isfinite(amount) or not math.isfinite(odds):
            raise BetRejected(f"Wager and odds must be finite, got amount={amount}, odds={odds}")
        if amount <= 0:
            raise BetRejected(f"Wager must be positive, got {amount}")
        if odds <= 0:
            raise BetRejected(f"Odds must be positive, got {odds}")
        if amount > self._wallet:
            raise BetRejected(f"Insufficient funds: wallet {self._wallet:.2f}, wager {amount:.2f}")

        bet = Bet(type=bet_type, amount=float(amount), odds=float(odds))
        self._wallet -= bet.amount
        self._bets.insert(0, bet)
        logger.info(f"Bet placed: {bet_type.value} {bet.amount:.2f} @ x{bet.odds:.2f}")
        return bet

    def resolve_pending(
        self,
        home_score_delta: int,
        away_score_delta: int,
        current_odds: Odds,
    ) -> list[Bet]:
        """
        Let the policy settle pending slips after a play.

        Returns:
            Slips that reached WON or LOST on this call.
        """
        if not self.policy.applies(home_score_delta, away_score_delta):
            return []

        resolved: list[Bet] = []
        for index, bet in enumerate(self._bets):
            if bet.status is not BetStatus.PENDING:
                continue
            outcome = self.policy.decide(bet, current_odds)
            if outcome is None:
                continue
            settled = bet.settle(won=outcome)
            if outcome:
                self._wallet += settled.payout
            self._bets[index] = settled
            resolved.append(settled)
            logger.info(f"Bet {settled.id} {settled.status.value} ({settled.type.value})")
        return resolved

    def to_dict(self) -> dict:
        return {
            "wallet": self._wallet,
            "bets": [bet.to_dict() for bet in self._bets],
        }
