"""Virtual wallet, bet slips and settlement policies."""

from chaosball.betting.ledger import WagerLedger
from chaosball.betting.policy import RandomResolutionPolicy, ResolutionPolicy

__all__ = ["RandomResolutionPolicy", "ResolutionPolicy", "WagerLedger"]
