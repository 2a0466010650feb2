"""API routers for different resource types."""

from chaosball.api.routers.bets import router as bets_router
from chaosball.api.routers.match import router as match_router

__all__ = [
    "bets_router",
    "match_router",
]
