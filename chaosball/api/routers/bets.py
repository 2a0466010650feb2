"""Bets API router - wallet and slips."""

from fastapi import APIRouter, Depends, HTTPException, status

from chaosball.api.schemas import BetSchema, BetsResponse, PlaceBetRequest
from chaosball.api.services.match_service import get_orchestrator
from chaosball.core.models import BetType
from chaosball.errors import BetRejected
from chaosball.game import MatchOrchestrator

router = APIRouter(prefix="/bets", tags=["bets"])


@router.get("", response_model=BetsResponse)
async def list_bets(orchestrator: MatchOrchestrator = Depends(get_orchestrator)) -> BetsResponse:
    """Wallet balance and every slip, most recent first."""
    return BetsResponse(
        wallet=orchestrator.wallet,
        bets=[BetSchema.from_model(bet) for bet in orchestrator.bets],
    )


@router.post("", response_model=BetSchema, status_code=status.HTTP_201_CREATED)
async def place_bet(
    request: PlaceBetRequest,
    orchestrator: MatchOrchestrator = Depends(get_orchestrator),
) -> BetSchema:
    """Place a wager at the current (or given) odds."""
    try:
        bet = orchestrator.place_bet(BetType(request.type.value), request.amount, request.odds)
    except BetRejected as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    return BetSchema.from_model(bet)
