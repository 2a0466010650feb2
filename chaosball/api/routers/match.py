"""Match API router - setup, plays and replays."""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from chaosball.api.schemas import (
    BetSchema,
    InitializeRequest,
    MatchResponse,
    PlayResponse,
    ReplayResponse,
    VisualSchema,
)
from chaosball.api.services.match_service import get_orchestrator, match_session
from chaosball.game import MatchOrchestrator

router = APIRouter(prefix="/match", tags=["match"])


@router.get("", response_model=MatchResponse)
async def get_match(orchestrator: MatchOrchestrator = Depends(get_orchestrator)) -> MatchResponse:
    """Get the current match snapshot."""
    return MatchResponse.from_orchestrator(orchestrator)


@router.get("/visual", response_model=VisualSchema)
async def get_visual(orchestrator: MatchOrchestrator = Depends(get_orchestrator)) -> VisualSchema:
    """Get the keyframe or replay currently on screen."""
    if orchestrator.visual is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Nothing on screen yet",
        )
    return VisualSchema.from_model(orchestrator.visual)


@router.get("/log")
async def get_log(limit: int = Query(20, ge=1, le=500)) -> list[dict]:
    """Most recent broadcast log entries, newest first."""
    return [
        {
            "timestamp": entry.timestamp.isoformat(),
            "quarter": entry.quarter,
            "time_remaining": entry.time_remaining,
            "event_type": entry.event_type,
            "description": entry.description,
            "home_score": entry.home_score,
            "away_score": entry.away_score,
        }
        for entry in match_session.log.recent(limit)
    ]


@router.post("/initialize", response_model=MatchResponse)
async def initialize_match(
    request: InitializeRequest,
    orchestrator: MatchOrchestrator = Depends(get_orchestrator),
) -> MatchResponse:
    """Generate teams and venue and go live."""
    result = await orchestrator.initialize(request.theme)
    if not result.accepted:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Cannot initialize: {result.reason}",
        )
    if result.error is not None:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(result.error),
        )
    return MatchResponse.from_orchestrator(orchestrator)


@router.post("/plays", response_model=PlayResponse)
async def advance_play(orchestrator: MatchOrchestrator = Depends(get_orchestrator)) -> PlayResponse:
    """Run the next play."""
    outcome = await orchestrator.advance_play()
    if not outcome.accepted:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Cannot run play: {outcome.reason}",
        )
    if outcome.error is not None:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(outcome.error),
        )

    snapshot = MatchResponse.from_orchestrator(orchestrator)
    return PlayResponse(
        **snapshot.model_dump(),
        is_big_play=outcome.update.is_big_play,
        media_error=str(outcome.media_error) if outcome.media_error else None,
        resolved_bets=[BetSchema.from_model(bet) for bet in outcome.resolved_bets],
    )


@router.post("/replay", response_model=ReplayResponse, status_code=status.HTTP_202_ACCEPTED)
async def request_replay(
    orchestrator: MatchOrchestrator = Depends(get_orchestrator),
) -> ReplayResponse:
    """Start an instant replay. Poll GET /match for the result."""
    task = orchestrator.request_replay()
    if task is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Replay unavailable: no visual, replay running, or play in progress",
        )
    return ReplayResponse(accepted=True, replaying=orchestrator.is_replaying)
