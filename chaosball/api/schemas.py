"""Pydantic schemas for the broadcast API."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class BetTypeSchema(str, Enum):
    """Wager categories."""

    HOME_WIN = "HOME_WIN"
    AWAY_WIN = "AWAY_WIN"
    OVER = "OVER"
    UNDER = "UNDER"


class TeamSchema(BaseModel):
    """A generated team."""

    name: str
    color: str
    mascot: str

    @classmethod
    def from_model(cls, team) -> "TeamSchema":
        return cls(name=team.name, color=team.color, mascot=team.mascot)


class OddsSchema(BaseModel):
    """Current payout multipliers."""

    home_win: float
    away_win: float
    over_under: float

    @classmethod
    def from_model(cls, odds) -> "OddsSchema":
        return cls(home_win=odds.home_win, away_win=odds.away_win, over_under=odds.over_under)


class GameStateSchema(BaseModel):
    """Full match snapshot."""

    id: str
    home_team: TeamSchema
    away_team: TeamSchema
    home_score: int
    away_score: int
    quarter: int
    time_remaining: str
    possession: str
    last_play_description: str
    commentary: str
    odds: OddsSchema
    status: str
    venue: Optional[str] = None
    play_count: int = 0

    @classmethod
    def from_model(cls, state) -> "GameStateSchema":
        """Create from GameState model."""
        return cls(
            id=state.id,
            home_team=TeamSchema.from_model(state.home_team),
            away_team=TeamSchema.from_model(state.away_team),
            home_score=state.home_score,
            away_score=state.away_score,
            quarter=state.quarter,
            time_remaining=state.time_remaining,
            possession=state.possession.value,
            last_play_description=state.last_play_description,
            commentary=state.commentary,
            odds=OddsSchema.from_model(state.odds),
            status=state.status.value,
            venue=state.venue,
            play_count=state.play_count,
        )


class VisualSchema(BaseModel):
    """The media currently on screen."""

    type: str
    url: str
    prompt: str

    @classmethod
    def from_model(cls, visual) -> "VisualSchema":
        return cls(type=visual.type.value, url=visual.url, prompt=visual.prompt)


class MatchResponse(BaseModel):
    """Snapshot returned by every match endpoint."""

    state: GameStateSchema
    visual: Optional[VisualSchema] = None
    wallet: float
    processing: bool
    replaying: bool

    @classmethod
    def from_orchestrator(cls, orchestrator) -> "MatchResponse":
        visual = orchestrator.visual
        return cls(
            state=GameStateSchema.from_model(orchestrator.state),
            visual=VisualSchema.from_model(visual) if visual else None,
            wallet=orchestrator.wallet,
            processing=orchestrator.is_processing,
            replaying=orchestrator.is_replaying,
        )


class InitializeRequest(BaseModel):
    """Match setup request."""

    theme: Optional[str] = Field(default=None, description="Theme for team/venue generation")


class PlayResponse(MatchResponse):
    """Result of one play."""

    is_big_play: bool = False
    media_error: Optional[str] = None
    resolved_bets: list["BetSchema"] = Field(default_factory=list)


class ReplayResponse(BaseModel):
    """Replay request acknowledgement."""

    accepted: bool
    replaying: bool


class BetSchema(BaseModel):
    """A wager slip."""

    id: str
    type: BetTypeSchema
    amount: float
    odds: float
    status: str
    placed_at: datetime

    @classmethod
    def from_model(cls, bet) -> "BetSchema":
        return cls(
            id=str(bet.id),
            type=BetTypeSchema(bet.type.value),
            amount=bet.amount,
            odds=bet.odds,
            status=bet.status.value,
            placed_at=bet.placed_at,
        )


class PlaceBetRequest(BaseModel):
    """Wager placement. Odds default to the current line."""

    type: BetTypeSchema
    amount: float = Field(gt=0, allow_inf_nan=False)
    odds: Optional[float] = Field(default=None, gt=0, allow_inf_nan=False)


class BetsResponse(BaseModel):
    """Wallet and slips, most recent first."""

    wallet: float
    bets: list[BetSchema]


PlayResponse.model_rebuild()
