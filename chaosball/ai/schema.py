"""
Wire schemas for structured model output.

The logic model answers in camelCase JSON. These Pydantic models
validate that JSON before it is converted to domain dataclasses, so a
malformed answer is rejected whole rather than half-applied.
"""

from pydantic import BaseModel, ConfigDict, Field

from chaosball.core.models import MatchSetup, Odds, PlayUpdate, Team


class TeamPayload(BaseModel):
    name: str = Field(min_length=1)
    color: str
    mascot: str

    def to_team(self) -> Team:
        return Team(name=self.name, color=self.color, mascot=self.mascot)


class MatchSetupPayload(BaseModel):
    home: TeamPayload
    away: TeamPayload
    venue: str = Field(min_length=1)

    def to_setup(self) -> MatchSetup:
        return MatchSetup(home=self.home.to_team(), away=self.away.to_team(), venue=self.venue)


class OddsPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    home_win: float = Field(alias="homeWin", gt=0, allow_inf_nan=False)
    away_win: float = Field(alias="awayWin", gt=0, allow_inf_nan=False)
    over_under: float = Field(alias="overUnder", gt=0, allow_inf_nan=False)

    def to_odds(self) -> Odds:
        return Odds(home_win=self.home_win, away_win=self.away_win, over_under=self.over_under)


class PlayUpdatePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Deltas may be negative when the model misbehaves; the orchestrator clamps them
    home_score_delta: int = Field(alias="homeScoreDelta")
    away_score_delta: int = Field(alias="awayScoreDelta")
    time_elapsed_seconds: int = Field(alias="timeElapsedSeconds", ge=0)
    play_description: str = Field(alias="playDescription")
    commentary: str
    visual_prompt: str = Field(alias="visualPrompt", min_length=1)
    is_big_play: bool = Field(alias="isBigPlay")
    new_odds: OddsPayload = Field(alias="newOdds")

    def to_update(self) -> PlayUpdate:
        return PlayUpdate(
            home_score_delta=self.home_score_delta,
            away_score_delta=self.away_score_delta,
            time_elapsed_seconds=self.time_elapsed_seconds,
            play_description=self.play_description,
            commentary=self.commentary,
            visual_prompt=self.visual_prompt,
            is_big_play=self.is_big_play,
            new_odds=self.new_odds.to_odds(),
        )
