"""Match, media and wager models."""

import math
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from chaosball.core.clock import parse_clock


class GameStatus(Enum):
    """Lifecycle of the single match in a session."""

    IDLE = "IDLE"
    PLAYING = "PLAYING"
    FINISHED = "FINISHED"


class Possession(Enum):
    """Which side has the ball."""

    HOME = "home"
    AWAY = "away"

    @property
    def other(self) -> "Possession":
        """The opposite side."""
        return Possession.AWAY if self is Possession.HOME else Possession.HOME


class BetType(Enum):
    """Mutually exclusive wager categories."""

    HOME_WIN = "HOME_WIN"
    AWAY_WIN = "AWAY_WIN"
    OVER = "OVER"
    UNDER = "UNDER"


class BetStatus(Enum):
    """Slip status. WON and LOST are terminal."""

    PENDING = "PENDING"
    WON = "WON"
    LOST = "LOST"

    @property
    def is_terminal(self) -> bool:
        return self is not BetStatus.PENDING


class VisualType(Enum):
    IMAGE = "image"
    VIDEO = "video"


@dataclass(frozen=True)
class Team:
    """A generated team. Set once at match setup."""

    name: str
    color: str
    mascot: str

    def to_dict(self) -> dict:
        return {"name": self.name, "color": self.color, "mascot": self.mascot}

    @classmethod
    def from_dict(cls, data: dict) -> "Team":
        return cls(name=data["name"], color=data["color"], mascot=data["mascot"])


@dataclass(frozen=True)
class Odds:
    """Payout multipliers. Always replaced as a unit."""

    home_win: float
    away_win: float
    over_under: float

    def __post_init__(self) -> None:
        for name in ("home_win", "away_win", "over_under"):
            value = getattr(self, name)
            if not math.isfinite(value) or value <= 0:
                raise ValueError(f"Odds must be positive multipliers, got {name}={value}")

    def for_bet(self, bet_type: BetType) -> float:
        """Multiplier offered for a bet category. OVER and UNDER share the line."""
        if bet_type is BetType.HOME_WIN:
            return self.home_win
        if bet_type is BetType.AWAY_WIN:
            return self.away_win
        return self.over_under

    def to_dict(self) -> dict:
        return {
            "home_win": self.home_win,
            "away_win": self.away_win,
            "over_under": self.over_under,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Odds":
        return cls(
            home_win=data["home_win"],
            away_win=data["away_win"],
            over_under=data["over_under"],
        )


DEFAULT_ODDS = Odds(home_win=1.9, away_win=1.9, over_under=1.9)


@dataclass(frozen=True)
class GameState:
    """
    Authoritative snapshot of one match.

    Instances are immutable; every change produces a new snapshot that
    replaces the previous one in a single assignment, so observers never
    see score and odds from different plays.
    """

    id: str
    home_team: Team = Team(name="Cyber", color="blue", mascot="Droids")
    away_team: Team = Team(name="Terra", color="red", mascot="Titans")
    home_score: int = 0
    away_score: int = 0
    quarter: int = 1
    time_remaining: str = "15:00"
    possession: Possession = Possession.HOME
    last_play_description: str = "Match starting..."
    commentary: str = "Welcome to ChaosBall!"
    odds: Odds = DEFAULT_ODDS
    status: GameStatus = GameStatus.IDLE
    venue: Optional[str] = None
    play_count: int = 0

    @classmethod
    def initial(cls, match_id: Optional[str] = None, quarter_length: str = "15:00") -> "GameState":
        """Placeholder snapshot used before match setup."""
        return cls(id=match_id or f"match-{uuid4().hex[:8]}", time_remaining=quarter_length)

    @property
    def clock_seconds(self) -> int:
        """Seconds left in the current quarter."""
        return parse_clock(self.time_remaining)

    @property
    def is_clock_expired(self) -> bool:
        return self.clock_seconds == 0

    @property
    def total_points(self) -> int:
        return self.home_score + self.away_score

    @property
    def possession_team(self) -> Team:
        return self.home_team if self.possession is Possession.HOME else self.away_team

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "home_team": self.home_team.to_dict(),
            "away_team": self.away_team.to_dict(),
            "home_score": self.home_score,
            "away_score": self.away_score,
            "quarter": self.quarter,
            "time_remaining": self.time_remaining,
            "possession": self.possession.value,
            "last_play_description": self.last_play_description,
            "commentary": self.commentary,
            "odds": self.odds.to_dict(),
            "status": self.status.value,
            "venue": self.venue,
            "play_count": self.play_count,
        }


@dataclass(frozen=True)
class PlayUpdate:
    """A model-generated delta for one play. Consumed once."""

    home_score_delta: int
    away_score_delta: int
    time_elapsed_seconds: int
    play_description: str
    commentary: str
    visual_prompt: str
    is_big_play: bool  # Reserved; nothing consumes it yet
    new_odds: Odds


@dataclass(frozen=True)
class MatchSetup:
    """Teams and venue produced by the setup call."""

    home: Team
    away: Team
    venue: str


@dataclass(frozen=True)
class GeneratedVisual:
    """The media currently on screen, with the prompt that produced it."""

    type: VisualType
    url: str
    prompt: str

    @classmethod
    def image(cls, url: str, prompt: str) -> "GeneratedVisual":
        return cls(type=VisualType.IMAGE, url=url, prompt=prompt)

    @classmethod
    def video(cls, url: str, prompt: str) -> "GeneratedVisual":
        return cls(type=VisualType.VIDEO, url=url, prompt=prompt)

    def to_dict(self) -> dict:
        return {"type": self.type.value, "url": self.url, "prompt": self.prompt}


@dataclass(frozen=True)
class AudioClip:
    """Encoded speech returned by the TTS model."""

    data: bytes
    mime_type: str = "audio/L16;codec=pcm;rate=24000"


@dataclass(frozen=True)
class Bet:
    """
    A wager slip.

    Odds are captured at placement and never change afterwards.
    """

    type: BetType
    amount: float
    odds: float
    status: BetStatus = BetStatus.PENDING
    id: UUID = field(default_factory=uuid4)
    placed_at: datetime = field(default_factory=datetime.now)

    @property
    def payout(self) -> float:
        """Credit paid to the wallet if this slip wins."""
        return self.amount * self.odds

    def settle(self, won: bool) -> "Bet":
        """Return the terminal copy of this slip."""
        if self.status.is_terminal:
            raise ValueError(f"Bet {self.id} is already {self.status.value}")
        return replace(self, status=BetStatus.WON if won else BetStatus.LOST)

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "type": self.type.value,
            "amount": self.amount,
            "odds": self.odds,
            "status": self.status.value,
            "placed_at": self.placed_at.isoformat(),
        }
