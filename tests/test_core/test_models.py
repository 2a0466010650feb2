"""Tests for match, media and wager models."""

import dataclasses

import pytest

from chaosball.core.models import (
    DEFAULT_ODDS,
    Bet,
    BetStatus,
    BetType,
    GameState,
    GameStatus,
    GeneratedVisual,
    Odds,
    Possession,
    Team,
    VisualType,
)


class TestGameState:
    """Tests for GameState."""

    def test_initial_placeholder(self):
        """Before setup the match is idle with placeholder teams."""
        state = GameState.initial("match-1")
        assert state.id == "match-1"
        assert state.status is GameStatus.IDLE
        assert state.home_team.name == "Cyber"
        assert state.away_team.name == "Terra"
        assert state.home_score == 0
        assert state.away_score == 0
        assert state.quarter == 1
        assert state.time_remaining == "15:00"
        assert state.possession is Possession.HOME
        assert state.odds == DEFAULT_ODDS

    def test_initial_generates_id(self):
        state = GameState.initial()
        assert state.id.startswith("match-")

    def test_is_immutable(self):
        state = GameState.initial("match-1")
        with pytest.raises(dataclasses.FrozenInstanceError):
            state.home_score = 3

    def test_clock_properties(self):
        state = GameState.initial("match-1", quarter_length="0:00")
        assert state.clock_seconds == 0
        assert state.is_clock_expired

    def test_possession_team(self):
        state = GameState.initial("match-1")
        assert state.possession_team == state.home_team
        away = dataclasses.replace(state, possession=Possession.AWAY)
        assert away.possession_team == state.away_team

    def test_to_dict(self):
        data = GameState.initial("match-1").to_dict()
        assert data["status"] == "IDLE"
        assert data["possession"] == "home"
        assert data["odds"] == {"home_win": 1.9, "away_win": 1.9, "over_under": 1.9}
        assert data["home_team"]["mascot"] == "Droids"


class TestPossession:
    def test_other_alternates(self):
        assert Possession.HOME.other is Possession.AWAY
        assert Possession.AWAY.other is Possession.HOME


class TestOdds:
    """Tests for Odds."""

    def test_rejects_non_positive(self):
        with pytest.raises(ValueError):
            Odds(home_win=0, away_win=1.5, over_under=1.5)

    @pytest.mark.parametrize("value", [float("inf"), float("nan")])
    def test_rejects_non_finite(self, value):
        with pytest.raises(ValueError):
            Odds(home_win=1.5, away_win=value, over_under=1.5)

    def test_over_and_under_share_a_line(self):
        odds = Odds(home_win=1.5, away_win=2.5, over_under=1.8)
        assert odds.for_bet(BetType.HOME_WIN) == 1.5
        assert odds.for_bet(BetType.AWAY_WIN) == 2.5
        assert odds.for_bet(BetType.OVER) == 1.8
        assert odds.for_bet(BetType.UNDER) == 1.8

    def test_dict_round_trip(self):
        odds = Odds(home_win=1.5, away_win=2.5, over_under=1.8)
        assert Odds.from_dict(odds.to_dict()) == odds


class TestTeam:
    def test_dict_round_trip(self):
        team = Team(name="Neon Knights", color="purple", mascot="Knight")
        assert Team.from_dict(team.to_dict()) == team


class TestGeneratedVisual:
    def test_constructors_set_type(self):
        assert GeneratedVisual.image("data:x", "p").type is VisualType.IMAGE
        assert GeneratedVisual.video("https://v", "p").type is VisualType.VIDEO


class TestBet:
    """Tests for Bet slips."""

    def test_defaults(self):
        bet = Bet(type=BetType.OVER, amount=50, odds=2.0)
        assert bet.status is BetStatus.PENDING
        assert bet.id is not None
        assert bet.placed_at is not None

    def test_payout_uses_placement_odds(self):
        bet = Bet(type=BetType.HOME_WIN, amount=100, odds=1.9)
        assert bet.payout == pytest.approx(190.0)

    def test_settle_returns_terminal_copy(self):
        bet = Bet(type=BetType.HOME_WIN, amount=100, odds=1.9)
        won = bet.settle(won=True)
        assert won.status is BetStatus.WON
        assert won.id == bet.id
        assert bet.status is BetStatus.PENDING
        assert bet.settle(won=False).status is BetStatus.LOST

    def test_settled_slip_cannot_change(self):
        """WON and LOST are terminal."""
        lost = Bet(type=BetType.UNDER, amount=10, odds=1.9).settle(won=False)
        with pytest.raises(ValueError):
            lost.settle(won=True)

    def test_to_dict(self):
        data = Bet(type=BetType.UNDER, amount=10, odds=1.9).to_dict()
        assert data["type"] == "UNDER"
        assert data["status"] == "PENDING"
