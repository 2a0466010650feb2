"""Tests for merging plays into the match state."""

import dataclasses
import logging

from chaosball.core.models import GameState, GameStatus, Possession
from chaosball.game.rules import apply_play, clamp_score_delta, roll_quarter

from conftest import make_update


def live_state(**changes) -> GameState:
    return dataclasses.replace(GameState.initial("m"), status=GameStatus.PLAYING, **changes)


class TestApplyPlay:
    """Tests for apply_play."""

    def test_adds_deltas_and_runs_clock(self):
        state = live_state(home_score=10, away_score=8, time_remaining="3:30")
        new = apply_play(state, make_update(home=3, elapsed=200), quarters_per_match=4)

        assert new.home_score == 13
        assert new.away_score == 8
        assert new.time_remaining == "0:10"
        assert state.home_score == 10  # original untouched

    def test_replaces_narrative_and_odds(self):
        update = make_update(description="Robot fumbles", commentary="Oh no!")
        new = apply_play(live_state(), update, quarters_per_match=4)

        assert new.last_play_description == "Robot fumbles"
        assert new.commentary == "Oh no!"
        assert new.odds == update.new_odds
        assert new.play_count == 1

    def test_possession_alternates(self):
        state = live_state()
        first = apply_play(state, make_update(), quarters_per_match=4)
        second = apply_play(first, make_update(), quarters_per_match=4)
        assert first.possession is Possession.AWAY
        assert second.possession is Possession.HOME

    def test_negative_delta_is_clamped(self, caplog):
        """Scores never go backwards."""
        state = live_state(home_score=10, away_score=10)
        with caplog.at_level(logging.WARNING):
            new = apply_play(state, make_update(home=-3, away=2), quarters_per_match=4)
        assert new.home_score == 10
        assert new.away_score == 12
        assert "Clamping negative home score delta" in caplog.text

    def test_clock_expiry_in_final_quarter_finishes(self):
        state = live_state(quarter=4, time_remaining="0:20")
        new = apply_play(state, make_update(elapsed=45), quarters_per_match=4)
        assert new.time_remaining == "0:00"
        assert new.status is GameStatus.FINISHED

    def test_clock_expiry_in_earlier_quarter_keeps_playing(self):
        state = live_state(quarter=2, time_remaining="0:20")
        new = apply_play(state, make_update(elapsed=45), quarters_per_match=4)
        assert new.time_remaining == "0:00"
        assert new.quarter == 2
        assert new.status is GameStatus.PLAYING


class TestRollQuarter:
    """Tests for roll_quarter."""

    def test_rolls_expired_quarter(self):
        state = live_state(quarter=1, time_remaining="0:00")
        rolled = roll_quarter(state, quarter_length="15:00", quarters_per_match=4)
        assert rolled.quarter == 2
        assert rolled.time_remaining == "15:00"

    def test_leaves_running_clock_alone(self):
        state = live_state(quarter=1, time_remaining="3:00")
        assert roll_quarter(state, "15:00", 4) is state

    def test_final_quarter_never_rolls(self):
        state = live_state(quarter=4, time_remaining="0:00")
        assert roll_quarter(state, "15:00", 4) is state


class TestClampScoreDelta:
    def test_positive_passes_through(self):
        assert clamp_score_delta(3, "home") == 3

    def test_negative_becomes_zero(self):
        assert clamp_score_delta(-1, "away") == 0
