"""Tests for game phases and state snapshots."""

import dataclasses

import pytest

from core.cards import full_deck
from core.game.state import GamePhase, GameState, Outcome, is_valid_transition

DECK = full_deck()


class TestGamePhase:
    def test_str(self):
        assert str(GamePhase.MATCH_PENDING) == "Match Pending"

    def test_transitions(self):
        assert is_valid_transition(GamePhase.PLAYING, GamePhase.MATCH_PENDING)
        assert is_valid_transition(GamePhase.MATCH_PENDING, GamePhase.PLAYING)
        assert is_valid_transition(GamePhase.GAME_OVER, GamePhase.PLAYING)
        assert not is_valid_transition(GamePhase.GAME_OVER, GamePhase.MATCH_PENDING)


class TestOutcome:
    def test_str(self):
        assert str(Outcome.VALID) == "valid"
        assert str(Outcome.UNKNOWN) == "unknown"


class TestGameState:
    def test_defaults(self):
        state = GameState()
        assert state.table == ()
        assert state.remaining_cards == 0
        assert state.last_outcome is Outcome.UNKNOWN
        assert state.phase is GamePhase.PLAYING
        state.check_invariants()

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            GameState().sets_found = 3  # type: ignore[misc]

    def test_selected_indices(self):
        state = GameState(table=tuple(DECK[:6]), selection=(DECK[4], DECK[1]))
        assert state.selected_indices == (4, 1)
        assert state.is_selected(DECK[4])
        assert not state.is_selected(DECK[0])

    def test_consistent_snapshot_passes(self):
        state = GameState(
            table=tuple(DECK[3:15]),
            remaining_deck=tuple(DECK[15:]),
            selection=(DECK[3], DECK[4], DECK[5]),
            last_outcome=Outcome.VALID,
            discarded=tuple(DECK[:3]),
            sets_found=1,
        )
        state.check_invariants()

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"table": (DECK[0], DECK[0])},
            {"table": (DECK[0],), "remaining_deck": (DECK[0],)},
            {"table": (DECK[0],), "discarded": (DECK[0],)},
            {"table": tuple(DECK[:5]), "selection": tuple(DECK[:4])},
            {"table": (DECK[0],), "selection": (DECK[1],)},
            {"table": tuple(DECK[:3]), "selection": (DECK[0], DECK[0])},
            {"table": tuple(DECK[:3]), "selection": (DECK[0],), "last_outcome": Outcome.INVALID},
            {"sets_found": -1},
        ],
    )
    def test_broken_snapshot_detected(self, kwargs):
        with pytest.raises(AssertionError):
            GameState(**kwargs).check_invariants()
