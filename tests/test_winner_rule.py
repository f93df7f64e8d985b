# Area: Game Tests
"""Tests for the winner rule."""

import itertools

import pytest
from rps_finalizer._game.winner_rule import winner
from rps_finalizer.errors import InvalidSymbol
from rps_finalizer.types import Outcome, Symbol


class TestWinnerRule:
    """Tests for winner(move1, move2)."""

    @pytest.mark.parametrize("move1,move2,expected", [
        (Symbol.ROCK, Symbol.ROCK, Outcome.DRAW),
        (Symbol.ROCK, Symbol.PAPER, Outcome.PLAYER2_WINS),
        (Symbol.ROCK, Symbol.SCISSORS, Outcome.PLAYER1_WINS),
        (Symbol.PAPER, Symbol.ROCK, Outcome.PLAYER1_WINS),
        (Symbol.PAPER, Symbol.PAPER, Outcome.DRAW),
        (Symbol.PAPER, Symbol.SCISSORS, Outcome.PLAYER2_WINS),
        (Symbol.SCISSORS, Symbol.ROCK, Outcome.PLAYER2_WINS),
        (Symbol.SCISSORS, Symbol.PAPER, Outcome.PLAYER1_WINS),
        (Symbol.SCISSORS, Symbol.SCISSORS, Outcome.DRAW),
    ])
    def test_all_pairs(self, move1, move2, expected):
        """Test the outcome of every pair of moves."""
        assert winner(move1, move2) == expected

    def test_draw_iff_equal(self):
        """Test that a draw happens exactly when both moves are equal."""
        for a, b in itertools.product(range(3), repeat=2):
            assert (winner(a, b) == Outcome.DRAW) == (a == b)

    def test_swapping_players_swaps_winner(self):
        """Test that the rule is antisymmetric."""
        flipped = {
            Outcome.DRAW: Outcome.DRAW,
            Outcome.PLAYER1_WINS: Outcome.PLAYER2_WINS,
            Outcome.PLAYER2_WINS: Outcome.PLAYER1_WINS,
        }
        for a, b in itertools.product(range(3), repeat=2):
            assert winner(b, a) == flipped[winner(a, b)]

    def test_plain_ints_accepted(self):
        """Test that raw plaintext ints work like symbols."""
        assert winner(0, 2) == Outcome.PLAYER1_WINS
        assert winner(2, 0) == Outcome.PLAYER2_WINS
        assert winner(1, 0) == Outcome.PLAYER1_WINS
        assert winner(0, 1) == Outcome.PLAYER2_WINS

    @pytest.mark.parametrize("bad", [3, -1, True, "1", None, 1.0])
    def test_rejects_values_outside_domain(self, bad):
        """Test that values outside {0, 1, 2} raise InvalidSymbol."""
        with pytest.raises(InvalidSymbol):
            winner(bad, 0)
        with pytest.raises(InvalidSymbol):
            winner(0, bad)


class TestOutcomeLabels:
    """Tests for outcome and symbol labels used in logs."""

    def test_outcome_labels(self):
        assert Outcome.DRAW.label == "Draw"
        assert Outcome.PLAYER1_WINS.label == "Player 1"
        assert Outcome.PLAYER2_WINS.label == "Player 2"

    def test_symbol_labels(self):
        assert [s.label for s in Symbol] == ["Rock", "Paper", "Scissors"]
