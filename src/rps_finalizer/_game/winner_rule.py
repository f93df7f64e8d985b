# Area: Game
"""
rps_finalizer._game.winner_rule — Deterministic Rock-Paper-Scissors outcome
===========================================================================

    winner(a, b):
        a == b               -> Draw
        (a + 1) mod 3 == b   -> Player 2 wins (b beats a)
        otherwise            -> Player 1 wins
"""

from ..types import Outcome
from .move_codec import validate_symbol


def winner(move1: int, move2: int) -> Outcome:
    """Return the outcome of player 1's move against player 2's move."""
    a, b = validate_symbol(move1), validate_symbol(move2)
    if a == b:
        return Outcome.DRAW
    if (a + 1) % 3 == b:
        return Outcome.PLAYER2_WINS
    return Outcome.PLAYER1_WINS
