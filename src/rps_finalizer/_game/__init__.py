# Area: Game
"""
Pure game rules: the move codec and the winner rule.
"""

from .move_codec import MoveCodec, validate_symbol, symbol_from_plaintext
from .winner_rule import winner

__all__ = [
    "MoveCodec",
    "validate_symbol",
    "symbol_from_plaintext",
    "winner",
]
