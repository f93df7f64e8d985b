"""
rps_finalizer.types — Game model, ledger events and move encodings
===================================================================

Everything the orchestrator and the auto-play agent pass around:

    Symbol         the three moves (0=Rock, 1=Paper, 2=Scissors)
    Outcome        the value written by finalizeResult (0=Draw, 1=Player1, 2=Player2)
    GameResult     the terminal result recorded for a game
    GameStatus     ledger lifecycle of a game
    Game           locally re-derived view of a game
    GameCreated, NeedsFinalization, GameFinalized
                   decoded ledger events
    EncryptedMove  opaque output of the encryption capability
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import List, Optional


# ============================================
# Moves and outcomes
# ============================================

class Symbol(IntEnum):
    """A Rock-Paper-Scissors move as stored in the encrypted handle."""
    ROCK = 0
    PAPER = 1
    SCISSORS = 2

    @property
    def label(self) -> str:
        return self.name.capitalize()


class Outcome(IntEnum):
    """Winner encoding accepted by ``finalizeResult``."""
    DRAW = 0
    PLAYER1_WINS = 1
    PLAYER2_WINS = 2

    @property
    def label(self) -> str:
        return {0: "Draw", 1: "Player 1", 2: "Player 2"}[self.value]


class GameResult(Enum):
    """Result recorded for a game; set once, terminal."""
    UNRESOLVED = "UNRESOLVED"
    DRAW = "DRAW"
    PLAYER1_WINS = "PLAYER1_WINS"
    PLAYER2_WINS = "PLAYER2_WINS"

    @classmethod
    def from_outcome(cls, outcome: Outcome) -> "GameResult":
        return cls[Outcome(outcome).name]


class GameStatus(Enum):
    """
    Ledger lifecycle of a game.

    CREATED -> JOINED -> MOVES_SUBMITTED -> AWAITING_FINALIZATION -> FINALIZED

    Transitions are driven by ledger-confirmed calls only.
    """
    CREATED = "CREATED"
    JOINED = "JOINED"
    MOVES_SUBMITTED = "MOVES_SUBMITTED"
    AWAITING_FINALIZATION = "AWAITING_FINALIZATION"
    FINALIZED = "FINALIZED"


STATUS_ORDER = {status: index for index, status in enumerate(GameStatus)}


# ============================================
# Ledger events
# ============================================

@dataclass(frozen=True)
class LedgerEvent:
    """Common fields of a decoded contract log."""
    game_id: int
    block_number: Optional[int] = field(default=None, kw_only=True)
    transaction_hash: Optional[str] = field(default=None, kw_only=True)
    log_index: Optional[int] = field(default=None, kw_only=True)

    @property
    def event_name(self) -> str:
        return type(self).__name__


@dataclass(frozen=True)
class GameCreated(LedgerEvent):
    """A new game is open for an opponent."""
    creator: str


@dataclass(frozen=True)
class NeedsFinalization(LedgerEvent):
    """Both moves are on the ledger; the handles reference the ciphertexts."""
    move1_handle: bytes
    move2_handle: bytes


@dataclass(frozen=True)
class GameFinalized(LedgerEvent):
    """The result was committed; terminal for the game."""
    winner: str
    outcome: Outcome


# ============================================
# Game view
# ============================================

@dataclass
class Game:
    """
    Locally re-derived view of a game.

    Attributes:
        game_id: Ledger-assigned, monotonically increasing id
        creator: Address that created the game
        opponent: Address that joined, None until joined
        move_handles: Ciphertext handles per player slot, None until submitted
        status: Lifecycle status, only advanced from confirmed observations
        result: Terminal result, UNRESOLVED until finalized
    """

    game_id: int
    creator: Optional[str] = None
    opponent: Optional[str] = None
    move_handles: List[Optional[bytes]] = field(default_factory=lambda: [None, None])
    status: GameStatus = GameStatus.CREATED
    result: GameResult = GameResult.UNRESOLVED

    @property
    def is_finalized(self) -> bool:
        return self.status is GameStatus.FINALIZED


# ============================================
# Encryption capability output
# ============================================

@dataclass(frozen=True)
class EncryptedMove:
    """
    Ciphertext handle and input proof returned by the encryption capability.

    Both are bound to a (contract address, submitter address) pair by the
    capability and are passed through unchanged.
    """
    handle: bytes
    proof: bytes = b""

    @property
    def calldata(self) -> bytes:
        """Bytes carried by ``submitMove``."""
        return self.proof or self.handle
