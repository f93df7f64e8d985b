# Area: Orchestrator
"""
rps_finalizer._orchestrator.reports — Per-game handling reports
===============================================================

Returned by the finalization orchestrator and the auto-play agent for
every event they handle, so callers and tests can see what happened
without parsing logs.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from ..errors import RPSFinalizerError
from ..types import Outcome, Symbol
from .enums import FinalizationState


@dataclass
class FinalizationReport:
    """
    Result of handling one NeedsFinalization event.

    Attributes:
        game_id: Game the event was for
        state: Terminal state reached (IDLE when the event was skipped)
        moves: Decrypted symbols per slot, None where not decrypted
        outcome: Outcome computed by the winner rule, if reached
        failed_slot: Move slot (1 or 2) whose decryption failed
        error: The error that moved the game to FAILED
        transaction_hash: finalizeResult transaction, once confirmed
        skipped: True if the guard rejected the event
    """

    game_id: int
    state: FinalizationState
    moves: List[Optional[Symbol]] = field(default_factory=lambda: [None, None])
    outcome: Optional[Outcome] = None
    failed_slot: Optional[int] = None
    error: Optional[RPSFinalizerError] = None
    transaction_hash: Optional[str] = None
    skipped: bool = False

    @property
    def succeeded(self) -> bool:
        return self.state is FinalizationState.DONE


@dataclass
class AutoPlayReport:
    """
    Result of handling one GameCreated event.

    Attributes:
        game_id: Game the event was for
        joined: joinGame was confirmed
        symbol: Symbol drawn for the move, once drawn
        submitted: submitMove was confirmed
        skipped_reason: Why the game was not joined, if it was not
        error: The error that aborted the sequence
    """

    game_id: int
    joined: bool = False
    symbol: Optional[Symbol] = None
    submitted: bool = False
    skipped_reason: Optional[str] = None
    error: Optional[RPSFinalizerError] = None

    @property
    def skipped(self) -> bool:
        return self.skipped_reason is not None
