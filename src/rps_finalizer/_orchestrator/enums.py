# Area: Orchestrator
"""
rps_finalizer._orchestrator.enums — Finalization state machine enums
====================================================================

Defines the per-game states and events of the finalization state machine.
"""

from enum import Enum


class FinalizationState(Enum):
    """
    States of a single game's finalization.

    State transitions:
    IDLE -> DECRYPTING (on START)
    DECRYPTING -> COMPUTING (on MOVES_DECRYPTED)
    COMPUTING -> SUBMITTING (on OUTCOME_COMPUTED)
    SUBMITTING -> DONE (on SUBMISSION_CONFIRMED)
    DECRYPTING / COMPUTING / SUBMITTING -> FAILED (on FAILURE)
    DONE and FAILED are terminal.
    """
    IDLE = "IDLE"
    DECRYPTING = "DECRYPTING"
    COMPUTING = "COMPUTING"
    SUBMITTING = "SUBMITTING"
    DONE = "DONE"
    FAILED = "FAILED"


class FinalizationEvent(Enum):
    """
    Events that drive a game's finalization.

    - START: NeedsFinalization accepted by the guard
    - MOVES_DECRYPTED: both handles decrypted and in range
    - OUTCOME_COMPUTED: winner rule applied
    - SUBMISSION_CONFIRMED: finalizeResult receipt confirmed
    - FAILURE: any error along the way
    """
    START = "START"
    MOVES_DECRYPTED = "MOVES_DECRYPTED"
    OUTCOME_COMPUTED = "OUTCOME_COMPUTED"
    SUBMISSION_CONFIRMED = "SUBMISSION_CONFIRMED"
    FAILURE = "FAILURE"


class GuardStatus(Enum):
    """Entry of the in-memory pending-finalization guard."""
    IN_FLIGHT = "IN_FLIGHT"
    COMPLETED = "COMPLETED"
