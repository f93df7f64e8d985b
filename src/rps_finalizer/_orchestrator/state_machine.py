# Area: Orchestrator
"""
rps_finalizer._orchestrator.state_machine — Per-game finalization state machine
===============================================================================

Tracks one game's progress from the NeedsFinalization event to a terminal
DONE or FAILED. Terminal states accept no events, so a game is never
re-entered within the process lifetime.
"""

import logging
from typing import Optional

from .enums import FinalizationEvent, FinalizationState

logger = logging.getLogger("rps_finalizer.orchestrator.state_machine")

# Valid state transitions: {current_state: {event: next_state}}
TRANSITIONS = {
    FinalizationState.IDLE: {
        FinalizationEvent.START: FinalizationState.DECRYPTING,
    },
    FinalizationState.DECRYPTING: {
        FinalizationEvent.MOVES_DECRYPTED: FinalizationState.COMPUTING,
        FinalizationEvent.FAILURE: FinalizationState.FAILED,
    },
    FinalizationState.COMPUTING: {
        FinalizationEvent.OUTCOME_COMPUTED: FinalizationState.SUBMITTING,
        FinalizationEvent.FAILURE: FinalizationState.FAILED,
    },
    FinalizationState.SUBMITTING: {
        FinalizationEvent.SUBMISSION_CONFIRMED: FinalizationState.DONE,
        FinalizationEvent.FAILURE: FinalizationState.FAILED,
    },
    FinalizationState.DONE: {},
    FinalizationState.FAILED: {},
}

TERMINAL_STATES = {FinalizationState.DONE, FinalizationState.FAILED}


class FinalizationStateMachine:
    """
    State machine for one game's finalization.

    Attributes:
        game_id: Game this machine belongs to
        current_state: The current state
        failure_reason: Reason recorded on FAILURE, if any
    """

    def __init__(self, game_id: int):
        self.game_id = game_id
        self.current_state = FinalizationState.IDLE
        self.failure_reason: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.current_state in TERMINAL_STATES

    def can_transition(self, event: FinalizationEvent) -> bool:
        """Check if ``event`` is valid from the current state."""
        return event in TRANSITIONS.get(self.current_state, {})

    def transition(self, event: FinalizationEvent) -> FinalizationState:
        """
        Execute a state transition.

        Raises:
            ValueError: If the transition is not valid from the current state
        """
        if not self.can_transition(event):
            raise ValueError(
                f"Game #{self.game_id}: invalid transition {event.value} "
                f"from {self.current_state.value}"
            )
        previous = self.current_state
        self.current_state = TRANSITIONS[previous][event]
        logger.debug("Game #%d: %s -> %s", self.game_id, previous.value, self.current_state.value)
        return self.current_state

    def fail(self, reason: str) -> FinalizationState:
        """Move to FAILED and record why."""
        self.failure_reason = reason
        return self.transition(FinalizationEvent.FAILURE)
