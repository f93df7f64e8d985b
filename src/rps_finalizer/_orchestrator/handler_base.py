# Area: Orchestrator
"""
rps_finalizer._orchestrator.handler_base — Base Event Handler
=============================================================

Abstract base class for the ledger event handlers (the finalization
orchestrator and the auto-play agent).
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

from ..errors import RPSFinalizerError
from ..types import LedgerEvent

logger = logging.getLogger("rps_finalizer.orchestrator.handler")


class BaseEventHandler(ABC):
    """
    Abstract base class for ledger event handlers.

    Handlers are invoked once per event, each in its own task, and must not
    raise for failures of the error taxonomy: those are reported in the
    handler's return value and logged.
    """

    @abstractmethod
    async def handle(self, event: LedgerEvent) -> Optional[Any]:
        """
        Handle a decoded ledger event.

        Args:
            event: The event to handle

        Returns:
            A report describing what was done, or None if the event was ignored
        """
        pass

    def log_handling(self, event: LedgerEvent) -> None:
        """Log that an event is being handled."""
        if event.block_number is not None:
            logger.info(f"Handling {event.event_name} for game #{event.game_id} "
                        f"(block {event.block_number})")
        else:
            logger.info(f"Handling {event.event_name} for game #{event.game_id}")

    @staticmethod
    def attach_context(error: RPSFinalizerError, game_id: int, slot: Optional[int] = None) -> RPSFinalizerError:
        """Fill in game id and slot on an error raised below the handler."""
        if error.game_id is None:
            error.game_id = game_id
        if slot is not None and error.slot is None:
            error.slot = slot
        return error
