# Area: Orchestrator
"""
rps_finalizer._orchestrator.guard — In-memory idempotency guard
===============================================================

Keyed by game id. ``try_begin`` is the single check-and-mark step: the
first caller for an id gets True and the id becomes IN_FLIGHT; every later
caller gets False until the process exits. A failed attempt is never
cleared, so a duplicate event cannot start a second submission racing the
first.

The guard lives only as long as the process. Protection against a second
process, or against a restart replaying history, comes from the contract
rejecting a second finalizeResult.
"""

import logging
import threading
from typing import Dict, Optional

from .enums import GuardStatus

logger = logging.getLogger("rps_finalizer.orchestrator.guard")


class PendingGuard:
    """Per-game-id in-flight / completed markers."""

    def __init__(self, name: str = "finalize"):
        self.name = name
        self._entries: Dict[int, GuardStatus] = {}
        self._lock = threading.Lock()

    def try_begin(self, game_id: int) -> bool:
        """Mark ``game_id`` in flight unless it is already in flight or completed."""
        with self._lock:
            if game_id in self._entries:
                logger.debug("[%s] game #%d already %s", self.name, game_id,
                             self._entries[game_id].value)
                return False
            self._entries[game_id] = GuardStatus.IN_FLIGHT
            return True

    def complete(self, game_id: int) -> None:
        """Mark ``game_id`` completed (terminal)."""
        with self._lock:
            self._entries[game_id] = GuardStatus.COMPLETED

    def status(self, game_id: int) -> Optional[GuardStatus]:
        with self._lock:
            return self._entries.get(game_id)

    def __contains__(self, game_id: int) -> bool:
        with self._lock:
            return game_id in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
