# Area: Orchestrator
"""
rps_finalizer._orchestrator.game_book — Game views re-derived from the ledger
=============================================================================

Keeps a Game record per id, built only from observed events and confirmed
calls. Status never moves backwards, and a FINALIZED game is frozen.
Nothing here is persisted; after a restart the book is rebuilt by replaying
events.
"""

import logging
from typing import Dict, Optional

from ..types import (
    STATUS_ORDER,
    Game,
    GameCreated,
    GameFinalized,
    GameResult,
    GameStatus,
    LedgerEvent,
    NeedsFinalization,
)

logger = logging.getLogger("rps_finalizer.orchestrator.game_book")


class GameBook:
    """In-memory view of every game seen in this process."""

    def __init__(self):
        self._games: Dict[int, Game] = {}

    def get(self, game_id: int) -> Optional[Game]:
        return self._games.get(game_id)

    def __len__(self) -> int:
        return len(self._games)

    def _game(self, game_id: int) -> Game:
        if game_id not in self._games:
            self._games[game_id] = Game(game_id=game_id)
        return self._games[game_id]

    def _advance(self, game: Game, status: GameStatus) -> bool:
        if game.is_finalized:
            return False
        if STATUS_ORDER[status] < STATUS_ORDER[game.status]:
            return False
        game.status = status
        return True

    def observe(self, event: LedgerEvent) -> Game:
        """Apply a decoded ledger event and return the updated game."""
        game = self._game(event.game_id)
        if isinstance(event, GameCreated):
            if game.creator is None:
                game.creator = event.creator
        elif isinstance(event, NeedsFinalization):
            if self._advance(game, GameStatus.AWAITING_FINALIZATION):
                game.move_handles = [event.move1_handle, event.move2_handle]
        elif isinstance(event, GameFinalized):
            if self._advance(game, GameStatus.FINALIZED):
                game.result = GameResult.from_outcome(event.outcome)
                logger.debug("Game #%d finalized: %s", game.game_id, game.result.value)
        return game

    def record_joined(self, game_id: int, opponent: str) -> Game:
        """Apply a confirmed joinGame."""
        game = self._game(game_id)
        if self._advance(game, GameStatus.JOINED):
            game.opponent = opponent
        return game

    def record_move_submitted(self, game_id: int, slot: int, handle: bytes) -> Game:
        """Apply a confirmed submitMove for player ``slot`` (1 or 2)."""
        game = self._game(game_id)
        if not game.is_finalized:
            game.move_handles[slot - 1] = handle
            if all(h is not None for h in game.move_handles):
                self._advance(game, GameStatus.MOVES_SUBMITTED)
        return game

    def is_finalized(self, game_id: int) -> bool:
        game = self._games.get(game_id)
        return game is not None and game.is_finalized
