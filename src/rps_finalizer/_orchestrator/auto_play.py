# Area: Orchestrator
"""
rps_finalizer._orchestrator.auto_play — Auto-play agent
=======================================================

Joins every game created by someone else and plays a uniformly random
encrypted move:

    GameCreated(game, creator)
        creator is the agent           -> skipped
        joinGame(game)
        draw symbol, encrypt for (contract, agent)
        submitMove(game, ciphertext)

Each failure is logged and ends only that game's sequence.
"""

import logging
import secrets
from typing import Callable, Optional

from .._game.move_codec import MoveCodec, validate_symbol
from .._ledger.client import LedgerClient, receipt_summary
from .._shared.game_logger import GameLogger
from .._shared.logging_config import log_task_error
from ..errors import RPSFinalizerError
from ..types import GameCreated, LedgerEvent, Symbol
from .game_book import GameBook
from .guard import PendingGuard
from .handler_base import BaseEventHandler
from .reports import AutoPlayReport

logger = logging.getLogger("rps_finalizer.orchestrator.auto_play")

# The agent always occupies the joining player's slot.
OPPONENT_SLOT = 2


def random_symbol() -> Symbol:
    """Uniformly random symbol."""
    return Symbol(secrets.randbelow(3))


def same_address(a: Optional[str], b: Optional[str]) -> bool:
    """Compare two hex addresses ignoring checksum casing."""
    if a is None or b is None:
        return False
    return a.lower() == b.lower()


class AutoPlayAgent(BaseEventHandler):
    """
    Plays one random move in every foreign game.

    Attributes:
        ledger: Contract client for the agent's account
        codec: Move codec bound to the encryption capability
        guard: Prevents a second join for the same game id
        book: Game views re-derived from observed events
    """

    def __init__(
        self,
        ledger: LedgerClient,
        codec: MoveCodec,
        guard: Optional[PendingGuard] = None,
        book: Optional[GameBook] = None,
        game_logger: Optional[GameLogger] = None,
        chooser: Callable[[], int] = random_symbol,
    ):
        self.ledger = ledger
        self.codec = codec
        self.guard = guard if guard is not None else PendingGuard("join")
        self.book = book if book is not None else GameBook()
        self.game_logger = game_logger or GameLogger()
        self._choose = chooser

    async def handle(self, event: LedgerEvent) -> Optional[AutoPlayReport]:
        if isinstance(event, GameCreated):
            return await self.play(event)
        logger.debug(f"Ignoring {event.event_name} for game #{event.game_id}")
        return None

    async def play(self, event: GameCreated) -> AutoPlayReport:
        game_id = event.game_id
        report = AutoPlayReport(game_id)
        self.book.observe(event)
        self.game_logger.log_received(game_id, event.event_name, event.block_number)

        if same_address(event.creator, self.ledger.address):
            report.skipped_reason = "own game"
        elif not self.guard.try_begin(game_id):
            report.skipped_reason = "already joined"
        if report.skipped:
            logger.debug("Game #%d skipped: %s", game_id, report.skipped_reason)
            self.game_logger.log_skipped(game_id, report.skipped_reason)
            return report

        self.log_handling(event)
        try:
            receipt = await self.ledger.join_game(game_id)
            report.joined = True
            self.book.record_joined(game_id, self.ledger.address)
            self.game_logger.log_sent(game_id, "joinGame", receipt_summary(receipt)["transaction_hash"])

            symbol = validate_symbol(self._choose())
            report.symbol = symbol
            encrypted = await self.codec.encode(symbol, self.ledger.contract_address, self.ledger.address)

            receipt = await self.ledger.submit_move(game_id, encrypted.calldata)
            report.submitted = True
            self.book.record_move_submitted(game_id, OPPONENT_SLOT, encrypted.handle)
            self.game_logger.log_sent(game_id, "submitMove", receipt_summary(receipt)["transaction_hash"])
        except RPSFinalizerError as e:
            report.error = self.attach_context(e, game_id)
            log_task_error(report.error, logger)
            self.game_logger.log_failed(game_id, f"{e.error_type} {e}")
            return report

        self.guard.complete(game_id)
        logger.info("Game #%d: joined and played %s", game_id, symbol.label,
                    extra={"game_id": game_id})
        return report
