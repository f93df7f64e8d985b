# Area: Orchestrator
"""
rps_finalizer._orchestrator.finalizer — Finalization orchestrator
=================================================================

Handles NeedsFinalization: decrypt both move handles through the gateway,
apply the winner rule and commit the outcome with finalizeResult.

    NeedsFinalization(game, h1, h2)
        guard.try_begin(game)        duplicate or replay -> skipped
        DECRYPTING   h1 then h2      failure -> FAILED (slot reported)
        COMPUTING    winner rule
        SUBMITTING   finalizeResult  failure -> FAILED (guard stays in flight)
        DONE                         guard completed

No step is retried. A game that failed stays awaiting finalization on the
ledger until something re-triggers it in a new process.
"""

import logging
from typing import Optional

from .._game.winner_rule import winner
from .._gateway.client import DecryptionGatewayClient
from .._ledger.client import LedgerClient, receipt_summary
from .._shared.game_logger import GameLogger
from .._shared.logging_config import log_task_error
from ..errors import RPSFinalizerError
from ..types import GameFinalized, LedgerEvent, NeedsFinalization
from .enums import FinalizationEvent, FinalizationState
from .game_book import GameBook
from .guard import PendingGuard
from .handler_base import BaseEventHandler
from .reports import FinalizationReport
from .state_machine import FinalizationStateMachine

logger = logging.getLogger("rps_finalizer.orchestrator.finalizer")


class FinalizationOrchestrator(BaseEventHandler):
    """
    Drives each awaiting game to a committed result.

    Attributes:
        ledger: Contract client used for finalizeResult
        gateway: Decryption gateway client
        guard: Per-game in-flight / completed markers
        book: Game views re-derived from observed events
    """

    def __init__(
        self,
        ledger: LedgerClient,
        gateway: DecryptionGatewayClient,
        guard: Optional[PendingGuard] = None,
        book: Optional[GameBook] = None,
        game_logger: Optional[GameLogger] = None,
    ):
        self.ledger = ledger
        self.gateway = gateway
        self.guard = guard if guard is not None else PendingGuard("finalize")
        self.book = book if book is not None else GameBook()
        self.game_logger = game_logger or GameLogger()

    async def handle(self, event: LedgerEvent) -> Optional[FinalizationReport]:
        if isinstance(event, NeedsFinalization):
            return await self.finalize(event)
        if isinstance(event, GameFinalized):
            self.observe_finalized(event)
            return None
        logger.debug(f"Ignoring {event.event_name} for game #{event.game_id}")
        return None

    def observe_finalized(self, event: GameFinalized) -> None:
        """Record a committed result; later NeedsFinalization for the game is skipped."""
        self.book.observe(event)
        self.guard.complete(event.game_id)
        logger.info("Game #%d finalized on the ledger: %s", event.game_id, event.outcome.label)

    async def finalize(self, event: NeedsFinalization) -> FinalizationReport:
        """Run one game through DECRYPTING, COMPUTING and SUBMITTING."""
        game_id = event.game_id
        self.game_logger.log_received(game_id, event.event_name, event.block_number)

        # Check-and-mark must stay a single synchronous step.
        if not self.guard.try_begin(game_id):
            self.game_logger.log_skipped(game_id, "already handled")
            return FinalizationReport(game_id, FinalizationState.IDLE, skipped=True)

        self.log_handling(event)
        self.book.observe(event)
        machine = FinalizationStateMachine(game_id)
        report = FinalizationReport(game_id, machine.transition(FinalizationEvent.START))

        # DECRYPTING
        handles = (event.move1_handle, event.move2_handle)
        for slot, handle in enumerate(handles, start=1):
            try:
                symbol = await self.gateway.decrypt_move(handle, game_id=game_id, slot=slot)
            except RPSFinalizerError as e:
                report.failed_slot = slot
                return self._fail(machine, report, self.attach_context(e, game_id, slot))
            report.moves[slot - 1] = symbol
            self.game_logger.log_decrypted(game_id, slot, symbol.label)
        report.state = machine.transition(FinalizationEvent.MOVES_DECRYPTED)

        # COMPUTING
        try:
            outcome = winner(report.moves[0], report.moves[1])
        except RPSFinalizerError as e:
            return self._fail(machine, report, self.attach_context(e, game_id))
        report.outcome = outcome
        report.state = machine.transition(FinalizationEvent.OUTCOME_COMPUTED)
        self.game_logger.log_result(
            game_id, outcome.label, f"{report.moves[0].label} vs {report.moves[1].label}"
        )

        # SUBMITTING
        try:
            receipt = await self.ledger.finalize_result(game_id, outcome)
        except RPSFinalizerError as e:
            return self._fail(machine, report, self.attach_context(e, game_id))
        report.transaction_hash = receipt_summary(receipt)["transaction_hash"]
        report.state = machine.transition(FinalizationEvent.SUBMISSION_CONFIRMED)
        self.guard.complete(game_id)
        self.game_logger.log_sent(game_id, "finalizeResult", report.transaction_hash)
        logger.info(
            "Game #%d finalized: %s (%s vs %s)",
            game_id, outcome.label, report.moves[0].label, report.moves[1].label,
            extra={"game_id": game_id, "transaction_hash": report.transaction_hash},
        )
        return report

    def _fail(
        self,
        machine: FinalizationStateMachine,
        report: FinalizationReport,
        error: RPSFinalizerError,
    ) -> FinalizationReport:
        report.state = machine.fail(str(error))
        report.error = error
        log_task_error(error, logger)
        self.game_logger.log_failed(report.game_id, f"{error.error_type} {error}")
        return report
