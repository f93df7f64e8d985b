# Area: Shared
"""
rps_finalizer.runner — Process lifecycle
========================================

Wires settings into clients, subscriptions and handlers, and runs them
until a stop is requested:

    mode "finalizer"   NeedsFinalization + GameFinalized -> FinalizationOrchestrator
    mode "bot"         GameCreated                       -> AutoPlayAgent
    mode "all"         both, sharing one ledger client and game book

Every collaborator can be injected; only missing ones are built from the
settings, and only those are closed on shutdown.

NeedsFinalization and GameFinalized are polled on separate subscriptions,
so their relative order is not guaranteed. On a ``--from-block`` replay the
GameFinalized skip only applies when that log is dispatched first;
otherwise the contract rejecting a second ``finalizeResult`` is what stops
the duplicate, and the game is logged as failed.

Bot modes without ``ENCRYPTOR_URL`` send encryption requests to the
relayer URL and log a warning at startup.
"""

from __future__ import annotations

import asyncio
import logging
import signal
from typing import Dict, List, Optional

from eth_account import Account

from ._game.move_codec import MoveCodec
from ._gateway.client import DecryptionGatewayClient
from ._gateway.relayer import ENCRYPT_PATH, RelayerDecryptionService, RelayerEncryptionService
from ._ledger.abi import GAME_CREATED, GAME_FINALIZED
from ._ledger.client import LedgerClient
from ._ledger.subscription import EventSubscription
from ._orchestrator.auto_play import AutoPlayAgent
from ._orchestrator.dispatcher import EventDispatcher
from ._orchestrator.finalizer import FinalizationOrchestrator
from ._orchestrator.game_book import GameBook
from ._runner_config import RunnerSettings
from ._shared.game_logger import GameLogger

logger = logging.getLogger("rps_finalizer")

MODES = ("finalizer", "bot", "all")


def build_ledger(settings: RunnerSettings) -> LedgerClient:
    """Ledger client for the configured account and contract."""
    return LedgerClient.connect(
        settings.rpc_url,
        settings.admin_private_key.get_secret_value(),
        settings.contract_address,
        chain_id=settings.chain_id,
        confirmation_timeout_seconds=settings.confirmation_timeout_seconds,
        needs_finalization_event=settings.needs_finalization_event,
    )


async def create_game(settings: RunnerSettings, wager: int,
                      ledger: Optional[LedgerClient] = None) -> int:
    """Create a game and return its ledger-assigned id."""
    owned = ledger is None
    ledger = ledger or build_ledger(settings)
    try:
        return await ledger.create_game(wager)
    finally:
        if owned:
            await ledger.close()


class FinalizerRunner:
    """
    Runs the finalizer, the auto-play agent, or both.

    Usage:
        runner = FinalizerRunner(load_settings(), mode="all")
        runner.run()            # blocks until SIGINT / SIGTERM
    """

    def __init__(
        self,
        settings: RunnerSettings,
        mode: str = "finalizer",
        *,
        ledger: Optional[LedgerClient] = None,
        gateway: Optional[DecryptionGatewayClient] = None,
        codec: Optional[MoveCodec] = None,
        dispatcher: Optional[EventDispatcher] = None,
        book: Optional[GameBook] = None,
        game_logger: Optional[GameLogger] = None,
    ):
        if mode not in MODES:
            raise ValueError(f"Unknown mode {mode!r}; expected one of {', '.join(MODES)}")
        self.settings = settings
        self.mode = mode
        self._owned_ledger = ledger is None
        self._owned_services: List = []

        self.ledger = ledger or build_ledger(settings)
        self._owned_codec = codec is None
        self.codec = codec or self._build_codec()
        self.book = book if book is not None else GameBook()
        self.game_logger = game_logger or GameLogger()
        self.dispatcher = dispatcher or EventDispatcher()
        self.subscriptions: List[EventSubscription] = []

        self.gateway: Optional[DecryptionGatewayClient] = None
        self.finalizer: Optional[FinalizationOrchestrator] = None
        self.agent: Optional[AutoPlayAgent] = None

        if mode in ("finalizer", "all"):
            self.gateway = gateway or self._build_gateway()
            self.finalizer = FinalizationOrchestrator(
                self.ledger, self.gateway, book=self.book, game_logger=self.game_logger
            )
            self.dispatcher.register_handler("NeedsFinalization", self.finalizer)
            self.dispatcher.register_handler("GameFinalized", self.finalizer)
            self._subscribe(settings.needs_finalization_event)
            self._subscribe(GAME_FINALIZED)

        if mode in ("bot", "all"):
            self.agent = AutoPlayAgent(
                self.ledger, self.codec, book=self.book, game_logger=self.game_logger
            )
            self.dispatcher.register_handler("GameCreated", self.agent)
            self._subscribe(GAME_CREATED)

        self._stop_event: Optional[asyncio.Event] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._stop_requested = False

    # ──────────────────────────────────────────────────────────────
    # Construction helpers
    # ──────────────────────────────────────────────────────────────

    def _build_codec(self) -> MoveCodec:
        timeout = self.settings.gateway_timeout_seconds
        encryptor = RelayerEncryptionService(self.settings.effective_encryptor_url, timeout_seconds=timeout)
        decryptor = RelayerDecryptionService(self.settings.relayer_url, timeout_seconds=timeout)
        self._owned_services.extend([encryptor, decryptor])
        return MoveCodec(encryptor, decryptor)

    def _build_gateway(self) -> DecryptionGatewayClient:
        return DecryptionGatewayClient(
            self.codec,
            Account.from_key(self.settings.admin_private_key.get_secret_value()),
            contract_address=self.ledger.contract_address,
            chain_id=self.settings.chain_id,
            verifying_contract=self.settings.decryption_verifier_address,
            variant=self.settings.decryption_variant,
            timeout_seconds=self.settings.gateway_timeout_seconds,
        )

    def _subscribe(self, event_name: str) -> None:
        self.subscriptions.append(EventSubscription(
            self.ledger,
            [event_name],
            poll_interval=self.settings.poll_interval_seconds,
            from_block=self.settings.from_block,
            max_block_range=self.settings.max_block_range,
        ))

    # ──────────────────────────────────────────────────────────────
    # Lifecycle
    # ──────────────────────────────────────────────────────────────

    def run(self) -> None:
        """Start the event loops. Blocks until SIGINT / SIGTERM."""
        try:
            asyncio.run(self._main())
        except KeyboardInterrupt:
            pass

    async def _main(self) -> None:
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, self.stop)
            except (NotImplementedError, RuntimeError):
                signal.signal(sig, lambda s, f: self.stop())
        await self.run_async()

    async def run_async(self) -> None:
        """Run until stop() is called, then shut down gracefully."""
        self._loop = asyncio.get_running_loop()
        self._stop_event = asyncio.Event()
        if self._stop_requested:
            self._stop_event.set()

        loops: Dict[str, asyncio.Task] = {}
        try:
            await self._resolve_chain_id()
            self._log_startup()
            for sub in self.subscriptions:
                loops[sub.name] = asyncio.create_task(self._consume(sub), name=f"subscription:{sub.name}")
            await self._stop_event.wait()
        finally:
            await self._shutdown(list(loops.values()))

    def stop(self) -> None:
        """Request shutdown; safe to call from a signal handler or another thread."""
        self._stop_requested = True
        if self._loop is not None and self._stop_event is not None:
            self._loop.call_soon_threadsafe(self._stop_event.set)

    async def _resolve_chain_id(self) -> None:
        if self.gateway is not None and self.gateway.chain_id is None:
            self.gateway.chain_id = await self.ledger.get_chain_id()

    async def _consume(self, sub: EventSubscription) -> None:
        try:
            async for event in sub.events():
                self.dispatcher.dispatch(event)
        except Exception:
            logger.exception("Subscription %s crashed; stopping", sub.name)
            self.stop()

    async def _shutdown(self, loops: List[asyncio.Task]) -> None:
        logger.info("Shutting down...")
        for sub in self.subscriptions:
            sub.stop()
        for task in loops:
            task.cancel()
        await asyncio.gather(*loops, return_exceptions=True)
        await self.dispatcher.shutdown(self.settings.shutdown_grace_seconds)
        for service in self._owned_services:
            await service.aclose()
        if self._owned_ledger:
            await self.ledger.close()
        logger.info("Runner stopped.")

    def _log_startup(self) -> None:
        logger.info("=" * 60)
        logger.info(f"  RPS Finalizer — Starting ({self.mode})")
        logger.info(f"  Account:  {self.ledger.address}")
        logger.info(f"  Contract: {self.ledger.contract_address}")
        if self.gateway is not None:
            logger.info(f"  Gateway:  {self.settings.relayer_url} ({self.gateway.variant.value}, "
                        f"chain {self.gateway.chain_id})")
        logger.info(f"  Events:   {', '.join(sub.name for sub in self.subscriptions)}")
        logger.info(f"  Poll:     every {self.settings.poll_interval_seconds}s")
        logger.info("=" * 60)
        if self.agent is not None and self._owned_codec and self.settings.encryptor_url is None:
            logger.warning(
                "ENCRYPTOR_URL is not set; moves will be encrypted via %s%s, "
                "which the public relayer does not serve",
                self.settings.relayer_url, ENCRYPT_PATH,
            )
