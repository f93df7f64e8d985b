"""
rps_finalizer — Off-chain finalization for encrypted Rock-Paper-Scissors
========================================================================

Watches a Rock-Paper-Scissors contract whose moves are stored as FHE
ciphertext handles. When both moves of a game are on the ledger, the
finalizer decrypts them through the threshold-decryption gateway, applies
the winner rule and commits the outcome. An optional auto-play agent joins
foreign games and plays a random encrypted move.

Quick Start:
    from rps_finalizer import FinalizerRunner, load_settings
    runner = FinalizerRunner(load_settings(), mode="finalizer")
    runner.run()

Or from the shell:
    rps-finalizer finalizer

Components
----------
    MoveCodec, winner                  pure game rules
    DecryptionGatewayClient            authorized decryption of move handles
    LedgerClient, EventSubscription    contract writes and event polling
    FinalizationOrchestrator           NeedsFinalization -> finalizeResult
    AutoPlayAgent                      GameCreated -> joinGame + submitMove
"""

from ._game import MoveCodec, winner
from ._gateway import DecryptionGatewayClient, DecryptionVariant
from ._ledger import EventSubscription, LedgerClient
from ._orchestrator import (
    AutoPlayAgent,
    AutoPlayReport,
    EventDispatcher,
    FinalizationOrchestrator,
    FinalizationReport,
    FinalizationState,
    PendingGuard,
)
from ._runner_config import RunnerSettings, load_settings
from .capabilities import DecryptionService, EncryptionService
from .errors import (
    AuthorizationError,
    ConfigError,
    DecryptedValueOutOfRange,
    GatewayUnavailable,
    InvalidSymbol,
    RPSFinalizerError,
    TransportError,
)
from .runner import FinalizerRunner
from .types import (
    EncryptedMove,
    Game,
    GameCreated,
    GameFinalized,
    GameResult,
    GameStatus,
    NeedsFinalization,
    Outcome,
    Symbol,
)

__version__ = "1.0.0"

__all__ = [
    # Main classes
    "FinalizerRunner",
    "RunnerSettings",
    "load_settings",
    "FinalizationOrchestrator",
    "AutoPlayAgent",
    "EventDispatcher",
    "PendingGuard",
    "FinalizationReport",
    "AutoPlayReport",
    "FinalizationState",
    # Clients and capabilities
    "LedgerClient",
    "EventSubscription",
    "DecryptionGatewayClient",
    "DecryptionVariant",
    "DecryptionService",
    "EncryptionService",
    "MoveCodec",
    "winner",
    # Errors
    "RPSFinalizerError",
    "ConfigError",
    "TransportError",
    "GatewayUnavailable",
    "AuthorizationError",
    "DecryptedValueOutOfRange",
    "InvalidSymbol",
    # Types
    "Symbol",
    "Outcome",
    "GameResult",
    "GameStatus",
    "Game",
    "GameCreated",
    "NeedsFinalization",
    "GameFinalized",
    "EncryptedMove",
]
