# Area: Ledger
"""
Ledger access: contract ABI, log decoding, write calls and event subscription.
"""

from .abi import GAME_CREATED, GAME_FINALIZED, NEEDS_FINALIZATION, contract_abi
from .client import LedgerClient
from .events import EventDecoder, event_topics
from .subscription import EventSubscription

__all__ = [
    "GAME_CREATED",
    "GAME_FINALIZED",
    "NEEDS_FINALIZATION",
    "contract_abi",
    "LedgerClient",
    "EventDecoder",
    "event_topics",
    "EventSubscription",
]
