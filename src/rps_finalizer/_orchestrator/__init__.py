# Area: Orchestrator
"""
Event handling: the finalization orchestrator, the auto-play agent and
the pieces they share (guard, state machine, game book, dispatcher).
"""

from .auto_play import AutoPlayAgent, random_symbol
from .dispatcher import EventDispatcher
from .enums import FinalizationEvent, FinalizationState, GuardStatus
from .finalizer import FinalizationOrchestrator
from .game_book import GameBook
from .guard import PendingGuard
from .handler_base import BaseEventHandler
from .reports import AutoPlayReport, FinalizationReport
from .state_machine import FinalizationStateMachine

__all__ = [
    "AutoPlayAgent",
    "random_symbol",
    "EventDispatcher",
    "FinalizationEvent",
    "FinalizationState",
    "GuardStatus",
    "FinalizationOrchestrator",
    "GameBook",
    "PendingGuard",
    "BaseEventHandler",
    "AutoPlayReport",
    "FinalizationReport",
    "FinalizationStateMachine",
]
