# Area: Orchestrator
"""
rps_finalizer._orchestrator.dispatcher — Event dispatcher
=========================================================

Routes decoded ledger events to their handlers by event name, one asyncio
task per event. Tasks are tracked until they finish so shutdown can wait
for them; an exception escaping a handler is logged with the game id and
never reaches the subscription loop.

Usage:
    dispatcher = EventDispatcher()
    dispatcher.register_handler("NeedsFinalization", orchestrator)
    dispatcher.dispatch(event)
    ...
    await dispatcher.shutdown(grace_seconds=10)
"""

import asyncio
import logging
from typing import Any, Dict, Optional, Protocol, Set

from .._shared.logging_config import log_task_error
from ..errors import RPSFinalizerError
from ..types import LedgerEvent

logger = logging.getLogger("rps_finalizer.orchestrator.dispatcher")


class EventHandler(Protocol):
    """Protocol for ledger event handlers."""

    async def handle(self, event: LedgerEvent) -> Optional[Any]:
        """Handle an event and optionally return a report."""
        ...


class EventDispatcher:
    """Registry of handlers per event name plus the set of running tasks."""

    def __init__(self):
        self._handlers: Dict[str, EventHandler] = {}
        self._tasks: Set[asyncio.Task] = set()

    def register_handler(self, event_name: str, handler: EventHandler) -> None:
        self._handlers[event_name] = handler
        logger.debug(f"Registered handler for {event_name}")

    def get_handler(self, event_name: str) -> Optional[EventHandler]:
        return self._handlers.get(event_name)

    @property
    def in_flight(self) -> int:
        """Number of handler tasks not yet finished."""
        return len(self._tasks)

    def dispatch(self, event: LedgerEvent) -> Optional[asyncio.Task]:
        """
        Start a task handling ``event``.

        Returns:
            The task, or None if no handler is registered for the event
        """
        handler = self._handlers.get(event.event_name)
        if handler is None:
            logger.warning(f"No handler for event: {event.event_name}")
            return None

        task = asyncio.get_running_loop().create_task(
            self._run(handler, event),
            name=f"{event.event_name}#{event.game_id}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run(self, handler: EventHandler, event: LedgerEvent) -> Optional[Any]:
        try:
            return await handler.handle(event)
        except RPSFinalizerError as e:
            if e.game_id is None:
                e.game_id = event.game_id
            log_task_error(e, logger)
        except Exception:
            logger.exception(
                "Game #%d: %s handler crashed", event.game_id, event.event_name,
                extra={"game_id": event.game_id, "event": event.event_name},
            )
        return None

    async def shutdown(self, grace_seconds: float = 10.0) -> None:
        """Give running tasks ``grace_seconds`` to finish, then cancel the rest."""
        if not self._tasks:
            return
        logger.info("Waiting up to %.1fs for %d in-flight task(s)", grace_seconds, len(self._tasks))
        _, pending = await asyncio.wait(set(self._tasks), timeout=grace_seconds)
        if pending:
            logger.warning("Cancelling %d task(s) still running", len(pending))
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)
