# Area: Ledger
"""
rps_finalizer._ledger.subscription — Event subscription by log polling
======================================================================

One long-lived loop per event kind. Each poll reads the contract logs for
the next block range (at most ``max_block_range`` blocks) and moves the
cursor past it only after the read succeeded. A failed read is retried
from the same block on the next poll, so delivery is at-least-once and
consumers must tolerate duplicates. Chunks behind the head are read back to
back; the loop waits ``poll_interval`` only once caught up or after a
failed read.

    sub = EventSubscription(ledger, ["NeedsFinalization"], poll_interval=5)
    async for event in sub.events():
        dispatcher.dispatch(event)
"""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator, List, Optional, Sequence

from ..errors import TransportError
from ..types import LedgerEvent
from .client import LedgerClient

logger = logging.getLogger("rps_finalizer.ledger.subscription")


class EventSubscription:
    """
    Polls ``eth_getLogs`` for a fixed set of contract events.

    Attributes:
        event_names: ABI names of the events to deliver
        poll_interval: Seconds to wait between polls once caught up
        from_block: First block to read; None means "from the next block"
        max_block_range: Largest block span per eth_getLogs call
    """

    def __init__(
        self,
        ledger: LedgerClient,
        event_names: Sequence[str],
        poll_interval: float = 5.0,
        from_block: Optional[int] = None,
        max_block_range: int = 2000,
    ):
        self.ledger = ledger
        self.event_names = list(event_names)
        self.poll_interval = poll_interval
        self.from_block = from_block
        self.max_block_range = max(1, max_block_range)
        self.topics = [ledger.topic_for(name) for name in self.event_names]
        self.name = "+".join(self.event_names)
        self._cursor: Optional[int] = None
        self._latest: Optional[int] = None
        self._stopped = asyncio.Event()

    @property
    def cursor(self) -> Optional[int]:
        """Next block that will be read."""
        return self._cursor

    @property
    def caught_up(self) -> bool:
        return self._cursor is not None and self._latest is not None and self._cursor > self._latest

    async def poll(self) -> List[LedgerEvent]:
        """
        Read the next block range.

        Raises:
            TransportError: The RPC endpoint failed; the cursor did not move
        """
        latest = await self.ledger.block_number()
        self._latest = latest
        if self._cursor is None:
            self._cursor = latest + 1 if self.from_block is None else self.from_block
            logger.info("[%s] subscribed from block %d", self.name, self._cursor)
        if self._cursor > latest:
            return []

        end = min(self._cursor + self.max_block_range - 1, latest)
        logs = await self.ledger.get_logs(self._cursor, end, self.topics)
        events: List[LedgerEvent] = []
        for log in logs:
            event = self.ledger.decode_log(log)
            if event is not None:
                events.append(event)
        logger.debug("[%s] blocks %d-%d: %d event(s)", self.name, self._cursor, end, len(events))
        self._cursor = end + 1
        return events

    async def events(self) -> AsyncIterator[LedgerEvent]:
        """Yield events until stop() is called."""
        while not self._stopped.is_set():
            try:
                batch = await self.poll()
            except TransportError as e:
                logger.warning("[%s] poll failed, retrying from block %s: %s",
                               self.name, self._cursor, e)
                await self._sleep()
                continue
            for event in batch:
                yield event
            if self.caught_up:
                await self._sleep()

    def stop(self) -> None:
        """Stop delivering events; the current poll finishes first."""
        self._stopped.set()

    async def _sleep(self) -> None:
        try:
            await asyncio.wait_for(self._stopped.wait(), timeout=self.poll_interval)
        except asyncio.TimeoutError:
            pass
