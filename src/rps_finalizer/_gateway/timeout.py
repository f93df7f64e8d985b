# Area: Gateway
"""
rps_finalizer._gateway.timeout — Deadline for gateway round trips
=================================================================

The decryption gateway may never answer. Every round trip is wrapped in
``asyncio.wait_for``; an expired deadline cancels the pending request and is
reported as GatewayUnavailable so the caller can decide what to do.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Optional, TypeVar

from ..errors import GatewayUnavailable

T = TypeVar("T")


async def with_deadline(
    awaitable: Awaitable[T],
    seconds: Optional[float],
    operation: str,
    game_id: Optional[int] = None,
    slot: Optional[int] = None,
) -> T:
    """Await ``awaitable`` for at most ``seconds`` (no limit when None)."""
    if seconds is None:
        return await awaitable
    try:
        return await asyncio.wait_for(awaitable, timeout=seconds)
    except asyncio.TimeoutError:
        raise GatewayUnavailable(
            f"{operation} timed out after {seconds} seconds",
            timeout_seconds=seconds,
            game_id=game_id,
            slot=slot,
        ) from None
