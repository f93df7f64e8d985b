# Area: Orchestrator Tests
"""Tests for the event dispatcher."""

import asyncio
from unittest.mock import AsyncMock, Mock, patch

import pytest
from rps_finalizer._orchestrator.dispatcher import EventDispatcher
from rps_finalizer.errors import TransportError
from rps_finalizer.types import GameCreated, NeedsFinalization

CREATOR = "0x" + "11" * 20


class TestEventDispatcher:
    """Tests for EventDispatcher routing."""

    @pytest.mark.asyncio
    async def test_routes_to_registered_handler(self):
        dispatcher = EventDispatcher()
        handler = Mock()
        handler.handle = AsyncMock(return_value="report")
        dispatcher.register_handler("GameCreated", handler)
        event = GameCreated(1, creator=CREATOR)

        result = await dispatcher.dispatch(event)

        handler.handle.assert_awaited_once_with(event)
        assert result == "report"
        assert dispatcher.get_handler("GameCreated") is handler

    @pytest.mark.asyncio
    async def test_returns_none_for_unknown_event(self):
        dispatcher = EventDispatcher()
        assert dispatcher.dispatch(GameCreated(1, creator=CREATOR)) is None

    @pytest.mark.asyncio
    async def test_handler_crash_is_isolated(self):
        """Test that an exception in one task is logged and does not propagate."""
        dispatcher = EventDispatcher()
        handler = Mock()
        handler.handle = AsyncMock(side_effect=RuntimeError("bug"))
        dispatcher.register_handler("GameCreated", handler)

        with patch("rps_finalizer._orchestrator.dispatcher.logger") as mock_logger:
            result = await dispatcher.dispatch(GameCreated(5, creator=CREATOR))

        assert result is None
        mock_logger.exception.assert_called_once()
        assert mock_logger.exception.call_args.kwargs["extra"]["game_id"] == 5

    @pytest.mark.asyncio
    async def test_taxonomy_error_gets_game_id(self):
        dispatcher = EventDispatcher()
        error = TransportError("rpc down")
        handler = Mock()
        handler.handle = AsyncMock(side_effect=error)
        dispatcher.register_handler("NeedsFinalization", handler)

        await dispatcher.dispatch(NeedsFinalization(9, move1_handle=b"a", move2_handle=b"b"))

        assert error.game_id == 9

    @pytest.mark.asyncio
    async def test_tasks_are_tracked_until_done(self):
        dispatcher = EventDispatcher()
        release = asyncio.Event()

        async def slow(event):
            await release.wait()

        handler = Mock()
        handler.handle = slow
        dispatcher.register_handler("GameCreated", handler)

        dispatcher.dispatch(GameCreated(1, creator=CREATOR))
        dispatcher.dispatch(GameCreated(2, creator=CREATOR))
        await asyncio.sleep(0)
        assert dispatcher.in_flight == 2

        release.set()
        await dispatcher.shutdown(grace_seconds=1)
        assert dispatcher.in_flight == 0

    @pytest.mark.asyncio
    async def test_shutdown_cancels_after_grace(self):
        dispatcher = EventDispatcher()
        started = asyncio.Event()

        async def forever(event):
            started.set()
            await asyncio.sleep(3600)

        handler = Mock()
        handler.handle = forever
        dispatcher.register_handler("GameCreated", handler)
        task = dispatcher.dispatch(GameCreated(1, creator=CREATOR))
        await started.wait()

        await dispatcher.shutdown(grace_seconds=0.01)

        assert task.cancelled()
        assert dispatcher.in_flight == 0

    @pytest.mark.asyncio
    async def test_shutdown_waits_for_quick_tasks(self):
        dispatcher = EventDispatcher()
        handler = Mock()
        handler.handle = AsyncMock(return_value="done")
        dispatcher.register_handler("GameCreated", handler)
        task = dispatcher.dispatch(GameCreated(1, creator=CREATOR))

        await dispatcher.shutdown(grace_seconds=1.0)

        assert task.result() == "done"
