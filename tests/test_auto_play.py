# Area: Orchestrator Tests
"""Tests for the auto-play agent."""

from io import StringIO
from unittest.mock import AsyncMock, Mock

import pytest
from rps_finalizer._game.move_codec import MoveCodec
from rps_finalizer._orchestrator.auto_play import AutoPlayAgent, random_symbol, same_address
from rps_finalizer._shared.game_logger import GameLogger
from rps_finalizer.capabilities import EncryptionService
from rps_finalizer.errors import GatewayUnavailable, TransportError
from rps_finalizer.types import EncryptedMove, GameCreated, GameStatus, NeedsFinalization, Symbol

AGENT = "0xAbCdEf0123456789aBcDeF0123456789AbCdEf01"
OTHER = "0x" + "77" * 20
CONTRACT = "0x" + "ab" * 20


class RecordingEncryptor(EncryptionService):
    def __init__(self, error=None):
        self.calls = []
        self.error = error

    async def encrypt(self, value, contract_address, user_address):
        self.calls.append((value, contract_address, user_address))
        if self.error is not None:
            raise self.error
        return EncryptedMove(handle=bytes([value]) * 32, proof=b"proof-" + bytes([value]))


def make_ledger():
    ledger = Mock()
    ledger.address = AGENT
    ledger.contract_address = CONTRACT
    ledger.join_game = AsyncMock(return_value={"status": 1, "transactionHash": b"\x01" * 32})
    ledger.submit_move = AsyncMock(return_value={"status": 1, "transactionHash": b"\x02" * 32})
    return ledger


def make_agent(ledger=None, encryptor=None, symbol=Symbol.SCISSORS):
    ledger = ledger or make_ledger()
    encryptor = encryptor or RecordingEncryptor()
    agent = AutoPlayAgent(
        ledger,
        MoveCodec(encryptor, decryptor=Mock()),
        game_logger=GameLogger(stream=StringIO()),
        chooser=lambda: symbol,
    )
    return agent, ledger, encryptor


class TestAutoPlaySkips:
    """Tests for games the agent must not join."""

    @pytest.mark.asyncio
    async def test_own_game_is_ignored(self):
        """Test that a game created by the agent gets zero joins."""
        agent, ledger, encryptor = make_agent()

        report = await agent.handle(GameCreated(3, creator=AGENT.lower()))

        assert report.skipped_reason == "own game"
        ledger.join_game.assert_not_awaited()
        assert encryptor.calls == []

    @pytest.mark.asyncio
    async def test_duplicate_event_joins_once(self):
        agent, ledger, _ = make_agent()

        await agent.handle(GameCreated(4, creator=OTHER))
        report = await agent.handle(GameCreated(4, creator=OTHER))

        assert report.skipped_reason == "already joined"
        assert ledger.join_game.await_count == 1

    @pytest.mark.asyncio
    async def test_other_events_ignored(self):
        agent, ledger, _ = make_agent()
        assert await agent.handle(NeedsFinalization(4, move1_handle=b"a", move2_handle=b"b")) is None
        ledger.join_game.assert_not_awaited()


class TestAutoPlaySequence:
    """Tests for join, encrypt and submit."""

    @pytest.mark.asyncio
    async def test_joins_and_submits_encrypted_move(self):
        agent, ledger, encryptor = make_agent(symbol=Symbol.SCISSORS)

        report = await agent.handle(GameCreated(5, creator=OTHER))

        ledger.join_game.assert_awaited_once_with(5)
        assert encryptor.calls == [(2, CONTRACT, AGENT)]
        ledger.submit_move.assert_awaited_once_with(5, b"proof-\x02")
        assert report.joined and report.submitted
        assert report.symbol == Symbol.SCISSORS
        assert report.error is None
        game = agent.book.get(5)
        assert game.opponent == AGENT
        assert game.move_handles[1] == b"\x02" * 32

    @pytest.mark.asyncio
    async def test_join_failure_aborts_only_that_game(self):
        ledger = make_ledger()
        ledger.join_game = AsyncMock(side_effect=[TransportError("joinGame reverted"), {"status": 1}])
        agent, _, encryptor = make_agent(ledger=ledger)

        failed = await agent.handle(GameCreated(6, creator=OTHER))
        played = await agent.handle(GameCreated(7, creator=OTHER))

        assert failed.joined is False
        assert isinstance(failed.error, TransportError)
        assert failed.error.game_id == 6
        assert played.submitted is True
        ledger.submit_move.assert_awaited_once()
        assert agent.book.get(6).status == GameStatus.CREATED

    @pytest.mark.asyncio
    async def test_encryption_failure_keeps_join(self):
        encryptor = RecordingEncryptor(error=GatewayUnavailable("encryptor down"))
        agent, ledger, _ = make_agent(encryptor=encryptor)

        report = await agent.handle(GameCreated(8, creator=OTHER))

        assert report.joined is True
        assert report.submitted is False
        assert isinstance(report.error, GatewayUnavailable)
        ledger.submit_move.assert_not_awaited()


class TestHelpers:
    """Tests for module helpers."""

    def test_same_address_ignores_case(self):
        assert same_address(AGENT, AGENT.lower())
        assert not same_address(AGENT, OTHER)
        assert not same_address(None, AGENT)

    def test_random_symbol_in_domain(self):
        seen = {random_symbol() for _ in range(200)}
        assert seen <= set(Symbol)
        assert len(seen) == 3
