# Area: Ledger Tests
"""Tests for the ledger client: log decoding, receipt parsing and writes."""

from unittest.mock import AsyncMock, Mock

import aiohttp
import pytest
from eth_account import Account
from eth_utils import to_checksum_address
from web3 import AsyncHTTPProvider, AsyncWeb3
from web3.exceptions import TimeExhausted
from rps_finalizer._ledger.abi import contract_abi
from rps_finalizer._ledger.client import LedgerClient
from rps_finalizer.errors import TransportError
from rps_finalizer.types import GameCreated, GameFinalized, NeedsFinalization, Outcome

PRIVATE_KEY = "0x" + "66" * 32
CONTRACT = to_checksum_address("0x" + "ab" * 20)
FOREIGN = to_checksum_address("0x" + "ef" * 20)
CREATOR = to_checksum_address("0x" + "12" * 20)


def uint_topic(value):
    return int(value).to_bytes(32, "big")


def address_topic(address):
    return b"\x00" * 12 + bytes.fromhex(address[2:])


def make_decoding_client(event_name="NeedsFinalization"):
    w3 = AsyncWeb3(AsyncHTTPProvider("http://127.0.0.1:8545"))
    return LedgerClient(
        w3, Account.from_key(PRIVATE_KEY), CONTRACT, chain_id=1,
        needs_finalization_event=event_name,
    )


def make_log(client, name, topics, data=b"", address=CONTRACT, block=10):
    return {
        "address": address,
        "topics": [bytes.fromhex(client.topic_for(name)[2:])] + list(topics),
        "data": data,
        "blockNumber": block,
        "blockHash": b"\x00" * 32,
        "transactionHash": b"\xaa" * 32,
        "transactionIndex": 0,
        "logIndex": 3,
    }


def game_created_log(client, game_id, address=CONTRACT):
    return make_log(
        client, "GameCreated", [uint_topic(game_id), address_topic(CREATOR)], address=address
    )


class TestLogDecoding:
    """Tests for decode_log()."""

    def test_game_created(self):
        client = make_decoding_client()
        event = client.decode_log(game_created_log(client, 5))

        assert isinstance(event, GameCreated)
        assert event.game_id == 5
        assert event.creator == CREATOR
        assert event.block_number == 10
        assert event.log_index == 3
        assert event.transaction_hash == "0x" + "aa" * 32

    def test_needs_finalization(self):
        client = make_decoding_client()
        log = make_log(
            client, "NeedsFinalization", [uint_topic(7)], data=b"\x01" * 32 + b"\x02" * 32
        )

        event = client.decode_log(log)

        assert isinstance(event, NeedsFinalization)
        assert event.game_id == 7
        assert event.move1_handle == b"\x01" * 32
        assert event.move2_handle == b"\x02" * 32

    def test_configurable_event_name(self):
        """Test that deployments emitting NeedsOffchainFinalize are understood."""
        client = make_decoding_client("NeedsOffchainFinalize")
        log = make_log(
            client, "NeedsOffchainFinalize", [uint_topic(8)], data=b"\x03" * 32 + b"\x04" * 32
        )

        event = client.decode_log(log)

        assert isinstance(event, NeedsFinalization)
        assert event.event_name == "NeedsFinalization"

    def test_game_finalized(self):
        client = make_decoding_client()
        log = make_log(
            client, "GameFinalized", [uint_topic(9), address_topic(CREATOR)], data=uint_topic(1)
        )

        event = client.decode_log(log)

        assert isinstance(event, GameFinalized)
        assert event.outcome == Outcome.PLAYER1_WINS
        assert event.winner == CREATOR

    def test_unknown_outcome_dropped(self):
        client = make_decoding_client()
        log = make_log(
            client, "GameFinalized", [uint_topic(9), address_topic(CREATOR)], data=uint_topic(7)
        )
        assert client.decode_log(log) is None

    def test_foreign_contract_ignored(self):
        client = make_decoding_client()
        assert client.decode_log(game_created_log(client, 5, address=FOREIGN)) is None

    def test_unknown_topic_ignored(self):
        client = make_decoding_client()
        log = game_created_log(client, 5)
        log["topics"][0] = b"\x99" * 32
        assert client.decode_log(log) is None

    def test_topic_for_unknown_event(self):
        client = make_decoding_client()
        with pytest.raises(KeyError):
            client.topic_for("NoSuchEvent")


class TestReceiptParsing:
    """Tests for game_id_from_receipt() and create_game()."""

    def test_ignores_foreign_logs(self):
        client = make_decoding_client()
        receipt = {
            "transactionHash": b"\xbb" * 32,
            "logs": [
                game_created_log(client, 99, address=FOREIGN),
                game_created_log(client, 12),
            ],
        }
        assert client.game_id_from_receipt(receipt) == 12

    def test_missing_game_created_raises(self):
        client = make_decoding_client()
        receipt = {"transactionHash": b"\xbb" * 32, "logs": [game_created_log(client, 1, FOREIGN)]}
        with pytest.raises(TransportError) as exc_info:
            client.game_id_from_receipt(receipt)
        assert exc_info.value.details["transaction_hash"] == "0x" + "bb" * 32

    @pytest.mark.asyncio
    async def test_create_game_returns_assigned_id(self):
        client = make_decoding_client()
        client._transact = AsyncMock(return_value={
            "status": 1,
            "transactionHash": b"\xbb" * 32,
            "logs": [game_created_log(client, 21)],
        })

        assert await client.create_game(0) == 21
        client._transact.assert_awaited_once_with("createGame", 0)


def make_tx_client(receipt_status=1):
    call = Mock()
    call.build_transaction = AsyncMock(return_value={
        "to": CONTRACT,
        "value": 0,
        "gas": 100000,
        "gasPrice": 10 ** 9,
        "nonce": 5,
        "chainId": 11155111,
        "data": "0x",
    })
    contract = Mock()
    contract.address = CONTRACT
    contract.abi = contract_abi()
    contract.functions.finalizeResult.return_value = call
    contract.functions.joinGame.return_value = call

    w3 = Mock()
    w3.eth.contract.return_value = contract
    w3.eth.get_transaction_count = AsyncMock(return_value=5)
    w3.eth.send_raw_transaction = AsyncMock(return_value=b"\x01" * 32)
    w3.eth.wait_for_transaction_receipt = AsyncMock(return_value={
        "status": receipt_status, "blockNumber": 9, "transactionHash": b"\x01" * 32,
    })
    client = LedgerClient(w3, Account.from_key(PRIVATE_KEY), CONTRACT, chain_id=11155111)
    return client, w3, contract, call


class TestTransactions:
    """Tests for signed contract calls."""

    @pytest.mark.asyncio
    async def test_finalize_result_confirmed(self):
        client, w3, contract, call = make_tx_client()

        receipt = await client.finalize_result(7, Outcome.PLAYER2_WINS)

        assert receipt["status"] == 1
        contract.functions.finalizeResult.assert_called_once_with(7, 2)
        call.build_transaction.assert_awaited_once_with({
            "from": client.address, "nonce": 5, "chainId": 11155111,
        })
        w3.eth.send_raw_transaction.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_nonces_are_sequential(self):
        client, w3, _, call = make_tx_client()

        await client.join_game(1)
        await client.join_game(2)

        nonces = [c.args[0]["nonce"] for c in call.build_transaction.await_args_list]
        assert nonces == [5, 6]
        w3.eth.get_transaction_count.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_revert_is_transport_error(self):
        client, _, _, _ = make_tx_client(receipt_status=0)

        with pytest.raises(TransportError) as exc_info:
            await client.finalize_result(7, Outcome.DRAW)

        assert exc_info.value.game_id == 7
        assert "reverted" in str(exc_info.value)
        assert exc_info.value.details["transaction_hash"] == "0x" + "01" * 32

    @pytest.mark.asyncio
    async def test_send_failure_resets_nonce(self):
        client, w3, _, _ = make_tx_client()
        w3.eth.send_raw_transaction = AsyncMock(side_effect=[ValueError("nonce too low"), b"\x01" * 32])

        with pytest.raises(TransportError):
            await client.join_game(1)
        await client.join_game(1)

        assert w3.eth.get_transaction_count.await_count == 2

    @pytest.mark.asyncio
    async def test_confirmation_timeout_is_transport_error(self):
        client, w3, _, _ = make_tx_client()
        w3.eth.wait_for_transaction_receipt = AsyncMock(side_effect=TimeExhausted("not mined"))

        with pytest.raises(TransportError) as exc_info:
            await client.finalize_result(3, Outcome.PLAYER1_WINS)
        assert "not confirmed" in str(exc_info.value)


class TestReads:
    """Tests for the read side."""

    @pytest.mark.asyncio
    async def test_get_logs_params(self):
        client, w3, _, _ = make_tx_client()
        w3.eth.get_logs = AsyncMock(return_value=[{"logIndex": 0}])

        logs = await client.get_logs(10, 20, ["0xabc"])

        assert logs == [{"logIndex": 0}]
        w3.eth.get_logs.assert_awaited_once_with({
            "address": CONTRACT, "fromBlock": 10, "toBlock": 20, "topics": [["0xabc"]],
        })

    @pytest.mark.asyncio
    async def test_get_logs_failure(self):
        client, w3, _, _ = make_tx_client()
        w3.eth.get_logs = AsyncMock(side_effect=aiohttp.ClientError("connection reset"))

        with pytest.raises(TransportError) as exc_info:
            await client.get_logs(10, 20, ["0xabc"])
        assert exc_info.value.details == {"from_block": 10, "to_block": 20}

    @pytest.mark.asyncio
    async def test_chain_id_configured(self):
        client, _, _, _ = make_tx_client()
        assert await client.get_chain_id() == 11155111
