# Area: Ledger
"""
rps_finalizer._ledger.client — Ledger read/write access
=======================================================

Wraps an AsyncWeb3 connection and the signing account:

    read   block_number(), get_logs(), decode_log()
    write  create_game(), join_game(), submit_move(), finalize_result()

Every write returns only after its receipt confirms success. RPC failures,
timeouts and reverted transactions surface as TransportError.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from aiohttp import ClientError
from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import AsyncHTTPProvider, AsyncWeb3
from web3.exceptions import Web3Exception

from ..errors import TransportError
from ..types import GameCreated, LedgerEvent, Outcome
from .abi import NEEDS_FINALIZATION, contract_abi
from .events import EventDecoder

logger = logging.getLogger("rps_finalizer.ledger")

RPC_ERRORS = (Web3Exception, ClientError, OSError, ValueError, asyncio.TimeoutError)


class LedgerClient:
    """
    Contract client for one signing account.

    Concurrent tasks share one account, so nonce allocation and broadcast
    run under a lock; waiting for receipts does not.
    """

    def __init__(
        self,
        w3: AsyncWeb3,
        account: LocalAccount,
        contract_address: str,
        chain_id: Optional[int] = None,
        confirmation_timeout_seconds: float = 120.0,
        needs_finalization_event: str = NEEDS_FINALIZATION,
    ):
        self.w3 = w3
        self.account = account
        self.chain_id = chain_id
        self.confirmation_timeout_seconds = confirmation_timeout_seconds
        self.needs_finalization_event = needs_finalization_event
        self.contract = w3.eth.contract(
            address=AsyncWeb3.to_checksum_address(contract_address),
            abi=contract_abi(needs_finalization_event),
        )
        self.decoder = EventDecoder(self.contract, needs_finalization_event)
        self._send_lock = asyncio.Lock()
        self._next_nonce: Optional[int] = None

    @classmethod
    def connect(
        cls,
        rpc_url: str,
        private_key: str,
        contract_address: str,
        **kwargs: Any,
    ) -> "LedgerClient":
        """Build a client over HTTP JSON-RPC."""
        w3 = AsyncWeb3(AsyncHTTPProvider(rpc_url))
        return cls(w3, Account.from_key(private_key), contract_address, **kwargs)

    @property
    def address(self) -> str:
        return self.account.address

    @property
    def contract_address(self) -> str:
        return self.contract.address

    # ──────────────────────────────────────────────────────────────
    # Read side
    # ──────────────────────────────────────────────────────────────

    async def block_number(self) -> int:
        try:
            return int(await self.w3.eth.block_number)
        except RPC_ERRORS as e:
            raise TransportError(f"eth_blockNumber failed: {e}") from e

    async def get_logs(
        self, from_block: int, to_block: int, topics: Sequence[str]
    ) -> List[Mapping[str, Any]]:
        """Contract logs in [from_block, to_block] whose topic0 is one of ``topics``."""
        params = {
            "address": self.contract.address,
            "fromBlock": from_block,
            "toBlock": to_block,
            "topics": [list(topics)],
        }
        try:
            return list(await self.w3.eth.get_logs(params))
        except RPC_ERRORS as e:
            raise TransportError(
                f"eth_getLogs {from_block}-{to_block} failed: {e}",
                details={"from_block": from_block, "to_block": to_block},
            ) from e

    def decode_log(self, log: Mapping[str, Any]) -> Optional[LedgerEvent]:
        return self.decoder.decode(log)

    def topic_for(self, event_name: str) -> str:
        return self.decoder.topic_for(event_name)

    def game_id_from_receipt(self, receipt: Mapping[str, Any]) -> int:
        """Extract the ledger-assigned id from a confirmed createGame receipt."""
        for log in receipt.get("logs", []):
            event = self.decode_log(log)
            if isinstance(event, GameCreated):
                return event.game_id
        raise TransportError(
            "createGame receipt has no GameCreated log",
            details={"transaction_hash": _tx_hex(receipt.get("transactionHash"))},
        )

    # ──────────────────────────────────────────────────────────────
    # Write side
    # ──────────────────────────────────────────────────────────────

    async def create_game(self, wager: int) -> int:
        receipt = await self._transact("createGame", int(wager))
        game_id = self.game_id_from_receipt(receipt)
        logger.info("Created game #%d (tx %s)", game_id, _tx_hex(receipt.get("transactionHash")))
        return game_id

    async def join_game(self, game_id: int) -> Mapping[str, Any]:
        return await self._transact("joinGame", int(game_id), game_id=game_id)

    async def submit_move(self, game_id: int, ciphertext: bytes) -> Mapping[str, Any]:
        return await self._transact("submitMove", int(game_id), bytes(ciphertext), game_id=game_id)

    async def finalize_result(self, game_id: int, outcome: Outcome) -> Mapping[str, Any]:
        return await self._transact(
            "finalizeResult", int(game_id), int(Outcome(outcome)), game_id=game_id
        )

    async def _transact(
        self, method: str, *args: Any, game_id: Optional[int] = None
    ) -> Mapping[str, Any]:
        call = getattr(self.contract.functions, method)(*args)
        async with self._send_lock:
            try:
                nonce = await self._allocate_nonce()
                tx = await call.build_transaction({
                    "from": self.address,
                    "nonce": nonce,
                    "chainId": await self.get_chain_id(),
                })
                signed = self.account.sign_transaction(tx)
                tx_hash = await self.w3.eth.send_raw_transaction(signed.raw_transaction)
            except RPC_ERRORS as e:
                self._next_nonce = None
                raise TransportError(f"{method} could not be sent: {e}", game_id=game_id) from e
            self._next_nonce = nonce + 1

        logger.debug("%s sent (game=%s tx=%s)", method, game_id, _tx_hex(tx_hash))
        try:
            receipt = await self.w3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=self.confirmation_timeout_seconds
            )
        except RPC_ERRORS as e:
            raise TransportError(
                f"{method} not confirmed: {e}",
                game_id=game_id,
                details={"transaction_hash": _tx_hex(tx_hash)},
            ) from e

        if receipt.get("status") != 1:
            raise TransportError(
                f"{method} reverted",
                game_id=game_id,
                details={
                    "transaction_hash": _tx_hex(tx_hash),
                    "block_number": receipt.get("blockNumber"),
                },
            )
        logger.debug("%s confirmed in block %s (game=%s)", method, receipt.get("blockNumber"), game_id)
        return receipt

    async def _allocate_nonce(self) -> int:
        if self._next_nonce is None:
            self._next_nonce = await self.w3.eth.get_transaction_count(self.address, "pending")
        return self._next_nonce

    async def get_chain_id(self) -> int:
        """Configured chain id, or the one reported by the node (cached)."""
        if self.chain_id is None:
            try:
                self.chain_id = int(await self.w3.eth.chain_id)
            except RPC_ERRORS as e:
                raise TransportError(f"eth_chainId failed: {e}") from e
        return self.chain_id

    async def close(self) -> None:
        """Release the provider's HTTP session."""
        disconnect = getattr(self.w3.provider, "disconnect", None)
        if disconnect is not None:
            await disconnect()


def _tx_hex(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return "0x" + bytes(value).hex()


def receipt_summary(receipt: Mapping[str, Any]) -> Dict[str, Any]:
    """Fields worth logging from a receipt."""
    return {
        "transaction_hash": _tx_hex(receipt.get("transactionHash")),
        "block_number": receipt.get("blockNumber"),
        "gas_used": receipt.get("gasUsed"),
    }
