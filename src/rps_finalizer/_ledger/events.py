# Area: Ledger
"""
rps_finalizer._ledger.events — Contract log decoding
====================================================

Maps raw ``eth_getLogs`` entries onto the event dataclasses in
``rps_finalizer.types``. Logs from other contracts, unknown topics and logs
that do not match the ABI decode to None.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from eth_utils import event_abi_to_log_topic
from web3.exceptions import Web3Exception

from ..types import GameCreated, GameFinalized, LedgerEvent, NeedsFinalization, Outcome
from .abi import GAME_CREATED, GAME_FINALIZED

logger = logging.getLogger("rps_finalizer.ledger.events")


def _hex(value: Any) -> str:
    if isinstance(value, str):
        return value.lower() if value.startswith("0x") else "0x" + value.lower()
    return "0x" + bytes(value).hex()


def event_topics(abi: List[Dict[str, Any]]) -> Dict[str, str]:
    """Return {topic0 hex: event name} for every event in ``abi``."""
    return {
        _hex(event_abi_to_log_topic(entry)): entry["name"]
        for entry in abi
        if entry.get("type") == "event"
    }


class EventDecoder:
    """
    Decodes contract logs into LedgerEvent dataclasses.

    Args:
        contract: web3 contract bound to the contract address and ABI
        needs_finalization_event: On-chain name of the finalization event
    """

    def __init__(self, contract: Any, needs_finalization_event: str):
        self.contract = contract
        self.needs_finalization_event = needs_finalization_event
        self.topics = event_topics(contract.abi)
        self._address = str(contract.address).lower()

    def topic_for(self, event_name: str) -> str:
        """topic0 of an event, by ABI name."""
        for topic, name in self.topics.items():
            if name == event_name:
                return topic
        raise KeyError(event_name)

    def decode(self, log: Mapping[str, Any]) -> Optional[LedgerEvent]:
        """Decode one log, or None if it is not one of ours."""
        address = str(log.get("address", "")).lower()
        if address and address != self._address:
            return None
        topics = log.get("topics") or []
        if not topics:
            return None
        name = self.topics.get(_hex(topics[0]))
        if name is None:
            return None

        try:
            decoded = getattr(self.contract.events, name)().process_log(log)
        except (Web3Exception, ValueError, TypeError) as e:
            logger.debug("Could not decode %s log: %s", name, e)
            return None

        args = decoded["args"]
        meta = {
            "block_number": decoded.get("blockNumber"),
            "transaction_hash": _hex(decoded["transactionHash"])
            if decoded.get("transactionHash") is not None else None,
            "log_index": decoded.get("logIndex"),
        }

        if name == GAME_CREATED:
            return GameCreated(int(args["gameId"]), creator=str(args["creator"]), **meta)
        if name == self.needs_finalization_event:
            return NeedsFinalization(
                int(args["gameId"]),
                move1_handle=bytes(args["move1"]),
                move2_handle=bytes(args["move2"]),
                **meta,
            )
        if name == GAME_FINALIZED:
            try:
                outcome = Outcome(int(args["outcome"]))
            except ValueError:
                logger.warning("GameFinalized #%s carries unknown outcome %s",
                               args["gameId"], args["outcome"])
                return None
            return GameFinalized(
                int(args["gameId"]), winner=str(args["winner"]), outcome=outcome, **meta
            )
        return None
