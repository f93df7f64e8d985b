# Area: Ledger
"""
rps_finalizer._ledger.abi — Contract interface used by the finalizer
====================================================================

Only the events and methods this package touches. Move handles are
encrypted-uint8 handles, ABI-encoded as bytes32.
"""

from __future__ import annotations

from typing import Any, Dict, List

GAME_CREATED = "GameCreated"
NEEDS_FINALIZATION = "NeedsFinalization"
GAME_FINALIZED = "GameFinalized"


def _event(name: str, inputs: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {"type": "event", "name": name, "anonymous": False, "inputs": inputs}


def _function(name: str, inputs: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "type": "function",
        "name": name,
        "stateMutability": "nonpayable",
        "inputs": inputs,
        "outputs": [],
    }


def _arg(name: str, type_: str, indexed: bool = False) -> Dict[str, Any]:
    return {"name": name, "type": type_, "indexed": indexed, "internalType": type_}


def contract_abi(needs_finalization_event: str = NEEDS_FINALIZATION) -> List[Dict[str, Any]]:
    """
    Build the ABI fragment.

    Args:
        needs_finalization_event: On-chain name of the "needs finalization"
            event (older deployments emit ``NeedsOffchainFinalize``)
    """
    return [
        _event(GAME_CREATED, [
            _arg("gameId", "uint256", indexed=True),
            _arg("creator", "address", indexed=True),
        ]),
        _event(needs_finalization_event, [
            _arg("gameId", "uint256", indexed=True),
            _arg("move1", "bytes32"),
            _arg("move2", "bytes32"),
        ]),
        _event(GAME_FINALIZED, [
            _arg("gameId", "uint256", indexed=True),
            _arg("winner", "address", indexed=True),
            _arg("outcome", "uint8"),
        ]),
        _function("createGame", [_arg("wager", "uint256")]),
        _function("joinGame", [_arg("gameId", "uint256")]),
        _function("submitMove", [_arg("gameId", "uint256"), _arg("encryptedMove", "bytes")]),
        _function("finalizeResult", [_arg("gameId", "uint256"), _arg("outcome", "uint8")]),
    ]
