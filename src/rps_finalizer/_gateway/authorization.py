# Area: Gateway
"""
rps_finalizer._gateway.authorization — Signed decryption authorization
======================================================================

Builds the typed (EIP-712) payload the gateway checks before it releases a
plaintext, and signs it with the caller's persistent key.

Two protocol variants are supported:

    USER_DECRYPT   relayer user-decrypt request
                   UserDecryptRequestVerification{publicKey, contractAddresses,
                   startTimestamp, durationDays, extraData}
    REENCRYPT      legacy gateway re-encryption
                   Reencrypt{publicKey}

Numeric fields that are not supplied default to 0. A None in the message
makes structured-data encoding fail, so it never reaches the signer.
"""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from eth_account.messages import encode_typed_data
from eth_account.signers.local import LocalAccount
from eth_keys import keys

from ..errors import AuthorizationError

logger = logging.getLogger("rps_finalizer.gateway.authorization")

EXTRA_DATA = "0x00"


class DecryptionVariant(Enum):
    """Wire protocol used to obtain a plaintext from the gateway."""
    USER_DECRYPT = "user_decrypt"
    REENCRYPT = "reencrypt"


@dataclass(frozen=True)
class EphemeralKeypair:
    """One-time key pair; generated per decrypt call and never reused."""
    public_key: str
    private_key: str = field(repr=False)


@dataclass(frozen=True)
class DecryptionAuthorization:
    """
    Signed authorization for a single decrypt call.

    Attributes:
        variant: Protocol variant the payload was built for
        keypair: Ephemeral key pair the gateway answers to
        signature: 0x-prefixed signature over the typed payload
        signer_address: Address of the persistent key that signed
        contract_address: Contract the authorization is scoped to
        chain_id: Chain of the contract
        start_timestamp: Start of the validity window (unix seconds)
        duration_days: Length of the validity window in days
        typed_data: (domain, types, message) that was signed
    """

    variant: DecryptionVariant
    keypair: EphemeralKeypair
    signature: str
    signer_address: str
    contract_address: str
    chain_id: int
    start_timestamp: int
    duration_days: int
    typed_data: Tuple[Dict[str, Any], Dict[str, List[Dict[str, str]]], Dict[str, Any]] = field(
        repr=False
    )


def generate_keypair() -> EphemeralKeypair:
    """Generate a fresh secp256k1 key pair from the OS random source."""
    private = keys.PrivateKey(secrets.token_bytes(32))
    return EphemeralKeypair(
        public_key=private.public_key.to_hex(),
        private_key=private.to_hex(),
    )


def _numeric(value: Optional[int]) -> int:
    return int(value) if value is not None else 0


def build_typed_data(
    variant: DecryptionVariant,
    public_key: str,
    contract_address: str,
    chain_id: Optional[int],
    verifying_contract: str,
    start_timestamp: Optional[int] = None,
    duration_days: Optional[int] = None,
) -> Tuple[Dict[str, Any], Dict[str, List[Dict[str, str]]], Dict[str, Any]]:
    """
    Build the (domain, types, message) triple for ``variant``.

    The EIP712Domain type is left out of ``types``; the encoder derives it
    from ``domain``.
    """
    if variant is DecryptionVariant.USER_DECRYPT:
        domain = {
            "name": "Decryption",
            "version": "1",
            "chainId": _numeric(chain_id),
            "verifyingContract": verifying_contract,
        }
        types = {
            "UserDecryptRequestVerification": [
                {"name": "publicKey", "type": "bytes"},
                {"name": "contractAddresses", "type": "address[]"},
                {"name": "startTimestamp", "type": "uint256"},
                {"name": "durationDays", "type": "uint256"},
                {"name": "extraData", "type": "bytes"},
            ],
        }
        message = {
            "publicKey": public_key,
            "contractAddresses": [contract_address],
            "startTimestamp": _numeric(start_timestamp),
            "durationDays": _numeric(duration_days),
            "extraData": EXTRA_DATA,
        }
        return domain, types, message

    if variant is DecryptionVariant.REENCRYPT:
        domain = {
            "name": "Authorization token",
            "version": "1",
            "chainId": _numeric(chain_id),
            "verifyingContract": verifying_contract,
        }
        types = {"Reencrypt": [{"name": "publicKey", "type": "bytes"}]}
        message = {"publicKey": public_key}
        return domain, types, message

    raise AuthorizationError(f"Unsupported decryption variant: {variant!r}")


def sign_typed_data(
    account: LocalAccount,
    domain: Dict[str, Any],
    types: Dict[str, List[Dict[str, str]]],
    message: Dict[str, Any],
) -> str:
    """Sign a typed payload; any encoding or signing failure is an AuthorizationError."""
    try:
        signable = encode_typed_data(
            domain_data=domain, message_types=types, message_data=message
        )
        signed = account.sign_message(signable)
    except Exception as e:
        logger.error("Typed-data signing failed: %s", e)
        raise AuthorizationError(
            f"Could not sign decryption authorization: {e}",
            details={"domain": domain, "primary_types": list(types)},
        ) from e
    return "0x" + bytes(signed.signature).hex()


def authorize(
    account: LocalAccount,
    variant: DecryptionVariant,
    contract_address: str,
    chain_id: Optional[int],
    verifying_contract: str,
    start_timestamp: Optional[int] = None,
    duration_days: Optional[int] = None,
    keypair: Optional[EphemeralKeypair] = None,
) -> DecryptionAuthorization:
    """Generate a key pair, build the payload for it and sign it."""
    keypair = keypair or generate_keypair()
    typed_data = build_typed_data(
        variant,
        public_key=keypair.public_key,
        contract_address=contract_address,
        chain_id=chain_id,
        verifying_contract=verifying_contract,
        start_timestamp=start_timestamp,
        duration_days=duration_days,
    )
    signature = sign_typed_data(account, *typed_data)
    return DecryptionAuthorization(
        variant=variant,
        keypair=keypair,
        signature=signature,
        signer_address=account.address,
        contract_address=contract_address,
        chain_id=_numeric(chain_id),
        start_timestamp=_numeric(start_timestamp),
        duration_days=_numeric(duration_days),
        typed_data=typed_data,
    )
