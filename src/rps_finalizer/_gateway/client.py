# Area: Gateway
"""
rps_finalizer._gateway.client — Decryption Gateway Client
=========================================================

Turns an opaque ciphertext handle into a validated Symbol:

1. fresh ephemeral key pair
2. typed authorization scoped to {contract, public key, validity window}
3. signed with the persistent key
4. round trip to the gateway, bounded by a deadline
5. plaintext checked against {0, 1, 2}

A capability failing with a connection-level OSError is reported as
GatewayUnavailable, like a timeout.

No retry happens here; retry policy belongs to the caller.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from eth_account.signers.local import LocalAccount

from .._game.move_codec import MoveCodec
from ..errors import GatewayUnavailable
from ..types import Symbol
from .authorization import (
    DecryptionAuthorization,
    DecryptionVariant,
    EphemeralKeypair,
    authorize,
    generate_keypair,
)
from .timeout import with_deadline

logger = logging.getLogger("rps_finalizer.gateway")

DEFAULT_DURATION_DAYS = 1


class DecryptionGatewayClient:
    """
    Authorized decryption of move handles.

    The signing account is shared read-only by every concurrent call;
    each call gets its own key pair and authorization.
    """

    def __init__(
        self,
        codec: MoveCodec,
        account: LocalAccount,
        contract_address: str,
        chain_id: Optional[int],
        verifying_contract: str,
        variant: DecryptionVariant = DecryptionVariant.USER_DECRYPT,
        timeout_seconds: Optional[float] = 30.0,
        duration_days: int = DEFAULT_DURATION_DAYS,
        clock: Callable[[], float] = time.time,
        keypair_factory: Callable[[], EphemeralKeypair] = generate_keypair,
    ):
        self.codec = codec
        self.account = account
        self.contract_address = contract_address
        self.chain_id = chain_id
        self.verifying_contract = verifying_contract
        self.variant = variant
        self.timeout_seconds = timeout_seconds
        self.duration_days = duration_days
        self._clock = clock
        self._keypair_factory = keypair_factory

    def authorize(self) -> DecryptionAuthorization:
        """Build and sign a one-time authorization (steps 1-3)."""
        return authorize(
            self.account,
            self.variant,
            contract_address=self.contract_address,
            chain_id=self.chain_id,
            verifying_contract=self.verifying_contract,
            start_timestamp=int(self._clock()),
            duration_days=self.duration_days,
            keypair=self._keypair_factory(),
        )

    async def decrypt_move(
        self,
        handle: bytes,
        game_id: Optional[int] = None,
        slot: Optional[int] = None,
    ) -> Symbol:
        """
        Decrypt one move handle.

        Raises:
            AuthorizationError: The authorization could not be built or signed
            GatewayUnavailable: The gateway timed out or could not be reached
            TransportError: The gateway rejected the request
            DecryptedValueOutOfRange: The plaintext is not 0, 1 or 2
        """
        authorization = self.authorize()
        logger.debug(
            "Decrypting handle 0x%s (game=%s slot=%s variant=%s)",
            bytes(handle).hex(), game_id, slot, self.variant.value,
        )
        try:
            return await with_deadline(
                self.codec.decode(handle, authorization),
                self.timeout_seconds,
                operation="Gateway decrypt",
                game_id=game_id,
                slot=slot,
            )
        except OSError as e:
            raise GatewayUnavailable(
                f"Gateway unreachable: {e.__class__.__name__}: {e}",
                game_id=game_id,
                slot=slot,
            ) from e
