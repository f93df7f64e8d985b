# Area: Capabilities
"""
rps_finalizer.capabilities — External services the core depends on
===================================================================

The encryption primitive and the threshold-decryption gateway are not part
of this package. The core talks to them through two small interfaces, and
the shipped HTTP adapters (see ``_gateway.relayer``) implement them against
a relayer. Tests implement them with in-memory fakes.

    class MyDecryptor(DecryptionService):
        async def decrypt(self, handle, authorization):
            ...
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from .types import EncryptedMove

if TYPE_CHECKING:
    from ._gateway.authorization import DecryptionAuthorization


class EncryptionService(ABC):
    """Client-side encryption capability: ``encrypt(value, context) -> ciphertext + proof``."""

    @abstractmethod
    async def encrypt(
        self, value: int, contract_address: str, user_address: str
    ) -> EncryptedMove:
        """
        Encrypt a small unsigned value for a contract.

        Parameters
        ----------
        value : int
            Plaintext, already validated by the caller.
        contract_address : str
            Contract the ciphertext will be submitted to.
        user_address : str
            Address that will submit the ciphertext. The proof binds the
            ciphertext to this (contract, user) pair.

        Returns
        -------
        EncryptedMove
            Handle and input proof, passed through unchanged.
        """


class DecryptionService(ABC):
    """Threshold-decryption capability: ``decrypt(handle, authorization) -> plaintext``."""

    @abstractmethod
    async def decrypt(
        self, handle: bytes, authorization: "DecryptionAuthorization"
    ) -> int:
        """
        Turn a ciphertext handle into its plaintext integer.

        Raises
        ------
        TransportError
            When the service cannot be reached or rejects the request.
        """
