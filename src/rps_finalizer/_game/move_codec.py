# Area: Game
"""
rps_finalizer._game.move_codec — Symbol <-> encrypted representation
====================================================================

Encoding validates the symbol locally and hands it to the encryption
capability, which binds the ciphertext to (contract address, submitter
address). Decoding asks the decryption capability for the plaintext and
checks it is one of the three symbols before anything scores it.
"""

from __future__ import annotations

import logging
from typing import Any, TYPE_CHECKING

from ..capabilities import DecryptionService, EncryptionService
from ..errors import DecryptedValueOutOfRange, InvalidSymbol
from ..types import EncryptedMove, Symbol

if TYPE_CHECKING:
    from .._gateway.authorization import DecryptionAuthorization

logger = logging.getLogger("rps_finalizer.codec")


def _as_symbol(value: Any) -> Symbol:
    # bool is an int subclass; True must not pass as paper
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(value)
    return Symbol(value)


def validate_symbol(value: Any) -> Symbol:
    """Return ``value`` as a Symbol or raise InvalidSymbol."""
    try:
        return _as_symbol(value)
    except ValueError:
        raise InvalidSymbol(value) from None


def symbol_from_plaintext(value: Any) -> Symbol:
    """Return a decrypted plaintext as a Symbol or raise DecryptedValueOutOfRange."""
    try:
        return _as_symbol(value)
    except ValueError:
        raise DecryptedValueOutOfRange(value) from None


class MoveCodec:
    """
    Maps a symbol to its encrypted form and back.

    Usage:
        codec = MoveCodec(encryptor, decryptor)
        encrypted = await codec.encode(Symbol.PAPER, contract, player)
        symbol = await codec.decode(handle, authorization)
    """

    def __init__(self, encryptor: EncryptionService, decryptor: DecryptionService):
        self.encryptor = encryptor
        self.decryptor = decryptor

    async def encode(
        self, symbol: Any, contract_address: str, submitter_address: str
    ) -> EncryptedMove:
        """Encrypt ``symbol`` bound to (contract, submitter)."""
        move = validate_symbol(symbol)
        logger.debug("Encrypting %s for %s", move.label, submitter_address)
        return await self.encryptor.encrypt(int(move), contract_address, submitter_address)

    async def decode(
        self, handle: bytes, authorization: "DecryptionAuthorization"
    ) -> Symbol:
        """Decrypt ``handle`` and return the symbol it holds."""
        plaintext = await self.decryptor.decrypt(handle, authorization)
        return symbol_from_plaintext(plaintext)
