# Area: Gateway
"""
Decryption gateway access.

This package contains:
- Typed authorization building and signing
- The gateway client (authorize, round trip, domain check)
- httpx adapters for the relayer's encrypt / decrypt endpoints
"""

from .authorization import (
    DecryptionAuthorization,
    DecryptionVariant,
    EphemeralKeypair,
    authorize,
    build_typed_data,
    generate_keypair,
)
from .client import DecryptionGatewayClient
from .relayer import RelayerDecryptionService, RelayerEncryptionService
from .timeout import with_deadline

__all__ = [
    "DecryptionAuthorization",
    "DecryptionVariant",
    "EphemeralKeypair",
    "authorize",
    "build_typed_data",
    "generate_keypair",
    "DecryptionGatewayClient",
    "RelayerDecryptionService",
    "RelayerEncryptionService",
    "with_deadline",
]
