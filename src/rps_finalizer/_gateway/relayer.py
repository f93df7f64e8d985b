# Area: Gateway
"""
rps_finalizer._gateway.relayer — HTTP adapters for the FHE relayer
==================================================================

Implements the two capabilities over HTTP with httpx:

    RelayerDecryptionService   POST {relayer}/v1/user-decrypt   (USER_DECRYPT)
                               POST {relayer}/v1/reencrypt      (REENCRYPT)
    RelayerEncryptionService   POST {encryptor}/v1/encrypt

Request and response bodies are pydantic models so a malformed answer is
rejected here rather than deep inside the orchestrator. The relayer is
expected to complete the threshold protocol and answer with the plaintext.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..capabilities import DecryptionService, EncryptionService
from ..errors import GatewayUnavailable, TransportError
from ..types import EncryptedMove
from .authorization import DecryptionAuthorization, DecryptionVariant

logger = logging.getLogger("rps_finalizer.gateway.relayer")

USER_DECRYPT_PATH = "/v1/user-decrypt"
REENCRYPT_PATH = "/v1/reencrypt"
ENCRYPT_PATH = "/v1/encrypt"

# Sepolia defaults of the public Zama relayer
DEFAULT_RELAYER_URL = "https://relayer.testnet.zama.cloud"
DEFAULT_DECRYPTION_VERIFIER = "0xb6E160B1ff80D67Bfe90A85eE06Ce0A2613607D1"


def _hex(data: bytes) -> str:
    return "0x" + bytes(data).hex()


def _strip0x(value: str) -> str:
    return value[2:] if value.startswith("0x") else value


def _from_hex(value: str) -> bytes:
    return bytes.fromhex(_strip0x(value))


# ══════════════════════════════════════════════════════════════
# WIRE MODELS
# ══════════════════════════════════════════════════════════════

class _Wire(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class HandleContractPair(_Wire):
    handle: str
    contract_address: str = Field(alias="contractAddress")


class RequestValidity(_Wire):
    start_timestamp: str = Field(alias="startTimestamp")
    duration_days: str = Field(alias="durationDays")


class UserDecryptRequest(_Wire):
    handle_contract_pairs: List[HandleContractPair] = Field(alias="handleContractPairs")
    request_validity: RequestValidity = Field(alias="requestValidity")
    contracts_chain_id: str = Field(alias="contractsChainId")
    contract_addresses: List[str] = Field(alias="contractAddresses")
    user_address: str = Field(alias="userAddress")
    signature: str
    public_key: str = Field(alias="publicKey")
    extra_data: str = Field(default="0x00", alias="extraData")


class ReencryptRequest(_Wire):
    handle: str
    public_key: str = Field(alias="publicKey")
    signature: str
    contract_address: str = Field(alias="contractAddress")
    user_address: str = Field(alias="userAddress")


class DecryptResponse(_Wire):
    plaintext: int


class EncryptRequest(_Wire):
    value: int
    bits: int = 8
    contract_address: str = Field(alias="contractAddress")
    user_address: str = Field(alias="userAddress")


class EncryptResponse(_Wire):
    handle: bytes
    input_proof: bytes = Field(default=b"", alias="inputProof")

    @field_validator("handle", "input_proof", mode="before")
    @classmethod
    def _decode_hex(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _from_hex(value)
        return value


def build_decrypt_request(
    handle: bytes, authorization: DecryptionAuthorization
) -> Tuple[str, Dict[str, Any]]:
    """Return (path, json body) for the authorization's protocol variant."""
    if authorization.variant is DecryptionVariant.USER_DECRYPT:
        request = UserDecryptRequest(
            handle_contract_pairs=[
                HandleContractPair(
                    handle=_hex(handle), contract_address=authorization.contract_address
                )
            ],
            request_validity=RequestValidity(
                start_timestamp=str(authorization.start_timestamp),
                duration_days=str(authorization.duration_days),
            ),
            contracts_chain_id=str(authorization.chain_id),
            contract_addresses=[authorization.contract_address],
            user_address=authorization.signer_address,
            signature=_strip0x(authorization.signature),
            public_key=_strip0x(authorization.keypair.public_key),
        )
        return USER_DECRYPT_PATH, request.model_dump(by_alias=True)

    request = ReencryptRequest(
        handle=_hex(handle),
        public_key=authorization.keypair.public_key,
        signature=authorization.signature,
        contract_address=authorization.contract_address,
        user_address=authorization.signer_address,
    )
    return REENCRYPT_PATH, request.model_dump(by_alias=True)


# ══════════════════════════════════════════════════════════════
# ADAPTERS
# ══════════════════════════════════════════════════════════════

class _RelayerClient:
    """Shared httpx plumbing for both adapters."""

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(
            base_url=self.base_url, timeout=timeout_seconds
        )

    async def _post(self, path: str, body: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = await self._client.post(path, json=body)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise GatewayUnavailable(f"Relayer timed out on {path}: {e}") from e
        except httpx.HTTPStatusError as e:
            raise TransportError(
                f"Relayer rejected {path} with HTTP {e.response.status_code}",
                details={"body": e.response.text[:500]},
            ) from e
        except httpx.HTTPError as e:
            raise GatewayUnavailable(f"Relayer unreachable on {path}: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            raise TransportError(f"Relayer returned non-JSON body on {path}") from e

    async def aclose(self) -> None:
        await self._client.aclose()


class RelayerDecryptionService(_RelayerClient, DecryptionService):
    """Decryption capability backed by the relayer's HTTP API."""

    async def decrypt(self, handle: bytes, authorization: DecryptionAuthorization) -> int:
        path, body = build_decrypt_request(handle, authorization)
        logger.debug("Decrypt request %s for handle %s", path, _hex(handle))
        payload = await self._post(path, body)
        try:
            return DecryptResponse.model_validate(payload).plaintext
        except ValidationError as e:
            raise TransportError(
                "Relayer decrypt response has no integer plaintext",
                details={"errors": e.errors()},
            ) from e


class RelayerEncryptionService(_RelayerClient, EncryptionService):
    """Encryption capability backed by an HTTP encryption service."""

    async def encrypt(
        self, value: int, contract_address: str, user_address: str
    ) -> EncryptedMove:
        body = EncryptRequest(
            value=value, contract_address=contract_address, user_address=user_address
        ).model_dump(by_alias=True)
        payload = await self._post(ENCRYPT_PATH, body)
        try:
            parsed = EncryptResponse.model_validate(payload)
        except ValidationError as e:
            raise TransportError(
                "Encryption response is missing handle or proof",
                details={"errors": e.errors()},
            ) from e
        return EncryptedMove(handle=parsed.handle, proof=parsed.input_proof)
