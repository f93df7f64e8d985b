# Area: Shared
"""
rps_finalizer._runner_config — Runner Configuration
===================================================

Settings for FinalizerRunner, read from the environment (plus an optional
.env file) and validated with pydantic. Any missing mandatory key or
malformed value is a ConfigError raised before a client is built.
"""

import os
from typing import Any, Dict, Mapping, Optional

from dotenv import dotenv_values, load_dotenv
from eth_utils import is_address, to_checksum_address
from pydantic import BaseModel, ConfigDict, SecretStr, ValidationError, field_validator

from ._gateway.authorization import DecryptionVariant
from ._gateway.relayer import DEFAULT_DECRYPTION_VERIFIER, DEFAULT_RELAYER_URL
from ._ledger.abi import NEEDS_FINALIZATION
from .errors import ConfigError

# Environment variable -> settings field
ENV_MAPPINGS = {
    "RPC_URL": "rpc_url",
    "ADMIN_PRIVATE_KEY": "admin_private_key",
    "CONTRACT_ADDRESS": "contract_address",
    "CHAIN_ID": "chain_id",
    "RELAYER_URL": "relayer_url",
    "ENCRYPTOR_URL": "encryptor_url",
    "DECRYPTION_VARIANT": "decryption_variant",
    "DECRYPTION_VERIFIER_ADDRESS": "decryption_verifier_address",
    "GATEWAY_TIMEOUT_SECONDS": "gateway_timeout_seconds",
    "POLL_INTERVAL_SECONDS": "poll_interval_seconds",
    "CONFIRMATION_TIMEOUT_SECONDS": "confirmation_timeout_seconds",
    "SHUTDOWN_GRACE_SECONDS": "shutdown_grace_seconds",
    "FROM_BLOCK": "from_block",
    "MAX_BLOCK_RANGE": "max_block_range",
    "NEEDS_FINALIZATION_EVENT": "needs_finalization_event",
    "LOG_FILE": "log_file",
    "LOG_LEVEL": "log_level",
}

FIELD_TO_ENV = {field: env_key for env_key, field in ENV_MAPPINGS.items()}

# Keys without which nothing can start
REQUIRED_ENV = ["RPC_URL", "ADMIN_PRIVATE_KEY", "CONTRACT_ADDRESS"]

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class RunnerSettings(BaseModel):
    """Validated runner configuration."""

    model_config = ConfigDict(frozen=True)

    rpc_url: str
    admin_private_key: SecretStr
    contract_address: str
    chain_id: Optional[int] = None
    relayer_url: str = DEFAULT_RELAYER_URL
    encryptor_url: Optional[str] = None
    decryption_variant: DecryptionVariant = DecryptionVariant.USER_DECRYPT
    decryption_verifier_address: str = DEFAULT_DECRYPTION_VERIFIER
    gateway_timeout_seconds: float = 30.0
    poll_interval_seconds: float = 5.0
    confirmation_timeout_seconds: float = 120.0
    shutdown_grace_seconds: float = 10.0
    from_block: Optional[int] = None
    max_block_range: int = 2000
    needs_finalization_event: str = NEEDS_FINALIZATION
    log_file: Optional[str] = "rps_finalizer.log"
    log_level: str = "INFO"

    @field_validator("rpc_url", "relayer_url", "encryptor_url")
    @classmethod
    def _http_url(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.startswith(("http://", "https://")):
            raise ValueError("expected an http(s) URL")
        return value

    @field_validator("contract_address", "decryption_verifier_address")
    @classmethod
    def _address(cls, value: str) -> str:
        if not is_address(value):
            raise ValueError("not a 20-byte hex address")
        return to_checksum_address(value)

    @field_validator("admin_private_key")
    @classmethod
    def _private_key(cls, value: SecretStr) -> SecretStr:
        raw = value.get_secret_value()
        digits = raw[2:] if raw.startswith("0x") else raw
        if len(digits) != 64:
            raise ValueError("expected 32 bytes of hex")
        try:
            bytes.fromhex(digits)
        except ValueError:
            raise ValueError("expected 32 bytes of hex") from None
        return SecretStr("0x" + digits)

    @field_validator("gateway_timeout_seconds", "poll_interval_seconds",
                     "confirmation_timeout_seconds", "max_block_range")
    @classmethod
    def _positive(cls, value: Any) -> Any:
        if value <= 0:
            raise ValueError("must be positive")
        return value

    @field_validator("shutdown_grace_seconds", "from_block")
    @classmethod
    def _not_negative(cls, value: Any) -> Any:
        if value is not None and value < 0:
            raise ValueError("must not be negative")
        return value

    @field_validator("log_level")
    @classmethod
    def _log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"expected one of {', '.join(LOG_LEVELS)}")
        return level

    @property
    def effective_encryptor_url(self) -> str:
        return self.encryptor_url or self.relayer_url


def read_environment(
    env: Optional[Mapping[str, str]] = None,
    env_file: Optional[str] = None,
) -> Dict[str, str]:
    """
    Collect raw settings values keyed by field name.

    With ``env`` None the process environment is used, after loading
    ``env_file`` (or a .env found from the working directory) into it
    without overriding variables already set.
    """
    if env is None:
        load_dotenv(dotenv_path=env_file)
        env = os.environ
    elif env_file:
        env = {**dotenv_values(env_file), **env}

    values: Dict[str, str] = {}
    for env_key, field in ENV_MAPPINGS.items():
        raw = env.get(env_key)
        if raw is not None and raw.strip():
            values[field] = raw.strip()
    return values


def load_settings(
    env: Optional[Mapping[str, str]] = None,
    env_file: Optional[str] = None,
    **overrides: Any,
) -> RunnerSettings:
    """
    Build validated settings.

    Args:
        env: Environment mapping; defaults to os.environ
        env_file: Optional .env file
        **overrides: Field values taking precedence over the environment
                     (None values are ignored)

    Raises:
        ConfigError: A mandatory key is missing or a value is malformed
    """
    values: Dict[str, Any] = dict(read_environment(env, env_file))
    values.update({k: v for k, v in overrides.items() if v is not None})

    missing = [key for key in REQUIRED_ENV if ENV_MAPPINGS[key] not in values]
    if missing:
        raise ConfigError(
            f"Missing required configuration: {', '.join(missing)}", missing=missing
        )

    try:
        return RunnerSettings(**values)
    except ValidationError as e:
        invalid = []
        for err in e.errors():
            field = str(err["loc"][0]) if err["loc"] else "?"
            invalid.append(FIELD_TO_ENV.get(field, field))
        # Rejected input values, private key included, must stay out of the traceback.
        raise ConfigError(
            f"Invalid configuration: {', '.join(invalid)}", invalid=invalid
        ) from None
