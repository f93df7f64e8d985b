"""
rps_finalizer.errors — Custom exception classes
================================================

Defines the exception hierarchy for the finalizer and the auto-play agent.
Each exception stores its context (game id, move slot, details) so a failed
task can be logged as a structured block.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional

from .error_formatter import format_error_block


class RPSFinalizerError(Exception):
    """Base exception for all rps_finalizer errors."""

    error_type = "RPS_FINALIZER_ERROR"

    def __init__(
        self,
        message: str,
        game_id: Optional[int] = None,
        slot: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.game_id = game_id
        self.slot = slot
        self.details = details or {}
        super().__init__(message)

    def format_error_log(self) -> str:
        return format_error_block(
            error_type=self.error_type,
            message=str(self),
            game_id=self.game_id,
            slot=self.slot,
            details=self.details,
        )


class ConfigError(RPSFinalizerError):
    """Raised at startup when required configuration is missing or malformed."""

    error_type = "CONFIG_ERROR"

    def __init__(self, message: str, missing: Optional[List[str]] = None,
                 invalid: Optional[List[str]] = None):
        self.missing = missing or []
        self.invalid = invalid or []
        details: Dict[str, Any] = {}
        if self.missing:
            details["missing"] = self.missing
        if self.invalid:
            details["invalid"] = self.invalid
        super().__init__(message, details=details)


class TransportError(RPSFinalizerError):
    """Raised when the ledger RPC or the gateway cannot be reached, or a write reverts."""

    error_type = "TRANSPORT_ERROR"


class GatewayUnavailable(TransportError):
    """Raised when a decryption round trip times out or the gateway is unreachable."""

    error_type = "GATEWAY_UNAVAILABLE"

    def __init__(self, message: str, timeout_seconds: Optional[float] = None, **kwargs):
        self.timeout_seconds = timeout_seconds
        super().__init__(message, **kwargs)
        if timeout_seconds is not None:
            self.details["timeout_seconds"] = timeout_seconds


class AuthorizationError(RPSFinalizerError):
    """Raised when the typed authorization payload cannot be built or signed."""

    error_type = "AUTHORIZATION_ERROR"


class DecryptedValueOutOfRange(RPSFinalizerError):
    """Raised when the gateway returns a plaintext outside the symbol domain."""

    error_type = "DECRYPTED_VALUE_OUT_OF_RANGE"

    def __init__(self, value: Any, **kwargs):
        self.value = value
        super().__init__(f"Decrypted value {value!r} is not a valid symbol (0, 1, 2)", **kwargs)
        self.details["value"] = repr(value)


class InvalidSymbol(RPSFinalizerError):
    """Raised when a move outside {0, 1, 2} is about to be encoded or scored."""

    error_type = "INVALID_SYMBOL"

    def __init__(self, value: Any, **kwargs):
        self.value = value
        super().__init__(f"Invalid symbol {value!r}: expected 0 (rock), 1 (paper) or 2 (scissors)",
                         **kwargs)
        self.details["value"] = repr(value)
