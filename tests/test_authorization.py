# Area: Gateway Tests
"""Tests for decryption authorization building and signing."""

import pytest
from eth_account import Account
from eth_account.messages import encode_typed_data
from rps_finalizer._gateway.authorization import (
    DecryptionVariant,
    authorize,
    build_typed_data,
    generate_keypair,
)
from rps_finalizer.errors import AuthorizationError

PRIVATE_KEY = "0x" + "11" * 32
CONTRACT = "0x" + "ab" * 20
VERIFIER = "0xb6E160B1ff80D67Bfe90A85eE06Ce0A2613607D1"


def _has_none(value):
    if value is None:
        return True
    if isinstance(value, dict):
        return any(_has_none(v) for v in value.values())
    if isinstance(value, (list, tuple)):
        return any(_has_none(v) for v in value)
    return False


class TestKeypair:
    """Tests for ephemeral key pair generation."""

    def test_keypairs_are_fresh(self):
        first, second = generate_keypair(), generate_keypair()
        assert first.public_key != second.public_key
        assert first.private_key != second.private_key

    def test_public_key_is_hex(self):
        keypair = generate_keypair()
        assert keypair.public_key.startswith("0x")
        assert len(keypair.public_key) == 2 + 128

    def test_private_key_not_in_repr(self):
        keypair = generate_keypair()
        assert keypair.private_key not in repr(keypair)


class TestTypedData:
    """Tests for build_typed_data."""

    @pytest.mark.parametrize("variant", list(DecryptionVariant))
    def test_no_none_fields_when_window_missing(self, variant):
        """Test that missing numeric fields default to 0 instead of None."""
        domain, types, message = build_typed_data(
            variant, "0x" + "00" * 64, CONTRACT, chain_id=None, verifying_contract=VERIFIER,
        )
        assert not _has_none(domain)
        assert not _has_none(message)
        assert domain["chainId"] == 0

    def test_user_decrypt_payload(self):
        domain, types, message = build_typed_data(
            DecryptionVariant.USER_DECRYPT, "0x" + "00" * 64, CONTRACT,
            chain_id=11155111, verifying_contract=VERIFIER,
            start_timestamp=1700000000, duration_days=1,
        )
        assert domain["name"] == "Decryption"
        assert domain["chainId"] == 11155111
        assert "UserDecryptRequestVerification" in types
        assert message["contractAddresses"] == [CONTRACT]
        assert message["startTimestamp"] == 1700000000
        assert message["durationDays"] == 1
        assert message["extraData"] == "0x00"

    def test_user_decrypt_window_defaults_to_zero(self):
        _, _, message = build_typed_data(
            DecryptionVariant.USER_DECRYPT, "0x" + "00" * 64, CONTRACT,
            chain_id=1, verifying_contract=VERIFIER,
        )
        assert message["startTimestamp"] == 0
        assert message["durationDays"] == 0

    def test_reencrypt_payload(self):
        domain, types, message = build_typed_data(
            DecryptionVariant.REENCRYPT, "0x" + "00" * 64, CONTRACT,
            chain_id=1, verifying_contract=VERIFIER,
        )
        assert domain["name"] == "Authorization token"
        assert types == {"Reencrypt": [{"name": "publicKey", "type": "bytes"}]}
        assert message == {"publicKey": "0x" + "00" * 64}

    def test_unknown_variant_rejected(self):
        with pytest.raises(AuthorizationError):
            build_typed_data("plain", "0x00", CONTRACT, chain_id=1, verifying_contract=VERIFIER)


class TestAuthorize:
    """Tests for authorize()."""

    @pytest.mark.parametrize("variant", list(DecryptionVariant))
    def test_signature_recovers_to_signer(self, variant):
        """Test that the signature is over the typed payload by the persistent key."""
        account = Account.from_key(PRIVATE_KEY)
        auth = authorize(
            account, variant, CONTRACT, chain_id=11155111, verifying_contract=VERIFIER,
            start_timestamp=1700000000, duration_days=1,
        )
        domain, types, message = auth.typed_data
        signable = encode_typed_data(domain_data=domain, message_types=types, message_data=message)

        assert Account.recover_message(signable, signature=auth.signature) == account.address
        assert auth.signer_address == account.address
        assert auth.variant is variant

    def test_authorization_numeric_fields_never_none(self):
        account = Account.from_key(PRIVATE_KEY)
        auth = authorize(
            account, DecryptionVariant.USER_DECRYPT, CONTRACT,
            chain_id=None, verifying_contract=VERIFIER,
        )
        assert auth.chain_id == 0
        assert auth.start_timestamp == 0
        assert auth.duration_days == 0
        assert not _has_none(auth.typed_data)

    def test_uses_supplied_keypair(self):
        account = Account.from_key(PRIVATE_KEY)
        keypair = generate_keypair()
        auth = authorize(
            account, DecryptionVariant.REENCRYPT, CONTRACT, chain_id=1,
            verifying_contract=VERIFIER, keypair=keypair,
        )
        assert auth.keypair is keypair
        assert auth.typed_data[2]["publicKey"] == keypair.public_key

    def test_signing_failure_is_authorization_error(self):
        """Test that an unencodable payload surfaces as AuthorizationError."""
        account = Account.from_key(PRIVATE_KEY)
        with pytest.raises(AuthorizationError):
            authorize(
                account, DecryptionVariant.USER_DECRYPT, "not-an-address",
                chain_id=1, verifying_contract=VERIFIER,
            )
