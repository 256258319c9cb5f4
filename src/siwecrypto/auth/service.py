"""
Authentication service: nonce issuance, nonce hashing, and SIWE sign-in verification.

Verification order is fixed: the signature is checked before any field of the
message is trusted (the nonce being checked lives inside the signed message),
and the nonce comparison comes last.

    1. recover signer from the signature          (cheapest rejection)
    2. recovered address == expected address
    3. parse message; canonical form must equal the signed text
    4. message address == expected address
    5. domain / version / chain id / validity window
    6. HMAC(secret, address + nonce) == stored hash (constant time)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Optional, Tuple, Union

from ..errors import (AddressMismatchError, ConfigError,
                      NonCanonicalMessageError, NonceExpiredError,
                      NonceMismatchError, SiweCryptoError)
from ..hashes import hmac_sha256_hex
from ..signing.recovery import normalize_address, recover_address
from ..signing.siwe import (SiweMessage, parse_siwe_message,
                            reconstruct_siwe_message, validate_siwe_message)
from .nonce import (DEFAULT_NONCE_TTL_SECONDS, NONCE_BYTES, NonceRecord,
                    NonceStore, generate_random_base64)
from .selftest import run_self_test

if TYPE_CHECKING:
    from ..config import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthenticationResult:
    """Outcome of one verification attempt. ``error_code`` is the taxonomy name."""

    success: bool
    error: Optional[str] = None
    error_code: Optional[str] = None
    recovered_address: Optional[str] = None

    @classmethod
    def ok(cls, recovered_address: str) -> "AuthenticationResult":
        return cls(success=True, recovered_address=recovered_address)

    @classmethod
    def failure(cls, exc: SiweCryptoError) -> "AuthenticationResult":
        return cls(success=False, error=str(exc), error_code=exc.code)


def constant_time_equal(a: str, b: str) -> bool:
    """Compare without short-circuiting: length check, then XOR-accumulate every byte."""
    left = a.encode("utf-8")
    right = b.encode("utf-8")
    if len(left) != len(right):
        return False
    result = 0
    for x, y in zip(left, right):
        result |= x ^ y
    return result == 0


class AuthenticationService:
    """
    Stateless apart from the injected HMAC secret and the expected SIWE domain.

    Args:
        server_secret: Key for nonce HMACs.
        expected_domain: If set, messages must name exactly this domain.

    Raises:
        ConfigError: server_secret is missing or empty.
    """

    def __init__(
        self,
        server_secret: Union[str, bytes, None],
        expected_domain: Optional[str] = None,
    ) -> None:
        if not server_secret:
            raise ConfigError("server secret is not configured")
        if isinstance(server_secret, str):
            server_secret = server_secret.encode("utf-8")
        self._secret = bytes(server_secret)
        self.expected_domain = expected_domain

    @classmethod
    def from_settings(cls, settings: "Settings") -> "AuthenticationService":
        return cls(settings.server_secret, expected_domain=settings.expected_domain)

    def __repr__(self) -> str:
        return f"AuthenticationService(expected_domain={self.expected_domain!r})"

    # --- nonces ---

    @staticmethod
    def generate_nonce() -> str:
        """32 random bytes, URL-safe base64 (no padding)."""
        return generate_random_base64(NONCE_BYTES)

    def get_nonce_hash(self, address: str, nonce: str) -> str:
        """Lowercase hex HMAC-SHA256(secret, lower(address) + nonce)."""
        data = (normalize_address(address) + nonce).encode("utf-8")
        return hmac_sha256_hex(self._secret, data)

    def issue_nonce(
        self,
        address: str,
        ttl_seconds: int = DEFAULT_NONCE_TTL_SECONDS,
        now: Optional[datetime] = None,
    ) -> Tuple[str, NonceRecord]:
        """
        New nonce for ``address``.

        Returns:
            (nonce, record): the raw nonce goes to the wallet, the record
            (hash + expiry) goes to the identity store.
        """
        now = now or datetime.now(timezone.utc)
        nonce = self.generate_nonce()
        record = NonceRecord(
            nonce_hash=self.get_nonce_hash(address, nonce),
            expires_at=now + timedelta(seconds=ttl_seconds),
        )
        return nonce, record

    # --- verification ---

    def _verify(
        self,
        message: str,
        signature: Union[str, bytes],
        expected_address: str,
        stored_nonce_hash: str,
        now: Optional[datetime],
    ) -> Tuple[str, SiweMessage]:
        expected = normalize_address(expected_address)

        recovered = recover_address(message, signature)
        if recovered != expected:
            raise AddressMismatchError(
                "recovered address does not match claimed address"
            )

        parsed = parse_siwe_message(message)
        if reconstruct_siwe_message(parsed) != message:
            raise NonCanonicalMessageError(
                "signed text is not the canonical EIP-4361 form of the message"
            )
        if normalize_address(parsed.address) != expected:
            raise AddressMismatchError(
                "message address does not match claimed address"
            )

        validate_siwe_message(parsed, expected_domain=self.expected_domain, now=now)

        recomputed = self.get_nonce_hash(expected, parsed.nonce)
        if not constant_time_equal(recomputed, stored_nonce_hash.lower()):
            raise NonceMismatchError("invalid nonce")
        return recovered, parsed

    def authenticate_siwe(
        self,
        message: str,
        signature: Union[str, bytes],
        expected_address: str,
        stored_nonce_hash: str,
        now: Optional[datetime] = None,
    ) -> AuthenticationResult:
        """
        Verify a SIWE sign-in attempt.

        The signature is checked over ``message`` as given, and ``message`` must
        then be the canonical EIP-4361 text (``\\n`` line endings, fixed field
        order). Pass the exact string the wallet signed; text re-encoded in
        transit (for example with ``\\r\\n``) fails with ParseError.

        Args:
            message: EIP-4361 text exactly as the wallet signed it.
            signature: 65-byte signature, raw or hex (optional 0x).
            expected_address: Address the caller claims to control.
            stored_nonce_hash: Hash saved when the nonce was issued.
            now: Reference time for the validity window (default: now, UTC).

        Returns:
            AuthenticationResult; failures carry a specific error and code and
            are never raised.
        """
        try:
            recovered, _ = self._verify(
                message, signature, expected_address, stored_nonce_hash, now
            )
        except SiweCryptoError as exc:
            logger.warning(
                "SIWE authentication rejected for %s: %s (%s)",
                expected_address,
                exc.code,
                exc,
            )
            return AuthenticationResult.failure(exc)
        logger.info("SIWE authentication succeeded for %s", recovered)
        return AuthenticationResult.ok(recovered)

    def authenticate_with_record(
        self,
        message: str,
        signature: Union[str, bytes],
        expected_address: str,
        record: Optional[NonceRecord],
        now: Optional[datetime] = None,
    ) -> AuthenticationResult:
        """Like authenticate_siwe, but first rejects a missing or expired nonce record."""
        now = now or datetime.now(timezone.utc)
        if record is None:
            return AuthenticationResult.failure(
                NonceMismatchError("no nonce issued for this address")
            )
        expires_at = record.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        if now > expires_at:
            logger.warning("SIWE nonce expired for %s", expected_address)
            return AuthenticationResult.failure(NonceExpiredError("nonce expired"))
        return self.authenticate_siwe(
            message, signature, expected_address, record.nonce_hash, now=now
        )

    def authenticate_with_store(
        self,
        store: NonceStore,
        message: str,
        signature: Union[str, bytes],
        expected_address: str,
        now: Optional[datetime] = None,
    ) -> AuthenticationResult:
        record = store.get_nonce_record(normalize_address(expected_address))
        return self.authenticate_with_record(
            message, signature, expected_address, record, now=now
        )

    @staticmethod
    def self_test() -> None:
        """Run the startup self-test; raises SelfTestError on any mismatch."""
        run_self_test()


__all__: tuple[str, ...] = (
    "AuthenticationResult",
    "AuthenticationService",
    "constant_time_equal",
)
