"""
Sign-In With Ethereum verification with first-principles crypto: SHA-256,
HMAC-SHA256, keccak256, secp256k1, ECDSA recovery, EIP-4361. No third-party
crypto dependency.
"""

from .__about__ import __version__
from .auth import (AuthenticationResult, AuthenticationService, NonceRecord,
                   NonceStore, run_self_test)
from .curves import (privkey_to_address, privkey_to_pubkey, scalar_multiply,
                     sign_recoverable)
from .hashes import hash_ethereum_message, hmac_sha256, keccak256, sha256
from .signing import (SiweMessage, build_siwe_message, parse_signature,
                      parse_siwe_message, reconstruct_siwe_message,
                      recover_address, sign_message, validate_siwe_message,
                      verify_signature)

__all__: tuple[str, ...] = (
    # About
    "__version__",
    # Hashes
    "hash_ethereum_message",
    "hmac_sha256",
    "keccak256",
    "sha256",
    # Curves: secp256k1
    "privkey_to_address",
    "privkey_to_pubkey",
    "scalar_multiply",
    "sign_recoverable",
    # Signing: EIP-191 personal messages
    "parse_signature",
    "recover_address",
    "sign_message",
    "verify_signature",
    # Signing: EIP-4361 (SIWE)
    "SiweMessage",
    "build_siwe_message",
    "parse_siwe_message",
    "reconstruct_siwe_message",
    "validate_siwe_message",
    # Auth
    "AuthenticationResult",
    "AuthenticationService",
    "NonceRecord",
    "NonceStore",
    "run_self_test",
)
