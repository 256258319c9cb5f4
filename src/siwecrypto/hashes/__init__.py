"""Hash functions: SHA-256, HMAC-SHA256, Keccak-256."""

from .hmac_sha256 import hmac_sha256, hmac_sha256_hex
from .keccak import hash_ethereum_message, keccak256, keccak256_hex
from .sha256 import sha256, sha256_hex

__all__: tuple[str, ...] = (
    "hash_ethereum_message",
    "hmac_sha256",
    "hmac_sha256_hex",
    "keccak256",
    "keccak256_hex",
    "sha256",
    "sha256_hex",
)
