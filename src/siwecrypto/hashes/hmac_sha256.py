"""
HMAC-SHA256 (RFC 2104) on top of the local SHA-256.
"""

from __future__ import annotations

from .sha256 import BLOCK_SIZE, sha256

_IPAD = 0x36
_OPAD = 0x5C


def hmac_sha256(key: bytes, data: bytes) -> bytes:
    """
    HMAC(K, m) = H((K' ^ opad) || H((K' ^ ipad) || m)).

    Args:
        key: Secret key; keys longer than the 64-byte block are hashed first.
        data: Message bytes.

    Returns:
        32-byte MAC.
    """
    if len(key) > BLOCK_SIZE:
        key = sha256(key)
    key = key.ljust(BLOCK_SIZE, b"\x00")
    inner_key = bytes(b ^ _IPAD for b in key)
    outer_key = bytes(b ^ _OPAD for b in key)
    return sha256(outer_key + sha256(inner_key + data))


def hmac_sha256_hex(key: bytes, data: bytes) -> str:
    """HMAC-SHA256 as lowercase hex."""
    return hmac_sha256(key, data).hex()


__all__: tuple[str, ...] = ("hmac_sha256", "hmac_sha256_hex")
