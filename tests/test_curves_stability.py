"""Stability tests for key derivation, signing and recovery.

Lock in exact outputs for fixed inputs so that any change in curve code
(optimizations, refactors) is detected. Addresses are the well-known ones for
private keys 1 and 2.
"""

from __future__ import annotations

from siwecrypto import (keccak256, privkey_to_address, privkey_to_pubkey,
                        recover_address, sign_message, sign_recoverable)
from siwecrypto.signing import recover_public_key

SECP_PRIV = bytes.fromhex(
    "0000000000000000000000000000000000000000000000000000000000000001"
)
SECP_PRIV_TWO = bytes.fromhex(
    "0000000000000000000000000000000000000000000000000000000000000002"
)
SECP_MSG_HASH = bytes.fromhex(
    "2339863461be3f2dbbc5f995c5bf6953ee73f6437f37b0b44de4e67088bcd4c2"
)  # keccak256(b"message to sign")
SECP_PUB_EXPECTED = bytes.fromhex(
    "0479be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798"
    "483ada7726a3c4655da4fbfc0e1108a8fd17b448a68554199c47d08ffb10d4b8"
)
SECP_ADDR_EXPECTED = "0x7e5f4552091a69125d5dfcb7b8c2659029395bdf"
SECP_ADDR_TWO_EXPECTED = "0x2b5ad5c4795c026514f8317c7a215e218dccd6cf"


def test_secp256k1_privkey_to_pubkey_stable() -> None:
    """Exact pubkey for fixed privkey must not change (key 1 -> G)."""
    assert privkey_to_pubkey(SECP_PRIV) == SECP_PUB_EXPECTED


def test_secp256k1_privkey_to_address_stable() -> None:
    """Exact address for fixed privkeys must not change."""
    assert privkey_to_address(SECP_PRIV) == SECP_ADDR_EXPECTED
    assert privkey_to_address(SECP_PRIV_TWO) == SECP_ADDR_TWO_EXPECTED


def test_secp256k1_sign_recoverable_deterministic() -> None:
    """RFC 6979 nonces: same key and hash always give the same (r, s, v)."""
    assert sign_recoverable(SECP_PRIV, SECP_MSG_HASH) == sign_recoverable(
        SECP_PRIV, SECP_MSG_HASH
    )
    assert sign_recoverable(SECP_PRIV, SECP_MSG_HASH) != sign_recoverable(
        SECP_PRIV_TWO, SECP_MSG_HASH
    )


def test_secp256k1_recover_pubkey_stable() -> None:
    """Recovered pubkey must equal privkey_to_pubkey."""
    r, s, v = sign_recoverable(SECP_PRIV, SECP_MSG_HASH)
    x, y = recover_public_key(SECP_MSG_HASH, r, s, v - 27)
    recovered = b"\x04" + x.to_bytes(32, "big") + y.to_bytes(32, "big")
    assert recovered == SECP_PUB_EXPECTED
    assert recovered == privkey_to_pubkey(SECP_PRIV)


def test_secp256k1_msg_hash_consistent() -> None:
    """SECP_MSG_HASH must equal keccak256(b'message to sign') (used by stability tests)."""
    assert SECP_MSG_HASH == keccak256(b"message to sign")


def test_personal_sign_round_trip_stable() -> None:
    for priv, address in (
        (SECP_PRIV, SECP_ADDR_EXPECTED),
        (SECP_PRIV_TWO, SECP_ADDR_TWO_EXPECTED),
    ):
        signature = sign_message(priv, "Hello, Ethereum")
        assert len(signature) == 65
        assert recover_address("Hello, Ethereum", signature) == address
