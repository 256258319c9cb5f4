"""
Ethereum personal-message signatures: parse, recover signer address, verify, sign.

A signature is 65 bytes r(32) || s(32) || v(1). Each rejection raises its own
error type from ``siwecrypto.errors``; nothing here returns a guessed address.
"""

from __future__ import annotations

import binascii
from dataclasses import dataclass

from ..curves.secp256k1 import (HALF_N, N, P, G, Point, is_on_curve,
                                is_point_at_infinity, mod_inv, point_add,
                                point_to_bytes, scalar_multiply,
                                sign_recoverable, sqrt_mod)
from ..errors import (InvalidRecoveryError, MalformedInputError,
                      MalleableSignatureError, OutOfRangeError)
from ..hashes import hash_ethereum_message, keccak256

SIGNATURE_LENGTH = 65


@dataclass(frozen=True)
class Signature:
    """Validated signature; v is the recovery parity bit (0 or 1)."""

    r: int
    s: int
    v: int

    def to_bytes(self) -> bytes:
        return (
            self.r.to_bytes(32, "big")
            + self.s.to_bytes(32, "big")
            + bytes([27 + self.v])
        )


def _signature_bytes(signature: str | bytes) -> bytes:
    if isinstance(signature, (bytes, bytearray, memoryview)):
        return bytes(signature)
    text = signature.strip()
    if text[:2] in ("0x", "0X"):
        text = text[2:]
    try:
        return binascii.unhexlify(text)
    except (binascii.Error, ValueError) as exc:
        raise MalformedInputError(f"signature is not valid hex: {exc}") from exc


def parse_signature(signature: str | bytes) -> Signature:
    """
    Parse and validate a 65-byte Ethereum signature.

    Args:
        signature: Raw bytes, or hex text with optional 0x prefix.

    Returns:
        Signature with v normalized to 0 or 1.

    Raises:
        MalformedInputError: not 65 bytes, bad hex, or v not in {0, 1, 27, 28}.
        OutOfRangeError: r or s not in (0, n).
        MalleableSignatureError: s > n/2.
    """
    sig = _signature_bytes(signature)
    if len(sig) != SIGNATURE_LENGTH:
        raise MalformedInputError(
            f"expected {SIGNATURE_LENGTH} signature bytes, got {len(sig)}"
        )
    r = int.from_bytes(sig[0:32], "big")
    s = int.from_bytes(sig[32:64], "big")
    v = sig[64]

    if not 0 < r < N:
        raise OutOfRangeError("r out of range")
    if not 0 < s < N:
        raise OutOfRangeError("s out of range")
    if s > HALF_N:
        raise MalleableSignatureError("s > n/2 (malleable signature)")

    if v in (27, 28):
        v -= 27
    elif v not in (0, 1):
        raise MalformedInputError(f"v must be 0/1 or 27/28, got {sig[64]}")
    return Signature(r=r, s=s, v=v)


def recover_public_key(msg_hash: bytes, r: int, s: int, recid: int) -> Point:
    """
    Recover the signer's public key point: Q = r^-1 * (s*R - z*G).

    Args:
        msg_hash: 32-byte hash that was signed.
        r, s: Signature scalars (already range-checked).
        recid: Recovery id 0-3; bit 0 selects y parity, bit 1 selects x = r + n.

    Returns:
        Public key point (never infinity, always on the curve).

    Raises:
        InvalidRecoveryError: no curve point for r, or the result is degenerate.
    """
    if len(msg_hash) != 32:
        raise ValueError("msg_hash must be 32 bytes")
    if recid & 2:
        # Only reachable when r < p - n, about 2^-128 of all r values
        x = r + N
        if x >= P:
            raise InvalidRecoveryError("recid 2/3 but r + n >= p")
    else:
        x = r
    y = sqrt_mod((x * x * x + 7) % P)
    if (y & 1) != (recid & 1):
        y = P - y
    big_r: Point = (x, y)
    if not is_on_curve(big_r):
        raise InvalidRecoveryError("R is not on the curve")

    z = int.from_bytes(msg_hash, "big") % N
    r_inv = mod_inv(r, N)
    u1 = (-z * r_inv) % N
    u2 = (s * r_inv) % N
    q = point_add(scalar_multiply(u1, G), scalar_multiply(u2, big_r))
    if is_point_at_infinity(q):
        raise InvalidRecoveryError("recovered public key is the point at infinity")
    if not is_on_curve(q):
        raise InvalidRecoveryError("recovered public key is not on the curve")
    return q


def public_key_to_address(point: Point) -> str:
    """Last 20 bytes of keccak256(x || y), 0x-prefixed lowercase hex."""
    return "0x" + keccak256(point_to_bytes(point))[12:].hex()


def normalize_address(address: str) -> str:
    return address.strip().lower()


def recover_address(message: str | bytes, signature: str | bytes) -> str:
    """
    Recover the Ethereum address that produced ``signature`` over ``message``.

    The message is hashed with the EIP-191 personal-message prefix, so this
    matches what a wallet's ``personal_sign`` / ``signMessage`` produced.

    Args:
        message: Text the user signed (UTF-8) or raw bytes.
        signature: 65-byte signature, raw or hex.

    Returns:
        Lowercase 0x-prefixed address.
    """
    sig = parse_signature(signature)
    q = recover_public_key(hash_ethereum_message(message), sig.r, sig.s, sig.v)
    return public_key_to_address(q)


def verify_signature(
    message: str | bytes, signature: str | bytes, expected_address: str
) -> bool:
    """True iff the signature over message recovers to expected_address."""
    try:
        recovered = recover_address(message, signature)
    except (MalformedInputError, OutOfRangeError, MalleableSignatureError,
            InvalidRecoveryError):
        return False
    return recovered == normalize_address(expected_address)


def sign_message(privkey: bytes, message: str | bytes) -> bytes:
    """
    Sign a personal message the way a wallet does; returns r || s || v, v in {27, 28}.

    Args:
        privkey: 32-byte secp256k1 private key.
        message: Text (UTF-8) or raw bytes.

    Returns:
        65-byte signature.
    """
    r, s, v = sign_recoverable(privkey, hash_ethereum_message(message))
    return r.to_bytes(32, "big") + s.to_bytes(32, "big") + bytes([v])


__all__: tuple[str, ...] = (
    "SIGNATURE_LENGTH",
    "Signature",
    "normalize_address",
    "parse_signature",
    "public_key_to_address",
    "recover_address",
    "recover_public_key",
    "sign_message",
    "verify_signature",
)
