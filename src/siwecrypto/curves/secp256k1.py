"""
secp256k1 (Bitcoin/Ethereum curve): field and group arithmetic, key derivation,
deterministic (RFC 6979) recoverable ECDSA signing.

Points are affine ``(x, y)`` tuples; ``None`` is the point at infinity.
"""

from __future__ import annotations

from typing import Iterator, Optional, Tuple

from ..errors import NotQuadraticResidueError
from ..hashes import hmac_sha256, keccak256

P = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEFFFFFC2F
N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
B = 7
GX = 0x79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798
GY = 0x483ADA7726A3C4655DA4FBFC0E1108A8FD17B448A68554199C47D08FFB10D4B8
HALF_N = N // 2

Point = Optional[Tuple[int, int]]

G: Point = (GX, GY)
POINT_AT_INFINITY: Point = None


# --- field arithmetic ---


def mod_add(a: int, b: int, m: int = P) -> int:
    return (a + b) % m


def mod_mul(a: int, b: int, m: int = P) -> int:
    return (a * b) % m


def mod_pow(base: int, exp: int, m: int = P) -> int:
    return pow(base, exp, m)


def mod_inv(a: int, n: int = P) -> int:
    """Modular inverse via extended gcd."""
    a %= n
    t, r = 0, n
    new_t, new_r = 1, a
    while new_r:
        q = r // new_r
        t, new_t = new_t, t - q * new_t
        r, new_r = new_r, r - q * new_r
    if r != 1:
        raise ValueError("no inverse")
    return t % n


def sqrt_mod(a: int) -> int:
    """
    Square root modulo P. Closed form a^((P+1)/4), valid because P = 3 (mod 4).

    Args:
        a: Field element.

    Returns:
        One of the two roots (the other is P - root).

    Raises:
        NotQuadraticResidueError: a has no square root mod P.
    """
    a %= P
    root = pow(a, (P + 1) // 4, P)
    if (root * root) % P != a:
        raise NotQuadraticResidueError("value is not a quadratic residue mod p")
    return root


# --- group arithmetic ---


def is_point_at_infinity(point: Point) -> bool:
    return point is None


def is_on_curve(point: Point) -> bool:
    """True iff point is an affine point with coordinates in [0, P) satisfying y^2 = x^3 + 7."""
    if point is None:
        return False
    x, y = point
    if not (0 <= x < P and 0 <= y < P):
        return False
    return (y * y - (x * x * x + B)) % P == 0


def point_neg(point: Point) -> Point:
    if point is None:
        return None
    x, y = point
    return (x, (-y) % P)


def point_double(point: Point) -> Point:
    """2 * point. A point with y == 0 has order 2 and doubles to infinity."""
    if point is None:
        return None
    x, y = point
    if y == 0:
        return None
    lam = (3 * x * x) * mod_inv(2 * y, P) % P
    rx = (lam * lam - 2 * x) % P
    ry = (lam * (x - rx) - y) % P
    return (rx, ry)


def point_add(p: Point, q: Point) -> Point:
    """Add two points in affine coords; infinity is the identity."""
    if p is None:
        return q
    if q is None:
        return p
    px, py = p
    qx, qy = q
    if px == qx:
        if (py + qy) % P == 0:
            return None
        return point_double(p)
    lam = (qy - py) * mod_inv(qx - px, P) % P
    rx = (lam * lam - px - qx) % P
    ry = (lam * (px - rx) - py) % P
    return (rx, ry)


def scalar_multiply(k: int, point: Point) -> Point:
    """
    k * point by double-and-add over the bits of k (least significant first).

    k is not reduced mod N, so N * G really walks the group back to infinity.
    """
    if k < 0:
        return scalar_multiply(-k, point_neg(point))
    result: Point = None
    addend = point
    while k:
        if k & 1:
            result = point_add(result, addend)
        addend = point_double(addend)
        k >>= 1
    return result


# --- keys ---


def point_to_bytes(point: Point) -> bytes:
    """64-byte x || y serialization (no 0x04 prefix)."""
    if point is None:
        raise ValueError("cannot serialize the point at infinity")
    return point[0].to_bytes(32, "big") + point[1].to_bytes(32, "big")


def privkey_to_point(privkey: bytes) -> Tuple[int, int]:
    """Public key point d * G for a 32-byte private key d in [1, N)."""
    if len(privkey) != 32:
        raise ValueError("privkey must be 32 bytes")
    d = int.from_bytes(privkey, "big")
    if d == 0 or d >= N:
        raise ValueError("invalid privkey")
    point = scalar_multiply(d, G)
    assert point is not None
    return point


def privkey_to_pubkey(privkey: bytes) -> bytes:
    """
    Derive uncompressed public key (65 bytes: 0x04 || x || y) from 32-byte private key.

    Args:
        privkey: 32-byte secp256k1 private key.

    Returns:
        65-byte uncompressed public key.
    """
    return b"\x04" + point_to_bytes(privkey_to_point(privkey))


def privkey_to_address(privkey: bytes) -> str:
    """
    Ethereum address (0x + 40 lowercase hex) from 32-byte private key.

    Args:
        privkey: 32-byte secp256k1 private key.

    Returns:
        "0x" plus 40 hex chars (keccak256(x || y)[12:32]).
    """
    return "0x" + keccak256(point_to_bytes(privkey_to_point(privkey)))[12:].hex()


# --- signing ---


def _rfc6979_nonces(d: int, msg_hash: bytes) -> Iterator[int]:
    """Deterministic k candidates per RFC 6979 section 3.2 with HMAC-SHA256."""
    x = d.to_bytes(32, "big")
    h = (int.from_bytes(msg_hash, "big") % N).to_bytes(32, "big")
    v = b"\x01" * 32
    k = b"\x00" * 32
    k = hmac_sha256(k, v + b"\x00" + x + h)
    v = hmac_sha256(k, v)
    k = hmac_sha256(k, v + b"\x01" + x + h)
    v = hmac_sha256(k, v)
    while True:
        v = hmac_sha256(k, v)
        candidate = int.from_bytes(v, "big")
        if 1 <= candidate < N:
            yield candidate
        k = hmac_sha256(k, v + b"\x00")
        v = hmac_sha256(k, v)


def sign_recoverable(privkey: bytes, msg_hash: bytes) -> tuple[int, int, int]:
    """
    ECDSA sign with recovery id; returns (r, s, v) with v in {27, 28} and low s.

    k is derived deterministically from key and hash (RFC 6979), so the same
    inputs always give the same signature.

    Args:
        privkey: 32-byte private key.
        msg_hash: 32-byte message hash to sign.

    Returns:
        (r, s, v) where v is 27 or 28 for Ethereum-style recovery.
    """
    if len(privkey) != 32 or len(msg_hash) != 32:
        raise ValueError("privkey and msg_hash must be 32 bytes")
    d = int.from_bytes(privkey, "big")
    if d == 0 or d >= N:
        raise ValueError("invalid privkey")
    z = int.from_bytes(msg_hash, "big")
    for k in _rfc6979_nonces(d, msg_hash):
        kx, ky = scalar_multiply(k, G)  # type: ignore[misc]
        r = kx % N
        if r == 0:
            continue
        s = mod_inv(k, N) * (z + r * d) % N
        if s == 0:
            continue
        recid = (ky & 1) | (2 if kx >= N else 0)
        if s > HALF_N:
            # -k gives the same r with y negated
            s = N - s
            recid ^= 1
        return (r, s, 27 + recid)
    raise ValueError("sign_recoverable: nonce generator exhausted")


__all__: tuple[str, ...] = (
    "B",
    "G",
    "GX",
    "GY",
    "HALF_N",
    "N",
    "P",
    "POINT_AT_INFINITY",
    "Point",
    "is_on_curve",
    "is_point_at_infinity",
    "mod_add",
    "mod_inv",
    "mod_mul",
    "mod_pow",
    "point_add",
    "point_double",
    "point_neg",
    "point_to_bytes",
    "privkey_to_address",
    "privkey_to_point",
    "privkey_to_pubkey",
    "scalar_multiply",
    "sign_recoverable",
    "sqrt_mod",
)
