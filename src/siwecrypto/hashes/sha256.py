"""
SHA-256 (FIPS 180-4), Merkle-Damgard over 64-byte blocks. Pure Python, no hashlib.
"""

from __future__ import annotations

_MASK32 = 0xFFFFFFFF

# First 32 bits of the fractional parts of the square roots of the first 8 primes
_INITIAL_HASH = (
    0x6A09E667,
    0xBB67AE85,
    0x3C6EF372,
    0xA54FF53A,
    0x510E527F,
    0x9B05688C,
    0x1F83D9AB,
    0x5BE0CD19,
)

# First 32 bits of the fractional parts of the cube roots of the first 64 primes
_ROUND_CONSTANTS = (
    0x428A2F98, 0x71374491, 0xB5C0FBCF, 0xE9B5DBA5,
    0x3956C25B, 0x59F111F1, 0x923F82A4, 0xAB1C5ED5,
    0xD807AA98, 0x12835B01, 0x243185BE, 0x550C7DC3,
    0x72BE5D74, 0x80DEB1FE, 0x9BDC06A7, 0xC19BF174,
    0xE49B69C1, 0xEFBE4786, 0x0FC19DC6, 0x240CA1CC,
    0x2DE92C6F, 0x4A7484AA, 0x5CB0A9DC, 0x76F988DA,
    0x983E5152, 0xA831C66D, 0xB00327C8, 0xBF597FC7,
    0xC6E00BF3, 0xD5A79147, 0x06CA6351, 0x14292967,
    0x27B70A85, 0x2E1B2138, 0x4D2C6DFC, 0x53380D13,
    0x650A7354, 0x766A0ABB, 0x81C2C92E, 0x92722C85,
    0xA2BFE8A1, 0xA81A664B, 0xC24B8B70, 0xC76C51A3,
    0xD192E819, 0xD6990624, 0xF40E3585, 0x106AA070,
    0x19A4C116, 0x1E376C08, 0x2748774C, 0x34B0BCB5,
    0x391C0CB3, 0x4ED8AA4A, 0x5B9CCA4F, 0x682E6FF3,
    0x748F82EE, 0x78A5636F, 0x84C87814, 0x8CC70208,
    0x90BEFFFA, 0xA4506CEB, 0xBEF9A3F7, 0xC67178F2,
)  # fmt: skip

BLOCK_SIZE = 64
DIGEST_SIZE = 32


def _rotr32(v: int, n: int) -> int:
    """Rotate 32-bit value v right by n bits."""
    return ((v >> n) | (v << (32 - n))) & _MASK32


def _pad(data: bytes) -> bytes:
    """0x80, zeros up to 56 mod 64, then the bit length as a 64-bit big-endian int."""
    bit_length = (len(data) * 8) & 0xFFFFFFFFFFFFFFFF
    zeros = (55 - len(data)) % BLOCK_SIZE
    return data + b"\x80" + bytes(zeros) + bit_length.to_bytes(8, "big")


def _compress(state: list[int], block: bytes) -> None:
    """Run the 64 rounds over one 64-byte block; updates state in place."""
    w = [int.from_bytes(block[i : i + 4], "big") for i in range(0, BLOCK_SIZE, 4)]
    for t in range(16, 64):
        s0 = _rotr32(w[t - 15], 7) ^ _rotr32(w[t - 15], 18) ^ (w[t - 15] >> 3)
        s1 = _rotr32(w[t - 2], 17) ^ _rotr32(w[t - 2], 19) ^ (w[t - 2] >> 10)
        w.append((w[t - 16] + s0 + w[t - 7] + s1) & _MASK32)

    a, b, c, d, e, f, g, h = state
    for t in range(64):
        big_s1 = _rotr32(e, 6) ^ _rotr32(e, 11) ^ _rotr32(e, 25)
        ch = (e & f) ^ (~e & g)
        t1 = (h + big_s1 + ch + _ROUND_CONSTANTS[t] + w[t]) & _MASK32
        big_s0 = _rotr32(a, 2) ^ _rotr32(a, 13) ^ _rotr32(a, 22)
        maj = (a & b) ^ (a & c) ^ (b & c)
        t2 = (big_s0 + maj) & _MASK32
        h, g, f = g, f, e
        e = (d + t1) & _MASK32
        d, c, b = c, b, a
        a = (t1 + t2) & _MASK32

    for i, v in enumerate((a, b, c, d, e, f, g, h)):
        state[i] = (state[i] + v) & _MASK32


def sha256(data: bytes) -> bytes:
    """
    SHA-256 hash.

    Args:
        data: Input bytes (any length).

    Returns:
        32-byte digest.
    """
    state = list(_INITIAL_HASH)
    padded = _pad(bytes(data))
    for off in range(0, len(padded), BLOCK_SIZE):
        _compress(state, padded[off : off + BLOCK_SIZE])
    return b"".join(v.to_bytes(4, "big") for v in state)


def sha256_hex(data: bytes) -> str:
    """SHA-256 digest as lowercase hex."""
    return sha256(data).hex()


__all__: tuple[str, ...] = ("BLOCK_SIZE", "DIGEST_SIZE", "sha256", "sha256_hex")
