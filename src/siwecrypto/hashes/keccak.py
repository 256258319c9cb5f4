"""
Keccak-256 (original pad10*1 padding, 256-bit output) as used by Ethereum.
Not NIST SHA3-256: the domain byte is 0x01, not 0x06.
"""

from __future__ import annotations

from functools import reduce
from operator import xor

from ..errors import MalformedInputError

_ROUND_CONSTANTS = [
    0x0000000000000001,
    0x0000000000008082,
    0x800000000000808A,
    0x8000000080008000,
    0x000000000000808B,
    0x0000000080000001,
    0x8000000080008081,
    0x8000000000008009,
    0x000000000000008A,
    0x0000000000000088,
    0x0000000080008009,
    0x000000008000000A,
    0x000000008000808B,
    0x800000000000008B,
    0x8000000000008089,
    0x8000000000008003,
    0x8000000000008002,
    0x8000000000000080,
    0x000000000000800A,
    0x800000008000000A,
    0x8000000080008081,
    0x8000000000008080,
    0x0000000080000001,
    0x8000000080008008,
]

# Rotation offsets indexed [y][x]
_ROTATION = [
    [0, 1, 62, 28, 27],
    [36, 44, 6, 55, 20],
    [3, 10, 43, 25, 39],
    [41, 45, 15, 21, 8],
    [18, 2, 61, 56, 14],
]

RATE_BYTES = 136  # 1088-bit rate, 512-bit capacity
DIGEST_SIZE = 32
_LANE_BYTES = 8
_MASK64 = 0xFFFFFFFFFFFFFFFF

ETHEREUM_MESSAGE_PREFIX = b"\x19Ethereum Signed Message:\n"


def _rol64(v: int, n: int) -> int:
    """Rotate 64-bit value v left by n bits (mod 64)."""
    n = n % 64
    if n == 0:
        return v
    return ((v << n) | (v >> (64 - n))) & _MASK64


def _keccak_f(state: list[list[int]]) -> None:
    """Keccak-f[1600]; 24 rounds over state[x][y], in place."""
    for rc in _ROUND_CONSTANTS:
        # theta: fold each column's parity into its neighbours
        c = [reduce(xor, state[x]) for x in range(5)]
        d = [_rol64(c[(x + 1) % 5], 1) ^ c[(x - 1) % 5] for x in range(5)]
        for x in range(5):
            for y in range(5):
                state[x][y] ^= d[x]
        # rho and pi
        b = [[0] * 5 for _ in range(5)]
        for x in range(5):
            for y in range(5):
                b[y][(2 * x + 3 * y) % 5] = _rol64(state[x][y], _ROTATION[y][x])
        # chi
        for x in range(5):
            for y in range(5):
                state[x][y] = b[x][y] ^ ((~b[(x + 1) % 5][y]) & b[(x + 2) % 5][y])
        # iota
        state[0][0] ^= rc


def _pad(data: bytes) -> bytes:
    """0x01, zero fill to the rate boundary, 0x80 OR-ed into the last byte. Always adds >= 1 byte."""
    padded = bytearray(data)
    padded.append(0x01)
    padded.extend(bytes(-len(padded) % RATE_BYTES))
    padded[-1] |= 0x80
    return bytes(padded)


def keccak256(data: bytes) -> bytes:
    """
    Keccak-256 hash (256-bit output, original Keccak padding).

    Args:
        data: Input bytes (any length).

    Returns:
        32-byte digest.
    """
    lanes_per_block = RATE_BYTES // _LANE_BYTES  # 17
    state = [[0] * 5 for _ in range(5)]
    padded = _pad(bytes(data))
    for block_start in range(0, len(padded), RATE_BYTES):
        for i in range(lanes_per_block):
            off = block_start + i * _LANE_BYTES
            state[i % 5][i // 5] ^= int.from_bytes(
                padded[off : off + _LANE_BYTES], "little"
            )
        _keccak_f(state)
    out = bytearray()
    for y in range(5):
        for x in range(5):
            out.extend(state[x][y].to_bytes(_LANE_BYTES, "little"))
            if len(out) >= DIGEST_SIZE:
                return bytes(out[:DIGEST_SIZE])
    return bytes(out[:DIGEST_SIZE])


def keccak256_hex(data: bytes) -> str:
    """Keccak-256 digest as lowercase hex."""
    return keccak256(data).hex()


def hash_ethereum_message(message: str | bytes) -> bytes:
    """
    EIP-191 personal-message hash, as signed by wallets via ``personal_sign``.

    keccak256(b"\\x19Ethereum Signed Message:\\n" + len(message) + message), where
    the length is the decimal UTF-8 byte count, not the character count.

    Args:
        message: Message text (UTF-8 encoded) or raw bytes.

    Returns:
        32-byte digest.

    Raises:
        MalformedInputError: text that cannot be encoded as UTF-8 (lone surrogates).
    """
    if isinstance(message, str):
        try:
            message = message.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise MalformedInputError("message is not valid UTF-8") from exc
    prefix = ETHEREUM_MESSAGE_PREFIX + str(len(message)).encode("ascii")
    return keccak256(prefix + message)


__all__: tuple[str, ...] = (
    "DIGEST_SIZE",
    "ETHEREUM_MESSAGE_PREFIX",
    "RATE_BYTES",
    "hash_ethereum_message",
    "keccak256",
    "keccak256_hex",
)
