"""
Startup self-test: fixed vectors for every primitive. A failure is fatal; the
process must not serve authentication with unverified cryptography.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Tuple

from ..curves.secp256k1 import G, N, is_point_at_infinity, scalar_multiply
from ..errors import SelfTestError
from ..hashes import hmac_sha256_hex, keccak256_hex, sha256_hex
from ..signing.recovery import public_key_to_address, recover_address, sign_message

logger = logging.getLogger(__name__)

SHA256_ABC = "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
SHA256_EMPTY = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
KECCAK256_EMPTY = "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
# RFC 4231 test case 2
HMAC_SHA256_JEFE = "5bdcc146bf60754e6a042426089575c75a003f089d2739839dec58b964ec3843"
# Private key 1: public key is G itself
PRIVKEY_ONE = (1).to_bytes(32, "big")
ADDRESS_PRIVKEY_ONE = "0x7e5f4552091a69125d5dfcb7b8c2659029395bdf"
ROUND_TRIP_MESSAGE = "siwecrypto self-test"


def _expect(name: str, actual: object, expected: object) -> None:
    if actual != expected:
        raise SelfTestError(f"{name} self-test FAILED: got {actual}, expected {expected}")


def _check_sha256() -> None:
    _expect("SHA-256('abc')", sha256_hex(b"abc"), SHA256_ABC)
    _expect("SHA-256('')", sha256_hex(b""), SHA256_EMPTY)


def _check_hmac() -> None:
    actual = hmac_sha256_hex(b"Jefe", b"what do ya want for nothing?")
    _expect("HMAC-SHA256", actual, HMAC_SHA256_JEFE)


def _check_keccak() -> None:
    _expect("Keccak-256('')", keccak256_hex(b""), KECCAK256_EMPTY)


def _check_curve() -> None:
    if not is_point_at_infinity(scalar_multiply(N, G)):
        raise SelfTestError("secp256k1 self-test FAILED: n*G is not infinity")
    _expect("secp256k1 1*G", scalar_multiply(1, G), G)


def _check_address_derivation() -> None:
    _expect("address(G)", public_key_to_address(G), ADDRESS_PRIVKEY_ONE)


def _check_sign_recover() -> None:
    signature = sign_message(PRIVKEY_ONE, ROUND_TRIP_MESSAGE)
    _expect(
        "ECDSA sign/recover",
        recover_address(ROUND_TRIP_MESSAGE, signature),
        ADDRESS_PRIVKEY_ONE,
    )


CHECKS: Tuple[Tuple[str, Callable[[], None]], ...] = (
    ("SHA-256", _check_sha256),
    ("HMAC-SHA256", _check_hmac),
    ("Keccak-256", _check_keccak),
    ("secp256k1 (n*G = infinity)", _check_curve),
    ("address derivation", _check_address_derivation),
    ("ECDSA sign/recover round trip", _check_sign_recover),
)


def run_self_test(verbose: bool = False) -> List[str]:
    """
    Run every check in order.

    Args:
        verbose: Print a PASS line per check to stdout as it completes.

    Returns:
        Names of the checks that passed (all of them).

    Raises:
        SelfTestError: the first check that produced a wrong answer.
    """
    passed = []
    for name, check in CHECKS:
        try:
            check()
        except SelfTestError:
            raise
        except ValueError as exc:
            raise SelfTestError(f"{name} self-test FAILED: {exc}") from exc
        logger.debug("self-test passed: %s", name)
        if verbose:
            print(f"  PASS  {name}")
        passed.append(name)
    logger.info("crypto self-test passed (%d checks)", len(passed))
    return passed


__all__: tuple[str, ...] = ("CHECKS", "run_self_test")
