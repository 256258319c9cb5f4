"""
Benchmark the pure-Python primitives on the SIWE login path.

SHA-256 and HMAC-SHA256 are compared against hashlib/hmac (C) for scale;
keccak256, signing, recovery and a full authenticate_siwe call are timed alone.
Also reports peak memory (tracemalloc) per run.

After pip install -e .:

  python benchmarks/primitives.py
"""

from __future__ import annotations

import hashlib
import hmac
import time
import tracemalloc
from datetime import datetime, timedelta, timezone

from siwecrypto import (AuthenticationService, build_siwe_message, hmac_sha256,
                        keccak256, privkey_to_address, recover_address, sha256,
                        sign_message)

# Sample payloads (bytes); kept small so benchmark stays fast
SAMPLES = [
    (b"", "empty"),
    (b"hello", "short"),
    (b"x" * 136, "136 B"),
    (b"x" * 1024, "1 KiB"),
]

N_TIME = 500
N_TIME_EC = 20
N_MEM = 200
PRIV = bytes.fromhex("4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318")
ADDRESS = privkey_to_address(PRIV)
KEY = b"bench-server-secret"


def _time_per_call(fn, *args, n: int = N_TIME, warmup: int = 5) -> float:
    for _ in range(warmup):
        fn(*args)
    start = time.perf_counter()
    for _ in range(n):
        fn(*args)
    return (time.perf_counter() - start) / n


def _peak_memory_kb(fn, *args, n: int = N_MEM) -> float:
    """Peak traced memory (KiB) during n calls."""
    tracemalloc.start()
    tracemalloc.reset_peak()
    for _ in range(n):
        fn(*args)
    _, peak = tracemalloc.get_traced_memory()
    tracemalloc.stop()
    return peak / 1024.0


def _sha256_c(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def _hmac_c(key: bytes, data: bytes) -> bytes:
    return hmac.new(key, data, hashlib.sha256).digest()


def _bench_hashes() -> None:
    print("  --- Hashes: time per call (ms) ---")
    print(
        f"  {'size':<8} {'sha256':<10} {'hashlib':<10} {'hmac':<10} {'hmac (C)':<10} {'keccak256':<10}"
    )
    print("  " + "-" * 62)
    for data, label in SAMPLES:
        assert sha256(data) == _sha256_c(data)
        assert hmac_sha256(KEY, data) == _hmac_c(KEY, data)
        t_sha = _time_per_call(sha256, data) * 1000
        t_sha_c = _time_per_call(_sha256_c, data) * 1000
        t_hmac = _time_per_call(hmac_sha256, KEY, data) * 1000
        t_hmac_c = _time_per_call(_hmac_c, KEY, data) * 1000
        t_keccak = _time_per_call(keccak256, data) * 1000
        print(
            f"  {label:<8} {t_sha:<10.4f} {t_sha_c:<10.4f} {t_hmac:<10.4f} {t_hmac_c:<10.4f} {t_keccak:<10.4f}"
        )
    print()


def _bench_login() -> None:
    service = AuthenticationService(KEY, expected_domain="example.com")
    now = datetime.now(timezone.utc)
    nonce, record = service.issue_nonce(ADDRESS, now=now)
    text = build_siwe_message(
        domain="example.com",
        address=ADDRESS,
        uri="https://example.com/login",
        nonce=nonce,
        issued_at=now,
        expiration_time=now + timedelta(minutes=5),
    ).to_text()
    signature = sign_message(PRIV, text)

    cases = [
        ("sign_message", sign_message, (PRIV, text)),
        ("recover_address", recover_address, (text, signature)),
        (
            "authenticate_siwe",
            service.authenticate_siwe,
            (text, signature, ADDRESS, record.nonce_hash, now),
        ),
    ]
    print("  --- Login path (n=%d) ---" % N_TIME_EC)
    print(f"  {'operation':<20} {'time (ms)':<12} {'peak (KiB)':<12}")
    print("  " + "-" * 44)
    for label, fn, args in cases:
        t = _time_per_call(fn, *args, n=N_TIME_EC, warmup=1) * 1000
        mem = _peak_memory_kb(fn, *args, n=N_TIME_EC)
        print(f"  {label:<20} {t:<12.2f} {mem:<12.2f}")
    print()


def main() -> None:
    print("Benchmark: siwecrypto pure-Python primitives")
    print()
    _bench_hashes()
    _bench_login()


if __name__ == "__main__":
    main()
