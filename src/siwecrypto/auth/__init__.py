"""Authentication: nonce issuance and hashing, SIWE verification pipeline, startup self-test."""

from .nonce import (NonceRecord, NonceStore, generate_random_base64,
                    generate_random_bytes, generate_random_hex)
from .selftest import run_self_test
from .service import (AuthenticationResult, AuthenticationService,
                      constant_time_equal)

__all__: tuple[str, ...] = (
    "AuthenticationResult",
    "AuthenticationService",
    "NonceRecord",
    "NonceStore",
    "constant_time_equal",
    "generate_random_base64",
    "generate_random_bytes",
    "generate_random_hex",
    "run_self_test",
)
