"""
Secure random tokens (``secrets``, OS entropy) and the nonce record handed to the identity store.
"""

from __future__ import annotations

import base64
import secrets
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Protocol

NONCE_BYTES = 32
DEFAULT_NONCE_TTL_SECONDS = 300


def generate_random_bytes(length: int) -> bytes:
    return secrets.token_bytes(length)


def generate_random_hex(byte_length: int) -> str:
    return secrets.token_hex(byte_length)


def generate_random_base64(byte_length: int) -> str:
    """URL-safe base64 without padding."""
    raw = secrets.token_bytes(byte_length)
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


@dataclass(frozen=True)
class NonceRecord:
    """What the caller persists per wallet address: the nonce HMAC, never the nonce itself."""

    nonce_hash: str
    expires_at: datetime


class NonceStore(Protocol):
    """Identity store boundary. Implemented by the caller's persistence layer."""

    def get_nonce_record(self, address: str) -> Optional[NonceRecord]:
        ...


__all__: tuple[str, ...] = (
    "DEFAULT_NONCE_TTL_SECONDS",
    "NONCE_BYTES",
    "NonceRecord",
    "NonceStore",
    "generate_random_base64",
    "generate_random_bytes",
    "generate_random_hex",
)
