"""
Settings from the environment, optionally seeded from a .env file (python-dotenv).

    SIWECRYPTO_SERVER_SECRET       HMAC key for nonce hashes (required)
    SIWECRYPTO_EXPECTED_DOMAIN     domain SIWE messages must name (optional)
    SIWECRYPTO_NONCE_TTL_SECONDS   nonce lifetime, default 300
    SIWECRYPTO_LOG_LEVEL           default INFO
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional, Union

from dotenv import load_dotenv

from .auth.nonce import DEFAULT_NONCE_TTL_SECONDS
from .errors import ConfigError

logger = logging.getLogger(__name__)

ENV_PREFIX = "SIWECRYPTO_"


@dataclass(frozen=True)
class Settings:
    server_secret: str
    expected_domain: Optional[str] = None
    nonce_ttl_seconds: int = DEFAULT_NONCE_TTL_SECONDS
    log_level: str = "INFO"

    def __repr__(self) -> str:
        return (
            f"Settings(server_secret='***', expected_domain={self.expected_domain!r}, "
            f"nonce_ttl_seconds={self.nonce_ttl_seconds}, log_level={self.log_level!r})"
        )


def _env(name: str) -> Optional[str]:
    value = os.getenv(ENV_PREFIX + name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def load_settings(env_file: Union[str, os.PathLike, None] = None) -> Settings:
    """
    Build Settings from the process environment.

    Args:
        env_file: Path to a .env file. Values already in the environment win.

    Raises:
        ConfigError: the server secret is missing.
    """
    if env_file is not None:
        load_dotenv(env_file, override=False)
    else:
        load_dotenv(override=False)

    secret = _env("SERVER_SECRET")
    if not secret:
        raise ConfigError(f"{ENV_PREFIX}SERVER_SECRET is not configured")

    ttl = DEFAULT_NONCE_TTL_SECONDS
    raw_ttl = _env("NONCE_TTL_SECONDS")
    if raw_ttl is not None:
        try:
            ttl = int(raw_ttl)
            if ttl <= 0:
                raise ValueError(raw_ttl)
        except ValueError:
            logger.warning(
                "Invalid %sNONCE_TTL_SECONDS %r, defaulting to %d",
                ENV_PREFIX,
                raw_ttl,
                DEFAULT_NONCE_TTL_SECONDS,
            )
            ttl = DEFAULT_NONCE_TTL_SECONDS

    return Settings(
        server_secret=secret,
        expected_domain=_env("EXPECTED_DOMAIN"),
        nonce_ttl_seconds=ttl,
        log_level=(_env("LOG_LEVEL") or "INFO").upper(),
    )


__all__: tuple[str, ...] = ("ENV_PREFIX", "Settings", "load_settings")
