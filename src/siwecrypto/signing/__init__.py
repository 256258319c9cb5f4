"""Signing schemas: EIP-191 personal-message recovery, EIP-4361 (SIWE) messages."""

from .recovery import (Signature, normalize_address, parse_signature,
                       public_key_to_address, recover_address,
                       recover_public_key, sign_message, verify_signature)
from .siwe import (SiweMessage, build_siwe_message, parse_siwe_message,
                   reconstruct_siwe_message, validate_siwe_message)

__all__: tuple[str, ...] = (
    "Signature",
    "SiweMessage",
    "build_siwe_message",
    "normalize_address",
    "parse_signature",
    "parse_siwe_message",
    "public_key_to_address",
    "reconstruct_siwe_message",
    "recover_address",
    "recover_public_key",
    "sign_message",
    "validate_siwe_message",
    "verify_signature",
)
