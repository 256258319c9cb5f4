"""
Error taxonomy. Every rejection is a distinct exception type; ``code`` names its category.
"""

from __future__ import annotations


class SiweCryptoError(ValueError):
    """Base class for all siwecrypto failures."""

    code: str = "Error"


class MalformedInputError(SiweCryptoError):
    """Signature is not 65 bytes of valid hex, or v is not 0/1/27/28."""

    code = "MalformedInput"


class OutOfRangeError(SiweCryptoError):
    """r or s outside the open range (0, n)."""

    code = "OutOfRange"


class MalleableSignatureError(SiweCryptoError):
    """s > n/2 (EIP-2 high-s signature)."""

    code = "Malleable"


class InvalidRecoveryError(SiweCryptoError):
    """Public key recovery produced no usable point."""

    code = "InvalidRecovery"


class NotQuadraticResidueError(InvalidRecoveryError):
    """No square root exists modulo p."""


class AddressMismatchError(SiweCryptoError):
    code = "AddressMismatch"


class SiweParseError(SiweCryptoError):
    """EIP-4361 text is missing a field or has an invalid line."""

    code = "ParseError"

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class NonCanonicalMessageError(SiweParseError):
    """Signed text differs from the canonical reconstruction of the parsed message."""


class SiweValidationError(SiweCryptoError):
    """Parsed message violates a domain, chain, version or time constraint."""

    code = "ValidationError"

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class UnsupportedVersionError(SiweValidationError):
    def __init__(self, version: str) -> None:
        super().__init__(f"unsupported version {version!r}", field="version")
        self.version = version


class NonceMismatchError(SiweCryptoError):
    code = "NonceMismatch"


class NonceExpiredError(NonceMismatchError):
    pass


class ConfigError(SiweCryptoError):
    code = "ConfigError"


class SelfTestError(SiweCryptoError):
    """A primitive returned a wrong answer for a fixed vector. Fatal at startup."""

    code = "SelfTest"


__all__: tuple[str, ...] = (
    "AddressMismatchError",
    "ConfigError",
    "InvalidRecoveryError",
    "MalformedInputError",
    "MalleableSignatureError",
    "NonCanonicalMessageError",
    "NonceExpiredError",
    "NonceMismatchError",
    "NotQuadraticResidueError",
    "OutOfRangeError",
    "SelfTestError",
    "SiweCryptoError",
    "SiweParseError",
    "SiweValidationError",
    "UnsupportedVersionError",
)
