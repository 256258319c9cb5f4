"""
EIP-4361 (Sign-In With Ethereum) messages: parse, canonical reconstruction, validation.

Message layout::

    ${domain} wants you to sign in with your Ethereum account:
    ${address}

    ${statement}

    URI: ${uri}
    Version: ${version}
    Chain ID: ${chain-id}
    Nonce: ${nonce}
    Issued At: ${issued-at}
    Expiration Time: ${expiration-time}     (optional)
    Not Before: ${not-before}               (optional)
    Request ID: ${request-id}               (optional)
    Resources:                              (optional)
    - ${resources[0]}
    - ${resources[1]}

Parsing is line oriented so that a multi-line statement and the trailing
resource list are isolated without a single catch-all regex.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Sequence, Tuple

from ..errors import SiweParseError, SiweValidationError, UnsupportedVersionError

HEADER_SUFFIX = " wants you to sign in with your Ethereum account:"
SUPPORTED_VERSION = "1"

_HEADER_RE = re.compile(r"^(.+) wants you to sign in with your Ethereum account:$")
_ADDRESS_RE = re.compile(r"0x[0-9a-fA-F]{40}")
_CHAIN_ID_RE = re.compile(r"[0-9]+")

# (label in text, attribute name, field name used in errors)
_REQUIRED_FIELDS = (
    ("URI", "uri", "uri"),
    ("Version", "version", "version"),
    ("Chain ID", "chain_id", "chainId"),
    ("Nonce", "nonce", "nonce"),
    ("Issued At", "issued_at", "issuedAt"),
)
_OPTIONAL_FIELDS = (
    ("Expiration Time", "expiration_time"),
    ("Not Before", "not_before"),
    ("Request ID", "request_id"),
)


@dataclass(frozen=True)
class SiweMessage:
    domain: str
    address: str
    uri: str
    version: str
    chain_id: str
    nonce: str
    issued_at: str
    statement: Optional[str] = None
    expiration_time: Optional[str] = None
    not_before: Optional[str] = None
    request_id: Optional[str] = None
    resources: Tuple[str, ...] = ()

    def to_text(self) -> str:
        return reconstruct_siwe_message(self)


def _strip_blank_edges(lines: list[str]) -> list[str]:
    start, end = 0, len(lines)
    while start < end and lines[start].strip() == "":
        start += 1
    while end > start and lines[end - 1].strip() == "":
        end -= 1
    return lines[start:end]


def parse_siwe_message(text: str) -> SiweMessage:
    """
    Parse EIP-4361 text into a SiweMessage.

    Args:
        text: Raw message; ``\\r\\n`` line endings are accepted.

    Returns:
        Parsed message. Empty optional values are treated as absent.

    Raises:
        SiweParseError: bad header/address line or a missing required field
            (``field`` names it).
    """
    lines = text.replace("\r\n", "\n").split("\n")

    header = _HEADER_RE.match(lines[0])
    if header is None:
        raise SiweParseError("invalid header line", field="domain")
    domain = header.group(1)

    if len(lines) < 2:
        raise SiweParseError("missing address line", field="address")
    address = lines[1].strip()
    if not _ADDRESS_RE.fullmatch(address):
        raise SiweParseError("invalid address format", field="address")

    field_start = next(
        (i for i in range(2, len(lines)) if lines[i].startswith("URI: ")), None
    )
    if field_start is None:
        raise SiweParseError("missing URI", field="uri")

    statement_lines = _strip_blank_edges(lines[2:field_start])
    statement = "\n".join(statement_lines) if statement_lines else None

    fields: dict[str, str] = {}
    resources: list[str] = []
    in_resources = False
    for line in lines[field_start:]:
        if in_resources:
            if line.startswith("- "):
                resources.append(line[2:])
            continue
        if line == "Resources:":
            in_resources = True
            continue
        key, sep, value = line.partition(": ")
        if sep and key:
            fields[key] = value

    required = {}
    for label, attr, name in _REQUIRED_FIELDS:
        value = fields.get(label)
        if not value:
            raise SiweParseError(f"missing {label}", field=name)
        required[attr] = value
    optional = {attr: fields.get(label) or None for label, attr in _OPTIONAL_FIELDS}

    return SiweMessage(
        domain=domain,
        address=address,
        statement=statement,
        resources=tuple(resources),
        **required,
        **optional,
    )


def reconstruct_siwe_message(message: SiweMessage) -> str:
    """
    Rebuild the canonical EIP-4361 text for a parsed message.

    Signatures are checked against this form, not against whatever bytes the
    client sent, so stray whitespace or line endings cannot change meaning.
    """
    parts = [f"{message.domain}{HEADER_SUFFIX}\n{message.address}"]
    if message.statement:
        parts.append(f"\n\n{message.statement}")
    parts.append(f"\n\nURI: {message.uri}")
    parts.append(f"\nVersion: {message.version}")
    parts.append(f"\nChain ID: {message.chain_id}")
    parts.append(f"\nNonce: {message.nonce}")
    parts.append(f"\nIssued At: {message.issued_at}")
    if message.expiration_time:
        parts.append(f"\nExpiration Time: {message.expiration_time}")
    if message.not_before:
        parts.append(f"\nNot Before: {message.not_before}")
    if message.request_id:
        parts.append(f"\nRequest ID: {message.request_id}")
    if message.resources:
        parts.append("\nResources:")
        parts.extend(f"\n- {resource}" for resource in message.resources)
    return "".join(parts)


def parse_timestamp(value: str) -> datetime:
    """
    Parse an RFC 3339 timestamp ("Z" suffix allowed) into an aware datetime.

    Naive timestamps are read as UTC.

    Raises:
        ValueError: not a valid timestamp.
    """
    text = value.strip()
    if text[-1:] in ("Z", "z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(moment: datetime) -> str:
    """UTC ISO 8601 with millisecond precision and a Z suffix, as wallets emit it."""
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def validate_siwe_message(
    message: SiweMessage,
    expected_domain: Optional[str] = None,
    now: Optional[datetime] = None,
) -> None:
    """
    Check domain, chain id, version and the validity window.

    Args:
        message: Parsed message.
        expected_domain: If given, the message domain must equal it exactly.
        now: Reference time (defaults to current UTC time).

    Raises:
        UnsupportedVersionError: version is not "1".
        SiweValidationError: any other constraint fails (``field`` names it).
    """
    if not message.domain:
        raise SiweValidationError("empty domain", field="domain")
    if expected_domain and message.domain != expected_domain:
        raise SiweValidationError(
            f"domain mismatch: expected {expected_domain}, got {message.domain}",
            field="domain",
        )
    if not _CHAIN_ID_RE.fullmatch(message.chain_id):
        raise SiweValidationError(
            f"invalid chainId {message.chain_id!r}", field="chainId"
        )
    if message.version != SUPPORTED_VERSION:
        raise UnsupportedVersionError(message.version)

    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    if message.expiration_time:
        try:
            expiry = parse_timestamp(message.expiration_time)
        except ValueError as exc:
            raise SiweValidationError(
                "invalid expirationTime format", field="expirationTime"
            ) from exc
        if expiry < now:
            raise SiweValidationError("message expired", field="expirationTime")

    if message.not_before:
        try:
            not_before = parse_timestamp(message.not_before)
        except ValueError as exc:
            raise SiweValidationError(
                "invalid notBefore format", field="notBefore"
            ) from exc
        if not_before > now:
            raise SiweValidationError("message not yet valid", field="notBefore")


def build_siwe_message(
    domain: str,
    address: str,
    uri: str,
    nonce: str,
    chain_id: str | int = "1",
    statement: Optional[str] = None,
    issued_at: Optional[datetime] = None,
    expiration_time: Optional[datetime] = None,
    not_before: Optional[datetime] = None,
    request_id: Optional[str] = None,
    resources: Sequence[str] = (),
) -> SiweMessage:
    """Assemble a version-1 message; issued_at defaults to now (UTC)."""
    return SiweMessage(
        domain=domain,
        address=address,
        statement=statement,
        uri=uri,
        version=SUPPORTED_VERSION,
        chain_id=str(chain_id),
        nonce=nonce,
        issued_at=format_timestamp(issued_at or datetime.now(timezone.utc)),
        expiration_time=format_timestamp(expiration_time) if expiration_time else None,
        not_before=format_timestamp(not_before) if not_before else None,
        request_id=request_id,
        resources=tuple(resources),
    )


__all__: tuple[str, ...] = (
    "SiweMessage",
    "build_siwe_message",
    "format_timestamp",
    "parse_siwe_message",
    "parse_timestamp",
    "reconstruct_siwe_message",
    "validate_siwe_message",
)
