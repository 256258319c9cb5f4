"""EIP-4361 message parsing, canonical reconstruction and validation."""

from datetime import datetime, timedelta, timezone

import pytest

from siwecrypto import (build_siwe_message, parse_siwe_message,
                        reconstruct_siwe_message, validate_siwe_message)
from siwecrypto.errors import (SiweParseError, SiweValidationError,
                               UnsupportedVersionError)
from siwecrypto.signing.siwe import format_timestamp, parse_timestamp

ADDRESS = "0x7E5F4552091A69125d5DfCb7b8C2659029395Bdf"
NOW = datetime(2024, 1, 1, 0, 1, tzinfo=timezone.utc)

FULL_MESSAGE = (
    "example.com wants you to sign in with your Ethereum account:\n"
    f"{ADDRESS}\n"
    "\n"
    "Sign in to Example\n"
    "\n"
    "URI: https://example.com/login\n"
    "Version: 1\n"
    "Chain ID: 1\n"
    "Nonce: abc123\n"
    "Issued At: 2024-01-01T00:00:00.000Z\n"
    "Expiration Time: 2024-01-01T00:05:00.000Z\n"
    "Not Before: 2024-01-01T00:00:00.000Z\n"
    "Request ID: req-1\n"
    "Resources:\n"
    "- ipfs://bafybeiemxf5abjwjbikoz4mc3a3dla6ual3jsgpdr4cjr3oz3evfyavhwq/\n"
    "- https://example.com/my-web2-claim.json"
)

MINIMAL_MESSAGE = (
    "example.com wants you to sign in with your Ethereum account:\n"
    f"{ADDRESS}\n"
    "\n"
    "URI: https://example.com\n"
    "Version: 1\n"
    "Chain ID: 1\n"
    "Nonce: abc123\n"
    "Issued At: 2024-01-01T00:00:00.000Z"
)


def test_parse_full_message() -> None:
    message = parse_siwe_message(FULL_MESSAGE)
    assert message.domain == "example.com"
    assert message.address == ADDRESS
    assert message.statement == "Sign in to Example"
    assert message.uri == "https://example.com/login"
    assert message.version == "1"
    assert message.chain_id == "1"
    assert message.nonce == "abc123"
    assert message.issued_at == "2024-01-01T00:00:00.000Z"
    assert message.expiration_time == "2024-01-01T00:05:00.000Z"
    assert message.not_before == "2024-01-01T00:00:00.000Z"
    assert message.request_id == "req-1"
    assert message.resources == (
        "ipfs://bafybeiemxf5abjwjbikoz4mc3a3dla6ual3jsgpdr4cjr3oz3evfyavhwq/",
        "https://example.com/my-web2-claim.json",
    )


def test_parse_minimal_message_has_no_optionals() -> None:
    message = parse_siwe_message(MINIMAL_MESSAGE)
    assert message.statement is None
    assert message.expiration_time is None
    assert message.not_before is None
    assert message.request_id is None
    assert message.resources == ()


def test_parse_multi_line_statement() -> None:
    text = MINIMAL_MESSAGE.replace(
        "\n\nURI:", "\n\nFirst line\nSecond line\n\nURI:", 1
    )
    assert parse_siwe_message(text).statement == "First line\nSecond line"


def test_parse_accepts_crlf_line_endings() -> None:
    message = parse_siwe_message(FULL_MESSAGE.replace("\n", "\r\n"))
    assert message == parse_siwe_message(FULL_MESSAGE)


def test_parse_empty_optional_value_is_absent() -> None:
    text = MINIMAL_MESSAGE + "\nRequest ID: "
    assert parse_siwe_message(text).request_id is None


@pytest.mark.parametrize(
    "label, field",
    [
        ("URI", "uri"),
        ("Version", "version"),
        ("Chain ID", "chainId"),
        ("Nonce", "nonce"),
        ("Issued At", "issuedAt"),
    ],
)
def test_parse_missing_required_field(label: str, field: str) -> None:
    lines = [
        line for line in MINIMAL_MESSAGE.split("\n") if not line.startswith(label + ": ")
    ]
    with pytest.raises(SiweParseError) as excinfo:
        parse_siwe_message("\n".join(lines))
    assert excinfo.value.field == field
    assert excinfo.value.code == "ParseError"


def test_parse_rejects_bad_header_and_address() -> None:
    with pytest.raises(SiweParseError) as excinfo:
        parse_siwe_message(MINIMAL_MESSAGE.replace("wants you", "asks you", 1))
    assert excinfo.value.field == "domain"

    with pytest.raises(SiweParseError) as excinfo:
        parse_siwe_message(MINIMAL_MESSAGE.replace(ADDRESS, ADDRESS[:-1], 1))
    assert excinfo.value.field == "address"

    with pytest.raises(SiweParseError) as excinfo:
        parse_siwe_message(MINIMAL_MESSAGE.replace(ADDRESS, "0x" + "g" * 40, 1))
    assert excinfo.value.field == "address"


def test_reconstruct_is_exact() -> None:
    assert reconstruct_siwe_message(parse_siwe_message(FULL_MESSAGE)) == FULL_MESSAGE
    assert reconstruct_siwe_message(parse_siwe_message(MINIMAL_MESSAGE)) == MINIMAL_MESSAGE


def test_reconstruct_is_idempotent() -> None:
    once = reconstruct_siwe_message(parse_siwe_message(FULL_MESSAGE + "\n\n"))
    assert reconstruct_siwe_message(parse_siwe_message(once)) == once
    assert once == FULL_MESSAGE


def test_validate_accepts_message_inside_window() -> None:
    validate_siwe_message(parse_siwe_message(FULL_MESSAGE), "example.com", now=NOW)


def test_validate_domain() -> None:
    message = parse_siwe_message(FULL_MESSAGE)
    with pytest.raises(SiweValidationError) as excinfo:
        validate_siwe_message(message, expected_domain="evil.com", now=NOW)
    assert excinfo.value.field == "domain"
    # no expected domain: any non-empty domain passes
    validate_siwe_message(message, now=NOW)


def test_validate_chain_id_must_be_digits() -> None:
    message = parse_siwe_message(MINIMAL_MESSAGE.replace("Chain ID: 1", "Chain ID: abc"))
    with pytest.raises(SiweValidationError) as excinfo:
        validate_siwe_message(message, now=NOW)
    assert excinfo.value.field == "chainId"
    assert "chainId" in str(excinfo.value)


def test_validate_version() -> None:
    message = parse_siwe_message(MINIMAL_MESSAGE.replace("Version: 1", "Version: 2"))
    with pytest.raises(UnsupportedVersionError) as excinfo:
        validate_siwe_message(message, now=NOW)
    assert excinfo.value.version == "2"
    assert excinfo.value.field == "version"
    assert excinfo.value.code == "ValidationError"


def test_validate_expired() -> None:
    message = parse_siwe_message(FULL_MESSAGE)
    with pytest.raises(SiweValidationError, match="expired") as excinfo:
        validate_siwe_message(message, now=NOW + timedelta(minutes=10))
    assert excinfo.value.field == "expirationTime"


def test_validate_not_yet_valid() -> None:
    message = parse_siwe_message(FULL_MESSAGE)
    with pytest.raises(SiweValidationError) as excinfo:
        validate_siwe_message(message, now=NOW - timedelta(hours=1))
    assert excinfo.value.field == "notBefore"


def test_validate_invalid_timestamp_format() -> None:
    message = parse_siwe_message(
        FULL_MESSAGE.replace("2024-01-01T00:05:00.000Z", "next tuesday")
    )
    with pytest.raises(SiweValidationError) as excinfo:
        validate_siwe_message(message, now=NOW)
    assert excinfo.value.field == "expirationTime"


def test_validate_naive_now_is_utc() -> None:
    message = parse_siwe_message(FULL_MESSAGE)
    validate_siwe_message(message, now=NOW.replace(tzinfo=None))


def test_timestamps() -> None:
    parsed = parse_timestamp("2024-01-01T00:05:00.000Z")
    assert parsed == datetime(2024, 1, 1, 0, 5, tzinfo=timezone.utc)
    assert parse_timestamp("2024-01-01T02:05:00+02:00") == parsed
    assert parse_timestamp("2024-01-01T00:05:00").tzinfo is not None
    assert format_timestamp(parsed) == "2024-01-01T00:05:00.000Z"
    with pytest.raises(ValueError):
        parse_timestamp("not a time")


def test_build_siwe_message_round_trips() -> None:
    built = build_siwe_message(
        domain="example.com",
        address=ADDRESS,
        uri="https://example.com/login",
        nonce="abc123",
        chain_id=1,
        statement="Sign in to Example",
        issued_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        expiration_time=datetime(2024, 1, 1, 0, 5, tzinfo=timezone.utc),
        resources=["https://example.com/my-web2-claim.json"],
    )
    assert built.version == "1"
    assert built.chain_id == "1"
    assert built.issued_at == "2024-01-01T00:00:00.000Z"
    text = built.to_text()
    assert parse_siwe_message(text) == built
    validate_siwe_message(built, "example.com", now=NOW)
