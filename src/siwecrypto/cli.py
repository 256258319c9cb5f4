"""
Command-line entry point: self-test, nonce issuance, dev signing, SIWE verification.

    siwecrypto selftest
    siwecrypto nonce 0xADDRESS
    siwecrypto sign --key HEX --message-file msg.txt
    siwecrypto verify --message-file msg.txt --signature 0x... --address 0x... --nonce-hash HEX
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .__about__ import __version__
from .auth import AuthenticationService, run_self_test
from .config import load_settings
from .errors import ConfigError, SelfTestError
from .signing import sign_message

logger = logging.getLogger("siwecrypto")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="siwecrypto",
        description="Sign-In With Ethereum verification with first-principles crypto",
    )
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: SIWECRYPTO_LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--env-file",
        type=str,
        default=None,
        help="Path to a .env file with SIWECRYPTO_* settings",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("selftest", help="Run the crypto self-test and exit")

    nonce = sub.add_parser("nonce", help="Issue a nonce and its stored hash")
    nonce.add_argument("address", help="Wallet address (0x + 40 hex)")

    sign = sub.add_parser("sign", help="Sign a message file (development only)")
    sign.add_argument("--key", required=True, help="Hex-encoded 32-byte private key")
    sign.add_argument("--message-file", required=True, help="File with the message text")

    verify = sub.add_parser("verify", help="Verify a SIWE sign-in attempt")
    verify.add_argument("--message-file", required=True, help="File with the signed text")
    verify.add_argument("--signature", required=True, help="65-byte hex signature")
    verify.add_argument("--address", required=True, help="Claimed wallet address")
    verify.add_argument("--nonce-hash", required=True, help="Stored nonce hash (hex)")
    return parser


def _read_message(path: str) -> str:
    # newline="" keeps \r\n intact: the signature covers the exact bytes
    with open(Path(path), encoding="utf-8", newline="") as f:
        return f.read()


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    level = args.log_level
    if level is None:
        try:
            level = load_settings(args.env_file).log_level
        except ConfigError:
            level = "INFO"
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        run_self_test(verbose=args.command == "selftest")
    except SelfTestError as exc:
        logger.critical("Refusing to continue: %s", exc)
        return 1

    if args.command == "selftest":
        return 0

    if args.command == "sign":
        try:
            key = bytes.fromhex(args.key.removeprefix("0x"))
            signature = sign_message(key, _read_message(args.message_file))
        except ValueError as exc:
            logger.error("Cannot sign: %s", exc)
            return 2
        print("0x" + signature.hex())
        return 0

    try:
        settings = load_settings(args.env_file)
    except ConfigError as exc:
        logger.error("%s", exc)
        return 2

    service = AuthenticationService.from_settings(settings)

    if args.command == "nonce":
        nonce, record = service.issue_nonce(
            args.address, ttl_seconds=settings.nonce_ttl_seconds
        )
        print(f"nonce:      {nonce}")
        print(f"nonce_hash: {record.nonce_hash}")
        print(f"expires_at: {record.expires_at.isoformat()}")
        return 0

    result = service.authenticate_siwe(
        _read_message(args.message_file),
        args.signature,
        args.address,
        args.nonce_hash,
    )
    if result.success:
        print(f"OK {result.recovered_address}")
        return 0
    print(f"FAILED [{result.error_code}] {result.error}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
