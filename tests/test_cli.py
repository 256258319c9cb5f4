"""Command-line entry point."""

import os
from datetime import datetime, timezone

import pytest

from siwecrypto import build_siwe_message, privkey_to_address
from siwecrypto.cli import build_parser, main

PRIV_HEX = "4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
ADDRESS = privkey_to_address(bytes.fromhex(PRIV_HEX))


@pytest.fixture(autouse=True)
def isolated_environ(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(os, "environ", dict(os.environ))
    for name in list(os.environ):
        if name.startswith("SIWECRYPTO_"):
            monkeypatch.delenv(name)


@pytest.fixture
def env_file(tmp_path) -> str:
    path = tmp_path / ".env"
    path.write_text("SIWECRYPTO_SERVER_SECRET=cli-secret\n")
    return str(path)


def test_parser_requires_command() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_selftest(capsys) -> None:
    assert main(["--log-level", "WARNING", "selftest"]) == 0
    out = capsys.readouterr().out
    assert out.count("PASS") == 6


def test_nonce_requires_secret(tmp_path) -> None:
    empty = tmp_path / "empty.env"
    empty.write_text("")
    assert main(["--log-level", "ERROR", "--env-file", str(empty), "nonce", ADDRESS]) == 2


def test_nonce(env_file: str, capsys) -> None:
    assert main(["--env-file", env_file, "nonce", ADDRESS]) == 0
    out = capsys.readouterr().out
    assert "nonce:" in out
    assert "nonce_hash:" in out
    assert "expires_at:" in out


def test_sign_then_verify(env_file: str, tmp_path, capsys) -> None:
    assert main(["--env-file", env_file, "nonce", ADDRESS]) == 0
    lines = dict(
        line.split(":", 1) for line in capsys.readouterr().out.strip().splitlines()
    )
    nonce, nonce_hash = lines["nonce"].strip(), lines["nonce_hash"].strip()

    message = build_siwe_message(
        domain="example.com",
        address=ADDRESS,
        uri="https://example.com/login",
        nonce=nonce,
        issued_at=datetime.now(timezone.utc),
    )
    message_file = tmp_path / "message.txt"
    message_file.write_bytes(message.to_text().encode("utf-8"))

    assert main(["sign", "--key", PRIV_HEX, "--message-file", str(message_file)]) == 0
    signature = capsys.readouterr().out.strip()
    assert signature.startswith("0x") and len(signature) == 132

    args = [
        "--env-file", env_file, "verify",
        "--message-file", str(message_file),
        "--signature", signature,
        "--address", ADDRESS,
        "--nonce-hash", nonce_hash,
    ]
    assert main(args) == 0
    assert capsys.readouterr().out.strip() == f"OK {ADDRESS}"

    args[-1] = "00" * 32
    assert main(args) == 1
    assert "FAILED [NonceMismatch]" in capsys.readouterr().out


@pytest.mark.parametrize("key", ["not-hex", "0x" + "11" * 31, "00" * 32])
def test_sign_rejects_bad_key(tmp_path, capsys, key: str) -> None:
    message_file = tmp_path / "message.txt"
    message_file.write_bytes(b"hello")
    args = ["--log-level", "ERROR", "sign", "--key", key, "--message-file", str(message_file)]
    assert main(args) == 2
    assert capsys.readouterr().out == ""
