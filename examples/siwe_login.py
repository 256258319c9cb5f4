#!/usr/bin/env python3
"""Example: a full Sign-In With Ethereum round trip (server nonce, wallet signature, verification)."""

from datetime import datetime, timedelta, timezone

from siwecrypto import (AuthenticationService, build_siwe_message,
                        privkey_to_address, sign_message)

# server side: issue a nonce, keep only its hash
service = AuthenticationService("example-server-secret", expected_domain="example.com")
service.self_test()

privkey = bytes(31) + bytes([1])
address = privkey_to_address(privkey)
nonce, record = service.issue_nonce(address)
print("Nonce for wallet:", nonce)
print("Stored nonce hash:", record.nonce_hash[:32] + "...")

# wallet side: build and sign the EIP-4361 message
now = datetime.now(timezone.utc)
message = build_siwe_message(
    domain="example.com",
    address=address,
    uri="https://example.com/login",
    nonce=nonce,
    statement="Sign in to Example",
    issued_at=now,
    expiration_time=now + timedelta(minutes=5),
)
text = message.to_text()
signature = sign_message(privkey, text)
print(text)
print("Signature:", "0x" + signature.hex())

# server side: verify
result = service.authenticate_with_record(text, signature, address, record)
print("Authenticated:", result.success, result.recovered_address)

# same signature, someone else's claim
result = service.authenticate_with_record(
    text, signature, "0x" + "11" * 20, record
)
print("Forged claim:", result.success, result.error_code)
