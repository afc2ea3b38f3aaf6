"""Tests for bearer tokens and password hashing."""

import base64
import json

from admin_dashboard_api.app.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_access_token,
    verify_password,
)

SECRET = "unit-test-secret"
NOW = 1_700_000_000


def test_token_round_trip_claims():
    token = create_access_token(7, "admin", expires_delta=3600, secret=SECRET, now=NOW)
    claims = verify_access_token(token, secret=SECRET, now=NOW + 10)
    assert claims.account_id == 7
    assert claims.role == "admin"
    assert claims.issued_at == NOW
    assert claims.expires_at == NOW + 3600


def test_token_expires():
    token = create_access_token(7, "user", expires_delta=60, secret=SECRET, now=NOW)
    assert verify_access_token(token, secret=SECRET, now=NOW + 59) is not None
    assert verify_access_token(token, secret=SECRET, now=NOW + 60) is None


def test_decode_ignores_expiry_but_not_signature():
    token = create_access_token(3, "user", expires_delta=1, secret=SECRET, now=NOW)
    payload = decode_access_token(token, secret=SECRET)
    assert payload["userId"] == 3
    assert payload["sub"] == "3"
    assert decode_access_token(token, secret="other-secret") is None


def test_tampered_payload_is_rejected():
    token = create_access_token(2, "user", expires_delta=3600, secret=SECRET, now=NOW)
    header, payload, signature = token.split(".")
    claims = json.loads(base64.urlsafe_b64decode(payload + "=" * (-len(payload) % 4)))
    claims["role"] = "admin"
    forged = base64.urlsafe_b64encode(json.dumps(claims).encode()).rstrip(b"=").decode()
    assert verify_access_token(f"{header}.{forged}.{signature}", secret=SECRET, now=NOW) is None


def test_malformed_tokens_are_rejected():
    for token in ("", "abc", "a.b", "a.b.c.d", "!!.??.**"):
        assert verify_access_token(token, secret=SECRET, now=NOW) is None


def test_password_hashing():
    stored = hash_password("s3cret!")
    salt, digest = stored.split("$")
    assert len(salt) == 32
    assert "s3cret!" not in stored
    assert verify_password("s3cret!", stored)
    assert not verify_password("wrong", stored)
    assert hash_password("s3cret!") != stored


def test_verify_password_with_missing_or_malformed_hash():
    assert not verify_password("x", None)
    assert not verify_password("x", "")
    assert not verify_password("x", "not-a-hash")
    assert not verify_password("x", "zz$zz")
