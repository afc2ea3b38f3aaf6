"""
Credential helpers: password hashing and signed access tokens.

Passwords are hashed with PBKDF2-HMAC-SHA256 using a random 16-byte
salt and a fixed iteration count; the stored form is
``"<salt hex>$<hash hex>"``.

Access tokens are compact JSON Web Tokens signed with HMAC-SHA256
(``header.payload.signature``, each part base64url encoded without
padding).  The payload carries the account id, its role, the issue
time (``iat``) and the expiry (``exp``) as UNIX timestamps.

Two ways of reading a token exist on purpose:

* :func:`verify_access_token` checks signature, structure and expiry and
  is what the authentication gate uses.
* :func:`decode_access_token` checks signature and structure but not
  expiry.  It is only meant for ``POST /auth/refresh``, which lets a
  client trade an expired (but authentic) token for a fresh one.
"""

import base64
import hashlib
import hmac
import json
import logging
import os
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .config import settings

logger = logging.getLogger(__name__)

PBKDF2_ITERATIONS = 100_000
SALT_BYTES = 16

_HEADER = {"alg": "HS256", "typ": "JWT"}


@dataclass(frozen=True)
class TokenClaims:
    """Identity carried by a verified token."""

    account_id: int
    role: str
    issued_at: int
    expires_at: int


def _b64_url_encode(data: bytes) -> str:
    """Base64-url encode bytes without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64_url_decode(data: str) -> bytes:
    """Decode base64-url encoded string, adding padding if necessary."""
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _sign(message: bytes, secret: str) -> bytes:
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).digest()


def token_lifetime_seconds() -> int:
    return settings.access_token_expire_minutes * 60


def create_access_token(
    account_id: int,
    role: str,
    expires_delta: Optional[int] = None,
    *,
    secret: Optional[str] = None,
    now: Optional[int] = None,
) -> str:
    """Issue a signed token for ``account_id``.

    Parameters
    ----------
    account_id : int
        Identifier of the authenticated account.
    role : str
        Role of the account at issue time (``admin`` or ``user``).
    expires_delta : Optional[int]
        Lifetime in seconds.  Defaults to
        ``settings.access_token_expire_minutes * 60``.
    secret, now
        Override the signing key and the clock; used by scripts and tests.
    """
    issued_at = int(time.time()) if now is None else now
    lifetime = token_lifetime_seconds() if expires_delta is None else expires_delta
    payload = {
        "sub": str(account_id),
        "userId": account_id,
        "role": role,
        "iat": issued_at,
        "exp": issued_at + lifetime,
    }
    header_b64 = _b64_url_encode(json.dumps(_HEADER, separators=(",", ":")).encode("utf-8"))
    payload_b64 = _b64_url_encode(json.dumps(payload, separators=(",", ":")).encode("utf-8"))
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    signature_b64 = _b64_url_encode(_sign(signing_input, secret or settings.secret_key))
    return f"{header_b64}.{payload_b64}.{signature_b64}"


def decode_access_token(token: str, *, secret: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """Return the payload of an authentic token, ignoring its expiry.

    Returns ``None`` if the token is malformed or its signature does not
    match.
    """
    try:
        header_b64, payload_b64, signature_b64 = token.split(".")
        signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
        expected_sig = _sign(signing_input, secret or settings.secret_key)
        actual_sig = _b64_url_decode(signature_b64)
    except (ValueError, AttributeError):
        logger.debug("Rejected token: malformed structure")
        return None
    if not hmac.compare_digest(expected_sig, actual_sig):
        logger.debug("Rejected token: signature mismatch")
        return None
    try:
        payload = json.loads(_b64_url_decode(payload_b64).decode("utf-8"))
    except ValueError:
        logger.debug("Rejected token: undecodable payload")
        return None
    if not isinstance(payload, dict) or not isinstance(payload.get("userId"), int):
        logger.debug("Rejected token: missing claims")
        return None
    return payload


def verify_access_token(
    token: str, *, secret: Optional[str] = None, now: Optional[int] = None
) -> Optional[TokenClaims]:
    """Verify signature, structure and expiry of ``token``.

    Every failure collapses to ``None``; the cause is only logged.
    """
    payload = decode_access_token(token, secret=secret)
    if payload is None:
        return None
    current = int(time.time()) if now is None else now
    try:
        expires_at = int(payload["exp"])
        issued_at = int(payload.get("iat", 0))
    except (KeyError, TypeError, ValueError):
        logger.debug("Rejected token: missing or invalid expiry")
        return None
    if expires_at <= current:
        logger.debug("Rejected token for account %s: expired", payload.get("userId"))
        return None
    return TokenClaims(
        account_id=payload["userId"],
        role=str(payload.get("role", "")),
        issued_at=issued_at,
        expires_at=expires_at,
    )


def hash_password(password: str) -> str:
    """Hash a password using PBKDF2-HMAC with SHA-256 and a random salt."""
    salt = os.urandom(SALT_BYTES)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return f"{salt.hex()}${dk.hex()}"


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Check ``plain_password`` against a stored ``salt$hash`` string.

    A missing or malformed stored hash never matches.
    """
    if not hashed_password or plain_password is None:
        return False
    try:
        salt_hex, hash_hex = hashed_password.split("$", 1)
        salt = bytes.fromhex(salt_hex)
        stored_hash = bytes.fromhex(hash_hex)
    except ValueError:
        return False
    dk = hashlib.pbkdf2_hmac("sha256", plain_password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return hmac.compare_digest(dk, stored_hash)
