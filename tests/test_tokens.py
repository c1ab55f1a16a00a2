"""Unit tests for auth/tokens.py -- JWT issue/verify and failure classification.

Covers:
  - round trip carries sub, email, iat, exp
  - exp - iat equals the requested TTL
  - wrong key -> SIGNATURE_INVALID
  - past exp -> EXPIRED
  - garbage / missing claims -> MALFORMED
  - "alg": "none" tokens are never accepted
"""

from __future__ import annotations

import base64
import json
from datetime import timedelta

import pytest
from jose import jwt

from auth.models import User
from auth.tokens import (
    TokenError,
    TokenFailure,
    create_access_token,
    decode_access_token,
    issue_token,
    verify_token,
)
from core.config import get_settings

SECRET = "k" * 32
OTHER_SECRET = "z" * 32


def _reason(token: str, secret: str = SECRET) -> TokenFailure:
    with pytest.raises(TokenError) as exc_info:
        verify_token(token, secret)
    return exc_info.value.reason


def test_issue_and_verify_round_trip():
    token = issue_token({"sub": "user-1", "email": "a@example.com"}, SECRET, timedelta(minutes=5))
    claims = verify_token(token, SECRET)
    assert claims["sub"] == "user-1"
    assert claims["email"] == "a@example.com"
    assert claims["exp"] - claims["iat"] == 300


def test_wrong_secret_is_signature_invalid():
    token = issue_token({"sub": "user-1", "email": "a@example.com"}, SECRET, timedelta(minutes=5))
    assert _reason(token, OTHER_SECRET) is TokenFailure.SIGNATURE_INVALID


def test_tampered_payload_is_signature_invalid():
    token = issue_token({"sub": "user-1", "email": "a@example.com"}, SECRET, timedelta(minutes=5))
    header, payload, signature = token.split(".")
    claims = json.loads(base64.urlsafe_b64decode(payload + "=" * (-len(payload) % 4)))
    claims["sub"] = "user-2"
    forged = base64.urlsafe_b64encode(json.dumps(claims).encode()).decode().rstrip("=")
    assert _reason(f"{header}.{forged}.{signature}") is TokenFailure.SIGNATURE_INVALID


def test_expired_token_is_expired():
    token = issue_token({"sub": "user-1", "email": "a@example.com"}, SECRET, timedelta(seconds=-30))
    assert _reason(token) is TokenFailure.EXPIRED


def test_garbage_is_malformed():
    assert _reason("not-a-token") is TokenFailure.MALFORMED
    assert _reason("") is TokenFailure.MALFORMED


def test_missing_email_claim_is_malformed():
    token = issue_token({"sub": "user-1"}, SECRET, timedelta(minutes=5))
    assert _reason(token) is TokenFailure.MALFORMED


def test_unsigned_token_is_rejected():
    header = base64.urlsafe_b64encode(b'{"alg":"none","typ":"JWT"}').decode().rstrip("=")
    payload = base64.urlsafe_b64encode(b'{"sub":"user-1","email":"a@example.com","exp":9999999999}').decode()
    token = f"{header}.{payload.rstrip('=')}."
    assert _reason(token) in (TokenFailure.SIGNATURE_INVALID, TokenFailure.MALFORMED)


def test_other_algorithm_is_rejected():
    token = jwt.encode({"sub": "user-1", "email": "a@example.com"}, SECRET, algorithm="HS512")
    assert _reason(token) is TokenFailure.SIGNATURE_INVALID


def test_create_access_token_uses_configured_ttl():
    settings = get_settings()
    user = User(id="abc", name="Alice", email="alice@example.com", password_hash="x")
    claims = decode_access_token(create_access_token(user, settings), settings)
    assert claims["sub"] == "abc"
    assert claims["email"] == "alice@example.com"
    assert claims["exp"] - claims["iat"] == settings.token_expire_seconds
