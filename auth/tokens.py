"""
auth/tokens.py -- JWT issuance/verification and the session cookie.

Security design decisions:
  JWT: python-jose with HS256. Tokens are signed with SECRET_KEY and carry
       sub (user id), email, iat and exp. Nothing in a token is trusted until
       the signature has been checked; only HS256 is accepted on decode so an
       "alg": "none" token can never pass.

  Failures are classified so the session dependency can tell the client
       *why* it was rejected:
         MALFORMED          -- not a JWT, or required claims missing
         SIGNATURE_INVALID  -- signed with another key or algorithm
         EXPIRED            -- valid signature, past exp

  Sessions are stateless: there is no server-side token list. A token stays
       valid until exp even after logout clears the cookie.

  Cookie: httpOnly (no JS access), samesite=strict (not sent on any
       cross-site request), secure in production, max_age from
       Settings.cookie_expire_days.

Layer rule: no imports from api/. Import from core/ is allowed.
"""

from __future__ import annotations

import enum
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

from jose import ExpiredSignatureError, JWTError, jwt

from core.config import Settings, get_settings

if TYPE_CHECKING:
    from auth.models import User

_ALGORITHM = "HS256"
_REQUIRED_CLAIMS = ("sub", "email", "exp")


class TokenFailure(str, enum.Enum):
    MALFORMED = "malformed"
    SIGNATURE_INVALID = "signature_invalid"
    EXPIRED = "expired"


class TokenError(Exception):
    """Raised by verify_token(); reason says which check failed."""

    def __init__(self, reason: TokenFailure) -> None:
        super().__init__(reason.value)
        self.reason = reason


# ---------------------------------------------------------------------------
# Issue / verify -- pure functions, secret passed explicitly
# ---------------------------------------------------------------------------


def issue_token(claims: dict, secret: str, ttl: timedelta) -> str:
    """Sign claims plus iat and exp (= iat + ttl) into a compact JWT."""
    issued_at = datetime.now(timezone.utc)
    payload = dict(claims)
    payload["iat"] = issued_at
    payload["exp"] = issued_at + ttl
    return jwt.encode(payload, secret, algorithm=_ALGORITHM)


def verify_token(token: str, secret: str) -> dict:
    """Verify signature and expiry; return the claims dict.

    Raises TokenError with the failure reason. The header is parsed before the
    signature check so garbage input is reported as MALFORMED rather than as a
    signature mismatch.
    """
    try:
        jwt.get_unverified_header(token)
    except JWTError as exc:
        raise TokenError(TokenFailure.MALFORMED) from exc

    try:
        claims = jwt.decode(token, secret, algorithms=[_ALGORITHM])
    except ExpiredSignatureError as exc:
        raise TokenError(TokenFailure.EXPIRED) from exc
    except JWTError as exc:
        raise TokenError(TokenFailure.SIGNATURE_INVALID) from exc

    if any(not claims.get(name) for name in _REQUIRED_CLAIMS):
        raise TokenError(TokenFailure.MALFORMED)
    return claims


# ---------------------------------------------------------------------------
# Settings-bound helpers
# ---------------------------------------------------------------------------


def create_access_token(user: User, settings: Settings | None = None) -> str:
    """Issue a session token for user with the configured secret and TTL."""
    settings = settings or get_settings()
    return issue_token(
        {"sub": user.id, "email": user.email},
        settings.secret_key,
        timedelta(seconds=settings.token_expire_seconds),
    )


def decode_access_token(token: str, settings: Settings | None = None) -> dict:
    """verify_token() with the configured secret. Raises TokenError."""
    settings = settings or get_settings()
    return verify_token(token, settings.secret_key)


# ---------------------------------------------------------------------------
# Cookie helpers
# ---------------------------------------------------------------------------


def set_session_cookie(response, token: str, settings: Settings | None = None) -> None:
    """Write the session token as an httpOnly cookie on the response."""
    settings = settings or get_settings()
    response.set_cookie(
        settings.cookie_name,
        value=token,
        max_age=settings.cookie_max_age,
        httponly=True,
        secure=settings.secure_cookies,
        samesite="strict",
    )


def clear_session_cookie(response, settings: Settings | None = None) -> None:
    """Overwrite the session cookie with an empty value that expires immediately."""
    settings = settings or get_settings()
    response.set_cookie(
        settings.cookie_name,
        value="",
        max_age=0,
        expires=0,
        httponly=True,
        secure=settings.secure_cookies,
        samesite="strict",
    )
