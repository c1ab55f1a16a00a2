"""
auth/dependencies.py -- FastAPI Depends() helpers that resolve a session.

Each request moves through NoToken -> TokenPresent -> {Verified, Rejected}:

  1. extract_token() looks for the token in priority order:
       a. the session cookie ("token") -- set by register/login
       b. Authorization: Bearer <token> -- for clients that keep the token
          from the response body
     The cookie wins when both are present.
  2. The token is verified (signature, then expiry).
  3. The subject id is resolved to a stored user.

On success the Identity is attached to request.state.identity and returned.

get_current_identity() rejects with AuthenticationError (401) at the first
failing step. try_get_current_identity() is the soft variant used by routes
that only personalize output: it returns None instead of rejecting.

Layer rule: may import fastapi (Request) because this module is part of the
FastAPI dependency injection system. No imports from api/.
"""

from __future__ import annotations

import logging

from fastapi import Request
from sqlalchemy.exc import SQLAlchemyError

from auth.errors import AuthenticationError
from auth.models import Identity
from auth.store import UserStore
from auth.tokens import TokenError, TokenFailure, decode_access_token
from core.config import Settings, get_settings

logger = logging.getLogger("securesphere.auth")

NOT_AUTHORIZED = "Not authorized to access this route. Please login."
INVALID_TOKEN = "Invalid token. Please login again."
TOKEN_EXPIRED = "Token expired. Please login again."
TOKEN_USER_NOT_FOUND = "User not found. Token invalid."


def _settings_for(request: Request) -> Settings:
    return getattr(request.app.state, "settings", None) or get_settings()


def extract_token(request: Request, cookie_name: str = "token") -> str | None:
    """Return the raw session token from the cookie or the Bearer header, or None."""
    token = request.cookies.get(cookie_name)
    if token:
        return token

    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header[7:].strip() or None
    return None


def resolve_identity(request: Request) -> Identity:
    """Run the full extract -> verify -> resolve chain. Raises AuthenticationError."""
    settings = _settings_for(request)
    token = extract_token(request, settings.cookie_name)
    if token is None:
        raise AuthenticationError(NOT_AUTHORIZED)

    try:
        claims = decode_access_token(token, settings)
    except TokenError as exc:
        logger.info("Rejected session token (%s) on %s", exc.reason.value, request.url.path)
        if exc.reason is TokenFailure.EXPIRED:
            raise AuthenticationError(TOKEN_EXPIRED) from exc
        raise AuthenticationError(INVALID_TOKEN) from exc

    user_store: UserStore = request.app.state.user_store
    user = user_store.get_by_id(claims["sub"])
    if user is None:
        raise AuthenticationError(TOKEN_USER_NOT_FOUND)

    identity = Identity.from_user(user)
    request.state.identity = identity
    return identity


def get_current_identity(request: Request) -> Identity:
    """Require a valid session. Raises AuthenticationError (401) otherwise.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(identity: Identity = Depends(get_current_identity)): ...
    """
    return resolve_identity(request)


def try_get_current_identity(request: Request) -> Identity | None:
    """Optional auth: the resolved Identity, or None on any failure.

    A store fault during the user lookup is logged and treated as no session,
    so the request continues anonymously.
    """
    try:
        return resolve_identity(request)
    except AuthenticationError:
        request.state.identity = None
        return None
    except SQLAlchemyError:
        logger.warning("Store error while resolving optional session on %s", request.url.path, exc_info=True)
        request.state.identity = None
        return None
