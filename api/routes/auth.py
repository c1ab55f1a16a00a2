"""
api/routes/auth.py -- Authentication REST endpoints.

Routes:
  POST /api/auth/register  -- create account; sets session cookie; 201
  POST /api/auth/login     -- password login; sets session cookie
  GET  /api/auth/profile   -- public profile of the current user (requires auth)
  POST /api/auth/logout    -- clears the session cookie (requires auth)
  GET  /api/auth/verify    -- echo the resolved identity (requires auth)
  GET  /api/auth/status    -- identity if signed in, null otherwise (optional auth)

Every route that hashes a password or reads the store is a plain `def`, so
FastAPI runs it in the worker thread pool instead of blocking the event loop.

Failures are raised as auth.errors exceptions; api/main.py turns them into the
ErrorResponse envelope.

Security:
  [C1] Login goes through AuthService.login(), which equalizes bcrypt work for
       unknown emails. Do NOT inline get_by_email() + verify_password().
  [M5] Cache-Control: no-store on every response that carries a token.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.models import (
    AuthResponse,
    IdentityModel,
    LoginRequest,
    MessageResponse,
    ProfileResponse,
    PublicProfile,
    RegisterRequest,
    SessionStatusResponse,
    VerifyResponse,
)
from auth.dependencies import get_current_identity, try_get_current_identity
from auth.models import AuthResult, Identity
from auth.service import AuthService
from auth.tokens import clear_session_cookie, set_session_cookie

# Auth policy:
# - POST /api/auth/register:  public
# - POST /api/auth/login:     public
# - GET  /api/auth/status:    public, personalized when a session resolves
# - GET  /api/auth/profile:   requires auth (get_current_identity)
# - POST /api/auth/logout:    requires auth (get_current_identity)
# - GET  /api/auth/verify:    requires auth (get_current_identity)
router = APIRouter()


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def _session_response(service: AuthService, result: AuthResult, message: str, status_code: int) -> JSONResponse:
    """Build a register/login response: token in the body and in the cookie."""
    body = AuthResponse(
        message=message,
        token=result.token,
        user=PublicProfile(**service.public_profile(result.user)),
    )
    resp = JSONResponse(status_code=status_code, content=body.model_dump())
    set_session_cookie(resp, result.token, service.settings)
    resp.headers["Cache-Control"] = "no-store"  # [M5]
    return resp


# ---------------------------------------------------------------------------
# Public endpoints
# ---------------------------------------------------------------------------


@router.post("/auth/register", response_model=AuthResponse, status_code=201)
def register(body: RegisterRequest, service: AuthService = Depends(get_auth_service)) -> JSONResponse:
    """Create an account and start a session for it."""
    result = service.register(body.name, body.email, body.password, body.confirm_password)
    return _session_response(service, result, "Registration successful", 201)


@router.post("/auth/login", response_model=AuthResponse)
def login(body: LoginRequest, service: AuthService = Depends(get_auth_service)) -> JSONResponse:
    """Authenticate with email and password; set the session cookie.

    Wrong password and unknown email return the same 401 message.
    """
    result = service.login(body.email, body.password)
    return _session_response(service, result, "Login successful", 200)


@router.get("/auth/status", response_model=SessionStatusResponse)
def session_status(identity: Identity | None = Depends(try_get_current_identity)) -> SessionStatusResponse:
    """Report whether the request carries a usable session, without ever failing."""
    if identity is None:
        return SessionStatusResponse(authenticated=False, user=None)
    return SessionStatusResponse(authenticated=True, user=IdentityModel(**identity.to_dict()))


# ---------------------------------------------------------------------------
# Authenticated endpoints
# ---------------------------------------------------------------------------


@router.get("/auth/profile", response_model=ProfileResponse)
def profile(
    identity: Identity = Depends(get_current_identity),
    service: AuthService = Depends(get_auth_service),
) -> ProfileResponse:
    """Return the public profile of the current user."""
    user = service.get_profile(identity)
    return ProfileResponse(user=PublicProfile(**service.public_profile(user)))


@router.post("/auth/logout", response_model=MessageResponse)
def logout(
    identity: Identity = Depends(get_current_identity),
    service: AuthService = Depends(get_auth_service),
) -> JSONResponse:
    """Clear the session cookie.

    The token itself is not revoked: a copy sent via the Authorization header
    keeps working until it expires.
    """
    service.logout(identity)
    resp = JSONResponse(content=MessageResponse(message="Logout successful").model_dump())
    clear_session_cookie(resp, service.settings)
    return resp


@router.get("/auth/verify", response_model=VerifyResponse)
def verify(
    identity: Identity = Depends(get_current_identity),
    service: AuthService = Depends(get_auth_service),
) -> VerifyResponse:
    """Confirm the session is still good; the client uses this to detect stale local state."""
    return VerifyResponse(user=IdentityModel(**service.verify(identity).to_dict()))
