"""
API request and response models for the SecureSphere REST endpoints.

These Pydantic v2 models define the HTTP transport contract. They are
intentionally separate from the dataclasses in auth/models.py, which own the
internal domain representation. Route handlers map between the two.

Request models accept missing fields as empty strings: field rules live in
auth/validation.py so that every shape problem is reported through the same
per-field ValidationError envelope. The max_length caps only stop absurdly
large payloads before they reach bcrypt.

Response field names are camelCase because that is the wire format the
browser client reads.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    """Request body for POST /api/auth/register."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = Field(default="", max_length=255)
    email: str = Field(default="", max_length=255)
    password: str = Field(default="", max_length=255)
    confirm_password: str = Field(default="", alias="confirmPassword", max_length=255)


class LoginRequest(BaseModel):
    """Request body for POST /api/auth/login."""

    model_config = ConfigDict(extra="ignore")

    email: str = Field(default="", max_length=255)
    password: str = Field(default="", max_length=255)


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class PublicProfile(BaseModel):
    """The client-safe projection of a user. There is no password field."""

    id: str
    name: str
    email: str
    registeredAt: str
    lastLogin: str


class IdentityModel(BaseModel):
    id: str
    name: str
    email: str


class AuthResponse(BaseModel):
    """Response for register (201) and login (200)."""

    success: bool = True
    message: str
    token: str
    user: PublicProfile


class ProfileResponse(BaseModel):
    success: bool = True
    user: PublicProfile


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class VerifyResponse(BaseModel):
    success: bool = True
    authenticated: bool = True
    user: IdentityModel


class SessionStatusResponse(BaseModel):
    """Response for GET /api/auth/status. user is null when not signed in."""

    success: bool = True
    authenticated: bool
    user: Optional[IdentityModel] = None


class HealthResponse(BaseModel):
    """Response for GET /api/health."""

    model_config = ConfigDict(frozen=True)

    success: bool = True
    status: str = "ok"
    message: str = "Server is running"
    environment: str
    version: str
    timestamp: str
    components: dict[str, str]


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class FieldErrorModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    field: str
    message: str


class ErrorResponse(BaseModel):
    """Envelope returned on every 4xx/5xx response.

    errors is present only for validation failures; detail only for 500s in
    development.
    """

    model_config = ConfigDict(frozen=True)

    success: bool = False
    code: str
    message: str
    errors: Optional[list[FieldErrorModel]] = None
    detail: Optional[str] = None
