"""
auth/errors.py -- Error taxonomy for the authentication service.

Every expected failure is one of these classes. The HTTP layer maps them to a
response using status_code and code; nothing in auth/ knows about HTTP
responses beyond those two attributes.

  ValidationError      400  malformed input, carries per-field messages
  ConflictError        400  duplicate email or password mismatch
  AuthenticationError  401  bad credentials, missing/bad/expired token
  NotFoundError        404  resolved identity no longer exists

Anything else that escapes a handler is an internal error (500).
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldError:
    """A single field-level validation message."""

    field: str
    message: str

    def to_dict(self) -> dict:
        return {"field": self.field, "message": self.message}


class AuthServiceError(Exception):
    """Base class for expected, caller-correctable failures."""

    status_code: int = 500
    code: str = "internal_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(AuthServiceError):
    status_code = 400
    code = "validation_error"

    def __init__(self, errors: list[FieldError], message: str = "Validation failed") -> None:
        super().__init__(message)
        self.errors = list(errors)


class ConflictError(AuthServiceError):
    status_code = 400
    code = "conflict"


class AuthenticationError(AuthServiceError):
    status_code = 401
    code = "unauthorized"


class NotFoundError(AuthServiceError):
    status_code = 404
    code = "not_found"
