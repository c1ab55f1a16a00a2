"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Dataclasses own domain
shape; the store, service, and routes do the work.

Layer rule: no imports from api/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class User:
    """A registered account.

    email is always stored trimmed and lowercased -- the UNIQUE constraint on
    the column is therefore case-insensitive in practice.

    password_hash is the bcrypt output and must never leave the service layer;
    use AuthService.public_profile() for anything sent to a client.

    id, created_at and last_login are set by the store on insert.
    """

    name: str
    email: str
    password_hash: str
    id: str | None = None
    created_at: str = ""  # ISO 8601 UTC
    last_login: str = ""  # ISO 8601 UTC


@dataclass(frozen=True)
class Identity:
    """The identity attached to a request once its session token is resolved."""

    id: str
    name: str
    email: str

    @classmethod
    def from_user(cls, user: User) -> Identity:
        return cls(id=user.id or "", name=user.name, email=user.email)

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "email": self.email}


@dataclass(frozen=True)
class AuthResult:
    """Outcome of a successful register or login: the token and the account."""

    token: str
    user: User
