"""
auth/service.py -- Register / login / profile / logout / verify orchestration.

AuthService receives its UserStore and Settings at construction; it holds no
other state and is shared by all requests. Every expected failure is raised as
an auth.errors exception before any side effect happens.

Password hashing happens in exactly one place (register). Login only writes
last_login through UserStore.update_last_login(), which never touches the
password_hash column, so a stored hash cannot be hashed a second time.

Logout is stateless: clearing the cookie is all it does. A token captured
before logout stays valid through the Authorization header until it expires.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from auth.errors import AuthenticationError, ConflictError, NotFoundError, ValidationError
from auth.models import AuthResult, Identity, User
from auth.passwords import DUMMY_HASH, hash_password, verify_password
from auth.store import UserStore
from auth.tokens import create_access_token
from auth.validation import normalize_email, validate_login, validate_registration
from core.config import Settings, get_settings

logger = logging.getLogger("securesphere.auth")

PASSWORDS_DO_NOT_MATCH = "Passwords do not match"
EMAIL_ALREADY_REGISTERED = "Email already registered"
INVALID_CREDENTIALS = "Invalid email or password"
USER_NOT_FOUND = "User not found"


class AuthService:
    def __init__(self, store: UserStore, settings: Settings | None = None) -> None:
        self.store = store
        self.settings = settings or get_settings()

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def register(self, name: str, email: str, password: str, confirm_password: str) -> AuthResult:
        """Create an account and open a session for it.

        Raises ValidationError on malformed fields and ConflictError when the
        passwords differ or the email is taken (in any letter case).
        """
        errors = validate_registration(name, email, password, confirm_password)
        if errors:
            raise ValidationError(errors)
        if password != confirm_password:
            raise ConflictError(PASSWORDS_DO_NOT_MATCH)

        email = normalize_email(email)
        if self.store.email_exists(email):
            raise ConflictError(EMAIL_ALREADY_REGISTERED)

        user = User(name=name.strip(), email=email, password_hash=hash_password(password, self.settings.bcrypt_rounds))
        try:
            user_id = self.store.create_user(user)
        except IntegrityError as exc:
            # Lost the race against a concurrent registration for this email.
            raise ConflictError(EMAIL_ALREADY_REGISTERED) from exc

        created = self._require_user(user_id)
        logger.info("Registered user %s", created.id)
        return AuthResult(token=create_access_token(created, self.settings), user=created)

    def login(self, email: str, password: str) -> AuthResult:
        """Check credentials and open a session.

        Unknown email and wrong password raise the same AuthenticationError
        so the response does not reveal which accounts exist.
        """
        errors = validate_login(email, password)
        if errors:
            raise ValidationError(errors)

        user = self.authenticate(email, password)
        if user is None:
            logger.warning("Failed login attempt")
            raise AuthenticationError(INVALID_CREDENTIALS)

        self.store.update_last_login(user.id)
        user = self._require_user(user.id)
        logger.info("User %s logged in", user.id)
        return AuthResult(token=create_access_token(user, self.settings), user=user)

    def authenticate(self, email: str, password: str) -> User | None:
        """Return the user for a correct email/password pair, else None.

        bcrypt runs exactly once either way [C1]: against the stored hash when
        the email is known, against DUMMY_HASH when it is not.
        """
        user = self.store.get_by_email(normalize_email(email))
        if user is None:
            verify_password(password, DUMMY_HASH)
            return None
        if not verify_password(password, user.password_hash):
            return None
        return user

    def get_profile(self, identity: Identity) -> User:
        """Re-read the account behind an already-resolved identity."""
        user = self.store.get_by_id(identity.id)
        if user is None:
            raise NotFoundError(USER_NOT_FOUND)
        return user

    def logout(self, identity: Identity) -> None:
        logger.info("User %s logged out", identity.id)

    def verify(self, identity: Identity) -> Identity:
        return identity

    # ------------------------------------------------------------------
    # Projections
    # ------------------------------------------------------------------

    @staticmethod
    def public_profile(user: User) -> dict:
        """The client-safe view of a user. Never includes the password hash."""
        return {
            "id": user.id,
            "name": user.name,
            "email": user.email,
            "registeredAt": user.created_at,
            "lastLogin": user.last_login,
        }

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_user(self, user_id: str) -> User:
        user = self.store.get_by_id(user_id)
        if user is None:
            raise NotFoundError(USER_NOT_FOUND)
        return user
