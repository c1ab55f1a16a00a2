"""
auth/passwords.py -- bcrypt password hashing.

bcrypt is used directly rather than through passlib: passlib's wrap-bug
detection builds a password longer than 72 bytes, which bcrypt 4.x rejects.

The salt is embedded in the hash output, so verification needs nothing but
the stored hash. The work factor comes from Settings.bcrypt_rounds.

bcrypt only accepts 72 bytes of input. Registration rejects anything longer
(auth.validation.PASSWORD_MAX_BYTES), so a password is never truncated.
"""

from __future__ import annotations

import bcrypt

from core.config import get_settings


def hash_password(plain: str, rounds: int | None = None) -> str:
    """Return a bcrypt hash of the given plaintext password."""
    cost = rounds if rounds is not None else get_settings().bcrypt_rounds
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt(rounds=cost)).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash."""
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


# Timing equalization [C1]: computed once at import so the first login is not
# measurably slower than later ones. Login runs verify_password() against this
# hash when the email is unknown, keeping response time independent of whether
# the account exists.
DUMMY_HASH: str = hash_password("securesphere_timing_dummy")
