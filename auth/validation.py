"""
auth/validation.py -- Field rules for registration and login input.

Plain functions returning a list of FieldError, one per failing field (first
failing rule wins per field). An empty list means the input is acceptable.
No framework types are involved, so the same rules apply whether the input
came from a JSON body, a form, or a test.
"""

from __future__ import annotations

from email_validator import EmailNotValidError, validate_email

from auth.errors import FieldError

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50
PASSWORD_MIN_LENGTH = 6
# bcrypt only looks at the first 72 bytes and bcrypt >= 5 refuses longer input.
PASSWORD_MAX_BYTES = 72
EMAIL_MAX_LENGTH = 254


def normalize_email(email: str) -> str:
    return email.strip().lower()


def is_valid_email(email: str) -> bool:
    """Syntax check only; no DNS lookup is made."""
    if len(email) > EMAIL_MAX_LENGTH:
        return False
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def _check_name(name: str) -> str | None:
    name = name.strip()
    if not name:
        return "Name is required"
    if len(name) < NAME_MIN_LENGTH:
        return f"Name must be at least {NAME_MIN_LENGTH} characters"
    if len(name) > NAME_MAX_LENGTH:
        return f"Name cannot exceed {NAME_MAX_LENGTH} characters"
    return None


def _check_email(email: str) -> str | None:
    email = email.strip()
    if not email:
        return "Email is required"
    if not is_valid_email(email):
        return "Please provide a valid email"
    return None


def _check_new_password(password: str) -> str | None:
    if not password:
        return "Password is required"
    if len(password) < PASSWORD_MIN_LENGTH:
        return f"Password must be at least {PASSWORD_MIN_LENGTH} characters"
    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        return f"Password cannot exceed {PASSWORD_MAX_BYTES} characters"
    return None


def validate_registration(name: str, email: str, password: str, confirm_password: str) -> list[FieldError]:
    """Check registration fields. Password equality is not a field rule; the
    service reports a mismatch separately as a conflict."""
    errors: list[FieldError] = []
    checks = (
        ("name", _check_name(name)),
        ("email", _check_email(email)),
        ("password", _check_new_password(password)),
        ("confirmPassword", None if confirm_password else "Please confirm your password"),
    )
    for field, message in checks:
        if message is not None:
            errors.append(FieldError(field, message))
    return errors


def validate_login(email: str, password: str) -> list[FieldError]:
    errors: list[FieldError] = []
    email_message = _check_email(email)
    if email_message is not None:
        errors.append(FieldError("email", email_message))
    if not password:
        errors.append(FieldError("password", "Password is required"))
    return errors
