"""Unit tests for auth/validation.py -- registration and login field rules."""

from __future__ import annotations

import pytest

from auth.errors import FieldError
from auth.validation import is_valid_email, normalize_email, validate_login, validate_registration


def _fields(errors: list[FieldError]) -> dict[str, str]:
    return {e.field: e.message for e in errors}


def test_valid_registration_has_no_errors():
    assert validate_registration("Alice Smith", "Alice@Example.com", "secret1", "secret1") == []


def test_all_fields_missing_reports_each_field():
    errors = _fields(validate_registration("", "", "", ""))
    assert errors == {
        "name": "Name is required",
        "email": "Email is required",
        "password": "Password is required",
        "confirmPassword": "Please confirm your password",
    }


@pytest.mark.parametrize(
    "name, message",
    [
        ("A", "Name must be at least 2 characters"),
        ("   A   ", "Name must be at least 2 characters"),
        ("x" * 51, "Name cannot exceed 50 characters"),
        ("   ", "Name is required"),
    ],
)
def test_name_rules(name, message):
    assert _fields(validate_registration(name, "a@example.com", "secret1", "secret1")) == {"name": message}


def test_name_length_is_measured_after_trim():
    assert validate_registration("  " + "x" * 50 + "  ", "a@example.com", "secret1", "secret1") == []


def test_short_password():
    errors = _fields(validate_registration("Alice", "a@example.com", "12345", "12345"))
    assert errors == {"password": "Password must be at least 6 characters"}


def test_password_over_bcrypt_limit():
    long_password = "p" * 73
    errors = _fields(validate_registration("Alice", "a@example.com", long_password, long_password))
    assert "password" in errors


def test_mismatch_is_not_a_field_error():
    """Mismatched passwords pass field validation; the service reports them as a conflict."""
    assert validate_registration("Alice", "a@example.com", "secret1", "secret2") == []


@pytest.mark.parametrize(
    "email",
    ["alice@example.com", "Alice@Example.com", "first.last+tag@sub.example.co.uk", "  bob@example.org  "],
)
def test_valid_emails(email):
    assert is_valid_email(email.strip())


@pytest.mark.parametrize(
    "email",
    [
        "plainaddress",
        "@example.com",
        "alice@",
        "alice@example",
        "alice@@example.com",
        "a b@example.com",
        "alice@.com",
        ".alice@example.com",
        "alice.@example.com",
        "a..b@example.com",
        "a,b@example.com",
        'a"b@example.com',
        "alice@-example.com",
    ],
)
def test_invalid_emails(email):
    assert not is_valid_email(email)
    assert _fields(validate_login(email, "pw")) == {"email": "Please provide a valid email"}


def test_normalize_email_trims_and_lowercases():
    assert normalize_email("  ALICE@Example.COM ") == "alice@example.com"


def test_login_requires_password():
    assert _fields(validate_login("alice@example.com", "")) == {"password": "Password is required"}


def test_login_does_not_enforce_password_length():
    """Length rules belong to registration; an old short password must still be checkable."""
    assert validate_login("alice@example.com", "x") == []
