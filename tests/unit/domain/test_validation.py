"""
Name: Boundary Validation Tests

Responsibilities:
  - Email shape and password strength checks
  - first_error short-circuits on the first failing check
"""

import pytest

from user_service.domain.validation import (
    check_email,
    check_password,
    check_required,
    first_error,
    normalize_email,
)

pytestmark = pytest.mark.unit


@pytest.mark.parametrize("email", ["a@x.com", "  first.last@example.co.uk  "])
def test_check_email_accepts_well_formed(email):
    assert check_email(email) is None


@pytest.mark.parametrize(
    "email, message",
    [
        ("", "Email is required"),
        (None, "Email is required"),
        ("   ", "Email is required"),
        ("not-an-email", "Email is not valid"),
        ("a@b", "Email is not valid"),
        ("a b@x.com", "Email is not valid"),
    ],
)
def test_check_email_rejects(email, message):
    assert check_email(email) == message


def test_check_email_rejects_overlong():
    assert check_email("a" * 320 + "@x.com") == "Email is too long"


def test_normalize_email_trims_but_keeps_case():
    assert normalize_email("  Mixed@Example.com ") == "Mixed@Example.com"


def test_check_password_min_length():
    assert check_password("pw12345") == "Password must be at least 8 characters long"
    assert check_password("pw123456") is None
    assert check_password("abc", min_length=3) is None


def test_check_password_required_and_whitespace():
    assert check_password("") == "Password is required"
    assert check_password(None) == "Password is required"
    assert check_password(" pw123456") is not None


def test_check_required():
    assert check_required("Ada", "First name") is None
    assert check_required("  ", "First name") == "First name is required"


def test_first_error_stops_at_first_failure():
    calls = []

    def failing():
        calls.append("failing")
        return "boom"

    def never():
        calls.append("never")
        return None

    assert first_error([lambda: None, failing, never]) == "boom"
    assert calls == ["failing"]


def test_first_error_none_when_all_pass():
    assert first_error([lambda: None, lambda: None]) is None
