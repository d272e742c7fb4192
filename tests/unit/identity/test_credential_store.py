"""
Name: Credential Store Tests

Responsibilities:
  - Uniqueness on create, hashing on create and set_password only
"""

from datetime import date

import pytest

from user_service.crosscutting.exceptions import DuplicateIdentityError
from user_service.domain.entities import UserRole
from user_service.identity.credential_store import NewUser

pytestmark = pytest.mark.unit


def _candidate(email="a@x.com", password="pw123456", role=UserRole.USER) -> NewUser:
    return NewUser(
        first_name="Ada",
        last_name="Lovelace",
        email=email,
        password=password,
        dob=date(1990, 12, 10),
        role=role,
    )


def test_create_hashes_password(credentials):
    user = credentials.create(_candidate())

    assert user.password_hash != "pw123456"
    assert credentials.verify_password(user, "pw123456") is True
    assert credentials.find_by_email("a@x.com") == user
    assert credentials.find_by_id(user.id) == user


def test_create_rejects_duplicate_email(credentials):
    credentials.create(_candidate())
    with pytest.raises(DuplicateIdentityError):
        credentials.create(_candidate(password="another-pw"))


def test_email_is_case_sensitive(credentials):
    credentials.create(_candidate(email="a@x.com"))
    other = credentials.create(_candidate(email="A@x.com"))
    assert other.email == "A@x.com"


def test_set_password_replaces_hash(credentials, clock):
    user = credentials.create(_candidate())
    clock.advance(minutes=1)

    updated = credentials.set_password(user, "newpw12345")

    assert credentials.verify_password(updated, "newpw12345") is True
    assert credentials.verify_password(updated, "pw123456") is False
    assert updated.updated_at == clock()


def test_profile_edit_does_not_rehash(credentials, repository, clock):
    user = credentials.create(_candidate())
    updated = repository.update_profile(user.id, first_name="Grace", updated_at=clock())
    assert updated.password_hash == user.password_hash
