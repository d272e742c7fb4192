"""
Name: In-Memory User Repository Tests

Responsibilities:
  - Email uniqueness on create and on profile edits
  - Conditional reset writes (token match, expiry, lock)
  - Capped failed-attempt counter and lock escalation
  - Concurrent confirmations: exactly one wins
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import date, timedelta
from threading import Barrier
from uuid import uuid4

import pytest

from user_service.crosscutting.exceptions import DuplicateIdentityError
from user_service.domain.entities import User

pytestmark = pytest.mark.unit


def _user(email="a@x.com", created_at=None) -> User:
    return User(
        id=uuid4(),
        first_name="Ada",
        last_name="Lovelace",
        email=email,
        password_hash="hash",
        dob=date(1990, 1, 1),
        created_at=created_at,
        updated_at=created_at,
    )


def test_create_and_lookup(repository):
    user = repository.create_user(_user())
    assert repository.get_user_by_id(user.id) == user
    assert repository.get_user_by_email("a@x.com") == user
    assert repository.get_user_by_email("A@x.com") is None


def test_duplicate_email_rejected(repository):
    repository.create_user(_user())
    with pytest.raises(DuplicateIdentityError):
        repository.create_user(_user())


def test_profile_email_change_to_taken_email_rejected(repository, clock):
    repository.create_user(_user("a@x.com"))
    other = repository.create_user(_user("b@x.com"))

    with pytest.raises(DuplicateIdentityError):
        repository.update_profile(other.id, email="a@x.com", updated_at=clock())

    same = repository.update_profile(other.id, email="b@x.com", updated_at=clock())
    assert same.email == "b@x.com"


def test_update_profile_keeps_unset_fields(repository, clock):
    user = repository.create_user(_user())
    updated = repository.update_profile(user.id, last_name="Byron", updated_at=clock())

    assert updated.first_name == "Ada"
    assert updated.last_name == "Byron"
    assert repository.update_profile(uuid4(), first_name="x", updated_at=clock()) is None


def test_list_users_newest_first(repository, clock):
    older = repository.create_user(_user("old@x.com", created_at=clock()))
    newer = repository.create_user(
        _user("new@x.com", created_at=clock() + timedelta(minutes=1))
    )
    assert [u.id for u in repository.list_users()] == [newer.id, older.id]


def test_delete_user(repository):
    user = repository.create_user(_user())
    assert repository.delete_user(user.id) is True
    assert repository.delete_user(user.id) is False
    assert repository.get_user_by_id(user.id) is None


def _pending(repository, clock, token="t1"):
    user = repository.create_user(_user())
    return repository.store_reset_token(
        user.id,
        token=token,
        expiry=clock() + timedelta(minutes=10),
        updated_at=clock(),
    )


def test_store_reset_token_resets_counter_but_not_lock(repository, clock):
    user = _pending(repository, clock)
    lock = clock() + timedelta(minutes=30)
    for _ in range(3):
        repository.record_failed_reset_attempt(
            user.id, max_attempts=3, lock_until=lock, now=clock()
        )

    refreshed = repository.store_reset_token(
        user.id, token="t2", expiry=clock() + timedelta(minutes=10), updated_at=clock()
    )
    assert refreshed.failed_reset_attempts == 0
    assert refreshed.reset_token == "t2"
    assert refreshed.lock_until == lock


def test_complete_password_reset_clears_sub_state(repository, clock):
    user = _pending(repository, clock)
    repository.record_failed_reset_attempt(
        user.id, max_attempts=3, lock_until=clock(), now=clock()
    )

    done = repository.complete_password_reset(
        user.id, expected_token="t1", password_hash="new-hash", now=clock()
    )

    assert done.password_hash == "new-hash"
    assert done.reset_token is None
    assert done.reset_token_expiry is None
    assert done.failed_reset_attempts == 0
    assert done.lock_until is None


@pytest.mark.parametrize("scenario", ["wrong_token", "expired", "locked"])
def test_complete_password_reset_conditions(repository, clock, scenario):
    user = _pending(repository, clock)
    token = "t1"
    now = clock()
    if scenario == "wrong_token":
        token = "other"
    elif scenario == "expired":
        now = clock() + timedelta(minutes=10)
    else:
        for _ in range(3):
            repository.record_failed_reset_attempt(
                user.id,
                max_attempts=3,
                lock_until=clock() + timedelta(minutes=30),
                now=clock(),
            )

    assert (
        repository.complete_password_reset(
            user.id, expected_token=token, password_hash="new-hash", now=now
        )
        is None
    )
    assert repository.get_user_by_id(user.id).password_hash == "hash"


def test_failed_attempts_capped_and_lock_set(repository, clock):
    user = _pending(repository, clock)
    lock = clock() + timedelta(minutes=30)

    counts = []
    for _ in range(5):
        updated = repository.record_failed_reset_attempt(
            user.id, max_attempts=3, lock_until=lock, now=clock()
        )
        counts.append(updated.failed_reset_attempts)

    assert counts == [1, 2, 3, 3, 3]
    assert updated.lock_until == lock


def test_failed_attempt_on_missing_user_is_noop(repository, clock):
    assert (
        repository.record_failed_reset_attempt(
            uuid4(), max_attempts=3, lock_until=clock(), now=clock()
        )
        is None
    )


def test_concurrent_confirmations_only_one_wins(repository, clock):
    user = _pending(repository, clock)
    barrier = Barrier(8)

    def confirm(i):
        barrier.wait()
        return repository.complete_password_reset(
            user.id, expected_token="t1", password_hash=f"hash-{i}", now=clock()
        )

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(confirm, range(8)))

    winners = [r for r in results if r is not None]
    assert len(winners) == 1
    assert repository.get_user_by_id(user.id).password_hash == winners[0].password_hash
