"""
Name: Password Reset State

Responsibilities:
  - Derive the explicit reset state of a user from its stored fields
  - Hold the lockout policy arithmetic (threshold, lock window)

States:
  - NoResetPending: no token stored (or never requested)
  - ResetPending(token, expiry): a token is stored; it may already be expired
  - Locked(until): lock_until is in the future; supersedes any pending token

Notes:
  - Persisted as nullable columns; this module is the only place that
    interprets them as a state
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Union

from .entities import User


@dataclass(frozen=True, slots=True)
class NoResetPending:
    pass


@dataclass(frozen=True, slots=True)
class ResetPending:
    token: str
    expiry: datetime

    def is_expired(self, now: datetime) -> bool:
        return self.expiry <= now


@dataclass(frozen=True, slots=True)
class Locked:
    until: datetime


ResetState = Union[NoResetPending, ResetPending, Locked]


def reset_state_of(user: User, now: datetime) -> ResetState:
    """R: Locked wins over a pending token; an elapsed lock is ignored."""
    if user.lock_until is not None and user.lock_until > now:
        return Locked(until=user.lock_until)
    if user.reset_token is not None and user.reset_token_expiry is not None:
        return ResetPending(token=user.reset_token, expiry=user.reset_token_expiry)
    return NoResetPending()


@dataclass(frozen=True, slots=True)
class LockoutPolicy:
    """R: Failed-confirmation threshold and lock duration."""

    max_failed_attempts: int = 3
    lock_duration: timedelta = timedelta(minutes=30)

    def reaches_threshold(self, failed_attempts: int) -> bool:
        return failed_attempts >= self.max_failed_attempts

    def lock_until(self, now: datetime) -> datetime:
        return now + self.lock_duration
