"""
Domain layer: entities, reset state machine and repository contracts.

No framework imports here (no FastAPI, no psycopg).
"""

from .clock import Clock, utc_now
from .entities import User, UserRole
from .reset_state import Locked, NoResetPending, ResetPending, ResetState, reset_state_of

__all__ = [
    "Clock",
    "utc_now",
    "User",
    "UserRole",
    "Locked",
    "NoResetPending",
    "ResetPending",
    "ResetState",
    "reset_state_of",
]
