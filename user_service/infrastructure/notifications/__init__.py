from .base import PasswordResetNotifier
from .logging_notifier import LoggingPasswordResetNotifier
from .smtp_notifier import SmtpConfig, SmtpPasswordResetNotifier

__all__ = [
    "PasswordResetNotifier",
    "LoggingPasswordResetNotifier",
    "SmtpConfig",
    "SmtpPasswordResetNotifier",
]
