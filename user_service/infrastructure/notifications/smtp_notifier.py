"""
Name: SMTP Password Reset Notifier

Responsibilities:
  - Send the reset link as a plain-text email over SMTP (STARTTLS optional)
  - Surface delivery failures as NotificationError

Collaborators:
  - smtplib / email.mime (stdlib)
  - crosscutting/config.py: smtp_* settings
"""

from __future__ import annotations

import smtplib
from dataclasses import dataclass
from email.mime.text import MIMEText

from ...crosscutting.exceptions import NotificationError
from ...crosscutting.logger import logger

RESET_SUBJECT = "Password Reset Request"


@dataclass(frozen=True)
class SmtpConfig:
    host: str
    port: int = 587
    username: str = ""
    password: str = ""
    sender: str = "no-reply@user-service.com"
    use_tls: bool = True
    timeout_seconds: float = 10.0


class SmtpPasswordResetNotifier:
    def __init__(self, config: SmtpConfig) -> None:
        if not config.host:
            raise ValueError("SMTP host is required")
        self._config = config

    def _build_message(self, recipient: str, reset_url: str) -> MIMEText:
        body = (
            "You requested a password reset. "
            f"Please click the link to reset your password: {reset_url}"
        )
        msg = MIMEText(body, "plain")
        msg["From"] = self._config.sender
        msg["To"] = recipient
        msg["Subject"] = RESET_SUBJECT
        return msg

    def send_reset_link(self, recipient: str, reset_url: str) -> None:
        msg = self._build_message(recipient, reset_url)
        cfg = self._config
        try:
            with smtplib.SMTP(cfg.host, cfg.port, timeout=cfg.timeout_seconds) as server:
                if cfg.use_tls:
                    server.starttls()
                if cfg.username:
                    server.login(cfg.username, cfg.password)
                server.sendmail(cfg.sender, [recipient], msg.as_string())
        except (smtplib.SMTPException, OSError) as exc:
            logger.error(
                "Reset email delivery failed",
                extra={"recipient": recipient, "error": str(exc)},
            )
            raise NotificationError(
                "Password reset email could not be sent", original_error=exc
            ) from exc

        logger.info("Reset email sent", extra={"recipient": recipient})
