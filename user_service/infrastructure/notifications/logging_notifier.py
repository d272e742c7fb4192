"""Local/dev notifier: records that a link was issued, without the link itself."""

from ...crosscutting.logger import logger


class LoggingPasswordResetNotifier:
    def send_reset_link(self, recipient: str, reset_url: str) -> None:
        logger.info(
            "Password reset link issued (no SMTP configured)",
            extra={"recipient": recipient},
        )
