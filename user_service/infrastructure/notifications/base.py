"""Port for delivering password reset links."""

from typing import Protocol


class PasswordResetNotifier(Protocol):
    def send_reset_link(self, recipient: str, reset_url: str) -> None:
        """Deliver the link. Raises NotificationError on failure."""
        ...
