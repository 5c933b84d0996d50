"""Abstract base class for email providers."""

from abc import ABC, abstractmethod


class EmailProvider(ABC):
    """Interface every mail transport implements."""

    @abstractmethod
    async def send_email(
        self,
        to: str,
        subject: str,
        html_body: str,
        text_body: str,
        from_email: str,
        from_name: str,
    ) -> bool:
        """Send an email.

        Returns:
            True if the message was accepted for delivery.

        Raises:
            Exception: Transport failures propagate to the caller.
        """

    @abstractmethod
    async def test_connection(self) -> tuple[bool, str | None]:
        """Check that the transport is reachable.

        Returns:
            Tuple of (success, error_message); error_message is None on success.
        """
