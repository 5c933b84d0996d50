"""Development email provider that writes messages to the log."""

from schoolbase.core.logging import get_logger
from schoolbase.infrastructure.services.email.email_provider import EmailProvider

logger = get_logger(__name__)


class ConsoleProvider(EmailProvider):
    """Logs outgoing mail instead of delivering it.

    Used whenever SMTP is not configured, so local setups can read one-time
    codes from the console.
    """

    async def send_email(
        self,
        to: str,
        subject: str,
        html_body: str,
        text_body: str,
        from_email: str,
        from_name: str,
    ) -> bool:
        logger.info(
            "[EMAIL] Message not delivered (SMTP not configured)",
            to=to,
            subject=subject,
            sender=f"{from_name} <{from_email}>",
            body=text_body,
        )
        return True

    async def test_connection(self) -> tuple[bool, str | None]:
        return True, None
