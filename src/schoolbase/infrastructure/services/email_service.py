"""Email service for one-time code delivery.

Mail is a non-essential collaborator: every send is attempted once and any
failure is logged and reported as ``False``. Callers persist the code they
are mailing before calling in, so a failed send never loses state.
"""

from schoolbase.core.config import Settings, get_settings
from schoolbase.core.logging import get_logger
from schoolbase.infrastructure.services.email import (
    ConsoleProvider,
    EmailProvider,
    SMTPProvider,
    SMTPSettings,
    TemplateRenderer,
    get_template_renderer,
)
from schoolbase.infrastructure.services.email.template_renderer import (
    TWO_FACTOR_HTML,
    TWO_FACTOR_SUBJECT,
    TWO_FACTOR_TEXT,
    VERIFICATION_HTML,
    VERIFICATION_SUBJECT,
    VERIFICATION_TEXT,
)

logger = get_logger(__name__)


class EmailService:
    """Sends transactional mail through the configured provider."""

    def __init__(
        self,
        provider: EmailProvider,
        from_email: str,
        from_name: str,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.provider = provider
        self.from_email = from_email
        self.from_name = from_name
        self.renderer = renderer or get_template_renderer()

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "EmailService":
        """Build the service with SMTP when configured, console logging otherwise."""
        settings = settings or get_settings()
        provider: EmailProvider
        if settings.smtp_configured:
            provider = SMTPProvider(SMTPSettings.from_settings(settings))
        else:
            provider = ConsoleProvider()
        return cls(provider, settings.mail_from_email, settings.mail_from_name)

    async def send(self, to: str, subject: str, html_body: str, text_body: str | None = None) -> bool:
        """Send one message. Never raises.

        Args:
            to: Recipient address.
            subject: Subject line.
            html_body: HTML body.
            text_body: Plain-text alternative; defaults to the HTML body.

        Returns:
            True if the provider accepted the message, False otherwise.
        """
        try:
            sent = await self.provider.send_email(
                to=to,
                subject=subject,
                html_body=html_body,
                text_body=text_body or html_body,
                from_email=self.from_email,
                from_name=self.from_name,
            )
        except Exception as e:
            logger.error(
                "Email delivery failed",
                to=to,
                subject=subject,
                error_type=type(e).__name__,
            )
            return False
        if sent:
            logger.info("Email sent", to=to, subject=subject)
        return sent

    async def send_verification_code(self, to: str, code: str, first_name: str | None = None) -> bool:
        variables = {"code": code, "first_name": first_name}
        return await self.send(
            to,
            VERIFICATION_SUBJECT,
            self.renderer.render(VERIFICATION_HTML, variables),
            self.renderer.render(VERIFICATION_TEXT, variables),
        )

    async def send_two_factor_code(self, to: str, code: str, ttl_minutes: int) -> bool:
        variables = {"code": code, "ttl_minutes": ttl_minutes}
        return await self.send(
            to,
            TWO_FACTOR_SUBJECT,
            self.renderer.render(TWO_FACTOR_HTML, variables),
            self.renderer.render(TWO_FACTOR_TEXT, variables),
        )
