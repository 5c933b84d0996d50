"""Email transports and templates."""

from schoolbase.infrastructure.services.email.console_provider import ConsoleProvider
from schoolbase.infrastructure.services.email.email_provider import EmailProvider
from schoolbase.infrastructure.services.email.smtp_provider import SMTPProvider, SMTPSettings
from schoolbase.infrastructure.services.email.template_renderer import (
    TemplateRenderer,
    get_template_renderer,
)

__all__ = [
    "ConsoleProvider",
    "EmailProvider",
    "SMTPProvider",
    "SMTPSettings",
    "TemplateRenderer",
    "get_template_renderer",
]
