"""Jinja2 rendering for the built-in email templates.

Templates are rendered in a sandboxed environment with autoescaping so that
values like names can never inject markup.
"""

from jinja2.sandbox import SandboxedEnvironment

VERIFICATION_SUBJECT = "Verify your Super Admin Account"
VERIFICATION_HTML = (
    "<p>Hello {{ first_name or 'there' }},</p>"
    "<p>Your verification code is: <strong>{{ code }}</strong></p>"
)
VERIFICATION_TEXT = "Your verification code is: {{ code }}"

TWO_FACTOR_SUBJECT = "Your 2FA Login Code"
TWO_FACTOR_HTML = (
    "<p>Your login code is: <strong>{{ code }}</strong>. "
    "Use this to complete your login.</p>"
    "<p>The code expires in {{ ttl_minutes }} minutes.</p>"
)
TWO_FACTOR_TEXT = (
    "Your login code is: {{ code }}. It expires in {{ ttl_minutes }} minutes."
)


class TemplateRenderer:
    """Sandboxed Jinja2 renderer."""

    def __init__(self) -> None:
        self.env = SandboxedEnvironment(
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, template_string: str, variables: dict[str, object]) -> str:
        """Render ``template_string`` with ``variables``.

        Raises:
            jinja2.TemplateError: If the template is invalid.
        """
        template = self.env.from_string(template_string)
        return template.render(**variables)


# Global template renderer instance
_template_renderer: TemplateRenderer | None = None


def get_template_renderer() -> TemplateRenderer:
    """Get the global template renderer instance."""
    global _template_renderer
    if _template_renderer is None:
        _template_renderer = TemplateRenderer()
    return _template_renderer
