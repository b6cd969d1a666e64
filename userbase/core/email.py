import logging

import resend

from userbase.core.constants import JinjaCompiledEmailTemplatesEnv
from userbase.core.settings import get_settings

logger = logging.getLogger(__name__)


def _render_template(template_name: str, **context: str) -> str:
    """Render a pre-compiled email template.

    Templates are pre-compiled with CSS inlined and HTML minified.
    Run `python scripts/compile_emails.py` after modifying source templates.

    Args:
        template_name: Name of the template file
        **context: Template variables

    Returns:
        Rendered HTML
    """
    template = JinjaCompiledEmailTemplatesEnv.get_template(template_name)
    return template.render(**context)


def init_resend() -> None:
    """Initialize Resend with API key if available."""
    settings = get_settings()
    if not settings.resend_api_key:
        return
    resend.api_key = settings.resend_api_key


def send_welcome_email(to_email: str, user_name: str) -> None:
    """Send the post-registration welcome email via Resend.

    Without a configured API key the email is logged and not sent.

    Args:
        to_email: Recipient email address
        user_name: Name used in the greeting
    """
    settings = get_settings()
    subject = f"Welcome to {settings.app_name}!"

    if not settings.resend_api_key:
        logger.info("Email delivery disabled; would send %r to %s", subject, to_email)
        return

    html_content = _render_template(
        "welcome.html", user_name=user_name, app_name=settings.app_name
    )

    resend.Emails.send(
        {
            "from": f"noreply@{settings.app_domain}",
            "to": to_email,
            "subject": subject,
            "html": html_content,
        }
    )
