"""
Email adapter for the userauth backend.

The default implementation uses SMTP with the credentials carried by Settings.
Account emails are composed here too, so the service only picks a recipient.
"""

from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape
import logging
import smtplib
import ssl

from .config import Settings
from .utils import absolute_url

logger = logging.getLogger(__name__)

VERIFY_SUBJECT = "Verify your email"
VERIFY_PATH = "/api/users/verify/{token}"


def verification_message(base_url: str, token: str) -> tuple[str, str, str]:
    """Subject, HTML and plain-text bodies carrying the verification link."""
    verify_url = absolute_url(base_url, VERIFY_PATH.format(token=token))
    html_body = (
        f'<p>Please follow <a href="{escape(verify_url)}" target="_blank">this link</a> '
        "to verify your email.</p>"
    )
    text_body = f"Verify your email: {verify_url}"
    return VERIFY_SUBJECT, html_body, text_body


def _smtp_configured(settings: Settings) -> bool:
    return bool(
        settings.smtp_host
        and settings.smtp_user
        and settings.smtp_password
        and settings.smtp_from
        and settings.smtp_port
    )


def _build_message(settings: Settings, subject: str, to_email: str, html_body: str, text_body: str | None) -> MIMEMultipart:
    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = settings.smtp_from
    msg["To"] = to_email
    if settings.smtp_reply_to:
        msg["Reply-To"] = settings.smtp_reply_to
    msg.attach(MIMEText(text_body or html_body, "plain", "utf-8"))
    msg.attach(MIMEText(html_body, "html", "utf-8"))
    return msg


def send_email(settings: Settings, subject: str, to_email: str, html_body: str, text_body: str | None = None) -> bool:
    """
    Send an email through the configured SMTP server.
    Returns False without sending when SMTP is not configured or delivery fails.
    """
    if not _smtp_configured(settings):
        logger.warning("SMTP is not configured; skipping email to %s", to_email)
        return False
    payload = _build_message(settings, subject, to_email, html_body, text_body).as_string()
    port = settings.smtp_port
    try:
        # 465 is implicit TLS, anything else upgrades with STARTTLS
        if port == 465:
            with smtplib.SMTP_SSL(settings.smtp_host, port, context=ssl.create_default_context()) as server:
                server.login(settings.smtp_user, settings.smtp_password)
                server.sendmail(settings.smtp_from, [to_email], payload)
        else:
            with smtplib.SMTP(settings.smtp_host, port) as server:
                server.starttls(context=ssl.create_default_context())
                server.login(settings.smtp_user, settings.smtp_password)
                server.sendmail(settings.smtp_from, [to_email], payload)
    except (smtplib.SMTPException, OSError) as exc:
        logger.error("Failed to send email to %s: %s", to_email, exc)
        return False
    logger.info("Sent '%s' to %s", subject, to_email)
    return True
