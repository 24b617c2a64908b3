# app/services/email_delivery.py
import smtplib
from email.message import EmailMessage

from app.core.config import settings
from app.core.logging import get_logger
from app.services.exceptions import ServiceUnavailableError

logger = get_logger(__name__)


def deliver_email(to_email: str, subject: str, body: str) -> None:
    """Hand a plain-text message to the SMTP relay. Blocking, no retries."""
    if not settings.EMAILS_ENABLED or not settings.SMTP_HOST:
        logger.info(
            "[DEV EMAIL] delivery disabled, message logged only",
            extra={"to": to_email, "subject": subject, "body": body},
        )
        return

    msg = EmailMessage()
    msg["From"] = settings.EMAIL_FROM
    msg["To"] = to_email
    msg["Subject"] = subject
    msg.set_content(body)

    try:
        with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT) as server:
            if settings.SMTP_TLS:
                server.starttls()
            if settings.SMTP_USER and settings.SMTP_PASSWORD:
                server.login(settings.SMTP_USER, settings.SMTP_PASSWORD)
            server.send_message(msg)
    except (smtplib.SMTPException, OSError) as exc:
        logger.error("Email delivery failed", extra={"to": to_email, "subject": subject, "error": str(exc)})
        raise ServiceUnavailableError("Email delivery failed") from exc

    logger.info("Email delivered", extra={"to": to_email, "subject": subject})
