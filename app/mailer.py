"""Transactional email over SMTP.  Only the waitlist confirmation uses it."""

import asyncio
import logging
import smtplib
from email.message import EmailMessage

from app.config import settings

logger = logging.getLogger("novi.mailer")

DEFAULT_SENDER = "support@noviai.xyz"

WAITLIST_SUBJECT = "Welcome to Novi AI Waitlist! 🚀"

WAITLIST_TEXT = """Hi {name},

Thanks for joining the Novi AI waitlist. You're on the list, and we'll email
you as soon as your spot opens up.

- The Novi AI team
"""

WAITLIST_HTML = """<!DOCTYPE html>
<html><body>
<h1>Welcome to Novi AI</h1>
<p>Hi {name},</p>
<p>Thanks for joining the Novi AI waitlist. You're on the list, and we'll email
you as soon as your spot opens up.</p>
<p>The Novi AI team</p>
</body></html>
"""


def build_waitlist_message(email: str, name: str | None = None) -> EmailMessage:
    sender = settings.get("MAIL_FROM") or settings.get("SMTP_USER") or DEFAULT_SENDER
    greeting = name or "there"
    message = EmailMessage()
    message["From"] = f'"Novi AI" <{sender}>'
    message["To"] = email
    message["Subject"] = WAITLIST_SUBJECT
    message.set_content(WAITLIST_TEXT.format(name=greeting))
    message.add_alternative(WAITLIST_HTML.format(name=greeting), subtype="html")
    return message


def _deliver(message: EmailMessage) -> None:
    host = settings.get("SMTP_HOST") or "smtp.gmail.com"
    port = settings.get_int("SMTP_PORT", 587)
    user = settings.get("SMTP_USER")
    password = settings.get("SMTP_PASSWORD")

    if settings.get_bool("SMTP_SECURE"):
        client: smtplib.SMTP = smtplib.SMTP_SSL(host, port, timeout=30)
    else:
        client = smtplib.SMTP(host, port, timeout=30)
    with client:
        if not settings.get_bool("SMTP_SECURE"):
            client.starttls()
        if user and password:
            client.login(user, password)
        client.send_message(message)


def mail_configured() -> bool:
    return bool(settings.get("SMTP_USER") and settings.get("SMTP_PASSWORD"))


async def send_waitlist_confirmation(email: str, name: str | None = None) -> bool:
    """Send the confirmation; returns False instead of raising on delivery failure."""
    if not mail_configured():
        logger.warning("SMTP credentials not configured; skipping confirmation to %s", email)
        return False
    try:
        await asyncio.to_thread(_deliver, build_waitlist_message(email, name))
    except (smtplib.SMTPException, OSError) as exc:
        logger.warning("Waitlist confirmation to %s failed: %s", email, exc)
        return False
    logger.info("Waitlist confirmation sent to %s", email)
    return True
