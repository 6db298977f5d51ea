"""
Email Notifications

Renders the confirmation emails from Jinja2 templates and delivers them
through one of two transports:

- SmtpEmailSender: aiosmtplib with login (port 465 uses implicit TLS,
  anything else upgrades with STARTTLS)
- SendGridEmailSender: SendGrid Web API, used when only an API key is set

SMTP is sent on the event loop; the SendGrid client blocks and runs in
the threadpool.
"""

import logging
from email.message import EmailMessage
from email.utils import make_msgid
from typing import Any, Optional

import aiosmtplib
from fastapi.concurrency import run_in_threadpool
from jinja2 import Environment, PackageLoader, select_autoescape
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from app.core.config import get_settings
from app.services.notifications.base import BaseEmailSender, NotificationResult
from app.services.notifications.sms import format_amount

logger = logging.getLogger(__name__)

templates = Environment(
    loader=PackageLoader("app", "templates/email"),
    autoescape=select_autoescape(["html"]),
)


# =============================================================================
# MESSAGE BUILDERS
# =============================================================================

def order_confirmation_email(
    order_id: int,
    customer_name: str,
    total: Any,
    items: list[dict[str, Any]],
) -> tuple[str, str]:
    """
    Build the order confirmation email.

    Args:
        order_id: Generated order id
        customer_name: Name used in the greeting
        total: Order total as stored
        items: Lines with ``name``, ``quantity`` and ``price``

    Returns:
        (subject, html body)
    """
    settings = get_settings()
    html = templates.get_template("order_confirmation.html").render(
        order_id=order_id,
        customer_name=customer_name,
        total=float(total or 0),
        items=items,
        currency=settings.currency_symbol,
        restaurant_name=settings.restaurant_name,
        restaurant_phone=settings.restaurant_phone,
    )
    return f"Order Confirmation #{order_id}", html


def reservation_confirmation_email(
    reservation_id: int,
    customer_name: str,
    date: str,
    time: str,
    party_size: Any,
) -> tuple[str, str]:
    """Build the reservation confirmation email as (subject, html body)."""
    settings = get_settings()
    html = templates.get_template("reservation_confirmation.html").render(
        reservation_id=reservation_id,
        customer_name=customer_name,
        date=date,
        time=time,
        party_size=party_size,
        currency=settings.currency_symbol,
        advance=format_amount(settings.reservation_advance),
        restaurant_phone=settings.restaurant_phone,
    )
    return f"Reservation Confirmation #{reservation_id}", html


# =============================================================================
# TRANSPORTS
# =============================================================================

class SmtpEmailSender(BaseEmailSender):
    """Email sender using an SMTP server with login."""

    def __init__(
        self,
        host: str,
        port: int,
        user: str,
        password: str,
        from_email: Optional[str] = None,
        timeout: float = 30.0,
    ):
        self.host = host
        self.port = port or 587
        self.user = user
        self.password = password
        self.from_email = from_email or user
        self.timeout = timeout
        logger.info(f"[EMAIL] Client initialized with SMTP: {host} PORT: {self.port} USER: {user}")

    @property
    def provider_name(self) -> str:
        return "smtp"

    @property
    def implicit_tls(self) -> bool:
        """Port 465 speaks TLS from the first byte; other ports upgrade."""
        return self.port == 465

    async def send_email(
        self,
        to_email: str,
        subject: str,
        body_html: str,
    ) -> NotificationResult:
        """Send email over SMTP."""
        message = EmailMessage()
        message["From"] = self.from_email
        message["To"] = to_email
        message["Subject"] = subject
        message["Message-ID"] = make_msgid()
        message.set_content(body_html, subtype="html")

        logger.info(f"[EMAIL SENDING] To: {to_email} | From: {self.from_email}")
        try:
            await aiosmtplib.send(
                message,
                hostname=self.host,
                port=self.port,
                username=self.user,
                password=self.password,
                use_tls=self.implicit_tls,
                start_tls=not self.implicit_tls,
                timeout=self.timeout,
            )
        except Exception as e:
            logger.error(f"[EMAIL ERROR] To: {to_email} | {type(e).__name__}: {e}")
            return NotificationResult(success=False, provider="smtp", error=str(e))

        message_id = message["Message-ID"]
        logger.info(f"[EMAIL SENT] To: {to_email} | MessageID: {message_id}")
        return NotificationResult(success=True, provider="smtp", message_id=message_id)


class SendGridEmailSender(BaseEmailSender):
    """Email sender using the SendGrid Web API."""

    def __init__(
        self,
        api_key: str,
        from_email: str,
        client: Optional[SendGridAPIClient] = None,
    ):
        self.client = client or SendGridAPIClient(api_key)
        self.from_email = from_email
        logger.info("[EMAIL] SendGrid client initialized")

    @property
    def provider_name(self) -> str:
        return "sendgrid"

    async def send_email(
        self,
        to_email: str,
        subject: str,
        body_html: str,
    ) -> NotificationResult:
        """Send email via SendGrid."""
        message = Mail(
            from_email=self.from_email,
            to_emails=to_email,
            subject=subject,
            html_content=body_html,
        )

        try:
            response = await run_in_threadpool(self.client.send, message)
        except Exception as e:
            logger.error(f"SendGrid error: {e}")
            return NotificationResult(success=False, provider="sendgrid", error=str(e))

        logger.info(f"Email sent to {to_email}: {response.status_code}")
        return NotificationResult(
            success=response.status_code in [200, 201, 202],
            message_id=response.headers.get("X-Message-Id"),
            provider="sendgrid",
        )
