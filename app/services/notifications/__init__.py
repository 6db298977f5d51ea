"""
Notification Sender Registry

Process-wide SMS and email sender handles. They are created once by
init_notification_services() during application startup; until then
(and whenever credentials are missing) the log-only stubs are used.

Usage:
    from app.services.notifications import get_sms_sender

    result = await get_sms_sender().send_sms("+911234567890", "Hello")
    if not result.success:
        ...
"""

import logging
from typing import Optional

from app.core.config import Settings, get_settings
from app.services.notifications.base import (
    BaseEmailSender,
    BaseSmsSender,
    NotificationResult,
)
from app.services.notifications.mail import SendGridEmailSender, SmtpEmailSender
from app.services.notifications.sms import TwilioSmsSender
from app.services.notifications.stub import LoggingEmailSender, LoggingSmsSender

logger = logging.getLogger(__name__)

# None means "not initialized yet"
_sms_sender: Optional[BaseSmsSender] = None
_email_sender: Optional[BaseEmailSender] = None

_UNINITIALIZED_SMS = LoggingSmsSender(reason="SMS sender not initialized")
_UNINITIALIZED_EMAIL = LoggingEmailSender(reason="Email sender not initialized")


def build_sms_sender(settings: Settings) -> BaseSmsSender:
    """Twilio sender when credentials are present, log-only stub otherwise."""
    if not settings.sms_configured:
        logger.info("Twilio not configured. SMS will be logged but not sent.")
        return LoggingSmsSender()

    return TwilioSmsSender(
        account_sid=settings.twilio_account_sid,
        auth_token=settings.twilio_auth_token,
        from_number=settings.twilio_phone_number,
    )


def build_email_sender(settings: Settings) -> BaseEmailSender:
    """SMTP sender, then SendGrid, then the log-only stub."""
    logger.debug(
        "[EMAIL] Config: SMTP_HOST=%s SMTP_PORT=%s SMTP_USER=%s SMTP_PASS=%s FROM_EMAIL=%s",
        *("set" if v else "missing" for v in (
            settings.smtp_host,
            settings.smtp_port,
            settings.smtp_user,
            settings.smtp_pass,
            settings.sender_email,
        )),
    )

    if settings.smtp_configured:
        return SmtpEmailSender(
            host=settings.smtp_host,
            port=settings.smtp_port,
            user=settings.smtp_user,
            password=settings.smtp_pass,
            from_email=settings.sender_email,
        )

    if settings.sendgrid_api_key:
        return SendGridEmailSender(
            api_key=settings.sendgrid_api_key,
            from_email=settings.sender_email or "orders@restaurant.com",
        )

    logger.info("[EMAIL] Email not fully configured. Emails will be logged but not sent.")
    return LoggingEmailSender()


def init_notification_services(settings: Optional[Settings] = None) -> None:
    """Create the process-wide senders from settings."""
    global _sms_sender, _email_sender
    settings = settings or get_settings()
    _sms_sender = build_sms_sender(settings)
    _email_sender = build_email_sender(settings)


def reset_notification_services() -> None:
    """Drop the senders; subsequent sends go to the log-only sentinels."""
    global _sms_sender, _email_sender
    _sms_sender = None
    _email_sender = None


def get_sms_sender() -> BaseSmsSender:
    """Current SMS sender, or the sentinel stub before initialization."""
    return _sms_sender if _sms_sender is not None else _UNINITIALIZED_SMS


def get_email_sender() -> BaseEmailSender:
    """Current email sender, or the sentinel stub before initialization."""
    return _email_sender if _email_sender is not None else _UNINITIALIZED_EMAIL


__all__ = [
    "init_notification_services",
    "reset_notification_services",
    "get_sms_sender",
    "get_email_sender",
    "build_sms_sender",
    "build_email_sender",
    "BaseSmsSender",
    "BaseEmailSender",
    "NotificationResult",
]
