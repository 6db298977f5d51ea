"""
Log-only Notification Senders

Used whenever a transport has no credentials, and as the sentinel
before init_notification_services() has run. Nothing is sent: the
message is written to the log and the result reports success=False.
"""

import logging

from app.services.notifications.base import (
    BaseEmailSender,
    BaseSmsSender,
    NotificationResult,
)

logger = logging.getLogger(__name__)


class LoggingSmsSender(BaseSmsSender):
    """SMS sender that only logs."""

    def __init__(self, reason: str = "Twilio not configured"):
        self.reason = reason

    @property
    def provider_name(self) -> str:
        return "log"

    async def send_sms(self, to_phone: str, message: str) -> NotificationResult:
        logger.info(f"[SMS LOG] To: {to_phone} | Message: {message!r}")
        return NotificationResult(success=False, provider="log", reason=self.reason)


class LoggingEmailSender(BaseEmailSender):
    """Email sender that only logs the recipient and subject."""

    def __init__(self, reason: str = "Email not configured"):
        self.reason = reason

    @property
    def provider_name(self) -> str:
        return "log"

    async def send_email(
        self,
        to_email: str,
        subject: str,
        body_html: str,
    ) -> NotificationResult:
        logger.info(f"[EMAIL LOG] To: {to_email} | Subject: {subject}")
        return NotificationResult(success=False, provider="log", reason=self.reason)
