"""
Notification Sender Abstract Base Classes

Defines the interface for SMS and Email senders. Every implementation,
real or log-only, returns a NotificationResult and never raises: a
failed confirmation must not be able to fail the request that caused it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class NotificationResult:
    """
    Result from sending a notification.

    Attributes:
        success: Whether the provider accepted the message
        provider: Transport that handled it (twilio, smtp, sendgrid, log)
        message_id: Provider message identifier when sent
        reason: Why nothing was sent (e.g. transport not configured)
        error: Transport error message when sending failed
    """
    success: bool
    provider: str = "unknown"
    message_id: Optional[str] = None
    reason: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, dropping empty fields."""
        data: dict[str, Any] = {"success": self.success, "provider": self.provider}
        for key in ("message_id", "reason", "error"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data


class BaseSmsSender(ABC):
    """Abstract base class for SMS senders."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name."""
        pass

    @abstractmethod
    async def send_sms(self, to_phone: str, message: str) -> NotificationResult:
        """Send an SMS message."""
        pass


class BaseEmailSender(ABC):
    """Abstract base class for email senders."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name."""
        pass

    @abstractmethod
    async def send_email(
        self,
        to_email: str,
        subject: str,
        body_html: str,
    ) -> NotificationResult:
        """Send an HTML email."""
        pass
