"""
SMS Notifications via Twilio

Formats the order and reservation confirmation texts and sends them
through the Twilio REST client. The client is synchronous, so calls run
in the threadpool to keep the event loop free.
"""

import logging
from typing import Any, Optional

from fastapi.concurrency import run_in_threadpool
from twilio.rest import Client as TwilioClient

from app.core.config import get_settings
from app.services.notifications.base import BaseSmsSender, NotificationResult

logger = logging.getLogger(__name__)


def format_amount(amount: Any) -> str:
    """Render an amount without a trailing .0 for whole numbers."""
    try:
        value = float(amount)
    except (TypeError, ValueError):
        return str(amount)
    if value.is_integer():
        return str(int(value))
    return f"{value:.2f}"


def order_confirmation_sms(order_id: int, total: Any) -> str:
    """Text sent to the customer after an order is placed."""
    settings = get_settings()
    return (
        "Order Confirmed!\n"
        f"Order ID: {order_id}\n"
        f"Total: {settings.currency_symbol}{format_amount(total)}\n"
        "Thank you for your order!"
    )


def reservation_confirmation_sms(
    reservation_id: int,
    date: str,
    time: str,
    party_size: Any,
) -> str:
    """Text sent to the guest after a table is booked."""
    settings = get_settings()
    return (
        "Reservation Confirmed!\n"
        f"Reservation ID: {reservation_id}\n"
        f"Date: {date}\n"
        f"Time: {time}\n"
        f"Party Size: {party_size}\n"
        f"Advance {settings.currency_symbol}{format_amount(settings.reservation_advance)} paid.\n"
        "Thank you!"
    )


class TwilioSmsSender(BaseSmsSender):
    """Production SMS sender using Twilio."""

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        from_number: Optional[str],
        client: Optional[TwilioClient] = None,
    ):
        self.client = client or TwilioClient(account_sid, auth_token)
        self.from_number = from_number
        logger.info("Twilio SMS client initialized.")

    @property
    def provider_name(self) -> str:
        return "twilio"

    async def send_sms(self, to_phone: str, message: str) -> NotificationResult:
        """Send SMS via Twilio."""
        try:
            result = await run_in_threadpool(
                self.client.messages.create,
                body=message,
                from_=self.from_number,
                to=to_phone,
            )
        except Exception as e:
            logger.error(f"[SMS ERROR] To: {to_phone} | Error: {e}")
            return NotificationResult(success=False, provider="twilio", error=str(e))

        logger.info(f"[SMS SENT] SID: {result.sid} | To: {to_phone}")
        return NotificationResult(success=True, provider="twilio", message_id=result.sid)
