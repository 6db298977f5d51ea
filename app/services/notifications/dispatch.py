"""
Confirmation Dispatch

Coroutines scheduled as FastAPI background tasks after an order or a
reservation is committed. They run once the response has been sent,
their results are only logged, and nothing they do can reach the
client: a crash before they finish simply drops the notification.
"""

import logging
from typing import Any, Awaitable, Optional

from app.services.notifications import get_email_sender, get_sms_sender
from app.services.notifications.base import NotificationResult
from app.services.notifications.mail import (
    order_confirmation_email,
    reservation_confirmation_email,
)
from app.services.notifications.sms import (
    order_confirmation_sms,
    reservation_confirmation_sms,
)

logger = logging.getLogger(__name__)


async def _guarded(channel: str, ref: str, send: Awaitable[NotificationResult]) -> dict[str, Any]:
    """Await one send, turning anything it raises into a failed result."""
    try:
        result = await send
    except Exception as e:
        logger.exception(f"{channel} dispatch failed for {ref}")
        result = NotificationResult(success=False, error=str(e))

    if result.success:
        logger.info(f"{channel} for {ref} delivered via {result.provider}")
    else:
        logger.warning(f"{channel} for {ref} not delivered: {result.to_dict()}")
    return result.to_dict()


async def _order_sms(order_id: int, phone: str, total: Any) -> NotificationResult:
    return await get_sms_sender().send_sms(phone, order_confirmation_sms(order_id, total))


async def _order_email(
    order_id: int,
    email: str,
    customer_name: str,
    total: Any,
    items: list[dict[str, Any]],
) -> NotificationResult:
    subject, html = order_confirmation_email(order_id, customer_name, total, items)
    return await get_email_sender().send_email(email, subject, html)


async def _reservation_sms(
    reservation_id: int, phone: str, date: str, time: str, party_size: Any
) -> NotificationResult:
    message = reservation_confirmation_sms(reservation_id, date, time, party_size)
    return await get_sms_sender().send_sms(phone, message)


async def _reservation_email(
    reservation_id: int, email: str, name: str, date: str, time: str, party_size: Any
) -> NotificationResult:
    subject, html = reservation_confirmation_email(reservation_id, name, date, time, party_size)
    return await get_email_sender().send_email(email, subject, html)


async def send_order_confirmations(
    order_id: int,
    customer_name: str,
    customer_email: Optional[str],
    customer_phone: Optional[str],
    total: Any,
    items: list[dict[str, Any]],
) -> dict[str, dict]:
    """
    Send the order SMS (if a phone is given) and email (if an email is given).

    The two channels are independent: a failing SMS does not stop the email.

    Returns:
        Mapping of channel name to NotificationResult.to_dict(), for logging
        and tests only
    """
    ref = f"order #{order_id}"
    results: dict[str, dict] = {}

    if customer_phone:
        results["sms"] = await _guarded(
            "SMS", ref, _order_sms(order_id, customer_phone, total)
        )
    if customer_email:
        results["email"] = await _guarded(
            "Email", ref,
            _order_email(order_id, customer_email, customer_name or "Customer", total, items),
        )
    return results


async def send_reservation_confirmations(
    reservation_id: int,
    name: str,
    email: Optional[str],
    phone: Optional[str],
    date: str,
    time: str,
    party_size: Any,
) -> dict[str, dict]:
    """Send the reservation SMS and email, same rules as for orders."""
    ref = f"reservation #{reservation_id}"
    results: dict[str, dict] = {}

    if phone:
        results["sms"] = await _guarded(
            "SMS", ref, _reservation_sms(reservation_id, phone, date, time, party_size)
        )
    if email:
        results["email"] = await _guarded(
            "Email", ref,
            _reservation_email(reservation_id, email, name, date, time, party_size),
        )
    return results
