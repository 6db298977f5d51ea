"""
REST Endpoints under /api

Each handler maps one request onto a handful of parameterized SQL
statements in the request's session, commits once, and answers. Order
and reservation confirmations are scheduled as background tasks after
the commit, so their outcome never changes the response.

Endpoints:
    - GET  /api/menu
    - POST /api/orders, GET /api/orders
    - POST /api/reservations, GET /api/reservations
    - POST /api/feedback, GET /api/feedback, GET /api/admin/feedback
    - POST /api/payments
    - GET  /api/admin/orders, GET /api/admin/reservations
"""

import json
import logging
from typing import Any, Optional

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import ColumnElement

from app.database import fetch_all, fetch_one, get_db, insert_row, update_rows
from app.models import (
    Feedback,
    MenuItem,
    Order,
    OrderItem,
    OrderStatus,
    Payment,
    PaymentStatus,
    Reservation,
    ReservationStatus,
    SETTLED_PAYMENT_STATUSES,
)
from app.schemas import (
    AdminOrderResponse,
    AdminReservationResponse,
    ErrorResponse,
    FeedbackCreate,
    FeedbackCreateResponse,
    FeedbackResponse,
    MenuItemResponse,
    OrderCreate,
    OrderCreateResponse,
    OrderResponse,
    PaymentCreate,
    PaymentCreateResponse,
    ReservationCreate,
    ReservationCreateResponse,
    ReservationResponse,
)
from app.services.notifications.dispatch import (
    send_order_confirmations,
    send_reservation_confirmations,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

menu_table = MenuItem.__table__
orders_table = Order.__table__
order_items_table = OrderItem.__table__
reservations_table = Reservation.__table__
payments_table = Payment.__table__
feedback_table = Feedback.__table__


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

async def fetch_order_lines(db: AsyncSession, order_id: int) -> list[dict[str, Any]]:
    """Order lines with the menu item name; name is None if the item is gone."""
    statement = (
        select(order_items_table, menu_table.c.name)
        .select_from(
            order_items_table.outerjoin(
                menu_table, order_items_table.c.menu_id == menu_table.c.id
            )
        )
        .where(order_items_table.c.order_id == order_id)
        .order_by(order_items_table.c.id)
    )
    return await fetch_all(db, statement)


async def fetch_latest_payment(
    db: AsyncSession,
    reference: ColumnElement,
    parent_id: int,
) -> Optional[dict[str, Any]]:
    """Most recent payment whose ``reference`` column equals ``parent_id``."""
    statement = (
        select(payments_table.c.id, payments_table.c.status, payments_table.c.details)
        .where(reference == parent_id)
        .order_by(payments_table.c.created_at.desc(), payments_table.c.id.desc())
        .limit(1)
    )
    return await fetch_one(db, statement)


def decode_payment_details(raw: Optional[str]) -> Any:
    """Parse stored details JSON, handing back the raw text if it is not JSON."""
    try:
        return json.loads(raw or "{}")
    except ValueError:
        return raw


def summarize_payment(payment: Optional[dict[str, Any]]) -> dict[str, Any]:
    """The paid / payment_ref / payment_details fields of the admin views."""
    if payment is None:
        return {"paid": False, "payment_ref": None, "payment_details": None}

    return {
        "paid": payment["status"] in SETTLED_PAYMENT_STATUSES,
        "payment_ref": payment["id"],
        "payment_details": decode_payment_details(payment["details"]),
    }


def newest_first(table):
    return (table.c.created_at.desc(), table.c.id.desc())


# =============================================================================
# MENU
# =============================================================================

@router.get(
    "/menu",
    response_model=list[MenuItemResponse],
    tags=["Menu"],
)
async def list_menu(db: AsyncSession = Depends(get_db)) -> list[dict[str, Any]]:
    """All menu items ordered by id."""
    return await fetch_all(db, select(menu_table).order_by(menu_table.c.id))


# =============================================================================
# ORDERS
# =============================================================================

@router.post(
    "/orders",
    response_model=OrderCreateResponse,
    responses={500: {"model": ErrorResponse}},
    tags=["Orders"],
    summary="Place Order",
)
async def create_order(
    order_data: OrderCreate,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
) -> OrderCreateResponse:
    """
    Place an order.

    Each line is priced from the menu as it is now; any price the client
    sends is ignored. Lines pointing at an unknown menu id are skipped.
    The order total is stored as sent.
    """
    customer = order_data.customer
    logger.info(f"Creating order for: {customer.name or 'anonymous'}")

    order_id = await insert_row(
        db,
        insert(orders_table).values(
            customer_name=customer.name,
            customer_email=customer.email,
            customer_phone=customer.phone,
            total=order_data.total,
            status=OrderStatus.PENDING.value,
        ),
    )

    lines = []
    for item in order_data.items:
        menu_item = await fetch_one(db, select(menu_table).where(menu_table.c.id == item.id))
        if menu_item is None:
            logger.debug(f"Order #{order_id}: skipping unknown menu id {item.id}")
            continue

        await insert_row(
            db,
            insert(order_items_table).values(
                order_id=order_id,
                menu_id=item.id,
                quantity=item.qty,
                price=menu_item["price"],
            ),
        )
        lines.append({
            "id": item.id,
            "name": menu_item["name"],
            "quantity": item.qty,
            "price": menu_item["price"],
        })

    await db.commit()
    logger.info(f"Order #{order_id} created with {len(lines)} item(s)")

    background_tasks.add_task(
        send_order_confirmations,
        order_id=order_id,
        customer_name=customer.name,
        customer_email=customer.email,
        customer_phone=customer.phone,
        total=order_data.total,
        items=lines,
    )

    return OrderCreateResponse(order_id=order_id)


@router.get(
    "/orders",
    response_model=list[OrderResponse],
    tags=["Orders"],
)
async def list_orders(db: AsyncSession = Depends(get_db)) -> list[dict[str, Any]]:
    """All orders, newest first, each with its line items."""
    rows = await fetch_all(db, select(orders_table).order_by(*newest_first(orders_table)))
    for row in rows:
        row["items"] = await fetch_order_lines(db, row["id"])
    return rows


# =============================================================================
# RESERVATIONS
# =============================================================================

@router.post(
    "/reservations",
    response_model=ReservationCreateResponse,
    responses={500: {"model": ErrorResponse}},
    tags=["Reservations"],
    summary="Book a Table",
)
async def create_reservation(
    reservation: ReservationCreate,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
) -> ReservationCreateResponse:
    """Book a table. Every request is accepted; nothing checks capacity."""
    reservation_id = await insert_row(
        db,
        insert(reservations_table).values(
            name=reservation.name,
            phone=reservation.phone,
            email=reservation.email,
            date=reservation.date,
            time=reservation.time,
            party_size=reservation.party_size,
            status=ReservationStatus.PENDING.value,
        ),
    )
    await db.commit()
    logger.info(f"Reservation #{reservation_id} created for {reservation.date} {reservation.time}")

    background_tasks.add_task(
        send_reservation_confirmations,
        reservation_id=reservation_id,
        name=reservation.name,
        email=reservation.email,
        phone=reservation.phone,
        date=reservation.date,
        time=reservation.time,
        party_size=reservation.party_size,
    )

    return ReservationCreateResponse(reservation_id=reservation_id)


@router.get(
    "/reservations",
    response_model=list[ReservationResponse],
    tags=["Reservations"],
)
async def list_reservations(db: AsyncSession = Depends(get_db)) -> list[dict[str, Any]]:
    return await fetch_all(
        db, select(reservations_table).order_by(*newest_first(reservations_table))
    )


# =============================================================================
# FEEDBACK
# =============================================================================

@router.post(
    "/feedback",
    response_model=FeedbackCreateResponse,
    responses={500: {"model": ErrorResponse}},
    tags=["Feedback"],
)
async def create_feedback(
    feedback: FeedbackCreate,
    db: AsyncSession = Depends(get_db),
) -> FeedbackCreateResponse:
    feedback_id = await insert_row(
        db,
        insert(feedback_table).values(**feedback.model_dump()),
    )
    await db.commit()
    return FeedbackCreateResponse(feedback_id=feedback_id)


@router.get(
    "/feedback",
    response_model=list[FeedbackResponse],
    tags=["Feedback"],
)
@router.get(
    "/admin/feedback",
    response_model=list[FeedbackResponse],
    tags=["Admin"],
)
async def list_feedback(db: AsyncSession = Depends(get_db)) -> list[dict[str, Any]]:
    """All feedback, newest first. The admin path returns the same rows."""
    return await fetch_all(db, select(feedback_table).order_by(*newest_first(feedback_table)))


# =============================================================================
# PAYMENTS
# =============================================================================

@router.post(
    "/payments",
    response_model=PaymentCreateResponse,
    responses={500: {"model": ErrorResponse}},
    tags=["Payments"],
    summary="Record Payment",
)
async def record_payment(
    payment: PaymentCreate,
    db: AsyncSession = Depends(get_db),
) -> PaymentCreateResponse:
    """
    Record a payment the client says it made.

    No gateway is contacted: the row is stored as ``completed``, and the
    referenced order becomes ``paid`` / the reservation ``confirmed``.
    Nothing checks that the reference exists or that the amount matches.
    """
    details = payment.details if payment.details is not None else {}

    payment_id = await insert_row(
        db,
        insert(payments_table).values(
            order_id=payment.order_id,
            reservation_id=payment.reservation_id,
            amount=payment.amount,
            method=payment.method,
            status=PaymentStatus.COMPLETED.value,
            details=json.dumps(details),
        ),
    )

    if payment.order_id:
        await update_rows(
            db,
            update(orders_table)
            .where(orders_table.c.id == payment.order_id)
            .values(status=OrderStatus.PAID.value),
        )
    if payment.reservation_id:
        await update_rows(
            db,
            update(reservations_table)
            .where(reservations_table.c.id == payment.reservation_id)
            .values(status=ReservationStatus.CONFIRMED.value),
        )

    await db.commit()
    logger.info(
        f"Payment #{payment_id} recorded: {payment.amount} via {payment.method} "
        f"(order={payment.order_id}, reservation={payment.reservation_id})"
    )

    return PaymentCreateResponse(payment_id=payment_id)


# =============================================================================
# ADMIN VIEWS
# =============================================================================

@router.get(
    "/admin/orders",
    response_model=list[AdminOrderResponse],
    tags=["Admin"],
)
async def list_admin_orders(db: AsyncSession = Depends(get_db)) -> list[dict[str, Any]]:
    """Orders with their items and latest payment, one payment query per order."""
    rows = await fetch_all(db, select(orders_table).order_by(*newest_first(orders_table)))

    out = []
    for order in rows:
        items = await fetch_order_lines(db, order["id"])
        payment = await fetch_latest_payment(db, payments_table.c.order_id, order["id"])
        out.append({
            "id": order["id"],
            "name": order["customer_name"],
            "phone": order["customer_phone"],
            "email": order["customer_email"],
            "total": order["total"],
            "status": order["status"],
            "created_at": order["created_at"],
            "items": items,
            **summarize_payment(payment),
        })
    return out


@router.get(
    "/admin/reservations",
    response_model=list[AdminReservationResponse],
    tags=["Admin"],
)
async def list_admin_reservations(db: AsyncSession = Depends(get_db)) -> list[dict[str, Any]]:
    """Reservations with their latest payment, one payment query per reservation."""
    rows = await fetch_all(
        db, select(reservations_table).order_by(*newest_first(reservations_table))
    )

    out = []
    for reservation in rows:
        payment = await fetch_latest_payment(
            db, payments_table.c.reservation_id, reservation["id"]
        )
        out.append({**reservation, **summarize_payment(payment)})
    return out
