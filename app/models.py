"""
SQLAlchemy Database Models

Six insert-only tables: menu, orders, order_items, reservations,
payments and feedback. The only updates ever issued are the status
changes on orders and reservations made when a payment is recorded.

Foreign keys are declared for documentation; SQLite does not enforce
them unless asked to, and nothing here asks.
"""

import enum

from sqlalchemy import Column, Integer, String, Float, DateTime, Text, ForeignKey
from sqlalchemy.sql import func

from app.database import Base


class OrderStatus(str, enum.Enum):
    """Order status workflow."""
    PENDING = "pending"
    PAID = "paid"


class ReservationStatus(str, enum.Enum):
    """Reservation status workflow."""
    PENDING = "pending"
    CONFIRMED = "confirmed"


class PaymentStatus(str, enum.Enum):
    """Payment status. Recorded payments are always completed."""
    COMPLETED = "completed"
    PAID = "paid"


# Payment statuses that count as "paid" in the admin views
SETTLED_PAYMENT_STATUSES = frozenset(s.value for s in PaymentStatus)


class MenuItem(Base):
    """Menu entry. Seeded once, never updated through the API."""
    __tablename__ = "menu"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Float, nullable=False)
    image = Column(Text, nullable=True)

    def __repr__(self):
        return f"<MenuItem #{self.id} - {self.name} - {self.price}>"


class Order(Base):
    """
    Customer order.

    ``total`` is stored exactly as the client sent it; it is not
    recomputed from the line items.
    """
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, autoincrement=True)

    customer_name = Column(Text, nullable=True)
    customer_email = Column(Text, nullable=True)
    customer_phone = Column(Text, nullable=True)

    total = Column(Float, nullable=True)
    status = Column(String(20), default=OrderStatus.PENDING.value)

    created_at = Column(DateTime, server_default=func.now())

    def __repr__(self):
        return f"<Order #{self.id} - {self.customer_name} - {self.status}>"


class OrderItem(Base):
    """
    Line of an order.

    ``price`` is the menu price at the time the order was placed.
    """
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(Integer, ForeignKey("orders.id"), index=True)
    menu_id = Column(Integer, ForeignKey("menu.id"))
    quantity = Column(Integer)
    price = Column(Float)

    def __repr__(self):
        return f"<OrderItem #{self.id} - order {self.order_id} - menu {self.menu_id} x{self.quantity}>"


class Reservation(Base):
    """Table reservation. Date and time are stored as sent."""
    __tablename__ = "reservations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=True)
    phone = Column(Text, nullable=True)
    email = Column(Text, nullable=True)
    date = Column(Text, nullable=True)
    time = Column(Text, nullable=True)
    party_size = Column(Integer, nullable=True)
    status = Column(String(20), default=ReservationStatus.PENDING.value)

    created_at = Column(DateTime, server_default=func.now())

    def __repr__(self):
        return f"<Reservation #{self.id} - {self.name} - {self.date} {self.time}>"


class Payment(Base):
    """
    Recorded payment for an order or a reservation.

    Nothing enforces that exactly one of ``order_id`` / ``reservation_id``
    is set, nor that there is a single payment per parent row.
    ``details`` holds JSON text.
    """
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=True, index=True)
    reservation_id = Column(Integer, ForeignKey("reservations.id"), nullable=True, index=True)
    amount = Column(Float, nullable=True)
    method = Column(String(50), nullable=True)
    status = Column(String(20), nullable=True)
    details = Column(Text, nullable=True)

    created_at = Column(DateTime, server_default=func.now())

    def __repr__(self):
        return f"<Payment #{self.id} - {self.amount} - {self.status}>"


class Feedback(Base):
    """Customer feedback entry."""
    __tablename__ = "feedback"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=True)
    email = Column(Text, nullable=True)
    phone = Column(Text, nullable=True)
    rating = Column(Integer, nullable=True)
    comment = Column(Text, nullable=True)

    created_at = Column(DateTime, server_default=func.now())

    def __repr__(self):
        return f"<Feedback #{self.id} - {self.name} - {self.rating}>"
