"""
Pydantic Schemas for Request/Response Validation

Request schemas are deliberately permissive: every field has a default,
and a missing, ``null`` or blank value falls back to it instead of
rejecting the request. Bodies use the camelCase keys the frontend sends
(``orderId``, ``reservationId``) where it sends them.
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class RequestBody(BaseModel):
    """Base for request bodies: null and "" mean "use the default"."""

    @field_validator("*", mode="before")
    @classmethod
    def null_to_default(cls, v: Any, info: ValidationInfo) -> Any:
        field = cls.model_fields[info.field_name]
        # Free-form JSON keeps an empty string as sent
        if v is None or (v == "" and field.annotation is not Any):
            return field.get_default(call_default_factory=True)
        return v


class OrderItemCreate(RequestBody):
    """Single requested line. Only the menu id and quantity are used."""
    id: Optional[int] = Field(None, examples=[1])
    qty: int = Field(default=1, examples=[2])


class CustomerInfo(RequestBody):
    """Customer contact details attached to an order."""
    name: str = Field(default="", examples=["Asha Rao"])
    email: str = Field(default="", examples=["asha@example.com"])
    phone: str = Field(default="", examples=["+919812345678"])


class OrderCreate(RequestBody):
    """Request schema for creating a new order."""
    items: List[OrderItemCreate] = Field(default_factory=list)
    customer: CustomerInfo = Field(default_factory=CustomerInfo)
    total: float = Field(default=0, examples=[500])


class ReservationCreate(RequestBody):
    """Request schema for booking a table."""
    name: str = Field(default="", examples=["A"])
    phone: str = Field(default="", examples=["+911234"])
    email: str = Field(default="", examples=[""])
    date: str = Field(default="", examples=["2024-01-01"])
    time: str = Field(default="", examples=["19:00"])
    party_size: int = Field(default=0, examples=[4])


class FeedbackCreate(RequestBody):
    """Request schema for leaving feedback."""
    name: str = ""
    email: str = ""
    phone: str = ""
    rating: int = Field(default=5, examples=[5])
    comment: str = ""


class PaymentCreate(RequestBody):
    """
    Request schema for recording a payment.

    ``details`` is any JSON value; it is stored serialized.
    """
    model_config = ConfigDict(populate_by_name=True)

    order_id: Optional[int] = Field(None, alias="orderId")
    reservation_id: Optional[int] = Field(None, alias="reservationId")
    amount: float = Field(default=0, examples=[100])
    method: str = Field(default="card", examples=["card", "upi", "cash"])
    details: Any = Field(default_factory=dict)


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class OrderCreateResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    order_id: int = Field(..., alias="orderId")


class ReservationCreateResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    reservation_id: int = Field(..., alias="reservationId")


class FeedbackCreateResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    feedback_id: int = Field(..., alias="feedbackId")


class PaymentCreateResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    payment_id: int = Field(..., alias="paymentId")


class MenuItemResponse(BaseModel):
    """Response schema for a menu entry."""
    id: int
    name: str
    description: Optional[str] = None
    price: float
    image: Optional[str] = None


class OrderItemResponse(BaseModel):
    """Order line joined with the menu item name (null once the item is gone)."""
    id: int
    order_id: Optional[int] = None
    menu_id: Optional[int] = None
    quantity: Optional[int] = None
    price: Optional[float] = None
    name: Optional[str] = None


class OrderResponse(BaseModel):
    """Response schema for a single order."""
    id: int
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    total: Optional[float] = None
    status: Optional[str] = None
    created_at: Optional[datetime] = None
    items: List[OrderItemResponse] = Field(default_factory=list)


class ReservationResponse(BaseModel):
    """Response schema for a single reservation."""
    id: int
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    party_size: Optional[int] = None
    status: Optional[str] = None
    created_at: Optional[datetime] = None


class FeedbackResponse(BaseModel):
    """Response schema for a feedback entry."""
    id: int
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    rating: Optional[int] = None
    comment: Optional[str] = None
    created_at: Optional[datetime] = None


class PaymentSummary(BaseModel):
    """Latest-payment fields merged into the admin views."""
    paid: bool = False
    payment_ref: Optional[int] = None
    payment_details: Any = None


class AdminOrderResponse(PaymentSummary):
    """Order as shown in the admin dashboard."""
    id: int
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    total: Optional[float] = None
    status: Optional[str] = None
    created_at: Optional[datetime] = None
    items: List[OrderItemResponse] = Field(default_factory=list)


class AdminReservationResponse(PaymentSummary):
    """Reservation as shown in the admin dashboard."""
    id: int
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    party_size: Optional[int] = None
    status: Optional[str] = None
    created_at: Optional[datetime] = None


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    detail: Optional[Any] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    database: str
    sms_service: str
    email_service: str
    timestamp: datetime
