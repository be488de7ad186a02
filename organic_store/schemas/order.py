# organic_store/schemas/order.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, field_validator

from organic_store.schemas.common import ApiModel

OrderStatus = Literal["pending", "processing", "shipped", "delivered", "cancelled"]
PaymentMethod = Literal["cod", "card", "upi", "netbanking"]
PaymentStatus = Literal["pending", "completed", "failed"]


class ShippingAddress(ApiModel):
    street: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str | None = None

    @field_validator("street", "city", "state", "zip_code", "country")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None


class OrderCreate(ApiModel):
    """
    Payload for creating an order from the current cart.

    User provides:
      - shipping address
      - payment method (defaults to cash on delivery)

    Backend derives:
      - user_id from token
      - status / payment_status = 'pending'
      - items, amounts and coupon from the cart
    """

    model_config = ConfigDict(extra="forbid")

    shipping_address: ShippingAddress | None = None
    payment_method: PaymentMethod = "cod"

    @field_validator("payment_method", mode="before")
    @classmethod
    def default_payment(cls, v):
        return v or "cod"


class OrderItemRead(ApiModel):
    product_id: uuid.UUID
    name: str
    quantity: int
    price: float
    image: str | None = None


class OrderRead(ApiModel):
    id: uuid.UUID
    user_id: uuid.UUID
    items: list[OrderItemRead]
    subtotal: float
    discount: float
    tax: float
    total: float
    coupon_code: str | None = None
    status: OrderStatus
    shipping_address: ShippingAddress
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    estimated_delivery: datetime | None = None
    created_at: datetime
    updated_at: datetime


class OrderStatusUpdate(ApiModel):
    """
    Admin payload to change order status.
    """

    model_config = ConfigDict(extra="forbid")

    status: OrderStatus
