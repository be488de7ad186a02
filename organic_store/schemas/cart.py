# organic_store/schemas/cart.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import Field, field_validator

from organic_store.schemas.common import ApiModel
from organic_store.schemas.product import ProductRead


class CartItemAdd(ApiModel):
    """
    Payload for POST /cart/add.
    """

    product_id: uuid.UUID
    quantity: int = Field(default=1, ge=1)


class CartItemUpdate(ApiModel):
    """
    Payload for PUT /cart/update.

    quantity <= 0 removes the line.
    """

    product_id: uuid.UUID
    quantity: int


class CouponApply(ApiModel):
    coupon_code: str

    @field_validator("coupon_code")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Please provide coupon code")
        return v


class AppliedCouponRead(ApiModel):
    code: str
    discount: float
    type: Literal["fixed", "percent"]


class CouponRead(ApiModel):
    code: str
    discount: float
    type: Literal["fixed", "percent"]
    description: str


class CartItemRead(ApiModel):
    """
    Read model for a single cart line, with the populated product.
    """

    id: uuid.UUID
    product_id: uuid.UUID
    product: ProductRead | None = None
    quantity: int
    price: float
    line_total: float


class CartRead(ApiModel):
    id: uuid.UUID
    user_id: uuid.UUID
    items: list[CartItemRead]
    applied_coupon: AppliedCouponRead | None = None
    created_at: datetime
    updated_at: datetime


class CartSummary(ApiModel):
    subtotal: float
    discount: float
    tax: float
    total: float


class CartWithSummary(ApiModel):
    cart: CartRead
    summary: CartSummary
