# organic_store/models/cart.py
import uuid
from datetime import datetime, timezone
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict
from sqlalchemy import UniqueConstraint
from sqlalchemy.ext.orderinglist import ordering_list
from sqlmodel import SQLModel, Field, Relationship

from organic_store.core.coupons import CouponTable
from organic_store.core.errors import InvalidCouponError, ValidationError
from organic_store.models.product import Product

# Fixed GST rate applied after discount
TAX_RATE = 0.05

MAX_LINE_QUANTITY = 20


class AppliedCoupon(BaseModel):
    """
    Value copy of a coupon rule taken at apply-time.
    Later changes to the coupon table do not affect it.
    """

    model_config = ConfigDict(frozen=True)

    code: str
    discount: float
    type: Literal["fixed", "percent"]


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _check_line_quantity(quantity: int) -> None:
    if quantity < 1:
        raise ValidationError("Quantity must be at least 1")
    if quantity > MAX_LINE_QUANTITY:
        raise ValidationError(f"Quantity cannot exceed {MAX_LINE_QUANTITY}")


class Cart(SQLModel, table=True):
    """
    Shopping cart aggregate, one per user.

    Holds ordered line items plus an optional applied coupon and owns the
    pricing formulas used by both the cart summary and checkout:

        subtotal = sum(price * quantity)
        discount = subtotal * d / 100 (percent) | d (fixed, never capped)
        tax      = (subtotal - discount) * TAX_RATE
        total    = subtotal - discount + tax

    Mutators only change in-memory state; CartRepository persists.
    """

    __tablename__ = "carts"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    user_id: uuid.UUID = Field(
        foreign_key="users.id",
        unique=True,
        index=True,
    )

    # Applied coupon, stored by value
    coupon_code: str | None = None
    coupon_discount: float | None = None
    coupon_type: str | None = None

    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)

    items: list["CartItem"] = Relationship(
        back_populates="cart",
        sa_relationship_kwargs={
            "order_by": "CartItem.position",
            "collection_class": ordering_list("position"),
            "cascade": "all, delete-orphan",
        },
    )

    # ---- line items ----

    def get_item(self, product_id: uuid.UUID) -> Optional["CartItem"]:
        return next((it for it in self.items if it.product_id == product_id), None)

    def add_item(
        self,
        product_id: uuid.UUID,
        quantity: int,
        unit_price: float,
    ) -> "CartItem":
        """
        Add `quantity` units of a product.

        An existing line is merged (quantity incremented, original price
        snapshot kept); otherwise a new line is appended with `unit_price`.
        Stock is checked by the caller.
        """
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1")

        existing = self.get_item(product_id)
        if existing:
            new_qty = existing.quantity + quantity
            _check_line_quantity(new_qty)
            existing.quantity = new_qty
            self._touch()
            return existing

        _check_line_quantity(quantity)
        if unit_price < 0:
            raise ValidationError("Price cannot be negative")

        item = CartItem(product_id=product_id, quantity=quantity, price=unit_price)
        self.items.append(item)
        self._touch()
        return item

    def update_quantity(self, product_id: uuid.UUID, quantity: int) -> None:
        """Overwrite a line's quantity; quantity <= 0 removes the line."""
        item = self.get_item(product_id)
        if item is None:
            return

        if quantity <= 0:
            self.remove_item(product_id)
            return

        _check_line_quantity(quantity)
        item.quantity = quantity
        self._touch()

    def remove_item(self, product_id: uuid.UUID) -> None:
        item = self.get_item(product_id)
        if item is not None:
            self.items.remove(item)
            self._touch()

    def clear(self) -> None:
        """Empty all lines and drop the applied coupon."""
        self.items.clear()
        self.remove_coupon()

    # ---- coupons ----

    @property
    def applied_coupon(self) -> AppliedCoupon | None:
        if not self.coupon_code or self.coupon_type is None:
            return None
        return AppliedCoupon(
            code=self.coupon_code,
            discount=self.coupon_discount or 0.0,
            type=self.coupon_type,
        )

    def apply_coupon(self, code: str, coupons: CouponTable) -> AppliedCoupon:
        """
        Look `code` up (case-insensitive) and store a value copy,
        replacing any coupon applied before.

        Raises:
            InvalidCouponError: unknown code; the current coupon is kept.
        """
        rule = coupons.lookup(code)
        if rule is None:
            raise InvalidCouponError()

        self.coupon_code = CouponTable.normalize(code)
        self.coupon_discount = rule.discount
        self.coupon_type = rule.type
        self._touch()
        return self.applied_coupon

    def remove_coupon(self) -> None:
        self.coupon_code = None
        self.coupon_discount = None
        self.coupon_type = None
        self._touch()

    # ---- pricing ----

    def calculate_subtotal(self) -> float:
        return sum((it.price * it.quantity for it in self.items), 0.0)

    def calculate_discount(self) -> float:
        coupon = self.applied_coupon
        if coupon is None:
            return 0.0

        if coupon.type == "percent":
            return self.calculate_subtotal() * coupon.discount / 100

        # Fixed discounts are not capped at the subtotal
        return coupon.discount

    def calculate_tax(self) -> float:
        return (self.calculate_subtotal() - self.calculate_discount()) * TAX_RATE

    def calculate_total(self) -> float:
        subtotal = self.calculate_subtotal()
        discount = self.calculate_discount()
        tax = (subtotal - discount) * TAX_RATE
        return subtotal - discount + tax

    def summary(self) -> dict[str, float]:
        subtotal = self.calculate_subtotal()
        discount = self.calculate_discount()
        tax = (subtotal - discount) * TAX_RATE
        return {
            "subtotal": subtotal,
            "discount": discount,
            "tax": tax,
            "total": subtotal - discount + tax,
        }

    def _touch(self) -> None:
        self.updated_at = _now()


class CartItem(SQLModel, table=True):
    """
    One cart line. A cart never holds two rows for the same product.

    `price` is the product price when the line was first added and does
    not follow later catalog price changes.
    """

    __tablename__ = "cart_items"
    __table_args__ = (
        UniqueConstraint("cart_id", "product_id", name="uq_cart_items_cart_product"),
    )

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    cart_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="carts.id",
        index=True,
    )

    product_id: uuid.UUID = Field(
        foreign_key="products.id",
        index=True,
    )

    quantity: int = Field(
        ge=1,
        le=MAX_LINE_QUANTITY,
        description="1..20",
    )

    price: float = Field(
        ge=0,
        description="Price when added to cart",
    )

    position: int | None = Field(default=None)

    cart: Cart | None = Relationship(back_populates="items")

    product: Product | None = Relationship()

    @property
    def line_total(self) -> float:
        return self.price * self.quantity
