# organic_store/models/order.py
import uuid
from datetime import datetime, timezone

from sqlalchemy.ext.orderinglist import ordering_list
from sqlmodel import SQLModel, Field, Relationship

from organic_store.core.errors import InvalidStateError

# Forward-only happy path, with cancellation allowed until delivery
ALLOWED_TRANSITIONS: dict[str, set[str]] = {
    "pending": {"processing", "cancelled"},
    "processing": {"shipped", "cancelled"},
    "shipped": {"delivered", "cancelled"},
    "delivered": set(),
    "cancelled": set(),
}


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Order(SQLModel, table=True):
    """
    Immutable snapshot of a checked-out cart.

    Amounts are computed once at checkout and never recomputed; only
    `status` (and `payment_status`) change afterwards.

    Status lifecycle:
      pending -> processing -> shipped -> delivered
      pending | processing | shipped -> cancelled
    """

    __tablename__ = "orders"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    user_id: uuid.UUID = Field(
        foreign_key="users.id",
        index=True,
    )

    # Pricing snapshot
    subtotal: float = Field(ge=0)
    discount: float = Field(default=0, ge=0)
    tax: float = Field(ge=0)
    total: float = Field(ge=0)

    coupon_code: str | None = None

    status: str = Field(
        default="pending",
        index=True,
        description="Order status lifecycle",
    )

    # Shipping address
    shipping_street: str | None = None
    shipping_city: str | None = None
    shipping_state: str | None = None
    shipping_zip_code: str | None = None
    shipping_country: str | None = None

    payment_method: str = Field(default="cod")
    payment_status: str = Field(default="pending")

    estimated_delivery: datetime | None = None

    created_at: datetime = Field(
        default_factory=_now,
        index=True,
        description="Creation timestamp (UTC)",
    )
    updated_at: datetime = Field(default_factory=_now)

    items: list["OrderItem"] = Relationship(
        back_populates="order",
        sa_relationship_kwargs={
            "order_by": "OrderItem.position",
            "collection_class": ordering_list("position"),
            "cascade": "all, delete-orphan",
        },
    )

    # ---- state machine ----

    def can_transition_to(self, new_status: str) -> bool:
        return new_status in ALLOWED_TRANSITIONS.get(self.status, set())

    def advance_to(self, new_status: str) -> None:
        """
        Move to `new_status` following ALLOWED_TRANSITIONS.
        Setting the current status again is a no-op.
        """
        if new_status == self.status:
            return
        if not self.can_transition_to(new_status):
            raise InvalidStateError(
                f"Invalid status transition: {self.status} -> {new_status}"
            )
        self.status = new_status
        self.updated_at = _now()

    def cancel(self) -> bool:
        """
        Cancel the order.

        Returns True when the status actually changed, False when it was
        already cancelled.

        Raises:
            InvalidStateError: the order has been delivered.
        """
        if self.status == "delivered":
            raise InvalidStateError("Cannot cancel delivered order")
        if self.status == "cancelled":
            return False
        self.status = "cancelled"
        self.updated_at = _now()
        return True

    def mark_as_delivered(self) -> None:
        """Deliver from any live status; cancelled orders stay cancelled."""
        if self.status == "cancelled":
            raise InvalidStateError("Cannot deliver a cancelled order")
        self.status = "delivered"
        self.updated_at = _now()

    @property
    def shipping_address(self) -> dict[str, str | None]:
        return {
            "street": self.shipping_street,
            "city": self.shipping_city,
            "state": self.shipping_state,
            "zip_code": self.shipping_zip_code,
            "country": self.shipping_country,
        }


class OrderItem(SQLModel, table=True):
    """
    Line item inside an order.

    name / image / price are copied at checkout. `product_id` is kept as a
    plain reference (no foreign key) so orders survive product deletion.
    """

    __tablename__ = "order_items"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    order_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="orders.id",
        index=True,
    )

    product_id: uuid.UUID = Field(index=True)

    name: str

    quantity: int = Field(ge=1)

    # Pre-tax unit price captured when the product was added to the cart
    price: float

    image: str | None = None

    position: int | None = Field(default=None)

    order: Order | None = Relationship(back_populates="items")
