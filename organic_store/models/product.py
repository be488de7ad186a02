# organic_store/models/product.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field

from organic_store.core.errors import ValidationError

CATEGORIES: tuple[str, ...] = (
    "vegetables",
    "fruits",
    "nuts",
    "honey",
    "grains",
    "dairy",
    "herbs",
    "oils",
    "beverages",
)

DEFAULT_DESCRIPTION = (
    "100% organic, farm-fresh product. Sourced directly from local farmers. "
    "No pesticides, no chemicals. Pure natural goodness."
)


class Product(SQLModel, table=True):
    """
    Catalog entry.

    Invariants:
      - price >= 0
      - stock >= 0 (enforced by the stock ledger methods below and by the
        atomic decrement in ProductRepository)
    """

    __tablename__ = "products"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=100,
        index=True,
        description="Display name, e.g. 'Organic Broccoli'",
    )

    category: str = Field(
        index=True,
        description="One of CATEGORIES",
    )

    price: float = Field(
        ge=0,
        index=True,
        description="Unit price",
    )

    image: str = Field(description="Product image URL")

    description: str = Field(default=DEFAULT_DESCRIPTION)

    rating: float = Field(default=4.5, ge=1, le=5)

    reviews: int = Field(default=0, ge=0)

    stock: int = Field(
        default=0,
        ge=0,
        description="How many units currently in stock",
    )

    is_new: bool = Field(default=False)

    is_active: bool = Field(
        default=True,
        index=True,
        description="Whether this product is visible on the storefront",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column_kwargs={"onupdate": lambda: datetime.now(timezone.utc)},
    )

    # ---- stock ledger ----

    def is_in_stock(self) -> bool:
        return self.stock > 0

    def decrease_stock(self, quantity: int) -> bool:
        """
        Take `quantity` units out of stock.

        Returns False (and leaves stock untouched) when fewer than
        `quantity` units are available.
        """
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1")
        if self.stock >= quantity:
            self.stock -= quantity
            return True
        return False

    def increase_stock(self, quantity: int) -> int:
        """Restock unconditionally; returns the new stock level."""
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1")
        self.stock += quantity
        return self.stock
