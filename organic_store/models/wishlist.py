# organic_store/models/wishlist.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import UniqueConstraint
from sqlalchemy.ext.orderinglist import ordering_list
from sqlmodel import SQLModel, Field, Relationship

from organic_store.core.errors import DuplicateError
from organic_store.models.product import Product


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Wishlist(SQLModel, table=True):
    """
    Per-user set of saved products, each entry stamped with its add time.
    """

    __tablename__ = "wishlists"

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

    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)

    items: list["WishlistItem"] = Relationship(
        back_populates="wishlist",
        sa_relationship_kwargs={
            "order_by": "WishlistItem.position",
            "collection_class": ordering_list("position"),
            "cascade": "all, delete-orphan",
        },
    )

    def contains(self, product_id: uuid.UUID) -> bool:
        return any(it.product_id == product_id for it in self.items)

    def add(self, product_id: uuid.UUID) -> "WishlistItem":
        if self.contains(product_id):
            raise DuplicateError("Product already in wishlist")
        item = WishlistItem(product_id=product_id)
        self.items.append(item)
        self.updated_at = _now()
        return item

    def remove(self, product_id: uuid.UUID) -> None:
        for item in [it for it in self.items if it.product_id == product_id]:
            self.items.remove(item)
        self.updated_at = _now()

    def clear(self) -> None:
        self.items.clear()
        self.updated_at = _now()

    def dedupe(self) -> int:
        """
        Collapse duplicate entries, keeping the first occurrence of each
        product. Returns the number of entries dropped.
        """
        seen: set[uuid.UUID] = set()
        duplicates = []
        for item in self.items:
            if item.product_id in seen:
                duplicates.append(item)
            else:
                seen.add(item.product_id)

        for item in duplicates:
            self.items.remove(item)
        return len(duplicates)


class WishlistItem(SQLModel, table=True):
    __tablename__ = "wishlist_items"
    __table_args__ = (
        UniqueConstraint(
            "wishlist_id", "product_id", name="uq_wishlist_items_wishlist_product"
        ),
    )

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    wishlist_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="wishlists.id",
        index=True,
    )

    product_id: uuid.UUID = Field(
        foreign_key="products.id",
        index=True,
    )

    added_at: datetime = Field(default_factory=_now)

    position: int | None = Field(default=None)

    wishlist: Wishlist | None = Relationship(back_populates="items")

    product: Product | None = Relationship()
