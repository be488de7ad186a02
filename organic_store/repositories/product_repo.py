# organic_store/repositories/product_repo.py
import uuid

from sqlalchemy import delete, update
from sqlalchemy.orm.util import identity_key
from sqlmodel import Session, col, select

from organic_store.core.errors import ValidationError
from organic_store.models.cart import CartItem
from organic_store.models.product import Product
from organic_store.models.wishlist import WishlistItem


class ProductRepository:
    """
    Data access layer for Product, including the stock ledger writes.

    - Pure DB operations (CRUD + queries).
    - Stock changes are single conditional UPDATE statements so that two
      concurrent checkouts cannot drive stock below zero.
    - No commits in the stock methods; the caller owns the transaction.
    """

    # ----- Products -----

    def get_by_id(self, session: Session, product_id: uuid.UUID) -> Product | None:
        return session.get(Product, product_id)

    def list_products(
        self,
        session: Session,
        *,
        category: str | None = None,
        min_price: float | None = None,
        max_price: float | None = None,
        search: str | None = None,
        sort: str | None = None,
        skip: int = 0,
        limit: int = 100,
        only_active: bool = True,
    ) -> list[Product]:
        stmt = select(Product)
        if only_active:
            stmt = stmt.where(Product.is_active == True)  # noqa: E712
        if category:
            stmt = stmt.where(Product.category == category.lower())
        if min_price is not None:
            stmt = stmt.where(Product.price >= min_price)
        if max_price is not None:
            stmt = stmt.where(Product.price <= max_price)
        if search:
            # Match % and _ literally
            term = (
                search.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
            )
            stmt = stmt.where(col(Product.name).ilike(f"%{term}%", escape="\\"))

        if sort in ("price", "rating", "name"):
            stmt = stmt.order_by(getattr(Product, sort))
        else:
            stmt = stmt.order_by(col(Product.created_at).desc())

        stmt = stmt.offset(skip).limit(limit)
        return list(session.exec(stmt).all())

    def create(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def update(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def delete(self, session: Session, product: Product) -> None:
        """
        Delete a product along with cart lines and wishlist entries that
        point at it. Order lines keep their snapshot.
        """
        session.execute(delete(CartItem).where(col(CartItem.product_id) == product.id))
        session.execute(
            delete(WishlistItem).where(col(WishlistItem.product_id) == product.id)
        )
        session.delete(product)
        session.commit()

    # ----- Stock ledger -----

    def decrease_stock(
        self,
        session: Session,
        product_id: uuid.UUID,
        quantity: int,
    ) -> bool:
        """
        Atomically take `quantity` units out of stock.

            UPDATE products SET stock = stock - :q
            WHERE id = :id AND stock >= :q

        Returns True iff the row matched (enough stock); stock is left
        untouched otherwise.
        """
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1")

        stmt = (
            update(Product)
            .where(col(Product.id) == product_id, col(Product.stock) >= quantity)
            .values(stock=Product.stock - quantity)
            .execution_options(synchronize_session=False)
        )
        result = session.execute(stmt)
        self._expire_stock(session, product_id)
        return result.rowcount == 1

    def increase_stock(
        self,
        session: Session,
        product_id: uuid.UUID,
        quantity: int,
    ) -> int | None:
        """
        Atomically add `quantity` units; returns the new stock level, or
        None if the product no longer exists.
        """
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1")

        stmt = (
            update(Product)
            .where(col(Product.id) == product_id)
            .values(stock=Product.stock + quantity)
            .execution_options(synchronize_session=False)
        )
        result = session.execute(stmt)
        if result.rowcount != 1:
            return None

        self._expire_stock(session, product_id)
        product = session.get(Product, product_id)
        return product.stock if product else None

    @staticmethod
    def _expire_stock(session: Session, product_id: uuid.UUID) -> None:
        # A loaded Product must re-read stock after a bulk UPDATE
        product = session.identity_map.get(identity_key(Product, product_id))
        if product is not None:
            session.expire(product, ["stock", "updated_at"])
