# organic_store/services/product_service.py
import uuid

from sqlmodel import Session

from organic_store.core.errors import NotFoundError
from organic_store.models.product import CATEGORIES, Product
from organic_store.repositories.product_repo import ProductRepository
from organic_store.schemas.product import ProductCreate, ProductFilters, ProductUpdate


class ProductService:
    """
    Business logic for the product catalog.

    Responsibilities:
      - storefront filtering (active products only)
      - admin CRUD (enforced at router via require_admin)
    """

    def __init__(self, repo: ProductRepository):
        self.repo = repo

    def list_products(self, session: Session, filters: ProductFilters) -> list[Product]:
        category = filters.category
        if category and category.lower() == "all":
            category = None

        return self.repo.list_products(
            session,
            category=category,
            min_price=filters.min_price,
            max_price=filters.max_price,
            search=filters.search,
            sort=filters.sort,
            skip=filters.skip,
            limit=filters.limit,
        )

    def list_by_category(self, session: Session, category: str) -> list[Product]:
        category = category.lower()
        if category not in CATEGORIES:
            return []
        return self.repo.list_products(session, category=category, limit=500)

    def get_product(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.repo.get_by_id(session, product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product

    def create_product(self, session: Session, payload: ProductCreate) -> Product:
        product = Product(**payload.model_dump())
        return self.repo.create(session, product)

    def update_product(
        self,
        session: Session,
        product_id: uuid.UUID,
        payload: ProductUpdate,
    ) -> Product:
        """
        Partial update of a product; only provided fields change.
        """
        product = self.get_product(session, product_id)

        for field, value in payload.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(product, field, value)

        return self.repo.update(session, product)

    def delete_product(self, session: Session, product_id: uuid.UUID) -> None:
        """
        Delete a product. Cart lines and wishlist entries pointing at it
        go too; placed orders keep their snapshot.
        """
        product = self.get_product(session, product_id)
        self.repo.delete(session, product)
