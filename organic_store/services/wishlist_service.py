# organic_store/services/wishlist_service.py
import uuid

from sqlmodel import Session

from organic_store.core.errors import NotFoundError
from organic_store.repositories.product_repo import ProductRepository
from organic_store.repositories.wishlist_repo import WishlistRepository
from organic_store.schemas.wishlist import WishlistRead


class WishlistService:
    """
    Business logic for the per-user wishlist (a set of products).
    """

    def __init__(self, repo: WishlistRepository, product_repo: ProductRepository):
        self.repo = repo
        self.product_repo = product_repo

    def get_wishlist(self, session: Session, user_id: uuid.UUID) -> WishlistRead:
        wishlist = self.repo.get_or_create(session, user_id)
        return WishlistRead.model_validate(wishlist)

    def add_product(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
    ) -> WishlistRead:
        """
        Raises:
            NotFoundError(404): unknown product.
            DuplicateError(409): product already saved; wishlist unchanged.
        """
        if self.product_repo.get_by_id(session, product_id) is None:
            raise NotFoundError("Product not found")

        wishlist = self.repo.get_or_create(session, user_id)
        wishlist.add(product_id)
        wishlist = self.repo.save(session, wishlist)
        return WishlistRead.model_validate(wishlist)

    def remove_product(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
    ) -> WishlistRead:
        wishlist = self.repo.get_or_create(session, user_id)
        wishlist.remove(product_id)
        wishlist = self.repo.save(session, wishlist)
        return WishlistRead.model_validate(wishlist)

    def clear(self, session: Session, user_id: uuid.UUID) -> WishlistRead:
        wishlist = self.repo.get_or_create(session, user_id)
        wishlist.clear()
        wishlist = self.repo.save(session, wishlist)
        return WishlistRead.model_validate(wishlist)
