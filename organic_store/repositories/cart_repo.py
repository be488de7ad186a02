# organic_store/repositories/cart_repo.py
import uuid

from sqlmodel import Session, select

from organic_store.models.cart import Cart


class CartRepository:

    def get_for_user(self, session: Session, user_id: uuid.UUID) -> Cart | None:
        stmt = select(Cart).where(Cart.user_id == user_id)
        return session.exec(stmt).first()

    def get_or_create(self, session: Session, user_id: uuid.UUID) -> Cart:
        """
        Return the user's cart, creating an empty one on first use.
        """
        cart = self.get_for_user(session, user_id)
        if cart is None:
            cart = Cart(user_id=user_id)
            session.add(cart)
            session.commit()
            session.refresh(cart)
        return cart

    def add(self, session: Session, cart: Cart) -> Cart:
        """Stage a cart without committing (multi-step writes)."""
        session.add(cart)
        session.flush()
        return cart

    def save(self, session: Session, cart: Cart) -> Cart:
        session.add(cart)
        session.commit()
        session.refresh(cart)
        return cart
