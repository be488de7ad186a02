# organic_store/repositories/wishlist_repo.py
import logging
import uuid

from sqlmodel import Session, select

from organic_store.models.wishlist import Wishlist

logger = logging.getLogger(__name__)


class WishlistRepository:

    def get_for_user(self, session: Session, user_id: uuid.UUID) -> Wishlist | None:
        stmt = select(Wishlist).where(Wishlist.user_id == user_id)
        return session.exec(stmt).first()

    def get_or_create(self, session: Session, user_id: uuid.UUID) -> Wishlist:
        wishlist = self.get_for_user(session, user_id)
        if wishlist is None:
            wishlist = Wishlist(user_id=user_id)
            session.add(wishlist)
            session.commit()
            session.refresh(wishlist)
        return wishlist

    def save(self, session: Session, wishlist: Wishlist) -> Wishlist:
        """
        Persist the wishlist, collapsing duplicate product entries first.
        """
        dropped = wishlist.dedupe()
        if dropped:
            logger.warning(
                "Dropped %d duplicate wishlist entries for user %s",
                dropped,
                wishlist.user_id,
            )
        session.add(wishlist)
        session.commit()
        session.refresh(wishlist)
        return wishlist
