# organic_store/repositories/order_repo.py
import uuid

from sqlalchemy.orm import selectinload
from sqlmodel import Session, col, select

from organic_store.models.order import Order


class OrderRepository:
    """
    Reads orders (items eager-loaded) and stages writes.

    Items are persisted through the `Order.items` relationship. Nothing here
    commits: checkout and cancellation span stock updates too, so the
    service calls session.commit() / session.rollback().
    """

    @staticmethod
    def _newest_first(stmt, skip: int, limit: int):
        return (
            stmt.options(selectinload(Order.items))
            .order_by(col(Order.created_at).desc())
            .offset(skip)
            .limit(limit)
        )

    def list_for_user(
        self,
        session: Session,
        user_id: uuid.UUID,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Order]:
        stmt = select(Order).where(Order.user_id == user_id)
        return list(session.exec(self._newest_first(stmt, skip, limit)).all())

    def list_all(self, session: Session, skip: int = 0, limit: int = 50) -> list[Order]:
        return list(session.exec(self._newest_first(select(Order), skip, limit)).all())

    def get_by_id(self, session: Session, order_id: uuid.UUID) -> Order | None:
        return session.get(Order, order_id, options=[selectinload(Order.items)])

    def stage(self, session: Session, order: Order) -> Order:
        """Add/flush an order so its id and item ids are assigned."""
        session.add(order)
        session.flush()
        return order
