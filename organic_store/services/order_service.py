# organic_store/services/order_service.py
import logging
import uuid
from datetime import datetime, timedelta, timezone

from sqlmodel import Session

from organic_store.core.errors import (
    EmptyCartError,
    ForbiddenError,
    InsufficientStockError,
    NotFoundError,
    ValidationError,
)
from organic_store.models.order import Order, OrderItem
from organic_store.models.user import User
from organic_store.repositories.cart_repo import CartRepository
from organic_store.repositories.order_repo import OrderRepository
from organic_store.repositories.product_repo import ProductRepository
from organic_store.schemas.order import (
    OrderCreate,
    OrderRead,
    OrderStatusUpdate,
    ShippingAddress,
)

logger = logging.getLogger(__name__)


class OrderService:
    """
    Business logic for orders.

    Responsibilities:
      - Create order from cart (snapshot lines, amounts and coupon)
      - Deduct stock atomically per line
      - Clear cart after success
      - Ownership checks and the order status state machine

    Checkout and cancellation each run in a single DB transaction: either
    every write lands or none does.
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
        estimated_delivery_days: int = 3,
    ):
        self.order_repo = order_repo
        self.cart_repo = cart_repo
        self.product_repo = product_repo
        self.estimated_delivery_days = estimated_delivery_days

    # -------- User-facing operations --------

    def create_order_from_cart(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: OrderCreate,
    ) -> OrderRead:
        """
        Convert the current user's cart into an Order.

        Steps:
          1. Load cart; error if empty.
          2. Snapshot every line (product name/image, line price/quantity).
          3. Compute subtotal / discount / tax / total with the cart formulas.
          4. Create Order row (status='pending', payment_status='pending').
          5. Deduct stock per line (conditional UPDATE, fails on shortage).
          6. Clear cart.
          7. Commit; any failure rolls everything back.
        """
        # 1) Load cart
        cart = self.cart_repo.get_for_user(session, user_id)
        if cart is None or not cart.items:
            raise EmptyCartError()

        # 2) Snapshot lines
        order_items: list[OrderItem] = []
        for ci in cart.items:
            product = ci.product
            if product is None:
                raise ValidationError(f"Product {ci.product_id} is no longer available")
            order_items.append(
                OrderItem(
                    product_id=ci.product_id,
                    name=product.name,
                    quantity=ci.quantity,
                    price=ci.price,
                    image=product.image,
                )
            )

        # 3) Amounts, evaluated once
        totals = cart.summary()
        if totals["total"] < 0:
            raise ValidationError(
                "Order total cannot be negative; the coupon discount exceeds the subtotal"
            )

        address = payload.shipping_address or ShippingAddress()
        order = Order(
            user_id=user_id,
            subtotal=totals["subtotal"],
            discount=totals["discount"],
            tax=totals["tax"],
            total=totals["total"],
            coupon_code=cart.coupon_code,
            status="pending",
            shipping_street=address.street,
            shipping_city=address.city,
            shipping_state=address.state,
            shipping_zip_code=address.zip_code,
            shipping_country=address.country,
            payment_method=payload.payment_method,
            payment_status="pending",
            estimated_delivery=datetime.now(timezone.utc)
            + timedelta(days=self.estimated_delivery_days),
        )
        for item in order_items:
            order.items.append(item)

        try:
            # 4) Persist order
            self.order_repo.stage(session, order)

            # 5) Deduct stock
            for item in order_items:
                if not self.product_repo.decrease_stock(
                    session, item.product_id, item.quantity
                ):
                    raise InsufficientStockError(
                        f"Insufficient stock for {item.name}",
                        details={"productId": str(item.product_id)},
                    )

            # 6) Clear cart
            cart.clear()
            self.cart_repo.add(session, cart)

            # 7) Commit transaction
            session.commit()
        except InsufficientStockError as exc:
            session.rollback()
            logger.warning("Checkout aborted for user %s: %s", user_id, exc.message)
            raise
        except Exception:
            session.rollback()
            logger.exception("Checkout failed for user %s", user_id)
            raise

        session.refresh(order)
        logger.info(
            "Order %s placed by user %s (total=%.2f)", order.id, user_id, order.total
        )
        return self._to_read(order)

    def list_user_orders(
        self,
        session: Session,
        user_id: uuid.UUID,
        skip: int = 0,
        limit: int = 50,
    ) -> list[OrderRead]:
        """
        List orders for the given user, newest first.
        """
        orders = self.order_repo.list_for_user(session, user_id, skip, limit)
        return [self._to_read(o) for o in orders]

    def get_order(
        self,
        session: Session,
        current_user: User,
        order_id: uuid.UUID,
    ) -> OrderRead:
        """
        Get a single order.

        - 404 if order not found
        - 403 unless the caller owns it or is an admin
        """
        order = self._get_or_404(session, order_id)
        if order.user_id != current_user.id and not current_user.is_admin:
            raise ForbiddenError("Not authorized to view this order")
        return self._to_read(order)

    def cancel_order(
        self,
        session: Session,
        current_user: User,
        order_id: uuid.UUID,
    ) -> OrderRead:
        """
        Cancel an order owned by the caller and put its units back in stock.

        Raises:
            ForbiddenError(403): caller does not own the order.
            InvalidStateError(409): the order was already delivered.
        """
        order = self._get_or_404(session, order_id)
        if order.user_id != current_user.id:
            raise ForbiddenError("Not authorized to cancel this order")

        self._cancel_and_restock(session, order)
        return self._to_read(order)

    # -------- Admin operations --------

    def list_all_orders(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
    ) -> list[OrderRead]:
        orders = self.order_repo.list_all(session, skip, limit)
        return [self._to_read(o) for o in orders]

    def update_status(
        self,
        session: Session,
        order_id: uuid.UUID,
        payload: OrderStatusUpdate,
    ) -> OrderRead:
        """
        Admin-only status update:

          pending    -> processing, cancelled
          processing -> shipped, cancelled
          shipped    -> delivered, cancelled
          any live   -> delivered (mark as delivered)
          delivered / cancelled -> (no change)

        Invalid transitions raise InvalidStateError (409).
        """
        order = self._get_or_404(session, order_id)
        new = payload.status

        if new == "cancelled":
            self._cancel_and_restock(session, order)
            return self._to_read(order)

        if new == "delivered":
            if order.status != "delivered":
                order.mark_as_delivered()
        else:
            order.advance_to(new)

        self.order_repo.stage(session, order)
        session.commit()
        session.refresh(order)
        logger.info("Order %s moved to %s", order.id, order.status)
        return self._to_read(order)

    # -------- Helpers --------

    def _get_or_404(self, session: Session, order_id: uuid.UUID) -> Order:
        order = self.order_repo.get_by_id(session, order_id)
        if not order:
            raise NotFoundError("Order not found")
        return order

    def _cancel_and_restock(self, session: Session, order: Order) -> None:
        if not order.cancel():
            return

        try:
            for item in order.items:
                restocked = self.product_repo.increase_stock(
                    session, item.product_id, item.quantity
                )
                if restocked is None:
                    logger.warning(
                        "Product %s of order %s no longer exists; not restocked",
                        item.product_id,
                        order.id,
                    )
            self.order_repo.stage(session, order)
            session.commit()
        except Exception:
            session.rollback()
            logger.exception("Cancelling order %s failed", order.id)
            raise

        session.refresh(order)
        logger.info("Order %s cancelled", order.id)

    @staticmethod
    def _to_read(order: Order) -> OrderRead:
        return OrderRead.model_validate(order)
