# organic_store/routers/orders.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from organic_store.core.auth import require_admin, require_auth
from organic_store.core.config import get_settings
from organic_store.database import get_session
from organic_store.models.user import User
from organic_store.repositories.cart_repo import CartRepository
from organic_store.repositories.order_repo import OrderRepository
from organic_store.repositories.product_repo import ProductRepository
from organic_store.schemas.order import OrderCreate, OrderRead, OrderStatusUpdate
from organic_store.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])

order_repo = OrderRepository()
cart_repo = CartRepository()
product_repo = ProductRepository()
service = OrderService(
    order_repo,
    cart_repo,
    product_repo,
    estimated_delivery_days=get_settings().ESTIMATED_DELIVERY_DAYS,
)


# -------- User-facing endpoints --------


@router.post(
    "",
    response_model=OrderRead,
    status_code=status.HTTP_201_CREATED,
)
def create_order(
    payload: OrderCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Create an order from the current user's cart.

    Stock is deducted and the cart emptied in the same transaction.
    """
    return service.create_order_from_cart(session, current_user.id, payload)


@router.get("", response_model=list[OrderRead])
def list_my_orders(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
    skip: int = 0,
    limit: int = 50,
):
    """
    List the authenticated user's orders, newest first.
    """
    return service.list_user_orders(session, current_user.id, skip, limit)


# -------- Admin endpoints --------
# Registered before /{order_id} so "admin" is not parsed as an id.


@router.get(
    "/admin/all",
    response_model=list[OrderRead],
    dependencies=[Depends(require_admin)],
)
def list_all_orders(
    session: Session = Depends(get_session),
    skip: int = 0,
    limit: int = 50,
):
    """
    List all orders (admin only).
    """
    return service.list_all_orders(session, skip, limit)


@router.put(
    "/{order_id}/status",
    response_model=OrderRead,
    dependencies=[Depends(require_admin)],
)
def update_order_status(
    order_id: uuid.UUID,
    payload: OrderStatusUpdate,
    session: Session = Depends(get_session),
):
    """
    Update order status (admin only).

      pending -> processing -> shipped -> delivered

      pending / processing / shipped -> cancelled
    """
    return service.update_status(session, order_id, payload)


# -------- Owner endpoints --------


@router.get("/{order_id}", response_model=OrderRead)
def get_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Get a single order (owner or admin).
    """
    return service.get_order(session, current_user, order_id)


@router.put("/{order_id}/cancel", response_model=OrderRead)
def cancel_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Cancel one of your own orders. Delivered orders cannot be cancelled.
    """
    return service.cancel_order(session, current_user, order_id)
