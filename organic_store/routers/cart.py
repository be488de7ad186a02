# organic_store/routers/cart.py
import uuid

from fastapi import APIRouter, Depends
from sqlmodel import Session

from organic_store.core.auth import require_auth
from organic_store.core.coupons import get_coupon_table
from organic_store.database import get_session
from organic_store.models.user import User
from organic_store.repositories.cart_repo import CartRepository
from organic_store.repositories.product_repo import ProductRepository
from organic_store.schemas.cart import (
    CartItemAdd,
    CartItemUpdate,
    CartRead,
    CartWithSummary,
    CouponApply,
    CouponRead,
)
from organic_store.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["Cart"])

cart_repo = CartRepository()
product_repo = ProductRepository()
service = CartService(cart_repo, product_repo, get_coupon_table())


@router.get("", response_model=CartWithSummary)
def get_my_cart(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Get current user's cart with its price summary.
    The cart is created on first access.
    """
    return service.get_cart(session, current_user.id)


@router.get("/coupons", response_model=list[CouponRead])
def list_coupons():
    """
    List the coupon codes that can be applied.
    """
    return service.list_coupons()


@router.post("/add", response_model=CartRead)
def add_to_cart(
    payload: CartItemAdd,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Add product to the current user's cart (quantity defaults to 1).
    """
    return service.add_to_cart(session, current_user.id, payload)


@router.put("/update", response_model=CartRead)
def update_cart_item(
    payload: CartItemUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Set the quantity of a product in the cart; 0 or less removes it.
    """
    return service.update_quantity(session, current_user.id, payload)


@router.delete("/remove/{product_id}", response_model=CartRead)
def remove_cart_item(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Remove a product from the cart.
    """
    return service.remove_item(session, current_user.id, product_id)


@router.post("/apply-coupon", response_model=CartWithSummary)
def apply_coupon(
    payload: CouponApply,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Apply a coupon code and return the cart with recalculated totals.
    """
    return service.apply_coupon(session, current_user.id, payload)


@router.delete("/remove-coupon", response_model=CartRead)
def remove_coupon(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    return service.remove_coupon(session, current_user.id)


@router.delete("/clear", response_model=CartRead)
def clear_cart(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Remove every line and the applied coupon.
    """
    return service.clear_cart(session, current_user.id)
