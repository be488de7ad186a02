# organic_store/routers/wishlist.py
import uuid

from fastapi import APIRouter, Depends
from sqlmodel import Session

from organic_store.core.auth import require_auth
from organic_store.database import get_session
from organic_store.models.user import User
from organic_store.repositories.product_repo import ProductRepository
from organic_store.repositories.wishlist_repo import WishlistRepository
from organic_store.schemas.wishlist import WishlistAdd, WishlistRead
from organic_store.services.wishlist_service import WishlistService

router = APIRouter(prefix="/wishlist", tags=["Wishlist"])

service = WishlistService(WishlistRepository(), ProductRepository())


@router.get("", response_model=WishlistRead)
def get_wishlist(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    return service.get_wishlist(session, current_user.id)


@router.post("/add", response_model=WishlistRead)
def add_to_wishlist(
    payload: WishlistAdd,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Save a product; adding one that is already saved is rejected.
    """
    return service.add_product(session, current_user.id, payload.product_id)


@router.delete("/remove/{product_id}", response_model=WishlistRead)
def remove_from_wishlist(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    return service.remove_product(session, current_user.id, product_id)


@router.delete("/clear", response_model=WishlistRead)
def clear_wishlist(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    return service.clear(session, current_user.id)
