# organic_store/routers/auth.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from organic_store.core.auth import require_auth
from organic_store.database import get_session
from organic_store.models.user import User
from organic_store.repositories.cart_repo import CartRepository
from organic_store.repositories.user_repo import UserRepository
from organic_store.repositories.wishlist_repo import WishlistRepository
from organic_store.schemas.user import (
    AuthResponse,
    LoginRequest,
    ProfileUpdate,
    RegisterRequest,
    UserProfileRead,
    UserRead,
)
from organic_store.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])

service = AuthService(UserRepository(), CartRepository(), WishlistRepository())


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
)
def register(
    payload: RegisterRequest,
    session: Session = Depends(get_session),
):
    """
    Register a new user and return an access token.

    An empty cart is created for the user.
    """
    return service.register(session, payload)


@router.post("/login", response_model=AuthResponse)
def login(
    payload: LoginRequest,
    session: Session = Depends(get_session),
):
    """
    Exchange email + password for an access token.
    """
    return service.login(session, payload)


@router.get("/me", response_model=UserProfileRead)
def read_me(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Return the authenticated user's profile with wishlist product ids.
    """
    return service.get_me(session, current_user)


@router.put("/update-profile", response_model=UserRead)
def update_profile(
    payload: ProfileUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Update the authenticated user's name and/or email.
    """
    return service.update_profile(session, current_user, payload)
