# organic_store/services/auth_service.py
import logging

from sqlmodel import Session

from organic_store.core.errors import AuthError, ConflictError
from organic_store.core.security import (
    create_access_token,
    hash_password,
    verify_password,
)
from organic_store.models.cart import Cart
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

logger = logging.getLogger(__name__)


class AuthService:
    """
    Business logic for accounts.

    Responsibilities:
      - registration (unique email, hashed password, empty cart)
      - credential check and token issuing
      - self profile read/update
    """

    def __init__(
        self,
        repo: UserRepository,
        cart_repo: CartRepository,
        wishlist_repo: WishlistRepository,
    ):
        self.repo = repo
        self.cart_repo = cart_repo
        self.wishlist_repo = wishlist_repo

    def _auth_response(self, user: User) -> AuthResponse:
        return AuthResponse(
            user=UserRead.model_validate(user),
            token=create_access_token(user.id),
        )

    def register(self, session: Session, payload: RegisterRequest) -> AuthResponse:
        """
        Create a user together with an empty cart.

        Raises:
            ConflictError(409): email already registered.
        """
        if self.repo.email_taken(session, payload.email):
            raise ConflictError("User with this email already exists")

        user = User(
            name=payload.name,
            email=payload.email,
            password_hash=hash_password(payload.password),
        )
        self.repo.add(session, user)
        self.cart_repo.add(session, Cart(user_id=user.id))
        session.commit()
        session.refresh(user)

        logger.info("Registered user %s", user.id)
        return self._auth_response(user)

    def login(self, session: Session, payload: LoginRequest) -> AuthResponse:
        user = self.repo.get_by_email(session, payload.email)
        if user is None or not verify_password(payload.password, user.password_hash):
            raise AuthError("Invalid email or password")
        return self._auth_response(user)

    def get_me(self, session: Session, current_user: User) -> UserProfileRead:
        """Current user plus the product ids in their wishlist."""
        wishlist = self.wishlist_repo.get_for_user(session, current_user.id)
        product_ids = [it.product_id for it in wishlist.items] if wishlist else []
        return UserProfileRead(
            **UserRead.model_validate(current_user).model_dump(),
            wishlist=product_ids,
        )

    def update_profile(
        self,
        session: Session,
        current_user: User,
        payload: ProfileUpdate,
    ) -> UserRead:
        """
        Partial update of name / email.

        Raises:
            ConflictError(409): new email belongs to another account.
        """
        if payload.email and payload.email != current_user.email:
            if self.repo.email_taken(session, payload.email, exclude_id=current_user.id):
                raise ConflictError("User with this email already exists")
            current_user.email = payload.email

        if payload.name is not None:
            current_user.name = payload.name

        user = self.repo.save(session, current_user)
        return UserRead.model_validate(user)
