# organic_store/core/auth.py
import uuid

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlmodel import Session

from organic_store.core.errors import AuthError, ForbiddenError
from organic_store.core.security import decode_access_token
from organic_store.database import get_session
from organic_store.models.user import User

# HTTP Bearer scheme:
# - auto_error=False => missing Authorization header will NOT raise immediately
#   so public routes can still look at the caller (guest mode).
bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: Session = Depends(get_session),
) -> User | None:
    """
    Resolve the current principal from a bearer token.

    Flow:
      1. No Authorization header => guest => None.
      2. Decode JWT => extract 'sub' (user id).
      3. Load the user row; a deleted user is rejected.

    Raises:
        AuthError(401): if the token is malformed, expired or its user is gone.
    """
    if credentials is None:
        return None  # guest mode

    payload = decode_access_token(credentials.credentials)
    sub = payload.get("sub")
    if not sub:
        raise AuthError("Not authorized. Invalid or expired token.")

    try:
        user_id = uuid.UUID(sub)
    except ValueError:
        raise AuthError("Not authorized. Invalid or expired token.")

    user = session.get(User, user_id)
    if user is None:
        raise AuthError("User not found. Please login again.")
    return user


def require_auth(user: User | None = Depends(get_current_user)) -> User:
    """
    Enforce authentication; guests are rejected with 401.
    """
    if user is None:
        raise AuthError()
    return user


def require_admin(user: User = Depends(require_auth)) -> User:
    """
    Enforce admin role (403 otherwise).
    """
    if not user.is_admin:
        raise ForbiddenError("Access denied. Admin privileges required.")
    return user
