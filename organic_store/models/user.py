# organic_store/models/user.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    """
    Store account: a customer or an administrator.

    Guests have no row; they are simply requests without a bearer token.
    Every user owns exactly one cart (created at registration) and at most
    one wishlist (created on first use).
    """

    __tablename__ = "users"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(max_length=50)

    # Always stored lower-cased
    email: str = Field(unique=True, index=True)

    # bcrypt hash; never part of any response schema
    password_hash: str

    role: str = Field(
        default="user",
        index=True,
        description="user | admin",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column_kwargs={"onupdate": lambda: datetime.now(timezone.utc)},
    )

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
