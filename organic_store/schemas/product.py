# organic_store/schemas/product.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, Field, field_validator

from organic_store.models.product import DEFAULT_DESCRIPTION
from organic_store.schemas.common import ApiModel

Category = Literal[
    "vegetables",
    "fruits",
    "nuts",
    "honey",
    "grains",
    "dairy",
    "herbs",
    "oils",
    "beverages",
]

SortField = Literal["price", "rating", "name"]


def _lower(v):
    return v.strip().lower() if isinstance(v, str) else v


class ProductCreate(ApiModel):
    """
    Payload for creating a product (admin).
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=100)
    category: Category
    price: float = Field(ge=0)
    image: str
    description: str = DEFAULT_DESCRIPTION
    rating: float = Field(default=4.5, ge=1, le=5)
    reviews: int = Field(default=0, ge=0)
    stock: int = Field(default=0, ge=0)
    is_new: bool = False
    is_active: bool = True

    @field_validator("category", mode="before")
    @classmethod
    def lower_category(cls, v):
        return _lower(v)

    @field_validator("name", "image")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class ProductUpdate(ApiModel):
    """
    Partial update payload for products.
    All fields are optional.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=100)
    category: Category | None = None
    price: float | None = Field(default=None, ge=0)
    image: str | None = None
    description: str | None = None
    rating: float | None = Field(default=None, ge=1, le=5)
    reviews: int | None = Field(default=None, ge=0)
    stock: int | None = Field(default=None, ge=0)
    is_new: bool | None = None
    is_active: bool | None = None

    @field_validator("category", mode="before")
    @classmethod
    def lower_category(cls, v):
        return _lower(v)

    @field_validator("name", "image")
    @classmethod
    def not_empty(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class ProductRead(ApiModel):
    id: uuid.UUID
    name: str
    category: str
    price: float
    image: str
    description: str
    rating: float
    reviews: int
    stock: int
    is_new: bool
    is_active: bool
    created_at: datetime
    updated_at: datetime


class ProductFilters(ApiModel):
    """
    Query filters for GET /products.

    `category="all"` means no category filter.
    """

    category: str | None = None
    min_price: float | None = Field(default=None, ge=0)
    max_price: float | None = Field(default=None, ge=0)
    search: str | None = None
    sort: SortField | None = None
    skip: int = Field(default=0, ge=0)
    limit: int = Field(default=100, ge=1, le=500)
