# organic_store/schemas/wishlist.py
import uuid
from datetime import datetime

from organic_store.schemas.common import ApiModel
from organic_store.schemas.product import ProductRead


class WishlistAdd(ApiModel):
    product_id: uuid.UUID


class WishlistItemRead(ApiModel):
    product_id: uuid.UUID
    product: ProductRead | None = None
    added_at: datetime


class WishlistRead(ApiModel):
    id: uuid.UUID
    user_id: uuid.UUID
    items: list[WishlistItemRead]
    updated_at: datetime
