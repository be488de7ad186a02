# organic_store/routers/products.py
import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from organic_store.core.auth import require_admin
from organic_store.database import get_session
from organic_store.repositories.product_repo import ProductRepository
from organic_store.schemas.common import MessageResponse
from organic_store.schemas.product import (
    ProductCreate,
    ProductFilters,
    ProductRead,
    ProductUpdate,
    SortField,
)
from organic_store.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["Products"])

repo = ProductRepository()
service = ProductService(repo)


# -------- Public endpoints --------


@router.get("", response_model=list[ProductRead])
def list_products(
    session: Session = Depends(get_session),
    category: str | None = None,
    min_price: float | None = Query(default=None, alias="minPrice", ge=0),
    max_price: float | None = Query(default=None, alias="maxPrice", ge=0),
    search: str | None = None,
    sort: SortField | None = None,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=500),
):
    """
    List active products.

    Query params:
      - category (``all`` = no filter)
      - minPrice / maxPrice
      - search: case-insensitive match on name
      - sort: price | rating | name (default newest first)
    """
    filters = ProductFilters(
        category=category,
        min_price=min_price,
        max_price=max_price,
        search=search,
        sort=sort,
        skip=skip,
        limit=limit,
    )
    return service.list_products(session, filters)


@router.get("/category/{category}", response_model=list[ProductRead])
def list_products_by_category(
    category: str,
    session: Session = Depends(get_session),
):
    """
    List active products of one category.
    """
    return service.list_by_category(session, category)


@router.get("/{product_id}", response_model=ProductRead)
def get_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Get a single product by id.
    """
    return service.get_product(session, product_id)


# -------- Admin endpoints --------


@router.post(
    "",
    response_model=ProductRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_product(
    payload: ProductCreate,
    session: Session = Depends(get_session),
):
    """
    Create a new product (admin only).
    """
    return service.create_product(session, payload)


@router.put(
    "/{product_id}",
    response_model=ProductRead,
    dependencies=[Depends(require_admin)],
)
def update_product(
    product_id: uuid.UUID,
    payload: ProductUpdate,
    session: Session = Depends(get_session),
):
    """
    Update an existing product (admin only).
    """
    return service.update_product(session, product_id, payload)


@router.delete(
    "/{product_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)],
)
def delete_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Delete a product (admin only).
    """
    service.delete_product(session, product_id)
    return MessageResponse(message="Product deleted successfully")
