import uuid

import pytest

from organic_store.core.errors import InvalidStateError, ValidationError
from organic_store.models.order import Order
from organic_store.models.product import Product
from organic_store.repositories.product_repo import ProductRepository


def make_order(status: str = "pending") -> Order:
    return Order(
        user_id=uuid.uuid4(),
        subtotal=100,
        tax=5,
        total=105,
        status=status,
    )


# ---- Product stock ledger ----


def test_decrease_stock_floor():
    product = Product(name="Honey", category="honey", price=10, image="x", stock=5)

    assert product.decrease_stock(6) is False
    assert product.stock == 5
    assert product.decrease_stock(5) is True
    assert product.stock == 0
    assert not product.is_in_stock()


def test_increase_stock():
    product = Product(name="Honey", category="honey", price=10, image="x", stock=1)
    assert product.increase_stock(4) == 5


def test_stock_quantity_must_be_positive():
    product = Product(name="Honey", category="honey", price=10, image="x", stock=1)
    with pytest.raises(ValidationError):
        product.decrease_stock(0)


def test_repository_decrease_is_conditional(session, make_product):
    product = make_product(stock=5)
    repo = ProductRepository()

    assert repo.decrease_stock(session, product.id, 6) is False
    assert repo.decrease_stock(session, product.id, 3) is True
    session.commit()

    assert session.get(Product, product.id).stock == 2


def test_repository_increase_returns_new_level(session, make_product):
    product = make_product(stock=2)
    repo = ProductRepository()

    assert repo.increase_stock(session, product.id, 3) == 5
    assert repo.increase_stock(session, uuid.uuid4(), 3) is None


# ---- Order state machine ----


@pytest.mark.parametrize(
    "start, target",
    [
        ("pending", "processing"),
        ("processing", "shipped"),
        ("shipped", "delivered"),
    ],
)
def test_forward_transitions(start, target):
    order = make_order(start)
    order.advance_to(target)
    assert order.status == target


@pytest.mark.parametrize(
    "start, target",
    [
        ("pending", "shipped"),
        ("shipped", "processing"),
        ("delivered", "processing"),
        ("cancelled", "pending"),
    ],
)
def test_invalid_transitions(start, target):
    order = make_order(start)
    with pytest.raises(InvalidStateError):
        order.advance_to(target)
    assert order.status == start


def test_cancel_delivered_order_fails():
    order = make_order("delivered")
    with pytest.raises(InvalidStateError, match="Cannot cancel delivered order"):
        order.cancel()


@pytest.mark.parametrize("status", ["pending", "processing", "shipped"])
def test_cancel_is_idempotent(status):
    order = make_order(status)
    assert order.cancel() is True
    assert order.cancel() is False
    assert order.status == "cancelled"


def test_mark_as_delivered_from_live_status():
    order = make_order("pending")
    order.mark_as_delivered()
    assert order.status == "delivered"


def test_cancelled_order_cannot_be_delivered():
    order = make_order("cancelled")
    with pytest.raises(InvalidStateError):
        order.mark_as_delivered()
