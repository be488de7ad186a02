import uuid

import pytest

from organic_store.core.config import DEFAULT_COUPONS
from organic_store.core.coupons import CouponTable
from organic_store.core.errors import InvalidCouponError, ValidationError
from organic_store.models.cart import Cart

COUPONS = CouponTable(DEFAULT_COUPONS)


def new_cart() -> Cart:
    return Cart(user_id=uuid.uuid4())


def test_empty_cart_totals_are_zero():
    cart = new_cart()
    assert cart.summary() == {"subtotal": 0, "discount": 0, "tax": 0, "total": 0}


def test_percent_coupon_pricing():
    cart = new_cart()
    cart.add_item(uuid.uuid4(), 2, 100.0)
    cart.apply_coupon("ORGANIC20", COUPONS)

    assert cart.calculate_subtotal() == pytest.approx(200)
    assert cart.calculate_discount() == pytest.approx(40)
    assert cart.calculate_tax() == pytest.approx(8)
    assert cart.calculate_total() == pytest.approx(168)


def test_fixed_coupon_is_not_capped_at_subtotal():
    cart = new_cart()
    cart.add_item(uuid.uuid4(), 1, 50.0)
    cart.apply_coupon("SAVE100", COUPONS)

    totals = cart.summary()
    assert totals["discount"] == pytest.approx(100)
    assert totals["tax"] == pytest.approx(-2.5)
    assert totals["total"] == pytest.approx(-52.5)


def test_tax_without_coupon():
    cart = new_cart()
    cart.add_item(uuid.uuid4(), 3, 40.0)
    assert cart.calculate_tax() == pytest.approx(6)
    assert cart.calculate_total() == pytest.approx(126)


def test_adding_same_product_merges_and_keeps_first_price():
    cart = new_cart()
    pid = uuid.uuid4()
    cart.add_item(pid, 2, 100.0)
    cart.add_item(pid, 3, 120.0)

    assert len(cart.items) == 1
    assert cart.items[0].quantity == 5
    assert cart.items[0].price == 100.0


def test_lines_keep_insertion_order():
    cart = new_cart()
    first, second = uuid.uuid4(), uuid.uuid4()
    cart.add_item(first, 1, 10.0)
    cart.add_item(second, 1, 20.0)
    cart.add_item(first, 1, 10.0)

    assert [it.product_id for it in cart.items] == [first, second]


@pytest.mark.parametrize("quantity", [0, -1])
def test_update_quantity_non_positive_removes_line(quantity):
    cart = new_cart()
    pid = uuid.uuid4()
    cart.add_item(pid, 2, 10.0)

    cart.update_quantity(pid, quantity)
    assert cart.items == []


def test_update_quantity_unknown_product_is_noop():
    cart = new_cart()
    cart.add_item(uuid.uuid4(), 2, 10.0)
    cart.update_quantity(uuid.uuid4(), 5)
    assert cart.items[0].quantity == 2


def test_quantity_limit_on_merge():
    cart = new_cart()
    pid = uuid.uuid4()
    cart.add_item(pid, 15, 10.0)

    with pytest.raises(ValidationError):
        cart.add_item(pid, 6, 10.0)
    assert cart.items[0].quantity == 15


def test_add_rejects_zero_quantity():
    with pytest.raises(ValidationError):
        new_cart().add_item(uuid.uuid4(), 0, 10.0)


def test_coupon_code_is_case_insensitive_and_normalized():
    cart = new_cart()
    applied = cart.apply_coupon(" organic20 ", COUPONS)
    assert applied.code == "ORGANIC20"
    assert cart.coupon_code == "ORGANIC20"


def test_unknown_coupon_keeps_previous_one():
    cart = new_cart()
    cart.apply_coupon("WELCOME10", COUPONS)

    with pytest.raises(InvalidCouponError):
        cart.apply_coupon("NOPE", COUPONS)
    assert cart.applied_coupon.code == "WELCOME10"


def test_applying_a_second_coupon_replaces_the_first():
    cart = new_cart()
    cart.add_item(uuid.uuid4(), 1, 200.0)
    cart.apply_coupon("WELCOME10", COUPONS)
    cart.apply_coupon("FIRST50", COUPONS)

    assert cart.applied_coupon.code == "FIRST50"
    assert cart.calculate_discount() == pytest.approx(50)


def test_clear_drops_items_and_coupon():
    cart = new_cart()
    cart.add_item(uuid.uuid4(), 1, 10.0)
    cart.apply_coupon("FIRST50", COUPONS)

    cart.clear()
    assert cart.items == []
    assert cart.applied_coupon is None
    assert cart.calculate_total() == 0
