import pytest

from organic_store.models.product import Product

ADDRESS = {
    "street": "12 MG Road",
    "city": "Pune",
    "state": "MH",
    "zipCode": "411001",
    "country": "India",
}


def add(client, headers, product_id, quantity=1):
    res = client.post(
        "/api/cart/add",
        json={"productId": str(product_id), "quantity": quantity},
        headers=headers,
    )
    assert res.status_code == 200, res.text


def checkout(client, headers, **extra):
    body = {"shippingAddress": ADDRESS, **extra}
    return client.post("/api/orders", json=body, headers=headers)


def stock_of(session, product_id) -> int:
    session.expire_all()
    return session.get(Product, product_id).stock


def test_checkout_empty_cart(client, user_headers):
    res = checkout(client, user_headers)
    assert res.status_code == 400
    assert res.json()["message"] == "Cart is empty"


def test_checkout_creates_order(client, user_headers, make_product, session):
    product = make_product(price=100, stock=10)
    add(client, user_headers, product.id, 2)
    client.post(
        "/api/cart/apply-coupon", json={"couponCode": "ORGANIC20"}, headers=user_headers
    )

    res = checkout(client, user_headers, paymentMethod="upi")
    assert res.status_code == 201, res.text
    order = res.json()
    assert order["status"] == "pending"
    assert order["paymentMethod"] == "upi"
    assert order["paymentStatus"] == "pending"
    assert order["couponCode"] == "ORGANIC20"
    assert order["subtotal"] == pytest.approx(200)
    assert order["discount"] == pytest.approx(40)
    assert order["tax"] == pytest.approx(8)
    assert order["total"] == pytest.approx(168)
    assert order["shippingAddress"]["zipCode"] == "411001"
    assert order["estimatedDelivery"] is not None

    [item] = order["items"]
    assert item["name"] == product.name
    assert item["quantity"] == 2
    assert item["price"] == 100

    assert stock_of(session, product.id) == 8

    cart = client.get("/api/cart", headers=user_headers).json()
    assert cart["cart"]["items"] == []
    assert cart["cart"]["appliedCoupon"] is None


def test_order_keeps_price_snapshot(client, user_headers, make_product, session):
    apples = make_product(name="Apples", category="fruits", price=100)
    oats = make_product(name="Oats", category="grains", price=40)
    add(client, user_headers, apples.id, 1)
    add(client, user_headers, oats.id, 2)

    apples.price = 999
    session.add(apples)
    session.commit()

    order = checkout(client, user_headers).json()
    assert [(it["name"], it["price"], it["quantity"]) for it in order["items"]] == [
        ("Apples", 100, 1),
        ("Oats", 40, 2),
    ]
    assert order["subtotal"] == pytest.approx(180)
    assert client.get("/api/cart", headers=user_headers).json()["cart"]["items"] == []


def test_insufficient_stock_rolls_back(client, user_headers, make_product, session):
    plenty = make_product(name="Rice", stock=10)
    scarce = make_product(name="Saffron", stock=5)
    add(client, user_headers, plenty.id, 2)
    add(client, user_headers, scarce.id, 5)

    scarce.stock = 1
    session.add(scarce)
    session.commit()

    res = checkout(client, user_headers)
    assert res.status_code == 409
    body = res.json()
    assert body["success"] is False
    assert body["error"] == {"productId": str(scarce.id)}

    assert stock_of(session, plenty.id) == 10
    assert stock_of(session, scarce.id) == 1
    assert len(client.get("/api/cart", headers=user_headers).json()["cart"]["items"]) == 2
    assert client.get("/api/orders", headers=user_headers).json() == []


def test_negative_total_rejected(client, user_headers, make_product):
    product = make_product(price=50)
    add(client, user_headers, product.id, 1)
    client.post(
        "/api/cart/apply-coupon", json={"couponCode": "SAVE100"}, headers=user_headers
    )

    res = checkout(client, user_headers)
    assert res.status_code == 400


def test_list_and_get_orders(client, register, make_product):
    owner, _ = register()
    other, _ = register(email="other@example.com", name="Other")
    product = make_product()
    add(client, owner, product.id, 1)
    order = checkout(client, owner).json()

    res = client.get("/api/orders", headers=owner)
    assert [o["id"] for o in res.json()] == [order["id"]]
    assert client.get("/api/orders", headers=other).json() == []

    assert client.get(f"/api/orders/{order['id']}", headers=owner).status_code == 200
    assert client.get(f"/api/orders/{order['id']}", headers=other).status_code == 403


def test_cancel_restocks(client, user_headers, make_product, session):
    product = make_product(stock=10)
    add(client, user_headers, product.id, 3)
    order = checkout(client, user_headers).json()
    assert stock_of(session, product.id) == 7

    res = client.put(f"/api/orders/{order['id']}/cancel", headers=user_headers)
    assert res.status_code == 200
    assert res.json()["status"] == "cancelled"
    assert stock_of(session, product.id) == 10

    # Cancelling again does not restock twice
    res = client.put(f"/api/orders/{order['id']}/cancel", headers=user_headers)
    assert res.status_code == 200
    assert stock_of(session, product.id) == 10


def test_cancel_someone_elses_order(client, register, make_product):
    owner, _ = register()
    other, _ = register(email="other@example.com", name="Other")
    product = make_product()
    add(client, owner, product.id, 1)
    order = checkout(client, owner).json()

    res = client.put(f"/api/orders/{order['id']}/cancel", headers=other)
    assert res.status_code == 403


def test_admin_status_flow(client, user_headers, admin_headers, make_product):
    product = make_product()
    add(client, user_headers, product.id, 1)
    order = checkout(client, user_headers).json()
    url = f"/api/orders/{order['id']}/status"

    res = client.put(url, json={"status": "shipped"}, headers=admin_headers)
    assert res.status_code == 409

    for status in ("processing", "shipped", "delivered"):
        res = client.put(url, json={"status": status}, headers=admin_headers)
        assert res.status_code == 200, res.text
        assert res.json()["status"] == status

    res = client.put(f"/api/orders/{order['id']}/cancel", headers=user_headers)
    assert res.status_code == 409
    assert res.json()["message"] == "Cannot cancel delivered order"


def test_admin_endpoints_forbidden_for_users(client, user_headers, make_product):
    product = make_product()
    add(client, user_headers, product.id, 1)
    order = checkout(client, user_headers).json()

    assert client.get("/api/orders/admin/all", headers=user_headers).status_code == 403
    res = client.put(
        f"/api/orders/{order['id']}/status",
        json={"status": "processing"},
        headers=user_headers,
    )
    assert res.status_code == 403


def test_admin_lists_all_orders(client, register, admin_headers, make_product):
    product = make_product()
    for email in ("a@example.com", "b@example.com"):
        headers, _ = register(email=email, name="Buyer")
        add(client, headers, product.id, 1)
        checkout(client, headers)

    res = client.get("/api/orders/admin/all", headers=admin_headers)
    assert res.status_code == 200
    assert len(res.json()) == 2


def test_admin_can_view_any_order(client, user_headers, admin_headers, make_product):
    product = make_product()
    add(client, user_headers, product.id, 1)
    order = checkout(client, user_headers).json()

    res = client.get(f"/api/orders/{order['id']}", headers=admin_headers)
    assert res.status_code == 200
