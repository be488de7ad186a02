import uuid


def test_list_filters(client, make_product):
    make_product(name="Organic Broccoli", category="vegetables", price=80)
    make_product(name="Wild Honey", category="honey", price=450)
    make_product(name="Hidden Carrot", category="vegetables", price=60, is_active=False)

    res = client.get("/api/products")
    assert res.status_code == 200
    assert {p["name"] for p in res.json()} == {"Organic Broccoli", "Wild Honey"}

    res = client.get("/api/products", params={"category": "vegetables"})
    assert [p["name"] for p in res.json()] == ["Organic Broccoli"]

    res = client.get("/api/products", params={"category": "all", "minPrice": 100})
    assert [p["name"] for p in res.json()] == ["Wild Honey"]

    res = client.get("/api/products", params={"search": "honey"})
    assert [p["name"] for p in res.json()] == ["Wild Honey"]


def test_sort_by_price(client, make_product):
    make_product(name="B", price=30)
    make_product(name="A", price=10)
    make_product(name="C", price=20)

    res = client.get("/api/products", params={"sort": "price"})
    assert [p["price"] for p in res.json()] == [10, 20, 30]


def test_list_by_category(client, make_product):
    make_product(name="Almonds", category="nuts")
    make_product(name="Spinach", category="vegetables")

    res = client.get("/api/products/category/nuts")
    assert [p["name"] for p in res.json()] == ["Almonds"]

    res = client.get("/api/products/category/unknown")
    assert res.json() == []


def test_get_product(client, make_product):
    product = make_product()
    res = client.get(f"/api/products/{product.id}")
    assert res.status_code == 200
    body = res.json()
    assert body["name"] == product.name
    assert body["isActive"] is True

    res = client.get(f"/api/products/{uuid.uuid4()}")
    assert res.status_code == 404
    assert res.json() == {"success": False, "message": "Product not found"}


def test_admin_crud(client, admin_headers):
    payload = {
        "name": "Cold Pressed Coconut Oil",
        "category": "Oils",
        "price": 320,
        "image": "https://img.example.com/oil.jpg",
        "stock": 12,
        "isNew": True,
    }
    res = client.post("/api/products", json=payload, headers=admin_headers)
    assert res.status_code == 201
    created = res.json()
    assert created["category"] == "oils"
    assert created["rating"] == 4.5

    res = client.put(
        f"/api/products/{created['id']}", json={"price": 300}, headers=admin_headers
    )
    assert res.status_code == 200
    assert res.json()["price"] == 300
    assert res.json()["stock"] == 12

    res = client.delete(f"/api/products/{created['id']}", headers=admin_headers)
    assert res.status_code == 200
    assert res.json()["success"] is True

    res = client.get(f"/api/products/{created['id']}")
    assert res.status_code == 404


def test_non_admin_cannot_create(client, user_headers):
    res = client.post(
        "/api/products",
        json={"name": "X", "category": "nuts", "price": 1, "image": "x"},
        headers=user_headers,
    )
    assert res.status_code == 403


def test_guest_cannot_create(client):
    res = client.post(
        "/api/products",
        json={"name": "X", "category": "nuts", "price": 1, "image": "x"},
    )
    assert res.status_code == 401


def test_invalid_category_rejected(client, admin_headers):
    res = client.post(
        "/api/products",
        json={"name": "X", "category": "toys", "price": 1, "image": "x"},
        headers=admin_headers,
    )
    assert res.status_code == 400


def test_delete_removes_cart_and_wishlist_lines(client, admin_headers, user_headers, make_product):
    product = make_product()
    client.post(
        "/api/cart/add", json={"productId": str(product.id)}, headers=user_headers
    )
    client.post(
        "/api/wishlist/add", json={"productId": str(product.id)}, headers=user_headers
    )

    res = client.delete(f"/api/products/{product.id}", headers=admin_headers)
    assert res.status_code == 200

    assert client.get("/api/cart", headers=user_headers).json()["cart"]["items"] == []
    assert client.get("/api/wishlist", headers=user_headers).json()["items"] == []


def test_search_treats_wildcards_literally(client, make_product):
    make_product(name="Brown Rice")
    make_product(name="100% Pure Ghee", category="dairy")
    make_product(name="Sun_Dried Figs", category="fruits")

    res = client.get("/api/products", params={"search": "%"})
    assert [p["name"] for p in res.json()] == ["100% Pure Ghee"]

    res = client.get("/api/products", params={"search": "_"})
    assert [p["name"] for p in res.json()] == ["Sun_Dried Figs"]
