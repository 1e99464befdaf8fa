# File: tests/test_products.py

from datetime import datetime, timedelta

import pytest

from app.models.product import Product
from tests.factories import auth_headers, make_product, make_user

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture
def user(db):
    return make_user(db)


@pytest.fixture
def headers(db, user):
    return auth_headers(db, user)


def _png(name="product.png"):
    return {"image": (name, PNG, "image/png")}


def test_list_products_paginated_newest_first(client, db, headers):
    base = datetime(2025, 1, 1)
    for i in range(15):
        make_product(db, name=f"Product {i}", created_at=base + timedelta(minutes=i))

    resp = client.get("/api/products", headers=headers)

    assert resp.status_code == 200
    body = resp.json()
    assert len(body["data"]) == 10
    assert body["data"][0]["name"] == "Product 14"
    assert body["meta"]["total"] == 15
    for item in body["data"]:
        assert {"id", "name", "description", "price", "stock", "image", "created_at", "updated_at"} <= set(item)


def test_list_products_requires_authentication(client):
    assert client.get("/api/products").status_code == 401


def test_create_product_from_json(client, db, headers):
    data = {"name": "Test Product", "description": "Test Description", "price": 19.99, "stock": 100}

    resp = client.post("/api/products", json=data, headers=headers)

    assert resp.status_code == 201
    body = resp.json()
    assert {k: body[k] for k in data} == data
    assert body["image"] is None
    assert db.query(Product).filter_by(name="Test Product").count() == 1


def test_create_product_with_image(client, db, headers, storage):
    resp = client.post(
        "/api/products",
        data={"name": "Test Product", "price": "19.99", "stock": "100"},
        files=_png(),
        headers=headers,
    )

    assert resp.status_code == 201
    image = resp.json()["image"]
    assert image.startswith("/storage/products/")
    assert image.endswith(".png")
    assert storage.path_for(image).read_bytes() == PNG


def test_create_product_validates_required_fields(client, headers):
    resp = client.post("/api/products", json={}, headers=headers)

    assert resp.status_code == 422
    assert {"name", "price", "stock"} <= set(resp.json()["errors"])


@pytest.mark.parametrize("price", ["invalid", -10])
def test_price_must_be_numeric_and_non_negative(client, headers, price):
    resp = client.post("/api/products", json={"name": "Test", "price": price, "stock": 10}, headers=headers)

    assert resp.status_code == 422
    assert "price" in resp.json()["errors"]


@pytest.mark.parametrize("stock", ["invalid", -1, 1.5])
def test_stock_must_be_non_negative_integer(client, headers, stock):
    resp = client.post("/api/products", json={"name": "Test", "price": 10, "stock": stock}, headers=headers)

    assert resp.status_code == 422
    assert "stock" in resp.json()["errors"]


def test_image_type_and_size_are_restricted(client, db, headers, storage):
    resp = client.post(
        "/api/products",
        data={"name": "Test", "price": "10", "stock": "1"},
        files={"image": ("notes.txt", b"hello", "text/plain")},
        headers=headers,
    )
    assert resp.status_code == 422
    assert "image" in resp.json()["errors"]

    too_big = b"\x00" * (storage.max_bytes + 1)
    resp = client.post(
        "/api/products",
        data={"name": "Test", "price": "10", "stock": "1"},
        files={"image": ("big.png", too_big, "image/png")},
        headers=headers,
    )
    assert resp.status_code == 422
    assert "image" in resp.json()["errors"]
    assert db.query(Product).count() == 0


def test_show_product(client, db, headers):
    product = make_product(db, name="Shown")

    resp = client.get(f"/api/products/{product.id}", headers=headers)

    assert resp.status_code == 200
    assert resp.json()["name"] == "Shown"
    assert resp.json()["price"] == 19.99


def test_show_unknown_product_returns_404(client, headers):
    resp = client.get("/api/products/9999", headers=headers)

    assert resp.status_code == 404
    assert resp.json()["message"] == "Product not found."


def test_update_fields_leaves_image_untouched(client, db, headers, storage):
    created = client.post(
        "/api/products",
        data={"name": "Old", "price": "5", "stock": "1"},
        files=_png(),
        headers=headers,
    ).json()

    resp = client.put(
        f"/api/products/{created['id']}",
        json={"name": "New", "price": 7.5, "stock": 3},
        headers=headers,
    )

    assert resp.status_code == 200
    body = resp.json()
    assert (body["name"], body["price"], body["stock"]) == ("New", 7.5, 3)
    assert body["description"] == created["description"]
    assert body["image"] == created["image"]
    assert storage.exists(created["image"])


def test_update_with_new_image_replaces_old_file(client, db, headers, storage):
    created = client.post(
        "/api/products",
        data={"name": "Old", "price": "5", "stock": "1"},
        files=_png("old.png"),
        headers=headers,
    ).json()

    resp = client.put(
        f"/api/products/{created['id']}",
        data={"name": "Old"},
        files={"image": ("new.gif", b"GIF89a" + b"\x00" * 16, "image/gif")},
        headers=headers,
    )

    assert resp.status_code == 200
    new_image = resp.json()["image"]
    assert new_image != created["image"]
    assert new_image.endswith(".gif")
    assert storage.exists(new_image)
    assert not storage.exists(created["image"])


def test_update_clear_image(client, db, headers, storage):
    created = client.post(
        "/api/products",
        data={"name": "Old", "price": "5", "stock": "1"},
        files=_png(),
        headers=headers,
    ).json()

    resp = client.put(f"/api/products/{created['id']}", data={"clear_image": "1"}, headers=headers)

    assert resp.status_code == 200
    assert resp.json()["image"] is None
    assert not storage.exists(created["image"])


def test_update_validates_fields(client, db, headers):
    product = make_product(db)

    resp = client.put(f"/api/products/{product.id}", json={"price": -1, "stock": -1}, headers=headers)

    assert resp.status_code == 422
    assert {"price", "stock"} <= set(resp.json()["errors"])


def test_delete_product_removes_row_and_image(client, db, headers, storage):
    created = client.post(
        "/api/products",
        data={"name": "Doomed", "price": "5", "stock": "1"},
        files=_png(),
        headers=headers,
    ).json()
    assert storage.exists(created["image"])

    resp = client.delete(f"/api/products/{created['id']}", headers=headers)

    assert resp.status_code == 204
    assert db.query(Product).filter_by(id=created["id"]).count() == 0
    assert not storage.exists(created["image"])


def test_delete_unknown_product_returns_404(client, headers):
    assert client.delete("/api/products/9999", headers=headers).status_code == 404


def test_write_requires_token_ability(client, db, user):
    read_only = auth_headers(db, user, abilities=["products:read"])
    product = make_product(db)

    assert client.get("/api/products", headers=read_only).status_code == 200
    resp = client.post("/api/products", json={"name": "X", "price": 1, "stock": 1}, headers=read_only)
    assert resp.status_code == 403
    assert client.delete(f"/api/products/{product.id}", headers=read_only).status_code == 403
    assert db.query(Product).count() == 1


def test_write_requires_authentication(client, db):
    product = make_product(db)

    assert client.post("/api/products", json={"name": "X", "price": 1, "stock": 1}).status_code == 401
    assert client.put(f"/api/products/{product.id}", json={"name": "Y"}).status_code == 401
    assert client.delete(f"/api/products/{product.id}").status_code == 401
