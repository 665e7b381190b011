"""Integration tests for Cart API endpoints via TestClient."""

from decimal import Decimal

import pytest
from sqlalchemy import select, func

from conftest import SHIPPING_ADDRESS, auth_headers, reload
from storefront.data.models import CartItemModel, OrderModel


def _cart_rows(db):
    db.expire_all()
    return db.execute(select(func.count(CartItemModel.id))).scalar_one()


class TestUnauthenticated:
    @pytest.mark.parametrize(
        "method, path, body",
        [
            ("get", "/cart", None),
            ("post", "/cart", {"productId": 1, "quantity": 1}),
            ("patch", "/cart/1", {"quantity": 2}),
            ("delete", "/cart/1", None),
            ("delete", "/cart", None),
            ("post", "/checkout", {"shippingAddress": SHIPPING_ADDRESS}),
        ],
    )
    def test_returns_401_and_mutates_nothing(self, client, db, make_user, make_product, put_in_cart, method, path, body):
        user = make_user()
        product = make_product("Keyboard", stock=5)
        item = put_in_cart(user, product, 1)
        assert item.id == 1

        kwargs = {"json": body} if body is not None else {}
        response = client.request(method.upper(), path, **kwargs)

        assert response.status_code == 401
        assert response.json() == {"error": "Not authenticated"}
        assert reload(db, CartItemModel, item.id).quantity == 1
        assert _cart_rows(db) == 1
        assert db.execute(select(func.count(OrderModel.id))).scalar_one() == 0


class TestAddItem:
    def test_add_twice_keeps_one_row(self, client, db, make_user, make_product):
        user = make_user()
        product = make_product("Keyboard", price="20.00", stock=5)

        first = client.post("/cart", json={"productId": product.id, "quantity": 2}, headers=auth_headers(user))
        second = client.post("/cart", json={"productId": product.id}, headers=auth_headers(user))

        assert first.status_code == second.status_code == 201
        assert second.json()["id"] == first.json()["id"]
        assert second.json()["quantity"] == 3
        assert second.json()["product"]["category"]["slug"] == "electronics"
        assert _cart_rows(db) == 1

    def test_unknown_product(self, client, make_user):
        response = client.post("/cart", json={"productId": 999}, headers=auth_headers(make_user()))

        assert response.status_code == 404
        assert response.json() == {"error": "Product not found"}

    def test_insufficient_stock(self, client, make_user, make_product):
        product = make_product("Monitor", stock=1)

        response = client.post("/cart", json={"productId": product.id, "quantity": 2}, headers=auth_headers(make_user()))

        assert response.status_code == 400
        assert response.json() == {"error": "Insufficient stock for Monitor"}

    @pytest.mark.parametrize("body", [{"quantity": 1}, {"productId": 1, "quantity": 0}, {"productId": "x"}])
    def test_invalid_body(self, client, make_user, body):
        response = client.post("/cart", json=body, headers=auth_headers(make_user()))

        assert response.status_code == 400
        assert "error" in response.json()


class TestGetCart:
    def test_cart_reports_lines_and_live_total(self, client, make_user, make_product, put_in_cart):
        user = make_user()
        put_in_cart(user, make_product("Product A", price="20.00", stock=5), 2)
        put_in_cart(user, make_product("Product B", price="50.00", stock=1), 1)

        body = client.get("/cart", headers=auth_headers(user)).json()

        assert body["count"] == 2
        assert Decimal(str(body["total"])) == Decimal("90.00")
        assert {i["product"]["name"] for i in body["items"]} == {"Product A", "Product B"}


class TestUpdateAndRemove:
    def test_update_quantity(self, client, make_user, make_product, put_in_cart):
        user = make_user()
        item = put_in_cart(user, make_product("Lamp", stock=5), 1)

        response = client.patch(f"/cart/{item.id}", json={"quantity": 4}, headers=auth_headers(user))

        assert response.status_code == 200
        assert response.json()["quantity"] == 4

    def test_update_above_stock(self, client, db, make_user, make_product, put_in_cart):
        user = make_user()
        item = put_in_cart(user, make_product("Lamp", stock=2), 1)

        response = client.patch(f"/cart/{item.id}", json={"quantity": 3}, headers=auth_headers(user))

        assert response.status_code == 400
        assert reload(db, CartItemModel, item.id).quantity == 1

    def test_zero_quantity_is_rejected(self, client, make_user, make_product, put_in_cart):
        user = make_user()
        item = put_in_cart(user, make_product("Lamp"), 1)

        response = client.patch(f"/cart/{item.id}", json={"quantity": 0}, headers=auth_headers(user))

        assert response.status_code == 400

    def test_foreign_item_is_not_found(self, client, db, make_user, make_product, put_in_cart):
        owner, intruder = make_user(), make_user()
        item = put_in_cart(owner, make_product("Lamp", stock=5), 1)

        patched = client.patch(f"/cart/{item.id}", json={"quantity": 2}, headers=auth_headers(intruder))
        deleted = client.delete(f"/cart/{item.id}", headers=auth_headers(intruder))

        assert patched.status_code == deleted.status_code == 404
        assert patched.json() == {"error": "Cart item not found"}
        assert reload(db, CartItemModel, item.id).quantity == 1

    def test_remove_and_clear(self, client, db, make_user, make_product, put_in_cart):
        user = make_user()
        first = put_in_cart(user, make_product("Fork"), 1)
        put_in_cart(user, make_product("Knife"), 1)

        assert client.delete(f"/cart/{first.id}", headers=auth_headers(user)).status_code == 200
        assert _cart_rows(db) == 1

        assert client.delete("/cart", headers=auth_headers(user)).json() == {"message": "Cart cleared successfully"}
        assert client.delete("/cart", headers=auth_headers(user)).status_code == 200
        assert _cart_rows(db) == 0
