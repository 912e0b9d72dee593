"""
Purchase API tests.

Verifies:
- POST /purchase returns the purchase and the post-purchase book
- Insufficient stock maps to 409 with requested/available details
- Malformed payloads are rejected with 400 and change nothing
- GET /purchase/orders/<userId> lists order summaries, [] for no orders
"""

import pytest

from conftest import envelope


def _buy(client, user_id, book_id, quantity):
    return client.post("/purchase", json={"user_id": user_id, "book_id": book_id, "quantity": quantity})


class TestCreatePurchase:

    def test_purchase_success(self, client, book, user):
        resp = _buy(client, user.id, book.id, 3)
        status, message, data = envelope(resp)

        assert resp.status_code == 201
        assert status == "success"
        assert message == "Purchase completed"
        assert data["purchase"]["quantity"] == 3
        assert data["purchase"]["total_price"] == "30.00"
        assert data["purchase"]["book_id"] == book.id
        assert data["purchase"]["user_id"] == user.id
        assert data["book"]["stock_quantity"] == 2

    def test_insufficient_stock(self, client, book, user):
        assert _buy(client, user.id, book.id, 3).status_code == 201

        resp = _buy(client, user.id, book.id, 3)
        status, message, data = envelope(resp)
        assert resp.status_code == 409
        assert status == "error"
        assert message == "Insufficient stock"
        assert data == {"requested": 3, "available": 2}

        _, _, fetched = envelope(client.get(f"/book/{book.id}"))
        assert fetched["stock_quantity"] == 2

    @pytest.mark.parametrize("quantity", [0, -2, 1.5, "x", True, None])
    def test_invalid_quantity(self, client, book, user, quantity):
        resp = _buy(client, user.id, book.id, quantity)
        assert resp.status_code == 400
        assert envelope(resp)[0] == "error"

        _, _, fetched = envelope(client.get(f"/book/{book.id}"))
        assert fetched["stock_quantity"] == 5

    def test_numeric_string_quantity_accepted(self, client, book, user):
        resp = _buy(client, user.id, book.id, "2")
        assert resp.status_code == 201
        assert envelope(resp)[2]["book"]["stock_quantity"] == 3

    @pytest.mark.parametrize("payload", [
        {},
        {"book_id": 1, "quantity": 1},
        {"user_id": 1, "book_id": 1, "quantity": 1, "total_price_cents": 1},
    ])
    def test_malformed_payload(self, client, db_session, payload):
        resp = client.post("/purchase", json=payload)
        assert resp.status_code == 400

    def test_non_json_body(self, client, db_session):
        resp = client.post("/purchase", data="quantity=1", content_type="text/plain")
        assert resp.status_code == 400
        assert envelope(resp)[0] == "error"

    def test_unknown_book(self, client, user):
        resp = _buy(client, user.id, 999999, 1)
        assert resp.status_code == 404
        assert envelope(resp)[1] == "Book not found"

    def test_unknown_user(self, client, book):
        resp = _buy(client, 999999, book.id, 1)
        assert resp.status_code == 404
        assert envelope(resp)[1] == "User not found"

    def test_book_id_beyond_integer_range(self, client, book, user):
        resp = _buy(client, user.id, 10 ** 20, 1)
        assert resp.status_code == 404
        assert envelope(resp)[1] == "Book not found"

    def test_user_id_beyond_integer_range(self, client, book):
        resp = _buy(client, 10 ** 20, book.id, 1)
        assert resp.status_code == 404
        assert envelope(resp)[1] == "User not found"

        _, _, fetched = envelope(client.get(f"/book/{book.id}"))
        assert fetched["stock_quantity"] == 5

    def test_quantity_beyond_integer_range(self, client, book, user):
        resp = _buy(client, user.id, book.id, 10 ** 20)
        assert resp.status_code == 400
        assert envelope(resp)[1] == "quantity is out of range"

    def test_store_usable_after_out_of_range_ids(self, client, book, user):
        assert _buy(client, user.id, 10 ** 20, 1).status_code == 404
        resp = _buy(client, user.id, book.id, 2)
        assert resp.status_code == 201
        assert envelope(resp)[2]["book"]["stock_quantity"] == 3


class TestListOrders:

    def test_empty_history(self, client, user):
        resp = client.get(f"/purchase/orders/{user.id}")
        status, _, data = envelope(resp)
        assert resp.status_code == 200
        assert status == "success"
        assert data == []

    def test_user_id_beyond_integer_range(self, client, db_session):
        resp = client.get("/purchase/orders/100000000000000000000")
        assert resp.status_code == 200
        assert envelope(resp)[2] == []

    def test_history_after_purchases(self, client, book, user):
        first = envelope(_buy(client, user.id, book.id, 1))[2]["purchase"]["purchase_id"]
        second = envelope(_buy(client, user.id, book.id, 2))[2]["purchase"]["purchase_id"]

        _, _, data = envelope(client.get(f"/purchase/orders/{user.id}"))

        assert [o["purchase_id"] for o in data] == [second, first]
        assert data[0]["book_title"] == "The Hobbit"
        assert data[0]["book_author"] == "J.R.R. Tolkien"
        assert data[0]["total_price"] == "20.00"
        assert data[0]["purchase_date"].endswith("Z")
