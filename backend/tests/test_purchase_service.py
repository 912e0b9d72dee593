"""
Purchase service tests.

Verifies:
- Successful purchase decrements stock and records total = quantity x price
- Oversized purchases fail with InsufficientStock and leave stock unchanged
- Invalid quantities and unknown book/user ids are rejected before any write
- Order history is joined with book title/author and sorted newest first
"""

from decimal import Decimal

import pytest

from bookstore.errors import InsufficientStock, InvalidInput, NotFound
from bookstore.extensions import db
from bookstore.models import Book, Purchase
from bookstore.services import purchase_service


def _stock(book_id: int) -> int:
    db.session.expire_all()
    return db.session.get(Book, book_id).stock_quantity


def _purchase_count() -> int:
    return db.session.query(Purchase).count()


# =============================================================================
# PURCHASE
# =============================================================================


class TestPurchaseBook:

    def test_purchase_then_oversized_purchase(self, book, user):
        """stock 5 @ 10.00: buy 3 -> stock 2, total 30.00; buy 3 again -> rejected, stock 2."""
        result = purchase_service.purchase_book(book.id, user.id, 3)

        assert result.book.stock_quantity == 2
        assert result.purchase.quantity == 3
        assert result.purchase.total_price_cents == 3000
        assert result.to_dict()["purchase"]["total_price"] == "30.00"

        with pytest.raises(InsufficientStock) as excinfo:
            purchase_service.purchase_book(book.id, user.id, 3)

        assert excinfo.value.requested == 3
        assert excinfo.value.available == 2
        assert _stock(book.id) == 2
        assert _purchase_count() == 1

    def test_buying_entire_stock_leaves_zero(self, book, user):
        result = purchase_service.purchase_book(book.id, user.id, 5)
        assert result.book.stock_quantity == 0

        with pytest.raises(InsufficientStock):
            purchase_service.purchase_book(book.id, user.id, 1)
        assert _stock(book.id) == 0

    def test_stock_never_negative_after_many_purchases(self, make_book, user):
        book = make_book(stock_quantity=7)
        outcomes = []
        for quantity in [2, 3, 4, 1, 1, 5, 1]:
            try:
                purchase_service.purchase_book(book.id, user.id, quantity)
                outcomes.append(quantity)
            except InsufficientStock:
                outcomes.append(None)
            assert _stock(book.id) >= 0

        assert sum(q for q in outcomes if q) == 7
        assert _stock(book.id) == 0

    @pytest.mark.parametrize("quantity", [0, -1, True, 1.5, "2", None])
    def test_invalid_quantity(self, book, user, quantity):
        with pytest.raises(InvalidInput):
            purchase_service.purchase_book(book.id, user.id, quantity)
        assert _stock(book.id) == 5
        assert _purchase_count() == 0

    def test_quantity_above_configured_cap(self, app, make_book, user):
        book = make_book(stock_quantity=500)
        cap = app.config["MAX_PURCHASE_QUANTITY"]
        with pytest.raises(InvalidInput):
            purchase_service.purchase_book(book.id, user.id, cap + 1)
        assert _stock(book.id) == 500

    def test_unknown_book(self, user):
        with pytest.raises(NotFound, match="Book not found"):
            purchase_service.purchase_book(999999, user.id, 1)

    def test_unknown_user_leaves_stock_unchanged(self, book):
        with pytest.raises(NotFound, match="User not found"):
            purchase_service.purchase_book(book.id, 999999, 1)
        assert _stock(book.id) == 5
        assert _purchase_count() == 0

    def test_total_price_fixed_at_purchase_time(self, book, user):
        purchase_service.purchase_book(book.id, user.id, 2)

        # Price change after the purchase must not rewrite history
        db.session.get(Book, book.id).price_cents = 2500
        db.session.commit()

        purchase_service.purchase_book(book.id, user.id, 1)

        orders = purchase_service.list_orders(user.id)
        totals = sorted(o["total_price"] for o in orders)
        assert totals == ["20.00", "25.00"]
        for order in orders:
            assert Decimal(order["total_price"]) == Decimal(order["unit_price"]) * order["quantity"]


# =============================================================================
# ORDER LISTING
# =============================================================================


class TestListOrders:

    def test_no_orders_returns_empty_list(self, user):
        assert purchase_service.list_orders(user.id) == []

    def test_unknown_user_returns_empty_list(self, db_session):
        assert purchase_service.list_orders(424242) == []

    def test_orders_joined_and_newest_first(self, make_book, make_user):
        buyer = make_user()
        other = make_user()
        hobbit = make_book(title="The Hobbit", author="J.R.R. Tolkien", price="12.50", stock_quantity=10)
        dune = make_book(title="Dune", author="Frank Herbert", price="9.99", stock_quantity=10)

        first = purchase_service.purchase_book(hobbit.id, buyer.id, 1).purchase.id
        purchase_service.purchase_book(dune.id, other.id, 4)
        second = purchase_service.purchase_book(dune.id, buyer.id, 2).purchase.id

        orders = purchase_service.list_orders(buyer.id)

        assert [o["purchase_id"] for o in orders] == [second, first]
        assert orders[0]["book_title"] == "Dune"
        assert orders[0]["book_author"] == "Frank Herbert"
        assert orders[0]["quantity"] == 2
        assert orders[0]["total_price"] == "19.98"
        assert orders[1]["book_title"] == "The Hobbit"
        assert orders[1]["total_price"] == "12.50"
        assert {"purchase_id", "book_title", "book_author", "quantity",
                "total_price", "purchase_date"} <= set(orders[0].keys())
