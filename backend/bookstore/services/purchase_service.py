"""
Purchase Service - atomic stock decrement plus order record

A purchase is a single conditional read-modify-write: lock the book row,
check the requested quantity against stock, decrement, insert the
Purchase row, commit. Either both writes land or neither does, and two
concurrent purchases of the same book serialize on the row lock, so their
combined quantity can never exceed the stock that was available.
"""
from __future__ import annotations

from dataclasses import dataclass

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..errors import BookstoreError, InsufficientStock, InvalidInput, NotFound, StorageFailure
from ..models import Book, Purchase, User
from ..time_utils import utcnow
from ..validation import fits_int64
from .concurrency import begin_write_transaction, lock_for_update, run_with_retry


@dataclass(frozen=True)
class PurchaseResult:
    """The committed purchase and the book as it stands after the decrement."""
    purchase: Purchase
    book: Book

    def to_dict(self) -> dict:
        return {
            "purchase": self.purchase.to_dict(),
            "book": self.book.to_dict(),
        }


def _validate_quantity(quantity) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidInput("quantity must be an integer")
    if quantity <= 0:
        raise InvalidInput("quantity must be > 0")
    max_quantity = current_app.config.get("MAX_PURCHASE_QUANTITY")
    if max_quantity is not None and quantity > max_quantity:
        raise InvalidInput(f"quantity cannot exceed {max_quantity} per purchase")
    return quantity


def _purchase_locked(book: Book, user_id: int, quantity: int) -> Purchase:
    if quantity > book.stock_quantity:
        raise InsufficientStock(requested=quantity, available=book.stock_quantity)

    purchase = Purchase(
        user_id=user_id,
        book_id=book.id,
        quantity=quantity,
        unit_price_cents=book.price_cents,
        total_price_cents=book.price_cents * quantity,
        purchase_date=utcnow(),
    )
    book.stock_quantity -= quantity

    db.session.add(purchase)
    return purchase


def purchase_book(book_id: int, user_id: int, quantity: int) -> PurchaseResult:
    """
    Buy `quantity` copies of a book for a user.

    Args:
        book_id: Book to purchase (must exist)
        user_id: Buyer (must exist)
        quantity: Copies requested (0 < quantity <= stock)

    Returns:
        PurchaseResult with the committed Purchase and the updated Book

    Raises:
        InvalidInput: quantity not a positive integer (or above the per-purchase cap)
        NotFound: book or user doesn't exist
        InsufficientStock: quantity exceeds stock; stock is left unchanged
        StorageFailure: database error after lock retries were exhausted
    """
    quantity = _validate_quantity(quantity)
    if not fits_int64(book_id):
        raise NotFound("Book not found")
    if not fits_int64(user_id):
        raise NotFound("User not found")

    def _op():
        begin_write_transaction()
        try:
            book = lock_for_update(db.session.query(Book).filter_by(id=book_id)).first()
            if book is None:
                raise NotFound("Book not found")

            if db.session.get(User, user_id) is None:
                raise NotFound("User not found")

            purchase = _purchase_locked(book, user_id, quantity)
            db.session.commit()
        except BookstoreError:
            # Release the lock; nothing has been written
            db.session.rollback()
            raise

        return PurchaseResult(purchase=purchase, book=book)

    attempts = current_app.config.get("PURCHASE_RETRY_ATTEMPTS", 3)
    backoff = current_app.config.get("PURCHASE_RETRY_BACKOFF", 0.1)

    try:
        result = run_with_retry(_op, attempts=attempts, backoff_base=backoff)
    except InsufficientStock as exc:
        current_app.logger.info(
            "Rejected purchase of book id=%s by user id=%s: requested=%s available=%s",
            book_id, user_id, exc.requested, exc.available,
        )
        raise
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.exception("Purchase of book id=%s failed in storage", book_id)
        raise StorageFailure("Could not complete purchase") from exc

    current_app.logger.info(
        "Purchase id=%s: user id=%s bought %s of book id=%s, stock now %s",
        result.purchase.id, user_id, quantity, book_id, result.book.stock_quantity,
    )
    return result


def list_orders(user_id: int) -> list[dict]:
    """
    Order history for a user, most recent first.

    Each summary joins the purchase with the book's title and author.
    A user with no purchases (or an unknown user id) gets an empty list.
    """
    if not fits_int64(user_id):
        return []

    rows = (
        db.session.query(Purchase, Book.title, Book.author)
        .join(Book, Book.id == Purchase.book_id)
        .filter(Purchase.user_id == user_id)
        .order_by(Purchase.purchase_date.desc(), Purchase.id.desc())
        .all()
    )

    orders = []
    for purchase, title, author in rows:
        summary = purchase.to_dict()
        summary["book_title"] = title
        summary["book_author"] = author
        orders.append(summary)
    return orders
