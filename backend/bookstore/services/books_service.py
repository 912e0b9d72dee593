# backend/bookstore/services/books_service.py
"""
Books Service

Catalog reads (list, title search, single lookup) plus the two writers:
create_book for seeding and set_stock_quantity for the administrative
stock set. Purchases decrement stock in purchase_service instead.
"""
from __future__ import annotations

from flask import current_app
from sqlalchemy import func

from ..extensions import db
from ..errors import InvalidInput, NotFound
from ..models import Book
from ..validation import coerce_int, fits_int64, parse_price_cents
from .concurrency import begin_write_transaction, lock_for_update, run_with_retry


def list_books(title: str | None = None) -> list[Book]:
    """
    Return every book, or those whose title contains `title` case-insensitively.

    The term is matched as a literal substring: LIKE wildcards in it are
    escaped. A blank term returns the full catalog.
    """
    query = db.session.query(Book)

    term = (title or "").strip()
    if term:
        query = query.filter(func.lower(Book.title).contains(term.lower(), autoescape=True))

    return query.order_by(Book.title.asc(), Book.id.asc()).all()


def get_book(book_id: int) -> Book:
    """Raises NotFound if the book doesn't exist."""
    if not fits_int64(book_id):
        raise NotFound("Book not found")
    book = db.session.get(Book, book_id)
    if book is None:
        raise NotFound("Book not found")
    return book


def create_book(*, title: str, author: str, price, stock_quantity: int = 0) -> Book:
    """
    Create a catalog entry.

    Args:
        title: Book title (non-blank)
        author: Author name (non-blank)
        price: Decimal amount ("10.00", 10, Decimal)
        stock_quantity: Initial copies on hand (>= 0)

    Raises:
        InvalidInput: On blank text, bad price or negative stock
    """
    title = (title or "").strip()
    author = (author or "").strip()
    if not title:
        raise InvalidInput("title cannot be blank")
    if not author:
        raise InvalidInput("author cannot be blank")
    stock_quantity = coerce_int(stock_quantity, "stock_quantity")
    if stock_quantity < 0:
        raise InvalidInput("stock_quantity must be >= 0")

    book = Book(
        title=title,
        author=author,
        price_cents=parse_price_cents(price),
        stock_quantity=stock_quantity,
    )
    db.session.add(book)
    db.session.commit()
    return book


def set_stock_quantity(book_id: int, stock_quantity: int) -> Book:
    """
    Overwrite the stock level of a book under a row lock.

    Raises:
        InvalidInput: If stock_quantity is not an integer or is negative
        NotFound: If the book doesn't exist
    """
    stock_quantity = coerce_int(stock_quantity, "stock_quantity")
    if stock_quantity < 0:
        raise InvalidInput("stock_quantity must be >= 0")
    if not fits_int64(book_id):
        raise NotFound("Book not found")

    def _op():
        begin_write_transaction()
        book = lock_for_update(db.session.query(Book).filter_by(id=book_id)).first()
        if book is None:
            db.session.rollback()
            raise NotFound("Book not found")

        previous = book.stock_quantity
        book.stock_quantity = stock_quantity
        db.session.commit()

        current_app.logger.info(
            "Stock set for book id=%s: %s -> %s", book_id, previous, stock_quantity
        )
        return book

    return run_with_retry(_op)
