# Overview: Flask API routes for the book catalog; parses input and returns envelopes.

# backend/bookstore/routes/books.py
"""
Catalog routes

GET /book/all            all books
GET /book/title?title=   case-insensitive title substring search
GET /book/<id>           single book
PUT /book/<id>           {stock_quantity} administrative stock set
"""
from flask import Blueprint, request

from ..models import Book
from ..responses import success
from ..services import books_service
from ..validation import ModelValidationPolicy, validate_payload, enforce_rules_stock

STOCK_POLICY = ModelValidationPolicy(
    writable_fields={"stock_quantity"},
    required_on_create={"stock_quantity"},
)

books_bp = Blueprint("books", __name__, url_prefix="/book")


@books_bp.get("/all")
def list_books_route():
    books = books_service.list_books()
    return success([b.to_dict() for b in books])


@books_bp.get("/title")
def search_books_route():
    """Search by title. A missing or blank `title` returns the whole catalog."""
    title = request.args.get("title", "")
    books = books_service.list_books(title=title)
    return success([b.to_dict() for b in books])


@books_bp.get("/<int:book_id>")
def get_book_route(book_id: int):
    book = books_service.get_book(book_id)
    return success(book.to_dict())


@books_bp.put("/<int:book_id>")
def update_stock_route(book_id: int):
    """
    Set the stock level of a book.

    Only stock_quantity is writable; it must be an integer >= 0.
    """
    payload = request.get_json(silent=True)

    patch = validate_payload(model=Book, payload=payload, policy=STOCK_POLICY, partial=False)
    enforce_rules_stock(patch)

    book = books_service.set_stock_quantity(book_id, patch["stock_quantity"])
    return success(book.to_dict(), message="Stock updated")
