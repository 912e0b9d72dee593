# Overview: Flask API routes for purchases and order history.

# backend/bookstore/routes/purchases.py
"""
Purchase routes

POST /purchase                  {user_id, book_id, quantity} -> {purchase, book}
GET  /purchase/orders/<userId>  order history, most recent first
"""
from flask import Blueprint, request, current_app

from ..models import Purchase
from ..responses import success
from ..services import purchase_service
from ..validation import ModelValidationPolicy, validate_payload, enforce_rules_purchase

PURCHASE_POLICY = ModelValidationPolicy(
    writable_fields={"user_id", "book_id", "quantity"},
    required_on_create={"user_id", "book_id", "quantity"},
)

purchases_bp = Blueprint("purchases", __name__, url_prefix="/purchase")


@purchases_bp.post("")
def create_purchase_route():
    """
    Purchase copies of a book.

    Returns the created purchase and the book's post-purchase stock so the
    client can display the authoritative value.

    Errors: 400 invalid quantity, 404 unknown book/user,
    409 insufficient stock (data carries requested/available).
    """
    payload = request.get_json(silent=True)

    patch = validate_payload(model=Purchase, payload=payload, policy=PURCHASE_POLICY, partial=False)
    enforce_rules_purchase(patch, current_app.config.get("MAX_PURCHASE_QUANTITY"))

    result = purchase_service.purchase_book(
        book_id=patch["book_id"],
        user_id=patch["user_id"],
        quantity=patch["quantity"],
    )
    return success(result.to_dict(), message="Purchase completed", status_code=201)


@purchases_bp.get("/orders/<int:user_id>")
def list_orders_route(user_id: int):
    orders = purchase_service.list_orders(user_id)
    return success(orders)
