from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z
from ..validation import format_cents


class Book(db.Model):
    """
    Catalog entry with its on-hand stock.

    stock_quantity is decremented only by purchase_service.purchase_book under
    a row lock; the check constraint is the storage-level floor.
    """
    __tablename__ = "books"
    __table_args__ = (
        db.CheckConstraint("stock_quantity >= 0", name="ck_books_stock_nonnegative"),
        db.CheckConstraint("price_cents >= 0", name="ck_books_price_nonnegative"),
        db.Index("ix_books_title", "title"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    author = db.Column(db.String(255), nullable=False)

    # Authoritative storage in cents; exposed as a decimal string
    price_cents = db.Column(db.Integer, nullable=False)

    stock_quantity = db.Column(db.Integer, nullable=False, default=0)
    version_id = db.Column(db.Integer, nullable=False, default=1)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    __mapper_args__ = {"version_id_col": version_id}

    def __repr__(self) -> str:
        return f"<Book id={self.id} title={self.title!r} stock={self.stock_quantity}>"

    def to_dict(self) -> dict:
        return {
            "book_id": self.id,
            "title": self.title,
            "author": self.author,
            "price": format_cents(self.price_cents),
            "stock_quantity": self.stock_quantity,
            "created_at": to_utc_z(self.created_at),
        }
