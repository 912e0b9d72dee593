from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z, utcnow
from ..validation import format_cents


class Purchase(db.Model):
    """
    Immutable record of one completed purchase of one book by one user.

    total_price_cents is the unit price read under the book row lock times
    quantity; later price changes never touch it.
    """
    __tablename__ = "purchases"
    __table_args__ = (
        db.CheckConstraint("quantity > 0", name="ck_purchases_quantity_positive"),
        db.Index("ix_purchases_user_date", "user_id", "purchase_date"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    book_id = db.Column(db.Integer, db.ForeignKey("books.id"), nullable=False, index=True)

    quantity = db.Column(db.Integer, nullable=False)
    unit_price_cents = db.Column(db.Integer, nullable=False)
    total_price_cents = db.Column(db.Integer, nullable=False)

    purchase_date = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    user = db.relationship("User", backref=db.backref("purchases", lazy=True))
    book = db.relationship("Book", backref=db.backref("purchases", lazy=True))

    def __repr__(self) -> str:
        return f"<Purchase id={self.id} user_id={self.user_id} book_id={self.book_id} qty={self.quantity}>"

    def to_dict(self) -> dict:
        return {
            "purchase_id": self.id,
            "user_id": self.user_id,
            "book_id": self.book_id,
            "quantity": self.quantity,
            "unit_price": format_cents(self.unit_price_cents),
            "total_price": format_cents(self.total_price_cents),
            "purchase_date": to_utc_z(self.purchase_date),
        }
