from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import DeclarativeMeta

from .errors import InvalidInput


# Maximum price: 999,999.99 (99,999,999 cents)
MAX_PRICE_CENTS = 99_999_999


@dataclass(frozen=True)
class ModelValidationPolicy:
    """
    Central policy layer:
    - writable_fields: what clients are allowed to set (security boundary)
    - required_on_create: fields required for POST
    """
    writable_fields: set[str]
    required_on_create: set[str] = None  # type: ignore


def _columns_by_key(model: DeclarativeMeta) -> dict[str, Any]:
    mapper = model.__mapper__
    return {c.key: c for c in mapper.columns}


# Storage integers are signed 64-bit (SQLite INTEGER, PostgreSQL BIGINT)
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


def fits_int64(value: int) -> bool:
    return INT64_MIN <= value <= INT64_MAX


def coerce_int(value: Any, field: str, *, bounded: bool = True) -> int:
    """
    Strict integer parsing: rejects bools, floats, decimals and scientific notation.

    With bounded=True values outside the signed 64-bit range are rejected too.
    Id fields pass bounded=False so an unknown id can be reported as NotFound.
    """
    # Already an int (but not bool which is a subclass of int)
    if isinstance(value, int) and not isinstance(value, bool):
        result = value
    # String input - must be plain digits (with optional leading minus)
    elif isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            raise InvalidInput(f"{field} must be an integer")
        if 'e' in stripped.lower():
            raise InvalidInput(f"{field} must be a plain integer (scientific notation not allowed)")
        if '.' in stripped:
            raise InvalidInput(f"{field} must be an integer (no decimals)")
        try:
            result = int(stripped)
        except ValueError:
            raise InvalidInput(f"{field} must be an integer")
    elif isinstance(value, float):
        raise InvalidInput(f"{field} must be an integer, not a decimal")
    else:
        raise InvalidInput(f"{field} must be an integer")

    if bounded and not fits_int64(result):
        raise InvalidInput(f"{field} is out of range")
    return result


def _coerce_value(col, value: Any):
    coltype = col.type

    if value is None:
        return None

    if isinstance(coltype, Integer):
        return coerce_int(value, col.key, bounded=not col.foreign_keys)

    if isinstance(coltype, (String, Text)):
        if not isinstance(value, str):
            raise InvalidInput(f"{col.key} must be a string")
        return value.strip()

    return value


def validate_payload(
    *,
    model: DeclarativeMeta,
    payload: dict,
    policy: ModelValidationPolicy,
    partial: bool,
) -> dict:
    """
    Validates + normalizes incoming JSON against:
    - SQLAlchemy column metadata (nullable, type, String length)
    - a policy allowlist (writable_fields)
    - required_on_create (if partial=False)
    Returns a cleaned patch dict with only writable fields.
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise InvalidInput("Invalid JSON payload")

    required = policy.required_on_create or set()
    if not partial:
        missing = sorted(f for f in required if f not in payload)
        if missing:
            raise InvalidInput(f"Missing required fields: {', '.join(missing)}")

    cols = _columns_by_key(model)

    for k in payload.keys():
        if k not in policy.writable_fields:
            raise InvalidInput(f"Field not allowed: {k}")
        if k not in cols:
            raise InvalidInput(f"Unknown field: {k}")

    patch: dict = {}

    for k, raw in payload.items():
        col = cols[k]

        if raw is None:
            if not col.nullable:
                raise InvalidInput(f"{k} cannot be null")
            patch[k] = None
            continue

        val = _coerce_value(col, raw)

        if isinstance(col.type, (String, Text)) and not col.nullable:
            if isinstance(val, str) and val == "":
                raise InvalidInput(f"{k} cannot be blank")

        if isinstance(col.type, String) and col.type.length and isinstance(val, str):
            if len(val) > col.type.length:
                raise InvalidInput(f"{k} exceeds max length {col.type.length}")

        patch[k] = val

    return patch


def parse_price_cents(value: Any) -> int:
    """
    Parse a decimal price ("10.00", 10, Decimal("9.5")) into integer cents.

    At most two decimal places; negative and oversized prices are rejected.
    """
    if isinstance(value, bool) or value is None:
        raise InvalidInput("price must be a decimal amount")
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise InvalidInput("price must be a decimal amount")
    if not amount.is_finite():
        raise InvalidInput("price must be a decimal amount")
    if amount.as_tuple().exponent < -2:
        raise InvalidInput("price cannot have more than two decimal places")
    cents = int(amount * 100)
    if cents < 0:
        raise InvalidInput("price must be >= 0")
    if cents > MAX_PRICE_CENTS:
        raise InvalidInput(f"price cannot exceed {Decimal(MAX_PRICE_CENTS) / 100:,.2f}")
    return cents


def format_cents(cents: int | None) -> str | None:
    """Render integer cents as a two-place decimal string ("30.00")."""
    if cents is None:
        return None
    return str((Decimal(cents) / 100).quantize(Decimal("0.01")))


def enforce_rules_stock(patch: dict) -> None:
    if patch.get("stock_quantity") is None:
        raise InvalidInput("stock_quantity is required")
    if patch["stock_quantity"] < 0:
        raise InvalidInput("stock_quantity must be >= 0")


def enforce_rules_purchase(patch: dict, max_quantity: int | None = None) -> None:
    quantity = patch.get("quantity")
    if quantity is None or quantity <= 0:
        raise InvalidInput("quantity must be > 0")
    if max_quantity is not None and quantity > max_quantity:
        raise InvalidInput(f"quantity cannot exceed {max_quantity} per purchase")


def enforce_rules_user(patch: dict, password: Any) -> None:
    email = patch.get("email") or ""
    if "@" not in email or email.startswith("@") or email.endswith("@"):
        raise InvalidInput("email must be a valid email address")
    if not isinstance(password, str) or not password:
        raise InvalidInput("password is required")
