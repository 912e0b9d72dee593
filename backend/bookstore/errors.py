# Overview: Exception taxonomy shared by services and routes.

"""
Bookstore error types.

Services raise these; the error handlers registered in responses.py turn
them into the uniform {status, message, data} envelope. Each class carries
the HTTP status it maps to.
"""
from __future__ import annotations


class BookstoreError(Exception):
    """Base class for expected, client-visible failures."""
    status_code = 400

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or None


class InvalidInput(BookstoreError):
    """Malformed payload or out-of-range value."""
    status_code = 400


class AuthenticationFailed(BookstoreError):
    status_code = 401


class NotFound(BookstoreError):
    """Missing user or book."""
    status_code = 404


class Conflict(BookstoreError):
    """Business rule conflict (e.g., duplicate email)."""
    status_code = 409


class InsufficientStock(Conflict):
    """Purchase exceeds the available stock. Nothing was changed."""

    def __init__(self, requested: int, available: int):
        super().__init__(
            "Insufficient stock",
            details={"requested": requested, "available": available},
        )
        self.requested = requested
        self.available = available


class StorageFailure(BookstoreError):
    """Underlying database error after retries were exhausted."""
    status_code = 500
