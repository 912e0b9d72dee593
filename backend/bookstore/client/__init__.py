"""
Python client for the bookstore API.

api      - httpx wrapper that unwraps the {status, message, data} envelope
storage  - device key/value store (userId, userName) persisted as JSON
views    - per-screen view state: login, register, catalog, book detail, orders
"""
from .api import ApiError, BookstoreClient
from .storage import DeviceStore

__all__ = ["ApiError", "BookstoreClient", "DeviceStore"]
