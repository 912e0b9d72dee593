# Overview: httpx client for the bookstore REST API.

from typing import Any, Dict, List, Optional

import httpx


class ApiError(Exception):
    """Error envelope or transport failure. status_code is None when no response arrived."""

    def __init__(self, message: str, status_code: Optional[int] = None, data: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.data = data


class BookstoreClient:
    """
    HTTP client wrapper returning the `data` member of success envelopes.

    Pass `transport` to route requests somewhere other than the network
    (e.g. httpx.WSGITransport in tests).
    """

    def __init__(
        self,
        base_url: str = "http://localhost:4444",
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.client = httpx.Client(base_url=self.base_url, timeout=timeout, transport=transport)

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "BookstoreClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            response = self.client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise ApiError(f"Could not reach server: {exc}") from exc

        try:
            body = response.json()
        except ValueError:
            raise ApiError(
                f"Unexpected response ({response.status_code})",
                status_code=response.status_code,
            )

        if not isinstance(body, dict) or body.get("status") != "success" or response.is_error:
            message = body.get("message") if isinstance(body, dict) else None
            raise ApiError(
                message or f"Request failed ({response.status_code})",
                status_code=response.status_code,
                data=body.get("data") if isinstance(body, dict) else None,
            )
        return body.get("data")

    # Users

    def login(self, email: str, password: str) -> Dict:
        return self._request("POST", "/user/login", json={"email": email, "password": password})

    def register(self, first_name: str, last_name: str, email: str, password: str) -> Dict:
        return self._request("POST", "/user/register", json={
            "first_name": first_name,
            "last_name": last_name,
            "email": email,
            "password": password,
        })

    # Catalog

    def list_books(self) -> List[Dict]:
        return self._request("GET", "/book/all")

    def search_books(self, title: str) -> List[Dict]:
        return self._request("GET", "/book/title", params={"title": title})

    def get_book(self, book_id: int) -> Dict:
        return self._request("GET", f"/book/{book_id}")

    def set_stock(self, book_id: int, stock_quantity: int) -> Dict:
        return self._request("PUT", f"/book/{book_id}", json={"stock_quantity": stock_quantity})

    # Purchases

    def purchase(self, user_id: int, book_id: int, quantity: int) -> Dict:
        return self._request("POST", "/purchase", json={
            "user_id": user_id,
            "book_id": book_id,
            "quantity": quantity,
        })

    def list_orders(self, user_id: int) -> List[Dict]:
        return self._request("GET", f"/purchase/orders/{user_id}")
