# Overview: Per-screen view state for the bookstore client.

"""
Screen view state.

Each view owns the local UI state of one screen (form fields, loading
flags, the message to show in an alert or snackbar) and talks to the API
through a BookstoreClient. Nothing is shared between views except the
DeviceStore.

Every fetch takes a generation token from the view. Leaving the screen or
starting a newer fetch bumps the generation, and a response that comes
back for an older generation is dropped instead of overwriting newer
state. Requests themselves are never cancelled.

Stock shown on the detail screen is always the server's value: selecting a
quantity never changes it, and after a purchase the view displays the
stock returned by the purchase response.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional

from .api import ApiError, BookstoreClient
from .storage import DeviceStore


@dataclass
class ViewState:
    api: BookstoreClient
    store: DeviceStore
    loading: bool = False
    alert: Optional[str] = None
    generation: int = 0

    def begin_request(self) -> int:
        self.generation += 1
        self.alert = None
        return self.generation

    def is_current(self, token: int) -> bool:
        return token == self.generation

    def leave(self) -> None:
        """Screen navigated away; responses still in flight are discarded."""
        self.generation += 1
        self.loading = False


@dataclass
class LoginView(ViewState):
    email: str = ""
    password: str = ""
    logged_in: bool = False

    def submit(self) -> bool:
        """Returns True when login succeeded and the user id was stored."""
        if not self.email or not self.password:
            self.alert = "Please fill in all fields"
            return False

        token = self.begin_request()
        self.loading = True
        try:
            user = self.api.login(self.email, self.password)
        except ApiError as exc:
            if not self.is_current(token):
                return False
            if exc.status_code in (400, 401):
                self.alert = "Login failed! Invalid Credentials"
            else:
                self.alert = "An error occurred. Please try again."
            return False
        finally:
            if self.is_current(token):
                self.loading = False

        if not self.is_current(token):
            return False

        self.store.save_user(user["user_id"], user["first_name"])
        self.password = ""
        self.logged_in = True
        return True


@dataclass
class RegisterView(ViewState):
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    password: str = ""
    registered: bool = False

    def submit(self) -> bool:
        if not all([self.first_name, self.last_name, self.email, self.password]):
            self.alert = "Please fill in all fields"
            return False

        token = self.begin_request()
        self.loading = True
        try:
            self.api.register(self.first_name, self.last_name, self.email, self.password)
        except ApiError as exc:
            if self.is_current(token):
                self.alert = f"User registration failed: {exc.message}"
            return False
        finally:
            if self.is_current(token):
                self.loading = False

        if not self.is_current(token):
            return False

        self.password = ""
        self.registered = True
        self.alert = "User registered successfully"
        return True


@dataclass
class CatalogView(ViewState):
    books: List[Dict] = field(default_factory=list)
    search_text: str = ""
    refreshing: bool = False

    @property
    def display_name(self) -> Optional[str]:
        return self.store.user_name()

    @property
    def visible_books(self) -> List[Dict]:
        """Books filtered locally by the search box while typing."""
        needle = self.search_text.strip().lower()
        if not needle:
            return list(self.books)
        return [b for b in self.books if needle in b["title"].lower()]

    def _fetch(self, fetch) -> bool:
        token = self.begin_request()
        self.loading = True
        try:
            books = fetch()
        except ApiError as exc:
            if self.is_current(token):
                self.alert = f"Failed to load books: {exc.message}"
            return False
        finally:
            if self.is_current(token):
                self.loading = False
                self.refreshing = False

        if not self.is_current(token):
            return False
        self.books = books
        return True

    def load(self) -> bool:
        return self._fetch(self.api.list_books)

    def search(self) -> bool:
        text = self.search_text.strip()
        if not text:
            return self.load()
        return self._fetch(lambda: self.api.search_books(text))

    def refresh(self) -> bool:
        self.refreshing = True
        return self.search()


@dataclass
class BookDetailView(ViewState):
    book_id: int = 0
    user_id: Optional[int] = None
    book: Optional[Dict] = None
    quantity: int = 0
    purchase_loading: bool = False
    last_purchase: Optional[Dict] = None

    @property
    def stock_quantity(self) -> int:
        return self.book["stock_quantity"] if self.book else 0

    @property
    def out_of_stock(self) -> bool:
        return self.stock_quantity == 0

    @property
    def total_price(self) -> Decimal:
        if not self.book:
            return Decimal("0.00")
        return (Decimal(self.book["price"]) * self.quantity).quantize(Decimal("0.01"))

    def load(self) -> bool:
        token = self.begin_request()
        self.loading = True
        try:
            book = self.api.get_book(self.book_id)
        except ApiError:
            if self.is_current(token):
                self.alert = "Failed to load book details"
            return False
        finally:
            if self.is_current(token):
                self.loading = False

        if not self.is_current(token):
            return False
        self.user_id = self.store.user_id()
        self.book = book
        self.quantity = min(self.quantity, self.stock_quantity)
        return True

    def increment(self) -> None:
        if self.quantity < self.stock_quantity:
            self.quantity += 1

    def decrement(self) -> None:
        if self.quantity > 0:
            self.quantity -= 1

    def purchase(self) -> bool:
        if self.quantity == 0:
            self.alert = "Please select quantity"
            return False
        if self.user_id is None:
            self.alert = "Please log in to purchase"
            return False

        quantity = self.quantity
        token = self.begin_request()
        self.purchase_loading = True
        try:
            result = self.api.purchase(self.user_id, self.book_id, quantity)
        except ApiError as exc:
            if self.is_current(token):
                if exc.status_code == 409 and isinstance(exc.data, dict) and "available" in exc.data:
                    # Stock moved under us; show the server's figure
                    self.book = dict(self.book or {}, stock_quantity=exc.data["available"])
                    self.quantity = min(self.quantity, exc.data["available"])
                    self.alert = f"Only {exc.data['available']} copies left."
                else:
                    self.alert = f"Failed to complete purchase: {exc.message}"
            return False
        finally:
            if self.is_current(token):
                self.purchase_loading = False

        if not self.is_current(token):
            return False

        self.book = result["book"]
        self.last_purchase = result["purchase"]
        self.quantity = 0
        self.alert = f"Successfully purchased {quantity} book(s)!"
        return True


@dataclass
class OrdersView(ViewState):
    orders: List[Dict] = field(default_factory=list)
    refreshing: bool = False

    def load(self) -> bool:
        user_id = self.store.user_id()
        if user_id is None:
            self.orders = []
            return False

        token = self.begin_request()
        self.loading = True
        try:
            orders = self.api.list_orders(user_id)
        except ApiError as exc:
            if self.is_current(token):
                self.alert = f"Failed to load orders: {exc.message}"
            return False
        finally:
            if self.is_current(token):
                self.loading = False
                self.refreshing = False

        if not self.is_current(token):
            return False
        self.orders = orders
        return True

    def refresh(self) -> bool:
        self.refreshing = True
        return self.load()

    @staticmethod
    def unit_price(order: Dict) -> Decimal:
        return (Decimal(order["total_price"]) / order["quantity"]).quantize(Decimal("0.01"))
