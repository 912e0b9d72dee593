"""
Pytest fixtures for bookstore backend tests.

Provides test database setup, model factories, Flask test client and an
httpx-based API client wired to the app through WSGI.
"""

import itertools

import httpx
import pytest
from bookstore import create_app
from bookstore.client import BookstoreClient, DeviceStore
from bookstore.extensions import db
from bookstore.services import auth_service, books_service


TEST_PASSWORD = "Password123!"


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'BCRYPT_ROUNDS': 4,
        'PURCHASE_RETRY_BACKOFF': 0,
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


@pytest.fixture(scope='function')
def make_book(db_session):
    """Factory for committed Book rows."""
    def _make(title="Test Book", author="Test Author", price="10.00", stock_quantity=5):
        return books_service.create_book(
            title=title, author=author, price=price, stock_quantity=stock_quantity
        )
    return _make


@pytest.fixture(scope='function')
def make_user(db_session):
    """Factory for registered users (bcrypt-hashed TEST_PASSWORD by default)."""
    counter = itertools.count(1)

    def _make(first_name="Test", last_name="User", email=None, password=TEST_PASSWORD):
        email = email or f"user{next(counter)}@example.com"
        return auth_service.register_user(
            first_name=first_name, last_name=last_name, email=email, password=password
        )
    return _make


@pytest.fixture(scope='function')
def book(make_book):
    """Book with stock 5 at 10.00."""
    return make_book(title="The Hobbit", author="J.R.R. Tolkien", price="10.00", stock_quantity=5)


@pytest.fixture(scope='function')
def user(make_user):
    return make_user(first_name="Ada", last_name="Lovelace", email="ada@example.com")


@pytest.fixture(scope='function')
def api(app, db_session):
    """BookstoreClient talking to the test app in-process."""
    client = BookstoreClient(
        base_url="http://testserver",
        transport=httpx.WSGITransport(app=app),
    )
    yield client
    client.close()


@pytest.fixture(scope='function')
def device_store(tmp_path):
    return DeviceStore(tmp_path / "storage.json")


def envelope(response):
    """Return (status, message, data) from a test-client response."""
    body = response.get_json()
    assert set(body.keys()) == {"status", "message", "data"}
    return body["status"], body["message"], body["data"]
