"""
Pytest configuration and fixtures for backend tests.

Every test gets its own application context: an in-memory SQLite database,
a recording broadcast publisher and an image store in a temp directory.
"""

import os

# Settings are read once at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BROADCAST_ENABLED"] = "false"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["ENVIRONMENT"] = "test"

from typing import Any

import pytest
from fastapi.testclient import TestClient

from rest_api.core.context import create_context
from rest_api.main import create_app
from rest_api.models import Account, DiningTable, Product
from shared.config.constants import Roles
from shared.config.settings import settings
from shared.infrastructure.events import build_event
from shared.infrastructure.storage.local_backend import LocalImageStorage
from shared.security.auth import sign_access_token
from shared.security.password import hash_password


class RecordingPublisher:
    """EventPublisher that keeps every published envelope in memory."""

    def __init__(self):
        self.events: list[dict[str, Any]] = []
        self.closed = False

    def publish(self, event_name: str, payload: Any) -> None:
        event = build_event(event_name, payload)
        if event is not None:
            self.events.append(event.to_dict())

    def close(self) -> None:
        self.closed = True

    def names(self) -> list[str]:
        return [event["event"] for event in self.events]

    def last(self, name: str) -> dict[str, Any]:
        matching = [event for event in self.events if event["event"] == name]
        assert matching, f"No {name} event published; got {self.names()}"
        return matching[-1]


@pytest.fixture
def publisher():
    return RecordingPublisher()


@pytest.fixture
def storage(tmp_path):
    return LocalImageStorage(tmp_path / "media", "/uploads")


@pytest.fixture
def context(publisher, storage):
    ctx = create_context(settings, publisher=publisher, storage=storage)
    ctx.init()
    yield ctx
    ctx.close()


@pytest.fixture
def client(context):
    """Test client over an app built around the test context."""
    with TestClient(create_app(context)) as test_client:
        yield test_client


@pytest.fixture
def db_session(context):
    session = context.session_factory()
    try:
        yield session
    finally:
        session.close()


# =============================================================================
# Seed helpers
# =============================================================================


@pytest.fixture
def make_account(db_session):
    def _make(email: str, password: str = "secret", role: str = Roles.WAITER) -> Account:
        account = Account(email=email, password_hash=hash_password(password), role=role)
        db_session.add(account)
        db_session.commit()
        db_session.refresh(account)
        return account

    return _make


@pytest.fixture
def waiter(make_account):
    return make_account("waiter@test.com", "waiter123")


@pytest.fixture
def admin(make_account):
    return make_account("admin@test.com", "admin123", role=Roles.ADMIN)


def bearer(account: Account) -> dict[str, str]:
    token = sign_access_token(account.id, account.email, account.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers_for():
    """Bearer headers for any account."""
    return bearer


@pytest.fixture
def waiter_headers(waiter):
    return bearer(waiter)


@pytest.fixture
def admin_headers(admin):
    return bearer(admin)


@pytest.fixture
def make_table(db_session):
    def _make(number: int) -> DiningTable:
        table = DiningTable(number=number)
        db_session.add(table)
        db_session.commit()
        db_session.refresh(table)
        return table

    return _make


@pytest.fixture
def make_product(db_session):
    def _make(name: str = "Feijoada", price: float = 42.5) -> Product:
        product = Product(
            name=name,
            price=price,
            image_url=f"/uploads/products/{name.lower()}.png",
            image_key=f"products/{name.lower()}.png",
        )
        db_session.add(product)
        db_session.commit()
        db_session.refresh(product)
        return product

    return _make
