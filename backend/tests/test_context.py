"""
Tests for the application context: collaborators follow the settings it is built from.
"""

import pytest
from fastapi.testclient import TestClient

from rest_api.core.context import create_context
from rest_api.main import create_app
from rest_api.models import Account
from shared.config.constants import Roles
from shared.config.settings import Settings
from shared.infrastructure.events import LoggingEventPublisher, RedisEventPublisher
from shared.infrastructure.storage.local_backend import LocalImageStorage
from shared.security.auth import sign_access_token, verify_jwt
from shared.security.password import hash_password
from shared.utils.exceptions import TokenInvalidError

CUSTOM_SECRET = "context-only-secret-" + "x" * 24
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


class TestPublisherSelection:

    def test_broadcast_enabled_uses_redis_channel(self):
        config = Settings(
            database_url="sqlite://",
            broadcast_enabled=True,
            broadcast_channel="room",
            redis_url="redis://cache:6390/2",
        )
        ctx = create_context(config)
        try:
            assert isinstance(ctx.publisher, RedisEventPublisher)
            assert ctx.publisher.channel == "room"
            pool_kwargs = ctx.publisher.client.connection_pool.connection_kwargs
            assert pool_kwargs["host"] == "cache"
            assert pool_kwargs["port"] == 6390
        finally:
            ctx.close()

    def test_broadcast_disabled_logs_only(self):
        ctx = create_context(Settings(database_url="sqlite://", broadcast_enabled=False))
        try:
            assert isinstance(ctx.publisher, LoggingEventPublisher)
        finally:
            ctx.close()


@pytest.fixture
def custom_settings():
    return Settings(
        database_url="sqlite://",
        broadcast_enabled=False,
        jwt_secret=CUSTOM_SECRET,
        jwt_expire_hours=2,
        max_image_bytes=16,
    )


@pytest.fixture
def custom_context(custom_settings, publisher, tmp_path):
    ctx = create_context(
        custom_settings,
        publisher=publisher,
        storage=LocalImageStorage(tmp_path / "media", "/uploads"),
    )
    ctx.init()
    yield ctx
    ctx.close()


@pytest.fixture
def custom_client(custom_context):
    with TestClient(create_app(custom_context)) as client:
        yield client


def add_account(ctx, email, password, role=Roles.WAITER) -> Account:
    with ctx.session_factory() as db:
        account = Account(email=email, password_hash=hash_password(password), role=role)
        db.add(account)
        db.commit()
        db.refresh(account)
        return account


class TestContextSettings:

    def test_login_signs_with_context_secret(self, custom_client, custom_context, custom_settings):
        add_account(custom_context, "waiter@test.com", "waiter123")

        response = custom_client.post(
            "/login", json={"email": "waiter@test.com", "password": "waiter123"}
        )
        assert response.status_code == 200
        body = response.json()
        assert body["expiresIn"] == 2 * 3600

        token = body["accessToken"]
        assert verify_jwt(token, custom_settings)["email"] == "waiter@test.com"
        with pytest.raises(TokenInvalidError):
            verify_jwt(token)

        me = custom_client.get("/me", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200

    def test_rejects_token_signed_with_other_secret(self, custom_client, custom_context):
        account = add_account(custom_context, "waiter@test.com", "waiter123")
        token = sign_access_token(account.id, account.email, account.role)
        response = custom_client.get("/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_image_limit_comes_from_context(self, custom_client, custom_context, custom_settings):
        admin = add_account(custom_context, "admin@test.com", "admin123", role=Roles.ADMIN)
        token = sign_access_token(admin.id, admin.email, admin.role, config=custom_settings)

        response = custom_client.post(
            "/product",
            data={"name": "Feijoada", "price": "42.50"},
            files={"image": ("feijoada.png", PNG_BYTES, "image/png")},
            headers={"Authorization": f"Bearer {token}"},
        )
        assert response.status_code == 400
        assert "16 bytes" in response.json()["detail"]
