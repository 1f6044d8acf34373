"""
Tests for registration, login and bearer authentication.
"""

import jwt

from rest_api.models import Account
from shared.config.settings import settings
from shared.security.auth import JWT_ALGORITHM, sign_jwt, verify_jwt
from shared.security.password import hash_password, needs_rehash, verify_password


class TestPasswordHashing:
    """Test password hashing utilities."""

    def test_hash_password_returns_bcrypt_hash(self):
        hashed = hash_password("mypassword")
        assert hashed.startswith("$2b$")
        assert hashed != "mypassword"

    def test_verify_password_correct(self):
        hashed = hash_password("mypassword")
        assert verify_password("mypassword", hashed) is True

    def test_verify_password_incorrect(self):
        hashed = hash_password("mypassword")
        assert verify_password("wrongpassword", hashed) is False

    def test_plain_text_is_never_accepted(self):
        assert verify_password("plaintext", "plaintext") is False

    def test_needs_rehash(self):
        assert needs_rehash("plaintext") is True
        assert needs_rehash(hash_password("mypassword")) is False


class TestTokens:
    """Test JWT signing and verification."""

    def test_roundtrip_claims(self):
        token = sign_jwt({"sub": "7", "role": "waiter", "email": "a@x.com"})
        claims = verify_jwt(token)
        assert claims["sub"] == "7"
        assert claims["role"] == "waiter"
        assert claims["exp"] - claims["iat"] == settings.jwt_expire_hours * 3600
        assert claims["jti"]

    def test_expired_token(self, client):
        token = sign_jwt({"sub": "1", "role": "waiter"}, ttl_seconds=-10)
        response = client.get("/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
        assert response.json()["reason"] == "expired"

    def test_tampered_token(self, client):
        token = jwt.encode(
            {"sub": "1", "role": "admin", "iss": settings.jwt_issuer, "aud": settings.jwt_audience},
            "not-the-secret",
            algorithm=JWT_ALGORITHM,
        )
        response = client.get("/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
        assert response.json() == {
            "detail": "Invalid token",
            "code": "AUTH_ERROR",
            "reason": "invalid",
        }

    def test_missing_token(self, client):
        response = client.get("/me")
        assert response.status_code == 401
        assert response.json()["reason"] == "missing"

    def test_wrong_scheme(self, client):
        response = client.get("/me", headers={"Authorization": "Basic abc"})
        assert response.status_code == 401
        assert response.json()["reason"] == "invalid"

    def test_token_for_deleted_account(self, client, db_session, waiter, waiter_headers):
        db_session.delete(waiter)
        db_session.commit()
        response = client.get("/me", headers=waiter_headers)
        assert response.status_code == 401
        assert response.json()["reason"] == "invalid"


class TestRegister:
    """Test account registration."""

    def test_register_creates_waiter(self, client, db_session):
        response = client.post("/create", json={"email": "A@x.com", "password": "secret"})
        assert response.status_code == 201
        data = response.json()
        assert data["email"] == "a@x.com"
        assert data["role"] == "waiter"
        assert "createdAt" in data
        assert "password" not in data and "passwordHash" not in data

        stored = db_session.get(Account, data["id"])
        assert stored.password_hash != "secret"
        assert verify_password("secret", stored.password_hash)

    def test_register_alias_route(self, client):
        response = client.post("/user", json={"email": "b@x.com", "password": "secret"})
        assert response.status_code == 201

    def test_register_duplicate_email(self, client):
        client.post("/create", json={"email": "a@x.com", "password": "secret"})
        response = client.post("/create", json={"email": "A@X.com", "password": "other"})
        assert response.status_code == 409
        assert response.json()["code"] == "CONFLICT"

    def test_register_missing_password(self, client):
        response = client.post("/create", json={"email": "a@x.com"})
        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert body["errors"]

    def test_register_invalid_email(self, client):
        response = client.post("/create", json={"email": "not-an-email", "password": "secret"})
        assert response.status_code == 400


class TestLogin:
    """Test login and admin login."""

    def test_login_success(self, client, waiter):
        response = client.post("/login", json={"email": "waiter@test.com", "password": "waiter123"})
        assert response.status_code == 200
        data = response.json()
        assert data["tokenType"] == "Bearer"
        assert data["account"]["email"] == "waiter@test.com"

        claims = verify_jwt(data["accessToken"])
        assert claims["sub"] == str(waiter.id)
        assert claims["role"] == "waiter"

    def test_login_wrong_password(self, client, waiter):
        response = client.post("/login", json={"email": "waiter@test.com", "password": "nope"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid credentials"
        assert response.json()["reason"] == "credentials"

    def test_login_unknown_email(self, client):
        response = client.post("/login", json={"email": "ghost@test.com", "password": "nope"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid credentials"

    def test_admin_login_requires_admin(self, client, waiter):
        response = client.post("/admin", json={"email": "waiter@test.com", "password": "waiter123"})
        assert response.status_code == 403
        assert response.json() == {"detail": "Admin access required", "code": "FORBIDDEN"}

    def test_admin_login_success(self, client, admin):
        response = client.post("/admin", json={"email": "admin@test.com", "password": "admin123"})
        assert response.status_code == 200
        assert verify_jwt(response.json()["accessToken"])["role"] == "admin"

    def test_admin_login_bad_credentials(self, client, admin):
        response = client.post("/admin", json={"email": "admin@test.com", "password": "wrong"})
        assert response.status_code == 401

    def test_me(self, client, waiter, waiter_headers):
        response = client.get("/me", headers=waiter_headers)
        assert response.status_code == 200
        assert response.json()["id"] == waiter.id


class TestAccounts:
    """Test account reads and role toggling."""

    def test_list_accounts(self, client, waiter, admin, waiter_headers):
        response = client.get("/user", headers=waiter_headers)
        assert response.status_code == 200
        assert [a["email"] for a in response.json()] == ["waiter@test.com", "admin@test.com"]

    def test_get_account(self, client, admin, waiter_headers):
        response = client.get(f"/user/{admin.id}", headers=waiter_headers)
        assert response.status_code == 200
        assert response.json()["role"] == "admin"

    def test_get_account_not_found(self, client, waiter_headers):
        response = client.get("/user/9999", headers=waiter_headers)
        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    def test_get_account_by_email(self, client, admin, waiter_headers):
        response = client.get("/user/email", params={"email": "ADMIN@test.com"}, headers=waiter_headers)
        assert response.status_code == 200
        assert response.json()["id"] == admin.id

    def test_get_account_by_unknown_email(self, client, waiter_headers):
        response = client.get("/user/email", params={"email": "ghost@test.com"}, headers=waiter_headers)
        assert response.status_code == 404

    def test_reads_require_token(self, client, waiter):
        assert client.get("/user").status_code == 401

    def test_toggle_role(self, client, waiter, admin_headers):
        response = client.patch(f"/user/{waiter.id}", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["role"] == "admin"

        response = client.patch(f"/user/{waiter.id}", headers=admin_headers)
        assert response.json()["role"] == "waiter"

    def test_toggle_role_requires_admin(self, client, waiter, admin, waiter_headers):
        response = client.patch(f"/user/{admin.id}", headers=waiter_headers)
        assert response.status_code == 403

    def test_toggle_role_not_found(self, client, admin_headers):
        response = client.patch("/user/9999", headers=admin_headers)
        assert response.status_code == 404

    def test_role_change_applies_to_existing_token(self, client, waiter, admin, waiter_headers, admin_headers):
        """Admin gating reads the stored role, so a promotion works without re-login."""
        assert client.post("/table", json={"number": 1}, headers=waiter_headers).status_code == 403

        client.patch(f"/user/{waiter.id}", headers=admin_headers)

        assert client.post("/table", json={"number": 1}, headers=waiter_headers).status_code == 201
