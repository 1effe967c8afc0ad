# tests/test_auth.py

"""
Tests for registration, login and bearer-token authentication.
"""

from unittest.mock import patch

from conftest import PASSWORD, auth_headers
from models import AuditLog, Tenant, User
from models.enums import TenantStatus


class TestAuthentication:
    """Requests without a valid token never reach a handler."""

    def test_missing_token_is_401(self, client):
        response = client.get("/api/auth/me")

        assert response.status_code == 401
        assert response.json()["success"] is False
        assert response.headers["www-authenticate"] == "Bearer"

    def test_garbage_token_is_401(self, client):
        response = client.get("/api/properties", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 401

    def test_deactivated_user_is_401(self, client, db, owner):
        owner.is_active = False
        db.commit()

        response = client.get("/api/auth/me", headers=auth_headers(owner))

        assert response.status_code == 401

    def test_me_returns_current_user(self, client, owner):
        response = client.get("/api/auth/me", headers=auth_headers(owner))

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["email"] == owner.email
        assert data["role"] == "owner"
        assert "password" not in data


class TestRegistration:

    def test_register_then_login(self, client):
        payload = {
            "email": "Jean@Example.rw",
            "password": "secret123",
            "firstName": "Jean",
            "lastName": "Mugisha",
        }
        response = client.post("/api/auth/register", json=payload)

        assert response.status_code == 201
        body = response.json()
        assert body["data"]["token"]
        assert body["data"]["user"]["email"] == "jean@example.rw"
        assert body["data"]["user"]["role"] == "owner"

        login = client.post("/api/auth/login", json={"email": "jean@example.rw", "password": "secret123"})
        assert login.status_code == 200
        token = login.json()["data"]["token"]

        me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert me.json()["data"]["firstName"] == "Jean"

    def test_duplicate_email_is_409(self, client, owner):
        payload = {"email": owner.email, "password": "secret123", "firstName": "A", "lastName": "B"}

        response = client.post("/api/auth/register", json=payload)

        assert response.status_code == 409

    def test_racing_signup_is_409(self, client, db, owner):
        payload = {"email": owner.email, "password": "secret123", "firstName": "A", "lastName": "B"}

        with patch("services.auth_service.get_user_by_email", return_value=None):
            response = client.post("/api/auth/register", json=payload)

        assert response.status_code == 409
        assert db.query(User).filter(User.email == owner.email).count() == 1

    def test_staff_roles_cannot_self_register(self, client):
        payload = {
            "email": "sneaky@example.rw",
            "password": "secret123",
            "firstName": "A",
            "lastName": "B",
            "role": "super_admin",
        }

        response = client.post("/api/auth/register", json=payload)

        assert response.status_code == 400
        assert response.json()["errors"]

    def test_wrong_password_is_401(self, client, owner):
        response = client.post("/api/auth/login", json={"email": owner.email, "password": "wrong"})

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid email or password"

    def test_login_with_fixture_password(self, client, owner):
        response = client.post("/api/auth/login", json={"email": owner.email, "password": PASSWORD})

        assert response.status_code == 200

    def test_tenant_signup_links_existing_tenant_record(self, client, db, owner):
        record = Tenant(
            user_id=owner.id,
            first_name="Eric",
            last_name="Habimana",
            email="Eric@Example.rw",
            phone="+250788000111",
            status=TenantStatus.ACTIVE,
        )
        db.add(record)
        db.commit()

        payload = {
            "email": "eric@example.rw",
            "password": "secret123",
            "firstName": "Eric",
            "lastName": "Habimana",
            "role": "tenant",
        }
        response = client.post("/api/auth/register", json=payload)

        assert response.status_code == 201
        user_id = response.json()["data"]["user"]["id"]
        db.expire_all()
        assert db.get(Tenant, record.id).user_account_id == user_id
        assert db.get(User, user_id).role == "tenant"


class TestProfile:

    def test_update_own_profile(self, client, db, owner):
        response = client.put(
            "/api/auth/me", json={"firstName": "Jeanne", "nationalId": "1199080012345678"}, headers=auth_headers(owner)
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["firstName"] == "Jeanne"
        assert data["lastName"] == "User"
        assert data["nationalId"] == "1199080012345678"
        assert db.query(AuditLog).filter(AuditLog.action == "user.update_profile").count() == 1

    def test_super_admin_national_id_is_ignored(self, client, super_admin):
        response = client.put("/api/auth/me", json={"nationalId": "1199080012345678"}, headers=auth_headers(super_admin))

        assert response.status_code == 200
        assert response.json()["data"]["nationalId"] is None

    def test_change_password(self, client, owner):
        response = client.post(
            "/api/auth/change-password",
            json={"currentPassword": PASSWORD, "newPassword": "n3w-secret"},
            headers=auth_headers(owner),
        )

        assert response.status_code == 200
        old = client.post("/api/auth/login", json={"email": owner.email, "password": PASSWORD})
        new = client.post("/api/auth/login", json={"email": owner.email, "password": "n3w-secret"})
        assert old.status_code == 401
        assert new.status_code == 200

    def test_wrong_current_password_is_400(self, client, owner):
        response = client.post(
            "/api/auth/change-password",
            json={"currentPassword": "not-it", "newPassword": "n3w-secret"},
            headers=auth_headers(owner),
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Current password is incorrect"

    def test_short_new_password_is_400(self, client, owner):
        response = client.post(
            "/api/auth/change-password",
            json={"currentPassword": PASSWORD, "newPassword": "123"},
            headers=auth_headers(owner),
        )

        assert response.status_code == 400

    def test_requires_authentication(self, client):
        assert client.put("/api/auth/me", json={"firstName": "X"}).status_code == 401
