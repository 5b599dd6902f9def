"""
Unit tests for registration, login and the current-user endpoint.
"""

from fastapi.testclient import TestClient

from app.auth import create_access_token


class TestRegister:
    def test_register_returns_token(self, client: TestClient):
        response = client.post(
            "/auth/register",
            json={"name": "Aline", "email": "aline@example.com", "password": "secret123"}
        )

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Registration successful"
        assert body["data"]["user"]["role"] == "user"
        assert body["data"]["token"]

    def test_duplicate_email(self, client: TestClient, owner):
        response = client.post(
            "/auth/register",
            json={"name": "Again", "email": owner.email, "password": "secret123"}
        )

        assert response.status_code == 409
        assert response.json()["detail"] == "Email already registered"

    def test_short_password_is_rejected(self, client: TestClient):
        response = client.post(
            "/auth/register",
            json={"name": "Aline", "email": "aline@example.com", "password": "123"}
        )

        assert response.status_code == 422
        assert response.json()["field"] == "password"


class TestLogin:
    def test_login_success(self, client: TestClient, owner):
        response = client.post("/auth/login", json={"email": owner.email, "password": "testpass123"})

        assert response.status_code == 200
        assert response.json()["data"]["user"]["id"] == owner.id

    def test_wrong_password(self, client: TestClient, owner):
        response = client.post("/auth/login", json={"email": owner.email, "password": "nope"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Incorrect email or password"

    def test_token_from_login_opens_protected_routes(self, client: TestClient, owner):
        token = client.post(
            "/auth/login", json={"email": owner.email, "password": "testpass123"}
        ).json()["data"]["token"]

        response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200
        assert response.json()["data"]["email"] == owner.email


class TestMe:
    def test_requires_token(self, client: TestClient):
        assert client.get("/auth/me").status_code == 401

    def test_token_for_deleted_user(self, client: TestClient):
        token = create_access_token(data={"sub": "ghost@example.com"})

        response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
