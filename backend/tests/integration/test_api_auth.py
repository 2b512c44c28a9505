"""
Authentication of the /api/v1 endpoints: Basic admin credentials, Bearer
API tokens and JWTs issued by POST /api/v1/token.
"""

import base64

import pytest


def _basic(username, password):
    raw = f"{username}:{password}".encode("utf-8")
    return {"Authorization": "Basic " + base64.b64encode(raw).decode("ascii")}


@pytest.mark.integration
@pytest.mark.auth
class TestApiAuthentication:
    def test_missing_credentials(self, client):
        response = client.get("/api/v1/customers")

        assert response.status_code == 401
        assert response.get_json()["success"] is False
        assert "WWW-Authenticate" in response.headers

    def test_basic_admin_credentials(self, client, basic_auth_headers):
        response = client.get("/api/v1/customers", headers=basic_auth_headers)

        assert response.status_code == 200
        assert response.get_json() == []

    def test_basic_wrong_password(self, client):
        response = client.get("/api/v1/customers", headers=_basic("admin", "wrong"))

        assert response.status_code == 401
        assert response.get_json()["message"] == "Invalid credentials"

    def test_basic_non_admin_is_rejected(self, client, auth_headers):
        client.post(
            "/api/v1/providers",
            json={
                "firstName": "Jane",
                "lastName": "Doe",
                "email": "jane@example.org",
                "phone": "555",
                "settings": {"username": "jdoe", "password": "provider-pass"},
            },
            headers=auth_headers,
        )

        response = client.get(
            "/api/v1/customers", headers=_basic("jdoe", "provider-pass")
        )

        assert response.status_code == 401

    def test_invalid_bearer_token(self, client):
        response = client.get(
            "/api/v1/customers", headers={"Authorization": "Bearer not-a-token"}
        )

        assert response.status_code == 401
        assert response.get_json()["message"] == "Invalid or expired token"

    def test_configured_api_token(self, app, client):
        app.config["API_TOKEN"] = "static-token-value"

        response = client.get(
            "/api/v1/customers",
            headers={"Authorization": "Bearer static-token-value"},
        )

        assert response.status_code == 200

    def test_api_token_setting(self, client, auth_headers):
        client.put(
            "/api/v1/settings/api_token",
            json={"value": "stored-token-value"},
            headers=auth_headers,
        )

        response = client.get(
            "/api/v1/customers",
            headers={"Authorization": "Bearer stored-token-value"},
        )

        assert response.status_code == 200

    def test_empty_api_token_setting_never_matches(self, client):
        response = client.get("/api/v1/customers", headers={"Authorization": "Bearer "})

        assert response.status_code == 401


@pytest.mark.integration
@pytest.mark.auth
class TestTokenEndpoint:
    def test_issue_token(self, client):
        response = client.post(
            "/api/v1/token", json={"username": "admin", "password": "admin-pass-123"}
        )

        assert response.status_code == 200
        body = response.get_json()
        assert body["tokenType"] == "Bearer"

        response = client.get(
            "/api/v1/customers", headers={"Authorization": f"Bearer {body['token']}"}
        )
        assert response.status_code == 200

    def test_wrong_password(self, client):
        response = client.post(
            "/api/v1/token", json={"username": "admin", "password": "nope"}
        )

        assert response.status_code == 401
        assert response.get_json()["message"] == "Invalid credentials"

    def test_missing_fields(self, client):
        response = client.post("/api/v1/token", json={"username": "admin"})

        assert response.status_code == 400
        assert response.get_json()["message"] == (
            "Not all required fields are provided: password."
        )

    def test_non_admin_gets_no_token(self, client, auth_headers):
        client.post(
            "/api/v1/providers",
            json={
                "firstName": "Jane",
                "lastName": "Doe",
                "email": "jane@example.org",
                "phone": "555",
                "settings": {"username": "jdoe", "password": "provider-pass"},
            },
            headers=auth_headers,
        )

        response = client.post(
            "/api/v1/token", json={"username": "jdoe", "password": "provider-pass"}
        )

        assert response.status_code == 401

    def test_provider_jwt_is_rejected(self, client):
        from scheduler.core.security import create_user_token

        token = create_user_token(99, "jdoe", "provider")

        response = client.get(
            "/api/v1/customers", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 401
        assert response.get_json()["message"] == (
            "The API is only available to admin users"
        )
