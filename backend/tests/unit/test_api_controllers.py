"""
Unit tests for the /api/v1 controllers.

The ``_get_*_service`` factories are patched with services built over mocked
repositories, so only request parsing and response formatting are covered.
"""

from unittest.mock import Mock, patch

import pytest

from scheduler.domain.entities import Provider, ServiceCategory, UserSettings
from scheduler.services.category_service import CategoryService
from scheduler.services.provider_service import ProviderService


def _provider_service() -> ProviderService:
    repo = Mock()
    repo.exists.return_value = True
    repo.username_in_use.return_value = False
    repo.email_in_use.return_value = False
    repo.get.return_value = [
        Provider(
            id=2,
            first_name="Ann",
            last_name="Lee",
            email="ann@example.org",
            settings=UserSettings(username="ann"),
            services=[1],
        )
    ]
    return ProviderService(repo, Mock())


@pytest.fixture
def provider_service():
    service = _provider_service()
    with patch(
        "scheduler.controllers.api_v1.providers._get_provider_service",
        return_value=service,
    ):
        yield service


@pytest.mark.unit
@pytest.mark.controllers
class TestProvidersIndex:
    def test_paging_and_sort_are_forwarded(self, client, auth_headers, provider_service):
        response = client.get(
            "/api/v1/providers?page=2&length=2&sort=-lastName,id", headers=auth_headers
        )

        assert response.status_code == 200
        provider_service.repo.get.assert_called_once_with(
            where=None, limit=2, offset=2, order_by=[("last_name", "desc"), ("id", "asc")]
        )
        data = response.get_json()
        assert data[0]["firstName"] == "Ann"
        assert data[0]["settings"]["username"] == "ann"
        assert "password" not in data[0]["settings"]

    def test_keyword_search(self, client, auth_headers, provider_service):
        provider_service.repo.search.return_value = []

        response = client.get("/api/v1/providers?q=ann", headers=auth_headers)

        assert response.status_code == 200
        assert response.get_json() == []
        provider_service.repo.search.assert_called_once()
        assert provider_service.repo.search.call_args[0][0] == "ann"

    def test_fields_filter(self, client, auth_headers, provider_service):
        response = client.get(
            "/api/v1/providers?fields=id,firstName", headers=auth_headers
        )

        assert response.get_json() == [{"id": 2, "firstName": "Ann"}]

    def test_invalid_page(self, client, auth_headers, provider_service):
        response = client.get("/api/v1/providers?page=0", headers=auth_headers)

        assert response.status_code == 400
        assert response.get_json() == {
            "success": False,
            "message": "The page parameter must be at least 1.",
        }

    def test_unsupported_relation(self, client, auth_headers, provider_service):
        response = client.get("/api/v1/providers?with=appointments", headers=auth_headers)

        assert response.status_code == 400
        assert "relation is not supported: appointments" in response.get_json()["message"]

    def test_unsupported_relation_on_empty_collection(
        self, client, auth_headers, provider_service
    ):
        provider_service.repo.get.return_value = []

        response = client.get("/api/v1/providers?with=appointments", headers=auth_headers)

        assert response.status_code == 400
        assert response.get_json()["message"] == (
            "The requested provider relation is not supported: appointments"
        )
        provider_service.repo.get.assert_not_called()

    def test_unexpected_errors_are_hidden(self, client, auth_headers, provider_service):
        provider_service.repo.get.side_effect = RuntimeError("database exploded")

        response = client.get("/api/v1/providers", headers=auth_headers)

        assert response.status_code == 500
        assert response.get_json()["message"] == "Internal server error"

    def test_requires_authentication(self, client, provider_service):
        response = client.get("/api/v1/providers")

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"].startswith("Basic")
        provider_service.repo.get.assert_not_called()

    def test_cors_headers(self, client, auth_headers, provider_service):
        response = client.get("/api/v1/providers", headers=auth_headers)

        assert response.headers["Access-Control-Allow-Origin"] == "*"
        assert "PUT" in response.headers["Access-Control-Allow-Methods"]


@pytest.mark.unit
@pytest.mark.controllers
class TestProvidersWrite:
    def test_show_missing(self, client, auth_headers, provider_service):
        provider_service.repo.find.return_value = None

        response = client.get("/api/v1/providers/9", headers=auth_headers)

        assert response.status_code == 404
        assert response.get_json()["message"] == (
            "The provided provider ID was not found in the database: 9"
        )

    def test_store_validation_error(self, client, auth_headers, provider_service):
        response = client.post(
            "/api/v1/providers", json={"firstName": "Ann"}, headers=auth_headers
        )

        assert response.status_code == 400
        message = response.get_json()["message"]
        assert "Not all required fields are provided" in message
        assert "The user password cannot be empty" in message
        provider_service.repo.insert.assert_not_called()

    def test_store_rejects_non_object_body(self, client, auth_headers, provider_service):
        response = client.post("/api/v1/providers", json=[1, 2], headers=auth_headers)

        assert response.status_code == 400

    def test_store_ignores_client_id(self, client, auth_headers, provider_service):
        provider_service.repo.insert.return_value = 2
        provider_service.repo.find.return_value = provider_service.repo.get.return_value[0]

        response = client.post(
            "/api/v1/providers",
            json={
                "id": 55,
                "firstName": "Ann",
                "lastName": "Lee",
                "email": "ann@example.org",
                "phone": "555",
                "settings": {"username": "ann", "password": "long-enough-1"},
            },
            headers=auth_headers,
        )

        assert response.status_code == 201
        assert response.get_json()["id"] == 2
        assert provider_service.repo.insert.call_args[0][0].id is None

    def test_destroy(self, client, auth_headers, provider_service):
        provider_service.repo.delete.return_value = True

        response = client.delete("/api/v1/providers/2", headers=auth_headers)

        assert response.status_code == 204
        assert response.data == b""

    def test_destroy_missing(self, client, auth_headers, provider_service):
        provider_service.repo.delete.return_value = False

        response = client.delete("/api/v1/providers/2", headers=auth_headers)

        assert response.status_code == 404


@pytest.mark.unit
@pytest.mark.controllers
def test_update_merges_onto_stored_record(client, auth_headers):
    repo = Mock()
    repo.exists.return_value = True
    repo.find.return_value = ServiceCategory(id=4, name="Hair", description="Cuts")
    repo.update.return_value = 4
    service = CategoryService(repo)

    with patch(
        "scheduler.controllers.api_v1.categories._get_category_service",
        return_value=service,
    ):
        response = client.put(
            "/api/v1/categories/4", json={"name": "Hair & Beard"}, headers=auth_headers
        )

    assert response.status_code == 200
    updated = repo.update.call_args[0][0]
    assert updated == ServiceCategory(id=4, name="Hair & Beard", description="Cuts")
