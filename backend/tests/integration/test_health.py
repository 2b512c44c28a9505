"""Health check endpoints."""

from unittest.mock import patch

import pytest


@pytest.mark.integration
class TestHealth:
    def test_healthy(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.get_json() == {"status": "healthy", "database": "connected"}

    def test_database_down(self, client):
        with patch(
            "scheduler.controllers.health_controller.check_database_connection",
            return_value=False,
        ):
            response = client.get("/health")

        assert response.status_code == 503
        assert response.get_json()["status"] == "unhealthy"

    def test_pool_requires_token(self, app, client):
        app.config["HEALTH_CHECK_TOKEN"] = "health-secret"

        assert client.get("/health/pool").status_code == 401

        response = client.get("/health/pool", headers={"X-Health-Token": "health-secret"})
        assert response.status_code == 200
        assert response.get_json()["dialect"] == "sqlite"

    def test_metrics_endpoint(self, client):
        response = client.get("/metrics")

        assert response.status_code == 200
