"""Tests for service endpoints and the error envelope."""

import json
import logging

from storefront.common_instrumentation import setup_opentelemetry, shutdown_opentelemetry
from storefront.common_logging import setup_logging


class TestServiceEndpoints:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_root(self, client):
        assert client.get("/").json()["docs"] == "/docs"

    def test_unknown_route_uses_error_envelope(self, client):
        response = client.get("/api/v1/nowhere")

        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["statusCode"] == 404
        assert body["errors"] == []


class TestAmbientSetup:
    def test_json_logs_carry_service_name(self, capsys):
        try:
            setup_logging("storefront-api", log_level="INFO", log_format="json")
            logging.getLogger("storefront.orders").info("order placed")

            record = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        finally:
            setup_logging("storefront-api", log_level="WARNING", log_format="text")

        assert record["service"] == "storefront-api"
        assert record["logger"] == "storefront.orders"
        assert record["level"] == "INFO"
        assert record["message"] == "order placed"

    def test_tracing_disabled(self):
        provider = setup_opentelemetry("storefront-api", "http://localhost:4317", enabled=False)

        assert provider is None
        shutdown_opentelemetry(provider)
