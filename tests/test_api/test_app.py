"""Tests for the health endpoint, app factory and error envelope."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from ganji_gateway.api.app import create_app
from ganji_gateway.config.settings import AppConfig, AuthConfig, Environment, RateLimitConfig
from ganji_gateway.errors.chain_errors import (
    InsufficientUtxoError,
    LicenseNotFoundError,
    NoEmbeddedDataError,
    NoFundsAvailableError,
    PayloadTooLargeError,
    RpcError,
    TransportError,
)
from ganji_gateway.errors.gateway_errors import (
    GatewayError,
    ServiceNotConfiguredError,
    ValidationError,
)


def _client(config: AppConfig, engine=None) -> TestClient:
    app = create_app(config=config)
    if engine is not None:
        app.state.engine = engine
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def test_client(app_config):
    """Provide a FastAPI TestClient wired to test config (no lifespan)."""
    return _client(app_config)


def _engine_raising(exc: Exception) -> MagicMock:
    engine = MagicMock()
    engine.litecoin = AsyncMock()
    engine.litecoin.verify_asset.side_effect = exc
    return engine


# ---------------------------------------------------------------------------
# Base routes
# ---------------------------------------------------------------------------


def test_health_endpoint(test_client):
    """GET /health should return status, uptime, timestamp and version."""
    response = test_client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["version"] == "1.0.0"
    assert data["uptime"] >= 0
    assert data["timestamp"].endswith("Z")
    assert data["services"] == {"engine": "not_initialized"}


def test_health_reports_engine_services(app_config):
    engine = MagicMock()
    engine.health_check = AsyncMock(
        return_value={"engine": "ok", "litecoin": "ok", "solana_signer_mainnet": "uninitialized"}
    )
    response = _client(app_config, engine).get("/health")
    assert response.status_code == 200
    assert response.json()["services"]["solana_signer_mainnet"] == "uninitialized"
    engine.health_check.assert_awaited_once()


def test_health_needs_no_api_key(test_client):
    assert test_client.get("/health").status_code == 200


def test_app_has_openapi(test_client):
    response = test_client.get("/openapi.json")
    assert response.status_code == 200
    assert response.json()["info"]["title"] == "ganji-gateway"


def test_metrics_endpoint_exposes_request_counts(test_client):
    test_client.get("/health")
    response = test_client.get("/metrics")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert 'ganji_http_requests_total{method="GET",route="/health",status="200"} 1.0' in (
        response.text
    )


def test_unknown_route_uses_envelope(test_client):
    response = test_client.get("/nope")
    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert "timestamp" in body


def test_engine_not_ready(test_client, api_key):
    response = test_client.get("/api/v1/litecoin/network", headers={"x-api-key": api_key})
    assert response.status_code == 500
    assert response.json()["code"] == "engine-not-ready"


# ---------------------------------------------------------------------------
# Error envelope
# ---------------------------------------------------------------------------


def _production_config(api_key: str) -> AppConfig:
    return AppConfig(
        environment=Environment.PRODUCTION,
        auth=AuthConfig(api_key=api_key),
        rate_limit=RateLimitConfig(enabled=False),
    )


class TestErrorEnvelope:
    def test_gateway_error_is_500_with_code(self, app_config, api_key):
        client = _client(app_config, _engine_raising(NoEmbeddedDataError("ff")))
        response = client.get("/api/v1/litecoin/verify-asset/ff", headers={"x-api-key": api_key})
        assert response.status_code == 500
        body = response.json()
        assert body == {
            "success": False,
            "error": "No OP_RETURN data found in transaction: ff",
            "code": "no-embedded-data",
            "timestamp": body["timestamp"],
        }

    @pytest.mark.parametrize(
        "exc",
        [
            NoFundsAvailableError(),
            InsufficientUtxoError("0.0001"),
            PayloadTooLargeError(162, 160),
            RpcError(-5, "No such mempool or blockchain transaction"),
            TransportError("connection refused"),
            ServiceNotConfiguredError("signer missing"),
            LicenseNotFoundError("pda"),
            GatewayError("custom", status_code=404, code="custom"),
        ],
    )
    def test_chain_failures_surface_as_500(self, app_config, api_key, exc):
        client = _client(app_config, _engine_raising(exc))
        response = client.get("/api/v1/litecoin/verify-asset/ff", headers={"x-api-key": api_key})
        assert response.status_code == 500
        assert response.json()["error"] == exc.message
        assert response.json()["code"] == exc.code

    def test_service_validation_error_is_400(self, app_config, api_key):
        client = _client(app_config, _engine_raising(ValidationError("data must be hex")))
        response = client.get("/api/v1/litecoin/verify-asset/ff", headers={"x-api-key": api_key})
        assert response.status_code == 400
        assert response.json()["error"] == "data must be hex"

    def test_unhandled_error_shows_message_outside_production(self, app_config, api_key):
        client = _client(app_config, _engine_raising(RuntimeError("kaboom")))
        response = client.get("/api/v1/litecoin/verify-asset/ff", headers={"x-api-key": api_key})
        assert response.status_code == 500
        assert response.json()["error"] == "kaboom"

    def test_production_hides_unhandled_message(self, api_key):
        client = _client(_production_config(api_key), _engine_raising(RuntimeError("secret")))
        response = client.get("/api/v1/litecoin/verify-asset/ff", headers={"x-api-key": api_key})
        assert response.status_code == 500
        assert response.json()["error"] == "Internal Server Error"

    def test_production_hides_gateway_error_message(self, api_key):
        engine = MagicMock()
        engine.litecoin = AsyncMock()
        engine.litecoin.register_asset.side_effect = NoFundsAvailableError()
        client = _client(_production_config(api_key), engine)
        response = client.post(
            "/api/v1/litecoin/register-asset",
            json={"data": "aa"},
            headers={"x-api-key": api_key},
        )
        assert response.status_code == 500
        assert response.json()["error"] == "Internal Server Error"
        assert response.json()["code"] == "no-funds-available"

    def test_production_hides_rpc_error_message(self, api_key):
        client = _client(_production_config(api_key), _engine_raising(RpcError(-5, "No such tx")))
        response = client.get("/api/v1/litecoin/verify-asset/ff", headers={"x-api-key": api_key})
        assert response.status_code == 500
        assert response.json()["error"] == "Internal Server Error"

    def test_production_keeps_validation_message(self, api_key):
        client = _client(_production_config(api_key), _engine_raising(ValidationError("bad hex")))
        response = client.get("/api/v1/litecoin/verify-asset/ff", headers={"x-api-key": api_key})
        assert response.status_code == 400
        assert response.json()["error"] == "bad hex"


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


def test_lifespan_initializes_and_closes_engine(app_config, monkeypatch):
    created = []

    class FakeEngine:
        def __init__(self, config, *, metrics=None):
            self.initialize = AsyncMock()
            self.close = AsyncMock()
            self.health_check = AsyncMock(return_value={"engine": "ok"})
            created.append(self)

    monkeypatch.setattr("ganji_gateway.api.app.GatewayEngine", FakeEngine)
    app = create_app(config=app_config)
    with TestClient(app) as client:
        assert client.get("/health").status_code == 200
        assert app.state.engine is created[0]
    created[0].initialize.assert_awaited_once()
    created[0].close.assert_awaited_once()
    assert app.state.engine is None
