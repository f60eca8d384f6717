"""Shared test fixtures for the ganji-gateway test suite."""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from ganji_gateway.config.settings import (
    AppConfig,
    AuthConfig,
    Environment,
    LitecoinConfig,
    LitecoinNodeConfig,
    Network,
    RateLimitConfig,
)
from ganji_gateway.litecoin.rpc import LitecoinRPCClient

TEST_API_KEY = "test-api-key"


class FakeNode:
    """Scriptable Litecoin node behind an ``httpx.MockTransport``.

    ``responses`` maps a method name to a static result, an
    ``httpx.Response``, or a list of responses consumed in order (the last
    one repeats).
    """

    def __init__(self) -> None:
        self.responses: dict[str, Any] = {}
        self.calls: list[tuple[str, list[Any], str]] = []

    @staticmethod
    def error(code: int, message: str, status: int = 500) -> httpx.Response:
        """A node-style JSON-RPC error response."""
        return httpx.Response(
            status,
            json={"result": None, "error": {"code": code, "message": message}, "id": "x"},
        )

    @staticmethod
    def result(value: Any) -> httpx.Response:
        return httpx.Response(200, json={"result": value, "error": None, "id": "x"})

    def count(self, method: str) -> int:
        return sum(1 for m, _, _ in self.calls if m == method)

    def methods(self) -> list[str]:
        return [m for m, _, _ in self.calls]

    def params(self, method: str) -> list[list[Any]]:
        return [p for m, p, _ in self.calls if m == method]

    def paths(self, method: str) -> list[str]:
        return [path for m, _, path in self.calls if m == method]

    def handler(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        method = payload["method"]
        self.calls.append((method, payload["params"], request.url.path))

        if method not in self.responses:
            return self.error(-32601, "Method not found", status=404)
        answer = self.responses[method]
        if isinstance(answer, list) and answer and isinstance(answer[0], httpx.Response):
            answer = answer.pop(0) if len(answer) > 1 else answer[0]
        if isinstance(answer, httpx.Response):
            return answer
        return self.result(answer)

    def attach(self, rpc: LitecoinRPCClient) -> None:
        """Replace the internal httpx client with one using mock transport."""
        rpc._client = httpx.AsyncClient(
            transport=httpx.MockTransport(self.handler),
            base_url="http://127.0.0.1:19332",
        )


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------


@pytest.fixture
def app_config() -> AppConfig:
    """Provide a test AppConfig with safe defaults."""
    return AppConfig(
        environment=Environment.TEST,
        auth=AuthConfig(api_key=TEST_API_KEY),
        rate_limit=RateLimitConfig(enabled=False),
    )


@pytest.fixture
def api_key() -> str:
    return TEST_API_KEY


@pytest.fixture
def node_config() -> LitecoinNodeConfig:
    return LitecoinNodeConfig(
        url="http://127.0.0.1:19332",
        username="user",
        password="pass",
        wallet_name="ganji",
    )


@pytest.fixture
def litecoin_config(node_config) -> LitecoinConfig:
    return LitecoinConfig(testnet=node_config, mainnet=node_config)


# ---------------------------------------------------------------------------
# Litecoin node
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_node() -> FakeNode:
    return FakeNode()


@pytest.fixture
def rpc_client(node_config, fake_node) -> LitecoinRPCClient:
    """A testnet RPC client wired to :class:`FakeNode`."""
    rpc = LitecoinRPCClient(node_config, Network.TESTNET)
    fake_node.attach(rpc)
    return rpc
