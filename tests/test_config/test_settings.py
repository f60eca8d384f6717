"""Tests for the configuration system."""

from __future__ import annotations

import os
import textwrap
from typing import TYPE_CHECKING

import pytest

from ganji_gateway.config.settings import (
    AppConfig,
    AuthConfig,
    Environment,
    LitecoinConfig,
    LitecoinNodeConfig,
    LogLevel,
    Network,
    RateLimitConfig,
    ServerConfig,
    SolanaConfig,
    _load_yaml,
    _merge,
)

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host environment variables out of config defaults."""
    for key in list(os.environ):
        if key.upper().startswith("GANJI_"):
            monkeypatch.delenv(key, raising=False)


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------


class TestDefaults:
    """Verify default values."""

    def test_server_defaults(self) -> None:
        cfg = ServerConfig()
        assert cfg.host == "0.0.0.0"  # noqa: S104
        assert cfg.port == 3000

    def test_auth_defaults_to_no_key(self) -> None:
        assert AuthConfig().api_key == ""

    def test_rate_limit_defaults(self) -> None:
        cfg = RateLimitConfig()
        assert cfg.enabled is True
        assert cfg.window_seconds == 900
        assert cfg.max_requests == 100

    def test_litecoin_defaults(self) -> None:
        cfg = LitecoinConfig()
        assert cfg.testnet.url == "http://127.0.0.1:19332"
        assert cfg.mainnet.url == "http://127.0.0.1:9332"
        assert cfg.mainnet.wallet_name == "ganji"

    def test_solana_defaults(self) -> None:
        cfg = SolanaConfig()
        assert cfg.testnet.rpc_url == "https://api.devnet.solana.com"
        assert cfg.mainnet.rpc_url == "https://api.mainnet-beta.solana.com"
        assert cfg.mainnet.commitment == "confirmed"
        assert cfg.license_duration_seconds == 365 * 24 * 60 * 60

    def test_app_defaults(self) -> None:
        cfg = AppConfig()
        assert cfg.environment == Environment.DEVELOPMENT
        assert cfg.log_level == LogLevel.INFO
        assert cfg.metrics.enabled is True
        assert cfg.is_production is False


# ---------------------------------------------------------------------------
# Network selection
# ---------------------------------------------------------------------------


class TestNetwork:
    def test_from_flag(self) -> None:
        assert Network.from_flag(True) is Network.TESTNET
        assert Network.from_flag(False) is Network.MAINNET

    def test_litecoin_for_network(self) -> None:
        testnet = LitecoinNodeConfig(url="http://t")
        mainnet = LitecoinNodeConfig(url="http://m")
        cfg = LitecoinConfig(testnet=testnet, mainnet=mainnet)
        assert cfg.for_network(Network.TESTNET).url == "http://t"
        assert cfg.for_network(Network.MAINNET).url == "http://m"

    def test_solana_for_network(self) -> None:
        cfg = SolanaConfig()
        assert "devnet" in cfg.for_network(Network.TESTNET).rpc_url
        assert "mainnet" in cfg.for_network(Network.MAINNET).rpc_url


# ---------------------------------------------------------------------------
# Environment variables
# ---------------------------------------------------------------------------


class TestEnvOverrides:
    def test_top_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GANJI_ENVIRONMENT", "production")
        cfg = AppConfig()
        assert cfg.environment == Environment.PRODUCTION
        assert cfg.is_production is True

    def test_nested_server(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GANJI_SERVER__PORT", "8080")
        assert AppConfig().server.port == 8080

    def test_nested_auth(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GANJI_AUTH__API_KEY", "s3cret")
        assert AppConfig().auth.api_key == "s3cret"

    def test_nested_network(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GANJI_LITECOIN__TESTNET__USERNAME", "rpcuser")
        cfg = LitecoinConfig()
        assert cfg.testnet.username == "rpcuser"
        # Other fields of the nested model keep their defaults
        assert cfg.testnet.wallet_name == "ganji"

    def test_invalid_environment_rejected(self) -> None:
        with pytest.raises(ValueError, match="environment"):
            AppConfig(environment="staging")


# ---------------------------------------------------------------------------
# YAML
# ---------------------------------------------------------------------------


class TestYAML:
    def test_load_missing_file(self, tmp_path: Path) -> None:
        assert _load_yaml(tmp_path / "nope.yaml") == {}

    def test_load_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert _load_yaml(path) == {}

    def test_from_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text(
            textwrap.dedent("""\
                environment: production
                server:
                  port: 4000
                rate_limit:
                  max_requests: 5
                solana:
                  testnet:
                    program_id: "11111111111111111111111111111111"
            """)
        )
        cfg = AppConfig.from_yaml(path)
        assert cfg.environment == Environment.PRODUCTION
        assert cfg.server.port == 4000
        assert cfg.rate_limit.max_requests == 5
        assert cfg.solana.testnet.program_id == "11111111111111111111111111111111"

    def test_explicit_values_beat_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("log_level: DEBUG\nversion: '9.9.9'\n")
        cfg = AppConfig(config_path=str(path), version="2.0.0")
        assert cfg.version == "2.0.0"
        assert cfg.log_level == LogLevel.DEBUG

    def test_merge_is_deep(self) -> None:
        base = {"server": {"host": "h", "port": 1}, "debug": True}
        override = {"server": {"port": 2}, "debug": None}
        assert _merge(base, override) == {"server": {"host": "h", "port": 2}, "debug": True}
