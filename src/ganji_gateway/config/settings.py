"""Application settings loaded from environment variables and config files.

Configuration is loaded from (highest priority first):
1. Environment variables (prefix: ``GANJI_``, nested via ``__``)
2. YAML config file (``GANJI_CONFIG_PATH`` env var or ``AppConfig.from_yaml``)
3. Defaults defined here

Each chain carries exactly two network variants (``testnet`` and ``mainnet``)
and is resolved through ``for_network()`` with a :class:`Network` value.
"""

from __future__ import annotations

import enum
from pathlib import Path
from typing import Any, Self

import yaml
from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# ---------------------------------------------------------------------------
# Enums for validated choices
# ---------------------------------------------------------------------------


class Environment(enum.StrEnum):
    """Deployment environment."""

    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TEST = "test"


class Network(enum.StrEnum):
    """Chain network variant."""

    TESTNET = "testnet"
    MAINNET = "mainnet"

    @classmethod
    def from_flag(cls, use_testnet: bool) -> Network:
        """Map the HTTP ``useTestnet`` flag onto a network."""
        return cls.TESTNET if use_testnet else cls.MAINNET


class LogLevel(enum.StrEnum):
    """Accepted log levels."""

    CRITICAL = "CRITICAL"
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"
    DEBUG = "DEBUG"


# ---------------------------------------------------------------------------
# Sub-config models
# ---------------------------------------------------------------------------


class ServerConfig(BaseSettings):
    """HTTP server settings."""

    model_config = SettingsConfigDict(
        env_prefix="GANJI_SERVER__",
        case_sensitive=False,
    )

    host: str = "0.0.0.0"  # noqa: S104
    port: int = 3000


class AuthConfig(BaseSettings):
    """API key authentication settings."""

    model_config = SettingsConfigDict(
        env_prefix="GANJI_AUTH__",
        case_sensitive=False,
    )

    api_key: str = Field(default="", description="Value expected in the x-api-key header")


class RateLimitConfig(BaseSettings):
    """Per-client sliding window rate limit."""

    model_config = SettingsConfigDict(
        env_prefix="GANJI_RATE_LIMIT__",
        case_sensitive=False,
    )

    enabled: bool = True
    window_seconds: int = 15 * 60
    max_requests: int = 100


class LitecoinNodeConfig(BaseModel):
    """Connection details for one Litecoin node."""

    url: str = "http://127.0.0.1:9332"
    username: str = ""
    password: str = ""
    wallet_name: str = "ganji"
    timeout: float = 30.0


class LitecoinConfig(BaseSettings):
    """Litecoin JSON-RPC settings for both networks."""

    model_config = SettingsConfigDict(
        env_prefix="GANJI_LITECOIN__",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    testnet: LitecoinNodeConfig = Field(
        default_factory=lambda: LitecoinNodeConfig(url="http://127.0.0.1:19332")
    )
    mainnet: LitecoinNodeConfig = Field(default_factory=LitecoinNodeConfig)

    def for_network(self, network: Network) -> LitecoinNodeConfig:
        return self.testnet if network is Network.TESTNET else self.mainnet


class SolanaNetworkConfig(BaseModel):
    """Connection and signer details for one Solana cluster."""

    rpc_url: str = "https://api.mainnet-beta.solana.com"
    wallet_path: str = "./secrets/master-keypair.json"
    token_mint: str = ""
    program_id: str = "BTQyLHZd6PPTu5jY2wWUxxYAmWKRVyadSMZwhLmX4gvn"
    commitment: str = "confirmed"


class SolanaConfig(BaseSettings):
    """Solana RPC and license program settings for both networks."""

    model_config = SettingsConfigDict(
        env_prefix="GANJI_SOLANA__",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    testnet: SolanaNetworkConfig = Field(
        default_factory=lambda: SolanaNetworkConfig(
            rpc_url="https://api.devnet.solana.com",
            wallet_path="./secrets/devnet-keypair.json",
        )
    )
    mainnet: SolanaNetworkConfig = Field(default_factory=SolanaNetworkConfig)
    license_duration_seconds: int = 365 * 24 * 60 * 60

    def for_network(self, network: Network) -> SolanaNetworkConfig:
        return self.testnet if network is Network.TESTNET else self.mainnet


class MetricsConfig(BaseSettings):
    """Prometheus metrics settings."""

    model_config = SettingsConfigDict(
        env_prefix="GANJI_METRICS__",
        case_sensitive=False,
    )

    enabled: bool = True


# ---------------------------------------------------------------------------
# Top-level config
# ---------------------------------------------------------------------------


def _load_yaml(path: str | Path) -> dict[str, Any]:
    """Load a YAML configuration file and return its contents as a dict.

    Returns an empty dict if the file doesn't exist or is empty.
    """
    p = Path(path)
    if not p.exists():
        return {}
    text = p.read_text(encoding="utf-8")
    data = yaml.safe_load(text)
    return data if isinstance(data, dict) else {}


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, val in override.items():
        if isinstance(val, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], val)
        elif val is not None:
            merged[key] = val
    return merged


class AppConfig(BaseSettings):
    """Top-level application configuration.

    Loads settings from environment variables (``GANJI_`` prefix),
    an optional YAML file, and built-in defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="GANJI_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    environment: Environment = Environment.DEVELOPMENT
    debug: bool = False
    version: str = "1.0.0"
    log_level: LogLevel = LogLevel.INFO
    config_path: str = ""

    server: ServerConfig = Field(default_factory=ServerConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)
    rate_limit: RateLimitConfig = Field(default_factory=RateLimitConfig)
    litecoin: LitecoinConfig = Field(default_factory=LitecoinConfig)
    solana: SolanaConfig = Field(default_factory=SolanaConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)

    @model_validator(mode="before")
    @classmethod
    def _merge_yaml(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Merge YAML config file contents under the env var overrides."""
        config_path = values.get("config_path", "")
        if not config_path:
            return values
        yaml_data = _load_yaml(config_path)
        # YAML values serve as defaults; env vars (already in *values*) win.
        return _merge(yaml_data, values)

    @classmethod
    def from_yaml(cls, path: str | Path) -> Self:
        """Construct ``AppConfig`` loading defaults from a YAML file.

        Environment variables still override YAML values.
        """
        return cls(config_path=str(path))

    @property
    def is_production(self) -> bool:
        return self.environment is Environment.PRODUCTION
