"""Tests for GatewayMetrics."""

from __future__ import annotations

import pytest

from ganji_gateway.metrics.collector import GatewayMetrics, MetricsCollector


@pytest.fixture
def metrics() -> GatewayMetrics:
    return GatewayMetrics()


class TestGatewayMetrics:
    def test_separate_registries(self) -> None:
        assert GatewayMetrics().registry is not GatewayMetrics().registry

    def test_shared_collector(self) -> None:
        collector = MetricsCollector()
        assert GatewayMetrics(collector).registry is collector.registry

    def test_track_rpc_call_success(self, metrics: GatewayMetrics) -> None:
        with metrics.track_rpc_call("litecoin", "getnetworkinfo"):
            pass
        labels = {"chain": "litecoin", "method": "getnetworkinfo"}
        reg = metrics.registry
        assert reg.get_sample_value("ganji_rpc_call_duration_seconds_count", labels) == 1.0
        assert reg.get_sample_value("ganji_rpc_errors_total", labels) is None

    def test_track_rpc_call_failure(self, metrics: GatewayMetrics) -> None:
        with (
            pytest.raises(RuntimeError),
            metrics.track_rpc_call("litecoin", "sendrawtransaction"),
        ):
            raise RuntimeError("node down")
        labels = {"chain": "litecoin", "method": "sendrawtransaction"}
        reg = metrics.registry
        assert reg.get_sample_value("ganji_rpc_errors_total", labels) == 1.0
        assert reg.get_sample_value("ganji_rpc_call_duration_seconds_count", labels) == 1.0

    def test_asset_and_recovery_counters(self, metrics: GatewayMetrics) -> None:
        metrics.inc_asset_registered("testnet")
        metrics.inc_asset_registered("testnet")
        metrics.inc_wallet_recovery("mainnet")
        reg = metrics.registry
        assert reg.get_sample_value("ganji_assets_registered_total", {"network": "testnet"}) == 2.0
        assert reg.get_sample_value("ganji_wallet_recoveries_total", {"network": "mainnet"}) == 1.0
