"""Metrics collector — Prometheus counters and histograms.

- ``ganji_rpc_call_duration_seconds`` histogram (chain, method)
- ``ganji_rpc_errors_total`` counter (chain, method)
- ``ganji_assets_registered_total`` counter (network)
- ``ganji_wallet_recoveries_total`` counter (network)
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import TYPE_CHECKING

from prometheus_client import CollectorRegistry, Counter, Histogram

if TYPE_CHECKING:
    from collections.abc import Iterator


_PREFIX = "ganji"


class MetricsCollector:
    """Low-level Prometheus collector that owns the registry.

    Use :class:`GatewayMetrics` for the high-level tracking interface.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self._registry = registry or CollectorRegistry()

    @property
    def registry(self) -> CollectorRegistry:
        """Return the underlying Prometheus registry."""
        return self._registry

    def histogram(self, name: str, doc: str, labels: tuple[str, ...] = ()) -> Histogram:
        """Register and return a Histogram."""
        return Histogram(name, doc, labels, registry=self._registry)

    def counter(self, name: str, doc: str, labels: tuple[str, ...] = ()) -> Counter:
        """Register and return a Counter."""
        return Counter(name, doc, labels, registry=self._registry)


class GatewayMetrics:
    """High-level gateway metrics.

    All histograms track operation duration in seconds.
    """

    def __init__(self, collector: MetricsCollector | None = None) -> None:
        self._collector = collector or MetricsCollector()

        self._rpc_duration = self._collector.histogram(
            f"{_PREFIX}_rpc_call_duration_seconds",
            "Duration of outbound chain RPC calls",
            ("chain", "method"),
        )
        self._rpc_errors = self._collector.counter(
            f"{_PREFIX}_rpc_errors_total",
            "Outbound chain RPC calls that raised",
            ("chain", "method"),
        )
        self._assets_registered = self._collector.counter(
            f"{_PREFIX}_assets_registered_total",
            "Assets registered in null-data outputs",
            ("network",),
        )
        self._wallet_recoveries = self._collector.counter(
            f"{_PREFIX}_wallet_recoveries_total",
            "Managed wallet load-or-create recoveries",
            ("network",),
        )

    @property
    def registry(self) -> CollectorRegistry:
        """Return the underlying Prometheus registry."""
        return self._collector.registry

    # -- Counters --

    def inc_asset_registered(self, network: str) -> None:
        self._assets_registered.labels(network=network).inc()

    def inc_wallet_recovery(self, network: str) -> None:
        self._wallet_recoveries.labels(network=network).inc()

    # -- Operation trackers (context managers) --

    @contextmanager
    def track_rpc_call(self, chain: str, method: str) -> Iterator[None]:
        """Track the duration of an RPC call and count failures."""
        start = time.monotonic()
        try:
            yield
        except Exception:
            self._rpc_errors.labels(chain=chain, method=method).inc()
            raise
        finally:
            self._rpc_duration.labels(chain=chain, method=method).observe(
                time.monotonic() - start
            )
