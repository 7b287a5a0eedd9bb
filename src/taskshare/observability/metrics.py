"""Prometheus metrics for task distribution rounds.

Participants are short-lived processes, so the metrics live in a private
registry that can be dumped to a node-exporter textfile at exit instead
of being scraped.

Usage:
    from taskshare.observability.metrics import get_metrics

    metrics = get_metrics()
    metrics.tasks_drained_total.labels(phase="quota").inc(3)
    metrics.write_textfile("/var/lib/node_exporter/taskshare.prom")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from taskshare.config import settings

logger = logging.getLogger(__name__)


class _NoopMetric:
    """Stand-in used when metrics are disabled."""

    def labels(self, *args: Any, **kwargs: Any) -> _NoopMetric:
        return self

    def inc(self, amount: float = 1) -> None:
        pass

    def set(self, value: float) -> None:
        pass

    def observe(self, value: float) -> None:
        pass


_NOOP = _NoopMetric()


@dataclass
class MetricsRegistry:
    """Registry for Prometheus metrics."""

    # Rendezvous metrics
    rendezvous_total: Any = None
    rendezvous_timeouts_total: Any = None

    # Queue metrics
    tasks_drained_total: Any = None
    drain_duration_seconds: Any = None

    # Round metrics
    rounds_total: Any = None
    participants: Any = None

    # Internal state
    _initialized: bool = field(default=False, repr=False)
    _registry: Any = field(default=None, repr=False)

    @property
    def enabled(self) -> bool:
        return self._registry is not None

    def initialize(self, enabled: bool | None = None) -> None:
        """Initialize Prometheus metrics."""
        if self._initialized:
            return
        self._initialized = True

        if enabled is None:
            enabled = settings.enable_metrics

        if not enabled:
            logger.info("Metrics are disabled")
            self._use_noop()
            return

        from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram

        self._registry = CollectorRegistry()

        self.rendezvous_total = Counter(
            "taskshare_rendezvous_total",
            "Rendezvous passed, by barrier and role",
            ["barrier", "role"],
            registry=self._registry,
        )
        self.rendezvous_timeouts_total = Counter(
            "taskshare_rendezvous_timeouts_total",
            "Rendezvous that ran past their deadline",
            ["barrier"],
            registry=self._registry,
        )
        self.tasks_drained_total = Counter(
            "taskshare_tasks_drained_total",
            "Tasks claimed from the shared task list",
            ["phase"],
            registry=self._registry,
        )
        self.drain_duration_seconds = Histogram(
            "taskshare_drain_duration_seconds",
            "Time spent holding the drain lock",
            buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
            registry=self._registry,
        )
        self.rounds_total = Counter(
            "taskshare_rounds_total",
            "Distribution rounds, by outcome",
            ["status"],
            registry=self._registry,
        )
        self.participants = Gauge(
            "taskshare_participants",
            "Participants counted in the last round",
            registry=self._registry,
        )

        logger.debug("Prometheus metrics initialized")

    def _use_noop(self) -> None:
        self.rendezvous_total = _NOOP
        self.rendezvous_timeouts_total = _NOOP
        self.tasks_drained_total = _NOOP
        self.drain_duration_seconds = _NOOP
        self.rounds_total = _NOOP
        self.participants = _NOOP

    def generate(self) -> bytes:
        """Render metrics in Prometheus text exposition format."""
        if self._registry is None:
            return b""
        from prometheus_client import generate_latest

        return bytes(generate_latest(self._registry))

    def write_textfile(self, path: str | Path) -> None:
        """Atomically write metrics for the node-exporter textfile collector."""
        if self._registry is None:
            logger.debug("Metrics disabled, skipping textfile write")
            return
        from prometheus_client import write_to_textfile

        write_to_textfile(str(path), self._registry)
        logger.info(f"Wrote metrics to {path}")


metrics_registry = MetricsRegistry()


def get_metrics() -> MetricsRegistry:
    """Get the initialized metrics registry."""
    metrics_registry.initialize()
    return metrics_registry
