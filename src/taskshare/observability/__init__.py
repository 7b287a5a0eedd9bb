"""Observability for task sharing.

Provides structured logging, Prometheus metrics and elapsed-time reporting:
- JSON or console logs carrying participant context
- Metrics in a private registry, dumpable to a textfile
- Stopwatch and end-of-run runtime report
"""

from taskshare.observability.logging import (
    LogContext,
    configure_logging,
    get_logger,
    participant_var,
    phase_var,
)
from taskshare.observability.metrics import (
    MetricsRegistry,
    get_metrics,
    metrics_registry,
)
from taskshare.observability.timing import RuntimeReport, Stopwatch

__all__ = [
    # Logging
    "configure_logging",
    "get_logger",
    "LogContext",
    "participant_var",
    "phase_var",
    # Metrics
    "MetricsRegistry",
    "metrics_registry",
    "get_metrics",
    # Timing
    "Stopwatch",
    "RuntimeReport",
]
