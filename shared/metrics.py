"""
Shared metrics configuration for the pricing services.
"""

from prometheus_client import Counter, Histogram, Gauge, Info, CollectorRegistry, REGISTRY
from typing import Dict, Any, Optional
import time
from contextlib import contextmanager


class MetricsCollector:
    """Centralized metrics collector for services."""

    def __init__(self, service_name: str, registry: Optional[CollectorRegistry] = None):
        self.service_name = service_name
        self.registry = registry if registry is not None else REGISTRY
        self._metrics: Dict[str, Any] = {}
        self._setup_metrics()

    def _setup_metrics(self):
        """Set up common metrics for the service."""

        # Service info
        self._metrics["service_info"] = Info(
            "service_info",
            "Service information",
            registry=self.registry
        )
        self._metrics["service_info"].info({
            "service": self.service_name,
            "version": "1.0.0"
        })

        # Error metrics
        self._metrics["errors_total"] = Counter(
            "errors_total",
            "Total errors",
            ["error_type", "service"],
            registry=self.registry
        )

        self._setup_price_cache_metrics()

    def _setup_price_cache_metrics(self):
        """Set up price cache metrics."""
        self._metrics["price_cache_hits_total"] = Counter(
            "price_cache_hits_total",
            "Total price cache hits",
            registry=self.registry
        )

        self._metrics["price_cache_misses_total"] = Counter(
            "price_cache_misses_total",
            "Total price cache misses",
            registry=self.registry
        )

        self._metrics["price_cache_epoch_resets_total"] = Counter(
            "price_cache_epoch_resets_total",
            "Total resets of the shared cache epoch",
            registry=self.registry
        )

        self._metrics["price_service_errors_total"] = Counter(
            "price_service_errors_total",
            "Total failed price service calls",
            registry=self.registry
        )

        self._metrics["price_service_call_duration_seconds"] = Histogram(
            "price_service_call_duration_seconds",
            "Price service call duration in seconds",
            registry=self.registry
        )

        self._metrics["price_batch_duration_seconds"] = Histogram(
            "price_batch_duration_seconds",
            "Batch price lookup duration in seconds",
            ["outcome"],
            registry=self.registry
        )

        self._metrics["price_batch_size"] = Histogram(
            "price_batch_size",
            "Number of item codes per batch lookup",
            buckets=(1, 5, 10, 25, 50, 100, 250, 500, 1000),
            registry=self.registry
        )

        self._metrics["price_cache_entries"] = Gauge(
            "price_cache_entries",
            "Number of item codes held in the price cache",
            registry=self.registry
        )

    def record_error(self, error_type: str, service: Optional[str] = None):
        """Record error metrics."""
        service_name = service or self.service_name
        self._metrics["errors_total"].labels(error_type=error_type, service=service_name).inc()

    @contextmanager
    def time_operation(self, operation_name: str, **labels):
        """Context manager to time an operation."""
        start_time = time.perf_counter()
        try:
            yield
        finally:
            duration = time.perf_counter() - start_time
            self.observe_histogram(operation_name, duration, **labels)

    def increment_counter(self, metric_name: str, **labels):
        """Increment a counter metric."""
        metric = self._metrics.get(metric_name)
        if metric is not None:
            (metric.labels(**labels) if labels else metric).inc()

    def set_gauge(self, metric_name: str, value: float, **labels):
        """Set a gauge metric value."""
        metric = self._metrics.get(metric_name)
        if metric is not None:
            (metric.labels(**labels) if labels else metric).set(value)

    def observe_histogram(self, metric_name: str, value: float, **labels):
        """Observe a histogram metric."""
        metric = self._metrics.get(metric_name)
        if metric is not None:
            (metric.labels(**labels) if labels else metric).observe(value)


def get_metrics_collector(service_name: str, registry: Optional[CollectorRegistry] = None) -> MetricsCollector:
    """Get a metrics collector for a service."""
    return MetricsCollector(service_name, registry)
