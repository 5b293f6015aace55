"""
Shared metrics for the storage STS identity layer.
"""

import threading
import time
from contextlib import contextmanager
from typing import Dict, Any, Optional

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram


class IdentityMetrics:
    """Prometheus metrics recorded by the key store and token validator."""

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry if registry is not None else REGISTRY
        self._metrics: Dict[str, Any] = {}
        self._setup_metrics()

    def _setup_metrics(self):
        """Set up identity metrics."""
        self._metrics["token_validations_total"] = Counter(
            "token_validations_total",
            "Total token validations",
            ["status"],
            registry=self.registry
        )

        self._metrics["jwks_refresh_total"] = Counter(
            "jwks_refresh_total",
            "Total JWKS refreshes",
            ["status"],
            registry=self.registry
        )

        self._metrics["jwks_refresh_duration_seconds"] = Histogram(
            "jwks_refresh_duration_seconds",
            "JWKS refresh duration in seconds",
            registry=self.registry
        )

    def get_metric(self, name: str):
        """Get a metric by name."""
        return self._metrics.get(name)

    def record_validation(self, status: str):
        """Record the outcome of a token validation."""
        self._metrics["token_validations_total"].labels(status=status).inc()

    def record_refresh(self, status: str):
        """Record the outcome of a key-set refresh."""
        self._metrics["jwks_refresh_total"].labels(status=status).inc()

    @contextmanager
    def time_refresh(self):
        """Time a key-set refresh."""
        start_time = time.time()
        try:
            yield
        finally:
            self._metrics["jwks_refresh_duration_seconds"].observe(time.time() - start_time)


_default_metrics: Optional[IdentityMetrics] = None
_default_lock = threading.Lock()


def get_metrics(registry: Optional[CollectorRegistry] = None) -> IdentityMetrics:
    """Get identity metrics.

    With an explicit registry a fresh instance is returned. Without one, a
    single process-wide instance bound to the default registry is shared,
    since prometheus refuses to register the same metric name twice.
    """
    global _default_metrics
    if registry is not None:
        return IdentityMetrics(registry)

    with _default_lock:
        if _default_metrics is None:
            _default_metrics = IdentityMetrics()
        return _default_metrics
