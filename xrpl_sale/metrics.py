"""Prometheus metrics for API calls made by the SDK."""

from typing import Dict, Optional, Sequence, Union

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram

Metric = Union[Counter, Histogram]

# API calls are mostly sub-second; retries stretch the tail
LATENCY_BUCKETS = (0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0)


class MetricsRegistry:
    """Creates SDK metrics once per name.

    prometheus_client rejects a second collector with the same name, so a
    repeated registration returns the existing metric.
    """

    def __init__(self, namespace: str = "xrpl_sale", registry: CollectorRegistry = REGISTRY):
        self.namespace = namespace
        self.registry = registry
        self._metrics: Dict[str, Metric] = {}

    def counter(self, name: str, description: str, labels: Sequence[str] = ()) -> Counter:
        if name not in self._metrics:
            self._metrics[name] = Counter(
                name, description, list(labels), namespace=self.namespace, registry=self.registry
            )
        return self._metrics[name]

    def histogram(
        self,
        name: str,
        description: str,
        labels: Sequence[str] = (),
        buckets: Sequence[float] = LATENCY_BUCKETS,
    ) -> Histogram:
        if name not in self._metrics:
            self._metrics[name] = Histogram(
                name,
                description,
                list(labels),
                namespace=self.namespace,
                registry=self.registry,
                buckets=buckets,
            )
        return self._metrics[name]

    def get(self, name: str) -> Optional[Metric]:
        return self._metrics.get(name)

    def sample(self, name: str, labels: Optional[Dict[str, str]] = None) -> float:
        """Current value of an exported sample, 0.0 before it is first recorded.

        Args:
            name: Sample name without namespace, e.g. ``requests_total``
            labels: Label values identifying the sample
        """
        value = self.registry.get_sample_value(f"{self.namespace}_{name}", labels or {})
        return value or 0.0


metrics = MetricsRegistry()

REQUESTS_TOTAL = metrics.counter(
    "requests_total", "XRPL.Sale API responses by method and status", ["method", "status"]
)
REQUEST_LATENCY = metrics.histogram(
    "request_duration_seconds", "Duration of single XRPL.Sale API attempts"
)
RETRIES_TOTAL = metrics.counter(
    "retries_total", "XRPL.Sale API retries by reason", ["reason"]
)
