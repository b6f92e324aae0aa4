"""Prometheus metrics for request authorization."""

from prometheus_client import Counter

authorization_total = Counter(
    "lrs_authorization_total",
    "API authorization attempts by outcome",
    ["outcome"],
)


class PrometheusAuthorizationMetrics:
    """Prometheus-based authorization metrics implementation."""

    def inc(self, outcome: str) -> None:
        """Increment the counter for an outcome."""
        authorization_total.labels(outcome=outcome).inc()
