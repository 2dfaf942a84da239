"""Prometheus metrics for observability."""

from prometheus_client import Counter, Histogram, Info, REGISTRY, generate_latest


class MetricsCollector:
    """Centralized metrics collection for Promptbook."""

    def __init__(self):
        self.app_info = Info(
            "promptbook_app",
            "Application information",
        )

        # operation: list, get, create, update, delete
        # outcome: success, not_found, invalid
        self.saved_prompt_operations = Counter(
            "promptbook_saved_prompt_operations_total",
            "Total saved prompt operations",
            ["operation", "outcome"],
        )

        self.saved_prompt_duration = Histogram(
            "promptbook_saved_prompt_operation_duration_seconds",
            "Time to run a saved prompt operation",
            ["operation"],
            buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0],
        )

    def set_app_info(self, version: str, auth_mode: str) -> None:
        """Set application info."""
        self.app_info.info({
            "version": version,
            "auth_mode": auth_mode,
        })

    def record_operation(self, operation: str, outcome: str, duration_s: float) -> None:
        """Record one saved prompt operation."""
        self.saved_prompt_operations.labels(operation=operation, outcome=outcome).inc()
        self.saved_prompt_duration.labels(operation=operation).observe(duration_s)

    def get_metrics(self) -> bytes:
        """Generate Prometheus metrics output."""
        return generate_latest(REGISTRY)


# Global metrics instance
metrics = MetricsCollector()
