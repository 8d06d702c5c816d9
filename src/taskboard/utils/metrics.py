"""Prometheus metrics for observability."""

from functools import lru_cache

from prometheus_client import Counter, Histogram, Info

from taskboard import __version__


class Metrics:
    """Prometheus metrics for the task service."""

    def __init__(self) -> None:
        """Initialize all metrics."""
        self.info = Info(
            "taskboard",
            "Taskboard service information",
        )
        self.info.info({"version": __version__})

        # HTTP
        self.http_requests_total = Counter(
            "taskboard_http_requests_total",
            "Total number of HTTP requests",
            ["method", "route", "status"],
        )

        self.http_request_duration_seconds = Histogram(
            "taskboard_http_request_duration_seconds",
            "Duration of HTTP requests in seconds",
            ["method", "route"],
            buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
        )

        # Entity operations
        self.entity_operations_total = Counter(
            "taskboard_entity_operations_total",
            "Total number of entity operations",
            ["entity", "operation", "status"],
        )

        # Authentication
        self.auth_attempts_total = Counter(
            "taskboard_auth_attempts_total",
            "Total number of sign-in attempts",
            ["outcome"],
        )

    def record_http_request(
        self,
        method: str,
        route: str,
        status: int,
        duration: float,
    ) -> None:
        """Record an HTTP request metric.

        Args:
            method: HTTP method
            route: Route template (e.g. /api/v1/tasks/{task_id})
            status: Response status code
            duration: Request duration in seconds
        """
        self.http_requests_total.labels(
            method=method,
            route=route,
            status=str(status),
        ).inc()
        self.http_request_duration_seconds.labels(
            method=method,
            route=route,
        ).observe(duration)

    def record_entity_operation(self, entity: str, operation: str, status: str = "success") -> None:
        """Record a create/update/delete on a stored entity."""
        self.entity_operations_total.labels(
            entity=entity,
            operation=operation,
            status=status,
        ).inc()

    def record_auth_attempt(self, outcome: str) -> None:
        self.auth_attempts_total.labels(outcome=outcome).inc()


@lru_cache
def get_metrics() -> Metrics:
    """Get cached metrics instance."""
    return Metrics()
