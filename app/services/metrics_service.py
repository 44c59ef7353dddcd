"""Prometheus metrics for dashboard operations and backend requests."""

import logging

from prometheus_client import Counter, Gauge, Histogram, generate_latest

logger = logging.getLogger(__name__)


class MetricsService:
    """Owns the Prometheus metric objects and their recording helpers.

    Metrics are created once per service instance; the container keeps a
    single instance per application. Recording never raises: a failure to
    record a metric is logged and otherwise ignored so it cannot break the
    request that triggered it.
    """

    def __init__(self) -> None:
        self.operations_total = Counter(
            "soil_dashboard_operations_total",
            "Total dashboard API operations",
            ["operation", "status"],
        )
        self.operation_duration_seconds = Histogram(
            "soil_dashboard_operation_duration_seconds",
            "Duration of dashboard API operations in seconds",
            ["operation"],
        )
        self.backend_requests_total = Counter(
            "soil_dashboard_backend_requests_total",
            "Total requests sent to the data backend",
            ["table", "method", "status"],
        )
        self.backend_request_duration_seconds = Histogram(
            "soil_dashboard_backend_request_duration_seconds",
            "Duration of data backend requests in seconds",
            ["table", "method"],
        )
        self.config_updates_total = Counter(
            "soil_dashboard_config_updates_total",
            "Configuration writes by outcome",
            ["status"],
        )
        self.devices_count = Gauge(
            "soil_dashboard_devices_count", "Number of devices in the last listing"
        )
        self.devices_online_count = Gauge(
            "soil_dashboard_devices_online_count", "Number of online devices in the last listing"
        )

    def record_operation(
        self, operation: str, status: str, duration: float | None = None
    ) -> None:
        """Record a dashboard API operation."""
        try:
            self.operations_total.labels(operation=operation, status=status).inc()
            if duration is not None:
                self.operation_duration_seconds.labels(operation=operation).observe(duration)
        except Exception as e:
            logger.error("Error recording operation metric: %s", e)

    def record_backend_request(
        self, table: str, method: str, status: str, duration: float
    ) -> None:
        """Record one request to the data backend."""
        try:
            self.backend_requests_total.labels(table=table, method=method, status=status).inc()
            self.backend_request_duration_seconds.labels(table=table, method=method).observe(duration)
        except Exception as e:
            logger.error("Error recording backend request metric: %s", e)

    def record_config_update(self, status: str) -> None:
        """Record the outcome of a configuration write."""
        try:
            self.config_updates_total.labels(status=status).inc()
        except Exception as e:
            logger.error("Error recording config update metric: %s", e)

    def update_device_counts(self, total: int, online: int) -> None:
        """Publish the device totals seen by the latest listing."""
        try:
            self.devices_count.set(total)
            self.devices_online_count.set(online)
        except Exception as e:
            logger.error("Error updating device count metrics: %s", e)

    def get_metrics_text(self) -> bytes:
        """Render all registered metrics in Prometheus exposition format."""
        return generate_latest()
