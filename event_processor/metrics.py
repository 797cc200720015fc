"""
Prometheus metrics for the event processor.
"""
from prometheus_client import Counter, Histogram, Gauge, Info, CollectorRegistry

from . import SERVICE_NAME, __version__


class Metrics:
    """
    Centralized metrics for the event processor.
    """

    def __init__(self, service_name: str = SERVICE_NAME, version: str = __version__, registry=None):
        self.service_name = service_name
        self.version = version
        self.registry = registry or CollectorRegistry()

        # HTTP Metrics
        self.http_requests_total = Counter(
            "http_requests_total",
            "Total HTTP requests",
            ["service", "method", "path", "status"],
            registry=self.registry,
        )

        self.http_request_duration = Histogram(
            "http_request_duration_seconds",
            "HTTP request duration in seconds",
            ["service", "method", "path"],
            registry=self.registry,
        )

        self.http_requests_active = Gauge(
            "http_requests_active",
            "Number of active HTTP requests",
            ["service"],
            registry=self.registry,
        )
        self.http_requests_active.labels(service=service_name).set(0)

        # Application Info
        self.app_info = Info(
            "app",
            "Application information",
            registry=self.registry,
        )
        self.app_info.info({"service": service_name, "version": version})

        self.app_up = Gauge(
            "app_up",
            "Application up status (1=up, 0=down)",
            ["service", "version"],
            registry=self.registry,
        )
        self.app_up.labels(service=service_name, version=version).set(1)

        # Pipeline Metrics
        self.events_published_total = Counter(
            "eventprocessor_events_published_total",
            "Envelopes handed to the bus, by channel and outcome",
            ["channel", "outcome"],
            registry=self.registry,
        )

        self.publish_duration = Histogram(
            "eventprocessor_publish_duration_seconds",
            "Time spent in a single bus send",
            ["channel"],
            registry=self.registry,
        )

        self.events_enriched_total = Counter(
            "eventprocessor_events_enriched_total",
            "Envelopes enriched by the consumer pipeline",
            registry=self.registry,
        )

        self.enrichment_failures_total = Counter(
            "eventprocessor_enrichment_failures_total",
            "Envelopes dropped because enrichment failed",
            ["reason"],
            registry=self.registry,
        )

        self.events_observed_total = Counter(
            "eventprocessor_events_observed_total",
            "Envelopes recorded by consumer subscriptions",
            ["channel"],
            registry=self.registry,
        )

    def track_active_request(self):
        """Context manager counting a request as in flight."""
        return self.http_requests_active.labels(service=self.service_name).track_inprogress()

    def record_request(self, method: str, path: str, status: int, duration: float):
        """Record a completed HTTP request against its route template."""
        self.http_requests_total.labels(
            service=self.service_name, method=method, path=path, status=status
        ).inc()
        self.http_request_duration.labels(
            service=self.service_name, method=method, path=path
        ).observe(duration)

    def record_publish(self, channel: str, delivered: bool, duration: float):
        """Record a single bus send."""
        outcome = "delivered" if delivered else "rejected"
        self.events_published_total.labels(channel=channel, outcome=outcome).inc()
        self.publish_duration.labels(channel=channel).observe(duration)

    def mark_down(self):
        self.app_up.labels(service=self.service_name, version=self.version).set(0)
