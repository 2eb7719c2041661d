import threading
import uuid
from typing import Dict, Optional

from dotenv import load_dotenv
from loguru import logger
from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, Info, generate_latest

load_dotenv()

_correlation_context = threading.local()


def generate_correlation_id() -> str:
    """Generate a unique correlation ID for request tracing."""
    return f"req_{uuid.uuid4().hex[:12]}"


def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID from thread-local storage."""
    return getattr(_correlation_context, 'correlation_id', None)


def set_correlation_id(correlation_id: Optional[str]):
    """Set the correlation ID in thread-local storage."""
    _correlation_context.correlation_id = correlation_id


_service_registries: Dict[str, "MetricsRegistry"] = {}
_metrics_lock = threading.Lock()

QUERY_DURATION_BUCKETS = (0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, float('inf'))


class MetricsRegistry:
    """Prometheus metrics for a service: query timings, cache efficiency and errors."""

    def __init__(self, service_name: str):
        self.service_name = service_name
        self.registry = CollectorRegistry()

        self.service_info = Info('service_info', 'Service information', registry=self.registry)
        self.service_info.info({'service_name': service_name, 'version': '1.0.0'})

        self.service_start_time = Gauge(
            'service_start_time_seconds',
            'Service start time in Unix timestamp',
            registry=self.registry
        )
        self.service_start_time.set_to_current_time()

        self.errors_total = Counter(
            'service_errors_total',
            'Total number of errors by type',
            ['error_type', 'component'],
            registry=self.registry
        )
        self.query_duration = Histogram(
            'analytics_query_duration_seconds',
            'Duration of analytical queries against the events table',
            ['query'],
            buckets=QUERY_DURATION_BUCKETS,
            registry=self.registry
        )
        self.cache_requests = Counter(
            'analytics_cache_requests_total',
            'Cached query lookups by outcome',
            ['prefix', 'outcome'],
            registry=self.registry
        )

    def record_error(self, error_type: str, component: str = "unknown"):
        self.errors_total.labels(error_type=error_type, component=component).inc()

    def record_cache(self, prefix: str, hit: bool):
        self.cache_requests.labels(prefix=prefix, outcome="hit" if hit else "miss").inc()

    def get_metrics_text(self) -> str:
        """Get metrics in Prometheus text format"""
        return generate_latest(self.registry).decode('utf-8')


DEFAULT_SERVICE_NAME = 'facilitator-analytics'


def setup_metrics(service_name: str = DEFAULT_SERVICE_NAME) -> MetricsRegistry:
    """Create (or return the existing) metrics registry for a service."""
    with _metrics_lock:
        if service_name in _service_registries:
            return _service_registries[service_name]

        metrics_registry = MetricsRegistry(service_name)
        _service_registries[service_name] = metrics_registry
        logger.debug(f"Metrics setup completed for service: {service_name}")
        return metrics_registry


def get_metrics_registry(service_name: str = DEFAULT_SERVICE_NAME) -> MetricsRegistry:
    return setup_metrics(service_name)
