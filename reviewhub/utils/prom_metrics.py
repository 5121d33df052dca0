"""
Prometheus metrics registration and helpers.

Exports:
- observe_request(...): record HTTP request metrics
- observe_affiliate_click(...): count outbound affiliate clicks
- observe_generation(...): record a content generator run
- metrics_latest(): return text exposition from correct registry (handles multiprocess)
- CONTENT_TYPE_LATEST: correct Prometheus content type
"""

import os
from prometheus_client import Counter, Histogram, CollectorRegistry, generate_latest, CONTENT_TYPE_LATEST
from prometheus_client import multiprocess


REQUEST_COUNTER = Counter(
    'rh_http_requests_total', 'Total HTTP requests', ['endpoint', 'status']
)

REQUEST_LATENCY = Histogram(
    'rh_http_request_latency_seconds', 'HTTP request latency seconds', ['endpoint']
)

AFFILIATE_CLICKS = Counter(
    'rh_affiliate_clicks_total', 'Outbound affiliate link clicks', ['category']
)

GENERATION_RUNS = Counter(
    'rh_content_generation_runs_total', 'Content generator runs', ['source']
)

ARTICLES_GENERATED = Counter(
    'rh_articles_generated_total', 'Review articles written by the content generator'
)

MARKETPLACE_ERRORS = Counter(
    'rh_marketplace_errors_total', 'Failed marketplace API calls'
)


def observe_request(endpoint: str, status: int, latency_seconds: float) -> None:
    REQUEST_COUNTER.labels(endpoint=endpoint, status=str(status)).inc()
    REQUEST_LATENCY.labels(endpoint=endpoint).observe(latency_seconds)


def observe_affiliate_click(category: str) -> None:
    AFFILIATE_CLICKS.labels(category=category or 'uncategorized').inc()


def observe_generation(source: str, articles_created: int) -> None:
    GENERATION_RUNS.labels(source=source).inc()
    if articles_created:
        ARTICLES_GENERATED.inc(articles_created)


def observe_marketplace_error() -> None:
    MARKETPLACE_ERRORS.inc()


def metrics_latest() -> bytes:
    """Return the Prometheus text exposition, multiprocess-aware if configured."""
    prom_mp_dir = os.getenv('PROMETHEUS_MULTIPROC_DIR')
    if prom_mp_dir:
        registry = CollectorRegistry()
        multiprocess.MultiProcessCollector(registry)
        return generate_latest(registry)
    # Default registry
    return generate_latest()
