"""Prometheus metrics for monitoring allocation strategies, reallocations and rollovers"""

from prometheus_client import Counter, Histogram

# Allocation metrics
allocation_counter = Counter(
    "cediwise_allocation_total",
    "Allocations computed",
    ["strategy"],  # survival | balanced | aggressive | custom
)

# Reallocation metrics
reallocation_counter = Counter(
    "cediwise_reallocation_total",
    "Reallocation analyses run",
    ["outcome"],  # suggested | none
)

# Rollover metrics
rollover_amount_histogram = Histogram(
    "cediwise_rollover_amount",
    "Total unspent amount carried forward per cycle",
    buckets=[0, 50, 100, 250, 500, 1000, 2500, 5000],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_allocation(strategy: str) -> None:
    allocation_counter.labels(strategy=strategy).inc()


def record_reallocation(should_reallocate: bool) -> None:
    """Record analysis outcomes for monitoring how often suggestions fire"""
    outcome = "suggested" if should_reallocate else "none"
    reallocation_counter.labels(outcome=outcome).inc()


def record_rollover(total: float) -> None:
    rollover_amount_histogram.observe(total)


def record_request(method: str, endpoint: str, status: int, duration_seconds: float) -> None:
    request_duration_histogram.labels(method=method, endpoint=endpoint, status=status).observe(duration_seconds)
