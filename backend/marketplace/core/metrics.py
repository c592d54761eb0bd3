"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Booking metrics
booking_attempts = Counter(
    'booking_attempts_total',
    'Total booking creation attempts',
    ['outcome']  # created, not_found
)

booking_transitions = Counter(
    'booking_status_transitions_total',
    'Booking status changes',
    ['status', 'role']
)

# Vendor lifecycle metrics
vendor_deletions = Counter(
    'vendor_deletions_total',
    'Vendors removed by cascading delete'
)

# Cache metrics
cache_operations = Counter(
    'cache_operations_total',
    'Cache operations',
    ['operation', 'result']  # get/set, hit/miss
)

redis_connection_errors = Counter(
    'redis_connection_errors_total',
    'Redis connection errors'
)


def metrics_endpoint() -> Response:
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )

# Convenience functions for instrumentation
def record_booking_attempt(outcome: str):
    """Record booking attempt. Outcome: created, not_found"""
    booking_attempts.labels(outcome=outcome).inc()

def record_booking_transition(status: str, role: str):
    booking_transitions.labels(status=status, role=role).inc()

def record_cache_operation(operation: str, hit: bool):
    """Record cache operation."""
    result = "hit" if hit else "miss"
    cache_operations.labels(operation=operation, result=result).inc()
