"""Prometheus metric inventory.

Every metric the service exposes is declared here; the modules that own
the behaviour import the one they need and increment it at the point of
action.  Prometheus scrapes the values from GET /metrics.

Counters only go up, so rates come from rate() on the Prometheus side:
  rate(enrollments_total{outcome="created"}[5m])
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

# ---------------------------------------------------------------------------
# HTTP metrics (populated by the MetricsMiddleware)
# ---------------------------------------------------------------------------

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests by method, endpoint, and status code",
    ["method", "endpoint", "status_code"],
)

REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    # Enrollment does two parallel reads and one write against Mongo;
    # anything past 1s points at the database, not the handler.
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

ACTIVE_REQUESTS = Gauge(
    "http_active_requests",
    "Number of HTTP requests currently being processed",
)

# ---------------------------------------------------------------------------
# Enrollment metrics
# ---------------------------------------------------------------------------

ENROLLMENTS = Counter(
    "enrollments_total",
    "Enrollment attempts by outcome",
    # created|already_enrolled|user_not_found|course_not_found|invalid|write_failed
    ["outcome"],
)

COURSE_COMPLETIONS = Counter(
    "course_completions_total",
    "Mark-complete attempts by outcome",
    ["outcome"],  # completed|forbidden|not_found
)

ACCESS_DENIED = Counter(
    "access_denied_total",
    "Requests rejected by the access guard",
    ["reason"],  # missing_bearer|admin_mismatch
)
