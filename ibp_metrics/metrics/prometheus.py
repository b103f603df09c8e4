# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Prometheus metrics — the exporter's own operational metrics.
Registered on the default registry and served on /metrics.
The IBP member/service series live in their own registry (see registry.py).
"""

from prometheus_client import Counter, Gauge, Histogram

# ── HTTP Metrics (used by middleware) ──
REQUEST_COUNT = Counter(
    "ibp_exporter_requests_total",
    "Total HTTP requests to the IBP metrics exporter",
    ["method", "endpoint", "status"],
)
REQUEST_LATENCY = Histogram(
    "ibp_exporter_request_duration_seconds",
    "Request latency in seconds",
    ["method", "endpoint"],
)
HTTP_ERRORS = Counter(
    "ibp_exporter_http_errors_total",
    "Total HTTP error responses",
    ["method", "endpoint", "status"],
)

# ── Engine Metrics (updated by service layer only) ──
UPSTREAM_REQUESTS = Counter(
    "ibp_exporter_upstream_requests_total",
    "Calls made to the IBP upstream API",
    ["operation", "result"],
)
UPSTREAM_LATENCY = Histogram(
    "ibp_exporter_upstream_request_duration_seconds",
    "Upstream call latency in seconds",
    ["operation"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)
CACHE_LOOKUPS = Counter(
    "ibp_exporter_cache_lookups_total",
    "Member cache lookups by outcome",
    ["result"],
)
CACHE_DEGRADED_FILLS = Counter(
    "ibp_exporter_cache_degraded_fills_total",
    "Cache fills that substituted an empty result for a failed sub-fetch",
    ["part"],
)
CACHE_ENTRIES = Gauge(
    "ibp_exporter_cache_entries",
    "Number of members currently held in the cache",
)
REFRESH_PASSES = Counter(
    "ibp_exporter_refresh_passes_total",
    "Reconciliation passes by scope and outcome",
    ["scope", "result"],
)
REFRESH_DURATION = Histogram(
    "ibp_exporter_refresh_duration_seconds",
    "Time to run one reconciliation pass end-to-end",
    ["scope"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)
MEMBERS_SKIPPED = Counter(
    "ibp_exporter_members_skipped_total",
    "Members skipped during an all-members pass because their fetch failed",
)
UPSTREAM_RECORDS_DROPPED = Counter(
    "ibp_exporter_upstream_records_dropped_total",
    "Upstream records that failed validation and were left out of a response",
    ["operation"],
)
