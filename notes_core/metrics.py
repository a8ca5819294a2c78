"""Prometheus metrics for note storage, sync and search.

All metric objects are defined here so they can be imported from any module.
The pure search functions never touch these; only the I/O layers do.
"""

from prometheus_client import Counter, Gauge, Histogram

# ---------------------------------------------------------------------------
# Remote sync metrics
# ---------------------------------------------------------------------------

SYNC_OPERATIONS = Counter(
    "notes_sync_operations_total",
    "Total remote sync calls",
    ["operation", "status"],  # list/upsert/delete, success/error
)

SYNC_DURATION = Histogram(
    "notes_sync_duration_seconds",
    "Duration of remote sync calls in seconds",
    ["operation"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)

# ---------------------------------------------------------------------------
# Search metrics
# ---------------------------------------------------------------------------

SEARCH_REQUESTS = Counter(
    "notes_search_requests_total",
    "Total note searches served",
    ["has_tag"],
)

# ---------------------------------------------------------------------------
# Storage metrics
# ---------------------------------------------------------------------------

STORED_NOTES = Gauge(
    "notes_stored",
    "Number of notes in local storage",
)
