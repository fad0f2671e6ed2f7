"""
Metrics definitions for StreetWise.

This module defines Prometheus metrics for monitoring geofence
evaluation and the crime feed pipeline.
"""

from prometheus_client import Counter, Histogram, Gauge

# 카운터 메트릭
positions_evaluated = Counter(
    "positions_evaluated_total",
    "Number of position samples evaluated against the geofence"
)

positions_rejected = Counter(
    "positions_rejected_total",
    "Number of position samples rejected for invalid coordinates"
)

zone_alerts = Counter(
    "zone_alerts_total",
    "Number of one-shot high-risk zone entry alerts",
    ["zone"]
)

records_normalized = Counter(
    "crime_records_normalized_total",
    "Number of crime records kept after normalization",
    ["source"]
)

records_skipped = Counter(
    "crime_records_skipped_total",
    "Number of crime records dropped for invalid coordinates"
)

records_duplicate = Counter(
    "crime_records_duplicate_total",
    "Number of duplicate crime records collapsed"
)

upstream_failures = Counter(
    "upstream_failures_total",
    "Upstream collaborator failures",
    ["source"]
)

dispatch_failures = Counter(
    "dispatch_failures_total",
    "Alert dispatch failures",
    ["kind"]
)

# 히스토그램 메트릭
normalize_seconds = Histogram(
    "normalize_duration_seconds",
    "Time spent normalizing crime batches",
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0]
)

# 게이지 메트릭
crimes_in_feed = Gauge(
    "crimes_in_feed",
    "Current number of normalized crimes in the feed"
)
