"""
Metrics definitions for District Alerts.

This module defines Prometheus metrics for monitoring
the feed ingest and relevance filter pipeline.
"""

from prometheus_client import Counter, Histogram, Gauge

# 카운터 메트릭
feed_entries = Counter(
    "feed_entries_total",
    "Number of CAP documents read from the feed"
)

entries_skipped = Counter(
    "entries_skipped_total",
    "Number of feed entries or polygons skipped",
    ["reason"]
)

alerts_qualifying = Counter(
    "alerts_qualifying_total",
    "Number of alerts that intersected the district"
)

boundary_refresh = Counter(
    "boundary_refresh_total",
    "Boundary cache lookups by outcome",
    ["outcome"]
)

pipeline_runs = Counter(
    "pipeline_runs_total",
    "Pipeline runs by result status",
    ["status"]
)

# 히스토그램 메트릭
pipeline_seconds = Histogram(
    "pipeline_duration_seconds",
    "Total time of one pipeline run",
    buckets=[0.1, 0.5, 1.0, 5.0, 10.0, 30.0, 60.0]
)

# 게이지 메트릭
last_alert_count = Gauge(
    "last_alert_count",
    "Number of alerts in the last ranked result"
)
