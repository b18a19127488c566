"""Prometheus metrics for organization closure.

Exposed on /metrics by observability.router.
"""

from prometheus_client import Counter, Histogram

# Closure attempts by outcome: closed|force_closed|blocked|check_failed|failed
closure_attempts_total = Counter(
    "workspace_closure_attempts_total",
    "Organization closure attempts",
    ["outcome"]
)

# Checker failures during check_all, by module
closure_check_failures_total = Counter(
    "workspace_closure_check_failures_total",
    "Closure checker failures",
    ["module_id"]
)

# Purge results per archive: purged|skipped|failed
archives_purged_total = Counter(
    "workspace_archives_purged_total",
    "Expired archives processed by the purge job",
    ["result"]
)

archive_purge_duration_seconds = Histogram(
    "workspace_archive_purge_duration_seconds",
    "Duration of one purge run in seconds",
    buckets=[0.1, 0.5, 1.0, 5.0, 10.0, 30.0, 60.0, 300.0]
)
