"""Prometheus metrics for optjobs.

Tracks job submissions, rejections, execution outcomes and how long
maintenance statements take.
"""

from prometheus_client import Counter, Gauge, Histogram

JOBS_CREATED = Counter(
    "optjobs_jobs_created_total",
    "Total number of maintenance jobs accepted",
    labelnames=["job_type"],
)

JOBS_REJECTED = Counter(
    "optjobs_jobs_rejected_total",
    "Total number of submissions rejected before persistence",
    labelnames=["reason"],
)

JOB_EXECUTIONS = Counter(
    "optjobs_job_executions_total",
    "Total number of finished job executions",
    labelnames=["job_type", "status"],
)

# Index builds on large tables take minutes
JOB_DURATION = Histogram(
    "optjobs_job_duration_seconds",
    "Maintenance statement execution time in seconds",
    labelnames=["job_type"],
    buckets=(0.1, 0.5, 1.0, 5.0, 15.0, 30.0, 60.0, 120.0, 300.0, 600.0, 1800.0),
)

JOBS_IN_FLIGHT = Gauge(
    "optjobs_jobs_in_flight",
    "Number of job executions scheduled and not yet finished",
)
