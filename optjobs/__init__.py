"""optjobs: asynchronous schema-maintenance jobs with durable status tracking.

Accepts long-running index and materialized-view operations against
PostgreSQL, records their lifecycle in a jobs table, and runs them in the
background so callers never wait on a multi-minute DDL statement.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
