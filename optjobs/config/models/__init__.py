"""Configuration model exports.

    from optjobs.config.models import ExecutionConfig, JobStoreConfig
"""

from optjobs.config.models.execution import ExecutionConfig
from optjobs.config.models.observability import LoggingConfig, ObservabilityConfig
from optjobs.config.models.storage import JobStoreConfig, StorageConfig

__all__ = [
    # Execution
    "ExecutionConfig",
    # Observability
    "LoggingConfig",
    "ObservabilityConfig",
    # Storage
    "JobStoreConfig",
    "StorageConfig",
]
