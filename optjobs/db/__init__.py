"""Database utilities for optjobs.

This module contains:
- Connection pool management
- Store error hierarchy
- Alembic migrations
"""

from optjobs.db.errors import (
    ConflictError,
    ConnectionError,
    NotFoundError,
    StoreError,
    ValidationError,
)

__all__ = [
    "StoreError",
    "ConnectionError",
    "NotFoundError",
    "ConflictError",
    "ValidationError",
]
