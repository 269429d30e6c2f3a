"""Core module: types, exceptions, and logging.

This module provides the foundational components used throughout the package:
    - Data types (Company, Client, Interest, VectorRecord, SearchMatch, ...)
    - Exception hierarchy (ConnectQError and subclasses)
    - Logging utilities (get_logger, configure_logging)

Usage:
    from connectq.core import (
        Company,
        SearchMatch,
        EmbeddingError,
        get_logger,
    )
"""

from connectq.core.exceptions import (
    ConfigurationError,
    ConflictError,
    ConnectQError,
    DatabaseError,
    EmbeddingError,
    NotFoundError,
    ValidationError,
    VectorIndexError,
)
from connectq.core.logging import (
    configure_logging,
    get_logger,
    suppress_third_party_loggers,
)
from connectq.core.types import (
    COMPANY_FIELDS,
    Client,
    ClientStatus,
    Company,
    EmbedResult,
    IndexStats,
    Interest,
    InterestStatus,
    SearchMatch,
    SearchOutcome,
    User,
    UserRole,
    VectorHit,
    VectorRecord,
)

__all__ = [
    # Types
    "UserRole",
    "ClientStatus",
    "InterestStatus",
    "User",
    "Company",
    "COMPANY_FIELDS",
    "Client",
    "Interest",
    "VectorRecord",
    "VectorHit",
    "IndexStats",
    "SearchMatch",
    "SearchOutcome",
    "EmbedResult",
    # Exceptions
    "ConnectQError",
    "ConfigurationError",
    "DatabaseError",
    "NotFoundError",
    "ConflictError",
    "EmbeddingError",
    "VectorIndexError",
    "ValidationError",
    # Logging
    "get_logger",
    "configure_logging",
    "suppress_third_party_loggers",
]
