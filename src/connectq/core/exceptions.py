"""
Custom exception hierarchy for ConnectQ.

All exceptions inherit from ConnectQError, allowing callers to catch
all project-specific errors with a single except clause when desired.

Exception hierarchy:
    ConnectQError (base)
    ├── ConfigurationError: Invalid or missing configuration
    ├── DatabaseError: SQLite failures
    ├── NotFoundError: Referenced entity absent from the relational store
    ├── ConflictError: Uniqueness rule violated (one company per user, ...)
    ├── EmbeddingError: Embedding provider failures
    ├── VectorIndexError: Vector index failures (including partial batches)
    └── ValidationError: Malformed request parameters
"""

from typing import Optional


class ConnectQError(Exception):
    """
    Base exception for all ConnectQ errors.

    Args:
        message: Human-readable error description.
        details: Optional additional context for debugging.
    """

    def __init__(self, message: str, details: Optional[str] = None) -> None:
        self.message = message
        self.details = details
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.details:
            return f"{self.message} — {self.details}"
        return self.message


class ConfigurationError(ConnectQError):
    """
    Raised when configuration is invalid or missing.

    Examples:
        - GEMINI_API_KEY missing while the gemini provider is selected
        - Unknown EMBEDDING_PROVIDER value
    """

    pass


class DatabaseError(ConnectQError):
    """
    Raised when relational store operations fail.

    Examples:
        - SQLite write errors
        - Schema creation failures
    """

    pass


class NotFoundError(ConnectQError):
    """
    Raised when a referenced entity does not exist in the relational store.

    Attributes:
        entity: Entity kind (e.g. "company", "client").
        entity_id: The identifier that was looked up.
    """

    def __init__(
        self,
        entity: str,
        entity_id: str,
        details: Optional[str] = None,
    ) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity.capitalize()} with ID {entity_id} not found", details)


class ConflictError(ConnectQError):
    """
    Raised when a write would break a uniqueness rule.

    Examples:
        - A user creating a second company profile
        - A company expressing interest in the same client twice
    """

    pass


class EmbeddingError(ConnectQError):
    """
    Raised when embedding generation fails.

    Examples:
        - Provider API errors or timeouts
        - Provider returned no vectors, or fewer vectors than texts
        - Local model loading failures
    """

    pass


class VectorIndexError(ConnectQError):
    """
    Raised when a vector index operation fails.

    A failed upsert chunk aborts the remaining chunks, so the index can be
    left partially updated when this is raised from ``upsert``.
    """

    pass


class ValidationError(ConnectQError):
    """
    Raised for malformed request parameters.

    Examples:
        - Empty search query
        - top_k outside the accepted range
    """

    pass
