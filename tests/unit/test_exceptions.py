"""
Tests for the custom exception hierarchy.

The exception classes carry structured data (message + details) and
custom formatting. We verify:
    - Base class message formatting (with and without details)
    - Inheritance chain (all exceptions are ConnectQError)
    - NotFoundError's custom __init__ and attributes
"""

import pytest

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


class TestBaseException:
    """ConnectQError is the root of the hierarchy."""

    def test_message_only(self):
        exc = ConnectQError("Something went wrong")
        assert exc.message == "Something went wrong"
        assert exc.details is None
        assert str(exc) == "Something went wrong"

    def test_message_with_details(self):
        exc = ConnectQError("Failed", details="Connection refused")
        assert exc.message == "Failed"
        assert exc.details == "Connection refused"
        assert str(exc) == "Failed — Connection refused"

    def test_empty_details_not_appended(self):
        assert str(ConnectQError("Failed", details="")) == "Failed"


class TestSubclassInheritance:
    """All domain exceptions must inherit from ConnectQError."""

    @pytest.mark.parametrize(
        "exc_class",
        [
            ConfigurationError,
            DatabaseError,
            ConflictError,
            EmbeddingError,
            VectorIndexError,
            ValidationError,
                ],
    )
    def test_is_connectq_error(self, exc_class):
        exc = exc_class("boom", details="ctx")
        assert isinstance(exc, ConnectQError)
        assert exc.message == "boom"
        assert exc.details == "ctx"

    def test_vector_index_error_does_not_shadow_builtin(self):
        assert not issubclass(VectorIndexError, IndexError)


class TestNotFoundError:
    """NotFoundError builds its message from the entity kind and id."""

    def test_message(self):
        exc = NotFoundError("company", "abc123")
        assert exc.message == "Company with ID abc123 not found"

    def test_attributes(self):
        exc = NotFoundError("client", "xyz", details="deleted")
        assert exc.entity == "client"
        assert exc.entity_id == "xyz"
        assert exc.details == "deleted"
        assert str(exc) == "Client with ID xyz not found — deleted"

    def test_catchable_as_base(self):
        with pytest.raises(ConnectQError):
            raise NotFoundError("company", "1")
