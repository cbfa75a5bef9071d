"""
Unit tests for custom exceptions.

Tests the exception hierarchy to ensure proper error handling
and cause tracking.
"""

import pytest

from http_message.exceptions import (
    HTTPMessageError,
    ParseError,
    ValidationError,
    ResourceError,
    SerializationError,
)


class TestHTTPMessageError:
    """Test base HTTPMessageError class."""
    
    def test_basic_creation(self) -> None:
        """Test creating basic HTTPMessageError."""
        error = HTTPMessageError("Test error message")
        assert str(error) == "Test error message"
        assert error.message == "Test error message"
        assert error.cause is None
    
    def test_with_cause(self) -> None:
        """Test creating HTTPMessageError with cause."""
        original_error = ValueError("Original error")
        error = HTTPMessageError("Test error message", cause=original_error)
        assert str(error) == "Test error message"
        assert error.cause == original_error


class TestCategories:
    """Test the prefixed error categories."""
    
    @pytest.mark.parametrize(
        "error_class, prefix",
        [
            (ParseError, "Parse error: "),
            (ValidationError, "Validation error: "),
            (ResourceError, "Resource error: "),
            (SerializationError, "Serialization error: "),
        ],
    )
    def test_message_prefix(self, error_class, prefix) -> None:
        """Test that each category prefixes its message."""
        error = error_class("something failed")
        assert error.message == f"{prefix}something failed"
        assert str(error) == f"{prefix}something failed"
        assert error.cause is None
    
    @pytest.mark.parametrize(
        "error_class",
        [ParseError, ValidationError, ResourceError, SerializationError],
    )
    def test_cause_is_kept(self, error_class) -> None:
        """Test that the cause is stored."""
        original_error = OSError("Disk failure")
        error = error_class("Failure", cause=original_error)
        assert error.cause == original_error
    
    @pytest.mark.parametrize(
        "error_class",
        [ParseError, ValidationError, ResourceError, SerializationError],
    )
    def test_inheritance(self, error_class) -> None:
        """Test that every category is an HTTPMessageError."""
        assert issubclass(error_class, HTTPMessageError)
        
        with pytest.raises(HTTPMessageError):
            raise error_class("Test")
