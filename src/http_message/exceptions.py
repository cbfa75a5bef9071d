"""
Custom exceptions for http_message.

This module defines the exception hierarchy used throughout
the library for error handling and debugging.
"""

from typing import Optional


class HTTPMessageError(Exception):
    """Base exception for all http_message errors."""
    
    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


class ParseError(HTTPMessageError):
    """Raised when a string (uri, query, header line, port) cannot be parsed."""
    
    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(f"Parse error: {message}", cause)


class ValidationError(HTTPMessageError):
    """Raised when a value is well-formed but not acceptable."""
    
    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(f"Validation error: {message}", cause)


class ResourceError(HTTPMessageError):
    """Raised when there's an error with the underlying body stream."""
    
    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(f"Resource error: {message}", cause)


class SerializationError(HTTPMessageError):
    """Raised when message content cannot be serialized."""
    
    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(f"Serialization error: {message}", cause)
