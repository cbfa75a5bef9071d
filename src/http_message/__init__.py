"""
http_message - Immutable HTTP message value objects

Typed, side-effect free representations of HTTP requests, responses,
URIs, headers, query strings and bodies, in the shape of the PSR-7
HTTP message interfaces.
"""

__version__ = "0.1.0"
__author__ = "Developer"
__email__ = "dev@example.com"

# Import main components for easy access
from .http_primitives import Message, Method, Request, Response
from .uri import Uri, URIComponents, DEFAULT_PORTS
from .query import Query, build_query_string, parse_query_string, validate_parameters
from .headers import BasicAuthorizationHeader, Header, HeaderCollection
from .body import Body
from .status import Status, StatusCodes
from .exceptions import (
    HTTPMessageError,
    ParseError,
    ValidationError,
    ResourceError,
    SerializationError,
)

__all__ = [
    "Message",
    "Method",
    "Request",
    "Response",
    "Uri",
    "URIComponents",
    "DEFAULT_PORTS",
    "Query",
    "build_query_string",
    "parse_query_string",
    "validate_parameters",
    "BasicAuthorizationHeader",
    "Header",
    "HeaderCollection",
    "Body",
    "Status",
    "StatusCodes",
    "HTTPMessageError",
    "ParseError",
    "ValidationError",
    "ResourceError",
    "SerializationError",
]
