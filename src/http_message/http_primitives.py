"""
HTTP primitives for http_message.

This module defines the core data structures for HTTP messages, requests
and responses. All classes are immutable: every ``with_*`` method returns
a new instance and leaves the one it was called on untouched, including
the content and position of its body stream.
"""

import copy
import json
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import replace
from enum import Enum
from typing import (
    Any,
    Dict,
    List,
    Mapping,
    Optional,
    Union,
)

import h11
from typing_extensions import Self

from .body import Body, BodySource
from .exceptions import ParseError, ValidationError, SerializationError
from .headers import (
    BasicAuthorizationHeader,
    Header,
    HeaderCollection,
    HeaderValue,
)
from .query import Query
from .status import Status, StatusCodes
from .uri import Uri, URIComponents

logger = logging.getLogger(__name__)


# Type aliases for better readability
HeadersInput = Optional[Union[HeaderCollection, Mapping[str, Union[HeaderValue, Header]]]]
UriInput = Optional[Union[Uri, URIComponents, str]]
H11Event = Union[h11.Request, h11.Response, h11.InformationalResponse, h11.Data, h11.EndOfMessage]

_WHITESPACE = re.compile(r"\s")


class Method(Enum):
    """HTTP request methods."""
    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    CONNECT = "CONNECT"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"
    PATCH = "PATCH"
    
    @classmethod
    def from_value(cls, method: Union["Method", str, bytes]) -> "Method":
        """Get the method for a token (case-insensitive)."""
        if isinstance(method, Method):
            return method
        
        if isinstance(method, bytes):
            method = method.decode("ascii", errors="replace")
        
        try:
            return cls(method.upper())
        except (AttributeError, ValueError) as e:
            raise ValidationError(f"'{method}' is not a valid http method", e) from e


QUERY_METHODS = (Method.GET, Method.HEAD)
FORM_METHODS = (Method.POST, Method.PUT, Method.PATCH, Method.DELETE)


class Message:
    """
    HTTP message, the common base of requests and responses.
    
    A message owns one Body and one HeaderCollection. Derived instances get
    their own copy of the body content, so reading or writing the body of
    one instance never shows through another.
    """
    
    DEFAULT_PROTOCOL_VERSION = "1.1"
    
    def __init__(
        self,
        body: BodySource = None,
        headers: HeadersInput = None,
        version: str = DEFAULT_PROTOCOL_VERSION,
    ) -> None:
        """
        Initialize Message.
        
        Args:
            body: Body, or a source a new Body is created from
            headers: HeaderCollection or mapping of names to values
            version: HTTP protocol version
        """
        self._body = self._to_body(body)
        self._headers = self._to_headers(headers)
        self._version = version
    
    @staticmethod
    def _to_body(body: BodySource) -> Body:
        if isinstance(body, Body):
            return body
        return Body(body)
    
    @staticmethod
    def _to_headers(headers: HeadersInput) -> HeaderCollection:
        if headers is None:
            return HeaderCollection()
        
        if isinstance(headers, HeaderCollection):
            return headers
        
        if isinstance(headers, Mapping):
            return HeaderCollection.from_dict(headers)
        
        raise ValidationError("headers must be a HeaderCollection or a mapping")
    
    def _clone(self, body: Optional[Body] = None) -> Self:
        """
        Copy this message.
        
        The body is copied into a new buffer before the copy is returned;
        headers, uri and status are immutable and shared.
        
        Args:
            body: Body to use for the copy instead of a copy of this body
        """
        new_body = body if body is not None else self._body.clone()
        instance = copy.copy(self)
        instance._body = new_body
        return instance
    
    @property
    def protocol_version(self) -> str:
        return self._version
    
    def with_protocol_version(self, version: str) -> Self:
        """Create a new message with a different protocol version."""
        instance = self._clone()
        instance._version = version
        return instance
    
    @property
    def headers(self) -> HeaderCollection:
        return self._headers
    
    def get_headers(self) -> Dict[str, List[str]]:
        """Get header names mapped to their lists of values."""
        return self._headers.to_dict()
    
    def has_header(self, name: str) -> bool:
        """Check if a header exists (case-insensitive)."""
        return self._headers.has_header(name)
    
    def get_header(self, name: str) -> List[str]:
        """Get the values of a header (case-insensitive), empty if missing."""
        header = self._headers.get_header(name)
        
        if header is None:
            return []
        
        return header.values
    
    def get_header_line(self, name: str) -> str:
        """Get the comma separated values of a header, ``''`` if missing."""
        return self._headers.get_header_line(name)
    
    def with_header(self, name: str, value: HeaderValue) -> Self:
        """Create a new message with the header replaced."""
        header = Header(name, value)
        instance = self._clone()
        instance._headers = self._headers.with_header(header)
        return instance
    
    def with_added_header(self, name: str, value: HeaderValue) -> Self:
        """Create a new message with values appended to the header."""
        header = Header(name, value)
        instance = self._clone()
        instance._headers = self._headers.with_added_header(header)
        return instance
    
    def without_header(self, name: str) -> Self:
        """Create a new message without the header."""
        instance = self._clone()
        instance._headers = self._headers.without_header(name)
        return instance
    
    @property
    def body(self) -> Body:
        return self._body
    
    def with_body(self, body: BodySource) -> Self:
        """
        Create a new message with a different body.
        
        A given Body is used as-is, any other source is wrapped in a new Body.
        """
        return self._clone(self._to_body(body))
    
    def with_json(self, data: Any) -> Self:
        """
        Create a new message with a json body and content-type header.
        
        Raises:
            SerializationError: If the data can not be encoded as json
        """
        try:
            encoded = json.dumps(data, separators=(",", ":"), allow_nan=False)
        except (TypeError, ValueError) as e:
            raise SerializationError(
                f"The given data could not be encoded into valid json: {e}", e
            ) from e
        
        instance = self._clone(Body(encoded))
        instance._headers = self._headers.with_header(Header("content-type", "application/json"))
        return instance
    
    def with_basic_auth(self, user: str, password: str) -> Self:
        """Create a new message with a basic authorization header."""
        header = BasicAuthorizationHeader(user, password)
        instance = self._clone()
        instance._headers = self._headers.with_header(header)
        return instance


class H11EventMixin(ABC):
    """
    Conversion of a message to the h11 events that describe it.
    
    Request and Response provide the head event.
    """
    
    _body: Body
    
    @abstractmethod
    def to_h11(self) -> Union[h11.Request, h11.Response, h11.InformationalResponse]:
        """Convert the message head to an h11 event."""
    
    def to_h11_events(self) -> List[H11Event]:
        """
        Convert the message to the h11 events that describe it.
        
        Returns:
            The head event, a Data event when the body is not empty, and
            EndOfMessage
        """
        events: List[H11Event] = [self.to_h11()]
        
        content = bytes(self._body.clone())
        if content:
            events.append(h11.Data(data=content))
        
        events.append(h11.EndOfMessage())
        return events


class Request(Message, H11EventMixin):
    """
    Immutable HTTP request representation.
    
    When no Host header is given, it is filled in from the uri host.
    """
    
    def __init__(
        self,
        method: Union[Method, str, bytes],
        uri: UriInput = None,
        body: BodySource = None,
        headers: HeadersInput = None,
        version: str = Message.DEFAULT_PROTOCOL_VERSION,
    ) -> None:
        """
        Initialize Request.
        
        Args:
            method: HTTP method (GET, POST, etc.), case-insensitive
            uri: Uri, URIComponents or uri string
            body: Body, or a source a new Body is created from
            headers: HeaderCollection or mapping of names to values
            version: HTTP protocol version
        """
        super().__init__(body, headers, version)
        self._method = Method.from_value(method)
        self._uri = self._to_uri(uri)
        self._target: Optional[str] = None
        
        if not self.has_header("Host") and self._uri.host != "":
            logger.debug(f"Setting Host header from uri host '{self._uri.host}'")
            self._headers = self._headers.with_header(Header("Host", self._uri.host))
    
    @staticmethod
    def _to_uri(uri: UriInput) -> Uri:
        if isinstance(uri, Uri):
            return uri
        return Uri(uri if uri is not None else "")
    
    @classmethod
    def from_h11(cls, event: h11.Request, body: BodySource = None) -> "Request":
        """
        Create a Request from a received h11 request event.
        
        Origin-form targets are combined with the Host header into the uri.
        """
        headers = HeaderCollection.from_pairs(event.headers.raw_items())
        target = event.target.decode("ascii")
        host = headers.get_header_line("Host")
        
        if target.startswith("/"):
            uri = Uri(f"//{host}{target}" if host != "" else target)
        elif "://" in target:
            uri = Uri(target)
        elif host != "":
            uri = Uri(host)
        else:
            uri = Uri("")
        
        request = cls(
            event.method,
            uri,
            body,
            headers,
            event.http_version.decode("ascii"),
        )
        
        if request.request_target != target:
            request._target = target
        
        return request
    
    @property
    def method(self) -> Method:
        return self._method
    
    def with_method(self, method: Union[Method, str, bytes]) -> Self:
        """Create a new request with a different method."""
        method = Method.from_value(method)
        instance = self._clone()
        instance._method = method
        return instance
    
    @property
    def uri(self) -> Uri:
        return self._uri
    
    def with_uri(self, uri: Union[Uri, URIComponents, str], preserve_host: bool = False) -> Self:
        """
        Create a new request with a different uri.
        
        The Host header is updated from the new uri host, unless
        ``preserve_host`` is set and the request already has a Host header.
        """
        uri = self._to_uri(uri)
        instance = self._clone()
        instance._uri = uri
        
        if uri.host == "":
            return instance
        
        if preserve_host and self.has_header("Host"):
            return instance
        
        instance._headers = self._headers.with_header(Header("Host", uri.host))
        return instance
    
    @property
    def request_target(self) -> str:
        """
        Get the request target.
        
        An explicit target set with ``with_request_target`` wins, otherwise
        the origin form of the uri is used (``/`` for an empty path).
        """
        if self._target is not None:
            return self._target
        
        target = self._uri.origin_form
        
        if not target.startswith("/"):
            target = f"/{target}"
        
        return target
    
    def with_request_target(self, target: str) -> Self:
        """Create a new request with an explicit request target."""
        if _WHITESPACE.search(target):
            raise ParseError("request target may not contain whitespace")
        
        instance = self._clone()
        instance._target = target
        return instance
    
    def with_parameters(self, parameters: Union[Query, Mapping[Any, Any]]) -> Self:
        """
        Create a new request carrying the given parameters.
        
        GET and HEAD requests get the parameters merged into the uri query.
        POST, PUT, PATCH and DELETE requests get them as a form-urlencoded
        body with a matching content-type header. Other methods are left
        unchanged.
        """
        query = parameters if isinstance(parameters, Query) else Query(parameters)
        
        if self._method in QUERY_METHODS:
            uri = self._uri.with_added_query_parameters(query)
            instance = self._clone()
            instance._uri = uri
            return instance
        
        if self._method in FORM_METHODS:
            instance = self._clone(Body(str(query)))
            instance._headers = self._headers.with_header(
                Header("content-type", "application/x-www-form-urlencoded")
            )
            return instance
        
        return self._clone()
    
    def to_h11(self) -> h11.Request:
        """
        Convert the request head to an h11 event.
        
        Raises:
            ValidationError: If h11 rejects the method, target or headers
        """
        try:
            event = h11.Request(
                method=self._method.value,
                target=self.request_target,
                headers=self._headers.to_pairs(),
                http_version=self._version,
            )
        except (h11.LocalProtocolError, UnicodeEncodeError) as e:
            raise ValidationError(f"Request can not be represented as an h11 event: {e}", e) from e
        
        logger.debug(f"Converted {self._method.value} {self.request_target} to h11 event")
        return event
    
    def __repr__(self) -> str:
        return f"Request({self._method.value!r}, {str(self._uri)!r})"


def _status_for(code: int, reason_phrase: str = "") -> Status:
    status = StatusCodes.get_status_for_code(code)
    
    if reason_phrase != "":
        status = replace(status, reason_phrase=reason_phrase)
    
    return status


class Response(Message, H11EventMixin):
    """
    Immutable HTTP response representation.
    """
    
    def __init__(
        self,
        status: Union[Status, int] = 200,
        body: BodySource = None,
        headers: HeadersInput = None,
        version: str = Message.DEFAULT_PROTOCOL_VERSION,
    ) -> None:
        """
        Initialize Response.
        
        Args:
            status: Status, or a code looked up in StatusCodes
            body: Body, or a source a new Body is created from
            headers: HeaderCollection or mapping of names to values
            version: HTTP protocol version
        """
        super().__init__(body, headers, version)
        
        if isinstance(status, bool) or not isinstance(status, (Status, int)):
            raise ValidationError("status must be int or Status")
        
        self._status = status if isinstance(status, Status) else _status_for(status)
    
    @classmethod
    def from_h11(
        cls,
        event: Union[h11.Response, h11.InformationalResponse],
        body: BodySource = None,
    ) -> "Response":
        """Create a Response from a received h11 response event."""
        return cls(
            _status_for(event.status_code, event.reason.decode("latin-1")),
            body,
            HeaderCollection.from_pairs(event.headers.raw_items()),
            event.http_version.decode("ascii"),
        )
    
    @property
    def status(self) -> Status:
        return self._status
    
    @property
    def status_code(self) -> int:
        return self._status.code
    
    @property
    def reason_phrase(self) -> str:
        return self._status.reason_phrase
    
    def with_status(self, code: int, reason_phrase: str = "") -> Self:
        """
        Create a new response with a different status.
        
        Args:
            code: Status code, looked up in StatusCodes
            reason_phrase: Overrides the registry reason phrase when not empty
        """
        status = _status_for(code, reason_phrase)
        instance = self._clone()
        instance._status = status
        return instance
    
    def has_body(self) -> bool:
        return (self._body.get_size() or 0) > 0
    
    def to_h11(self) -> Union[h11.Response, h11.InformationalResponse]:
        """
        Convert the response head to an h11 event.
        
        1xx statuses become InformationalResponse events.
        
        Raises:
            ValidationError: If h11 rejects the status or headers
        """
        event_class = h11.InformationalResponse if self.status_code < 200 else h11.Response
        
        try:
            event = event_class(
                status_code=self.status_code,
                headers=self._headers.to_pairs(),
                reason=self.reason_phrase,
                http_version=self._version,
            )
        except (h11.LocalProtocolError, UnicodeEncodeError) as e:
            raise ValidationError(f"Response can not be represented as an h11 event: {e}", e) from e
        
        logger.debug(f"Converted {self._status} response to h11 event")
        return event
    
    def __repr__(self) -> str:
        return f"Response({str(self._status)!r})"
