"""
HTTP response status registry for http_message.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping, Optional


@dataclass(frozen=True)
class Status:
    """Immutable representation of an HTTP response status."""
    
    code: int
    reason_phrase: str
    description: str
    should_retry: bool = False
    standard: Optional[str] = None
    
    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Status":
        """
        Create a Status from a record with named fields.
        
        ``name`` is accepted as an alias of ``reason_phrase``; every field
        except ``code`` is optional.
        """
        return cls(
            code=data["code"],
            reason_phrase=data.get("reason_phrase", data.get("name", "")),
            description=data.get("description", ""),
            should_retry=data.get("should_retry", False),
            standard=data.get("standard"),
        )
    
    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
    
    def __str__(self) -> str:
        return f"{self.code} {self.reason_phrase}"


class StatusCodes:
    """Static lookup table of known status codes."""
    
    UNKNOWN_REASON_PHRASE = "Unknown"
    UNKNOWN_DESCRIPTION = "No description could be found for this status code"
    
    CODES: Dict[int, Dict[str, Any]] = {
        200: {
            "name": "OK",
            "description": "The request has succeeded",
            "standard": None,
            "should_retry": False,
        },
        201: {
            "name": "Created",
            "description": "The request has been fulfilled and has resulted in one or more new resources being created",
            "standard": "rfc 7231, section 6.3.2",
            "should_retry": False,
        },
        300: {
            "name": "Multiple Choices",
            "description": "The requested resource corresponds to any one of a set of representations, each with its own specific location",
            "standard": None,
            "should_retry": False,
        },
        301: {
            "name": "Moved Permanently",
            "description": "The requested resource has been assigned a new permanent URI",
            "standard": None,
            "should_retry": False,
        },
        302: {
            "name": "Found",
            "description": "The requested resource resides temporarily under a different URI",
            "standard": None,
            "should_retry": False,
        },
        304: {
            "name": "Not Modified",
            "description": "The document has not been modified",
            "standard": None,
            "should_retry": False,
        },
        307: {
            "name": "Temporary Redirect",
            "description": "The requested resource resides temporarily under a different URI",
            "standard": None,
            "should_retry": False,
        },
        400: {
            "name": "Bad Request",
            "description": "The request could not be understood by the server due to malformed syntax",
            "standard": None,
            "should_retry": False,
        },
        401: {
            "name": "Unauthorized",
            "description": "The request requires user authentication",
            "standard": None,
            "should_retry": False,
        },
        403: {
            "name": "Forbidden",
            "description": "The server understood the request, but is refusing to fulfill it",
            "standard": None,
            "should_retry": False,
        },
        404: {
            "name": "Not Found",
            "description": "The server has not found anything matching the Request-URI",
            "standard": None,
            "should_retry": False,
        },
        405: {
            "name": "Method Not Allowed",
            "description": "The method specified in the Request-Line is not allowed for the resource identified by the Request-URI",
            "standard": None,
            "should_retry": False,
        },
        408: {
            "name": "Request Timeout",
            "description": "The client did not produce a request within the time that the server was prepared to wait",
            "standard": None,
            "should_retry": False,
        },
        419: {
            "name": "Authentication Timeout",
            "description": "Previously valid authentication has expired",
            "standard": None,
            "should_retry": False,
        },
        422: {
            "name": "Unprocessable Content",
            "description": "The request was well-formed but was unable to be followed due to semantic errors",
            "standard": None,
            "should_retry": False,
        },
        429: {
            "name": "Too Many Requests",
            "description": "The user has sent too many requests in a given amount of time (rate limiting)",
            "standard": "RFC6585",
            "should_retry": True,
        },
        500: {
            "name": "Internal Server Error",
            "description": "The server encountered an unexpected condition which prevented it from fulfilling the request",
            "standard": None,
            "should_retry": False,
        },
        502: {
            "name": "Bad Gateway",
            "description": "This server got an error response while working as a gateway to handle the current request",
            "standard": None,
            "should_retry": True,
        },
        503: {
            "name": "Service Unavailable",
            "description": "The server is currently unable to handle the request due to a temporary overloading or maintenance of the server",
            "standard": None,
            "should_retry": True,
        },
    }
    
    @classmethod
    def get_status_for_code(cls, code: int) -> Status:
        """
        Look up the status for a code.
        
        Unknown codes give an ``Unknown`` status that keeps the code.
        """
        status = cls.CODES.get(code)
        
        if status is None:
            return Status(
                code=code,
                reason_phrase=cls.UNKNOWN_REASON_PHRASE,
                description=cls.UNKNOWN_DESCRIPTION,
            )
        
        return Status.from_dict({**status, "code": code})
