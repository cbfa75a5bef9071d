"""
HTTP headers for http_message.

This module defines single headers and the case-insensitive, immutable
header collection used by messages.
"""

import base64
import binascii
from typing import (
    Any,
    Dict,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Union,
)

from .exceptions import ParseError, ValidationError


# Type aliases for better readability
HeaderValue = Union[str, Sequence[str]]
HeaderPair = Tuple[Union[str, bytes], Union[str, bytes]]


def _decode(value: Union[str, bytes]) -> str:
    if isinstance(value, bytes):
        return value.decode("latin-1")
    return value


class Header:
    """
    A single HTTP header.
    
    The value is kept as given: either one string (which may itself hold
    comma separated values) or a sequence of strings.
    """
    
    def __init__(self, name: str, values: HeaderValue) -> None:
        if not isinstance(name, str) or name == "":
            raise ValidationError("header name must be a non-empty string")
        
        if ":" in name:
            raise ValidationError(f"Header name '{name}' must not contain the ':' character")
        
        if isinstance(values, (list, tuple)) and all(isinstance(v, str) for v in values):
            values = tuple(values)
        elif not isinstance(values, str):
            raise ValidationError(
                f"Invalid header value type '{type(values).__name__}', "
                "header value should be either a string or a list of strings"
            )
        
        self._name = name
        self._values = values
    
    @classmethod
    def from_line(cls, line: str) -> "Header":
        """
        Parse a header line such as ``Accept: text/html, */*``.
        
        Args:
            line: Header line, the value part is optional
            
        Returns:
            New Header instance
        """
        name, _, value = line.partition(":")
        return cls(name.strip(), value.strip())
    
    @property
    def name(self) -> str:
        return self._name
    
    @property
    def value(self) -> str:
        """Get the value as a single string without parsing commas."""
        if isinstance(self._values, tuple):
            return ", ".join(self._values)
        return self._values
    
    @property
    def values(self) -> List[str]:
        """Get the list of values, splitting a single string value on commas."""
        if isinstance(self._values, tuple):
            return list(self._values)
        return [value.strip() for value in self._values.split(",")]
    
    def __str__(self) -> str:
        return f"{self._name}:{self.value}"
    
    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._name!r}, {self.value!r})"
    
    def __eq__(self, other: object) -> bool:
        if isinstance(other, Header):
            return (self._name.lower(), self.values) == (other._name.lower(), other.values)
        return NotImplemented
    
    def __hash__(self) -> int:
        return hash((self._name.lower(), tuple(self.values)))


def _find_credential(auth: Any, keys: Sequence[Any]) -> Optional[Any]:
    for key in keys:
        try:
            return auth[key]
        except (KeyError, IndexError, TypeError):
            continue
    return None


class BasicAuthorizationHeader(Header):
    """``Authorization`` header using the basic scheme."""
    
    def __init__(self, user: str, password: str) -> None:
        if ":" in user:
            raise ValidationError("Username must not contain the ':' character")
        
        self._user = user
        self._password = password
        
        credentials = base64.b64encode(f"{user}:{password}".encode("utf-8"))
        super().__init__("Authorization", f"Basic {credentials.decode('ascii')}")
    
    @classmethod
    def from_dict(cls, auth: Union[Mapping[str, str], Sequence[str]]) -> "BasicAuthorizationHeader":
        """
        Create a header from ``[user, password]`` or a mapping.
        
        The mapping may use ``user`` or ``username`` and ``pass`` or
        ``password`` keys.
        """
        user = _find_credential(auth, (0, "user", "username"))
        if not isinstance(user, str):
            raise ValidationError("Could not find valid index to use as user")
        
        password = _find_credential(auth, (1, "pass", "password"))
        if not isinstance(password, str):
            raise ValidationError("Could not find valid index to use as password")
        
        return cls(user, password)
    
    @classmethod
    def from_line(cls, line: str) -> "BasicAuthorizationHeader":
        """Create a header from a full ``Authorization: Basic ...`` line."""
        return cls.from_value(Header.from_line(line).value)
    
    @classmethod
    def from_value(cls, value: str) -> "BasicAuthorizationHeader":
        """
        Decode a header value into a basic auth header.
        
        Raises:
            ParseError: If the value does not start with ``Basic `` or the
                credentials are not valid base64
        """
        value = value.strip()
        
        if not value.startswith("Basic "):
            raise ParseError("Given header value should start with 'Basic '")
        
        encoded = value.split(" ", 1)[1]
        
        try:
            credentials = base64.b64decode(encoded, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise ParseError("Could not decode basic authorization credentials", e) from e
        
        user, _, password = credentials.partition(":")
        return cls(user, password)
    
    @property
    def user(self) -> str:
        return self._user
    
    @property
    def password(self) -> str:
        return self._password


class HeaderCollection:
    """
    Immutable, case-insensitive collection of headers.
    
    Headers are stored under their lower-cased name, one header per name,
    in insertion order. Every ``with*`` method returns a new collection.
    """
    
    def __init__(self, headers: Optional[Mapping[str, Header]] = None) -> None:
        """
        Initialize HeaderCollection.
        
        Args:
            headers: Mapping of lower-cased names to Header objects
        """
        self._headers: Dict[str, Header] = dict(headers or {})
    
    @classmethod
    def from_dict(cls, headers: Mapping[str, Union[HeaderValue, Header]]) -> "HeaderCollection":
        """
        Create a header collection from a mapping.
        
        Args:
            headers: Mapping of names to a string, a list of strings, or a
                Header (whose own name is then used)
                
        Raises:
            ValidationError: If a value has any other type
        """
        collected: Dict[str, Header] = {}
        
        for name, values in headers.items():
            if isinstance(values, Header):
                collected[values.name.lower()] = values
                continue
            
            if isinstance(values, (str, list, tuple)):
                collected[name.lower()] = Header(name, values)
                continue
            
            raise ValidationError(
                f"Invalid header value type '{type(values).__name__}', "
                "header value should be either a string or a list"
            )
        
        return cls(collected)
    
    @classmethod
    def from_pairs(cls, pairs: Iterable[HeaderPair]) -> "HeaderCollection":
        """Create a collection from ``(name, value)`` pairs, merging repeated names."""
        collection = cls()
        for name, value in pairs:
            collection = collection.with_added_header(Header(_decode(name), _decode(value)))
        return collection
    
    def get_header(self, name: str) -> Optional[Header]:
        """Get a header by name (case-insensitive)."""
        return self._headers.get(name.lower())
    
    def get_header_line(self, name: str) -> str:
        """Get the comma separated values of a header, ``''`` if missing."""
        header = self.get_header(name)
        return header.value if header is not None else ""
    
    def has_header(self, name: str) -> bool:
        """Check if a header exists (case-insensitive)."""
        return name.lower() in self._headers
    
    def with_header(self, header: Header) -> "HeaderCollection":
        """Create a new collection with the given header, replacing any existing one."""
        headers = dict(self._headers)
        headers[header.name.lower()] = header
        return HeaderCollection(headers)
    
    def with_added_header(self, header: Header) -> "HeaderCollection":
        """Create a new collection with the values of the header appended to existing ones."""
        old_header = self.get_header(header.name)
        
        if old_header is None:
            return self.with_header(header)
        
        return self.with_header(Header(header.name, old_header.values + header.values))
    
    def without_header(self, name: str) -> "HeaderCollection":
        """Create a new collection without the header with the given name."""
        headers = dict(self._headers)
        headers.pop(name.lower(), None)
        return HeaderCollection(headers)
    
    def to_dict(self) -> Dict[str, List[str]]:
        """Get header names mapped to their lists of values, in insertion order."""
        return {header.name: header.values for header in self._headers.values()}
    
    def to_pairs(self) -> List[Tuple[str, str]]:
        """Get ``(name, comma joined value)`` pairs, one per header."""
        return [(header.name, header.value) for header in self._headers.values()]
    
    def __iter__(self) -> Iterator[Header]:
        return iter(self._headers.values())
    
    def __len__(self) -> int:
        return len(self._headers)
    
    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has_header(name)
    
    def __repr__(self) -> str:
        return f"HeaderCollection({list(self._headers.values())!r})"
