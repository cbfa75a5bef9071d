"""
Query string handling for http_message.

This module parses and builds query strings, including the bracketed
``key[sub]=value`` syntax used for nested parameters.

As in PSR-7, a leading ``?`` is not considered part of the query string.
Nested parameters are not standardized, so there is no guarantee that every
web framework will read them back the way they were written.
"""

from typing import (
    Any,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Tuple,
    Union,
)
from urllib.parse import quote_plus, unquote_plus, urlsplit

from .exceptions import ParseError, ValidationError


# Type aliases for better readability
QueryValue = Union[str, int, float, Mapping[Any, Any], List[Any], Tuple[Any, ...]]
Parameters = Mapping[Any, Any]


def _is_container(value: Any) -> bool:
    return isinstance(value, (Mapping, list, tuple))


def _children(value: Any) -> Iterable[Tuple[Any, Any]]:
    if isinstance(value, Mapping):
        return value.items()
    return enumerate(value)


def _is_stringable(value: Any) -> bool:
    """Scalars, or objects that define their own ``__str__``."""
    if isinstance(value, (str, bytes, int, float)):
        return True
    return type(value).__str__ is not object.__str__


def _stringify(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return str(value)


def _validate_parameter(path: str, value: Any) -> None:
    if _is_container(value):
        for key, child in _children(value):
            _validate_parameter(f"{path}->{key}", child)
        return
    
    if not _is_stringable(value):
        raise ValidationError(f"Parameter '{path}' could not be converted to string")


def validate_parameters(parameters: Parameters) -> None:
    """
    Validate that every leaf of the given parameters can be used as a query value.
    
    Args:
        parameters: Mapping of names to strings or nested mappings/lists
        
    Raises:
        ValidationError: With the ``->`` separated path of the offending leaf
    """
    for name, value in parameters.items():
        _validate_parameter(str(name), value)


def _encode_parameter(name: str, value: Any) -> List[str]:
    """Encode a parameter whose name has already been url-encoded."""
    if not _is_container(value):
        return [f"{name}={quote_plus(_stringify(value))}"]
    
    segments: List[str] = []
    for key, child in _children(value):
        segments.extend(_encode_parameter(f"{name}[{quote_plus(str(key))}]", child))
    return segments


def build_query_string(parameters: Parameters) -> str:
    """
    Build a query string from parameters.
    
    Args:
        parameters: Mapping of names to strings or nested mappings/lists
        
    Returns:
        ``&`` joined ``name=value`` pairs in insertion order
    """
    validate_parameters(parameters)
    
    segments: List[str] = []
    for name, value in parameters.items():
        segments.extend(_encode_parameter(quote_plus(str(name)), value))
    
    return "&".join(segments)


def parse_query_string(raw: str) -> Dict[str, str]:
    """
    Parse a raw query string into a flat mapping.
    
    The whole string is percent-decoded before it is split, so encoded
    ``&`` and ``=`` characters act as separators.
    
    Args:
        raw: Query string, optionally with a leading ``?``
        
    Returns:
        Mapping of parameter names to values, the last duplicate wins
        
    Raises:
        ParseError: If the string contains a non-leading ``?`` or a
            segment that is not a single ``key=value`` pair
    """
    if raw.startswith("?"):
        raw = raw[1:]
    
    if raw.strip() == "":
        return {}
    
    if "?" in raw:
        raise ParseError("Non-leading ? character in query string")
    
    parameters: Dict[str, str] = {}
    
    for segment in unquote_plus(raw).split("&"):
        parts = segment.split("=")
        if len(parts) != 2:
            raise ParseError(
                f"Key-value pair '{segment}' is missing expected separator '='"
            )
        key, value = parts
        parameters[key] = value
    
    return parameters


class Query:
    """
    Query parameters builder.
    
    Unlike the message classes this one is mutable: ``add_parameters`` and
    ``remove_parameters`` change the instance in place. It is used as a
    short-lived builder by ``Uri`` and ``Request`` when deriving new
    instances.
    """
    
    def __init__(self, parameters: Optional[Parameters] = None) -> None:
        """
        Create a query from parameter key-value pairs.
        
        Args:
            parameters: Mapping of names to strings or nested mappings/lists
            
        Raises:
            ValidationError: If a leaf value can not be converted to string
        """
        params = dict(parameters or {})
        validate_parameters(params)
        self._parameters: Dict[Any, Any] = params
    
    @classmethod
    def from_query_string(cls, value: str) -> "Query":
        """Create a query from a raw query string."""
        return cls(parse_query_string(value))
    
    @classmethod
    def from_url(cls, url: str) -> "Query":
        """Create a query from the query component of a url."""
        try:
            query = urlsplit(url).query
        except ValueError as e:
            raise ParseError(f"Could not parse malformed url '{url}'", e) from e
        
        return cls.from_query_string(query)
    
    def add_parameters(self, parameters: Parameters) -> None:
        """Add the given parameters, overriding existing ones."""
        validate_parameters(parameters)
        self._parameters.update(parameters)
    
    def remove_parameters(self, names: Iterable[Any]) -> None:
        """Remove the given parameters, missing names are ignored."""
        for name in names:
            self._parameters.pop(name, None)
    
    def get_parameter(self, name: Any) -> Optional[Any]:
        return self._parameters.get(name)
    
    def has_parameter(self, name: Any) -> bool:
        return name in self._parameters
    
    def to_dict(self) -> Dict[Any, Any]:
        return dict(self._parameters)
    
    def __str__(self) -> str:
        return build_query_string(self._parameters)
    
    def __repr__(self) -> str:
        return f"Query({self._parameters!r})"
    
    def __len__(self) -> int:
        return len(self._parameters)
    
    def __eq__(self, other: object) -> bool:
        if isinstance(other, Query):
            return self._parameters == other._parameters
        if isinstance(other, dict):
            return self._parameters == other
        return NotImplemented
