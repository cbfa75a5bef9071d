"""
URI primitives for http_message.

This module defines the parsed URI components and the immutable ``Uri``
facade built on top of them. Components are frozen, so every derived
``Uri`` owns its own state and no instance can observe another one change.
"""

import re
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union
from urllib.parse import urlsplit

from .exceptions import ParseError, ValidationError
from .query import Query


DEFAULT_PORTS: Dict[str, int] = {
    "http": 80,
    "https": 443,
    "ftp": 21,
    "gopher": 70,
    "nntp": 119,
    "news": 119,
    "telnet": 23,
    "tn3270": 23,
    "imap": 143,
    "pop": 110,
    "ldap": 389,
}

_SCHEME_PREFIX = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://")

MIN_PORT = 1
MAX_PORT = 65535

Port = Optional[Union[int, str]]


def _parse_port(port: Port) -> Optional[int]:
    """Convert a port given as int or string, validating its range."""
    if port is None or port == "":
        return None
    
    if isinstance(port, str):
        try:
            port = int(port)
        except ValueError as e:
            raise ParseError(
                f"Failed to parse given port string '{port}' to an integer value", e
            ) from e
    
    if isinstance(port, bool) or not isinstance(port, int):
        raise ValidationError("port must be int, str or None")
    
    if not MIN_PORT <= port <= MAX_PORT:
        raise ValidationError(f"Invalid port number {port} - outside of range")
    
    return port


def _split_hostinfo(netloc: str) -> Tuple[str, str]:
    """Split the host and the raw port string out of a netloc, keeping host case."""
    hostinfo = netloc.rpartition("@")[2]
    
    if hostinfo.startswith("["):
        host, _, rest = hostinfo.partition("]")
        return f"{host}]", rest[1:] if rest.startswith(":") else ""
    
    host, _, port = hostinfo.partition(":")
    return host, port


@dataclass(frozen=True)
class URIComponents:
    """
    Immutable representation of URI components.
    
    The port may be given as a string, in which case it is parsed. Use
    ``dataclasses.replace`` (or ``Uri.with_*``) to derive changed copies;
    the port is validated again for every derived instance. User info is
    only allowed together with a host.
    """
    
    scheme: str = ""
    host: str = ""
    port: Optional[int] = None
    user: str = ""
    password: str = ""
    path: str = ""
    query: str = ""
    fragment: str = ""
    
    def __post_init__(self) -> None:
        """Validate the port and user info after initialization."""
        object.__setattr__(self, "port", _parse_port(self.port))
        
        if self.host == "" and (self.user != "" or self.password != ""):
            raise ValidationError("User info requires a host")
    
    @classmethod
    def from_string(cls, uri: str) -> "URIComponents":
        """
        Parse URIComponents from a URI string.
        
        A string with neither a leading ``scheme://`` nor a leading ``/`` is
        read as a bare authority, so ``foo.bar`` becomes the host instead
        of the path.
        
        Args:
            uri: URI string
            
        Returns:
            New URIComponents instance
            
        Raises:
            ParseError: If the string is malformed or no host or path can
                be determined from it
        """
        if uri == "":
            return cls()
        
        source = uri
        if not _SCHEME_PREFIX.match(uri) and not uri.startswith("/"):
            source = f"//{uri}"
        
        try:
            parsed = urlsplit(source)
        except ValueError as e:
            raise ParseError(f"Could not parse malformed uri string '{uri}'", e) from e
        
        host, port = _split_hostinfo(parsed.netloc)
        
        if host == "" and parsed.path == "":
            raise ParseError(f"Could not parse hostname from string '{uri}'")
        
        return cls(
            scheme=parsed.scheme,
            host=host,
            port=port,
            user=parsed.username or "",
            password=parsed.password or "",
            path=parsed.path,
            query=parsed.query,
            fragment=parsed.fragment,
        )
    
    @property
    def default_port(self) -> Optional[int]:
        """Get the well-known port of the scheme, if any."""
        return DEFAULT_PORTS.get(self.scheme.lower())
    
    @property
    def user_info(self) -> str:
        if self.password != "":
            return f"{self.user}:{self.password}"
        return self.user
    
    @property
    def authority(self) -> str:
        """Get ``[user_info@]host[:port]``, the port only if not the default."""
        if self.host == "":
            return ""
        
        authority = self.host
        
        if self.user_info != "":
            authority = f"{self.user_info}@{authority}"
        
        if self.port is not None and self.port != self.default_port:
            authority = f"{authority}:{self.port}"
        
        return authority
    
    def __str__(self) -> str:
        result = f"{self.scheme}://" if self.scheme else ""
        authority = self.authority
        result += authority
        
        path = self.path
        if authority and path and not path.startswith("/"):
            path = f"/{path}"
        result += path
        
        if self.query != "":
            result += f"?{self.query}"
        
        if self.fragment != "":
            result += f"#{self.fragment}"
        
        return result


class Uri:
    """
    Immutable URI.
    
    Every ``with_*`` method returns a new ``Uri``; the instance it was
    called on is never modified.
    """
    
    def __init__(self, uri: Union[str, URIComponents, "Uri"] = "") -> None:
        """
        Initialize Uri.
        
        Args:
            uri: URI string, parsed components or another Uri
        """
        if isinstance(uri, Uri):
            components = uri.components
        elif isinstance(uri, URIComponents):
            components = uri
        elif isinstance(uri, str):
            components = URIComponents.from_string(uri)
        else:
            raise ValidationError(
                f"uri must be str, URIComponents or Uri, '{type(uri).__name__}' given"
            )
        
        self._components = components
    
    def _derive(self, **changes: Any) -> "Uri":
        return Uri(replace(self._components, **changes))
    
    @property
    def components(self) -> URIComponents:
        return self._components
    
    @property
    def scheme(self) -> str:
        return self._components.scheme
    
    @property
    def user(self) -> str:
        return self._components.user
    
    @property
    def password(self) -> str:
        return self._components.password
    
    @property
    def user_info(self) -> str:
        return self._components.user_info
    
    @property
    def host(self) -> str:
        return self._components.host
    
    @property
    def port(self) -> Optional[int]:
        return self._components.port
    
    @property
    def path(self) -> str:
        return self._components.path
    
    @property
    def query(self) -> str:
        return self._components.query
    
    @property
    def fragment(self) -> str:
        return self._components.fragment
    
    @property
    def authority(self) -> str:
        return self._components.authority
    
    @property
    def default_port(self) -> Optional[int]:
        return self._components.default_port
    
    def uses_default_port(self) -> bool:
        """Check whether the port is unset or equal to the scheme's default."""
        return self.port is None or self.port == self.default_port
    
    def with_scheme(self, scheme: str) -> "Uri":
        """Create a new uri with a different scheme."""
        return self._derive(scheme=scheme)
    
    def with_user_info(self, user: str, password: Optional[str] = None) -> "Uri":
        """Create a new uri with different user information."""
        return self._derive(user=user, password=password or "")
    
    def with_host(self, host: str) -> "Uri":
        """Create a new uri with a different host."""
        return self._derive(host=host)
    
    def with_port(self, port: Port) -> "Uri":
        """Create a new uri with a different port."""
        return self._derive(port=port)
    
    def with_path(self, path: str) -> "Uri":
        """Create a new uri with a different path."""
        return self._derive(path=path)
    
    def with_query(self, query: Union[str, Query, Mapping[Any, Any]]) -> "Uri":
        """
        Create a new uri with a different query.
        
        Args:
            query: Raw query string, Query, or mapping of parameters
        """
        if isinstance(query, Mapping):
            query = Query(query)
        
        return self._derive(query=str(query))
    
    def with_fragment(self, fragment: str) -> "Uri":
        """Create a new uri with a different fragment."""
        return self._derive(fragment=fragment)
    
    def with_added_query_parameters(
        self, parameters: Union[Query, Mapping[Any, Any]]
    ) -> "Uri":
        """
        Create a new uri with the given parameters added to the query.
        
        Existing parameters with the same name are overridden.
        """
        if isinstance(parameters, Query):
            parameters = parameters.to_dict()
        
        query = Query.from_query_string(self.query)
        query.add_parameters(parameters)
        
        return self._derive(query=str(query))
    
    def with_removed_query_parameters(self, names: Iterable[Any]) -> "Uri":
        """Create a new uri without the given query parameters."""
        query = Query.from_query_string(self.query)
        query.remove_parameters(names)
        
        return self._derive(query=str(query))
    
    @property
    def origin_form(self) -> str:
        """Request target in origin form (rfc 7230 section 5.3.1)."""
        form = self.path
        
        if self.query != "":
            form += f"?{self.query}"
        
        return form
    
    @property
    def absolute_form(self) -> str:
        """Request target in absolute form (rfc 7230 section 5.3.2)."""
        return str(self)
    
    @property
    def authority_form(self) -> str:
        """Request target in authority form (rfc 7230 section 5.3.3)."""
        if self.port is None:
            return self.host
        return f"{self.host}:{self.port}"
    
    @property
    def asterisk_form(self) -> str:
        """Request target in asterisk form (rfc 7230 section 5.3.4)."""
        return "*"
    
    def __str__(self) -> str:
        return str(self._components)
    
    def __repr__(self) -> str:
        return f"Uri({str(self)!r})"
    
    def __eq__(self, other: object) -> bool:
        if isinstance(other, Uri):
            return self._components == other._components
        return NotImplemented
    
    def __hash__(self) -> int:
        return hash(self._components)
