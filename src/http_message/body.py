"""
Message body for http_message.

This module provides the ``Body`` class, the single owner of the byte
stream behind a message. Bodies are backed by any binary file object
(an in-memory buffer, a file, a socket file); strings and bytes are
copied into a new in-memory buffer.
"""

import io
import logging
from typing import Any, BinaryIO, Dict, Iterator, Optional, Tuple, Union

from .exceptions import ResourceError, ValidationError

logger = logging.getLogger(__name__)


BodySource = Union[None, str, bytes, bytearray, BinaryIO, "Body"]


def _to_bytes(data: Union[str, bytes]) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


class Body:
    """
    A representation of a message body.
    
    The body owns its stream. ``detach`` hands the stream over to the
    caller and leaves the body unusable; ``close`` closes the stream and
    detaches it. Every other operation on a detached body raises
    ResourceError.
    
    Dropping a body does not close its stream; call ``close`` or use the
    body as a context manager to release it. A detached stream belongs to
    the caller.
    """
    
    DEFAULT_CHUNK_SIZE = 8192
    
    def __init__(self, source: BodySource = None) -> None:
        """
        Initialize Body.
        
        Args:
            source: Source of the body. A string or bytes is copied into a
                new in-memory buffer, a file object is used as-is, and
                another Body is detached so its stream moves to this one.
        """
        self._stream: Optional[BinaryIO] = None
        self._eof = False
        self._set_source(source)
    
    def _set_source(self, source: BodySource) -> None:
        if isinstance(source, Body):
            stream = source.detach()
            if stream is None:
                raise ResourceError("Cannot create a body from a detached body")
            self._stream = stream
            return
        
        if source is None:
            self._stream = io.BytesIO()
            return
        
        if isinstance(source, (str, bytes, bytearray)):
            self._stream = io.BytesIO(_to_bytes(source))
            return
        
        if hasattr(source, "read"):
            self._stream = source
            return
        
        raise ValidationError(
            "Source of the body must be one of the following: str, bytes, "
            f"a binary file object, Body or None, '{type(source).__name__}' given"
        )
    
    def _require_stream(self) -> BinaryIO:
        if self._stream is None:
            raise ResourceError("Stream is detached")
        return self._stream
    
    def _snapshot(self) -> Tuple[bytes, int]:
        """
        Read the full content without moving the stream position.
        
        Non-seekable streams are spooled into an in-memory buffer, which
        then replaces the original stream.
        """
        stream = self._require_stream()
        
        try:
            if self.is_seekable():
                position = stream.tell()
                stream.seek(0)
                data = _to_bytes(stream.read())
                stream.seek(position)
                return data, position
            
            data = _to_bytes(stream.read())
            stream.close()
        except (OSError, ValueError) as e:
            raise ResourceError("Failure reading body stream", e) from e
        
        logger.debug(f"Spooled {len(data)} bytes of non-seekable body stream into memory")
        self._stream = io.BytesIO(data)
        return data, 0
    
    def clone(self) -> "Body":
        """
        Create an independent copy of this body.
        
        The copy gets a new in-memory buffer holding the full content, with
        the same stream position as this body. A detached body gives a
        detached copy.
        """
        if self._stream is None:
            clone = Body()
            clone.detach()
            return clone
        
        data, position = self._snapshot()
        buffer = io.BytesIO(data)
        buffer.seek(position)
        return Body(buffer)
    
    def detach(self) -> Optional[BinaryIO]:
        """
        Separate the underlying stream from the body.
        
        Returns:
            The stream, or None if the body was already detached
        """
        stream = self._stream
        self._stream = None
        if stream is not None:
            logger.debug("Body stream detached")
        return stream
    
    def close(self) -> None:
        """Close the underlying stream and detach it."""
        stream = self.detach()
        if stream is not None:
            stream.close()
    
    def get_size(self) -> Optional[int]:
        """Get the size of the content in bytes, None if it is unknown."""
        try:
            return len(self._snapshot()[0])
        except ResourceError:
            return None
    
    def tell(self) -> int:
        stream = self._require_stream()
        try:
            return stream.tell()
        except (OSError, ValueError) as e:
            raise ResourceError("Failure finding file pointer for body stream", e) from e
    
    def eof(self) -> bool:
        """Check whether the stream position is at the end of the content."""
        stream = self._require_stream()
        
        if not self.is_seekable():
            return self._eof
        
        try:
            position = stream.tell()
            end = stream.seek(0, io.SEEK_END)
            stream.seek(position)
        except (OSError, ValueError) as e:
            raise ResourceError("Failure seeking body stream", e) from e
        
        return position >= end
    
    def seek(self, offset: int, whence: int = io.SEEK_SET) -> None:
        stream = self._require_stream()
        try:
            stream.seek(offset, whence)
        except (OSError, ValueError) as e:
            raise ResourceError("Failure seeking body stream", e) from e
        self._eof = False
    
    def rewind(self) -> None:
        if not self.is_seekable():
            raise ResourceError("Body stream is not seekable")
        self.seek(0)
    
    def read(self, length: int) -> bytes:
        stream = self._require_stream()
        try:
            data = _to_bytes(stream.read(length))
        except (OSError, ValueError) as e:
            raise ResourceError("Failure reading body stream", e) from e
        
        if len(data) < length:
            self._eof = True
        return data
    
    def write(self, data: Union[str, bytes]) -> int:
        stream = self._require_stream()
        try:
            return stream.write(_to_bytes(data))
        except (OSError, ValueError) as e:
            raise ResourceError("Failure writing to body stream", e) from e
    
    def get_contents(self) -> bytes:
        """Read the remaining content from the current position."""
        stream = self._require_stream()
        try:
            data = _to_bytes(stream.read())
        except (OSError, ValueError) as e:
            raise ResourceError("Failure reading body stream", e) from e
        
        self._eof = True
        return data
    
    def iter_chunks(self, chunk_size: Optional[int] = None) -> Iterator[bytes]:
        """
        Iterate over the remaining content in chunks.
        
        Args:
            chunk_size: Maximum chunk length, DEFAULT_CHUNK_SIZE if not given
        """
        size = chunk_size or self.DEFAULT_CHUNK_SIZE
        while True:
            chunk = self.read(size)
            if chunk:  # Skip the empty read at the end
                yield chunk
            if len(chunk) < size:
                return
    
    def __iter__(self) -> Iterator[bytes]:
        return self.iter_chunks()
    
    def _check(self, capability: str) -> bool:
        if self._stream is None:
            return False
        try:
            return bool(getattr(self._stream, capability)())
        except (AttributeError, ValueError):
            return False
    
    def is_seekable(self) -> bool:
        return self._check("seekable")
    
    def is_readable(self) -> bool:
        return self._check("readable")
    
    def is_writable(self) -> bool:
        return self._check("writable")
    
    def get_metadata(self, key: Optional[str] = None) -> Any:
        """
        Get stream metadata.
        
        Args:
            key: Single metadata key to return instead of the whole mapping
            
        Returns:
            Mapping with ``mode``, ``seekable``, ``readable``, ``writable``
            and ``uri`` keys, the value for ``key``, or None when detached
        """
        if self._stream is None:
            return None
        
        metadata: Dict[str, Any] = {
            "mode": getattr(self._stream, "mode", None),
            "seekable": self.is_seekable(),
            "readable": self.is_readable(),
            "writable": self.is_writable(),
            "uri": getattr(self._stream, "name", None),
        }
        
        if key is not None:
            return metadata.get(key)
        return metadata
    
    @property
    def detached(self) -> bool:
        return self._stream is None
    
    def __bytes__(self) -> bytes:
        if self.is_seekable():
            self.seek(0)
        return self.get_contents()
    
    def __str__(self) -> str:
        return bytes(self).decode("utf-8", errors="replace")
    
    def __repr__(self) -> str:
        state = "detached" if self._stream is None else type(self._stream).__name__
        return f"Body({state})"
    
    def __enter__(self) -> "Body":
        return self
    
    def __exit__(self, *exc_info: Any) -> None:
        self.close()
