"""
Pytest configuration for http_message tests.

This file contains shared fixtures and configuration
for all tests in the project.
"""

import io

import pytest

from http_message.body import Body
from http_message.headers import HeaderCollection
from http_message.http_primitives import Message


class NonSeekableStream(io.RawIOBase):
    """Readable stream that can not seek, like a socket or pipe."""
    
    def __init__(self, data: bytes) -> None:
        self._buffer = io.BytesIO(data)
    
    def readable(self) -> bool:
        return True
    
    def readinto(self, b) -> int:
        data = self._buffer.read(len(b))
        b[: len(data)] = data
        return len(data)


@pytest.fixture
def non_seekable_stream():
    """Create a non-seekable stream for testing."""
    def _create_stream(data: bytes) -> NonSeekableStream:
        return NonSeekableStream(data)
    return _create_stream


@pytest.fixture
def body_file(tmp_path):
    """Path of a file holding a small body."""
    path = tmp_path / "body.txt"
    path.write_bytes(b"test\n")
    return str(path)


@pytest.fixture
def file_body(body_file):
    """Body backed by a read-only file."""
    body = Body(open(body_file, "rb"))
    yield body
    body.close()


@pytest.fixture
def sample_headers():
    """Sample headers for testing."""
    return {
        "header1": "foo, bar",
        "header2": "baz",
    }


@pytest.fixture
def sample_parameters():
    """Sample query parameters for testing."""
    return {
        "param1": "foo",
        "param2": "bar",
        "param3": "baz",
    }


@pytest.fixture
def message(file_body, sample_headers):
    """Message with a file body and two headers."""
    return Message(body=file_body, headers=HeaderCollection.from_dict(sample_headers))
