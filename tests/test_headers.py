"""
Unit tests for HTTP headers.

Tests Header, BasicAuthorizationHeader and HeaderCollection, including
case-insensitive lookup and immutability of the collection.
"""

import base64

import pytest

from http_message.exceptions import ParseError, ValidationError
from http_message.headers import BasicAuthorizationHeader, Header, HeaderCollection


@pytest.fixture
def headers() -> HeaderCollection:
    return HeaderCollection.from_dict({
        "header1": ["foo", "bar"],
        "header2": "baz",
    })


class TestHeader:
    """Test Header class functionality."""
    
    def test_value_joins_values(self) -> None:
        """Test that value is the comma joined string."""
        header = Header("name", ["foo", "bar", "baz"])
        assert header.value == "foo, bar, baz"
    
    def test_values_of_list(self) -> None:
        """Test that values returns the given list."""
        values = ["foo", "bar", "baz"]
        assert Header("name", values).values == values
    
    def test_values_splits_string(self) -> None:
        """Test that a string value is split and trimmed."""
        assert Header("name", "foo, bar,baz").values == ["foo", "bar", "baz"]
    
    def test_str_has_no_space_after_colon(self) -> None:
        """Test the header line format."""
        assert str(Header("name", ["foo", "bar", "baz"])) == "name:foo, bar, baz"
    
    def test_from_line(self) -> None:
        """Test parsing a header line."""
        header = Header.from_line("Content-Type: text/html; charset=utf-8")
        assert header.name == "Content-Type"
        assert header.value == "text/html; charset=utf-8"
    
    def test_from_line_without_value(self) -> None:
        """Test parsing a line without a colon."""
        header = Header.from_line("X-Empty")
        assert header.name == "X-Empty"
        assert header.value == ""
    
    def test_name_with_colon(self) -> None:
        """Test that the name can not contain a colon."""
        with pytest.raises(ValidationError, match="':'"):
            Header("bad:name", "value")
    
    @pytest.mark.parametrize("value", [42, None, {"a": "b"}, ["ok", 1]])
    def test_invalid_value_type(self, value) -> None:
        """Test that only strings and lists of strings are accepted."""
        with pytest.raises(ValidationError, match="Invalid header value type"):
            Header("name", value)
    
    def test_equality_ignores_name_case(self) -> None:
        """Test comparing headers."""
        assert Header("Accept", "a, b") == Header("accept", ["a", "b"])


class TestBasicAuthorizationHeader:
    """Test BasicAuthorizationHeader class functionality."""
    
    def test_value(self) -> None:
        """Test the encoded header value."""
        header = BasicAuthorizationHeader("foo", "bar")
        assert header.name == "Authorization"
        assert header.value == "Basic " + base64.b64encode(b"foo:bar").decode()
    
    def test_str(self) -> None:
        """Test the header line."""
        header = BasicAuthorizationHeader("foo", "bar")
        encoded = str(header).split(" ", 1)[1]
        assert base64.b64decode(encoded) == b"foo:bar"
    
    def test_user_and_password(self) -> None:
        """Test credential accessors."""
        header = BasicAuthorizationHeader("foo", "bar")
        assert header.user == "foo"
        assert header.password == "bar"
    
    def test_user_with_colon(self) -> None:
        """Test that the user can not contain a colon."""
        with pytest.raises(ValidationError, match="Username must not contain the ':' character"):
            BasicAuthorizationHeader("foo:bar", "baz")
    
    def test_password_with_colon(self) -> None:
        """Test that the password may contain a colon."""
        header = BasicAuthorizationHeader("foo", "bar:baz")
        assert header.password == "bar:baz"
        assert BasicAuthorizationHeader.from_value(header.value).password == "bar:baz"
    
    @pytest.mark.parametrize(
        "auth",
        [
            ["foo", "bar"],
            {"user": "foo", "pass": "bar"},
            {"username": "foo", "password": "bar"},
        ],
    )
    def test_from_dict(self, auth) -> None:
        """Test creating the header from a sequence or mapping."""
        header = BasicAuthorizationHeader.from_dict(auth)
        assert (header.user, header.password) == ("foo", "bar")
    
    def test_from_dict_missing_password(self) -> None:
        """Test that missing credentials are rejected."""
        with pytest.raises(ValidationError, match="password"):
            BasicAuthorizationHeader.from_dict({"user": "foo"})
    
    def test_from_line(self) -> None:
        """Test decoding a full header line."""
        line = "Authorization: Basic " + base64.b64encode(b"foo:bar").decode()
        header = BasicAuthorizationHeader.from_line(line)
        assert header.user == "foo"
        assert header.password == "bar"
    
    def test_from_line_without_basic_prefix(self) -> None:
        """Test that non-basic values are rejected."""
        with pytest.raises(ParseError, match="should start with 'Basic '"):
            BasicAuthorizationHeader.from_line("foo")
    
    def test_from_value_requires_exact_prefix(self) -> None:
        """Test that the prefix is case-sensitive."""
        with pytest.raises(ParseError):
            BasicAuthorizationHeader.from_value("basic Zm9vOmJhcg==")
    
    def test_from_value_invalid_base64(self) -> None:
        """Test that broken credentials are a parse error."""
        with pytest.raises(ParseError, match="decode"):
            BasicAuthorizationHeader.from_value("Basic !!!")


class TestHeaderCollection:
    """Test HeaderCollection class functionality."""
    
    def test_to_dict(self, headers) -> None:
        """Test the name to values mapping."""
        assert headers.to_dict() == {
            "header1": ["foo", "bar"],
            "header2": ["baz"],
        }
    
    def test_to_dict_keeps_insertion_order(self) -> None:
        """Test that headers are not sorted."""
        collection = HeaderCollection.from_dict({"Zeta": "1", "Alpha": "2"})
        assert list(collection.to_dict()) == ["Zeta", "Alpha"]
    
    def test_has_header(self, headers) -> None:
        """Test header existence checks."""
        assert headers.has_header("header1") is True
        assert headers.has_header("header3") is False
    
    @pytest.mark.parametrize("name", ["header1", "Header1", "HEADER1"])
    def test_lookup_is_case_insensitive(self, headers, name) -> None:
        """Test that every lookup ignores case."""
        assert headers.has_header(name) is True
        assert isinstance(headers.get_header(name), Header)
        assert headers.get_header_line(name) == "foo, bar"
        assert name in headers
    
    def test_get_header_line_missing(self, headers) -> None:
        """Test that a missing header gives an empty line."""
        assert headers.get_header_line("missing") == ""
        assert headers.get_header("missing") is None
    
    def test_from_dict_with_header_objects(self) -> None:
        """Test that Header values keep their own name."""
        collection = HeaderCollection.from_dict({"ignored": Header("X-Token", "abc")})
        assert collection.get_header_line("x-token") == "abc"
        assert collection.has_header("ignored") is False
    
    def test_from_dict_invalid_type(self) -> None:
        """Test that other value types are rejected."""
        with pytest.raises(ValidationError, match="Invalid header value type 'int'"):
            HeaderCollection.from_dict({"header": 42})
    
    def test_with_header_replaces(self, headers) -> None:
        """Test replacing a header."""
        derived = headers.with_header(Header("HEADER1", "test"))
        assert derived.get_header_line("header1") == "test"
        assert len(derived) == 2
    
    def test_with_added_header_appends(self, headers) -> None:
        """Test that added values come after the old ones."""
        derived = headers.with_added_header(Header("header1", "baz"))
        assert derived.get_header("header1").values == ["foo", "bar", "baz"]
    
    def test_with_added_header_new(self, headers) -> None:
        """Test adding a header that does not exist yet."""
        derived = headers.with_added_header(Header("header3", "qux"))
        assert derived.get_header_line("header3") == "qux"
    
    def test_without_header_is_case_insensitive(self, headers) -> None:
        """Test removing a header under a different case."""
        derived = headers.without_header("HEADER2")
        assert list(derived.to_dict()) == ["header1"]
    
    def test_derivations_do_not_modify_original(self, headers) -> None:
        """Test that the collection is never changed in place."""
        headers.with_header(Header("header1", "test"))
        headers.with_added_header(Header("header1", "baz"))
        headers.without_header("header2")
        
        assert headers.to_dict() == {
            "header1": ["foo", "bar"],
            "header2": ["baz"],
        }
    
    def test_from_pairs_merges_repeated_names(self) -> None:
        """Test building a collection from raw pairs."""
        collection = HeaderCollection.from_pairs([
            (b"Accept", b"text/html"),
            (b"accept", b"application/json"),
            ("Host", "example.com"),
        ])
        assert collection.get_header("accept").values == ["text/html", "application/json"]
        assert collection.to_pairs() == [
            ("accept", "text/html, application/json"),
            ("Host", "example.com"),
        ]
    
    def test_iteration(self, headers) -> None:
        """Test iterating over headers."""
        assert [header.name for header in headers] == ["header1", "header2"]
