# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Tests for directive parsing."""

import pytest

from genro_urltool.directives import (
    AppendPath,
    AppendQuery,
    IterateComponent,
    SetComponent,
    TrimQuery,
    build_directives,
    encode_query_pair,
    parse_append,
    parse_iterate,
    parse_set,
    parse_trim,
)
from genro_urltool.exceptions import (
    AppendError,
    DirectiveFault,
    IterateError,
    SetError,
    TrimError,
)


class TestParseSet:
    """Tests for parse_set."""

    def test_basic(self) -> None:
        assert parse_set("host=example.com") == SetComponent("host", "example.com", True)

    def test_case_insensitive_name(self) -> None:
        directive = parse_set("HoSt=example.com")
        assert directive.name == "host"

    def test_raw_marker(self) -> None:
        """A colon before '=' disables encoding."""
        directive = parse_set("path:=/a%20b")
        assert directive == SetComponent("path", "/a%20b", urlencode=False)

    def test_empty_value(self) -> None:
        assert parse_set("fragment=").value == ""

    def test_value_keeps_equals(self) -> None:
        assert parse_set("query=a=1&b=2").value == "a=1&b=2"

    def test_unknown_component(self) -> None:
        with pytest.raises(SetError) as exc_info:
            parse_set("colour=red")
        assert exc_info.value.fault is DirectiveFault.UNKNOWN_COMPONENT
        assert exc_info.value.exit_code == 5

    @pytest.mark.parametrize("text", ["=value", "hostexample.com", ""])
    def test_malformed(self, text: str) -> None:
        with pytest.raises(SetError) as exc_info:
            parse_set(text)
        assert exc_info.value.fault is DirectiveFault.MALFORMED_PAIR

    def test_url_not_settable(self) -> None:
        with pytest.raises(SetError) as exc_info:
            parse_set("url=https://example.com")
        assert exc_info.value.fault is DirectiveFault.UNSUPPORTED_COMPONENT


class TestParseAppend:
    """Tests for parse_append."""

    def test_path_encoded(self) -> None:
        assert parse_append("path=my file") == AppendPath("my%20file")

    def test_path_slash_encoded(self) -> None:
        """A segment is one segment: slashes are encoded too."""
        assert parse_append("path=a/b") == AppendPath("a%2Fb")

    def test_query_sides_encoded(self) -> None:
        assert parse_append("query=a b=c&d") == AppendQuery("a%20b=c%26d")

    def test_query_bare_name(self) -> None:
        assert parse_append("QUERY=flag") == AppendQuery("flag")

    def test_unsupported_component(self) -> None:
        with pytest.raises(AppendError) as exc_info:
            parse_append("host=example.com")
        assert exc_info.value.fault is DirectiveFault.UNSUPPORTED_COMPONENT
        assert exc_info.value.exit_code == 2

    def test_unknown_component(self) -> None:
        with pytest.raises(AppendError) as exc_info:
            parse_append("nope=x")
        assert exc_info.value.fault is DirectiveFault.UNKNOWN_COMPONENT

    def test_malformed(self) -> None:
        with pytest.raises(AppendError):
            parse_append("path")

    @pytest.mark.parametrize("text", ["path=\udcff", "query=a=\udcff"])
    def test_not_utf8(self, text: str) -> None:
        with pytest.raises(AppendError) as exc_info:
            parse_append(text)
        assert exc_info.value.fault is DirectiveFault.MALFORMED_PAIR

    def test_encode_query_pair(self) -> None:
        assert encode_query_pair("k=v=w") == "k=v%3Dw"
        assert encode_query_pair("a&b") == "a%26b"


class TestParseTrim:
    """Tests for parse_trim."""

    def test_exact(self) -> None:
        assert parse_trim("query=foo") == TrimQuery("foo", False)

    def test_wildcard(self) -> None:
        assert parse_trim("query=utm_*") == TrimQuery("utm_", True)

    def test_wildcard_only(self) -> None:
        assert parse_trim("query=*") == TrimQuery("", True)

    def test_unsupported_component(self) -> None:
        with pytest.raises(TrimError) as exc_info:
            parse_trim("path=x")
        assert exc_info.value.fault is DirectiveFault.UNSUPPORTED_COMPONENT
        assert exc_info.value.exit_code == 8

    def test_empty_pattern(self) -> None:
        with pytest.raises(TrimError) as exc_info:
            parse_trim("query=")
        assert exc_info.value.fault is DirectiveFault.MALFORMED_PAIR


class TestParseIterate:
    """Tests for parse_iterate."""

    def test_hosts(self) -> None:
        directive = parse_iterate("hosts=a.com b.com c.com")
        assert directive == IterateComponent("host", ["a.com", "b.com", "c.com"])
        assert directive.values == ("a.com", "b.com", "c.com")

    def test_ports_extra_spaces(self) -> None:
        assert parse_iterate("ports=80  443 ").values == ("80", "443")

    def test_schemes(self) -> None:
        assert parse_iterate("schemes=http https").component_name == "scheme"

    @pytest.mark.parametrize("text", ["hosts=", "hosts=   ", "colours=red", "host=a.com", ""])
    def test_missing_args(self, text: str) -> None:
        with pytest.raises(IterateError) as exc_info:
            parse_iterate(text)
        assert exc_info.value.fault is DirectiveFault.MISSING_ITERATE_ARGS
        assert exc_info.value.exit_code == 10


class TestDirectives:
    """Tests for directive objects and build_directives."""

    def test_immutable(self) -> None:
        directive = SetComponent("host", "example.com")
        with pytest.raises(AttributeError):
            directive.value = "other.com"  # type: ignore[misc]

    def test_equality_and_hash(self) -> None:
        assert AppendPath("a") == AppendPath("a")
        assert AppendPath("a") != AppendQuery("a")
        assert len({TrimQuery("a"), TrimQuery("a")}) == 1

    def test_repr(self) -> None:
        r = repr(SetComponent("host", "example.com"))
        assert r == "SetComponent(name='host', value='example.com', urlencode=True)"

    def test_build_order(self) -> None:
        directives = build_directives(
            sets=["port=443"],
            appends=["path=x"],
            trims=["query=a"],
            iterate="hosts=a.com",
        )
        assert directives == [
            SetComponent("port", "443"),
            AppendPath("x"),
            TrimQuery("a"),
            IterateComponent("host", ["a.com"]),
        ]

    def test_build_empty(self) -> None:
        assert build_directives() == []
