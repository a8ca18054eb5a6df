# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""
Directive model: typed, immutable URL transformations.

Purpose
=======
A directive is one requested transformation parsed from text. Directives
are parsed once, validated by shape, and never modified afterwards.

Directive Text::

    set      host=example.com        SetComponent("host", "example.com", urlencode=True)
    set      path:=/raw%20path       SetComponent("path", "/raw%20path", urlencode=False)
    set      fragment=               SetComponent("fragment", "")   # clears
    append   path=my file            AppendPath("my%20file")
    append   query=a b=c&d           AppendQuery("a%20b=c%26d")
    trim     query=utm_*             TrimQuery("utm_", is_prefix_wildcard=True)
    iterate  hosts=a.com b.com       IterateComponent("host", ("a.com", "b.com"))

Definition::

    class Directive
    class SetComponent(Directive):     name, value, urlencode
    class AppendPath(Directive):       segment
    class AppendQuery(Directive):      pair
    class TrimQuery(Directive):        name_pattern, is_prefix_wildcard
    class IterateComponent(Directive): component_name, values

    def parse_set(text: str) -> SetComponent
    def parse_append(text: str) -> AppendPath | AppendQuery
    def parse_trim(text: str) -> TrimQuery
    def parse_iterate(text: str) -> IterateComponent
    def build_directives(sets, appends, trims, iterate) -> list[Directive]

Errors
======
Every parser raises a ``DirectiveError`` subclass carrying a ``DirectiveFault``:
``SetError``, ``AppendError``, ``TrimError`` or ``IterateError``.
"""

from __future__ import annotations

from typing import Any, Iterable, Sequence
from urllib.parse import quote

from .exceptions import (
    AppendError,
    DirectiveError,
    DirectiveFault,
    IterateError,
    SetError,
    TrimError,
)
from .types import ITERABLE_COMPONENTS, lookup_component

__all__ = [
    "AppendPath",
    "AppendQuery",
    "Directive",
    "IterateComponent",
    "SetComponent",
    "TrimQuery",
    "build_directives",
    "encode_query_pair",
    "parse_append",
    "parse_iterate",
    "parse_set",
    "parse_trim",
]


class Directive:
    """Base class for immutable directives; equality and repr come from ``__slots__``."""

    __slots__: tuple[str, ...] = ()

    def _assign(self, **values: Any) -> None:
        for name, value in values.items():
            object.__setattr__(self, name, value)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def _key(self) -> tuple[Any, ...]:
        return tuple(getattr(self, name) for name in self.__slots__)

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return False
        return self._key() == other._key()  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._key()))

    def __repr__(self) -> str:
        fields = ", ".join(f"{name}={getattr(self, name)!r}" for name in self.__slots__)
        return f"{type(self).__name__}({fields})"


class SetComponent(Directive):
    """
    Set one component to a value.

    Attributes:
        name: Canonical component name (never ``url``).
        value: Text after "="; empty means clear the component.
        urlencode: False when the directive used the ``name:=value`` raw form.
    """

    __slots__ = ("name", "value", "urlencode")

    def __init__(self, name: str, value: str, urlencode: bool = True) -> None:
        self._assign(name=name, value=value, urlencode=urlencode)


class AppendPath(Directive):
    """Append one percent-encoded segment to the path."""

    __slots__ = ("segment",)

    def __init__(self, segment: str) -> None:
        self._assign(segment=segment)


class AppendQuery(Directive):
    """Append one percent-encoded ``name=value`` pair to the query."""

    __slots__ = ("pair",)

    def __init__(self, pair: str) -> None:
        self._assign(pair=pair)


class TrimQuery(Directive):
    """
    Remove query pairs by name.

    Attributes:
        name_pattern: Name to match, without the trailing "*".
        is_prefix_wildcard: Match names starting with the pattern.
    """

    __slots__ = ("name_pattern", "is_prefix_wildcard")

    def __init__(self, name_pattern: str, is_prefix_wildcard: bool = False) -> None:
        self._assign(name_pattern=name_pattern, is_prefix_wildcard=is_prefix_wildcard)


class IterateComponent(Directive):
    """
    Produce one output per value of a component.

    Attributes:
        component_name: ``host``, ``port`` or ``scheme``.
        values: Values in iteration order.
    """

    __slots__ = ("component_name", "values")

    def __init__(self, component_name: str, values: Iterable[str]) -> None:
        self._assign(component_name=component_name, values=tuple(values))


def _split_pair(text: str, error_cls: type[DirectiveError], option: str) -> tuple[str, str]:
    """Split ``component=value``; the "=" must not be the first character."""
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        raise error_cls(
            f"invalid {option} syntax: not UTF-8", DirectiveFault.MALFORMED_PAIR
        ) from None
    name, sep, value = text.partition("=")
    if not sep or not name:
        raise error_cls(f"invalid {option} syntax: {text}", DirectiveFault.MALFORMED_PAIR)
    return name, value


def encode_query_pair(text: str) -> str:
    """Percent-encode the two sides of ``name=value`` separately."""
    name, sep, value = text.partition("=")
    if not sep:
        return quote(text, safe="")
    return f"{quote(name, safe='')}={quote(value, safe='')}"


def parse_set(text: str) -> SetComponent:
    """
    Parse ``component=value`` or ``component:=value``.

    Raises:
        SetError: Malformed text, unknown component, or the ``url`` pseudo-component.
    """
    name, value = _split_pair(text, SetError, "--set")
    urlencode = True
    if name.endswith(":"):
        urlencode = False
        name = name[:-1]
    component = lookup_component(name)
    if component is None:
        raise SetError(f"Set unknown component: {text}", DirectiveFault.UNKNOWN_COMPONENT)
    if component == "url":
        raise SetError(f"Set unsupported component: {text}", DirectiveFault.UNSUPPORTED_COMPONENT)
    return SetComponent(component, value, urlencode)


def parse_append(text: str) -> AppendPath | AppendQuery:
    """
    Parse ``path=segment`` or ``query=name=value``.

    The segment, or each side of the query pair, is percent-encoded here.

    Raises:
        AppendError: Malformed text, or a component other than path or query.
    """
    name, value = _split_pair(text, AppendError, "--append")
    component = lookup_component(name)
    if component is None:
        raise AppendError(
            f"--append unsupported component: {text}", DirectiveFault.UNKNOWN_COMPONENT
        )
    if component == "path":
        return AppendPath(quote(value, safe=""))
    if component == "query":
        return AppendQuery(encode_query_pair(value))
    raise AppendError(
        f"--append unsupported component: {text}", DirectiveFault.UNSUPPORTED_COMPONENT
    )


def parse_trim(text: str) -> TrimQuery:
    """
    Parse ``query=name`` or ``query=prefix*``.

    Raises:
        TrimError: Malformed text, empty pattern, or a component other than query.
    """
    name, pattern = _split_pair(text, TrimError, "--trim")
    component = lookup_component(name)
    if component is None:
        raise TrimError(f"Unsupported trim component: {text}", DirectiveFault.UNKNOWN_COMPONENT)
    if component != "query":
        raise TrimError(
            f"Unsupported trim component: {text}", DirectiveFault.UNSUPPORTED_COMPONENT
        )
    if not pattern:
        raise TrimError(f"invalid --trim syntax: {text}", DirectiveFault.MALFORMED_PAIR)
    wildcard = pattern.endswith("*")
    if wildcard:
        pattern = pattern[:-1]
    return TrimQuery(pattern, wildcard)


def parse_iterate(text: str) -> IterateComponent:
    """
    Parse ``hosts=a b c``, ``ports=...`` or ``schemes=...``.

    Raises:
        IterateError: Unknown key or no values after "=".
    """
    for key, component in ITERABLE_COMPONENTS.items():
        prefix = f"{key}="
        if text.startswith(prefix):
            values = [v for v in text[len(prefix) :].split(" ") if v]
            if values:
                return IterateComponent(component, values)
            break
    raise IterateError(
        f"Missing arguments for iterator {text}", DirectiveFault.MISSING_ITERATE_ARGS
    )


def build_directives(
    sets: Sequence[str] = (),
    appends: Sequence[str] = (),
    trims: Sequence[str] = (),
    iterate: str | None = None,
) -> list[Directive]:
    """
    Parse directive texts into one ordered list.

    Sets come first, then appends, trims, and the iterate directive last.
    Order within each kind is preserved.

    Raises:
        DirectiveError: On the first directive that does not parse.
    """
    directives: list[Directive] = [parse_set(text) for text in sets]
    directives.extend(parse_append(text) for text in appends)
    directives.extend(parse_trim(text) for text in trims)
    if iterate is not None:
        directives.append(parse_iterate(iterate))
    return directives
