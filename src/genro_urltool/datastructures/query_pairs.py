# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""
Ordered query pairs with trimming support.

Purpose
=======
A query string is handled as an ordered sequence of ``name[=value]`` pairs
so that single pairs can be appended or trimmed and the string reassembled
without disturbing the others. Pairs keep their raw (already encoded) text;
nothing is decoded here.

Parsing Schema::

    Query string: "a=1&utm_source=x&&b"
                        ↓ split on "&"
    ["a=1", "utm_source=x", "", "b"]
                        ↓ mark_deleted("utm_", wildcard)
    ["a=1", <deleted>, "", "b"]
                        ↓ join (skip deleted and empty pairs)
    "a=1&b"

Matching Rules::

    +------------------+------------------------------------------+
    | Pattern          | Matches pair name when                   |
    +------------------+------------------------------------------+
    | "utm_source"     | same length, equal ignoring case         |
    | "utm_*"          | name starts with "utm_", ignoring case   |
    | "*"              | every name                               |
    +------------------+------------------------------------------+

Definition::

    MAX_QUERY_PAIRS = 1000

    class QueryPair:
        __slots__ = ("raw_text", "deleted")
        name -> str
        def matches(self, pattern: str, is_wildcard: bool) -> bool

    class QueryPairs:
        __slots__ = ("_pairs", "max_pairs", "dropped")
        def reset(self) -> None
        def add(self, raw_text: str) -> QueryPair | None
        def extend_from_query(self, query: str | None) -> None
        def mark_deleted(self, pattern: str, is_wildcard: bool) -> int
        def join(self) -> str

    def split(query: str | None, max_pairs: int = MAX_QUERY_PAIRS) -> QueryPairs
    def mark_deleted(pairs: QueryPairs, pattern: str, is_wildcard: bool) -> None
    def join(pairs: Iterable[QueryPair]) -> str

Design Notes
============
- Capacity is bounded by ``max_pairs``; pairs beyond it are dropped with a
  warning, earlier pairs are never touched
- ``reset()`` clears the sequence so one instance serves many runs
- Deleted pairs are never revived by a later trim
- ``join(split(q)) == q`` for every query without empty segments
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator

__all__ = ["MAX_QUERY_PAIRS", "QueryPair", "QueryPairs", "join", "mark_deleted", "split"]

MAX_QUERY_PAIRS = 1000

logger = logging.getLogger("genro_urltool.query")


class QueryPair:
    """
    One ``name=value`` (or bare ``name``) segment of a query string.

    Attributes:
        raw_text: Encoded text as found in, or appended to, the query.
        deleted: True once a trim pattern matched this pair.
    """

    __slots__ = ("raw_text", "deleted")

    def __init__(self, raw_text: str, deleted: bool = False) -> None:
        self.raw_text = raw_text
        self.deleted = deleted

    @property
    def name(self) -> str:
        """Text before the first "=", or the whole text."""
        return self.raw_text.partition("=")[0]

    def matches(self, pattern: str, is_wildcard: bool) -> bool:
        """Check the pair name against a trim pattern, ignoring case."""
        name = self.name
        if is_wildcard:
            return len(name) >= len(pattern) and name[: len(pattern)].lower() == pattern.lower()
        return len(name) == len(pattern) and name.lower() == pattern.lower()

    def __eq__(self, other: object) -> bool:
        if isinstance(other, QueryPair):
            return self.raw_text == other.raw_text and self.deleted == other.deleted
        return False

    def __repr__(self) -> str:
        flag = ", deleted=True" if self.deleted else ""
        return f"QueryPair({self.raw_text!r}{flag})"


class QueryPairs:
    """
    Bounded, ordered sequence of query pairs.

    Owned by one pipeline and reset between runs.

    Example:
        >>> pairs = split("a=1&utm_source=x&b=2")
        >>> pairs.mark_deleted("utm_", is_wildcard=True)
        1
        >>> pairs.join()
        'a=1&b=2'
    """

    __slots__ = ("_pairs", "max_pairs", "dropped")

    def __init__(self, max_pairs: int = MAX_QUERY_PAIRS) -> None:
        self._pairs: list[QueryPair] = []
        self.max_pairs = max_pairs
        self.dropped = 0

    def reset(self) -> None:
        """Forget every pair, keeping the capacity."""
        self._pairs.clear()
        self.dropped = 0

    def add(self, raw_text: str) -> QueryPair | None:
        """
        Append a pair at the end.

        Returns:
            The new pair, or None if the capacity is exhausted.
        """
        if len(self._pairs) >= self.max_pairs:
            if not self.dropped:
                logger.warning(f"too many query pairs, keeping the first {self.max_pairs}")
            self.dropped += 1
            return None
        pair = QueryPair(raw_text)
        self._pairs.append(pair)
        return pair

    def extend_from_query(self, query: str | None) -> None:
        """Split a query string on "&" and append its pairs, empty ones included."""
        if not query:
            return
        for text in query.split("&"):
            self.add(text)

    def mark_deleted(self, pattern: str, is_wildcard: bool) -> int:
        """
        Mark every live pair whose name matches the pattern as deleted.

        Returns:
            Number of pairs newly marked.
        """
        count = 0
        for pair in self._pairs:
            if not pair.deleted and pair.matches(pattern, is_wildcard):
                pair.deleted = True
                count += 1
        return count

    def join(self) -> str:
        """Reassemble live, non-empty pairs with "&"."""
        return join(self._pairs)

    def __iter__(self) -> Iterator[QueryPair]:
        return iter(self._pairs)

    def __len__(self) -> int:
        return len(self._pairs)

    def __getitem__(self, index: int) -> QueryPair:
        return self._pairs[index]

    def __repr__(self) -> str:
        return f"QueryPairs({self._pairs!r})"


def split(query: str | None, max_pairs: int = MAX_QUERY_PAIRS) -> QueryPairs:
    """Split a query string into a new QueryPairs."""
    pairs = QueryPairs(max_pairs)
    pairs.extend_from_query(query)
    return pairs


def mark_deleted(pairs: QueryPairs, pattern: str, is_wildcard: bool) -> None:
    """Mark matching pairs of ``pairs`` as deleted, in place."""
    pairs.mark_deleted(pattern, is_wildcard)


def join(pairs: Iterable[QueryPair]) -> str:
    """Join the live, non-empty pairs with "&"."""
    return "&".join(p.raw_text for p in pairs if not p.deleted and p.raw_text)
