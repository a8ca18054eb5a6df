# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""
Data structures for URL transformation.

Mapping from text to genro-urltool classes::

    Text                                   genro-urltool Classes
    ─────────────────                      ──────────────────
    "https://example.com/path?q=1"         →  UrlHandle (mutable, by component)
    "a=1&b=2"                              →  QueryPairs [QueryPair, QueryPair]

Public Exports
==============
::

    from genro_urltool.datastructures import (
        MAX_QUERY_PAIRS,
        QueryPair,
        QueryPairs,
        UrlHandle,
    )

Modules
=======
- ``url``: URL handle with component get/set/serialize
- ``query_pairs``: ordered query pairs with split, trim and join
"""

from .query_pairs import MAX_QUERY_PAIRS, QueryPair, QueryPairs
from .url import UrlHandle

__all__ = [
    "MAX_QUERY_PAIRS",
    "QueryPair",
    "QueryPairs",
    "UrlHandle",
]
