# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""
Transformation pipeline: one variant applied to one URL.

Purpose
=======
Runs the fixed sequence of steps that turns a base URL (or nothing) and a
variant into a resolved ``UrlHandle``. The order of the steps is part of
the observable behaviour and must not change::

    1. parse           base URL text -> UrlHandle (or an empty handle)
    2. redirect        replace the URL with the redirect URL, resolving a
                       target without a scheme against the base URL
    3. set             SetComponent directives, in order
    4. append path     AppendPath directives, in order
    5. extract query   current query -> QueryPairs
    6. append query    AppendQuery directives, in order
    7. trim            TrimQuery directives, in order
    8. reassemble      QueryPairs -> query (absent when empty)

Rendering (step 9) belongs to the caller.

Failure Handling
================
- Step 1 raises ``UrlParseError``; the caller decides whether it is fatal.
- Steps 3 and 8 log collaborator failures as warnings and keep going.

Example::

    pipeline = Pipeline()
    variant = expand_variants([parse_append("path=file")])[0]
    handle = pipeline.run("https://example.com/docs/", variant)
    handle.serialize()   # "https://example.com/docs/file"
"""

from __future__ import annotations

import logging

from .datastructures import MAX_QUERY_PAIRS, QueryPairs, UrlHandle
from .exceptions import UrlError
from .variants import Variant

__all__ = ["Pipeline"]


class Pipeline:
    """
    Applies variants to URLs.

    The query pair buffer belongs to the pipeline and is reset at the
    start of every run, so pairs never leak between URLs.

    Attributes:
        redirect: URL that replaces every parsed base URL, or None.
        accept_space: Accept and encode spaces in base URLs.
        pairs: Query pair buffer of the last run.
    """

    __slots__ = ("redirect", "accept_space", "pairs", "_logger")

    def __init__(
        self,
        redirect: str | None = None,
        accept_space: bool = False,
        max_query_pairs: int = MAX_QUERY_PAIRS,
    ) -> None:
        self.redirect = redirect
        self.accept_space = accept_space
        self.pairs = QueryPairs(max_query_pairs)
        self._logger = logging.getLogger("genro_urltool.pipeline")

    def run(self, url: str | None, variant: Variant) -> UrlHandle:
        """
        Apply one variant to one base URL.

        Args:
            url: Base URL text, or None to build a URL from sets alone.
            variant: Directives to apply.

        Returns:
            The resolved handle.

        Raises:
            UrlParseError: If the base URL or the redirect URL does not parse.
        """
        handle = self._open(url)
        self._apply_sets(handle, variant)
        self._append_paths(handle, variant)

        self.pairs.reset()
        self.pairs.extend_from_query(handle.get("query"))
        for directive in variant.query_appends:
            self.pairs.add(directive.pair)
        for trim in variant.trims:
            self.pairs.mark_deleted(trim.name_pattern, trim.is_prefix_wildcard)
        self._reassemble(handle)
        return handle

    def _open(self, url: str | None) -> UrlHandle:
        if url is None:
            return UrlHandle()
        handle = UrlHandle.parse(url, guess_scheme=True, allow_space=self.accept_space)
        if self.redirect:
            handle.set("url", self.redirect)
        return handle

    def _apply_sets(self, handle: UrlHandle, variant: Variant) -> None:
        for directive in variant.sets:
            value = directive.value or None
            try:
                handle.set(directive.name, value, encode=directive.urlencode)
            except UrlError as e:
                self._logger.warning(f"{e.detail} ({directive.name})")

    def _append_paths(self, handle: UrlHandle, variant: Variant) -> None:
        for directive in variant.path_appends:
            current = handle.get("path") or "/"
            separator = "" if current.endswith("/") else "/"
            handle.set("path", f"{current}{separator}{directive.segment}", encode=False)

    def _reassemble(self, handle: UrlHandle) -> None:
        query = self.pairs.join()
        try:
            handle.set("query", query or None, encode=False)
        except UrlError as e:
            self._logger.warning(f"internal problem: {e.detail}")
