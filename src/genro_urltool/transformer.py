# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""
Batch transformer: every URL crossed with every variant.

Purpose
=======
Owns the variants, the pipeline and the renderer of one run and yields
rendered output in a fixed order::

    for url in urls:             # input order
        for variant in variants: # iterate-value order
            pipeline -> renderer -> yield text

Directives are validated and expanded when the transformer is created, so
configuration errors surface before any URL is read.

Failure Handling
================
- Base URL does not parse: warning and skip, or raise under ``verify``.
- No URL can be built for plain output: error logged, the failure is kept
  in ``failures`` and the batch continues.

Example::

    transformer = UrlTransformer(build_directives(iterate="hosts=a.com b.com"))
    list(transformer.run(["https://example.com/x"]))
    # ["https://a.com/x\\n", "https://b.com/x\\n"]
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, Sequence

from .config import ToolConfig
from .directives import Directive
from .exceptions import UrlParseError, UrlSerializeError, UrlToolError
from .pipeline import Pipeline
from .renderers import BaseRenderer, make_renderer
from .variants import Variant, expand_variants

__all__ = ["UrlTransformer"]


class UrlTransformer:
    """
    Runs a directive list over a sequence of base URLs.

    Attributes:
        config: Options of the run.
        variants: Expanded variants, in output order.
        pipeline: Pipeline shared by all runs.
        renderer: Renderer selected by the config.
        failures: Per-URL errors recorded so far.
        rendered: Number of outputs produced so far.

    Raises:
        DirectiveError: From construction, when the directives do not expand.
    """

    __slots__ = ("config", "variants", "pipeline", "renderer", "failures", "rendered", "_logger")

    def __init__(self, directives: Sequence[Directive] = (), config: ToolConfig | None = None) -> None:
        self.config = config if config is not None else ToolConfig()
        self.variants: list[Variant] = expand_variants(directives)
        self.pipeline = Pipeline(
            redirect=self.config.redirect,
            accept_space=self.config.accept_space,
            max_query_pairs=self.config.max_query_pairs,
        )
        self.renderer: BaseRenderer = make_renderer(self.config.render_request)
        self.failures: list[UrlToolError] = []
        self.rendered = 0
        self._logger = logging.getLogger("genro_urltool")

    def run(self, urls: Iterable[str] | None = None) -> Iterator[str]:
        """
        Yield rendered output for every (URL, variant) pair.

        Args:
            urls: Base URLs in order. None runs the variants once with no URL.

        Raises:
            UrlParseError: Under ``verify``, on the first base URL that does not parse.
        """
        targets: Iterable[str | None] = [None] if urls is None else urls
        for url in targets:
            for variant in self.variants:
                output = self.run_one(url, variant)
                if output is not None:
                    yield output

    def run_one(self, url: str | None, variant: Variant) -> str | None:
        """Run one variant on one URL; return the rendered text or None if skipped."""
        try:
            handle = self.pipeline.run(url, variant)
        except UrlParseError as e:
            if self.config.verify:
                raise
            self._logger.warning(f"{e.detail} [{e.url or url}]")
            return None

        try:
            text = self.renderer.render(handle)
        except UrlSerializeError as e:
            self._logger.error(f"not enough input for a URL: {e.detail}")
            self.failures.append(e)
            return None

        self.rendered += 1
        self._logger.debug(f"rendered {url or '<no url>'} ({len(variant)} directives)")
        return text
