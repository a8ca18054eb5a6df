# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""
Renderers: resolved URL handle -> output text.

Renderers
=========
PlainRenderer
    The URL with the default port left out, plus a newline. The default.

TemplateRenderer
    A format string with component placeholders::

        {host}      decoded host
        {:path}     raw (still percent-encoded) path
        {{  }}      a literal "{" or "}"
        \\n \\t \\r   newline, tab, carriage return
        \\x         any other escape: both characters as-is

    Absent components render as nothing. A "{" without a closing "}" is
    dropped and scanning carries on. A newline ends every rendered line.

JsonRenderer
    One object per URL, decoded values, only the components present::

          {
            "url": "https://example.com/",
            "scheme": "https",
            ...
          }

    Objects after the first are prefixed with ",\\n"; the caller wraps the
    sequence in "[\\n" ... "\\n]\\n".

Definition::

    class BaseRenderer(ABC):
        def render(self, handle: UrlHandle) -> str

    def make_renderer(request: RenderRequest) -> BaseRenderer
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum

import orjson

from .datastructures import UrlHandle
from .exceptions import UrlError
from .types import COMPONENTS, RenderFormat, RenderRequest, lookup_component

__all__ = [
    "BaseRenderer",
    "JsonRenderer",
    "PlainRenderer",
    "TemplateRenderer",
    "make_renderer",
]

logger = logging.getLogger("genro_urltool.render")

_ESCAPES = {"n": "\n", "r": "\r", "t": "\t"}


class BaseRenderer(ABC):
    """Abstract base class for renderers."""

    @abstractmethod
    def render(self, handle: UrlHandle) -> str:
        """
        Render one resolved URL.

        Raises:
            UrlSerializeError: If the renderer needs a full URL and none can be built.
        """


class PlainRenderer(BaseRenderer):
    """Full URL, default port suppressed."""

    def render(self, handle: UrlHandle) -> str:
        return handle.serialize(no_default_port=True) + "\n"


class _ScanState(Enum):
    LITERAL = "literal"
    PLACEHOLDER = "placeholder"
    ESCAPE = "escape"


class TemplateRenderer(BaseRenderer):
    """
    Format-string renderer.

    Scans the template left to right with three states: copying literal
    text, reading a placeholder, and completing a backslash escape.

    Example:
        >>> url = UrlHandle.parse("https://example.com/x")
        >>> TemplateRenderer("{scheme}://{host}{path}").render(url)
        'https://example.com/x\\n'
    """

    __slots__ = ("template", "url_decode_default")

    def __init__(self, template: str, url_decode_default: bool = True) -> None:
        self.template = template
        self.url_decode_default = url_decode_default

    def render(self, handle: UrlHandle) -> str:
        text = self.template
        size = len(text)
        out: list[str] = []
        state = _ScanState.LITERAL
        pos = 0
        while pos < size:
            char = text[pos]
            if state is _ScanState.LITERAL:
                if char == "{":
                    if text.startswith("{{", pos):
                        out.append("{")
                        pos += 2
                    else:
                        state = _ScanState.PLACEHOLDER
                        pos += 1
                elif char == "}" and text.startswith("}}", pos):
                    out.append("}")
                    pos += 2
                elif char == "\\" and pos + 1 < size:
                    state = _ScanState.ESCAPE
                    pos += 1
                else:
                    out.append(char)
                    pos += 1
            elif state is _ScanState.PLACEHOLDER:
                end = text.find("}", pos)
                if end >= 0:
                    out.append(self._lookup(handle, text[pos:end]))
                    pos = end + 1
                state = _ScanState.LITERAL
            else:
                out.append(_ESCAPES.get(char, "\\" + char))
                pos += 1
                state = _ScanState.LITERAL
        out.append("\n")
        return "".join(out)

    def _lookup(self, handle: UrlHandle, name: str) -> str:
        decode = self.url_decode_default
        if name.startswith(":"):
            decode = False
            name = name[1:]
        component = lookup_component(name)
        if component is None:
            return ""
        try:
            value = handle.get(component, decode=decode, default_port=True)
        except UrlError as e:
            logger.warning(f"{e.detail} ({component})")
            return ""
        return value or ""


class JsonRenderer(BaseRenderer):
    """
    JSON object renderer.

    Keeps a count of rendered objects to place the ",\\n" separators.
    """

    __slots__ = ("count",)

    def __init__(self) -> None:
        self.count = 0

    def render(self, handle: UrlHandle) -> str:
        fields: list[str] = []
        for component in COMPONENTS:
            try:
                value = handle.get(component, decode=True, default_port=True)
            except UrlError as e:
                logger.warning(f"{e.detail} ({component})")
                continue
            if value is None:
                continue
            encoded = orjson.dumps(value).decode("utf-8")
            fields.append(f'    "{component}": {encoded}')
        prefix = ",\n" if self.count else ""
        self.count += 1
        return prefix + "  {\n" + ",\n".join(fields) + "\n  }"


def make_renderer(request: RenderRequest) -> BaseRenderer:
    """Create the renderer selected by a RenderRequest."""
    if request.format is RenderFormat.JSON:
        return JsonRenderer()
    if request.format is RenderFormat.TEMPLATE:
        return TemplateRenderer(request.template or "", request.url_decode_default)
    return PlainRenderer()
