# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Shared type definitions for genro-urltool.

Purpose
=======
This module defines the fixed URL component table, the output format
selector and the scheme default ports used throughout the package.

Component Table
===============
Component names are matched case-insensitively on input and used verbatim
on output. The order of the table is the order of JSON keys::

    url, scheme, user, password, options, host, port, path, query,
    fragment, zoneid

``url`` is the whole-URL pseudo-component. It is valid as base-URL input
and whole-URL output, never as a ``set``/``trim``/``append`` target.

Definition::

    COMPONENTS: tuple[str, ...]
    SETTABLE_COMPONENTS: tuple[str, ...]
    ITERABLE_COMPONENTS: dict[str, str]     # "hosts" -> "host"
    DEFAULT_PORTS: dict[str, int]

    def lookup_component(name: str) -> str | None

    class RenderFormat(Enum):
        PLAIN, TEMPLATE, JSON

    class RenderRequest:
        format: RenderFormat
        template: str | None
        url_decode_default: bool
"""

from __future__ import annotations

from enum import Enum

__all__ = [
    "COMPONENTS",
    "DEFAULT_PORTS",
    "ITERABLE_COMPONENTS",
    "SETTABLE_COMPONENTS",
    "RenderFormat",
    "RenderRequest",
    "lookup_component",
]

COMPONENTS: tuple[str, ...] = (
    "url",
    "scheme",
    "user",
    "password",
    "options",
    "host",
    "port",
    "path",
    "query",
    "fragment",
    "zoneid",
)

SETTABLE_COMPONENTS: tuple[str, ...] = COMPONENTS[1:]

# plural iterate keys -> singular component names
ITERABLE_COMPONENTS: dict[str, str] = {
    "hosts": "host",
    "ports": "port",
    "schemes": "scheme",
}

DEFAULT_PORTS: dict[str, int] = {
    "dict": 2628,
    "ftp": 21,
    "ftps": 990,
    "gopher": 70,
    "gophers": 70,
    "http": 80,
    "https": 443,
    "imap": 143,
    "imaps": 993,
    "ldap": 389,
    "ldaps": 636,
    "mqtt": 1883,
    "pop3": 110,
    "pop3s": 995,
    "rtsp": 554,
    "scp": 22,
    "sftp": 22,
    "smb": 445,
    "smbs": 445,
    "smtp": 25,
    "smtps": 465,
    "telnet": 23,
    "tftp": 69,
    "ws": 80,
    "wss": 443,
}


def lookup_component(name: str) -> str | None:
    """Return the canonical component name for ``name``, or None if unknown."""
    lowered = name.lower()
    if lowered in COMPONENTS:
        return lowered
    return None


class RenderFormat(Enum):
    """Output shape for a resolved URL."""

    PLAIN = "plain"
    TEMPLATE = "template"
    JSON = "json"


class RenderRequest:
    """
    Output selection for a batch run.

    Attributes:
        format: Selected renderer.
        template: Format string, only meaningful for ``RenderFormat.TEMPLATE``.
        url_decode_default: Whether ``{name}`` placeholders decode by default.
    """

    __slots__ = ("format", "template", "url_decode_default")

    def __init__(
        self,
        format: RenderFormat = RenderFormat.PLAIN,
        template: str | None = None,
        url_decode_default: bool = True,
    ) -> None:
        if format is RenderFormat.TEMPLATE and template is None:
            raise ValueError("template format requires a template string")
        self.format = format
        self.template = template
        self.url_decode_default = url_decode_default

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RenderRequest):
            return False
        return (
            self.format is other.format
            and self.template == other.template
            and self.url_decode_default == other.url_decode_default
        )

    def __repr__(self) -> str:
        return f"RenderRequest(format={self.format.value!r}, template={self.template!r})"
