# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""
Mutable URL handle with component get/set.

Purpose
=======
Parses a URL string and gives read/write access to its components by name.
Wraps ``urllib.parse.urlsplit`` for the coarse split and handles userinfo,
IPv6 zone ids, ports and dot segments itself.

URL Parsing Schema::

    imap://user;auth=x:pass@[fe80::1%25eth0]:143/path/to?query=1&b=2#section
    ────   ──── ────── ────  ──────── ────  ───  ────────  ─────────  ───────
    scheme user options pass   host  zoneid port   path      query    fragment

Components are stored in their encoded (raw) form. ``None`` means absent.

Definition::

    class UrlHandle:
        __slots__ = ("_parts",)

        @classmethod
        def parse(cls, text: str, guess_scheme: bool = True,
                  allow_space: bool = False) -> UrlHandle
        def get(self, component: str, decode: bool = False,
                default_port: bool = False) -> str | None
        def set(self, component: str, value: str | None, encode: bool = True) -> None
        def serialize(self, no_default_port: bool = True) -> str

Example::

    from genro_urltool.datastructures import UrlHandle

    url = UrlHandle.parse("https://example.com:443/a/../b?x=1")
    url.get("path")                 # "/b"
    url.get("port")                 # "443"
    url.set("host", "example.org")
    url.serialize()                 # "https://example.org/b?x=1"

Design Notes
============
- Uses ``__slots__`` like the other datastructures
- ``path`` is never absent: it reads as "/" when nothing is stored
- Empty query and fragment are treated as absent
- Any syntactically valid scheme is accepted; unknown schemes have no
  default port
- Setting ``url`` re-parses and replaces every component; a reference
  without a scheme is first resolved against the current URL
- Decoded query values also turn "+" into a space
- Text that cannot be encoded as UTF-8 is rejected

References
==========
- URL Syntax (RFC 3986): https://tools.ietf.org/html/rfc3986
- urllib.parse: https://docs.python.org/3/library/urllib.parse.html
"""

from __future__ import annotations

import re
from urllib.parse import quote, quote_plus, unquote, unquote_plus, urljoin, urlsplit

from ..exceptions import UrlParseError, UrlSerializeError, UrlSetError
from ..types import DEFAULT_PORTS, SETTABLE_COMPONENTS

__all__ = ["UrlHandle"]

_SCHEME_PREFIX_RE = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]*)://")
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")
_IPV6_RE = re.compile(r"^[0-9A-Fa-f:.]+$")
_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f]")

_BAD_HOST_CHARS = frozenset(" /\\?#@<>\"`{}|^[]")

_GUESSED_SCHEMES = (
    ("ftp.", "ftp"),
    ("dict.", "dict"),
    ("ldap.", "ldap"),
    ("imap.", "imap"),
    ("smtp.", "smtp"),
    ("pop3.", "pop3"),
)

# schemes whose userinfo may carry ";options"
_OPTIONS_SCHEMES = frozenset({"imap", "imaps", "pop3", "pop3s", "smtp", "smtps"})

# characters left as-is when encoding on set
_ENCODE_SAFE = {
    "user": "",
    "password": "",
    "options": "",
    "path": "/",
    "fragment": "/?",
    "zoneid": "",
}

_BAD_PORT = "Port number was not a decimal number between 0 and 65535"


def _guess_scheme(text: str) -> str:
    lowered = text.lower()
    for prefix, scheme in _GUESSED_SCHEMES:
        if lowered.startswith(prefix):
            return scheme
    return "http"


def _encode_spaces(text: str) -> str:
    """Encode spaces: ``+`` inside the query, ``%20`` elsewhere."""
    head, hash_sep, fragment = text.partition("#")
    base, query_sep, query = head.partition("?")
    return (
        base.replace(" ", "%20")
        + query_sep
        + query.replace(" ", "+")
        + hash_sep
        + fragment.replace(" ", "%20")
    )


def _is_encodable(text: str) -> bool:
    """False when the text holds lone surrogates (undecodable input bytes)."""
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def _printable(text: str) -> str:
    return text.encode("utf-8", "backslashreplace").decode("utf-8")


def _normalize_port(text: str) -> str | None:
    if not (text.isascii() and text.isdigit()) or int(text) > 65535:
        return None
    return str(int(text))


def _remove_dot_segments(path: str) -> str:
    """Resolve "." and ".." segments of an absolute path (RFC 3986 5.2.4)."""
    segments = path.split("/")
    resolved: list[str] = []
    for segment in segments[1:]:
        if segment == "..":
            if resolved:
                resolved.pop()
        elif segment != ".":
            resolved.append(segment)
    if segments[-1] in (".", ".."):
        resolved.append("")
    return "/" + "/".join(resolved)


class UrlHandle:
    """
    Mutable URL with named component access.

    A handle starts empty (every component absent) or from ``parse()``.
    Values are read with ``get()``, written with ``set()`` and turned back
    into a URL string with ``serialize()``.

    Example:
        >>> url = UrlHandle.parse("example.com/docs")
        >>> url.get("scheme")
        'http'
        >>> url.set("port", "8080")
        >>> url.serialize()
        'http://example.com:8080/docs'
    """

    __slots__ = ("_parts",)

    def __init__(self) -> None:
        """Create an empty handle."""
        self._parts: dict[str, str | None] = dict.fromkeys(SETTABLE_COMPONENTS)

    @classmethod
    def parse(
        cls,
        text: str,
        guess_scheme: bool = True,
        allow_space: bool = False,
    ) -> UrlHandle:
        """
        Parse a URL string into a new handle.

        Args:
            text: The URL string to parse.
            guess_scheme: Guess a scheme from the host name when the text has none.
            allow_space: Accept spaces and percent-encode them instead of failing.

        Returns:
            A new UrlHandle.

        Raises:
            UrlParseError: If the text is not a usable URL.
        """
        handle = cls()
        handle._parts = cls._split(text, guess_scheme, allow_space)
        return handle

    @classmethod
    def _split(cls, text: str, guess_scheme: bool, allow_space: bool) -> dict[str, str | None]:
        original = text
        if not _is_encodable(text):
            raise UrlParseError("Malformed input to a URL function", url=_printable(text))
        if _CONTROL_RE.search(text):
            raise UrlParseError("Malformed input to a URL function", url=original)
        if " " in text:
            if not allow_space:
                raise UrlParseError("Malformed input to a URL function", url=original)
            text = _encode_spaces(text)
        if not text:
            raise UrlParseError("Malformed input to a URL function", url=original)

        if _SCHEME_PREFIX_RE.match(text) is None:
            if not guess_scheme:
                raise UrlParseError("No scheme part in the URL", url=original)
            if text.startswith("//"):
                text = text[2:]
            text = f"{_guess_scheme(text)}://{text}"

        try:
            split = urlsplit(text)
        except ValueError as e:
            raise UrlParseError(f"Malformed input to a URL function: {e}", url=original) from e

        parts: dict[str, str | None] = dict.fromkeys(SETTABLE_COMPONENTS)
        scheme = split.scheme.lower()
        parts["scheme"] = scheme

        userinfo, at, hostport = split.netloc.rpartition("@")
        if at:
            user, colon, password = userinfo.partition(":")
            if scheme in _OPTIONS_SCHEMES and ";" in user:
                user, _, options = user.partition(";")
                parts["options"] = options or None
            parts["user"] = user or None
            parts["password"] = password if colon else None

        host, port, zoneid = cls._split_hostport(hostport, original)
        if not host and scheme != "file":
            raise UrlParseError("No host part in the URL", url=original)
        parts["host"] = host or None
        parts["port"] = port
        parts["zoneid"] = zoneid

        path = split.path
        if not path.startswith("/"):
            path = "/" + path
        parts["path"] = _remove_dot_segments(path)
        parts["query"] = split.query or None
        parts["fragment"] = split.fragment or None
        return parts

    @staticmethod
    def _split_hostport(hostport: str, original: str) -> tuple[str, str | None, str | None]:
        zoneid = None
        if hostport.startswith("["):
            end = hostport.find("]")
            if end < 0:
                raise UrlParseError("Bad IPv6 address", url=original)
            address = hostport[1:end]
            rest = hostport[end + 1 :]
            if "%25" in address:
                address, _, zoneid = address.partition("%25")
            elif "%" in address:
                address, _, zoneid = address.partition("%")
            if not _IPV6_RE.match(address) or (rest and not rest.startswith(":")):
                raise UrlParseError("Bad IPv6 address", url=original)
            host = f"[{address}]"
            port_text = rest[1:] if rest else ""
        else:
            host, _, port_text = hostport.partition(":")
            if any(ch in _BAD_HOST_CHARS for ch in host):
                raise UrlParseError("Bad hostname", url=original)

        port = None
        if port_text:
            port = _normalize_port(port_text)
            if port is None:
                raise UrlParseError(_BAD_PORT, url=original)
        return host, port, zoneid or None

    def get(
        self,
        component: str,
        decode: bool = False,
        default_port: bool = False,
    ) -> str | None:
        """
        Return a component value, or None when absent.

        Args:
            component: Component name from the fixed table.
            decode: Percent-decode the value.
            default_port: For ``port``, report the scheme's default port
                when none is stored.

        Raises:
            UrlSerializeError: For ``url`` when no URL can be built.
            KeyError: If the component name is unknown.
        """
        if component == "url":
            return self.serialize()
        value = self._parts[component]
        if component == "port":
            if value is None and default_port:
                known = DEFAULT_PORTS.get(self._parts["scheme"] or "")
                return str(known) if known is not None else None
            return value
        if component == "path" and not value:
            value = "/"
        if value is None:
            return None
        if not decode:
            return value
        return unquote_plus(value) if component == "query" else unquote(value)

    def set(self, component: str, value: str | None, encode: bool = True) -> None:
        """
        Set or clear a component.

        Args:
            component: Component name from the fixed table.
            value: New value. None clears the component.
            encode: Percent-encode the value before storing it.

        Raises:
            UrlSetError: If the value is not valid for the component.
            UrlParseError: For ``url`` when the new URL does not parse.
        """
        if component == "url":
            if value is None:
                self._parts = dict.fromkeys(SETTABLE_COMPONENTS)
            else:
                self._parts = self._split(self._resolve(value), True, False)
            return
        if component not in self._parts:
            raise UrlSetError(f"Unknown component: {component}")
        if value is None:
            self._parts[component] = None
            return
        if not _is_encodable(value):
            raise UrlSetError("Malformed input to a URL function", url=_printable(value))

        if component == "scheme":
            if not _SCHEME_RE.match(value):
                raise UrlSetError("Bad scheme", url=value)
            value = value.lower()
        elif component == "port":
            port = _normalize_port(value)
            if port is None:
                raise UrlSetError(_BAD_PORT, url=value)
            value = port
        elif component == "host":
            value = self._check_host(value)
        elif component == "query":
            if encode:
                value = quote_plus(value, safe="=&")
        elif encode:
            value = quote(value, safe=_ENCODE_SAFE[component])

        if component == "path" and not value.startswith("/"):
            value = "/" + value
        self._parts[component] = value

    def _resolve(self, reference: str) -> str:
        """Resolve a reference without a scheme against the current URL, when there is one."""
        if _SCHEME_PREFIX_RE.match(reference) or self._parts["scheme"] is None:
            return reference
        try:
            base = self.serialize()
        except UrlSerializeError:
            return reference
        return urljoin(base, reference)

    @staticmethod
    def _check_host(value: str) -> str:
        if value.startswith("[") and value.endswith("]"):
            if not _IPV6_RE.match(value[1:-1]):
                raise UrlSetError("Bad IPv6 address", url=value)
            return value
        if ":" in value:
            if not _IPV6_RE.match(value):
                raise UrlSetError("Bad hostname", url=value)
            return f"[{value}]"
        if not value or any(ch in _BAD_HOST_CHARS for ch in value) or _CONTROL_RE.search(value):
            raise UrlSetError("Bad hostname", url=value)
        return value

    def serialize(self, no_default_port: bool = True) -> str:
        """
        Build the URL string.

        Args:
            no_default_port: Leave out the port when it is the scheme's default.

        Raises:
            UrlSerializeError: If the scheme, or the host of a non-file URL,
                is missing.
        """
        parts = self._parts
        scheme = parts["scheme"]
        if scheme is None:
            raise UrlSerializeError("No scheme part in the URL")
        host = parts["host"]
        if host is None and scheme != "file":
            raise UrlSerializeError("No host part in the URL")

        chunks = [scheme, "://"]
        user, password, options = parts["user"], parts["password"], parts["options"]
        if user is not None or password is not None or options is not None:
            chunks.append(user or "")
            if options is not None:
                chunks.append(f";{options}")
            if password is not None:
                chunks.append(f":{password}")
            chunks.append("@")
        if host:
            if parts["zoneid"] and host.startswith("["):
                host = f"{host[:-1]}%25{parts['zoneid']}]"
            chunks.append(host)
        port = parts["port"]
        if port is not None and not (no_default_port and DEFAULT_PORTS.get(scheme) == int(port)):
            chunks.append(f":{port}")
        chunks.append(parts["path"] or "/")
        if parts["query"] is not None:
            chunks.append(f"?{parts['query']}")
        if parts["fragment"] is not None:
            chunks.append(f"#{parts['fragment']}")
        return "".join(chunks)

    def __str__(self) -> str:
        """Return the serialized URL, or an empty string if none can be built."""
        try:
            return self.serialize()
        except UrlSerializeError:
            return ""

    def __repr__(self) -> str:
        """Return string representation for debugging."""
        present = {k: v for k, v in self._parts.items() if v is not None}
        return f"UrlHandle({present!r})"

    def __eq__(self, other: object) -> bool:
        """
        Compare with another handle or a URL string.

        Handles compare by component; strings compare with the serialized URL.
        """
        if isinstance(other, UrlHandle):
            return self._parts == other._parts
        if isinstance(other, str):
            return str(self) == other
        return False
