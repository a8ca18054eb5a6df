# Copyright 2025 Softwell S.r.l.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Exception classes for genro-urltool.

Every exception carries the process exit code the command-line tool uses
when that failure ends a run, and a human readable detail message.

Module Structure
----------------
Two severities share one base class:

1. ConfigError and subclasses - fatal. Raised while directives and options
   are validated, before any URL is processed.
2. UrlError and subclasses - per URL. Raised by the URL handle; the
   transformer reports them and moves on to the next URL, except parse
   failures under ``verify`` which stop the batch.

Exit Codes
----------
    1  - URL file not found
    2  - --append mistake
    3  - option misses its argument
    4  - flag mistake (unknown flag, duplicate singleton)
    5  - --set problem
    6  - out of memory
    7  - no URL could be built from the components
    8  - --trim problem
    9  - URL does not parse (fatal under --verify)
    10 - iterate arguments missing or repeated

Example:
    >>> raise SetError("Set unknown component: colour=red", DirectiveFault.UNKNOWN_COMPONENT)
    >>> try:
    ...     handle = UrlHandle.parse("http://[::1")
    ... except UrlParseError as e:
    ...     logger.warning(f"{e.detail} [{e.url}]")
"""

from __future__ import annotations

from enum import Enum

__all__ = [
    "EXIT_APPEND",
    "EXIT_ARG",
    "EXIT_BADURL",
    "EXIT_FILE",
    "EXIT_FLAG",
    "EXIT_ITER",
    "EXIT_MEM",
    "EXIT_SET",
    "EXIT_TRIM",
    "EXIT_URL",
    "AppendError",
    "ConfigError",
    "DirectiveError",
    "DirectiveFault",
    "FlagError",
    "IterateError",
    "MissingArgumentError",
    "OutOfMemoryError",
    "SetError",
    "TrimError",
    "UrlError",
    "UrlFileError",
    "UrlParseError",
    "UrlSerializeError",
    "UrlSetError",
    "UrlToolError",
]

EXIT_FILE = 1
EXIT_APPEND = 2
EXIT_ARG = 3
EXIT_FLAG = 4
EXIT_SET = 5
EXIT_MEM = 6
EXIT_URL = 7
EXIT_TRIM = 8
EXIT_BADURL = 9
EXIT_ITER = 10


class DirectiveFault(Enum):
    """Why a directive was rejected."""

    UNKNOWN_COMPONENT = "unknown_component"
    MALFORMED_PAIR = "malformed_pair"
    UNSUPPORTED_COMPONENT = "unsupported_component"
    DUPLICATE_COMPONENT = "duplicate_component"
    MISSING_ITERATE_ARGS = "missing_iterate_args"


class UrlToolError(Exception):
    """
    Base exception with exit code and detail.

    Attributes:
        exit_code: Process exit code for this failure class.
        detail: Error detail message.
    """

    def __init__(self, exit_code: int, detail: str = "") -> None:
        self.exit_code = exit_code
        self.detail = detail
        super().__init__(detail)

    def __repr__(self) -> str:
        """Return detailed string representation."""
        return f"{type(self).__name__}(exit_code={self.exit_code}, detail={self.detail!r})"


class ConfigError(UrlToolError):
    """Fatal configuration error, raised before any URL is processed."""


class UrlFileError(ConfigError):
    """The URL file could not be opened."""

    def __init__(self, detail: str = "URL file not found") -> None:
        super().__init__(EXIT_FILE, detail)


class MissingArgumentError(ConfigError):
    """A command line option misses its argument."""

    def __init__(self, detail: str = "Missing argument") -> None:
        super().__init__(EXIT_ARG, detail)


class FlagError(ConfigError):
    """Unknown flag or a singleton flag given twice."""

    def __init__(self, detail: str = "Flag error") -> None:
        super().__init__(EXIT_FLAG, detail)


class DirectiveError(ConfigError):
    """
    A directive could not be parsed or validated.

    Attributes:
        fault: What was wrong with the directive text.
    """

    default_exit_code = EXIT_FLAG

    def __init__(
        self,
        detail: str = "",
        fault: DirectiveFault = DirectiveFault.MALFORMED_PAIR,
    ) -> None:
        self.fault = fault
        super().__init__(self.default_exit_code, detail)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(fault={self.fault.value!r}, detail={self.detail!r})"


class AppendError(DirectiveError):
    """An --append directive names a component that cannot be appended to."""

    default_exit_code = EXIT_APPEND


class SetError(DirectiveError):
    """A --set directive is malformed, unknown, or repeated."""

    default_exit_code = EXIT_SET


class TrimError(DirectiveError):
    """A --trim directive is malformed or targets an unsupported component."""

    default_exit_code = EXIT_TRIM


class IterateError(DirectiveError):
    """An --iterate directive misses its arguments or is given twice."""

    default_exit_code = EXIT_ITER


class OutOfMemoryError(UrlToolError):
    """Raised when a run cannot allocate what it needs."""

    def __init__(self, detail: str = "out of memory") -> None:
        super().__init__(EXIT_MEM, detail)


class UrlError(UrlToolError):
    """
    Per-URL failure reported by the URL handle.

    Attributes:
        url: The URL text involved, if any.
    """

    default_exit_code = EXIT_URL

    def __init__(self, detail: str = "", url: str | None = None) -> None:
        self.url = url
        super().__init__(self.default_exit_code, detail)


class UrlParseError(UrlError):
    """The URL text does not parse."""

    default_exit_code = EXIT_BADURL


class UrlSetError(UrlError):
    """A component value was rejected by the URL handle."""

    default_exit_code = EXIT_SET


class UrlSerializeError(UrlError):
    """Not enough components to produce a URL."""

    default_exit_code = EXIT_URL
