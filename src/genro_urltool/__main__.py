# Copyright 2025 Softwell S.r.l.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     https://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
genro-urltool CLI entry point.

Usage:
    genro-urltool https://example.com --set port=8080
    genro-urltool --url-file urls.txt --trim "query=utm_*"
    genro-urltool https://example.com/ --iterate "schemes=http https" --json
    genro-urltool --set host=example.com --set scheme=ftp --get "{scheme} {host}"

Exit status is 0 on success, otherwise the exit code of the first error
(see ``genro_urltool.exceptions``).
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import IO, Iterator, NoReturn

from . import __version__
from .config import ToolConfig
from .directives import build_directives
from .exceptions import (
    EXIT_MEM,
    DirectiveFault,
    FlagError,
    IterateError,
    MissingArgumentError,
    OutOfMemoryError,
    UrlFileError,
    UrlToolError,
)
from .transformer import UrlTransformer
from .types import COMPONENTS

PROGNAME = "genro-urltool"


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser raising tool errors instead of exiting with status 2."""

    def error(self, message: str) -> NoReturn:
        if "expected one argument" in message:
            raise MissingArgumentError(message)
        raise FlagError(message)


def build_parser() -> argparse.ArgumentParser:
    """Create the command line parser."""
    p = _ArgumentParser(
        prog=PROGNAME,
        description="Parse, transform and output URLs.",
        epilog=(
            "URL components: "
            + ", ".join(COMPONENTS)
            + ". An option value starting with '-' must be joined to its option,"
            " as in --get=-{host}."
        ),
        allow_abbrev=False,
    )
    p.add_argument("urls", nargs="*", metavar="URL", help="URL to work with")
    p.add_argument("--url", action="append", metavar="URL", help="URL to work with")
    p.add_argument("-f", "--url-file", action="append", metavar="FILE", help="read URLs from file or stdin (-)")
    p.add_argument("-a", "--append", action="append", metavar="COMPONENT=DATA", help="append data to component")
    p.add_argument("-s", "--set", action="append", metavar="COMPONENT=DATA", help="set component content")
    p.add_argument("--trim", action="append", metavar="COMPONENT=WHAT", help="trim component")
    p.add_argument("--iterate", action="append", metavar="COMPONENTS=LIST", help="iterate over component values")
    p.add_argument("-g", "--get", action="append", metavar="TEMPLATE", help="output component(s)")
    p.add_argument("--redirect", action="append", metavar="URL", help="redirect to this")
    p.add_argument("--json", action="store_true", default=None, help="output URL as JSON")
    p.add_argument("--verify", action="store_true", default=None, help="return error on (first) bad URL")
    p.add_argument("--accept-space", action="store_true", default=None, help="give in to this URL abuse")
    p.add_argument("-v", "--version", action="version", version=f"{PROGNAME} {__version__}")
    return p


def _singleton(values: list[str] | None, option: str) -> str | None:
    if not values:
        return None
    if len(values) > 1:
        if option == "--iterate":
            raise IterateError(f"only one {option} is supported", DirectiveFault.DUPLICATE_COMPONENT)
        raise FlagError(f"only one {option} is supported")
    return values[0]


def _is_utf8(text: str) -> bool:
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def _open_url_file(path: str) -> IO[str]:
    if path == "-":
        if hasattr(sys.stdin, "reconfigure"):
            sys.stdin.reconfigure(errors="surrogateescape")
        return sys.stdin
    try:
        return open(path, encoding="utf-8", errors="surrogateescape")
    except OSError as e:
        raise UrlFileError(f"--url-file {path} not found") from e


def _read_urls(stream: IO[str]) -> Iterator[str]:
    """Yield one URL per non-empty line, CRLF or LF terminated."""
    for line in stream:
        url = line.rstrip("\n")
        if url.endswith("\r"):
            url = url[:-1]
        if url:
            yield url


def _report(error: UrlToolError) -> None:
    print(f"{PROGNAME} error: {error.detail}", file=sys.stderr)
    print(f"{PROGNAME} error: Try {PROGNAME} -h for help", file=sys.stderr)


def _install_log_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(f"{PROGNAME} note: %(message)s"))
    logger = logging.getLogger("genro_urltool")
    logger.addHandler(handler)
    if logger.level == logging.NOTSET:
        logger.setLevel(logging.WARNING)
    return handler


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    handler = _install_log_handler()
    stream: IO[str] | None = None
    try:
        args = parser.parse_intermixed_args(argv)
        template = _singleton(args.get, "--get")
        if template is not None and not _is_utf8(template):
            raise FlagError("--get template is not valid UTF-8")
        redirect = _singleton(args.redirect, "--redirect")
        iterate = _singleton(args.iterate, "--iterate")
        url_file = _singleton(args.url_file, "--url-file")

        directives = build_directives(
            sets=args.set or [],
            appends=args.append or [],
            trims=args.trim or [],
            iterate=iterate,
        )
        config = ToolConfig(
            verify=args.verify,
            accept_space=args.accept_space,
            json=args.json,
            template=template,
            redirect=redirect,
        )
        transformer = UrlTransformer(directives, config)

        urls: Iterator[str] | list[str] | None
        if url_file is not None:
            stream = _open_url_file(url_file)
            urls = _read_urls(stream)
        else:
            urls = [*(args.url or []), *args.urls] or None

        out = sys.stdout
        if config.json:
            out.write("[\n")
        for chunk in transformer.run(urls):
            out.write(chunk)
        if config.json:
            out.write("\n]\n")
        out.flush()
    except UrlToolError as e:
        _report(e)
        return e.exit_code
    except MemoryError:
        _report(OutOfMemoryError())
        return EXIT_MEM
    finally:
        if stream is not None and stream is not sys.stdin:
            stream.close()
        logging.getLogger("genro_urltool").removeHandler(handler)

    if transformer.failures:
        return transformer.failures[0].exit_code
    return 0


if __name__ == "__main__":
    sys.exit(main())
