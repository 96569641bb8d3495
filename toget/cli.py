"""Command-line interface for toget."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Iterable, Optional

from rich.console import Console

from . import __version__
from .config import load_environment
from .exceptions import TogetError
from .logging_utils import configure_logging
from .request import RequestBuilder
from .transport import default_transport

METHODS = ("GET", "POST", "PUT", "DELETE")


def _pair(separator: str):
    def parse(value: str) -> tuple[str, str]:
        key, sep, rest = value.partition(separator)
        if not sep or not key.strip():
            raise argparse.ArgumentTypeError(f"Expected KEY{separator}VALUE, got {value!r}")
        return key.strip(), rest.strip()

    return parse


def _method(value: str) -> str:
    method = value.upper()
    if method not in METHODS:
        raise argparse.ArgumentTypeError(f"Method must be one of {', '.join(METHODS)}")
    return method


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="toget",
        description="Build and send a single HTTP request.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("method", type=_method, help="HTTP method (GET, POST, PUT, DELETE)")
    parser.add_argument("base", help="Base URL, e.g. http://localhost:3000")
    parser.add_argument("path", nargs="?", default="/", help="Path template, e.g. /user/:id")
    parser.add_argument("--param", action="append", type=_pair("="), default=[], help="Path parameter NAME=VALUE")
    parser.add_argument("--query", action="append", type=_pair("="), default=[], help="Query parameter KEY=VALUE")
    parser.add_argument("--header", action="append", type=_pair(":"), default=[], help="Request header 'Name: value'")
    parser.add_argument("--body", help="Request body (parsed as JSON when --json is set)")
    parser.add_argument("--json", action="store_true", help="Send and parse JSON")
    parser.add_argument("--gzip", action="store_true", help="Request compressed content")
    parser.add_argument("--timeout", type=int, help="Timeout in milliseconds")
    parser.add_argument("--dry-run", action="store_true", help="Print the request options without sending")
    parser.add_argument("--log-json", action="store_true", help="Emit structured JSON logs to the log file")
    parser.add_argument("--log-file", type=Path, help="Write logs to the specified path")

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("--verbose", action="store_true", help="Enable debug logging")
    verbosity.add_argument("--quiet", action="store_true", help="Reduce logging output")
    return parser


def parse_args(argv: Optional[Iterable[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(None if argv is None else list(argv))


def configure_cli_logging(args: argparse.Namespace) -> None:
    level = logging.INFO
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    configure_logging(level=level, json_logs=args.log_json, logfile=args.log_file)


def build_request(args: argparse.Namespace) -> RequestBuilder:
    builder = RequestBuilder(args.base)
    verb = getattr(builder, args.method.lower())
    verb(args.path, dict(args.param) if args.param else None)

    if args.query:
        builder.query(args.query)
    if args.header:
        builder.headers(dict(args.header))
    if args.json:
        builder.json()
    if args.gzip:
        builder.gzip()
    if args.timeout is not None:
        builder.timeout(args.timeout)
    if args.body is not None:
        body: object = args.body
        if args.json:
            try:
                body = json.loads(args.body)
            except ValueError:
                body = args.body
        builder.body(body)
    return builder


def _render_body(body: object) -> str:
    if isinstance(body, (dict, list)):
        return json.dumps(body, indent=2, sort_keys=True)
    if isinstance(body, bytes):
        return f"<{len(body)} bytes>"
    return "" if body is None else str(body)


def main(argv: Optional[Iterable[str]] = None) -> int:
    load_environment()
    args = parse_args(argv)

    configure_cli_logging(args)
    logger = logging.getLogger("toget.cli")
    console = Console(highlight=False)

    try:
        builder = build_request(args)
        if args.dry_run:
            print(json.dumps(builder.to_options(), indent=2, sort_keys=True))
            return 0
        response = builder.upon(default_transport()).result()
    except TogetError as exc:
        logger.error("Request failed: %s", exc)
        return 1

    console.print(f"{response.method} {response.url} -> {response.status_code}")
    rendered = _render_body(response.body)
    if rendered:
        console.print(rendered, markup=False)

    if response.error is not False:
        logger.error("Server answered with an error status %s", response.status_code)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
