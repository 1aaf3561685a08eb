"""``sparkle-validator`` command line."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys

import httpx

from appcast import __version__
from appcast.config import ValidatorOptions, configure_logging, load_options
from appcast.document.parser import parse_document
from appcast.formatters import format_json, format_text
from appcast.remote.resolver import DnsOverHttpsResolver
from appcast.remote.verifier import RemoteVerifier
from appcast.sources import SourceError, read_source
from appcast.validator.models import ValidationResult
from appcast.validator.pipeline import merge_diagnostics, validate_document

logger = logging.getLogger(__name__)

EXIT_VALID = 0
EXIT_INVALID = 1
EXIT_FAILURE = 2


def positive_int(value: str) -> int:
    """argparse type for ``--timeout``."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}") from None
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive number of milliseconds: {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sparkle-validator",
        description="Validate Sparkle appcast.xml feeds",
    )
    parser.add_argument("source", help='File path, URL (http/https), or "-" for stdin')
    parser.add_argument(
        "-f", "--format",
        choices=("text", "json"),
        default="text",
        help="Output format (default: text)",
    )
    parser.add_argument("-s", "--strict", action="store_true", help="Treat warnings as errors")
    parser.add_argument("--no-info", action="store_true", help="Suppress informational messages")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only show errors")
    parser.add_argument(
        "-c", "--check-urls",
        action="store_true",
        help="Check that URLs exist and sizes match",
    )
    parser.add_argument(
        "--timeout",
        type=positive_int,
        default=None,
        metavar="MS",
        help="Timeout for URL checks in milliseconds (default: 10000)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


async def run(args: argparse.Namespace, options: ValidatorOptions) -> ValidationResult:
    """Read the source, validate it and, if asked, check its URLs."""
    remote_options = options.remote_options(args.timeout)
    timeout = httpx.Timeout(remote_options.timeout_seconds)
    async with httpx.AsyncClient(timeout=timeout) as client:
        xml = await read_source(args.source, client, options.user_agent)
        parsed = parse_document(xml)
        result = validate_document(parsed.document, parsed.diagnostics)

        if args.check_urls and parsed.document.root is not None:
            resolver = DnsOverHttpsResolver(client, options.doh_endpoint)
            verifier = RemoteVerifier(client, remote_options, resolver)
            result = merge_diagnostics(result, await verifier.verify(parsed.document))
    return result


def _use_color(args: argparse.Namespace) -> bool:
    return not args.no_color and sys.stdout.isatty() and not os.environ.get("NO_COLOR")


def exit_code(result: ValidationResult, strict: bool) -> int:
    if strict and result.warning_count > 0:
        return EXIT_INVALID
    return EXIT_VALID if result.valid else EXIT_INVALID


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    options = load_options()
    verbose = args.verbose or options.dev_mode
    configure_logging(logging.DEBUG if verbose else logging.WARNING)

    try:
        result = asyncio.run(run(args, options))
    except SourceError as e:
        sys.stderr.write(f"Error: {e}\n")
        return EXIT_FAILURE

    if args.format == "json":
        output = format_json(result, args.source, quiet=args.quiet, no_info=args.no_info)
    else:
        output = format_text(
            result,
            args.source,
            color=_use_color(args),
            quiet=args.quiet,
            no_info=args.no_info,
        )
    sys.stdout.write(output + "\n")
    return exit_code(result, args.strict)


if __name__ == "__main__":
    sys.exit(main())
