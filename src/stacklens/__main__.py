"""Command line entry point for stacklens.

Reads a stack trace (plain traceback text, or a JSON error record with
``message`` and ``stack`` fields) from a file or stdin, parses it and
prints the report as JSON on stdout. It handles:
- Configuration loading (YAML file and STACKLENS_* environment)
- Logging setup
- Command line overrides of the parser configuration
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any

import structlog

from stacklens._version import __version__

log = structlog.get_logger()


def setup_logging(debug: bool = False, log_format: str = "console") -> None:
    """Configure structured logging.

    Args:
        debug: Enable debug logging if True
        log_format: Output format ("json" or "console")
    """
    from stacklens.utils.logging import LogFormat, LogLevel, configure_logging

    level = LogLevel.DEBUG if debug else LogLevel.WARNING
    configure_logging(level=level, log_format=LogFormat(log_format.lower()))


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Returns:
        Parsed argument namespace
    """
    parser = argparse.ArgumentParser(
        prog="stacklens",
        description="Parse a stack trace into a structured error report with source context",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "input",
        nargs="?",
        type=Path,
        help="File holding the stack trace or JSON error record (default: stdin)",
    )

    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help="Path to a YAML configuration file",
    )

    parser.add_argument(
        "--offset",
        type=int,
        help="Number of leading frames to drop",
    )

    parser.add_argument(
        "--window-size",
        type=int,
        help="Number of source lines to attach to each frame",
    )

    parser.add_argument(
        "--source-url",
        help="Fetch frame sources from this source server instead of the filesystem",
    )

    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="Give up parsing after this many seconds (default: 30)",
    )

    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    parser.add_argument(
        "--format",
        choices=["json", "console"],
        default="console",
        help="Log output format (default: console)",
    )

    return parser.parse_args(argv)


def read_error_input(text: str) -> Any:
    """Turn command line input into a value to parse.

    JSON input is used as-is: an object with ``message`` and ``stack`` is
    an error record, anything else an opaque thrown value. Other text is
    treated as a stack trace and wrapped into an error record.
    """
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    from stacklens.core.stack_parser import parse_exception_line

    name, message = parse_exception_line(text)
    return {"name": name or "Error", "message": message, "stack": text}


async def run(args: argparse.Namespace) -> int:
    """Parse the input and print the report.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    from stacklens.config import (
        ParserConfig,
        RemoteSourceConfig,
        StacklensConfig,
        load_config,
        validate_config,
    )
    from stacklens.core.parser import ErrorParser
    from stacklens.utils.async_helpers import ParseTimeoutError, StacklensError, with_timeout

    try:
        config = load_config(args.config) if args.config else StacklensConfig()

        if args.config and not args.debug:
            from stacklens.utils.logging import configure_logging

            configure_logging(level=config.logging.level, log_format=config.logging.format)

        overrides: dict[str, Any] = {}
        if args.offset is not None:
            overrides["offset"] = args.offset
        if args.window_size is not None:
            overrides["window_size"] = args.window_size
        if overrides:
            config.parser = ParserConfig.model_validate(
                {**config.parser.model_dump(), **overrides}
            )
        if args.source_url:
            config.remote = RemoteSourceConfig.model_validate(
                {**config.remote.model_dump(), "enabled": True, "base_url": args.source_url}
            )
        validate_config(config)
    except FileNotFoundError as e:
        log.error("configuration_file_not_found", error=str(e))
        return 1
    except (ValueError, StacklensError) as e:
        log.error("configuration_invalid", error=str(e))
        return 1

    try:
        text = args.input.read_text(encoding="utf-8") if args.input else sys.stdin.read()
    except OSError as e:
        log.error("input_unreadable", path=str(args.input), error=str(e))
        return 1

    parser = ErrorParser.from_config(config)

    try:
        report = await with_timeout(
            parser.parse(read_error_input(text)),
            args.timeout,
            f"Parsing did not finish within {args.timeout}s",
        )
    except ParseTimeoutError as e:
        log.error("parse_timeout", error=str(e))
        return 2

    print(json.dumps(report.to_dict(), indent=2))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    setup_logging(debug=args.debug, log_format=args.format)

    try:
        return asyncio.run(run(args))
    except KeyboardInterrupt:
        log.info("interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
