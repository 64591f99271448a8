"""Command line interface for ocrpdf."""

from __future__ import annotations

import argparse
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from ocrpdf.cli.exit_codes import (
    EXIT_INTERRUPTED,
    EXIT_INVALID_USAGE,
    EXIT_PIPELINE_ERROR,
    EXIT_SUCCESS,
)
from ocrpdf.cli.sink import write_output
from ocrpdf.config import MAX_PAGES, ConfigError, load_config
from ocrpdf.core.errors import FilterSpecError, OcrPdfError
from ocrpdf.core.logging import configure_logging, get_logger
from ocrpdf.core.streaming import CLIStreamHandler
from ocrpdf.filters import build_filters
from ocrpdf.pipeline import PipelineExecutor
from ocrpdf.plugins.extractors import get_extractor_for, supported_suffixes

LOGGER = get_logger(__name__)


def _get_version() -> str:
    try:
        return version("ocrpdf")
    except PackageNotFoundError:
        # Fallback for source checkouts without installed metadata.
        from ocrpdf import __version__

        return __version__


def page_number(value: str) -> int:
    """argparse type for --first / --last."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid page number \"{value}\"") from None
    if number <= 0 or number > MAX_PAGES:
        raise argparse.ArgumentTypeError(f"invalid page number \"{number}\": impossible value")
    return number


def worker_count(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid worker count \"{value}\"") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"invalid worker count \"{number}\"")
    return number


def filter_file(value: str) -> str:
    """argparse type for --filter: must name an existing regular file."""
    path = Path(value)
    if not path.exists():
        raise argparse.ArgumentTypeError(f"filter file \"{value}\" does not exist")
    if not path.is_file():
        raise argparse.ArgumentTypeError(f"\"{value}\" is not a file")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ocrpdf",
        description="Extract text from a scanned pdf or djvu document FILE.",
    )

    parser.add_argument(
        "file",
        nargs="?",
        metavar="FILE",
        help="Input document (.pdf, .djvu).",
    )
    parser.add_argument(
        "-f", "--first",
        type=page_number,
        metavar="N",
        help="First page number (default: 1).",
    )
    parser.add_argument(
        "-l", "--last",
        type=page_number,
        metavar="N",
        help="Last page number (default: last page of the document).",
    )
    parser.add_argument(
        "-F", "--filter",
        type=filter_file,
        action="append",
        dest="filters",
        metavar="FILE",
        help="Filter specification file (can be specified multiple times).",
    )
    parser.add_argument(
        "-L", "--language",
        metavar="LANG",
        help="Document language (default: 'eng').",
    )
    parser.add_argument(
        "-o", "--output",
        metavar="FILE",
        help="Output file name (default: stdout).",
    )
    parser.add_argument(
        "-j", "--workers",
        type=worker_count,
        metavar="N",
        help="Number of pages recognized in parallel (default: number of CPUs).",
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        type=Path,
        help="Path to config file (default: .ocrpdf.yml in the current directory).",
    )
    parser.add_argument(
        "--progress",
        action="store_true",
        help="Print per-page progress to stderr.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (info-level) logging.",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Reduce logging output to errors only.",
    )
    parser.add_argument(
        "-v", "--version",
        action="store_true",
        help="Output version information and exit.",
    )

    return parser


def cli_args_to_config_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Convert CLI arguments to a config override dict.

    Only options given on the command line are included, so config file
    values survive otherwise.
    """
    overrides: Dict[str, Any] = {}

    if args.first is not None:
        overrides["first_page"] = args.first
    if args.last is not None:
        overrides["last_page"] = args.last
    if args.language:
        overrides["language"] = args.language
    if args.filters:
        overrides["filters"] = list(args.filters)
    if args.output:
        overrides["output"] = args.output
    if args.workers is not None:
        overrides["workers"] = args.workers

    return overrides


def main(argv: Optional[Iterable[str]] = None) -> int:
    """CLI entrypoint.

    Returns an exit code suitable for use as a console script.
    """
    parser = build_parser()

    argv_list = list(argv) if argv is not None else None
    if argv_list is not None and ("--help" in argv_list or "-h" in argv_list):
        parser.print_help()
        return EXIT_SUCCESS

    try:
        args = parser.parse_args(argv_list)
    except SystemExit as e:
        # argparse has already printed the usage error
        return EXIT_SUCCESS if e.code == 0 else EXIT_INVALID_USAGE

    configure_logging(debug=args.debug, verbose=args.verbose, quiet=args.quiet)

    if args.version:
        print(f"ocrpdf {_get_version()}")
        return EXIT_SUCCESS

    if not args.file:
        parser.print_usage(sys.stderr)
        LOGGER.error("Input file is not specified")
        return EXIT_INVALID_USAGE

    input_path = Path(args.file)
    if not input_path.is_file():
        LOGGER.error(f"Input file not found: {input_path}")
        return EXIT_INVALID_USAGE

    try:
        config = load_config(
            project_root=Path.cwd(),
            cli_config_path=args.config,
            cli_overrides=cli_args_to_config_overrides(args),
        )
        line_filter, text_filter = build_filters(Path(f) for f in config.filters)
    except (ConfigError, FilterSpecError) as e:
        LOGGER.error(str(e))
        return EXIT_INVALID_USAGE

    extractor = get_extractor_for(input_path, config)
    if extractor is None:
        LOGGER.error(
            f"Unsupported input file type \"{input_path.suffix}\" "
            f"(expected one of: {', '.join(supported_suffixes())})"
        )
        return EXIT_INVALID_USAGE

    executor = PipelineExecutor(
        config,
        line_filter=line_filter,
        text_filter=text_filter,
        stream_handler=CLIStreamHandler() if args.progress else None,
        interrupt_exit_code=EXIT_INTERRUPTED,
    )

    try:
        text = executor.execute(input_path, extractor)
    except OcrPdfError as e:
        LOGGER.error(str(e))
        return EXIT_PIPELINE_ERROR

    try:
        write_output(text, config.output)
    except OSError as e:
        LOGGER.error(str(e))
        return EXIT_PIPELINE_ERROR

    return EXIT_SUCCESS


__all__ = ["build_parser", "main"]
