"""Command-line entry point: fill in and repair Javadoc across a source tree."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from pydantic import ValidationError

from .config import load_config
from .errors import TraversalError
from .processor import process_directory

logger = logging.getLogger(__name__)

LOG_FORMAT = "[javadoc-autofill] %(levelname)s %(message)s"

EXIT_OK = 0
EXIT_FILES_FAILED = 1
EXIT_USAGE = 2

_TOGGLES = (
    ("add-class-javadoc", "type, enum and enum constant comments"),
    ("add-method-javadoc", "descriptions for undocumented methods"),
    ("add-param-javadoc", "@param tag reconciliation"),
    ("add-return-javadoc", "@return tag reconciliation"),
    ("add-throws-javadoc", "@throws tag reconciliation"),
    ("include-private-methods", "processing of private methods"),
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="javadoc-autofill",
        description="Synthesize missing Javadoc and reconcile existing tags with method signatures.",
    )
    parser.add_argument(
        "source_dir",
        nargs="?",
        type=Path,
        default=None,
        help="Root directory to scan for .java files.",
    )
    parser.add_argument("--config", type=Path, default=None, help="JSON config file.")
    parser.add_argument(
        "--exclude",
        dest="exclude_patterns",
        action="append",
        default=None,
        metavar="REGEX",
        help="Skip files whose path fully matches REGEX (repeatable).",
    )
    for flag, what in _TOGGLES:
        parser.add_argument(
            f"--{flag}",
            dest=flag.replace("-", "_"),
            action=argparse.BooleanOptionalAction,
            default=None,
            help=f"Enable or disable {what}.",
        )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=LOG_FORMAT,
    )

    overrides = {flag.replace("-", "_"): getattr(args, flag.replace("-", "_")) for flag, _ in _TOGGLES}
    overrides["source_dir"] = args.source_dir
    overrides["exclude_patterns"] = args.exclude_patterns

    try:
        config = load_config(args.config, **overrides)
    except (OSError, ValueError, ValidationError) as e:
        logger.error("Invalid configuration: %s", e)
        return EXIT_USAGE

    try:
        summary = process_directory(config)
    except TraversalError as e:
        logger.error("%s", e)
        return EXIT_USAGE

    if not summary.ok:
        logger.error("%d file(s) failed", summary.files_failed)
        return EXIT_FILES_FAILED
    return EXIT_OK


def run() -> None:
    sys.exit(main())
