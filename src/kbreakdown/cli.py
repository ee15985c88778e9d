"""Command-line interface for kbreakdown."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from kbreakdown.pipeline import run


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="kbreakdown",
        description="Break Kotlin view classes down into a JSON IR for test generation.",
    )
    parser.add_argument(
        "project_dir",
        type=Path,
        help="Path to the project to analyze",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Output JSON file path (default: kbreakdown.json in the project)",
    )
    parser.add_argument(
        "-j",
        "--jobs",
        type=int,
        default=1,
        help="Number of files to break down in parallel",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose (debug) output",
    )

    args = parser.parse_args(argv)
    if args.jobs < 1:
        parser.error("--jobs must be at least 1")

    logging.basicConfig(level=logging.WARNING, format="%(message)s")
    if args.verbose:
        logging.getLogger("kbreakdown").setLevel(logging.DEBUG)

    run(args.project_dir, output=args.output, jobs=args.jobs)
