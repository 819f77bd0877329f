"""Command line interface for datatreediff."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from rich.console import Console

from . import __version__
from .engine import DataTreeDiffEngine
from .exceptions import DataTreeDiffError
from .logging_utils import configure_logging
from .models import Config, DiffCategory, DiffCollection
from .storage import load_config, read_saved_context, write_saved_context
from .tables import render_tables, save_html

logger = logging.getLogger(__name__)

CATEGORY_FLAGS = {
    DiffCategory.KEY: "key_diffs",
    DiffCategory.TYPE: "type_diffs",
    DiffCategory.VALUE: "value_diffs",
    DiffCategory.ARRAY: "array_diffs",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="datatreediff",
        description="Find the differences between two JSON or YAML documents",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  datatreediff -c a.json b.json -k -t -v -a
  datatreediff -c a.json b.json -k -v -o -w session.json
  datatreediff -r session.json -k
  datatreediff -c a.yaml b.yaml -v -i '$..updatedAt' --html report.html
        """
    )

    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "-c", "--check-files",
        nargs=2,
        metavar=("FILE_A", "FILE_B"),
        help="The two documents to compare"
    )
    source.add_argument(
        "-r", "--read-from-file",
        metavar="SESSION",
        help="Render a session saved by a previous run instead of comparing again"
    )

    parser.add_argument("-k", "--key-diffs", action="store_true", help="Check for key differences")
    parser.add_argument("-t", "--type-diffs", action="store_true", help="Check for type differences")
    parser.add_argument("-v", "--value-diffs", action="store_true", help="Check for value differences")
    parser.add_argument("-a", "--array-diffs", action="store_true", help="Check for array differences")

    parser.add_argument(
        "-o", "--array-same-order",
        action="store_true",
        help="Compare arrays index by index; differences are then reported "
             "as value differences with indexes instead of array differences"
    )
    parser.add_argument(
        "-i", "--ignore",
        action="append",
        default=[],
        metavar="JSONPATH",
        help="JSONPath of nodes to leave out of the comparison (repeatable)"
    )
    parser.add_argument("--max-depth", type=int, help="Maximum nesting depth to compare")
    parser.add_argument("--config", metavar="FILE", help="YAML run configuration")

    parser.add_argument("-w", "--write-to-file", metavar="SESSION",
                        help="Save the results to a JSON file instead of rendering tables")
    parser.add_argument("--html", metavar="FILE", help="Also write the rendered tables to an HTML file")

    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    parser.add_argument("--log-file", help="Also write log output to this file")
    parser.add_argument(
        "--trace",
        action="store_true",
        help="Prefix log lines with timestamps and logger names"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    return parser


def _requested_categories(args: argparse.Namespace) -> set[DiffCategory]:
    return {category for category, flag in CATEGORY_FLAGS.items() if getattr(args, flag)}


def _build_config(args: argparse.Namespace, parser: argparse.ArgumentParser) -> Config:
    config = load_config(args.config) if args.config else Config()

    requested = _requested_categories(args)
    if requested:
        config = config.with_overrides(
            check_for_key_diffs=DiffCategory.KEY in requested,
            check_for_type_diffs=DiffCategory.TYPE in requested,
            check_for_value_diffs=DiffCategory.VALUE in requested,
            check_for_array_diffs=DiffCategory.ARRAY in requested,
        )
    if not config.enabled_categories():
        parser.error("at least one of -k, -t, -v or -a is required")

    if args.max_depth is not None and args.max_depth < 1:
        parser.error("--max-depth must be a positive integer")

    return config.with_overrides(
        array_same_order=True if args.array_same_order else None,
        max_depth=args.max_depth,
        ignore_paths=list(config.ignore_paths) + list(args.ignore) if args.ignore else None,
    )


def _render(collection: DiffCollection, context, html_path: Optional[str]):
    console = Console(record=bool(html_path))
    render_tables(collection, context, console)
    if html_path:
        save_html(console, html_path)


def run_compare(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    config = _build_config(args, parser)
    path_a, path_b = args.check_files

    collection, context = DataTreeDiffEngine.compare_files(path_a, path_b, config)

    if args.write_to_file:
        write_saved_context(args.write_to_file, collection, context)
    else:
        _render(collection, context, args.html)

    return 0


def run_saved(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    if args.write_to_file:
        parser.error("-w cannot be combined with -r")

    saved = read_saved_context(args.read_from_file)
    context = saved.config.to_context()
    collection = saved.to_collection()

    # Without category flags every saved category is shown
    requested = _requested_categories(args)
    if requested:
        for category, flag in CATEGORY_FLAGS.items():
            if category not in requested:
                setattr(collection, flag, None)

    _render(collection, context, args.html)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.log_level, args.log_file, trace_mode=args.trace)

    try:
        if args.read_from_file:
            return run_saved(args, parser)
        return run_compare(args, parser)
    except DataTreeDiffError as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
