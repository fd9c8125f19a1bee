#!/usr/bin/env python3
"""Classify User-Agent strings from the command line."""

from __future__ import annotations

import argparse
import sys
from contextlib import nullcontext
from pathlib import Path
from typing import Iterable, Sequence, TextIO

import duckdb

from .batch import classify_many
from .config import OUTPUT_FORMATS, Settings, load_settings
from .duckdb_udf import connect, enrich_tsv, register_functions
from .models import ParseResult
from .serialization import to_json
from .utils.progress import ProgressTracker, configure_logging
from .utils.sources import STDIN, count_lines, iter_user_agents, open_source
from .utils.user_agent import UserAgent


def tsv_cell(value: str | bool | None) -> str:
    """Render a flat column; booleans as DuckDB writes them, missing as ``null``."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


def format_record(
    result: ParseResult, output_format: str, include_source: bool = False
) -> str:
    """Render one result as a single output line (without newline)."""
    if output_format == "json":
        return to_json(result, include_source=include_source)
    if output_format == "text":
        return str(result)
    if output_format == "short":
        return result.short_name()
    if output_format == "tsv":
        return "\t".join(map(tsv_cell, UserAgent(result.source, result).values()))
    raise ValueError(f"Unknown output format: {output_format}")


def write_records(
    user_agents: Iterable[str],
    fo: TextIO,
    *,
    output_format: str,
    include_source: bool,
    workers: int | None,
    tracker: ProgressTracker,
) -> int:
    """Classify ``user_agents`` and write one line per input to ``fo``."""
    if output_format == "tsv":
        fo.write("\t".join(UserAgent.COLUMNS) + "\n")

    written = 0
    for result in classify_many(user_agents, workers=workers):
        fo.write(format_record(result, output_format, include_source) + "\n")
        written += 1
        tracker.advance()
    return written


def run_parse(args: argparse.Namespace, settings: Settings) -> None:
    verbose = args.verbose or settings.verbose
    output_format = args.format or settings.output_format
    include_source = args.include_source or settings.include_source
    workers = args.workers if args.workers is not None else settings.workers

    source: Path | None = args.input
    if source is None and not args.user_agents:
        source = STDIN
    total = count_lines(source) if source is not None else len(args.user_agents)

    with ProgressTracker(
        total, enabled=args.progress or settings.progress, verbose=verbose
    ) as tracker:
        input_context = (
            open_source(source) if source is not None else nullcontext(None)
        )
        output_context = (
            args.output.open("w", encoding="utf-8")
            if args.output is not None
            else nullcontext(sys.stdout)
        )
        with input_context as fi, output_context as fo:
            user_agents = (
                iter_user_agents(fi) if fi is not None else iter(args.user_agents)
            )
            written = write_records(
                user_agents,
                fo,
                output_format=output_format,
                include_source=include_source,
                workers=workers,
                tracker=tracker,
            )
        tracker.success(f"Classified {written} user agents")


def run_enrich(args: argparse.Namespace, settings: Settings) -> None:
    configure_logging(args.verbose or settings.verbose)
    conn = connect(settings)
    try:
        register_functions(conn)
        enrich_tsv(
            conn, args.input, args.output, column=args.column or settings.column
        )
    finally:
        conn.close()


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="ua-classifier", description=__doc__)
    subparsers = parser.add_subparsers(dest="command", required=True)

    parse_cmd = subparsers.add_parser(
        "parse", help="Classify User-Agent strings, one output line per input"
    )
    parse_cmd.add_argument(
        "user_agents", nargs="*", help="User-Agent strings (default: read input)"
    )
    parse_cmd.add_argument(
        "-i",
        "--input",
        type=Path,
        help="File with one User-Agent per line (.bz2 supported, '-' for stdin)",
    )
    parse_cmd.add_argument(
        "-o", "--output", type=Path, help="Output file (default: stdout)"
    )
    parse_cmd.add_argument("-f", "--format", choices=OUTPUT_FORMATS)
    parse_cmd.add_argument(
        "--include-source",
        action="store_true",
        help="Include the input string in JSON output",
    )
    parse_cmd.add_argument("--workers", type=int, help="Worker threads")
    parse_cmd.add_argument("--progress", action="store_true", help="Show progress")
    parse_cmd.add_argument("-v", "--verbose", action="store_true")
    parse_cmd.set_defaults(handler=run_parse)

    enrich_cmd = subparsers.add_parser(
        "enrich", help="Append parsed columns to a tab-separated log via DuckDB"
    )
    enrich_cmd.add_argument("input", type=Path, help="TSV file with a header row")
    enrich_cmd.add_argument("output", type=Path, help="Enriched TSV file")
    enrich_cmd.add_argument("--column", help="User-Agent column (default: useragent)")
    enrich_cmd.add_argument("-v", "--verbose", action="store_true")
    enrich_cmd.set_defaults(handler=run_enrich)

    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> None:
    try:
        args = parse_args(argv)
        settings = load_settings()
        args.handler(args, settings)
    except (FileNotFoundError, ValueError, RuntimeError, duckdb.Error) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        sys.exit(130)


if __name__ == "__main__":
    main()
