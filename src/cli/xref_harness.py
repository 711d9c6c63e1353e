# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Command line entry point for cross-referencing Java source trees."""

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import TextIO

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from xref.config import (
    DEFAULT_INCLUDES,
    NOTICE,
    ConfigError,
    ExternalReferenceConfig,
    XrefConfig,
)
from xref.emitter import EmissionError
from xref.pipeline import RunSummary, run_xref

logger = logging.getLogger(__name__)


class ValidationError(RuntimeError):
    """Represent user input validation failure."""


def configure_logging(level: int = logging.INFO) -> None:
    """Configure application logging with Rich handler.

    Args:
        level: Logging severity threshold.
    """
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI parser.

    Returns:
        Configured argument parser instance.
    """
    parser = argparse.ArgumentParser(prog="xref")
    parser.add_argument(
        "--source",
        action="append",
        required=True,
        help="Source root to cross-reference; repeat for several roots.",
    )
    parser.add_argument("--dest", required=True, help="Output directory.")
    parser.add_argument("--input-encoding", default="utf-8", help="Source encoding.")
    parser.add_argument("--output-encoding", default="utf-8", help="Page encoding.")
    parser.add_argument(
        "--include",
        action="append",
        help="Gitignore-style include pattern; defaults to **/*.java.",
    )
    parser.add_argument(
        "--exclude", action="append", default=[], help="Gitignore-style exclude pattern."
    )
    parser.add_argument("--header-file", help="File with header markup.")
    parser.add_argument("--footer-file", help="File with footer markup.")
    parser.add_argument("--no-header", action="store_true", help="Omit page headers.")
    parser.add_argument("--no-footer", action="store_true", help="Omit page footers.")
    parser.add_argument("--revision", help="Revision label shown on every page.")
    parser.add_argument(
        "--javadoc-dir",
        help="External javadoc root (directory or URL) for imported types.",
    )
    parser.add_argument("--window-title", default="Source Cross Reference")
    parser.add_argument("--doc-title", default="Source Cross Reference")
    parser.add_argument("--bottom", default="", help="Markup at the bottom of index pages.")
    parser.add_argument("--workers", type=int, default=4, help="Emission worker threads.")
    parser.add_argument(
        "--fail-fast",
        action="store_true",
        help="Abort on the first file failure instead of skipping the file.",
    )
    parser.add_argument(
        "--format",
        choices=("table", "json"),
        default="table",
        help="Run summary output format.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser


def run(argv: list[str], stdout: TextIO, stderr: TextIO) -> int:
    """Run the cross-reference command.

    Args:
        argv: CLI arguments.
        stdout: Standard output stream.
        stderr: Standard error stream.

    Returns:
        Exit code.
    """
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit:
        logger.warning(f"Argument parsing failed (argv={argv})")
        return 2
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        config = build_config(args)
    except (ValidationError, ConfigError) as exc:
        logger.warning(f"Validation failed (error={exc})")
        stderr.write(f"{exc}\n")
        return 2

    try:
        summary = run_xref(config)
    except ConfigError as exc:
        logger.warning(f"Validation failed (error={exc})")
        stderr.write(f"{exc}\n")
        return 2
    except EmissionError as exc:
        logger.warning(f"Run aborted (error={exc})")
        stderr.write(f"Run aborted: {exc}\n")
        return 1
    except OSError as exc:
        logger.warning(f"Failed writing index pages (error={exc})")
        stderr.write(f"Failed writing index pages: {exc}\n")
        return 1

    _write_failures(summary=summary, stderr=stderr)
    if args.format == "json":
        _write_json(summary=summary, stdout=stdout)
    else:
        _write_table(summary=summary, stdout=stdout)
    return 0


def build_config(args: argparse.Namespace) -> XrefConfig:
    """Translate parsed arguments into a run configuration.

    Args:
        args: Parsed CLI arguments.

    Returns:
        Validated run configuration.

    Raises:
        ValidationError: If paths or markup files are unusable.
        ConfigError: If a configuration value is invalid.
    """
    source_dirs = tuple(Path(source).resolve() for source in args.source)
    for source_dir in source_dirs:
        if not source_dir.is_dir():
            raise ValidationError(f"Source directory does not exist: {source_dir}")
    destination = Path(args.dest).resolve()
    if destination.exists() and not destination.is_dir():
        raise ValidationError(f"Destination must be a directory: {destination}")
    for source_dir in source_dirs:
        if destination == source_dir or source_dir in destination.parents:
            raise ValidationError("Destination must not be inside a source directory")

    external = ExternalReferenceConfig(
        enabled=args.javadoc_dir is not None,
        base_directory=args.javadoc_dir,
    )
    return XrefConfig(
        source_dirs=source_dirs,
        destination=destination,
        input_encoding=args.input_encoding,
        output_encoding=args.output_encoding,
        includes=tuple(args.include) if args.include else DEFAULT_INCLUDES,
        excludes=tuple(args.exclude),
        header=_read_markup(args.header_file, default=""),
        footer=_read_markup(args.footer_file, default=NOTICE),
        show_header=not args.no_header,
        show_footer=not args.no_footer,
        revision=args.revision,
        external=external,
        window_title=args.window_title,
        doc_title=args.doc_title,
        bottom=args.bottom,
        max_workers=args.workers,
        fail_fast=args.fail_fast,
    )


def _read_markup(path: str | None, default: str) -> str:
    """Read header or footer markup from a file.

    Raises:
        ValidationError: If the file cannot be read.
    """
    if path is None:
        return default
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ValidationError(f"Cannot read markup file {path}: {exc}") from exc


def _write_failures(summary: RunSummary, stderr: TextIO) -> None:
    for failure in summary.failures:
        stderr.write(f"file_error: {failure.source_path}: {failure.message}\n")


def _write_json(summary: RunSummary, stdout: TextIO) -> None:
    """Write the run summary as JSON."""
    payload = asdict(summary)
    console = Console(file=stdout, force_terminal=False, color_system="truecolor")
    console.print(
        json.dumps(payload, indent=2, sort_keys=True, default=str),
        markup=False,
        highlight=False,
        soft_wrap=True,
    )


def _write_table(summary: RunSummary, stdout: TextIO) -> None:
    """Write the run summary and diagnostics as Rich tables."""
    console = Console(file=stdout, force_terminal=False, color_system="truecolor")
    console.print(
        f"status={summary.status} files={summary.files_discovered} "
        f"emitted={summary.files_emitted} types={summary.types_indexed} "
        f"packages={summary.packages_indexed} elapsed_ms={summary.elapsed_ms}",
        markup=False,
        highlight=False,
    )

    if summary.failures:
        table = Table(title="Failed files", show_header=True, expand=True)
        table.add_column("source", overflow="fold")
        table.add_column("error", overflow="fold")
        for failure in summary.failures:
            table.add_row(str(failure.source_path), failure.message)
        console.print(table)

    if summary.ambiguous:
        table = Table(title="Ambiguous references", show_header=True, expand=True)
        table.add_column("source", overflow="fold")
        table.add_column("line", justify="right")
        table.add_column("name")
        table.add_column("candidates", overflow="fold")
        for reference in summary.ambiguous:
            table.add_row(
                str(reference.source_path),
                str(reference.line),
                reference.name,
                ", ".join(reference.candidates),
            )
        console.print(table)

    if summary.unresolved_imports:
        table = Table(title="Unresolved imports", show_header=True, expand=True)
        table.add_column("source", overflow="fold")
        table.add_column("line", justify="right")
        table.add_column("import", overflow="fold")
        for item in summary.unresolved_imports:
            table.add_row(str(item.source_path), str(item.line), item.name)
        console.print(table)

    if summary.dangling_types:
        table = Table(title="Types without a document", show_header=True, expand=True)
        table.add_column("type", overflow="fold")
        table.add_column("source", overflow="fold")
        for entry in summary.dangling_types:
            table.add_row(entry.qualified_name, str(entry.source_path))
        console.print(table)

    if summary.duplicates:
        table = Table(title="Duplicate types", show_header=True, expand=True)
        table.add_column("type", overflow="fold")
        table.add_column("kept", overflow="fold")
        table.add_column("ignored", overflow="fold")
        for duplicate in summary.duplicates:
            table.add_row(
                duplicate.qualified_name,
                str(duplicate.kept_source),
                str(duplicate.ignored_source),
            )
        console.print(table)


def main() -> None:
    """Run the cross-reference CLI and exit."""
    configure_logging()
    exit_code = run(sys.argv[1:], stdout=sys.stdout, stderr=sys.stderr)
    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
