# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Two-phase cross-reference run over one or more source trees."""

import concurrent.futures
import logging
import time
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Literal
from urllib.parse import urlparse

from xref.config import ConfigError, XrefConfig
from xref.emitter import EmissionError, EmittedDocument, HtmlEmitter
from xref.indexer import DirectoryIndexer
from xref.model import (
    AmbiguousReference,
    DuplicateTypeDeclaration,
    FileFailure,
    TypeEntry,
    UnresolvedImport,
)
from xref.output import read_source, write_atomic
from xref.resolver import ReferenceResolver
from xref.scanner import SourceMatcher, discover_sources
from xref.symbols import SymbolTable, SymbolTableBuilder, document_path, scan_file_context
from xref.tokenizer import tokenize

logger = logging.getLogger(__name__)

RunStatus = Literal["completed", "completed_with_errors"]


@dataclass(frozen=True)
class RunSummary:
    """Represent the outcome of one cross-reference run."""

    files_discovered: int
    files_emitted: int
    types_indexed: int
    packages_indexed: int
    failures: list[FileFailure]
    duplicates: list[DuplicateTypeDeclaration]
    ambiguous: list[AmbiguousReference]
    unresolved_imports: list[UnresolvedImport]
    dangling_types: list[TypeEntry]
    elapsed_ms: int
    status: RunStatus


@dataclass(frozen=True)
class _PlannedFile:
    source_path: Path
    output_path: Path


@dataclass(frozen=True)
class _FileResult:
    document: EmittedDocument
    unresolved_imports: list[UnresolvedImport]


def run_xref(config: XrefConfig) -> RunSummary:
    """Cross-reference every selected source file and index the output.

    The symbol table is built from all files before any file is emitted, and
    the index pages are written only after every emission has finished.

    Args:
        config: Run configuration.

    Returns:
        Run summary with per-file failures and reference diagnostics.

    Raises:
        ConfigError: If a source directory does not exist.
        EmissionError: If ``fail_fast`` is set and a file fails.
        OSError: If index pages cannot be written.
    """
    started = time.monotonic()
    destination = config.destination.resolve()
    config = _absolute_external_base(config)
    sources = _discover(config)
    failures: list[FileFailure] = []

    builder = SymbolTableBuilder(destination)
    planned: list[_PlannedFile] = []
    claimed: dict[Path, Path] = {}
    for source_path in sources:
        try:
            source = read_source(source_path, config.input_encoding)
        except (OSError, UnicodeError) as exc:
            _record_failure(failures, source_path, f"read failed: {exc}", config)
            continue
        context = scan_file_context(tokenize(source))
        output_path = document_path(destination, context.package_name, source_path)
        owner = claimed.get(output_path)
        if owner is not None:
            _record_failure(
                failures,
                source_path,
                f"output path {output_path} already claimed by {owner}",
                config,
            )
            continue
        claimed[output_path] = source_path
        builder.register(source_path, context)
        planned.append(_PlannedFile(source_path=source_path, output_path=output_path))
    table = builder.build()

    results = _emit_all(config, destination, table, planned, failures)

    indexer = DirectoryIndexer(
        destination=destination,
        output_encoding=config.output_encoding,
        window_title=config.window_title,
        doc_title=config.doc_title,
        bottom=config.bottom,
    )
    documents = frozenset(result.document.output_path for result in results)
    dangling = sorted(
        (entry for entry in table if entry.output_path not in documents),
        key=lambda entry: entry.qualified_name,
    )
    if dangling:
        logger.warning(
            f"Types left without a document (count={len(dangling)} "
            f"types={','.join(entry.qualified_name for entry in dangling)})"
        )
    index_summary = indexer.write(table, documents=documents)

    ambiguous = [item for result in results for item in result.document.ambiguous]
    unresolved = [item for result in results for item in result.unresolved_imports]
    elapsed_ms = int(round((time.monotonic() - started) * 1000))
    summary = RunSummary(
        files_discovered=len(sources),
        files_emitted=len(results),
        types_indexed=index_summary.types,
        packages_indexed=index_summary.packages,
        failures=sorted(failures, key=lambda item: str(item.source_path)),
        duplicates=list(builder.duplicates),
        ambiguous=sorted(ambiguous, key=lambda item: (str(item.source_path), item.line)),
        unresolved_imports=sorted(
            unresolved, key=lambda item: (str(item.source_path), item.line)
        ),
        dangling_types=dangling,
        elapsed_ms=elapsed_ms,
        status="completed_with_errors" if failures else "completed",
    )
    logger.info(
        f"Cross-reference run completed (files={summary.files_discovered} "
        f"emitted={summary.files_emitted} failed={len(summary.failures)} "
        f"types={summary.types_indexed} elapsed_ms={elapsed_ms})"
    )
    return summary


def _emit_all(
    config: XrefConfig,
    destination: Path,
    table: SymbolTable,
    planned: list[_PlannedFile],
    failures: list[FileFailure],
) -> list[_FileResult]:
    """Emit every planned file on a worker pool, isolating failures per file."""
    emitter = HtmlEmitter(config.emitter_config(), destination)
    results: list[_FileResult] = []
    with concurrent.futures.ThreadPoolExecutor(
        max_workers=config.max_workers
    ) as executor:
        future_to_file = {
            executor.submit(_emit_file, item, table, emitter, config): item
            for item in planned
        }
        for future in concurrent.futures.as_completed(future_to_file):
            item = future_to_file[future]
            try:
                results.append(future.result())
            except (EmissionError, OSError, UnicodeError) as exc:
                if config.fail_fast:
                    for pending in future_to_file:
                        pending.cancel()
                _record_failure(failures, item.source_path, str(exc), config)
    results.sort(key=lambda result: str(result.document.source_path))
    return results


def _emit_file(
    item: _PlannedFile,
    table: SymbolTable,
    emitter: HtmlEmitter,
    config: XrefConfig,
) -> _FileResult:
    """Tokenize, resolve, render and write one source file."""
    source = read_source(item.source_path, config.input_encoding)
    tokens = tokenize(source)
    resolver = ReferenceResolver(
        table=table,
        context=scan_file_context(tokens),
        external_links=config.external.enabled,
    )
    document = emitter.render(
        tokens=tokens,
        resolver=resolver,
        source_path=item.source_path,
        output_path=item.output_path,
    )
    write_atomic(item.output_path, document.content, config.output_encoding)
    logger.debug(f"Emitted document (source={item.source_path} output={item.output_path})")
    return _FileResult(
        document=document,
        unresolved_imports=resolver.unresolved_imports(item.source_path),
    )


def _record_failure(
    failures: list[FileFailure], source_path: Path, message: str, config: XrefConfig
) -> None:
    logger.warning(f"File skipped (source={source_path} error={message})")
    failures.append(FileFailure(source_path=source_path, message=message))
    if config.fail_fast:
        raise EmissionError(f"{source_path}: {message}")


def _discover(config: XrefConfig) -> list[Path]:
    matcher = SourceMatcher.from_patterns(config.includes, config.excludes)
    sources: list[Path] = []
    for source_dir in config.source_dirs:
        try:
            sources.extend(discover_sources(source_dir, matcher))
        except NotADirectoryError as exc:
            raise ConfigError(str(exc)) from exc
    return list(dict.fromkeys(sources))


def _absolute_external_base(config: XrefConfig) -> XrefConfig:
    """Anchor a filesystem external base directory at the current directory."""
    base = config.external.base_directory
    if not config.external.enabled or not base or urlparse(base).scheme:
        return config
    external = replace(config.external, base_directory=str(Path(base).resolve()))
    return replace(config, external=external)
