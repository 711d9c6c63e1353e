# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Public import surface for cross-reference components."""

from xref.config import ConfigError, EmitterConfig, ExternalReferenceConfig, XrefConfig
from xref.emitter import EmissionError, EmittedDocument, HtmlEmitter
from xref.indexer import DirectoryIndexer
from xref.model import (
    ExternalReference,
    FileContext,
    ImportDeclaration,
    ResolvedLink,
    ResolvedTo,
    TypeEntry,
    Unresolved,
    XrefError,
)
from xref.paths import NoCommonAncestorError, relative_link, relative_path
from xref.pipeline import RunSummary, run_xref
from xref.resolver import ReferenceResolver
from xref.symbols import SymbolTable, SymbolTableBuilder, scan_file_context
from xref.tokenizer import Token, tokenize

__all__ = [
    "ConfigError",
    "DirectoryIndexer",
    "EmissionError",
    "EmittedDocument",
    "EmitterConfig",
    "ExternalReference",
    "ExternalReferenceConfig",
    "FileContext",
    "HtmlEmitter",
    "ImportDeclaration",
    "NoCommonAncestorError",
    "ReferenceResolver",
    "ResolvedLink",
    "ResolvedTo",
    "RunSummary",
    "SymbolTable",
    "SymbolTableBuilder",
    "Token",
    "TypeEntry",
    "Unresolved",
    "XrefConfig",
    "XrefError",
    "relative_link",
    "relative_path",
    "run_xref",
    "scan_file_context",
    "tokenize",
]
