# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Resolve identifier occurrences of one file against the symbol table."""

import logging
from pathlib import Path
from typing import Callable

from xref.model import (
    ExternalReference,
    FileContext,
    ResolvedLink,
    ResolvedTo,
    Unresolved,
    UnresolvedImport,
)
from xref.symbols import SymbolTable

logger = logging.getLogger(__name__)

_Lookup = Callable[[str], ResolvedLink | None]


class ReferenceResolver:
    """Decide which type, if any, an identifier of one file refers to.

    Lookups run in a fixed order and the first one that matches decides:
    explicit single-type imports, the file's own package, a single matching
    wildcard-imported package, and finally the identifier as a qualified name.
    """

    def __init__(
        self,
        table: SymbolTable,
        context: FileContext,
        external_links: bool = False,
    ) -> None:
        """Initialize resolver state for one file.

        Args:
            table: Immutable project symbol table.
            context: Header declarations of the file being resolved.
            external_links: Whether imports missing from the table resolve to
                external references.
        """
        self._table = table
        self._context = context
        self._external_links = external_links
        self._single_imports: dict[str, str] = {}
        for declaration in context.imports:
            if declaration.static or declaration.wildcard:
                continue
            self._single_imports.setdefault(declaration.simple_name, declaration.name)
        self._wildcard_packages: tuple[str, ...] = tuple(
            dict.fromkeys(
                declaration.name
                for declaration in context.imports
                if declaration.wildcard and not declaration.static
            )
        )
        self._lookups: tuple[_Lookup, ...] = (
            self._lookup_single_import,
            self._lookup_same_package,
            self._lookup_wildcard_imports,
            self._lookup_qualified,
        )

    @property
    def context(self) -> FileContext:
        return self._context

    def resolve(self, name: str) -> ResolvedLink:
        """Resolve one identifier.

        Args:
            name: Simple identifier, or a dotted qualified name.

        Returns:
            Tagged resolution result; never raises for unknown names.
        """
        for lookup in self._lookups:
            result = lookup(name)
            if result is not None:
                return result
        return Unresolved(name=name)

    def unresolved_imports(self, source_path: Path) -> list[UnresolvedImport]:
        """List single-type imports whose target type is not in the table.

        Args:
            source_path: Source file reported in the results.

        Returns:
            Unresolved imports in declaration order.
        """
        return [
            UnresolvedImport(
                source_path=source_path, line=declaration.line, name=declaration.name
            )
            for declaration in self._context.imports
            if not declaration.static
            and not declaration.wildcard
            and declaration.name not in self._table
        ]

    def _lookup_single_import(self, name: str) -> ResolvedLink | None:
        qualified_name = self._single_imports.get(name)
        if qualified_name is None:
            return None
        entry = self._table.get(qualified_name)
        if entry is not None:
            return ResolvedTo(entry=entry)
        if self._external_links:
            return ExternalReference(qualified_name=qualified_name)
        # An explicit import shadows same-package and wildcard types.
        return Unresolved(name=name)

    def _lookup_same_package(self, name: str) -> ResolvedLink | None:
        if "." in name:
            return None
        entry = self._table.find_in_package(self._context.package_name, name)
        if entry is None:
            return None
        return ResolvedTo(entry=entry)

    def _lookup_wildcard_imports(self, name: str) -> ResolvedLink | None:
        if "." in name:
            return None
        matches = [
            entry
            for entry in (
                self._table.find_in_package(package_name, name)
                for package_name in self._wildcard_packages
            )
            if entry is not None
        ]
        if not matches:
            return None
        if len(matches) > 1:
            candidates = tuple(sorted(entry.qualified_name for entry in matches))
            logger.debug(
                f"Ambiguous wildcard reference left unresolved (name={name} "
                f"candidates={','.join(candidates)})"
            )
            return Unresolved(name=name, candidates=candidates)
        return ResolvedTo(entry=matches[0])

    def _lookup_qualified(self, name: str) -> ResolvedLink | None:
        if "." not in name:
            return None
        entry = self._table.get(name)
        if entry is None:
            return None
        return ResolvedTo(entry=entry)
