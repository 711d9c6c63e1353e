# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Build the project-wide symbol table from source file headers."""

import logging
from collections.abc import Iterator, Mapping
from pathlib import Path
from types import MappingProxyType

from xref.model import (
    DuplicateTypeDeclaration,
    FileContext,
    ImportDeclaration,
    TypeEntry,
    XrefError,
)
from xref.tokenizer import TRIVIA_KINDS, Token, tokenize

logger = logging.getLogger(__name__)

_TYPE_KEYWORDS: frozenset[str] = frozenset({"class", "interface", "enum"})
# Page names written by the indexer at the destination root.
NAVIGATION_PAGE_STEMS: frozenset[str] = frozenset({"index", "allclasses"})


class SymbolTableSealedError(XrefError):
    """Represent a registration attempted after the table was built."""


class SymbolTable:
    """Read-only mapping of qualified type names to their entries."""

    def __init__(
        self,
        by_name: Mapping[str, TypeEntry],
        by_package: Mapping[str, frozenset[TypeEntry]],
    ) -> None:
        """Initialize the table from already collected entries.

        Args:
            by_name: Qualified name to entry mapping.
            by_package: Package name to contained entries mapping.
        """
        self._by_name = MappingProxyType(dict(by_name))
        self._by_package = MappingProxyType(dict(by_package))

    def __len__(self) -> int:
        return len(self._by_name)

    def __iter__(self) -> Iterator[TypeEntry]:
        return iter(self._by_name.values())

    def __contains__(self, qualified_name: object) -> bool:
        return qualified_name in self._by_name

    def get(self, qualified_name: str) -> TypeEntry | None:
        """Return the entry for a qualified name, if registered."""
        return self._by_name.get(qualified_name)

    def package(self, package_name: str) -> frozenset[TypeEntry]:
        """Return all entries declared in a package."""
        return self._by_package.get(package_name, frozenset())

    def find_in_package(self, package_name: str, simple_name: str) -> TypeEntry | None:
        """Return the entry of a simple name inside a package, if any."""
        if package_name:
            return self._by_name.get(f"{package_name}.{simple_name}")
        return self._by_name.get(simple_name)

    @property
    def packages(self) -> list[str]:
        """Return all package names in sorted order."""
        return sorted(self._by_package)


class SymbolTableBuilder:
    """Collect type declarations from every source file, then seal."""

    def __init__(self, destination: Path) -> None:
        """Initialize builder state.

        Args:
            destination: Root directory of generated documents.
        """
        self._destination = destination
        self._entries: dict[str, TypeEntry] = {}
        self._sealed = False
        self.duplicates: list[DuplicateTypeDeclaration] = []

    def add_file(self, source_path: Path, source: str) -> FileContext:
        """Register the top-level types declared by one source file.

        Args:
            source_path: Path of the source file.
            source: Full source text.

        Returns:
            Header context of the file.

        Raises:
            SymbolTableSealedError: If ``build`` was already called.
        """
        context = scan_file_context(tokenize(source))
        self.register(source_path, context)
        return context

    def register(self, source_path: Path, context: FileContext) -> None:
        """Register the top-level types of an already scanned source file.

        Args:
            source_path: Path of the source file.
            context: Header context of the file.

        Raises:
            SymbolTableSealedError: If ``build`` was already called.
        """
        if self._sealed:
            raise SymbolTableSealedError(
                f"Symbol table already built; cannot register {source_path}"
            )
        output_path = document_path(self._destination, context.package_name, source_path)
        for simple_name, line in context.type_names:
            qualified_name = context.qualify(simple_name)
            existing = self._entries.get(qualified_name)
            if existing is not None:
                logger.warning(
                    f"Duplicate type declaration ignored (type={qualified_name} "
                    f"kept={existing.source_path} ignored={source_path})"
                )
                self.duplicates.append(
                    DuplicateTypeDeclaration(
                        qualified_name=qualified_name,
                        kept_source=existing.source_path,
                        ignored_source=source_path,
                    )
                )
                continue
            self._entries[qualified_name] = TypeEntry(
                qualified_name=qualified_name,
                simple_name=simple_name,
                package_name=context.package_name,
                output_path=output_path,
                source_path=source_path,
                line=line,
            )

    def build(self) -> SymbolTable:
        """Seal the builder and return the immutable symbol table.

        Returns:
            Symbol table with every registered entry.
        """
        self._sealed = True
        by_package: dict[str, set[TypeEntry]] = {}
        for entry in self._entries.values():
            by_package.setdefault(entry.package_name, set()).add(entry)
        logger.info(
            f"Symbol table built (types={len(self._entries)} packages={len(by_package)} "
            f"duplicates={len(self.duplicates)})"
        )
        return SymbolTable(
            by_name=self._entries,
            by_package={name: frozenset(items) for name, items in by_package.items()},
        )


def document_path(destination: Path, package_name: str, source_path: Path) -> Path:
    """Return the generated document location for a source file.

    Args:
        destination: Root directory of generated documents.
        package_name: Declared package of the source file.
        source_path: Source file path.

    Returns:
        ``<destination>/<package path>/<file stem>.html``, or
        ``<file name>.html`` when the stem is taken by a navigation page.
    """
    reserved = NAVIGATION_PAGE_STEMS if not package_name else frozenset({"index"})
    if source_path.stem.lower() in reserved:
        return package_dir(destination, package_name) / f"{source_path.name}.html"
    return package_dir(destination, package_name) / f"{source_path.stem}.html"


def package_dir(destination: Path, package_name: str) -> Path:
    """Return the output directory mirroring a package."""
    if not package_name:
        return destination
    return destination.joinpath(*package_name.split("."))


def scan_file_context(tokens: list[Token]) -> FileContext:
    """Extract package, imports and top-level type names from a token stream.

    Only declarations at brace depth zero are considered, which is enough to
    find the header and top-level types without parsing.

    Args:
        tokens: Token stream of one source file.

    Returns:
        Header context of the file.
    """
    significant = [token for token in tokens if token.kind not in TRIVIA_KINDS]
    package_name = ""
    imports: list[ImportDeclaration] = []
    type_names: list[tuple[str, int]] = []
    depth = 0
    index = 0
    count = len(significant)

    while index < count:
        token = significant[index]
        if token.kind == "punctuation":
            if token.text == "{":
                depth += 1
            elif token.text == "}":
                depth = max(0, depth - 1)
            index += 1
            continue
        if depth > 0:
            index += 1
            continue

        if token.kind == "keyword" and token.text == "package" and not package_name:
            name, index = _read_dotted_name(significant, index + 1)
            package_name = name
            continue
        if token.kind == "keyword" and token.text == "import":
            declaration, index = _read_import(significant, index + 1, token.start_line)
            if declaration is not None:
                imports.append(declaration)
            continue
        if _is_type_declaration(significant, index):
            name_token = significant[index + 1]
            type_names.append((name_token.text, name_token.start_line))
            index += 2
            continue
        index += 1

    return FileContext(
        package_name=package_name,
        imports=tuple(imports),
        type_names=tuple(type_names),
    )


def _is_type_declaration(significant: list[Token], index: int) -> bool:
    """Check whether the token at ``index`` opens a type declaration."""
    if index + 1 >= len(significant):
        return False
    token = significant[index]
    following = significant[index + 1]
    if following.kind != "identifier":
        return False
    previous = significant[index - 1] if index > 0 else None
    if token.kind == "keyword" and token.text in _TYPE_KEYWORDS:
        # Skip "Foo.class" literals that may appear in annotations.
        return previous is None or previous.text != "."
    if token.kind == "identifier" and token.text == "record":
        after = significant[index + 2] if index + 2 < len(significant) else None
        return after is not None and after.text in {"(", "<"}
    return False


def _read_dotted_name(significant: list[Token], index: int) -> tuple[str, int]:
    """Read ``a.b.c`` starting at ``index`` and stop after the terminating ``;``."""
    parts: list[str] = []
    count = len(significant)
    while index < count:
        token = significant[index]
        if token.kind == "identifier" or (token.kind == "punctuation" and token.text == "."):
            parts.append(token.text)
            index += 1
            continue
        break
    if index < count and significant[index].text == ";":
        index += 1
    return "".join(parts), index


def _read_import(
    significant: list[Token], index: int, line: int
) -> tuple[ImportDeclaration | None, int]:
    """Read one import declaration following the ``import`` keyword."""
    is_static = False
    if index < len(significant) and significant[index].text == "static":
        is_static = True
        index += 1
    name, index = _read_dotted_name(significant, index)
    wildcard = False
    if index < len(significant) and significant[index].text == "*":
        wildcard = True
        name = name.rstrip(".")
        index += 1
        if index < len(significant) and significant[index].text == ";":
            index += 1
    if not name:
        return None, index
    return (
        ImportDeclaration(name=name, wildcard=wildcard, static=is_static, line=line),
        index,
    )
