# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Domain models shared by the cross-reference components."""

from dataclasses import dataclass
from pathlib import Path


class XrefError(RuntimeError):
    """Represent a cross-reference generation failure."""


@dataclass(frozen=True)
class TypeEntry:
    """Represent one discovered top-level type.

    Attributes:
        qualified_name: Dotted package plus simple name.
        simple_name: Declared type name.
        package_name: Declaring package; empty for the default package.
        output_path: Generated document holding the type's source.
        source_path: Source file declaring the type.
        line: Declaration line in the source file (1-based).
    """

    qualified_name: str
    simple_name: str
    package_name: str
    output_path: Path
    source_path: Path
    line: int = 1


@dataclass(frozen=True)
class ImportDeclaration:
    """Represent one import declaration of a source file.

    Attributes:
        name: Imported qualified type name, or the package for wildcards.
        wildcard: Whether the declaration imports a whole package.
        static: Whether the declaration is a static (member) import.
        line: Declaration line (1-based).
    """

    name: str
    wildcard: bool = False
    static: bool = False
    line: int = 1

    @property
    def simple_name(self) -> str:
        """Return the last segment of the imported name."""
        return self.name.rsplit(".", 1)[-1]


@dataclass(frozen=True)
class FileContext:
    """Represent the header declarations of one source file.

    Attributes:
        package_name: Declared package; empty for the default package.
        imports: Import declarations in source order.
        type_names: Top-level type names declared in the file with their lines.
    """

    package_name: str
    imports: tuple[ImportDeclaration, ...]
    type_names: tuple[tuple[str, int], ...] = ()

    def qualify(self, simple_name: str) -> str:
        """Return the qualified name of a type declared in this file's package."""
        if not self.package_name:
            return simple_name
        return f"{self.package_name}.{simple_name}"


@dataclass(frozen=True)
class Unresolved:
    """Represent an identifier that must render as plain text.

    Attributes:
        name: Identifier text that was looked up.
        candidates: Competing qualified names when the reference is ambiguous.
    """

    name: str
    candidates: tuple[str, ...] = ()

    @property
    def ambiguous(self) -> bool:
        return len(self.candidates) > 1


@dataclass(frozen=True)
class ResolvedTo:
    """Represent an identifier resolved to a generated type page."""

    entry: TypeEntry


@dataclass(frozen=True)
class ExternalReference:
    """Represent an identifier linked to an external documentation page."""

    qualified_name: str


ResolvedLink = Unresolved | ResolvedTo | ExternalReference


@dataclass(frozen=True)
class DuplicateTypeDeclaration:
    """Represent a later declaration of an already registered type."""

    qualified_name: str
    kept_source: Path
    ignored_source: Path


@dataclass(frozen=True)
class AmbiguousReference:
    """Represent an identifier matched by several wildcard imports."""

    source_path: Path
    line: int
    name: str
    candidates: tuple[str, ...]


@dataclass(frozen=True)
class UnresolvedImport:
    """Represent a single-type import whose target is not in the symbol table."""

    source_path: Path
    line: int
    name: str


@dataclass(frozen=True)
class FileFailure:
    """Represent a source file whose document could not be emitted."""

    source_path: Path
    message: str
