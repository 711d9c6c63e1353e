# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Unit tests for reference resolution precedence."""

from pathlib import Path

from xref.model import ExternalReference, ResolvedTo, Unresolved
from xref.resolver import ReferenceResolver
from xref.symbols import SymbolTable, SymbolTableBuilder, scan_file_context
from xref.tokenizer import tokenize


def _table(tmp_path: Path, sources: dict[str, str]) -> SymbolTable:
    builder = SymbolTableBuilder(tmp_path / "out")
    for name, source in sources.items():
        builder.add_file(Path(name), source)
    return builder.build()


def _resolver(
    table: SymbolTable, source: str, external_links: bool = False
) -> ReferenceResolver:
    return ReferenceResolver(
        table=table,
        context=scan_file_context(tokenize(source)),
        external_links=external_links,
    )


PROJECT = {
    "pkg/Foo.java": "package pkg; public class Foo {}",
    "other/Foo.java": "package other; public class Foo {}",
    "other/Baz.java": "package other; public class Baz {}",
    "a/Bar.java": "package a; public class Bar {}",
    "b/Bar.java": "package b; public class Bar {}",
    "mine/Foo.java": "package mine; public class Foo {}",
    "mine/List.java": "package mine; public class List {}",
    "y/Lonely.java": "package y; public class Lonely {}",
}


def test_res_001_explicit_import_beats_wildcard_import(tmp_path: Path) -> None:
    table = _table(tmp_path, PROJECT)
    resolver = _resolver(table, "package client;\nimport pkg.Foo;\nimport other.*;\n")

    result = resolver.resolve("Foo")

    assert result == ResolvedTo(entry=table.get("pkg.Foo"))


def test_res_002_explicit_import_beats_same_package(tmp_path: Path) -> None:
    table = _table(tmp_path, PROJECT)
    resolver = _resolver(table, "package mine;\nimport pkg.Foo;\n")

    result = resolver.resolve("Foo")

    assert isinstance(result, ResolvedTo)
    assert result.entry.qualified_name == "pkg.Foo"


def test_res_003_same_package_beats_wildcard_import(tmp_path: Path) -> None:
    table = _table(tmp_path, PROJECT)
    resolver = _resolver(table, "package mine;\nimport other.*;\n")

    result = resolver.resolve("Foo")

    assert isinstance(result, ResolvedTo)
    assert result.entry.qualified_name == "mine.Foo"


def test_res_004_two_wildcard_packages_make_reference_ambiguous(tmp_path: Path) -> None:
    table = _table(tmp_path, PROJECT)
    resolver = _resolver(table, "package client;\nimport a.*;\nimport b.*;\n")

    result = resolver.resolve("Bar")

    assert isinstance(result, Unresolved)
    assert result.ambiguous
    assert result.candidates == ("a.Bar", "b.Bar")


def test_res_005_single_matching_wildcard_resolves(tmp_path: Path) -> None:
    table = _table(tmp_path, PROJECT)
    resolver = _resolver(table, "package client;\nimport a.*;\nimport other.*;\n")

    assert resolver.resolve("Bar") == ResolvedTo(entry=table.get("a.Bar"))
    assert resolver.resolve("Baz") == ResolvedTo(entry=table.get("other.Baz"))


def test_res_006_dotted_name_resolves_as_qualified_name(tmp_path: Path) -> None:
    table = _table(tmp_path, PROJECT)
    resolver = _resolver(table, "package client;\n")

    assert resolver.resolve("pkg.Foo") == ResolvedTo(entry=table.get("pkg.Foo"))
    assert resolver.resolve("pkg.Missing") == Unresolved(name="pkg.Missing")


def test_res_007_no_implicit_lookup_outside_imports_and_package(tmp_path: Path) -> None:
    table = _table(tmp_path, PROJECT)
    resolver = _resolver(table, "package x;\n")

    result = resolver.resolve("Lonely")

    assert result == Unresolved(name="Lonely")
    assert not result.ambiguous


def test_res_008_import_missing_from_table_links_externally_when_enabled(
    tmp_path: Path,
) -> None:
    table = _table(tmp_path, PROJECT)
    source = "package mine;\nimport java.util.List;\n"

    external = _resolver(table, source, external_links=True).resolve("List")
    local_only = _resolver(table, source, external_links=False).resolve("List")

    assert external == ExternalReference(qualified_name="java.util.List")
    assert local_only == Unresolved(name="List")


def test_res_009_static_imports_do_not_resolve_types(tmp_path: Path) -> None:
    table = _table(tmp_path, PROJECT)
    resolver = _resolver(
        table, "package client;\nimport static pkg.Foo.helper;\nimport static other.*;\n"
    )

    assert resolver.resolve("helper") == Unresolved(name="helper")
    assert resolver.resolve("Baz") == Unresolved(name="Baz")


def test_res_010_unresolved_imports_lists_single_type_imports_only(
    tmp_path: Path,
) -> None:
    table = _table(tmp_path, PROJECT)
    resolver = _resolver(
        table,
        "package client;\nimport pkg.Foo;\nimport java.util.Map;\nimport java.io.*;\n",
    )

    missing = resolver.unresolved_imports(Path("client/Client.java"))

    assert [(item.name, item.line) for item in missing] == [("java.util.Map", 3)]
    assert missing[0].source_path == Path("client/Client.java")
