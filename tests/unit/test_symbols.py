# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Unit tests for header scanning and the symbol table builder."""

import logging
from pathlib import Path

import pytest

from xref.model import ImportDeclaration
from xref.symbols import (
    SymbolTableBuilder,
    SymbolTableSealedError,
    document_path,
    scan_file_context,
)
from xref.tokenizer import tokenize

HEADER_SOURCE = """\
/*
 * package fake.license; class NotAType
 */
// package also.fake;
package com.example.app;

import java.util.List;
import com.example.util.*;
import static com.example.util.Strings.join;
import static com.example.util.Numbers.*;

@Ann(Helper.class)
public class Main {
    class Inner {}
    interface InnerApi {}
    Object o = String.class;
}

interface Api {}

enum Color { RED, GREEN }

@interface Marker {}

record Point(int x, int y) {}
"""


def test_sym_001_scans_package_imports_and_top_level_types() -> None:
    context = scan_file_context(tokenize(HEADER_SOURCE))

    assert context.package_name == "com.example.app"
    assert context.imports == (
        ImportDeclaration(name="java.util.List", wildcard=False, static=False, line=7),
        ImportDeclaration(name="com.example.util", wildcard=True, static=False, line=8),
        ImportDeclaration(
            name="com.example.util.Strings.join", wildcard=False, static=True, line=9
        ),
        ImportDeclaration(
            name="com.example.util.Numbers", wildcard=True, static=True, line=10
        ),
    )
    assert [name for name, _ in context.type_names] == [
        "Main",
        "Api",
        "Color",
        "Marker",
        "Point",
    ]
    assert dict(context.type_names)["Main"] == 13


def test_sym_002_default_package_file_has_empty_package() -> None:
    context = scan_file_context(tokenize("class Loose {}\n"))

    assert context.package_name == ""
    assert context.imports == ()
    assert context.type_names == (("Loose", 1),)
    assert context.qualify("Loose") == "Loose"


def test_sym_003_builder_registers_entries_with_deterministic_output_paths(
    tmp_path: Path,
) -> None:
    destination = tmp_path / "out"
    builder = SymbolTableBuilder(destination)
    builder.add_file(
        Path("src/com/example/Foo.java"),
        "package com.example;\npublic class Foo {}\nclass Helper {}\n",
    )
    builder.add_file(Path("src/Loose.java"), "class Loose {}\n")

    table = builder.build()

    foo = table.get("com.example.Foo")
    helper = table.get("com.example.Helper")
    loose = table.get("Loose")
    assert foo is not None and helper is not None and loose is not None
    assert foo.simple_name == "Foo"
    assert foo.package_name == "com.example"
    assert foo.output_path == destination / "com" / "example" / "Foo.html"
    assert helper.output_path == foo.output_path
    assert helper.line == 3
    assert loose.output_path == destination / "Loose.html"
    assert table.package("com.example") == frozenset({foo, helper})
    assert table.packages == ["", "com.example"]
    assert len(table) == 3
    assert "com.example.Foo" in table


def test_sym_004_duplicate_type_first_registration_wins(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    builder = SymbolTableBuilder(tmp_path / "out")
    builder.add_file(Path("main/a/Foo.java"), "package a; class Foo {}")
    with caplog.at_level(logging.WARNING):
        builder.add_file(Path("test/a/Foo.java"), "package a; class Foo {}")

    table = builder.build()

    entry = table.get("a.Foo")
    assert entry is not None
    assert entry.source_path == Path("main/a/Foo.java")
    assert len(builder.duplicates) == 1
    assert builder.duplicates[0].ignored_source == Path("test/a/Foo.java")
    assert "Duplicate type declaration" in caplog.text


def test_sym_005_builder_rejects_registration_after_build(tmp_path: Path) -> None:
    builder = SymbolTableBuilder(tmp_path / "out")
    builder.add_file(Path("A.java"), "class A {}")
    builder.build()

    with pytest.raises(SymbolTableSealedError):
        builder.add_file(Path("B.java"), "class B {}")


def test_sym_006_table_lookup_helpers(tmp_path: Path) -> None:
    builder = SymbolTableBuilder(tmp_path / "out")
    builder.add_file(Path("p/Foo.java"), "package p; class Foo {}")
    table = builder.build()

    assert table.find_in_package("p", "Foo") is table.get("p.Foo")
    assert table.find_in_package("q", "Foo") is None
    assert table.package("missing") == frozenset()
    assert table.get("Foo") is None


def test_sym_007_navigation_page_names_are_not_used_for_documents(
    tmp_path: Path,
) -> None:
    destination = tmp_path / "out"

    assert document_path(destination, "p", Path("p/index.java")) == (
        destination / "p" / "index.java.html"
    )
    assert document_path(destination, "p", Path("p/allclasses.java")) == (
        destination / "p" / "allclasses.html"
    )
    assert document_path(destination, "", Path("allclasses.java")) == (
        destination / "allclasses.java.html"
    )
    assert document_path(destination, "", Path("Index.java")) == (
        destination / "Index.java.html"
    )


def test_sym_008_register_accepts_a_scanned_context(tmp_path: Path) -> None:
    builder = SymbolTableBuilder(tmp_path / "out")
    context = scan_file_context(tokenize("package p;\nclass Foo {}\nclass Bar {}\n"))

    builder.register(Path("p/Foo.java"), context)
    table = builder.build()

    assert sorted(entry.qualified_name for entry in table) == ["p.Bar", "p.Foo"]
    with pytest.raises(SymbolTableSealedError):
        builder.register(Path("p/Baz.java"), context)
