# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Unit tests for HTML document rendering."""

import re
from pathlib import Path

import pytest

from xref.config import EmitterConfig, ExternalReferenceConfig
from xref.emitter import EmissionError, EmittedDocument, HtmlEmitter
from xref.resolver import ReferenceResolver
from xref.symbols import SymbolTable, SymbolTableBuilder, document_path, scan_file_context
from xref.tokenizer import tokenize

LIBRARY = {
    "a/Foo.java": "package a;\npublic class Foo {}\n",
    "x/Bar.java": "package x;\npublic class Bar {}\n",
    "y/Bar.java": "package y;\npublic class Bar {}\n",
}


def _table(destination: Path) -> SymbolTable:
    builder = SymbolTableBuilder(destination)
    for name, source in LIBRARY.items():
        builder.add_file(Path(name), source)
    return builder.build()


def _render(
    tmp_path: Path,
    source: str,
    config: EmitterConfig | None = None,
    file_name: str = "Client.java",
) -> EmittedDocument:
    destination = tmp_path / "out"
    table = _table(destination)
    tokens = tokenize(source)
    context = scan_file_context(tokens)
    resolver = ReferenceResolver(
        table=table,
        context=context,
        external_links=(config or EmitterConfig()).external.enabled,
    )
    emitter = HtmlEmitter(config or EmitterConfig(), destination)
    source_path = Path(file_name)
    return emitter.render(
        tokens=tokens,
        resolver=resolver,
        source_path=source_path,
        output_path=document_path(destination, context.package_name, source_path),
    )


def _rows(content: str) -> list[str]:
    return re.findall(r'<td class="code">(.*?)</td></tr>', content)


def test_emit_001_empty_source_renders_valid_document_without_rows(
    tmp_path: Path,
) -> None:
    document = _render(tmp_path, "")

    assert document.line_count == 0
    assert "<tr" not in document.content
    assert document.content.startswith("<!DOCTYPE html>\n")
    assert document.content.endswith("</html>\n")
    assert "<tbody>\n</tbody>" in document.content


def test_emit_002_one_anchored_row_per_source_line(tmp_path: Path) -> None:
    document = _render(tmp_path, "int a;\n\nint b;\n")

    assert document.line_count == 3
    for number in (1, 2, 3):
        assert f'<tr id="line{number}">' in document.content
        assert f'<a href="#line{number}">{number}</a>' in document.content
    assert _rows(document.content)[1] == ""


def test_emit_003_last_line_without_newline_is_rendered(tmp_path: Path) -> None:
    document = _render(tmp_path, "int a;\nint b;")

    assert document.line_count == 2
    assert "b" in _rows(document.content)[1]


def test_emit_004_token_text_is_escaped_exactly_once(tmp_path: Path) -> None:
    document = _render(tmp_path, 'String s = "<a & b>"; // x < y\n')

    assert "&lt;a &amp; b&gt;" in document.content
    assert "x &lt; y" in document.content
    assert "&amp;lt;" not in document.content
    assert "&amp;amp;" not in document.content


def test_emit_005_imported_type_links_to_its_document(tmp_path: Path) -> None:
    document = _render(
        tmp_path,
        "package client;\nimport a.Foo;\nclass Client { Foo foo; }\n",
    )

    assert (
        '<a class="xref" href="../a/Foo.html"><span class="identifier">Foo</span></a>'
        in document.content
    )
    assert document.link_count == 2


def test_emit_006_qualified_name_is_linked_as_a_unit(tmp_path: Path) -> None:
    document = _render(tmp_path, "package client;\nclass Client { a.Foo foo; }\n")

    assert (
        '<a class="xref" href="../a/Foo.html"><span class="identifier">a</span>'
        '<span class="punctuation">.</span><span class="identifier">Foo</span></a>'
        in document.content
    )


def test_emit_007_unresolved_identifiers_render_as_plain_spans(tmp_path: Path) -> None:
    document = _render(tmp_path, "package client;\nclass Client { Unknown u; }\n")

    assert '<span class="identifier">Unknown</span>' in document.content
    assert "Unknown</a>" not in document.content


def test_emit_008_ambiguous_reference_is_recorded_and_not_linked(
    tmp_path: Path,
) -> None:
    document = _render(
        tmp_path,
        "package client;\nimport x.*;\nimport y.*;\nclass Client { Bar bar; }\n",
    )

    assert "Bar</a>" not in document.content
    assert len(document.ambiguous) == 1
    reference = document.ambiguous[0]
    assert (reference.name, reference.line) == ("Bar", 4)
    assert reference.candidates == ("x.Bar", "y.Bar")


def test_emit_009_block_comment_spanning_lines_is_split_per_row(
    tmp_path: Path,
) -> None:
    document = _render(tmp_path, "/* one\ntwo */ int x;\n")

    rows = _rows(document.content)
    assert len(rows) == 2
    assert rows[0] == '<span class="block_comment">/* one</span>'
    assert rows[1].startswith('<span class="block_comment">two */</span>')


def test_emit_010_header_and_footer_follow_configuration(tmp_path: Path) -> None:
    config = EmitterConfig(
        header='<div id="hdr">Header</div>',
        footer="Generated footer",
        show_footer=False,
        revision="r42",
    )

    document = _render(tmp_path, "int a;\n", config=config)

    assert '<div id="hdr">Header</div>' in document.content
    assert "Generated footer" not in document.content
    assert '<div class="revision">Revision: r42</div>' in document.content


def test_emit_011_stylesheet_link_is_relative_to_destination_root(
    tmp_path: Path,
) -> None:
    document = _render(tmp_path, "package p.q;\nclass Client {}\n")

    assert 'href="../../stylesheet.css"' in document.content
    assert "<title>p.q.Client</title>" in document.content


def test_emit_012_external_reference_to_url_base(tmp_path: Path) -> None:
    config = EmitterConfig(
        external=ExternalReferenceConfig(
            enabled=True, base_directory="https://docs.example.com/api/"
        )
    )

    document = _render(
        tmp_path,
        "package client;\nimport java.util.List;\nclass Client { List l; }\n",
        config=config,
    )

    assert (
        '<a class="external" href="https://docs.example.com/api/java/util/List.html">'
        in document.content
    )


def test_emit_013_external_reference_to_directory_base(tmp_path: Path) -> None:
    config = EmitterConfig(
        external=ExternalReferenceConfig(
            enabled=True, base_directory=str(tmp_path / "javadoc")
        )
    )

    document = _render(
        tmp_path,
        "package client;\nimport java.util.List;\nclass Client { List l; }\n",
        config=config,
    )

    assert 'href="../../javadoc/java/util/List.html"' in document.content


def test_emit_014_link_without_common_ancestor_fails_the_document(
    tmp_path: Path,
) -> None:
    config = EmitterConfig(
        external=ExternalReferenceConfig(enabled=True, base_directory="javadoc")
    )

    with pytest.raises(EmissionError):
        _render(
            tmp_path,
            "package client;\nimport java.util.List;\nclass Client { List l; }\n",
            config=config,
        )
