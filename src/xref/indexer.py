# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Write package, overview and all-types navigation pages."""

import html
import logging
from dataclasses import dataclass
from pathlib import Path

from xref.model import TypeEntry
from xref.output import write_atomic
from xref.paths import relative_link
from xref.symbols import SymbolTable, package_dir

logger = logging.getLogger(__name__)

DEFAULT_PACKAGE_DIR = "default-package"
DEFAULT_PACKAGE_LABEL = "(default package)"

STYLESHEET = """\
body { font-family: sans-serif; background: #ffffff; color: #000000; }
table.source { border-collapse: collapse; font-family: monospace; }
td.line-number { text-align: right; padding-right: 0.8em; color: #808080; user-select: none; }
td.line-number a { color: inherit; text-decoration: none; }
td.code { white-space: pre; }
span.keyword { color: #7f0055; font-weight: bold; }
span.string_literal, span.char_literal { color: #2a00ff; }
span.number { color: #116644; }
span.line_comment, span.block_comment { color: #3f7f5f; }
a.xref, a.external { color: inherit; text-decoration: underline; }
div.footer, div.bottom { margin-top: 1em; font-size: small; }
"""


@dataclass(frozen=True)
class IndexSummary:
    """Represent counters of one indexing pass."""

    packages: int
    types: int
    pages_written: int


class DirectoryIndexer:
    """Write navigation pages for every entry of the symbol table."""

    def __init__(
        self,
        destination: Path,
        output_encoding: str = "utf-8",
        window_title: str = "Source Cross Reference",
        doc_title: str = "Source Cross Reference",
        bottom: str = "",
    ) -> None:
        """Initialize indexer.

        Args:
            destination: Root directory of generated documents.
            output_encoding: Encoding of written pages.
            window_title: Browser title of index pages.
            doc_title: Heading of the overview page.
            bottom: Markup inserted verbatim at the bottom of every page.
        """
        self._destination = destination
        self._output_encoding = output_encoding
        self._window_title = window_title
        self._doc_title = doc_title
        self._bottom = bottom

    def overview_path(self) -> Path:
        return self._destination / "index.html"

    def all_types_path(self) -> Path:
        return self._destination / "allclasses.html"

    def stylesheet_path(self) -> Path:
        return self._destination / "stylesheet.css"

    def package_index_path(self, package_name: str) -> Path:
        """Return the listing page location of a package."""
        if not package_name:
            return self._destination / DEFAULT_PACKAGE_DIR / "index.html"
        return package_dir(self._destination, package_name) / "index.html"

    def render_pages(
        self, table: SymbolTable, documents: frozenset[Path] | None = None
    ) -> dict[Path, str]:
        """Render every navigation page without writing it.

        Args:
            table: Complete symbol table.
            documents: Documents actually written; types whose document is
                missing are left out. ``None`` lists every type.

        Returns:
            Page path to page content mapping.
        """
        by_package = _group_by_package(table, documents)
        pages: dict[Path, str] = {}
        for package_name, entries in by_package.items():
            path = self.package_index_path(package_name)
            pages[path] = self._render_package(path, package_name, entries)
        pages[self.all_types_path()] = self._render_all_types(
            [entry for entries in by_package.values() for entry in entries]
        )
        pages[self.overview_path()] = self._render_overview(by_package)
        return pages

    def write(
        self, table: SymbolTable, documents: frozenset[Path] | None = None
    ) -> IndexSummary:
        """Write all navigation pages and the stylesheet.

        Args:
            table: Complete symbol table.
            documents: Documents actually written; see ``render_pages``.

        Returns:
            Indexing counters.

        Raises:
            OSError: If a page cannot be written.
        """
        by_package = _group_by_package(table, documents)
        pages = self.render_pages(table, documents)
        for path, content in pages.items():
            write_atomic(path, content, self._output_encoding)
        write_atomic(self.stylesheet_path(), STYLESHEET, self._output_encoding)
        summary = IndexSummary(
            packages=len(by_package),
            types=sum(len(entries) for entries in by_package.values()),
            pages_written=len(pages) + 1,
        )
        logger.info(
            f"Index pages written (packages={summary.packages} types={summary.types} "
            f"pages={summary.pages_written})"
        )
        return summary

    def _render_package(
        self, page_path: Path, package_name: str, entries: list[TypeEntry]
    ) -> str:
        entries = sorted(entries, key=lambda entry: entry.simple_name)
        items = [
            f'<li><a href="{html.escape(_entry_href(page_path, entry))}">'
            f"{html.escape(entry.simple_name)}</a></li>"
            for entry in entries
        ]
        overview_href = relative_link(page_path, self.overview_path())
        body = [
            f"<h1>{html.escape(_package_label(package_name))}</h1>",
            "<ul>",
            *items,
            "</ul>",
            f'<p><a href="{html.escape(overview_href)}">Overview</a></p>',
        ]
        return self._page(page_path, _package_label(package_name), body)

    def _render_all_types(self, entries: list[TypeEntry]) -> str:
        page_path = self.all_types_path()
        entries = sorted(entries, key=lambda entry: (entry.simple_name, entry.qualified_name))
        items = [
            f'<li><a href="{html.escape(_entry_href(page_path, entry))}" '
            f'title="{html.escape(entry.qualified_name)}">'
            f"{html.escape(entry.simple_name)}</a></li>"
            for entry in entries
        ]
        body = ["<h1>All Types</h1>", "<ul>", *items, "</ul>"]
        return self._page(page_path, "All Types", body)

    def _render_overview(self, by_package: dict[str, list[TypeEntry]]) -> str:
        page_path = self.overview_path()
        items = []
        for package_name, entries in by_package.items():
            href = relative_link(page_path, self.package_index_path(package_name))
            items.append(
                f'<li><a href="{html.escape(href)}">'
                f"{html.escape(_package_label(package_name))}</a> "
                f"({len(entries)})</li>"
            )
        all_types_href = relative_link(page_path, self.all_types_path())
        body = [
            f"<h1>{html.escape(self._doc_title)}</h1>",
            "<h2>Packages</h2>",
            "<ul>",
            *items,
            "</ul>",
            f'<p><a href="{html.escape(all_types_href)}">All Types</a></p>',
        ]
        return self._page(page_path, self._window_title, body)

    def _page(self, page_path: Path, title: str, body: list[str]) -> str:
        stylesheet_href = relative_link(page_path, self.stylesheet_path())
        parts = [
            "<!DOCTYPE html>",
            '<html lang="en">',
            "<head>",
            f'<meta charset="{html.escape(self._output_encoding)}">',
            f"<title>{html.escape(title)}</title>",
            f'<link rel="stylesheet" type="text/css" href="{html.escape(stylesheet_href)}">',
            "</head>",
            "<body>",
            *body,
        ]
        if self._bottom:
            parts.append(f'<div class="bottom">{self._bottom}</div>')
        parts.extend(["</body>", "</html>"])
        return "\n".join(parts) + "\n"


def _group_by_package(
    table: SymbolTable, documents: frozenset[Path] | None
) -> dict[str, list[TypeEntry]]:
    """Group listed entries by package, in sorted package order."""
    by_package: dict[str, list[TypeEntry]] = {}
    for package_name in table.packages:
        entries = [
            entry
            for entry in table.package(package_name)
            if documents is None or entry.output_path in documents
        ]
        if entries:
            by_package[package_name] = entries
    return by_package


def _entry_href(page_path: Path, entry: TypeEntry) -> str:
    href = relative_link(page_path, entry.output_path)
    if entry.output_path.stem != entry.simple_name:
        href += f"#line{entry.line}"
    return href


def _package_label(package_name: str) -> str:
    return package_name or DEFAULT_PACKAGE_LABEL
