# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Render token streams as line-numbered, cross-linked HTML documents."""

import html
import logging
import re
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from urllib.parse import urlparse

from xref.config import EmitterConfig
from xref.model import (
    AmbiguousReference,
    ExternalReference,
    ResolvedTo,
    Unresolved,
    XrefError,
)
from xref.paths import NoCommonAncestorError, relative_link, relative_path
from xref.resolver import ReferenceResolver
from xref.tokenizer import Token

logger = logging.getLogger(__name__)

_LINE_BREAK_RE = re.compile(r"(\r\n|\r|\n)")


class EmissionError(XrefError):
    """Represent a document that could not be rendered or written."""


@dataclass(frozen=True)
class EmittedDocument:
    """Represent one fully rendered document.

    Attributes:
        source_path: Source file the document was rendered from.
        output_path: Target location of the document.
        content: Complete HTML text.
        line_count: Number of source line rows.
        link_count: Number of hyperlinks attached to identifiers.
        ambiguous: Ambiguous references met while rendering.
    """

    source_path: Path
    output_path: Path
    content: str
    line_count: int
    link_count: int
    ambiguous: tuple[AmbiguousReference, ...]


class HtmlEmitter:
    """Render one source file per call into a complete HTML document."""

    def __init__(self, config: EmitterConfig, destination: Path) -> None:
        """Initialize emitter.

        Args:
            config: Immutable page decoration settings.
            destination: Root directory of generated documents.
        """
        self._config = config
        self._destination = destination

    def render(
        self,
        tokens: list[Token],
        resolver: ReferenceResolver,
        source_path: Path,
        output_path: Path,
    ) -> EmittedDocument:
        """Render a token stream as an HTML document.

        Args:
            tokens: Complete token stream of the source file.
            resolver: Resolver bound to the file's header context.
            source_path: Source file path.
            output_path: Location the document will be written to.

        Returns:
            Rendered document.

        Raises:
            EmissionError: If a required link cannot be computed.
        """
        renderer = _DocumentRenderer(
            config=self._config,
            resolver=resolver,
            source_path=source_path,
            output_path=output_path,
        )
        try:
            rows = renderer.render_rows(tokens)
            stylesheet_href = (
                relative_path(output_path.parent, self._destination)
                + self._config.stylesheet
            )
        except NoCommonAncestorError as exc:
            raise EmissionError(f"Cannot link from {output_path}: {exc}") from exc

        content = self._assemble(
            title=_document_title(resolver, source_path),
            stylesheet_href=stylesheet_href,
            rows=rows,
        )
        return EmittedDocument(
            source_path=source_path,
            output_path=output_path,
            content=content,
            line_count=len(rows),
            link_count=renderer.link_count,
            ambiguous=tuple(renderer.ambiguous),
        )

    def _assemble(self, title: str, stylesheet_href: str, rows: list[str]) -> str:
        config = self._config
        parts = [
            "<!DOCTYPE html>",
            '<html lang="en">',
            "<head>",
            f'<meta charset="{html.escape(config.output_encoding)}">',
            f"<title>{html.escape(title)}</title>",
            f'<link rel="stylesheet" type="text/css" href="{html.escape(stylesheet_href)}">',
            "</head>",
            "<body>",
        ]
        if config.show_header and config.header:
            parts.append(config.header)
        if config.revision:
            parts.append(
                f'<div class="revision">Revision: {html.escape(config.revision)}</div>'
            )
        parts.append('<table class="source">')
        parts.append("<tbody>")
        for number, row in enumerate(rows, start=1):
            parts.append(
                f'<tr id="line{number}"><td class="line-number">'
                f'<a href="#line{number}">{number}</a></td>'
                f'<td class="code">{row}</td></tr>'
            )
        parts.append("</tbody>")
        parts.append("</table>")
        if config.show_footer and config.footer:
            parts.append(f'<div class="footer">{config.footer}</div>')
        parts.append("</body>")
        parts.append("</html>")
        return "\n".join(parts) + "\n"


class _DocumentRenderer:
    """Turn the tokens of one file into per-line HTML fragments."""

    def __init__(
        self,
        config: EmitterConfig,
        resolver: ReferenceResolver,
        source_path: Path,
        output_path: Path,
    ) -> None:
        self._config = config
        self._resolver = resolver
        self._source_path = source_path
        self._output_path = output_path
        self._rows: list[str] = []
        self._current: list[str] = []
        self.ambiguous: list[AmbiguousReference] = []
        self.link_count = 0

    def render_rows(self, tokens: list[Token]) -> list[str]:
        index = 0
        count = len(tokens)
        while index < count:
            token = tokens[index]
            if token.kind == "newline":
                self._close_row()
                index += 1
                continue
            if token.kind == "identifier":
                index = self._render_identifier_chain(tokens, index)
                continue
            self._render_plain(token)
            index += 1
        if self._current:
            self._close_row()
        return self._rows

    def _render_identifier_chain(self, tokens: list[Token], start: int) -> int:
        """Render ``a.b.C`` starting at ``start`` and return the next index."""
        end = start + 1
        while (
            end + 1 < len(tokens)
            and tokens[end].kind == "punctuation"
            and tokens[end].text == "."
            and tokens[end + 1].kind == "identifier"
        ):
            end += 2
        names = [token.text for token in tokens[start:end:2]]

        for size in range(len(names), 1, -1):
            result = self._resolver.resolve(".".join(names[:size]))
            if isinstance(result, (ResolvedTo, ExternalReference)):
                linked_end = start + 2 * size - 1
                self._render_link(tokens[start:linked_end], result)
                for token in tokens[linked_end:end]:
                    self._render_plain(token)
                return end

        first = tokens[start]
        result = self._resolver.resolve(first.text)
        if isinstance(result, Unresolved):
            if result.ambiguous:
                self.ambiguous.append(
                    AmbiguousReference(
                        source_path=self._source_path,
                        line=first.start_line,
                        name=first.text,
                        candidates=result.candidates,
                    )
                )
            self._render_plain(first)
        else:
            self._render_link([first], result)
        for token in tokens[start + 1 : end]:
            self._render_plain(token)
        return end

    def _render_link(
        self, tokens: list[Token], result: ResolvedTo | ExternalReference
    ) -> None:
        href = self._href(result)
        inner = "".join(_span(token.kind, token.text) for token in tokens)
        css_class = "external" if isinstance(result, ExternalReference) else "xref"
        self._current.append(
            f'<a class="{css_class}" href="{html.escape(href)}">{inner}</a>'
        )
        self.link_count += 1

    def _render_plain(self, token: Token) -> None:
        if "\n" not in token.text and "\r" not in token.text:
            self._current.append(_span(token.kind, token.text))
            return
        for piece in _LINE_BREAK_RE.split(token.text):
            if not piece:
                continue
            if piece in ("\r\n", "\r", "\n"):
                self._close_row()
                continue
            self._current.append(_span(token.kind, piece))

    def _close_row(self) -> None:
        self._rows.append("".join(self._current))
        self._current = []

    def _href(self, result: ResolvedTo | ExternalReference) -> str:
        if isinstance(result, ExternalReference):
            return self._external_href(result.qualified_name)
        entry = result.entry
        href = relative_link(self._output_path, entry.output_path)
        if entry.output_path.stem != entry.simple_name:
            href += f"#line{entry.line}"
        return href

    def _external_href(self, qualified_name: str) -> str:
        base = self._config.external.base_directory or ""
        page = PurePosixPath(*qualified_name.split(".")).as_posix() + ".html"
        if urlparse(base).scheme in {"http", "https", "file"}:
            return f"{base.rstrip('/')}/{page}"
        return relative_path(self._output_path.parent, base) + page


def _span(kind: str, text: str) -> str:
    return f'<span class="{kind}">{html.escape(text, quote=False)}</span>'


def _document_title(resolver: ReferenceResolver, source_path: Path) -> str:
    package_name = resolver.context.package_name
    if package_name:
        return f"{package_name}.{source_path.stem}"
    return source_path.stem
