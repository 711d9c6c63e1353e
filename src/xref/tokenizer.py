# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Lossless lexical tokenizer for Java source text."""

import logging
import re
from dataclasses import dataclass
from typing import Literal

logger = logging.getLogger(__name__)

TokenKind = Literal[
    "keyword",
    "identifier",
    "string_literal",
    "char_literal",
    "number",
    "line_comment",
    "block_comment",
    "whitespace",
    "newline",
    "punctuation",
    "other",
]

TRIVIA_KINDS: frozenset[str] = frozenset(
    {"whitespace", "newline", "line_comment", "block_comment"}
)

KEYWORDS: frozenset[str] = frozenset(
    {
        "abstract", "assert", "boolean", "break", "byte", "case", "catch",
        "char", "class", "const", "continue", "default", "do", "double",
        "else", "enum", "extends", "final", "finally", "float", "for", "goto",
        "if", "implements", "import", "instanceof", "int", "interface", "long",
        "native", "new", "package", "private", "protected", "public", "return",
        "short", "static", "strictfp", "super", "switch", "synchronized",
        "this", "throw", "throws", "transient", "try", "void", "volatile",
        "while", "true", "false", "null",
    }
)

_WHITESPACE_RE = re.compile(r"[ \t\f\v]+")
_IDENTIFIER_RE = re.compile(r"(?:[^\W\d]|\$)(?:\w|\$)*")
_NUMBER_RE = re.compile(
    r"0[xX][0-9a-fA-F_]*(?:\.[0-9a-fA-F_]*)?(?:[pP][+-]?[0-9_]+)?[lLfFdD]?"
    r"|0[bB][01_]+[lL]?"
    r"|(?:[0-9][0-9_]*(?:\.[0-9_]*)?|\.[0-9][0-9_]*)"
    r"(?:[eE][+-]?[0-9][0-9_]*)?[lLfFdD]?"
)
_PUNCTUATION_RE = re.compile(
    r">>>=|<<=|>>=|>>>|\.\.\.|->|::|\+\+|--|&&|\|\||<<|>>"
    r"|[=!<>+\-*/&|^%]="
    r"|[(){}\[\];,.@=<>!~?:+\-*/&|^%]"
)
_LINE_END_CHARS = "\r\n"


@dataclass(frozen=True)
class Token:
    """Represent one lexical token.

    Attributes:
        kind: Syntactic category of the token.
        text: Exact source text covered by the token.
        start_line: Line of the first character (1-based).
        start_column: Column of the first character (1-based).
    """

    kind: TokenKind
    text: str
    start_line: int
    start_column: int


def tokenize(source: str) -> list[Token]:
    """Split source text into an exhaustive, ordered token stream.

    Concatenating the ``text`` of the returned tokens reproduces ``source``
    exactly. Malformed input never raises; characters that belong to no
    category become single-character ``other`` tokens.

    Args:
        source: Raw source text.

    Returns:
        Ordered token list.
    """
    tokens: list[Token] = []
    position = 0
    line = 1
    column = 1
    length = len(source)
    other_count = 0

    while position < length:
        kind, end = _scan_token(source, position)
        text = source[position:end]
        if kind == "identifier" and text in KEYWORDS:
            kind = "keyword"
        if kind == "other":
            other_count += 1
        tokens.append(
            Token(kind=kind, text=text, start_line=line, start_column=column)
        )
        line, column = _advance(text, line, column)
        position = end

    if other_count:
        logger.debug(f"Unrecognized characters kept as tokens (count={other_count})")
    return tokens


def _scan_token(source: str, position: int) -> tuple[TokenKind, int]:
    """Classify the token starting at ``position`` and find its end."""
    char = source[position]

    if char == "\r":
        if source.startswith("\r\n", position):
            return "newline", position + 2
        return "newline", position + 1
    if char == "\n":
        return "newline", position + 1

    match = _WHITESPACE_RE.match(source, position)
    if match:
        return "whitespace", match.end()

    if source.startswith("//", position):
        return "line_comment", _line_end(source, position)
    if source.startswith("/*", position):
        close = source.find("*/", position + 2)
        if close == -1:
            return "block_comment", len(source)
        return "block_comment", close + 2

    if source.startswith('"""', position):
        return "string_literal", _text_block_end(source, position)
    if char == '"':
        return "string_literal", _quoted_end(source, position, '"')
    if char == "'":
        return "char_literal", _quoted_end(source, position, "'")

    if char.isdigit() or (char == "." and source[position + 1 : position + 2].isdigit()):
        match = _NUMBER_RE.match(source, position)
        if match and match.end() > position:
            return "number", match.end()

    match = _IDENTIFIER_RE.match(source, position)
    if match:
        return "identifier", match.end()

    match = _PUNCTUATION_RE.match(source, position)
    if match:
        return "punctuation", match.end()

    return "other", position + 1


def _line_end(source: str, position: int) -> int:
    """Return the index of the next line terminator, or end of input."""
    for index in range(position, len(source)):
        if source[index] in _LINE_END_CHARS:
            return index
    return len(source)


def _quoted_end(source: str, position: int, quote: str) -> int:
    """Find the end of a string or char literal.

    The literal ends after the closing quote. An unterminated literal stops
    before the line terminator so the newline stays a separate token.
    """
    index = position + 1
    length = len(source)
    while index < length:
        char = source[index]
        if char in _LINE_END_CHARS:
            return index
        if char == "\\":
            if index + 1 < length and source[index + 1] not in _LINE_END_CHARS:
                index += 2
                continue
            index += 1
            continue
        if char == quote:
            return index + 1
        index += 1
    return length


def _text_block_end(source: str, position: int) -> int:
    """Find the end of a triple-quoted text block, which may span lines."""
    index = position + 3
    length = len(source)
    while index < length:
        if source[index] == "\\":
            index += 2
            continue
        if source.startswith('"""', index):
            return index + 3
        index += 1
    return length


def _advance(text: str, line: int, column: int) -> tuple[int, int]:
    """Move a line/column cursor past ``text``."""
    breaks = 0
    last_break_end = -1
    index = 0
    length = len(text)
    while index < length:
        char = text[index]
        if char == "\r":
            if index + 1 < length and text[index + 1] == "\n":
                index += 1
            breaks += 1
            last_break_end = index + 1
        elif char == "\n":
            breaks += 1
            last_break_end = index + 1
        index += 1
    if breaks == 0:
        return line, column + length
    return line + breaks, length - last_break_end + 1
