# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""All-or-nothing writes of generated pages."""

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


def write_atomic(path: Path, content: str, encoding: str) -> None:
    """Write a document through a temporary file and an atomic replace.

    Characters the output encoding cannot represent are written as HTML
    character references.

    Args:
        path: Target file path.
        content: Complete document text.
        encoding: Output character encoding.

    Raises:
        OSError: If directory creation or file writing fails.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(f".{path.name}.{os.getpid()}.tmp")
    try:
        with tmp_path.open(
            "w", encoding=encoding, errors="xmlcharrefreplace", newline="\n"
        ) as handle:
            handle.write(content)
        tmp_path.replace(path)
    except OSError:
        if tmp_path.exists():
            tmp_path.unlink()
        raise
    logger.debug(f"Wrote document (path={path})")


def read_source(path: Path, encoding: str) -> str:
    """Read a source file without newline translation.

    Args:
        path: Source file path.
        encoding: Input character encoding.

    Returns:
        Exact file content.

    Raises:
        OSError: If the file cannot be read.
        UnicodeDecodeError: If the content does not match the encoding.
    """
    with path.open("r", encoding=encoding, newline="") as handle:
        return handle.read()
