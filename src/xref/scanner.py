# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Discover source files below the configured source roots."""

import logging
import os
from pathlib import Path

import pathspec

from xref.config import DEFAULT_EXCLUDES

logger = logging.getLogger(__name__)


class SourceMatcher:
    """Match root-relative paths against include and exclude patterns."""

    def __init__(
        self, includes: pathspec.GitIgnoreSpec, excludes: pathspec.GitIgnoreSpec
    ) -> None:
        """Initialize matcher.

        Args:
            includes: Compiled patterns a file must match.
            excludes: Compiled patterns removing files or whole directories.
        """
        self._includes = includes
        self._excludes = excludes

    @classmethod
    def from_patterns(
        cls, includes: tuple[str, ...], excludes: tuple[str, ...]
    ) -> "SourceMatcher":
        """Compile gitignore-style patterns; VCS metadata is always excluded.

        Args:
            includes: Patterns selecting source files.
            excludes: Patterns removing source files.

        Returns:
            Configured matcher.
        """
        return cls(
            includes=pathspec.GitIgnoreSpec.from_lines(includes),
            excludes=pathspec.GitIgnoreSpec.from_lines([*DEFAULT_EXCLUDES, *excludes]),
        )

    def is_excluded_dir(self, relative_path: str) -> bool:
        """Check whether a directory and everything below it is skipped."""
        normalized = relative_path.replace(os.sep, "/").strip("/")
        if not normalized:
            return False
        return self._excludes.match_file(f"{normalized}/")

    def matches(self, relative_path: str) -> bool:
        """Check whether a file is selected.

        Args:
            relative_path: Root-relative POSIX path.

        Returns:
            True when the file is included and not excluded.
        """
        normalized = relative_path.replace(os.sep, "/").strip("/")
        if not normalized:
            return False
        if not self._includes.match_file(normalized):
            return False
        return not self._excludes.match_file(normalized)


def discover_sources(source_root: Path, matcher: SourceMatcher) -> list[Path]:
    """List selected source files below one root in deterministic order.

    Args:
        source_root: Directory to scan.
        matcher: Include/exclude matcher.

    Returns:
        Sorted absolute source file paths.

    Raises:
        NotADirectoryError: If the root is not a directory.
    """
    root = source_root.resolve()
    if not root.is_dir():
        raise NotADirectoryError(f"Source directory does not exist: {root}")

    selected: list[Path] = []
    skipped = 0
    queue: list[Path] = [root]
    while queue:
        current = queue.pop(0)
        for child in sorted(current.iterdir(), key=lambda item: item.name):
            relative = child.relative_to(root).as_posix()
            if child.is_dir():
                if matcher.is_excluded_dir(relative):
                    skipped += 1
                    continue
                queue.append(child)
                continue
            if matcher.matches(relative):
                selected.append(child)
            else:
                skipped += 1

    logger.info(
        f"Source discovery completed (root={root} files={len(selected)} skipped={skipped})"
    )
    return sorted(selected)
