# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Relative link computation between output locations."""

import logging
from pathlib import PurePath

from xref.model import XrefError

logger = logging.getLogger(__name__)


class NoCommonAncestorError(XrefError):
    """Represent two paths that cannot be linked relatively."""


def relative_path(from_dir: str | PurePath, to_dir: str | PurePath) -> str:
    """Compute the shortest relative path from one directory to another.

    Both arguments are treated as directories; no filesystem access happens.
    Given ``/foo/bar/baz/oink`` and ``/foo/bar/schmoo`` the result is
    ``"../../schmoo/"``.

    Args:
        from_dir: Directory the link is relative to.
        to_dir: Directory the link points into.

    Returns:
        ``../`` segments up to the common ancestor followed by the segments
        down into ``to_dir``, each ending with ``/``.

    Raises:
        NoCommonAncestorError: If the paths share no ancestor.
    """
    source = PurePath(from_dir)
    target = PurePath(to_dir)
    target_chain = [target, *target.parents]

    upward_steps = 0
    for ancestor in [source, *source.parents]:
        if ancestor in target_chain:
            depth = target_chain.index(ancestor)
            descending = [part.name for part in reversed(target_chain[:depth])]
            return "../" * upward_steps + "".join(f"{name}/" for name in descending)
        upward_steps += 1

    raise NoCommonAncestorError(f"{from_dir} and {to_dir} have no common parent.")


def relative_link(from_file: str | PurePath, to_file: str | PurePath) -> str:
    """Compute a link from one generated file to another.

    Args:
        from_file: Document containing the link.
        to_file: Document the link points at.

    Returns:
        Relative URL path ending in the target file name.

    Raises:
        NoCommonAncestorError: If the paths share no ancestor.
    """
    source = PurePath(from_file)
    target = PurePath(to_file)
    return relative_path(source.parent, target.parent) + target.name
