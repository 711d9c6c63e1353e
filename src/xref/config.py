# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Immutable configuration values for one cross-reference run."""

import codecs
from dataclasses import dataclass, field
from pathlib import Path

from xref.model import XrefError

NOTICE = (
    "This page was automatically generated by "
    '<a href="https://pypi.org/project/xref/">xref</a>'
)

DEFAULT_INCLUDES: tuple[str, ...] = ("**/*.java",)
DEFAULT_EXCLUDES: tuple[str, ...] = (
    ".git/",
    ".svn/",
    ".hg/",
    "CVS/",
    ".bzr/",
    "_darcs/",
    "**/*~",
    "**/.#*",
    "**/.DS_Store",
)


class ConfigError(XrefError, ValueError):
    """Represent an invalid configuration value."""


@dataclass(frozen=True)
class ExternalReferenceConfig:
    """Describe links to an external documentation tree.

    Attributes:
        enabled: Attach external links for imported types missing from the
            local symbol table.
        base_directory: Root of the external tree; a directory used for
            relative-path computation, or an absolute URL.
    """

    enabled: bool = False
    base_directory: str | None = None

    def __post_init__(self) -> None:
        if self.enabled and not self.base_directory:
            raise ConfigError("External references require a base directory")


@dataclass(frozen=True)
class EmitterConfig:
    """Describe page decoration handed to the HTML emitter.

    Attributes:
        header: Markup inserted verbatim before the source table.
        footer: Markup inserted verbatim after the source table.
        show_header: Whether the header is rendered.
        show_footer: Whether the footer is rendered.
        revision: Optional revision label shown in every page.
        output_encoding: Charset declared by generated pages.
        stylesheet: Stylesheet path relative to the destination root.
        external: External documentation link settings.
    """

    header: str = ""
    footer: str = NOTICE
    show_header: bool = True
    show_footer: bool = True
    revision: str | None = None
    output_encoding: str = "utf-8"
    stylesheet: str = "stylesheet.css"
    external: ExternalReferenceConfig = field(default_factory=ExternalReferenceConfig)


@dataclass(frozen=True)
class XrefConfig:
    """Describe one cross-reference run.

    Attributes:
        source_dirs: Source roots to cross-reference.
        destination: Output root directory.
        input_encoding: Encoding used to read source files.
        output_encoding: Encoding used to write generated pages.
        includes: Gitignore-style patterns selecting source files.
        excludes: Gitignore-style patterns removing source files.
        header: Markup inserted before every source table.
        footer: Markup inserted after every source table.
        show_header: Whether headers are rendered.
        show_footer: Whether footers are rendered.
        revision: Optional revision label.
        external: External documentation link settings.
        window_title: Browser title of index pages.
        doc_title: Heading of the overview page.
        bottom: Markup inserted at the bottom of index pages.
        max_workers: Number of emission worker threads.
        fail_fast: Abort the run on the first file failure.
    """

    source_dirs: tuple[Path, ...]
    destination: Path
    input_encoding: str = "utf-8"
    output_encoding: str = "utf-8"
    includes: tuple[str, ...] = DEFAULT_INCLUDES
    excludes: tuple[str, ...] = ()
    header: str = ""
    footer: str = NOTICE
    show_header: bool = True
    show_footer: bool = True
    revision: str | None = None
    external: ExternalReferenceConfig = field(default_factory=ExternalReferenceConfig)
    window_title: str = "Source Cross Reference"
    doc_title: str = "Source Cross Reference"
    bottom: str = ""
    max_workers: int = 4
    fail_fast: bool = False

    def __post_init__(self) -> None:
        """Validate configuration values.

        Raises:
            ConfigError: If a value is out of range or unknown.
        """
        if not self.source_dirs:
            raise ConfigError("At least one source directory is required")
        if self.max_workers <= 0:
            raise ConfigError("max_workers must be > 0")
        if not self.includes:
            raise ConfigError("At least one include pattern is required")
        for encoding in (self.input_encoding, self.output_encoding):
            try:
                codecs.lookup(encoding)
            except LookupError as exc:
                raise ConfigError(f"Unknown encoding: {encoding}") from exc

    def emitter_config(self) -> EmitterConfig:
        """Return the page decoration subset of this configuration."""
        return EmitterConfig(
            header=self.header,
            footer=self.footer,
            show_header=self.show_header,
            show_footer=self.show_footer,
            revision=self.revision,
            output_encoding=self.output_encoding,
            external=self.external,
        )
