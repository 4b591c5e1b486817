"""Shared dataclasses passed between the loader, resolver, and renderer."""

from __future__ import annotations

import dataclasses as dc
import datetime as dt  # noqa: TC003 - used for runtime type metadata
import typing as typ
from pathlib import Path, PurePosixPath

from blog_pages._constants import OUTPUT_SUFFIX


@dc.dataclass(frozen=True, slots=True)
class MenuEntry:
    """A navigation link registered in a named menu.

    Attributes
    ----------
    menu : str
        Name of the menu the entry belongs to (for example ``"main"``).
    name : str
        Label rendered in the navigation region.
    weight : int
        Ordering hint; lower weights render first.
    url : str
        Site-root relative target (``"about.html"``) or an absolute URL.
    index : int
        Insertion position used to break ties between equal weights.
    source : str or None
        Document path that declared the entry, ``None`` for config entries.
    """

    menu: str
    name: str
    weight: int
    url: str
    index: int = 0
    source: str | None = None


@dc.dataclass(frozen=True, slots=True)
class CommentConfig:
    """Comment thread parameters declared by a single document."""

    provider: str
    identifier: str


@dc.dataclass(frozen=True, slots=True)
class MenuDeclaration:
    """A ``menu.<name>`` block as written in front matter."""

    menu: str
    name: str
    weight: int


@dc.dataclass(frozen=True, slots=True)
class Document:
    """One content file plus its resolved metadata."""

    path: str
    body: str
    title: str
    date: dt.datetime | None = None
    draft: bool = False
    menu: tuple[MenuDeclaration, ...] = ()
    show_toc: bool = False
    comments: CommentConfig | None = None
    keywords: tuple[str, ...] = ()
    image: str | None = None
    image_credit: str | None = None
    description: str = ""
    extra: dict[str, typ.Any] = dc.field(default_factory=dict)
    discovery_index: int = 0

    @property
    def output_name(self) -> str:
        """Return the site-root relative output path for this document."""
        return PurePosixPath(self.path).with_suffix(OUTPUT_SUFFIX).as_posix()


@dc.dataclass(frozen=True, slots=True)
class TocEntry:
    """A heading collected for the table of contents."""

    level: int
    label: str
    anchor: str


@dc.dataclass(frozen=True, slots=True)
class RenderedPage:
    """A document rendered into its final HTML shell."""

    document: Document
    html: str
    output_path: Path
    toc: tuple[TocEntry, ...] = ()


__all__ = [
    "CommentConfig",
    "Document",
    "MenuDeclaration",
    "MenuEntry",
    "RenderedPage",
    "TocEntry",
]
