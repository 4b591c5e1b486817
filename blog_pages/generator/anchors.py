"""Assign stable anchors to section headings and collect the table of contents."""

from __future__ import annotations

import re
import typing as typ

from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

from blog_pages.models import TocEntry

if typ.TYPE_CHECKING:
    from xml.etree.ElementTree import Element

    from markdown import Markdown
else:  # pragma: no cover - type-checking fallback
    Markdown = typ.Any
    Element = typ.Any

TOC_LEVELS = {"h2": 2, "h3": 3}


def slugify(title: str) -> str:
    """Convert heading text into a lowercase hyphen-separated slug."""
    slug = re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-")
    return slug or "section"


def unique_slug(base: str, used: set[str]) -> str:
    """Return a unique slug, appending numeric suffixes and mutating ``used``."""
    candidate = base
    suffix = 2
    while candidate in used:
        candidate = f"{base}-{suffix}"
        suffix += 1
    used.add(candidate)
    return candidate


class HeadingAnchorExtension(Extension):
    """Give ``<h2>``/``<h3>`` headings unique ids and record them in order.

    Each instance collects the entries of the most recent conversion in
    :attr:`entries`; create one per ``markdown.Markdown`` instance.
    """

    def __init__(self) -> None:
        super().__init__()
        self.entries: list[TocEntry] = []

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register the heading-anchor treeprocessor on the Markdown instance."""
        md.registerExtension(self)
        processor = HeadingAnchorTreeprocessor(md, self.entries)
        # Below attr_list (8) so explicit `{#id}` attributes are already applied.
        md.treeprocessors.register(processor, "blog_heading_anchors", 5)

    def reset(self) -> None:
        """Forget entries collected by a previous conversion."""
        self.entries.clear()


class HeadingAnchorTreeprocessor(Treeprocessor):
    """Set ``id`` attributes on section headings in emission order."""

    def __init__(self, md: Markdown, entries: list[TocEntry]) -> None:
        super().__init__(md)
        self.entries = entries

    def run(self, root: Element) -> Element:
        """Walk the tree in document order, anchoring each section heading.

        Headings that already carry an ``id`` keep it; generated anchors never
        reuse an id claimed by an earlier heading.
        """
        used: set[str] = set()
        for element in root.iter():
            level = TOC_LEVELS.get(element.tag)
            if level is None:
                continue
            label = "".join(element.itertext()).strip()
            anchor = element.get("id")
            if anchor:
                used.add(anchor)
            else:
                anchor = unique_slug(slugify(label), used)
                element.set("id", anchor)
            self.entries.append(TocEntry(level=level, label=label, anchor=anchor))
        return root


__all__ = [
    "HeadingAnchorExtension",
    "HeadingAnchorTreeprocessor",
    "slugify",
    "unique_slug",
]
