"""Helpers for rewriting links between content files to their HTML outputs."""

from __future__ import annotations

import posixpath
import typing as typ
from urllib.parse import urlsplit

from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

from blog_pages._constants import CONTENT_EXTENSIONS, OUTPUT_SUFFIX

if typ.TYPE_CHECKING:
    from xml.etree.ElementTree import Element

    from markdown import Markdown
else:  # pragma: no cover - type-checking fallback
    Markdown = typ.Any
    Element = typ.Any


class RelativeLinkExtension(Extension):
    """Rewrite relative links to markdown sources so they target ``.html``.

    Authors link between articles with their source names
    (``[part two](./part-2.md#setup)``); the generated site only contains the
    rendered pages, so such links become ``part-2.html#setup``. Absolute
    URLs, fragments, and links to other files are left untouched.
    """

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register the relative-link treeprocessor on the Markdown instance."""
        md.treeprocessors.register(
            RelativeLinkTreeprocessor(md), "blog_relative_links", 14
        )


class RelativeLinkTreeprocessor(Treeprocessor):
    """Point anchors at rendered pages instead of markdown sources."""

    def run(self, root: Element) -> Element:
        """Rewrite relative anchors in the parsed markdown tree."""
        for element in root.iter():
            if element.tag == "a":
                rewritten = rewrite_link(element.get("href"))
                if rewritten:
                    element.set("href", rewritten)
        return root


def rewrite_link(target: str | None) -> str | None:
    """Return the ``.html`` equivalent of a relative markdown link, or None."""
    if not target or target.startswith(("#", "//")):
        return None
    parsed = urlsplit(target)
    if parsed.scheme or parsed.netloc or not parsed.path:
        return None
    stem, ext = posixpath.splitext(parsed.path)
    if ext.lower() not in CONTENT_EXTENSIONS:
        return None

    url = f"{stem}{OUTPUT_SUFFIX}"
    if parsed.query:
        url = f"{url}?{parsed.query}"
    if parsed.fragment:
        url = f"{url}#{parsed.fragment}"
    return url


def relative_url(target: str, page: str) -> str:
    """Return ``target`` (site-root relative) as seen from the page ``page``.

    Absolute URLs and fragment-only targets are returned unchanged; ``"/"``
    means the site root's ``index.html``.
    """
    parsed = urlsplit(target)
    if parsed.scheme or parsed.netloc or target.startswith("#"):
        return target
    path = parsed.path.lstrip("/")
    if not path or path.endswith("/"):
        path = f"{path}index.html"
    start = posixpath.dirname(page) or "."
    url = posixpath.relpath(path, start)
    if parsed.query:
        url = f"{url}?{parsed.query}"
    if parsed.fragment:
        url = f"{url}#{parsed.fragment}"
    return url


__all__ = [
    "RelativeLinkExtension",
    "RelativeLinkTreeprocessor",
    "relative_url",
    "rewrite_link",
]
