"""Utilities for rendering markdown bodies with syntax-highlighted code."""

from __future__ import annotations

import dataclasses as dc
import re
from html import escape

from markdown import Markdown
from pygments.formatters.html import HtmlFormatter

from blog_pages.errors import RenderError
from blog_pages.models import TocEntry

from .anchors import HeadingAnchorExtension
from .link_rewriter import RelativeLinkExtension

CODE_BLOCK_PATTERN = re.compile(
    r"^(?P<fence>`{3,}|~{3,})(?P<lang>[A-Za-z0-9_+#.-]+)?[^\n]*\n"
    r"(?P<code>.*?)^(?P=fence)[`~]*[ \t]*$",
    re.DOTALL | re.MULTILINE,
)
FENCED_INDENT_PATTERN = re.compile(r"^[ ]{1,3}([`~]{3,})", re.MULTILINE)
FENCE_LABEL_PATTERN = re.compile(
    r"^([`~]{3,})([A-Za-z0-9_+#.-]+)?(,[^\r\n]+)$", re.MULTILINE
)
FENCE_LINE_PATTERN = re.compile(r"^(`{3,}|~{3,})(.*)$")
CODEHILITE_OPEN_TAG = re.compile(r'<div class="codehilite">')


@dc.dataclass(frozen=True, slots=True)
class RenderedBody:
    """Expanded HTML for a markdown body and the headings it contains."""

    html: str
    toc: tuple[TocEntry, ...]


class HtmlContentRenderer:
    """Render markdown with consistent styling and heading anchors."""

    def __init__(self, pygments_style: str = "monokai") -> None:
        """Initialize a renderer with the Pygments style for code blocks.

        Parameters
        ----------
        pygments_style : str, optional
            Name of the Pygments style used for syntax highlighting. Defaults to
            ``"monokai"``.
        """
        self.pygments_style = pygments_style
        self._formatter = HtmlFormatter(style=pygments_style, cssclass="codehilite")

    @property
    def stylesheet(self) -> str:
        """Return the CSS used for highlighted code blocks."""
        return self._formatter.get_style_defs(".codehilite")

    def markdown(self, text: str, *, path: str = "<inline>") -> RenderedBody:
        """Render markdown into HTML and collect ``h2``/``h3`` anchors.

        Parameters
        ----------
        text : str
            Markdown body.
        path : str, optional
            Document path reported when rendering fails.

        Returns
        -------
        RenderedBody
            Converted HTML and the table-of-contents entries in emission order.

        Raises
        ------
        RenderError
            When a fenced code block is opened but never closed.
        """
        normalized = self._normalize_fenced_blocks(text)
        check_fences(normalized, path)
        if not normalized.strip():
            return RenderedBody(html="", toc=())
        anchors = HeadingAnchorExtension()
        md = Markdown(
            extensions=[
                "fenced_code",
                "codehilite",
                "tables",
                "sane_lists",
                "attr_list",
                RelativeLinkExtension(),
                anchors,
            ],
            extension_configs={
                "codehilite": {
                    "linenums": False,
                    "guess_lang": False,
                    "css_class": "codehilite",
                    "pygments_style": self.pygments_style,
                }
            },
        )
        html = md.convert(normalized)
        return RenderedBody(
            html=self._annotate_codehilite(html, normalized),
            toc=tuple(anchors.entries),
        )

    def _annotate_codehilite(self, html: str, source_markdown: str) -> str:
        """Attach language metadata to each highlighted block in converted markdown."""
        languages = [
            match.group("lang") or "text"
            for match in CODE_BLOCK_PATTERN.finditer(source_markdown)
        ]
        if not languages:
            return html
        lang_iter = iter(languages)

        def _repl(match: re.Match[str]) -> str:
            lang = next(lang_iter, "text")
            return (
                f'<div class="codehilite" data-language="{escape(lang, quote=True)}">'
            )

        return CODEHILITE_OPEN_TAG.sub(_repl, html, len(languages))

    @staticmethod
    def _normalize_fenced_blocks(text: str) -> str:
        without_indent = FENCED_INDENT_PATTERN.sub(r"\1", text)

        def _strip_labels(match: re.Match[str]) -> str:
            fence, language, _extras = match.groups()
            label = language or ""
            return f"{fence}{label}"

        return FENCE_LABEL_PATTERN.sub(_strip_labels, without_indent)


def check_fences(text: str, path: str) -> None:
    """Raise :class:`RenderError` when a fenced code block is left open.

    A block closes on a bare fence of the same character that is at least as
    long as the opening one; backtick fences whose info string contains a
    backtick are inline code, not fences.
    """
    open_fence: str | None = None
    opened_at = 0
    for lineno, line in enumerate(text.splitlines(), start=1):
        match = FENCE_LINE_PATTERN.match(line)
        if match is None:
            continue
        fence, info = match.groups()
        if open_fence is None:
            if fence.startswith("`") and "`" in info:
                continue
            open_fence = fence
            opened_at = lineno
        elif (
            fence[0] == open_fence[0]
            and len(fence) >= len(open_fence)
            and not info.strip()
        ):
            open_fence = None
    if open_fence is not None:
        msg = f"unterminated fenced code block opened on body line {opened_at}"
        raise RenderError(path, msg)


__all__ = ["CODE_BLOCK_PATTERN", "HtmlContentRenderer", "RenderedBody", "check_fences"]
