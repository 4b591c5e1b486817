"""Utilities for expanding markdown and rendering blog pages."""

from .anchors import HeadingAnchorExtension
from .link_rewriter import RelativeLinkExtension
from .page_renderer import PageRenderer, build_environment
from .renderer import HtmlContentRenderer, RenderedBody

__all__ = [
    "HeadingAnchorExtension",
    "HtmlContentRenderer",
    "PageRenderer",
    "RelativeLinkExtension",
    "RenderedBody",
    "build_environment",
]
