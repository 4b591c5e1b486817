"""Typed dataclasses describing blog site configuration structures."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

from blog_pages._constants import DEFAULT_BREAKPOINTS
from blog_pages.models import MenuEntry


class SiteConfigError(ValueError):
    """Raised when the site configuration is invalid or incomplete."""


@dc.dataclass(frozen=True, slots=True)
class ThemeConfig:
    """Visual theming applied to generated pages."""

    pygments_style: str = "monokai"
    accent_color: str = "#2a7ae2"
    font_stack: str = "-apple-system, 'Segoe UI', Roboto, sans-serif"
    footer_note: str = ""


@dc.dataclass(frozen=True, slots=True)
class CommentsConfig:
    """Site-wide comment widget provider settings."""

    provider: str | None = None
    disqus_shortname: str | None = None
    utterances_repo: str | None = None
    utterances_theme: str = "github-light"


@dc.dataclass(frozen=True, slots=True)
class ListingConfig:
    """Settings for the generated post listing page."""

    enabled: bool = True
    output: str = "index.html"
    title: str = "Posts"


@dc.dataclass(frozen=True, slots=True)
class SiteConfig:
    """Process-wide build configuration, constructed once per build."""

    title: str
    content_dir: Path
    output_dir: Path
    static_dir: Path | None = None
    templates_dir: Path | None = None
    base_url: str = "/"
    description: str = ""
    author: str = ""
    theme: ThemeConfig = dc.field(default_factory=ThemeConfig)
    comments: CommentsConfig = dc.field(default_factory=CommentsConfig)
    listing: ListingConfig = dc.field(default_factory=ListingConfig)
    menus: dict[str, tuple[MenuEntry, ...]] = dc.field(default_factory=dict)
    breakpoints: dict[str, int] = dc.field(
        default_factory=lambda: dict(DEFAULT_BREAKPOINTS)
    )


__all__ = [
    "CommentsConfig",
    "ListingConfig",
    "SiteConfig",
    "SiteConfigError",
    "ThemeConfig",
]
