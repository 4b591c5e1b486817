"""Post listing page rendering.

The listing collects every published document that carries a ``date`` and
renders them newest first into ``listing.html.jinja`` at the configured
output path (``index.html`` by default). Documents published on the same
timestamp keep their discovery order so repeated builds agree.
"""

from __future__ import annotations

import typing as typ

from .generator.link_rewriter import relative_url
from .generator.page_renderer import asset_links, build_nav_entries

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from jinja2 import Environment

    from .config import SiteConfig
    from .models import Document
    from .resolver import MenuRegistry


class PostListingBuilder:
    """Render the chronological post listing from resolved documents."""

    def __init__(
        self,
        site: SiteConfig,
        menus: MenuRegistry,
        env: Environment,
        *,
        live_reload: bool = False,
    ) -> None:
        self.site = site
        self.menus = menus
        self.env = env
        self.live_reload = live_reload
        self.template = self.env.get_template("listing.html.jinja")

    @property
    def output_name(self) -> str:
        """Return the site-root relative path of the listing page."""
        return self.site.listing.output

    def render(self, documents: cabc.Iterable[Document]) -> str:
        """Render the listing HTML for ``documents``."""
        page_url = self.output_name
        dated = [doc for doc in documents if doc.date is not None and not doc.draft]
        dated.sort(key=lambda doc: doc.discovery_index)
        dated.sort(key=lambda doc: typ.cast("typ.Any", doc.date), reverse=True)
        posts = [
            {
                "title": doc.title,
                "date": doc.date,
                "description": doc.description,
                "href": relative_url(doc.output_name, page_url),
            }
            for doc in dated
        ]
        title = self.site.listing.title
        return self.template.render(
            site=self.site,
            listing_title=title,
            html_title=title if title == self.site.title else f"{title} | {self.site.title}",
            posts=posts,
            nav_entries=build_nav_entries(self.menus, page_url),
            home_href=relative_url("/", page_url),
            assets=asset_links(page_url),
            live_reload=self.live_reload,
        )

    def run(self, documents: cabc.Iterable[Document]) -> Path:
        """Render and write the listing page, returning the output path."""
        output_path = self.site.output_dir / self.output_name
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(self.render(documents), encoding="utf-8")
        return output_path


__all__ = ["PostListingBuilder"]
