"""Wrap rendered markdown bodies in the themed page shell.

:class:`PageRenderer` receives the immutable :class:`~blog_pages.config.SiteConfig`
and a populated :class:`~blog_pages.resolver.MenuRegistry`, expands a document's
markdown with :class:`HtmlContentRenderer`, and renders ``page.html.jinja``
with the navigation region, optional table of contents, header illustration,
and comment placeholder. It performs no I/O; the build driver writes the
returned :class:`~blog_pages.models.RenderedPage` to disk.

Example
-------
>>> from blog_pages.generator import PageRenderer
>>> renderer = PageRenderer(site, menus)  # doctest: +SKIP
>>> page = renderer.render(document)  # doctest: +SKIP
>>> page.output_path.name  # doctest: +SKIP
'about.html'
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from blog_pages._constants import (
    ASSETS_DIRNAME,
    NAV_SCRIPT_NAME,
    PYGMENTS_CSS_NAME,
    RELOAD_SCRIPT_NAME,
    SITE_CSS_NAME,
)
from blog_pages.models import Document, RenderedPage

from .link_rewriter import relative_url
from .renderer import HtmlContentRenderer, RenderedBody

if typ.TYPE_CHECKING:
    from blog_pages.config import SiteConfig
    from blog_pages.resolver import MenuRegistry

DEFAULT_TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "templates"
MAIN_MENU = "main"


def build_environment(site: SiteConfig) -> Environment:
    """Return the Jinja environment, preferring templates from the site override."""
    search_path = [str(DEFAULT_TEMPLATES_DIR)]
    if site.templates_dir is not None:
        search_path.insert(0, str(site.templates_dir))
    return Environment(
        loader=FileSystemLoader(search_path),
        autoescape=select_autoescape(["html", "xml", "html.jinja"]),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


def build_nav_entries(menus: MenuRegistry, page_url: str) -> list[dict[str, typ.Any]]:
    """Return main-menu links relative to ``page_url``, ordered by weight."""
    return [
        {
            "label": entry.name,
            "href": relative_url(entry.url, page_url),
            "current": entry.url.lstrip("/") == page_url,
        }
        for entry in menus.entries(MAIN_MENU)
    ]


def asset_links(page_url: str) -> dict[str, str]:
    """Return links to the generated stylesheets and script from ``page_url``."""
    return {
        "site_css": relative_url(f"{ASSETS_DIRNAME}/{SITE_CSS_NAME}", page_url),
        "pygments_css": relative_url(f"{ASSETS_DIRNAME}/{PYGMENTS_CSS_NAME}", page_url),
        "nav_js": relative_url(f"{ASSETS_DIRNAME}/{NAV_SCRIPT_NAME}", page_url),
        "reload_js": relative_url(f"{ASSETS_DIRNAME}/{RELOAD_SCRIPT_NAME}", page_url),
    }


class PageRenderer:
    """Render resolved documents into complete HTML pages."""

    def __init__(
        self,
        site: SiteConfig,
        menus: MenuRegistry,
        *,
        env: Environment | None = None,
        content_renderer: HtmlContentRenderer | None = None,
        live_reload: bool = False,
    ) -> None:
        """Initialize the page renderer.

        Parameters
        ----------
        site : SiteConfig
            Immutable build configuration shared by every page.
        menus : MenuRegistry
            Registry populated with the site skeleton and every non-draft
            document's menu declarations.
        env : Environment, optional
            Preconfigured Jinja environment; defaults to :func:`build_environment`.
        content_renderer : HtmlContentRenderer, optional
            Markdown renderer; defaults to one using the theme's Pygments style.
        live_reload : bool, optional
            Reference the preview reload script from the page.
        """
        self.site = site
        self.menus = menus
        self.env = env or build_environment(site)
        self.template = self.env.get_template("page.html.jinja")
        self.content_renderer = content_renderer or HtmlContentRenderer(
            site.theme.pygments_style
        )
        self.live_reload = live_reload

    def render(
        self, document: Document, *, body: RenderedBody | None = None
    ) -> RenderedPage:
        """Render ``document`` into its page shell.

        ``body`` is the already expanded markdown when the caller rendered it
        ahead of time; otherwise the document body is expanded here.

        Raises
        ------
        RenderError
            When the markdown body contains an unterminated fenced code block.
        """
        if body is None:
            body = self.content_renderer.markdown(document.body, path=document.path)
        page_url = document.output_name
        toc = body.toc if document.show_toc else ()
        context = {
            "site": self.site,
            "document": document,
            "html_title": self._format_page_title(document),
            "body_html": body.html,
            "toc": toc,
            "nav_entries": build_nav_entries(self.menus, page_url),
            "home_href": relative_url("/", page_url),
            "assets": asset_links(page_url),
            "header_image": self._image_src(document.image, page_url),
            "comments": self._comment_context(document),
            "live_reload": self.live_reload,
        }
        html = self.template.render(**context)
        return RenderedPage(
            document=document,
            html=html,
            output_path=self.site.output_dir / page_url,
            toc=body.toc,
        )

    def _format_page_title(self, document: Document) -> str:
        """Compose the HTML title from the document and site titles."""
        if document.title == self.site.title:
            return document.title
        return f"{document.title} | {self.site.title}"

    @staticmethod
    def _image_src(image: str | None, page_url: str) -> str | None:
        """Resolve root-relative image paths against the page location."""
        if image is None:
            return None
        if image.startswith("/") and not image.startswith("//"):
            return relative_url(image, page_url)
        return image

    def _comment_context(self, document: Document) -> dict[str, str] | None:
        """Return the placeholder attributes for the document's comment widget."""
        if document.comments is None:
            return None
        settings = self.site.comments
        context = {
            "provider": document.comments.provider,
            "identifier": document.comments.identifier,
        }
        if document.comments.provider == "disqus":
            context["shortname"] = settings.disqus_shortname or ""
        else:
            context["repo"] = settings.utterances_repo or ""
            context["theme"] = settings.utterances_theme
        return context


__all__ = [
    "DEFAULT_TEMPLATES_DIR",
    "MAIN_MENU",
    "PageRenderer",
    "asset_links",
    "build_environment",
    "build_nav_entries",
]
