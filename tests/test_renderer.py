"""Tests for markdown rendering, heading anchors, and link helpers."""

from __future__ import annotations

from pathlib import Path

import pytest
from bs4 import BeautifulSoup

from blog_pages.config import CommentsConfig, SiteConfig
from blog_pages.errors import RenderError
from blog_pages.generator import HtmlContentRenderer, PageRenderer
from blog_pages.generator.anchors import slugify, unique_slug
from blog_pages.generator.link_rewriter import relative_url, rewrite_link
from blog_pages.generator.renderer import check_fences
from blog_pages.models import CommentConfig, Document, MenuEntry
from blog_pages.resolver import MenuRegistry


def _site(**overrides: object) -> SiteConfig:
    return SiteConfig(
        title="Test Blog",
        content_dir=Path("content"),
        output_dir=Path("public"),
        **overrides,  # type: ignore[arg-type]
    )


def test_explicit_heading_ids_feed_the_toc() -> None:
    """Headings with an ``{#id}`` attribute keep it, and the TOC links to it."""
    text = "## Overview {#intro}\n\n## Intro\n\n## Overview\n"
    body = HtmlContentRenderer().markdown(text)

    soup = BeautifulSoup(body.html, "html.parser")
    ids = [heading["id"] for heading in soup.find_all("h2")]
    assert ids == ["intro", "intro-2", "overview"]
    assert [(entry.label, entry.anchor) for entry in body.toc] == [
        ("Overview", "intro"),
        ("Intro", "intro-2"),
        ("Overview", "overview"),
    ]


def test_tilde_fences_are_labelled_with_their_language() -> None:
    """Each highlighted block carries the language of its own fence."""
    text = "~~~ruby\nputs 1\n~~~\n\n```python\nx = 1\n```\n"
    body = HtmlContentRenderer().markdown(text)

    blocks = BeautifulSoup(body.html, "html.parser").select("div.codehilite")
    assert [block["data-language"] for block in blocks] == ["ruby", "python"]


def test_duplicate_headings_receive_suffixed_anchors() -> None:
    """Repeated heading text yields ``overview`` then ``overview-2``."""
    body = HtmlContentRenderer().markdown("## Overview\n\nA\n\n## Overview\n\nB\n")

    soup = BeautifulSoup(body.html, "html.parser")
    ids = [heading["id"] for heading in soup.find_all("h2")]
    assert ids == ["overview", "overview-2"]
    assert [entry.anchor for entry in body.toc] == ids


def test_toc_collects_h2_and_h3_in_order() -> None:
    """Only second and third level headings are anchored, in document order."""
    text = "# Title\n\n## Setup\n\n### Install\n\n#### Detail\n\n## Usage\n"
    body = HtmlContentRenderer().markdown(text)

    assert [(entry.level, entry.label, entry.anchor) for entry in body.toc] == [
        (2, "Setup", "setup"),
        (3, "Install", "install"),
        (2, "Usage", "usage"),
    ]
    soup = BeautifulSoup(body.html, "html.parser")
    assert soup.find("h1").get("id") is None
    assert soup.find("h4").get("id") is None


def test_anchors_reset_between_documents() -> None:
    """Anchor uniqueness is scoped to a single document."""
    renderer = HtmlContentRenderer()
    first = renderer.markdown("## Overview\n")
    second = renderer.markdown("## Overview\n")
    assert first.toc[0].anchor == second.toc[0].anchor == "overview"


def test_unterminated_fence_raises_render_error() -> None:
    """An opened but never closed code fence is reported with the document path."""
    text = "Intro\n\n```python\nprint('hi')\n"
    with pytest.raises(RenderError, match="line 3") as excinfo:
        HtmlContentRenderer().markdown(text, path="posts/broken.md")
    assert excinfo.value.path == "posts/broken.md"


@pytest.mark.parametrize(
    "text",
    [
        "```\ncode\n```\n",
        "~~~\ncode\n~~~\n",
        "````\n```\nnested\n```\n````\n",
        "```js\nconst x = 1;\n```\n\nUse ``` `code` ``` inline.\n",
    ],
)
def test_closed_fences_are_accepted(text: str) -> None:
    """Balanced fences, including nested and tilde fences, pass the check."""
    check_fences(text, "ok.md")


def test_code_blocks_are_highlighted_with_language() -> None:
    """Fenced code gains Pygments markup and a ``data-language`` attribute."""
    body = HtmlContentRenderer().markdown("```python\nx = 1\n```\n")

    soup = BeautifulSoup(body.html, "html.parser")
    block = soup.find("div", class_="codehilite")
    assert block is not None
    assert block["data-language"] == "python"
    assert block.find("span") is not None


def test_indented_fences_with_attributes_are_highlighted() -> None:
    """Fences nested in list items keep their language once attributes are dropped."""
    text = (
        "- **Example** demonstrates inline code\n\n"
        "  ```rust,no_run\n"
        '  fn main() { println!("hi"); }\n'
        "  ```\n"
    )
    body = HtmlContentRenderer().markdown(text)

    soup = BeautifulSoup(body.html, "html.parser")
    blocks = soup.select(".codehilite code")
    assert any("fn main" in block.get_text() for block in blocks)
    assert soup.select_one("div.codehilite")["data-language"] == "rust"


def test_stylesheet_targets_codehilite() -> None:
    """The Pygments stylesheet is scoped to ``.codehilite``."""
    assert ".codehilite" in HtmlContentRenderer("monokai").stylesheet


def test_relative_markdown_links_are_rewritten() -> None:
    """Links to sibling markdown files point at their rendered pages."""
    body = HtmlContentRenderer().markdown(
        "[next](part-2.md#setup) [ext](https://example.com/a.md) [img](a.png)\n"
    )
    hrefs = [a["href"] for a in BeautifulSoup(body.html, "html.parser").find_all("a")]
    assert hrefs == ["part-2.html#setup", "https://example.com/a.md", "a.png"]


@pytest.mark.parametrize(
    ("target", "expected"),
    [
        ("../about.markdown?x=1", "../about.html?x=1"),
        ("#top", None),
        ("mailto:me@example.com", None),
        ("", None),
    ],
)
def test_rewrite_link(target: str, expected: str | None) -> None:
    assert rewrite_link(target) == expected


@pytest.mark.parametrize(
    ("target", "page", "expected"),
    [
        ("/", "about.html", "index.html"),
        ("/", "posts/cart.html", "../index.html"),
        ("about.html", "posts/cart.html", "../about.html"),
        ("/static/a.svg", "posts/deep/x.html", "../../static/a.svg"),
        ("https://example.com/", "posts/cart.html", "https://example.com/"),
        ("#comments", "about.html", "#comments"),
    ],
)
def test_relative_url(target: str, page: str, expected: str) -> None:
    assert relative_url(target, page) == expected


def test_slug_helpers() -> None:
    """Slugs are lowercase and hyphenated with numeric de-duplication."""
    used: set[str] = set()
    assert slugify("Who am I?") == "who-am-i"
    assert slugify("!!!") == "section"
    assert [unique_slug("a", used) for _ in range(3)] == ["a", "a-2", "a-3"]


def _document(**overrides: object) -> Document:
    values: dict[str, object] = {
        "path": "posts/cart.md",
        "body": "## Overview\n\nText\n",
        "title": "Cart",
    }
    values.update(overrides)
    return Document(**values)  # type: ignore[arg-type]


def _menus() -> MenuRegistry:
    registry = MenuRegistry()
    registry.add(MenuEntry("main", "Posts", 0, "/"))
    registry.add(MenuEntry("main", "Cart", 2, "posts/cart.html"))
    registry.add(MenuEntry("main", "About", 1, "about.html"))
    return registry


def test_page_renders_navigation_in_weight_order() -> None:
    """The navigation region lists main-menu entries by weight with relative links."""
    page = PageRenderer(_site(), _menus()).render(_document())

    soup = BeautifulSoup(page.html, "html.parser")
    links = soup.select("nav#site-nav li.nav-item a")
    assert [(a.get_text(), a["href"]) for a in links] == [
        ("Posts", "../index.html"),
        ("About", "../about.html"),
        ("Cart", "cart.html"),
    ]
    assert links[2]["aria-current"] == "page"
    toggle = soup.select_one("button.nav-toggle")
    assert toggle["aria-controls"] == "site-nav"
    assert toggle["aria-expanded"] == "false"
    assert page.output_path == Path("public/posts/cart.html")


def test_page_toc_follows_show_toc() -> None:
    """The table of contents appears only when ``showTOC`` is set."""
    renderer = PageRenderer(_site(), MenuRegistry())
    hidden = BeautifulSoup(renderer.render(_document()).html, "html.parser")
    shown = BeautifulSoup(
        renderer.render(_document(show_toc=True)).html, "html.parser"
    )

    assert hidden.select_one("nav.toc") is None
    assert [a["href"] for a in shown.select("nav.toc a")] == ["#overview"]


def test_page_escapes_title_and_keeps_body_html() -> None:
    """Front-matter text is escaped; rendered markdown is inserted verbatim."""
    page = PageRenderer(_site(), MenuRegistry()).render(
        _document(title="<Cart & Co>", body="**bold**\n")
    )
    assert "&lt;Cart &amp; Co&gt;" in page.html
    assert "<strong>bold</strong>" in page.html


def test_page_header_image_and_comments() -> None:
    """Header images resolve against the page and comments render a placeholder."""
    site = _site(comments=CommentsConfig(provider="utterances", utterances_repo="me/blog"))
    page = PageRenderer(site, MenuRegistry()).render(
        _document(
            image="/static/images/cart.svg",
            image_credit="Photo by Me",
            comments=CommentConfig("utterances", "3"),
        )
    )

    soup = BeautifulSoup(page.html, "html.parser")
    assert soup.select_one("figure.post-image img")["src"] == "../static/images/cart.svg"
    assert soup.select_one("figcaption.image-credit").get_text() == "Photo by Me"
    comments = soup.select_one("section#comments")
    assert comments["data-provider"] == "utterances"
    assert comments["data-identifier"] == "3"
    assert comments["data-repo"] == "me/blog"


def test_page_without_comments_has_no_placeholder() -> None:
    page = PageRenderer(_site(), MenuRegistry()).render(_document())
    assert BeautifulSoup(page.html, "html.parser").select_one("#comments") is None


def test_site_templates_override_defaults(tmp_path: Path) -> None:
    """Templates in the site's template directory shadow the packaged ones."""
    (tmp_path / "_footer.html.jinja").write_text(
        '<footer class="custom">Custom footer</footer>\n', encoding="utf-8"
    )
    page = PageRenderer(_site(templates_dir=tmp_path), MenuRegistry()).render(
        _document()
    )
    assert "Custom footer" in page.html
