"""Behaviour tests for full site builds.

These pytest-bdd scenarios drive :class:`~blog_pages.builder.SiteBuilder` over
a temporary content tree. The feature file ``site_build.feature`` covers menu
registration, draft exclusion, partial failure, and heading anchors.

Usage
-----
Run ``pytest tests/bdd/test_site_build_scenarios.py -v`` after installing the
test extra (``pip install -e .[test]``). Everything is written beneath
pytest's ``tmp_path`` so no network access or fixtures beyond
``scenario_state`` are required.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path
from textwrap import dedent

import pytest
from bs4 import BeautifulSoup
from pytest_bdd import given, parsers, scenarios, then, when

from blog_pages.builder import BuildReport, SiteBuilder
from blog_pages.config import load_site_config

FEATURE_FILE = Path(__file__).resolve().parents[2] / "features" / "site_build.feature"
scenarios(FEATURE_FILE)


@pytest.fixture
def scenario_state() -> dict[str, object]:
    """Return a mutable dict used to share scenario state across BDD steps."""
    return {}


def _write(root: Path, relative: str, text: str) -> None:
    path = root / "content" / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dedent(text).lstrip(), encoding="utf-8")


def _page(scenario_state: dict[str, object], relative: str) -> BeautifulSoup:
    root = typ.cast("Path", scenario_state["root"])
    html = (root / "public" / relative).read_text(encoding="utf-8")
    return BeautifulSoup(html, "html.parser")


@pytest.fixture
def blog_root(tmp_path: Path, scenario_state: dict[str, object]) -> Path:
    """Create the site configuration shared by every scenario."""
    (tmp_path / "content").mkdir()
    (tmp_path / "site.yaml").write_text(
        "title: Scenario Blog\ncontent_dir: content\noutput_dir: public\n",
        encoding="utf-8",
    )
    scenario_state["root"] = tmp_path
    return tmp_path


@given("a blog with an about page in the main menu")
def given_about_page(blog_root: Path) -> None:
    """Write an about page that declares a main-menu entry."""
    _write(
        blog_root,
        "about.md",
        """
        ---
        title: About
        menu:
          main:
            weight: 1
        ---
        ## Who am I?

        A developer who writes things down.
        """,
    )


@given("a draft document")
def given_draft(blog_root: Path) -> None:
    _write(blog_root, "wip.md", "---\ntitle: WIP\ndraft: true\nmenu: main\n---\nSoon.\n")


@given("a document without front matter")
def given_malformed(blog_root: Path) -> None:
    _write(blog_root, "loose.md", "Just a body with no metadata.\n")


@given("a blog post with two headings named Overview")
def given_repeated_headings(blog_root: Path) -> None:
    _write(
        blog_root,
        "posts/cart.md",
        """
        ---
        title: Cart
        showTOC: true
        ---
        ## Overview

        One.

        ## Overview

        Two.
        """,
    )


@when("I build the site")
def when_build(scenario_state: dict[str, object]) -> None:
    """Load the configuration and run a full build."""
    root = typ.cast("Path", scenario_state["root"])
    site = load_site_config(root / "site.yaml")
    scenario_state["report"] = SiteBuilder(site).run()


@then("the about page is written with its heading")
def then_about_written(scenario_state: dict[str, object]) -> None:
    soup = _page(scenario_state, "about.html")
    heading = soup.select_one("div.post-content h2")
    assert heading is not None, "expected the about body heading to be rendered"
    assert heading.get_text() == "Who am I?"


@then("the navigation links to the about page")
def then_nav_links_about(scenario_state: dict[str, object]) -> None:
    soup = _page(scenario_state, "about.html")
    links = soup.select("nav#site-nav a")
    assert [(a.get_text(), a["href"]) for a in links] == [("About", "about.html")]


@then("no page is written for the draft")
def then_draft_absent(scenario_state: dict[str, object]) -> None:
    root = typ.cast("Path", scenario_state["root"])
    assert not (root / "public" / "wip.html").exists()
    labels = [a.get_text() for a in _page(scenario_state, "about.html").select("nav a")]
    assert "WIP" not in labels


@then("the build reports the malformed document")
def then_failure_reported(scenario_state: dict[str, object]) -> None:
    report = typ.cast("BuildReport", scenario_state["report"])
    assert [failure.path for failure in report.failures] == ["loose.md"]


@then(parsers.parse('the table of contents links to "{first}" and "{second}"'))
def then_toc_links(scenario_state: dict[str, object], first: str, second: str) -> None:
    soup = _page(scenario_state, "posts/cart.html")
    hrefs = [a["href"] for a in soup.select("nav.toc a")]
    assert hrefs == [f"#{first}", f"#{second}"]
    ids = [h["id"] for h in soup.select("div.post-content h2")]
    assert ids == [first, second]
