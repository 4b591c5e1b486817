"""Tests for loading the site configuration."""

from __future__ import annotations

import typing as typ

import pytest

from blog_pages.config import SiteConfigError, load_site_config

if typ.TYPE_CHECKING:
    from pathlib import Path

    from conftest import SiteTree


def test_defaults_and_relative_directories(site_tree: SiteTree) -> None:
    """Directories resolve against the config file and defaults apply."""
    site = site_tree.load()

    assert site.title == "Test Blog"
    assert site.content_dir == site_tree.root.resolve() / "content"
    assert site.output_dir == site_tree.root.resolve() / "public"
    assert site.static_dir == site_tree.root.resolve() / "static"
    assert site.templates_dir is None
    assert site.theme.pygments_style == "monokai"
    assert site.comments.provider is None
    assert site.listing.output == "index.html"
    assert site.menus == {}
    assert site.breakpoints["large-handheld"] == 768


def test_menus_theme_and_comments(site_tree: SiteTree) -> None:
    site_tree.write_config(
        """
        theme:
          pygments_style: friendly
        comments:
          provider: Disqus
          disqus_shortname: testblog
        listing:
          output: /posts/index.html
        menus:
          main:
            - name: Posts
              url: /
            - name: GitHub
              url: https://github.com/example
              weight: 9
        breakpoints:
          large-handheld: 800
        """
    )
    site = site_tree.load()

    assert site.theme.pygments_style == "friendly"
    assert site.comments.provider == "disqus"
    assert site.comments.disqus_shortname == "testblog"
    assert site.listing.output == "posts/index.html"
    assert [(e.name, e.weight, e.index) for e in site.menus["main"]] == [
        ("Posts", 0, 0),
        ("GitHub", 9, 1),
    ]
    assert site.breakpoints["large-handheld"] == 800
    assert list(site.breakpoints) == [
        "small-handheld",
        "large-handheld",
        "tablet",
        "monitor",
    ]


def test_output_dir_override(site_tree: SiteTree, tmp_path: Path) -> None:
    site_tree.write_config()
    site = load_site_config(site_tree.config_path, output_dir=tmp_path / "dist")
    assert site.output_dir == tmp_path / "dist"


@pytest.mark.parametrize(
    ("extra", "message"),
    [
        ("comments:\n  provider: facebook\n", "Unknown comments provider"),
        ("breakpoints:\n  tablet: -5\n", "positive integer"),
        ("menus:\n  main:\n    - name: Posts\n", "needs 'name' and 'url'"),
        ("menus:\n  main:\n    - {name: A, url: /, weight: high}\n", "non-integer"),
        ("menus:\n  main: Posts\n", "must be a list"),
    ],
)
def test_invalid_settings_raise(site_tree: SiteTree, extra: str, message: str) -> None:
    site_tree.write_config(extra)
    with pytest.raises(SiteConfigError, match=message):
        site_tree.load()


def test_invalid_yaml_raises_config_error(tmp_path: Path) -> None:
    path = tmp_path / "site.yaml"
    path.write_text("title: [unclosed\n", encoding="utf-8")
    with pytest.raises(SiteConfigError, match="not valid YAML"):
        load_site_config(path)


def test_missing_title_raises(tmp_path: Path) -> None:
    path = tmp_path / "site.yaml"
    path.write_text("content_dir: content\n", encoding="utf-8")
    with pytest.raises(SiteConfigError, match="title"):
        load_site_config(path)


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_site_config(tmp_path / "nope.yaml")
