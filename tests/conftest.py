"""Shared fixtures for blog_pages tests.

``site_tree`` lays out a temporary site (config, content, static) and returns
helpers for writing content files and loading the configuration, so tests can
describe only the documents they care about.
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from textwrap import dedent

import pytest

from blog_pages.config import SiteConfig, load_site_config

if typ.TYPE_CHECKING:
    from pathlib import Path

BASE_CONFIG = """
title: Test Blog
description: Fixture blog
author: Fixture Author
content_dir: content
output_dir: public
static_dir: static
"""


@dc.dataclass(slots=True)
class SiteTree:
    """Temporary site layout rooted at ``root``."""

    root: Path

    @property
    def config_path(self) -> Path:
        return self.root / "site.yaml"

    @property
    def content_dir(self) -> Path:
        return self.root / "content"

    @property
    def output_dir(self) -> Path:
        return self.root / "public"

    def write_config(self, extra: str = "") -> Path:
        """Write the base config plus ``extra`` YAML and return its path."""
        text = BASE_CONFIG.strip() + "\n" + dedent(extra).strip() + "\n"
        self.config_path.write_text(text, encoding="utf-8")
        return self.config_path

    def write_doc(self, relative: str, text: str) -> Path:
        """Write a content file beneath the content directory."""
        path = self.content_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(dedent(text).lstrip(), encoding="utf-8")
        return path

    def load(self) -> SiteConfig:
        """Load the site configuration, writing the base config if needed."""
        if not self.config_path.exists():
            self.write_config()
        return load_site_config(self.config_path)


@pytest.fixture
def site_tree(tmp_path: Path) -> SiteTree:
    """Return an empty site layout with content and static directories."""
    (tmp_path / "content").mkdir()
    (tmp_path / "static").mkdir()
    return SiteTree(tmp_path)
