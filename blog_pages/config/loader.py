"""Load site configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .helpers import (
    _build_breakpoints,
    _build_comments_config,
    _build_listing_config,
    _build_menus,
    _build_theme_config,
    _optional_str,
    _resolve_dir,
)
from .models import SiteConfig, SiteConfigError


def load_site_config(path: Path, *, output_dir: Path | None = None) -> SiteConfig:
    """Load the YAML configuration describing the blog and its defaults.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML site configuration (for example,
        ``config/site.yaml``).
    output_dir : Path, optional
        Override for the configured output directory.

    Returns
    -------
    SiteConfig
        Immutable configuration with directories resolved against the config
        file's parent, theme defaults applied, and the menu skeleton built.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    TypeError
        If the top-level YAML structure is not a mapping.
    SiteConfigError
        If the YAML cannot be parsed or required fields are missing or
        invalid (for example, a missing ``title`` or a malformed breakpoint
        width).

    Examples
    --------
    >>> from pathlib import Path
    >>> from blog_pages.config import load_site_config
    >>> site = load_site_config(Path("config/site.yaml"))  # doctest: +SKIP
    >>> site.breakpoints["large-handheld"]  # doctest: +SKIP
    768
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    try:
        with path.open("r", encoding="utf-8") as handle:
            loaded = loader.load(handle) or {}
    except YAMLError as exc:
        msg = f"Configuration file '{path}' is not valid YAML: {exc}"
        raise SiteConfigError(msg) from exc
    if not isinstance(loaded, dict):  # pragma: no cover - config error guard
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    raw: dict[str, typ.Any] = dict(loaded)

    title = _optional_str(raw.get("title"))
    if not title:
        msg = "Site configuration must define a 'title'."
        raise SiteConfigError(msg)

    base = path.resolve().parent
    content_dir = _resolve_dir(base, raw.get("content_dir"), "content")
    configured_output = _resolve_dir(base, raw.get("output_dir"), "public")
    static_dir = _resolve_dir(base, raw.get("static_dir"), None)
    templates_dir = _resolve_dir(base, raw.get("templates_dir"), None)
    if content_dir is None or configured_output is None:  # pragma: no cover
        msg = "Content and output directories could not be resolved."
        raise SiteConfigError(msg)

    return SiteConfig(
        title=title,
        content_dir=content_dir,
        output_dir=output_dir or configured_output,
        static_dir=static_dir,
        templates_dir=templates_dir,
        base_url=str(raw.get("base_url", "/")),
        description=str(raw.get("description", "") or ""),
        author=str(raw.get("author", "") or ""),
        theme=_build_theme_config(raw.get("theme", {}) or {}),
        comments=_build_comments_config(raw.get("comments", {}) or {}),
        listing=_build_listing_config(raw.get("listing", {}) or {}),
        menus=_build_menus(raw.get("menus")),
        breakpoints=_build_breakpoints(raw.get("breakpoints")),
    )


__all__ = ["load_site_config"]
