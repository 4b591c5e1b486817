"""Utility helpers shared by the blog configuration loader."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from blog_pages._constants import DEFAULT_BREAKPOINTS, NAV_BREAKPOINT
from blog_pages.models import MenuEntry

from .models import CommentsConfig, ListingConfig, SiteConfigError, ThemeConfig

COMMENT_PROVIDERS = ("disqus", "utterances")


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _resolve_dir(base: Path, value: object | None, default: str | None) -> Path | None:
    """Resolve a directory setting relative to the config file's directory."""
    raw = _optional_str(value) or default
    if raw is None:
        return None
    path = Path(raw)
    return path if path.is_absolute() else base / path


def _build_theme_config(payload: typ.Mapping[str, typ.Any]) -> ThemeConfig:
    """Build a ThemeConfig instance from the provided mapping payload."""
    base = ThemeConfig()
    return ThemeConfig(
        pygments_style=payload.get("pygments_style", base.pygments_style),
        accent_color=payload.get("accent_color", base.accent_color),
        font_stack=payload.get("font_stack", base.font_stack),
        footer_note=payload.get("footer_note", base.footer_note),
    )


def _build_comments_config(payload: typ.Mapping[str, typ.Any]) -> CommentsConfig:
    """Build the comment provider settings, validating the provider name."""
    provider = _optional_str(payload.get("provider"))
    if provider is not None:
        provider = provider.lower()
        if provider not in COMMENT_PROVIDERS:
            known = ", ".join(COMMENT_PROVIDERS)
            msg = f"Unknown comments provider '{provider}'. Known providers: {known}"
            raise SiteConfigError(msg)
    return CommentsConfig(
        provider=provider,
        disqus_shortname=_optional_str(payload.get("disqus_shortname")),
        utterances_repo=_optional_str(payload.get("utterances_repo")),
        utterances_theme=payload.get("utterances_theme", "github-light"),
    )


def _build_listing_config(payload: typ.Mapping[str, typ.Any]) -> ListingConfig:
    """Build the post listing settings."""
    base = ListingConfig()
    return ListingConfig(
        enabled=bool(payload.get("enabled", base.enabled)),
        output=str(payload.get("output", base.output)).lstrip("/"),
        title=str(payload.get("title", base.title)),
    )


def _build_breakpoints(payload: typ.Mapping[str, typ.Any] | None) -> dict[str, int]:
    """Merge configured breakpoints over the defaults, sorted by width."""
    merged: dict[str, int] = dict(DEFAULT_BREAKPOINTS)
    for name, width in (payload or {}).items():
        if isinstance(width, bool) or not isinstance(width, int) or width <= 0:
            msg = f"Breakpoint '{name}' must be a positive integer width."
            raise SiteConfigError(msg)
        merged[str(name)] = width
    if NAV_BREAKPOINT not in merged:  # pragma: no cover - defaults include it
        msg = f"Breakpoint '{NAV_BREAKPOINT}' is required."
        raise SiteConfigError(msg)
    return dict(sorted(merged.items(), key=lambda item: item[1]))


def _build_menus(
    payload: typ.Mapping[str, typ.Any] | None,
) -> dict[str, tuple[MenuEntry, ...]]:
    """Build the menu skeleton declared in the site configuration."""
    menus: dict[str, tuple[MenuEntry, ...]] = {}
    for menu_name, entries in (payload or {}).items():
        if not isinstance(entries, list):
            msg = f"Menu '{menu_name}' must be a list of entries."
            raise SiteConfigError(msg)
        built: list[MenuEntry] = []
        for index, entry in enumerate(entries):
            if not isinstance(entry, dict) or "name" not in entry or "url" not in entry:
                msg = f"Menu '{menu_name}' entry {index} needs 'name' and 'url'."
                raise SiteConfigError(msg)
            weight = entry.get("weight", 0)
            if isinstance(weight, bool) or not isinstance(weight, int):
                msg = f"Menu '{menu_name}' entry '{entry['name']}' has a non-integer weight."
                raise SiteConfigError(msg)
            built.append(
                MenuEntry(
                    menu=str(menu_name),
                    name=str(entry["name"]),
                    weight=weight,
                    url=str(entry["url"]),
                    index=index,
                )
            )
        menus[str(menu_name)] = tuple(built)
    return menus


__all__ = [
    "COMMENT_PROVIDERS",
    "_build_breakpoints",
    "_build_comments_config",
    "_build_listing_config",
    "_build_menus",
    "_build_theme_config",
    "_optional_str",
    "_resolve_dir",
]
