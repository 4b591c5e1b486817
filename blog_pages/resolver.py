"""Resolve raw front matter into documents and build navigation menus.

:class:`FrontMatterResolver` applies the documented defaults and type
coercions to a :class:`~blog_pages.content.RawDocument`, producing an immutable
:class:`~blog_pages.models.Document`. :class:`MenuRegistry` gathers the menu
skeleton from the site configuration followed by each document's ``menu``
declarations and hands back entries ordered by ``(weight, insertion order)``.

Example
-------
>>> from pathlib import Path
>>> from blog_pages.config import SiteConfig
>>> from blog_pages.content import RawDocument
>>> site = SiteConfig(title="Blog", content_dir=Path("c"), output_dir=Path("o"))
>>> raw = RawDocument("about.md", Path("c/about.md"), {"title": "About"}, "", 0)
>>> FrontMatterResolver(site).resolve(raw).show_toc
False
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import datetime as dt
import logging
import typing as typ
from pathlib import PurePosixPath

from .errors import MalformedDocument, UnresolvableReference
from .models import CommentConfig, Document, MenuDeclaration, MenuEntry

if typ.TYPE_CHECKING:
    from .config import SiteConfig
    from .content import RawDocument

logger = logging.getLogger(__name__)

KNOWN_FIELDS = frozenset(
    {
        "title",
        "date",
        "draft",
        "menu",
        "showTOC",
        "useComments",
        "disqusIdentifier",
        "utterenceIssueNumber",
        "keywords",
        "image",
        "imageCredit",
        "description",
        "summary",
    }
)
_TRUE_STRINGS = frozenset({"true", "yes", "on", "1"})
_FALSE_STRINGS = frozenset({"false", "no", "off", "0", ""})


class FrontMatterResolver:
    """Turn parsed front matter into fully resolved documents."""

    def __init__(self, site: SiteConfig) -> None:
        self.site = site

    def resolve(self, raw: RawDocument) -> Document:
        """Apply defaults and coercions to ``raw``.

        Parameters
        ----------
        raw : RawDocument
            Discovered document with its parsed front-matter mapping.

        Returns
        -------
        Document
            Immutable document; unknown front-matter keys are kept in
            ``extra`` untouched.

        Raises
        ------
        MalformedDocument
            When a recognised field holds a value of the wrong type.
        """
        meta = raw.metadata
        path = raw.path
        title = _optional_text(meta.get("title")) or _title_from_path(path)
        show_toc = _coerce_bool(meta.get("showTOC", False), "showTOC", path)
        description = _optional_text(meta.get("description"))
        if description is None:
            description = _optional_text(meta.get("summary")) or ""

        return Document(
            path=path,
            body=raw.body,
            title=title,
            date=_parse_date(meta.get("date"), path),
            draft=_coerce_bool(meta.get("draft", False), "draft", path),
            menu=_parse_menu(meta.get("menu"), title, path),
            show_toc=show_toc,
            comments=self._resolve_comments(meta, path),
            keywords=_parse_keywords(meta.get("keywords"), path),
            image=_optional_text(meta.get("image")),
            image_credit=_optional_text(meta.get("imageCredit")),
            description=description,
            extra={key: value for key, value in meta.items() if key not in KNOWN_FIELDS},
            discovery_index=raw.discovery_index,
        )

    def _resolve_comments(
        self, meta: cabc.Mapping[str, typ.Any], path: str
    ) -> CommentConfig | None:
        """Select the comment widget parameters for the site's provider."""
        if not _coerce_bool(meta.get("useComments", False), "useComments", path):
            return None
        provider = self.site.comments.provider
        if provider is None:
            logger.debug("%s enables comments but no provider is configured", path)
            return None
        if provider == "disqus":
            identifier = _optional_text(meta.get("disqusIdentifier"))
            return CommentConfig(provider, identifier or _default_identifier(path))
        issue = meta.get("utterenceIssueNumber")
        if issue is None:
            return CommentConfig(provider, "pathname")
        if isinstance(issue, bool) or not isinstance(issue, int | str):
            msg = "'utterenceIssueNumber' must be an issue number"
            raise MalformedDocument(path, msg)
        return CommentConfig(provider, str(issue).strip())


class MenuRegistry:
    """Collect menu entries and order them by weight, then insertion order."""

    def __init__(
        self, skeleton: cabc.Mapping[str, cabc.Iterable[MenuEntry]] | None = None
    ) -> None:
        self._menus: dict[str, dict[str, MenuEntry]] = {}
        self._next_index = 0
        self.conflicts: list[UnresolvableReference] = []
        for entries in (skeleton or {}).values():
            for entry in entries:
                self.add(entry)

    def register(self, document: Document) -> None:
        """Register every ``menu`` declaration carried by ``document``."""
        for declaration in document.menu:
            self.add(
                MenuEntry(
                    menu=declaration.menu,
                    name=declaration.name,
                    weight=declaration.weight,
                    url=document.output_name,
                    source=document.path,
                )
            )

    def add(self, entry: MenuEntry) -> None:
        """Insert ``entry``; a later entry with the same name replaces the earlier.

        A replacement with a different weight is recorded in ``conflicts`` and
        logged, and the build carries on with the later entry.
        """
        menu = self._menus.setdefault(entry.menu, {})
        indexed = dc.replace(entry, index=self._next_index)
        self._next_index += 1
        existing = menu.pop(entry.name, None)
        if existing is not None:
            try:
                _check_weight_conflict(existing, indexed)
            except UnresolvableReference as exc:
                logger.warning("menu conflict: %s", exc)
                self.conflicts.append(exc)
        menu[entry.name] = indexed

    def entries(self, menu: str) -> list[MenuEntry]:
        """Return the entries of ``menu`` sorted by ``(weight, index)``."""
        return sorted(
            self._menus.get(menu, {}).values(),
            key=lambda entry: (entry.weight, entry.index),
        )

    @property
    def names(self) -> list[str]:
        """Return the names of all menus that hold at least one entry."""
        return [name for name, entries in self._menus.items() if entries]


def _check_weight_conflict(existing: MenuEntry, incoming: MenuEntry) -> None:
    """Raise when two entries share a name but disagree on weight."""
    if existing.weight == incoming.weight:
        return
    path = incoming.source or "site config"
    earlier = existing.source or "site config"
    reason = (
        f"menu '{incoming.menu}' entry '{incoming.name}' has weight "
        f"{incoming.weight}, but {earlier} declared weight {existing.weight}"
    )
    raise UnresolvableReference(path, reason)


def _parse_menu(
    value: object, title: str, path: str
) -> tuple[MenuDeclaration, ...]:
    """Normalize the ``menu`` field into declarations.

    Accepts a menu name (``menu: main``), a list of names, or a mapping of
    menu name to ``{name, weight}``; missing names default to the title and
    missing weights to ``0``.
    """
    match value:
        case None:
            return ()
        case str() as menu_name:
            return (MenuDeclaration(menu_name, title, 0),)
        case list() as menu_names:
            if not all(isinstance(name, str) for name in menu_names):
                msg = "'menu' list must contain menu names"
                raise MalformedDocument(path, msg)
            return tuple(MenuDeclaration(name, title, 0) for name in menu_names)
        case dict() as mapping:
            declarations: list[MenuDeclaration] = []
            for menu_name, spec in mapping.items():
                spec = spec or {}
                if not isinstance(spec, dict):
                    msg = f"'menu.{menu_name}' must be a mapping"
                    raise MalformedDocument(path, msg)
                weight = spec.get("weight", 0)
                if isinstance(weight, bool) or not isinstance(weight, int):
                    msg = f"'menu.{menu_name}.weight' must be an integer"
                    raise MalformedDocument(path, msg)
                name = _optional_text(spec.get("name")) or title
                declarations.append(MenuDeclaration(str(menu_name), name, weight))
            return tuple(declarations)
        case _:
            msg = "'menu' must be a menu name, a list, or a mapping"
            raise MalformedDocument(path, msg)


def _parse_keywords(value: object, path: str) -> tuple[str, ...]:
    """Return keywords from a list or a comma-separated string."""
    match value:
        case None:
            return ()
        case str() as text:
            return tuple(part.strip() for part in text.split(",") if part.strip())
        case list() as items:
            return tuple(str(item).strip() for item in items if str(item).strip())
        case _:
            msg = "'keywords' must be a list or a comma-separated string"
            raise MalformedDocument(path, msg)


def _parse_date(value: object, path: str) -> dt.datetime | None:
    """Return a timezone-aware UTC datetime parsed from ``value``."""
    match value:
        case None:
            return None
        case dt.datetime():
            parsed = value
        case dt.date():
            parsed = dt.datetime.combine(value, dt.time())
        case str() as text:
            sanitized = text.strip()
            if not sanitized:
                return None
            if sanitized.endswith("Z"):
                sanitized = sanitized[:-1] + "+00:00"
            try:
                parsed = dt.datetime.fromisoformat(sanitized)
            except ValueError as exc:
                msg = f"'date' is not an ISO 8601 timestamp: {text!r}"
                raise MalformedDocument(path, msg) from exc
        case _:
            msg = "'date' must be a date or timestamp"
            raise MalformedDocument(path, msg)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=dt.UTC)
    return parsed.astimezone(dt.UTC)


def _coerce_bool(value: object, field: str, path: str) -> bool:
    """Interpret booleans and their common string spellings."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    msg = f"'{field}' must be true or false"
    raise MalformedDocument(path, msg)


def _optional_text(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _title_from_path(path: str) -> str:
    stem = PurePosixPath(path).stem
    return stem.replace("-", " ").replace("_", " ").strip().title() or path


def _default_identifier(path: str) -> str:
    return PurePosixPath(path).with_suffix("").as_posix()


__all__ = ["KNOWN_FIELDS", "FrontMatterResolver", "MenuRegistry"]
