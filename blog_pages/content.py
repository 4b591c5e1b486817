r"""Discover content files and split their front matter from the body.

Content files start with a structured metadata block. Three delimiter styles
are recognised: YAML between ``---`` lines, TOML between ``+++`` lines, and a
leading JSON object. Everything after the block is the markdown body.

Example
-------
>>> from blog_pages.content import split_front_matter
>>> split = split_front_matter("---\ntitle: About\n---\n## Who am I?\n", "about.md")
>>> split.format, split.body
('yaml', '## Who am I?\n')
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import json
import logging
import os
import tomllib
import typing as typ
from pathlib import Path

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from ._constants import CONTENT_EXTENSIONS, TOML_DELIMITER, YAML_DELIMITER
from .errors import MalformedDocument

logger = logging.getLogger(__name__)

FrontMatterFormat = typ.Literal["yaml", "toml", "json"]
_FENCES: dict[str, FrontMatterFormat] = {
    YAML_DELIMITER: "yaml",
    TOML_DELIMITER: "toml",
}


@dc.dataclass(frozen=True, slots=True)
class SplitDocument:
    """Raw front-matter block and body separated from a content file."""

    format: FrontMatterFormat
    front_matter: str
    body: str


@dc.dataclass(frozen=True, slots=True)
class RawDocument:
    """A discovered content file with parsed but unresolved metadata.

    Attributes
    ----------
    path : str
        POSIX path relative to the content root; unique per document.
    source_path : Path
        Absolute location of the file on disk.
    metadata : dict[str, Any]
        Parsed front-matter mapping.
    body : str
        Markdown body following the front matter.
    discovery_index : int
        Position of the file in the discovery sequence.
    """

    path: str
    source_path: Path
    metadata: dict[str, typ.Any]
    body: str
    discovery_index: int


@dc.dataclass(frozen=True, slots=True)
class LoadFailure:
    """A content file that could not be split or parsed."""

    path: str
    error: MalformedDocument
    discovery_index: int


def split_front_matter(text: str, path: str) -> SplitDocument:
    """Split ``text`` into its front-matter block and markdown body.

    Parameters
    ----------
    text : str
        Full content file text.
    path : str
        Document path used in error messages.

    Returns
    -------
    SplitDocument
        Detected format, the raw front-matter block, and the body.

    Raises
    ------
    MalformedDocument
        When no recognised opening delimiter is present or the closing
        delimiter is missing.
    """
    stripped = text.lstrip("\ufeff").lstrip()
    if stripped.startswith("{"):
        try:
            _value, end = json.JSONDecoder().raw_decode(stripped)
        except json.JSONDecodeError as exc:
            msg = f"unterminated or invalid JSON front matter ({exc.msg})"
            raise MalformedDocument(path, msg) from exc
        body = stripped[end:]
        if body.startswith("\r\n"):
            body = body[2:]
        elif body.startswith("\n"):
            body = body[1:]
        return SplitDocument("json", stripped[:end], body)

    lines = stripped.splitlines(keepends=True)
    opening = lines[0].strip() if lines else ""
    fmt = _FENCES.get(opening)
    if fmt is None:
        msg = "no front matter delimiter found"
        raise MalformedDocument(path, msg)

    for idx in range(1, len(lines)):
        if lines[idx].strip() == opening:
            front = "".join(lines[1:idx])
            body = "".join(lines[idx + 1 :])
            return SplitDocument(fmt, front, body)

    msg = f"front matter opened with '{opening}' is never closed"
    raise MalformedDocument(path, msg)


def parse_front_matter(
    fmt: FrontMatterFormat, block: str, path: str
) -> dict[str, typ.Any]:
    """Parse a front-matter block into a mapping.

    Raises
    ------
    MalformedDocument
        When the block has a syntax error or is not a mapping.
    """
    try:
        match fmt:
            case "yaml":
                loader = YAML(typ="safe")
                loader.version = (1, 2)
                loaded = loader.load(block)
            case "toml":
                loaded = tomllib.loads(block)
            case "json":
                loaded = json.loads(block)
    except (YAMLError, tomllib.TOMLDecodeError, json.JSONDecodeError) as exc:
        msg = f"invalid {fmt.upper()} front matter: {exc}"
        raise MalformedDocument(path, msg) from exc

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        msg = f"{fmt.upper()} front matter must be a mapping"
        raise MalformedDocument(path, msg)
    return dict(loaded)


class ContentLoader:
    """Discover content documents beneath a root directory."""

    def __init__(
        self, root: Path, *, extensions: cabc.Iterable[str] = CONTENT_EXTENSIONS
    ) -> None:
        self.root = root
        self.extensions = tuple(ext.lower() for ext in extensions)

    def iter_documents(self) -> cabc.Iterator[RawDocument | LoadFailure]:
        """Yield every content file under the root, re-scanning on each call.

        Files are visited in sorted directory order so repeated scans agree;
        that order carries no meaning beyond breaking menu weight ties.
        Hidden entries (leading ``.`` or ``_``) are skipped. A file whose
        front matter is malformed is yielded as a :class:`LoadFailure` so the
        remaining files are still discovered.

        Raises
        ------
        FileNotFoundError
            If the content root does not exist.
        """
        if not self.root.is_dir():
            msg = f"Content directory '{self.root}' not found."
            raise FileNotFoundError(msg)

        index = 0
        for dirpath, dirnames, filenames in os.walk(self.root):
            dirnames[:] = sorted(d for d in dirnames if not _is_hidden(d))
            for filename in sorted(filenames):
                if _is_hidden(filename):
                    continue
                if os.path.splitext(filename)[1].lower() not in self.extensions:
                    continue
                source_path = Path(dirpath) / filename
                rel_path = source_path.relative_to(self.root).as_posix()
                logger.debug("discovered %s", rel_path)
                yield self._load(source_path, rel_path, index)
                index += 1

    @staticmethod
    def _load(source_path: Path, rel_path: str, index: int) -> RawDocument | LoadFailure:
        """Read and split a single file, capturing malformed front matter."""
        try:
            text = source_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            error = MalformedDocument(rel_path, f"not valid UTF-8 ({exc.reason})")
            return LoadFailure(rel_path, error, index)
        try:
            split = split_front_matter(text, rel_path)
            metadata = parse_front_matter(split.format, split.front_matter, rel_path)
        except MalformedDocument as exc:
            return LoadFailure(rel_path, exc, index)
        return RawDocument(
            path=rel_path,
            source_path=source_path,
            metadata=metadata,
            body=split.body,
            discovery_index=index,
        )


def _is_hidden(name: str) -> bool:
    return name.startswith((".", "_"))


__all__ = [
    "ContentLoader",
    "LoadFailure",
    "RawDocument",
    "SplitDocument",
    "parse_front_matter",
    "split_front_matter",
]
