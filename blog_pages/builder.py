"""High-level orchestration for a full site build.

:class:`SiteBuilder` runs the pipeline once: discover content with
:class:`~blog_pages.content.ContentLoader`, resolve front matter with
:class:`~blog_pages.resolver.FrontMatterResolver`, register menus, render every
published document with :class:`~blog_pages.generator.PageRenderer`, and write
the pages alongside generated stylesheets, the navigation script, copied static
assets, and the post listing.

Failures are isolated per document. A file with malformed front matter or an
unterminated code fence is reported in :attr:`BuildReport.failures` and the
remaining documents are still written; menu conflicts are reported as
warnings. Bodies are expanded before menus and the listing are built, so a
document that fails to render is never linked. HTML pages and generated
assets left in the output directory by an earlier run, such as a preview that
included drafts, are removed when this run does not produce them. Rendering
injects no wall-clock values, so rebuilding unchanged content produces
byte-identical files.

Example
-------
>>> from pathlib import Path
>>> from blog_pages.config import load_site_config
>>> from blog_pages.builder import SiteBuilder
>>> site = load_site_config(Path("config/site.yaml"))  # doctest: +SKIP
>>> report = SiteBuilder(site).run()  # doctest: +SKIP
>>> report.ok  # doctest: +SKIP
True
"""

from __future__ import annotations

import dataclasses as dc
import logging
import shutil
import typing as typ

from ._constants import ASSETS_DIRNAME, OUTPUT_SUFFIX, PYGMENTS_CSS_NAME, STATIC_DIRNAME
from .content import ContentLoader, LoadFailure
from .errors import BuildError, MalformedDocument, RenderError, UnresolvableReference
from .generator import HtmlContentRenderer, PageRenderer, build_environment
from .listing import PostListingBuilder
from .nav import write_nav_assets
from .resolver import FrontMatterResolver, MenuRegistry
from .server import write_reload_script

if typ.TYPE_CHECKING:
    from pathlib import Path

    from .config import SiteConfig
    from .generator import RenderedBody
    from .models import Document, RenderedPage

logger = logging.getLogger(__name__)


@dc.dataclass(frozen=True, slots=True)
class BuildFailure:
    """A document that could not be emitted and why."""

    path: str
    reason: str


@dc.dataclass(slots=True)
class BuildReport:
    """Outcome of a single build run.

    Attributes
    ----------
    pages : list[RenderedPage]
        Pages rendered and written, in discovery order.
    written : list[Path]
        Every file written, including generated assets and the listing.
    failures : list[BuildFailure]
        Documents skipped because of malformed front matter, rendering
        errors, or output path collisions.
    warnings : list[str]
        Degraded-but-continuing conditions such as menu conflicts.
    drafts : list[str]
        Paths of draft documents excluded from the output.
    removed : list[Path]
        Stale pages and assets from earlier runs deleted by this one.
    """

    pages: list[RenderedPage] = dc.field(default_factory=list)
    written: list[Path] = dc.field(default_factory=list)
    failures: list[BuildFailure] = dc.field(default_factory=list)
    warnings: list[str] = dc.field(default_factory=list)
    drafts: list[str] = dc.field(default_factory=list)
    removed: list[Path] = dc.field(default_factory=list)

    @property
    def ok(self) -> bool:
        """Return whether every document was emitted."""
        return not self.failures

    @property
    def rendered_count(self) -> int:
        """Return the number of document pages written."""
        return len(self.pages)


class SiteBuilder:
    """Build the static site described by a :class:`SiteConfig`."""

    def __init__(
        self,
        site: SiteConfig,
        *,
        include_drafts: bool = False,
        clean: bool = False,
        live_reload: bool = False,
    ) -> None:
        """Initialize the builder.

        Parameters
        ----------
        site : SiteConfig
            Immutable configuration shared with every component.
        include_drafts : bool, optional
            Render documents marked ``draft: true`` (for local previews).
        clean : bool, optional
            Remove the whole output directory before building, including
            files the builder never generates.
        live_reload : bool, optional
            Emit the preview reload script and reference it from every page.
        """
        self.site = site
        self.include_drafts = include_drafts
        self.clean = clean
        self.live_reload = live_reload
        self.env = build_environment(site)
        self.content_renderer = HtmlContentRenderer(site.theme.pygments_style)

    def run(self) -> BuildReport:
        """Run the full pipeline and return the build report.

        Raises
        ------
        FileNotFoundError
            When the content directory does not exist.
        """
        report = BuildReport()
        bodies = self._expand_bodies(self._resolve_documents(report), report)
        documents = [document for document, _body in bodies]

        menus = MenuRegistry(self.site.menus)
        for document in documents:
            menus.register(document)
        report.warnings.extend(str(conflict) for conflict in menus.conflicts)

        out_dir = self.site.output_dir
        if self.clean and out_dir.exists():
            shutil.rmtree(out_dir)
        out_dir.mkdir(parents=True, exist_ok=True)

        renderer = PageRenderer(
            self.site,
            menus,
            env=self.env,
            content_renderer=self.content_renderer,
            live_reload=self.live_reload,
        )
        for document, body in bodies:
            page = renderer.render(document, body=body)
            self._write(page.output_path, page.html, report)
            report.pages.append(page)

        self._write_listing(documents, menus, report)
        self._write_assets(report)
        self._remove_stale(report)
        return report

    def _expand_bodies(
        self, documents: list[Document], report: BuildReport
    ) -> list[tuple[Document, RenderedBody]]:
        """Expand every markdown body, dropping documents that fail to render."""
        expanded: list[tuple[Document, RenderedBody]] = []
        for document in documents:
            try:
                body = self.content_renderer.markdown(document.body, path=document.path)
            except RenderError as exc:
                self._record_failure(report, exc)
                continue
            expanded.append((document, body))
        return expanded

    def _resolve_documents(self, report: BuildReport) -> list[Document]:
        """Load and resolve publishable documents, recording per-file failures."""
        resolver = FrontMatterResolver(self.site)
        claimed: dict[str, str] = {}
        documents: list[Document] = []
        for item in ContentLoader(self.site.content_dir).iter_documents():
            if isinstance(item, LoadFailure):
                self._record_failure(report, item.error)
                continue
            try:
                document = resolver.resolve(item)
            except MalformedDocument as exc:
                self._record_failure(report, exc)
                continue
            if document.draft and not self.include_drafts:
                logger.debug("skipping draft %s", document.path)
                report.drafts.append(document.path)
                continue
            owner = claimed.get(document.output_name)
            if owner is not None:
                reason = f"output path {document.output_name} is already produced by {owner}"
                self._record_failure(report, UnresolvableReference(document.path, reason))
                continue
            claimed[document.output_name] = document.path
            documents.append(document)
        return documents

    def _write_listing(
        self, documents: list[Document], menus: MenuRegistry, report: BuildReport
    ) -> None:
        if not self.site.listing.enabled:
            return
        listing = PostListingBuilder(
            self.site, menus, self.env, live_reload=self.live_reload
        )
        if any(doc.output_name == listing.output_name for doc in documents):
            warning = (
                f"post listing skipped: {listing.output_name} is produced by a "
                "content document"
            )
            logger.warning(warning)
            report.warnings.append(warning)
            return
        report.written.append(listing.run(documents))

    def _write_assets(self, report: BuildReport) -> None:
        """Write generated stylesheets and scripts, then copy static files."""
        assets_dir = self.site.output_dir / ASSETS_DIRNAME
        self._write(
            assets_dir / PYGMENTS_CSS_NAME, self.content_renderer.stylesheet, report
        )
        report.written.extend(write_nav_assets(self.site, self.env))
        if self.live_reload:
            report.written.append(write_reload_script(self.site, self.env))

        static_dir = self.site.static_dir
        if static_dir is None:
            return
        if not static_dir.is_dir():
            logger.warning("static directory %s not found; skipping copy", static_dir)
            return
        target = self.site.output_dir / STATIC_DIRNAME
        shutil.copytree(static_dir, target, dirs_exist_ok=True)
        report.written.extend(
            sorted(path for path in target.rglob("*") if path.is_file())
        )

    def _remove_stale(self, report: BuildReport) -> None:
        """Delete pages and generated assets this run did not write.

        Only ``.html`` files anywhere in the output directory and files in
        the generated ``assets`` folder are candidates; other files placed in
        the output directory are left alone.
        """
        out_dir = self.site.output_dir
        written = set(report.written)
        assets_dir = out_dir / ASSETS_DIRNAME
        for path in sorted(out_dir.rglob("*")):
            if not path.is_file() or path in written:
                continue
            if path.suffix == OUTPUT_SUFFIX or path.parent == assets_dir:
                logger.info("removing stale output %s", path)
                path.unlink()
                report.removed.append(path)

    @staticmethod
    def _write(path: Path, contents: str, report: BuildReport) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        if not contents.endswith("\n"):
            contents += "\n"
        path.write_text(contents, encoding="utf-8")
        report.written.append(path)

    @staticmethod
    def _record_failure(report: BuildReport, error: BuildError) -> None:
        logger.info("skipping %s: %s", error.path, error.reason)
        report.failures.append(BuildFailure(error.path, error.reason))


__all__ = ["BuildFailure", "BuildReport", "SiteBuilder"]
