"""Cyclopts CLI entrypoint for building and previewing the blog.

The ``blog`` console script wraps :class:`~blog_pages.builder.SiteBuilder`.
``blog build`` performs a one-shot build into the output directory and exits
non-zero when any document failed; ``blog serve`` builds, serves the output
over HTTP, and rebuilds when sources change.

Examples
--------
Build the site described by the default configuration:

>>> from blog_pages.cli import main
>>> main()  # doctest: +SKIP

Build into a scratch directory, including drafts:

>>> from blog_pages.cli import app
>>> app(["build", "--output-dir", "dist", "--include-drafts"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import sys
import typing as typ
from pathlib import Path

from cyclopts import App, Parameter

from ._constants import DEFAULT_CONFIG_PATH
from .builder import BuildReport, SiteBuilder
from .config import SiteConfigError, load_site_config
from .server import ChangeWatcher, serve as serve_site

DEFAULT_CONFIG = Path(DEFAULT_CONFIG_PATH)
EXIT_BUILD_FAILED = 1
EXIT_CONFIG_ERROR = 2

app = App(name="blog", help="Build and preview the static blog.")

ConfigOption = typ.Annotated[
    Path, Parameter(help="Path to site config", env_var="BLOG_CONFIG")
]
OutputOption = typ.Annotated[
    Path | None,
    Parameter(help="Override the output folder", env_var="BLOG_OUTPUT_DIR"),
]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _run_build(
    config: Path,
    output_dir: Path | None,
    *,
    include_drafts: bool = False,
    clean: bool = False,
    live_reload: bool = False,
) -> BuildReport:
    """Load configuration, build once, and print the outcome.

    Raises
    ------
    SystemExit
        With ``EXIT_CONFIG_ERROR`` when the configuration or content
        directory cannot be loaded.
    """
    try:
        site_config = load_site_config(config, output_dir=output_dir)
        report = SiteBuilder(
            site_config,
            include_drafts=include_drafts,
            clean=clean,
            live_reload=live_reload,
        ).run()
    except (FileNotFoundError, SiteConfigError, TypeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        raise SystemExit(EXIT_CONFIG_ERROR) from exc

    for page in report.pages:
        print(f"wrote {_format_path(page.output_path)}")
    for failure in report.failures:
        print(f"error: {failure.path}: {failure.reason}", file=sys.stderr)
    print(f"rendered {report.rendered_count} pages")
    return report


@app.command(help="Build the site once into the output directory.")
def build(
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    output_dir: OutputOption = None,
    include_drafts: typ.Annotated[
        bool, Parameter(help="Render documents marked as drafts")
    ] = False,
    clean: typ.Annotated[
        bool, Parameter(help="Remove the output folder before building")
    ] = False,
    verbose: typ.Annotated[bool, Parameter(help="Log debug output")] = False,
) -> None:
    """Build every published document and exit non-zero if any failed.

    Parameters
    ----------
    config : Path, optional
        Path to ``site.yaml`` (overridable via ``BLOG_CONFIG``).
    output_dir : Path or None, optional
        Override for the configured output directory (``BLOG_OUTPUT_DIR``).
    include_drafts : bool, optional
        Render documents marked ``draft: true``.
    clean : bool, optional
        Delete the output directory before writing.
    verbose : bool, optional
        Enable debug logging.

    Raises
    ------
    SystemExit
        ``1`` when at least one document failed, ``2`` on configuration
        errors.
    """
    _configure_logging(verbose)
    report = _run_build(config, output_dir, include_drafts=include_drafts, clean=clean)
    if not report.ok:
        raise SystemExit(EXIT_BUILD_FAILED)


@app.command(help="Build, serve locally, and rebuild on changes.")
def serve(
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    output_dir: OutputOption = None,
    host: typ.Annotated[
        str, Parameter(help="Interface to bind", env_var="BLOG_HOST")
    ] = "127.0.0.1",
    port: typ.Annotated[
        int, Parameter(help="Port to listen on", env_var="BLOG_PORT")
    ] = 4000,
    watch: typ.Annotated[bool, Parameter(help="Rebuild when sources change")] = True,
    live_reload: typ.Annotated[
        bool, Parameter(help="Refresh open pages after each rebuild")
    ] = True,
    interval: typ.Annotated[
        float, Parameter(help="Seconds between change polls")
    ] = 1.0,
    include_drafts: typ.Annotated[
        bool, Parameter(help="Render documents marked as drafts")
    ] = True,
    verbose: typ.Annotated[bool, Parameter(help="Log debug output")] = False,
) -> None:
    """Serve the built site, rebuilding on source changes when ``watch`` is set.

    Drafts are rendered by default; the next ``blog build`` removes their
    pages and the reload script from the output directory.
    """
    _configure_logging(verbose)
    reload_pages = watch and live_reload
    _run_build(
        config, output_dir, include_drafts=include_drafts, live_reload=reload_pages
    )
    site_config = load_site_config(config, output_dir=output_dir)

    watcher = None
    if watch:
        watched = [config, site_config.content_dir]
        watched.extend(
            path
            for path in (site_config.static_dir, site_config.templates_dir)
            if path is not None
        )

        def _rebuild() -> None:
            try:
                _run_build(
                    config,
                    output_dir,
                    include_drafts=include_drafts,
                    live_reload=reload_pages,
                )
            except SystemExit:
                logging.getLogger(__name__).warning("rebuild failed; keeping last output")

        watcher = ChangeWatcher(watched, _rebuild, interval=interval)

    serve_site(site_config.output_dir, host=host, port=port, watcher=watcher)


def main() -> None:
    """Invoke the Cyclopts application that powers the ``blog`` console command."""
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
