"""Local preview server with polling rebuilds.

``blog serve`` builds the site, serves the output directory over HTTP, and
optionally polls the content, static, template, and config paths for
modification-time changes, rebuilding when any of them change.

Each rebuild bumps :attr:`ChangeWatcher.generation`. The server reports that
number at ``/__reload`` and the generated ``assets/reload.js`` polls it, so
open pages refresh after a rebuild.
"""

from __future__ import annotations

import collections.abc as cabc
import functools
import logging
import threading
import typing as typ
from http import HTTPStatus
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path

from ._constants import ASSETS_DIRNAME, RELOAD_ENDPOINT, RELOAD_SCRIPT_NAME

if typ.TYPE_CHECKING:
    from jinja2 import Environment

    from .config import SiteConfig

logger = logging.getLogger(__name__)

Snapshot = dict[str, float]


def snapshot(paths: cabc.Iterable[Path]) -> Snapshot:
    """Return the modification time of every file beneath ``paths``."""
    state: Snapshot = {}
    for root in paths:
        if root.is_file():
            state[str(root)] = root.stat().st_mtime
            continue
        if not root.is_dir():
            continue
        for path in sorted(root.rglob("*")):
            if path.is_file():
                state[str(path)] = path.stat().st_mtime
    return state


class ChangeWatcher:
    """Poll a set of paths and invoke a callback when anything changes."""

    def __init__(
        self,
        paths: cabc.Iterable[Path],
        on_change: cabc.Callable[[], object],
        *,
        interval: float = 1.0,
    ) -> None:
        self.paths = tuple(paths)
        self.on_change = on_change
        self.interval = interval
        self.generation = 0
        self._state = snapshot(self.paths)

    def check(self) -> bool:
        """Rebuild once if the tree differs from the last snapshot."""
        current = snapshot(self.paths)
        if current == self._state:
            return False
        self._state = current
        logger.info("change detected; rebuilding")
        self.on_change()
        self.generation += 1
        return True

    def run(self, stop: threading.Event) -> None:
        """Poll until ``stop`` is set."""
        while not stop.wait(self.interval):
            self.check()


class PreviewServer(ThreadingHTTPServer):
    """HTTP server that knows the watcher driving its rebuilds."""

    watcher: ChangeWatcher | None = None


class _PreviewHandler(SimpleHTTPRequestHandler):
    server: PreviewServer

    def do_GET(self) -> None:  # noqa: N802
        """Answer the reload endpoint, otherwise serve files from the site."""
        if self.path.split("?", 1)[0] != RELOAD_ENDPOINT:
            super().do_GET()
            return
        watcher = self.server.watcher
        payload = str(watcher.generation if watcher else 0).encode("ascii")
        self.send_response(HTTPStatus.OK)
        self.send_header("Content-Type", "text/plain; charset=ascii")
        self.send_header("Content-Length", str(len(payload)))
        self.send_header("Cache-Control", "no-store")
        self.end_headers()
        self.wfile.write(payload)

    def log_message(self, format: str, *args: object) -> None:  # noqa: A002
        logger.debug("%s - %s", self.address_string(), format % args)


def make_server(
    site_dir: Path, host: str, port: int, watcher: ChangeWatcher | None = None
) -> PreviewServer:
    """Return an HTTP server that serves files from ``site_dir``."""
    handler = functools.partial(_PreviewHandler, directory=str(site_dir))
    server = PreviewServer((host, port), handler)
    server.watcher = watcher
    return server


def write_reload_script(
    site: SiteConfig, env: Environment, interval: float = 1.0
) -> Path:
    """Write the preview reload script beneath the output directory."""
    script = env.get_template("reload.js.jinja").render(
        endpoint=RELOAD_ENDPOINT, interval_ms=int(interval * 1000)
    )
    path = site.output_dir / ASSETS_DIRNAME / RELOAD_SCRIPT_NAME
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(script, encoding="utf-8")
    return path


def serve(
    site_dir: Path,
    *,
    host: str = "127.0.0.1",
    port: int = 4000,
    watcher: ChangeWatcher | None = None,
) -> None:
    """Serve ``site_dir`` until interrupted, polling ``watcher`` in the background."""
    stop = threading.Event()
    thread: threading.Thread | None = None
    if watcher is not None:
        thread = threading.Thread(target=watcher.run, args=(stop,), daemon=True)
        thread.start()
    with make_server(site_dir, host, port, watcher) as httpd:
        bound_host, bound_port = httpd.server_address[:2]
        print(f"serving {site_dir} at http://{bound_host}:{bound_port}/")
        try:
            httpd.serve_forever()
        except KeyboardInterrupt:
            print("stopping preview server")
        finally:
            stop.set()
            if thread is not None:
                thread.join(timeout=watcher.interval * 2 if watcher else None)


__all__ = [
    "ChangeWatcher",
    "PreviewServer",
    "make_server",
    "serve",
    "snapshot",
    "write_reload_script",
]
