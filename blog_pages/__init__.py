"""Build a static personal blog from markdown articles with front matter.

This package discovers content files, resolves their front matter against the
site configuration, renders them through Jinja templates, and writes static
HTML together with the responsive navigation assets.

Exports
-------
- ``app``: Cyclopts application entry for the ``build`` and ``serve`` commands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from blog_pages import main
>>> main()  # doctest: +SKIP
>>> from blog_pages import app
>>> callable(app)
True
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
