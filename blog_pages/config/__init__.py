"""Load and validate the blog's site configuration YAML.

This subpackage parses ``config/site.yaml``, applies defaults for theming,
comment providers, breakpoints, and the post listing, resolves directories
against the config file's location, and produces an immutable
:class:`SiteConfig` that every build component receives by parameter.

Examples
--------
>>> from pathlib import Path
>>> from blog_pages.config import load_site_config
>>> site = load_site_config(Path("config/site.yaml"))  # doctest: +SKIP
>>> site.content_dir.name  # doctest: +SKIP
'content'
"""

from .loader import load_site_config
from .models import (
    CommentsConfig,
    ListingConfig,
    SiteConfig,
    SiteConfigError,
    ThemeConfig,
)

__all__ = [
    "CommentsConfig",
    "ListingConfig",
    "SiteConfig",
    "SiteConfigError",
    "ThemeConfig",
    "load_site_config",
]
