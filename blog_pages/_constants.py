"""Common literal values used across blog_pages.

These constants keep filenames, directory names, and front-matter delimiters
centralized so the loader, renderer, builder, and tests import the same values
without drifting. Intended for internal use within the blog_pages package.

Examples
--------
>>> from blog_pages import _constants
>>> _constants.OUTPUT_SUFFIX
'.html'
>>> "large-handheld" in _constants.DEFAULT_BREAKPOINTS
True
"""

DEFAULT_CONFIG_PATH = "config/site.yaml"
CONTENT_EXTENSIONS = (".md", ".markdown")
OUTPUT_SUFFIX = ".html"
ASSETS_DIRNAME = "assets"
STATIC_DIRNAME = "static"
PYGMENTS_CSS_NAME = "pygments.css"
SITE_CSS_NAME = "site.css"
NAV_SCRIPT_NAME = "nav.js"
RELOAD_SCRIPT_NAME = "reload.js"
RELOAD_ENDPOINT = "/__reload"

YAML_DELIMITER = "---"
TOML_DELIMITER = "+++"

NAV_BREAKPOINT = "large-handheld"
DEFAULT_BREAKPOINTS: dict[str, int] = {
    "small-handheld": 480,
    "large-handheld": 768,
    "tablet": 1024,
    "monitor": 1280,
}
