"""Two-state model of the responsive navigation toggle and its client assets.

Below the ``large-handheld`` breakpoint the navigation region starts
collapsed and a single toggle control flips it between ``collapsed`` and
``expanded``. At or above the breakpoint the stylesheet always shows the
region and hides the toggle; the logical state is unchanged. State lives only
for the lifetime of a page: every load starts collapsed.

:func:`render_nav_assets` emits the stylesheet and script that implement the
same machine in the browser, using the state names defined here.

Examples
--------
>>> toggle(NavState.COLLAPSED)
<NavState.EXPANDED: 'expanded'>
>>> nav = NavToggle("site-nav")
>>> nav.activate(), nav.activate()
(<NavState.EXPANDED: 'expanded'>, <NavState.COLLAPSED: 'collapsed'>)
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import enum
import typing as typ

from ._constants import ASSETS_DIRNAME, NAV_BREAKPOINT, NAV_SCRIPT_NAME, SITE_CSS_NAME

if typ.TYPE_CHECKING:
    from pathlib import Path

    from jinja2 import Environment

    from .config import SiteConfig

ACTIVE_CLASS = "is-active"


class NavState(enum.Enum):
    """Logical state of a collapsible navigation region."""

    COLLAPSED = "collapsed"
    EXPANDED = "expanded"


def toggle(state: NavState) -> NavState:
    """Return the state reached by activating the toggle once from ``state``."""
    if state is NavState.COLLAPSED:
        return NavState.EXPANDED
    return NavState.COLLAPSED


def initial_state(width: int, breakpoints: cabc.Mapping[str, int]) -> NavState:
    """Return the state a region presents on load at viewport ``width``.

    At or above the ``large-handheld`` breakpoint the region is always shown,
    which is equivalent to ``EXPANDED``; below it every load starts collapsed.
    """
    if width >= breakpoints[NAV_BREAKPOINT]:
        return NavState.EXPANDED
    return NavState.COLLAPSED


def is_visible(
    state: NavState, width: int, breakpoints: cabc.Mapping[str, int]
) -> bool:
    """Return whether the region is shown for ``state`` at viewport ``width``."""
    return state is NavState.EXPANDED or width >= breakpoints[NAV_BREAKPOINT]


@dc.dataclass(slots=True)
class NavToggle:
    """A collapsible region bound to a single toggle control."""

    region: str
    state: NavState = NavState.COLLAPSED

    def activate(self) -> NavState:
        """Flip the region's state; the only transition the control offers."""
        self.state = toggle(self.state)
        return self.state

    def reload(self) -> None:
        """Discard the current state as a full page load does."""
        self.state = NavState.COLLAPSED


def render_nav_assets(site: SiteConfig, env: Environment) -> dict[str, str]:
    """Render the responsive stylesheet and toggle script.

    Returns
    -------
    dict[str, str]
        Mapping of output-root relative path to file contents.
    """
    css = env.get_template("site.css.jinja").render(
        theme=site.theme,
        breakpoints=site.breakpoints,
        nav_breakpoint_name=NAV_BREAKPOINT,
        active_class=ACTIVE_CLASS,
    )
    script = env.get_template("nav.js.jinja").render(
        collapsed=NavState.COLLAPSED.value,
        expanded=NavState.EXPANDED.value,
        active_class=ACTIVE_CLASS,
    )
    return {
        f"{ASSETS_DIRNAME}/{SITE_CSS_NAME}": css,
        f"{ASSETS_DIRNAME}/{NAV_SCRIPT_NAME}": script,
    }


def write_nav_assets(site: SiteConfig, env: Environment) -> list[Path]:
    """Write the navigation assets beneath the output directory."""
    written: list[Path] = []
    for relative, contents in render_nav_assets(site, env).items():
        path = site.output_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(contents, encoding="utf-8")
        written.append(path)
    return written


__all__ = [
    "ACTIVE_CLASS",
    "NavState",
    "NavToggle",
    "initial_state",
    "is_visible",
    "render_nav_assets",
    "toggle",
    "write_nav_assets",
]
