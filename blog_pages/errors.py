"""Exception taxonomy for per-document build failures.

Each error carries the offending document ``path`` and a human readable
``reason`` so the build driver can report one line per failing document
without inspecting the exception type.
"""

from __future__ import annotations


class BuildError(Exception):
    """Base class for errors tied to a single content document."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class MalformedDocument(BuildError):
    """Raised when front matter is missing, unterminated, or unparseable."""


class UnresolvableReference(BuildError):
    """Raised when menu metadata conflicts with an earlier registration."""


class RenderError(BuildError):
    """Raised when the markdown body cannot be expanded into HTML."""


__all__ = ["BuildError", "MalformedDocument", "RenderError", "UnresolvableReference"]
