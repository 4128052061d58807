"""Exceptions raised by the path engine and its collaborators."""

from __future__ import annotations


class PathError(Exception):
    """Base class for all path discovery errors."""


class ResolutionError(PathError):
    """A random-article reference could not be resolved to an article."""


class FetchError(PathError):
    """An article could not be fetched or its link/title extracted."""

    def __init__(self, message: str, locator: str | None = None):
        super().__init__(message)
        self.locator = locator


class CacheIOError(PathError):
    """The path cache could not be read from or written to disk."""
