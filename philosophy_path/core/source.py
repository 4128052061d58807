"""
Abstract base class for article sources.

The engine only ever talks to an ArticleSource; fetching pages and
picking the first valid link is left to concrete implementations
(e.g., WikipediaSource).
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from .types import ArticleLocator, ArticleTitle


class ArticleSource(ABC):
    """Interface to the encyclopedia being crawled."""

    @abstractmethod
    def is_random(self, locator: ArticleLocator) -> bool:
        """Return True if ``locator`` means "pick any article"."""
        raise NotImplementedError

    @abstractmethod
    def resolve_random(self, locator: ArticleLocator) -> ArticleLocator:
        """Resolve a "pick any article" locator to a concrete article.

        Raises:
            ResolutionError: If no concrete locator can be determined
        """
        raise NotImplementedError

    @abstractmethod
    def first_valid_link(self, locator: ArticleLocator) -> ArticleLocator | None:
        """Return the first valid link of the article, or None if it has none.

        Raises:
            FetchError: On network or parse failure
        """
        raise NotImplementedError

    @abstractmethod
    def title_of(self, locator: ArticleLocator) -> ArticleTitle:
        """Return the canonical title of the article.

        Raises:
            FetchError: On network or parse failure
        """
        raise NotImplementedError
