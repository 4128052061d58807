"""
First-link path discovery.

PathEngine follows the first valid link of each article, starting from a
given (or random) article, until it reaches the target, hits an article
with no valid link, revisits an article, or runs out of hops. Paths are
memoised in a PathCache so that any later traversal reaching an article
already seen is answered from the cache.
"""

from __future__ import annotations

import logging
from typing import Sequence

from .cache import PathCache
from .errors import FetchError
from .source import ArticleSource
from .types import ArticleLocator, ArticleTitle, PathOutcome, PathResult
from ..utils.logging import get_logger, log_event


class PathEngine:
    """Drives traversals against an ArticleSource and a PathCache.

    The cache is injected so callers decide its lifetime and where it is
    stored. A single engine may be shared between threads: cache reads and
    writes are serialized by the cache's own lock.

    Attributes:
        source: Collaborator used to resolve, title and follow articles
        cache: Memo of previously discovered paths
        max_hops: Maximum links followed per traversal (None for no limit)
    """

    def __init__(
        self,
        source: ArticleSource,
        cache: PathCache,
        max_hops: int | None = 100,
        logger: logging.Logger | None = None,
    ):
        self.source = source
        self.cache = cache
        self.max_hops = max_hops
        self._logger = logger or get_logger("engine")
        self._target_titles: dict[ArticleLocator, ArticleTitle] = {}

    def target_title(self, target_locator: ArticleLocator) -> ArticleTitle:
        """Return the title of the target article, fetching it only once."""
        title = self._target_titles.get(target_locator)
        if title is None:
            title = self.source.title_of(target_locator)
            self._target_titles[target_locator] = title
        return title

    def _known_target_title(self, target_locator: ArticleLocator) -> ArticleTitle | None:
        # Only used to label a cached answer, which must not fail on a
        # target that cannot be titled.
        if target_locator in self._target_titles:
            return self._target_titles[target_locator]
        try:
            return self.target_title(target_locator)
        except FetchError as exc:
            log_event(
                self._logger,
                f"Could not title target: {exc}",
                level=logging.WARNING,
                event="target_untitled",
                locator=target_locator,
            )
            return None

    def find_path(self, start_locator: ArticleLocator, target_locator: ArticleLocator) -> PathResult:
        """Find the first-link path from ``start_locator`` towards the target.

        Target detection compares titles, so a target reached through a
        redirect or a different URL form is still recognised.

        A cached start is answered after titling the start alone. The target
        is titled only when it is not memoised yet; if that fails the cached
        path is still returned, with ``target`` None and outcome unreached.

        A FetchError once the walk has started is not raised. The partial
        path comes back with outcome fetch_error and nothing is written to
        the cache: no suffix of an unfinished walk ends at a proven target,
        dead end or loop, and storing one would turn a transient network
        failure into a permanent dead end.

        Raises:
            ResolutionError: If a random start cannot be resolved
            FetchError: If the start article cannot be titled, or the target
                cannot be titled on a cache miss
            CacheIOError: If newly discovered paths cannot be saved
        """
        locator = start_locator
        if self.source.is_random(start_locator):
            locator = self.source.resolve_random(start_locator)
            log_event(self._logger, "Random article resolved", event="random_resolved", locator=locator)

        start_title = self.source.title_of(locator)
        log_event(self._logger, f"Starting with article: {start_title}", event="traversal_start", start=start_title)

        cached = self.cache.get(start_title)
        if cached:
            log_event(self._logger, f'Found cached path for "{start_title}"', event="cache_hit", start=start_title)
            target = self._known_target_title(target_locator)
            outcome = PathOutcome.REACHED if target is not None and cached[-1] == target else PathOutcome.UNREACHED
            return PathResult(path=cached, outcome=outcome, target=target, cached=True, locators=[locator])

        target = self.target_title(target_locator)

        visited: list[ArticleTitle] = [start_title]
        locators: list[ArticleLocator] = [locator]

        if start_title == target or locator == target_locator:
            return self._finish(visited, locators, target, PathOutcome.REACHED)

        current = locator
        hops = 0
        try:
            while True:
                if self.max_hops is not None and hops >= self.max_hops:
                    log_event(
                        self._logger,
                        f"Gave up after {hops} hops",
                        level=logging.WARNING,
                        event="traversal_exceeded",
                        start=start_title,
                        hops=hops,
                    )
                    return PathResult(
                        path=visited, outcome=PathOutcome.EXCEEDED, target=target, locators=locators
                    )

                next_locator = self.source.first_valid_link(current)
                hops += 1
                if next_locator is None:
                    log_event(self._logger, "No next link found. Path terminated.", event="dead_end", at=visited[-1])
                    return self._finish(visited, locators, target, PathOutcome.DEAD_END)

                next_title = self.source.title_of(next_locator)
                log_event(
                    self._logger,
                    f"Next link: {next_title}",
                    level=logging.DEBUG,
                    event="hop",
                    title=next_title,
                    locator=next_locator,
                )

                suffix = self.cache.get(next_title)
                if suffix and next_title not in visited:
                    log_event(
                        self._logger,
                        f'Found cached path from "{next_title}" to destination',
                        event="cache_splice",
                        title=next_title,
                    )
                    visited.append(next_title)
                    locators.append(next_locator)
                    return self._splice(visited, locators, suffix, target)

                if next_title in visited:
                    log_event(
                        self._logger,
                        f"Loop detected at {next_title}. Path terminated.",
                        event="loop",
                        title=next_title,
                    )
                    return self._finish(visited, locators, target, PathOutcome.LOOP)

                visited.append(next_title)
                locators.append(next_locator)

                if next_title == target or next_locator == target_locator:
                    log_event(self._logger, "Reached target article. Path complete.", event="reached", hops=hops)
                    return self._finish(visited, locators, target, PathOutcome.REACHED)

                current = next_locator
        except FetchError as exc:
            # Nothing on a broken walk is proven, so nothing is cached.
            log_event(
                self._logger,
                f"Error during the link-following process: {exc}",
                level=logging.ERROR,
                event="fetch_error",
                at=visited[-1],
                locator=exc.locator,
            )
            return PathResult(
                path=visited,
                outcome=PathOutcome.FETCH_ERROR,
                target=target,
                locators=locators,
                error=str(exc),
            )

    def _finish(
        self,
        visited: list[ArticleTitle],
        locators: list[ArticleLocator],
        target: ArticleTitle,
        outcome: PathOutcome,
    ) -> PathResult:
        path = self.cache.persist_discovered_suffixes(visited)
        return PathResult(path=path, outcome=outcome, target=target, locators=locators)

    def _splice(
        self,
        visited: list[ArticleTitle],
        locators: list[ArticleLocator],
        suffix: Sequence[ArticleTitle],
        target: ArticleTitle,
    ) -> PathResult:
        """Append a cached suffix to the walk and store the stitched path.

        ``visited`` already ends with the title the suffix is cached under.
        A suffix that re-enters the walk is cut just before the repeated
        title and reported as a loop.
        """
        seen = set(visited[:-1])
        cut = len(suffix)
        for i, title in enumerate(suffix):
            if title in seen:
                cut = i
                break
        trimmed = list(suffix[:cut])
        if cut < len(suffix):
            outcome = PathOutcome.LOOP
        elif trimmed[-1] == target:
            outcome = PathOutcome.REACHED
        else:
            outcome = PathOutcome.UNREACHED
        path = self.cache.persist_discovered_suffixes(visited, trimmed)
        return PathResult(path=path, outcome=outcome, target=target, locators=locators)
