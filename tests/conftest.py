"""Shared fixtures: an in-memory article source for engine tests."""

from __future__ import annotations

import pytest

from philosophy_path.core.errors import FetchError, ResolutionError
from philosophy_path.core.source import ArticleSource

RANDOM = "Special:Random"


class FakeSource(ArticleSource):
    """Article graph held in dicts.

    ``links`` maps a locator to the locator of its first valid link (or
    None for a dead end). Titles default to the locator itself; ``titles``
    overrides that, e.g. to model two URLs of the same article.
    """

    def __init__(self, links, titles=None, random_targets=None, broken=(), untitled=()):
        self.links = dict(links)
        self.titles = dict(titles or {})
        self.random_targets = list(random_targets or [])
        self.broken = set(broken)
        self.untitled = set(untitled)
        self.calls: list[tuple[str, str]] = []

    def is_random(self, locator):
        return locator == RANDOM

    def resolve_random(self, locator):
        self.calls.append(("resolve_random", locator))
        if not self.random_targets:
            raise ResolutionError("no random article available")
        return self.random_targets.pop(0)

    def first_valid_link(self, locator):
        self.calls.append(("first_valid_link", locator))
        if locator in self.broken:
            raise FetchError(f"Failed to fetch {locator}", locator=locator)
        return self.links.get(locator)

    def title_of(self, locator):
        self.calls.append(("title_of", locator))
        if locator in self.untitled:
            raise FetchError(f"No title found for {locator}", locator=locator)
        return self.titles.get(locator, locator)

    def followed(self):
        return [loc for method, loc in self.calls if method == "first_valid_link"]


@pytest.fixture
def make_source():
    return FakeSource
