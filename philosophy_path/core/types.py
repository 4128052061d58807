"""
Core data types for path discovery.

- ArticleLocator / ArticleTitle / Path: aliases used across the engine
- PathOutcome: how a traversal ended
- PathResult: the discovered path plus diagnostics
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

ArticleLocator = str
ArticleTitle = str
Path = list[ArticleTitle]


class PathOutcome(str, Enum):
    """Terminal condition of a traversal.

    ``unreached`` is used for paths answered from the cache that stop short
    of the target; a cached dead end and a cached loop look the same.
    """

    REACHED = "reached"
    DEAD_END = "dead_end"
    LOOP = "loop"
    EXCEEDED = "exceeded"
    FETCH_ERROR = "fetch_error"
    UNREACHED = "unreached"


@dataclass
class PathResult:
    """Result of a single ``find_path`` call.

    Attributes:
        path: Titles from the starting article onward; never empty
        outcome: How the traversal ended
        target: Title of the target article, if it was resolved
        cached: True when the answer came straight from the cache
        locators: Locators visited by this traversal, for diagnostics only
        error: Error message when ``outcome`` is ``fetch_error``
    """

    path: Path
    outcome: PathOutcome
    target: ArticleTitle | None = None
    cached: bool = False
    locators: list[ArticleLocator] = field(default_factory=list)
    error: str | None = None

    @property
    def reached(self) -> bool:
        return bool(self.path) and self.target is not None and self.path[-1] == self.target

    @property
    def start(self) -> ArticleTitle:
        return self.path[0]

    def __len__(self) -> int:
        return len(self.path)
