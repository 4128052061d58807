"""
Core path discovery: the traversal engine, its cache and the
interface it expects from an article source.
"""

from .cache import PathCache
from .engine import PathEngine
from .errors import CacheIOError, FetchError, PathError, ResolutionError
from .source import ArticleSource
from .types import PathOutcome, PathResult

__all__ = [
    "ArticleSource",
    "CacheIOError",
    "FetchError",
    "PathCache",
    "PathEngine",
    "PathError",
    "PathOutcome",
    "PathResult",
    "ResolutionError",
]
