"""
Philosophy Path - first-link chains between Wikipedia articles.

Following the first valid link of the first paragraph of almost any
Wikipedia article eventually leads to "Philosophy". This package walks
those chains, memoises every path it discovers and reports on them.

Main entry point is the CLI via the `philosophy-path` command.

Example:
    $ philosophy-path find https://en.wikipedia.org/wiki/Kevin_Bacon
    $ philosophy-path batch -n 25 --report report.html
"""

__all__ = [
    "__version__",
    "PathCache",
    "PathEngine",
    "PathOutcome",
    "PathResult",
    "WikipediaSource",
]
__version__ = "0.1.0"

from .core import PathCache, PathEngine, PathOutcome, PathResult
from .fetch.wikipedia import WikipediaSource
