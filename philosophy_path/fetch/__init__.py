"""Fetching and parsing Wikipedia articles."""

from .extractor import extract_first_link, extract_title, title_from_url
from .fetcher import FetchResult, fetch_url, resolve_redirect
from .wikipedia import WikipediaSource

__all__ = [
    "FetchResult",
    "WikipediaSource",
    "extract_first_link",
    "extract_title",
    "fetch_url",
    "resolve_redirect",
    "title_from_url",
]
