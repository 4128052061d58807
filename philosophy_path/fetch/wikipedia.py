"""ArticleSource backed by live Wikipedia pages."""

from __future__ import annotations

from collections import OrderedDict
import logging
import threading

from ..config import FetchConfig
from ..core.errors import FetchError, ResolutionError
from ..core.source import ArticleSource
from ..utils.logging import get_logger, log_event
from .extractor import extract_first_link, extract_title
from .fetcher import FetchResult, fetch_url, resolve_redirect


class WikipediaSource(ArticleSource):
    """Fetches articles over HTTP and applies the first-link heuristics.

    Recently fetched pages are kept in a small in-memory LRU so that
    ``title_of`` and ``first_valid_link`` on the same article share one
    request.
    """

    def __init__(self, cfg: FetchConfig | None = None, logger: logging.Logger | None = None):
        self.cfg = cfg or FetchConfig()
        self._logger = logger or get_logger("source")
        self._pages: OrderedDict[str, FetchResult] = OrderedDict()
        self._lock = threading.Lock()

    def is_random(self, locator: str) -> bool:
        return "Special:Random" in locator or locator.rstrip("/") == self.cfg.random_url.rstrip("/")

    def resolve_random(self, locator: str) -> str:
        result = resolve_redirect(
            locator,
            timeout=self.cfg.timeout_seconds,
            retries=self.cfg.retries,
            user_agent=self.cfg.user_agent,
            trust_env=self.cfg.trust_env,
        )
        if result.error or not result.final_url:
            log_event(
                self._logger,
                "Could not resolve random article",
                level=logging.ERROR,
                event="resolve_failed",
                locator=locator,
                error=result.error,
            )
            raise ResolutionError(result.error or f"Could not resolve {locator} to a specific article")
        return result.final_url

    def first_valid_link(self, locator: str) -> str | None:
        page = self._page(locator)
        return extract_first_link(page.text or "", self.cfg.base_url)

    def title_of(self, locator: str) -> str:
        page = self._page(locator)
        title = extract_title(page.text or "", page.final_url or locator)
        if not title:
            raise FetchError(f"No title found for {locator}", locator=locator)
        return title

    def _page(self, locator: str) -> FetchResult:
        with self._lock:
            cached = self._pages.get(locator)
            if cached is not None:
                self._pages.move_to_end(locator)
                return cached

        result = fetch_url(
            locator,
            timeout=self.cfg.timeout_seconds,
            retries=self.cfg.retries,
            user_agent=self.cfg.user_agent,
            trust_env=self.cfg.trust_env,
        )
        if not result.ok:
            log_event(
                self._logger,
                "Error fetching the Wikipedia page",
                level=logging.ERROR,
                event="fetch_failed",
                locator=locator,
                status_code=result.status_code,
                error=result.error,
            )
            raise FetchError(f"Failed to fetch {locator}: {result.error}", locator=locator)

        with self._lock:
            self._pages[locator] = result
            self._pages.move_to_end(locator)
            while len(self._pages) > max(self.cfg.page_cache_size, 1):
                self._pages.popitem(last=False)
        return result
