"""
HTTP endpoint for path discovery.

``POST /find-path`` takes ``{"startingUrl": ..., "targetUrl": ...}`` and
returns ``{"path": [...], ...}``. Each target gets its own engine and
cache file; engines are created on first use.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from .config import AppConfig, cache_file_for
from .core.cache import PathCache
from .core.engine import PathEngine
from .core.errors import CacheIOError, PathError
from .core.source import ArticleSource
from .fetch.wikipedia import WikipediaSource
from .utils.logging import get_logger, log_event


class FindPathRequest(BaseModel):
    startingUrl: str
    targetUrl: Optional[str] = None


class FindPathResponse(BaseModel):
    path: list[str]
    outcome: str
    cached: bool = False
    target: Optional[str] = None
    error: Optional[str] = None


class EngineRegistry:
    """One PathEngine per target URL, sharing a single article source."""

    def __init__(
        self,
        cfg: AppConfig,
        source_factory: Callable[[], ArticleSource] | None = None,
        logger: logging.Logger | None = None,
    ):
        self.cfg = cfg
        self._logger = logger or get_logger("server")
        self._source = (source_factory or (lambda: WikipediaSource(cfg.fetch)))()
        self._engines: dict[str, PathEngine] = {}
        self._lock = threading.Lock()

    def get(self, target_url: str) -> PathEngine:
        with self._lock:
            engine = self._engines.get(target_url)
            if engine is None:
                cache_path = cache_file_for(self.cfg.cache, target_url) if self.cfg.cache.enabled else None
                cache = PathCache.load(cache_path, logger=get_logger("cache"))
                engine = PathEngine(self._source, cache, max_hops=self.cfg.engine.max_hops)
                self._engines[target_url] = engine
                log_event(
                    self._logger,
                    "Engine created",
                    event="engine_created",
                    target=target_url,
                    cache_file=str(cache_path) if cache_path else None,
                    cached_articles=len(cache),
                )
            return engine


def create_app(cfg: AppConfig | None = None, registry: EngineRegistry | None = None) -> FastAPI:
    cfg = cfg or AppConfig()
    registry = registry or EngineRegistry(cfg)
    logger = get_logger("server")

    app = FastAPI(title="Philosophy Path", version="0.1")
    app.state.registry = registry

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.post("/find-path", response_model=FindPathResponse)
    def find_path(body: FindPathRequest):
        """Follow first links from ``startingUrl`` until the target, a dead end or a loop."""
        target_url = body.targetUrl or cfg.engine.target_url
        log_event(logger, f"Finding path from {body.startingUrl} to {target_url}", event="request")
        engine = registry.get(target_url)
        try:
            result = engine.find_path(body.startingUrl, target_url)
        except CacheIOError as exc:
            log_event(logger, "Cache save failed", level=logging.ERROR, event="cache_save_failed", error=str(exc))
            raise HTTPException(status_code=500, detail=f"Failed to save path cache: {exc}")
        except PathError as exc:
            log_event(logger, "Failed to find path", level=logging.ERROR, event="request_failed", error=str(exc))
            raise HTTPException(status_code=502, detail=f"Failed to find path: {exc}")
        return FindPathResponse(
            path=result.path,
            outcome=result.outcome.value,
            cached=result.cached,
            target=result.target,
            error=result.error,
        )

    return app
