"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- FetchConfig: HTTP fetching settings for the Wikipedia source
- EngineConfig: Target article and traversal limits
- CacheConfig: Path cache location
- BatchConfig: Batch tester settings
- ServerConfig: HTTP server settings
- LoggingConfig: Logging behavior
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
import hashlib
from pathlib import Path
from typing import Any

import yaml


@dataclass
class FetchConfig:
    """Configuration for fetching Wikipedia articles.

    Attributes:
        base_url: Site root that relative ``/wiki/`` links are joined against
        random_path: Path of the "pick any article" page
        timeout_seconds: HTTP request timeout
        retries: Number of retry attempts for failed requests
        trust_env: Whether to respect system proxy settings
        user_agent: HTTP User-Agent header string
        page_cache_size: Number of recently fetched pages kept in memory
    """

    base_url: str = "https://en.wikipedia.org"
    random_path: str = "/wiki/Special:Random"
    timeout_seconds: float = 20.0
    retries: int = 2
    trust_env: bool = True
    user_agent: str = "philosophy-path/0.1 (first-link crawler; +https://en.wikipedia.org/wiki/Wikipedia:Getting_to_Philosophy)"
    page_cache_size: int = 32

    @property
    def random_url(self) -> str:
        return self.base_url.rstrip("/") + self.random_path


@dataclass
class EngineConfig:
    """Configuration for the path engine.

    Attributes:
        target_url: Article every traversal tries to reach
        max_hops: Maximum number of links followed before giving up
    """

    target_url: str = "https://en.wikipedia.org/wiki/Philosophy"
    max_hops: int = 100


@dataclass
class CacheConfig:
    """Configuration for the path cache.

    Attributes:
        enabled: Whether discovered paths are loaded from and saved to disk
        dir: Directory holding one cache file per target article
    """

    enabled: bool = True
    dir: str = ".cache/paths"


@dataclass
class BatchConfig:
    """Configuration for the batch tester.

    Attributes:
        count: Number of random traversals to run
        delay_seconds: Pause between traversals
        top_articles: How many of the most common articles to report
    """

    count: int = 25
    delay_seconds: float = 0.01
    top_articles: int = 5


@dataclass
class ServerConfig:
    host: str = "127.0.0.1"
    port: int = 3000


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        filename: Name of the log file
        log_dir: Directory for the log file; file logging is off when unset
    """

    level: str = "INFO"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    filename: str = "run.jsonl"
    log_dir: str | None = None


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    fetch: FetchConfig = field(default_factory=FetchConfig)
    engine: EngineConfig = field(default_factory=EngineConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    batch: BatchConfig = field(default_factory=BatchConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults."""
    if not path:
        return AppConfig()

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    return _merge_config(AppConfig(), raw)


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig.

    Unknown sections and unknown keys inside a section are ignored.
    """
    data = asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict) and isinstance(data[key], dict):
            known = {k: v for k, v in value.items() if k in data[key]}
            data[key].update(known)
    return _fromdict(data)


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    return AppConfig(
        fetch=FetchConfig(**data["fetch"]),
        engine=EngineConfig(**data["engine"]),
        cache=CacheConfig(**data["cache"]),
        batch=BatchConfig(**data["batch"]),
        server=ServerConfig(**data["server"]),
        logging=LoggingConfig(**data["logging"]),
    )


def cache_file_for(cfg: CacheConfig, target_url: str) -> Path:
    """Return the cache file used for paths towards ``target_url``.

    Cached paths end at one particular target, so each target gets its
    own file. The URL is hashed to keep the filename safe on all
    filesystems.
    """
    digest = hashlib.sha256(target_url.encode("utf-8")).hexdigest()
    return Path(cfg.dir) / f"{digest}.json"
