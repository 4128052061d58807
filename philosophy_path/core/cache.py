"""
Persistent memo of discovered paths.

The cache maps an article title to the path (a list of titles) from that
article to the target or to the dead end / loop where the walk stopped.
Every stored path satisfies ``path[0] == title`` and every tail
``path[i:]`` is itself a correct path from ``path[i]``, which is what lets
one traversal answer later traversals that reach any article it passed
through.

The mapping lives in memory for the lifetime of the object and is written
back as a single JSON object after each traversal that discovers new
suffixes.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
import tempfile
import threading
from typing import Any, Iterator, Sequence

from .errors import CacheIOError
from ..utils.logging import get_logger, log_event


class PathCache:
    """Title -> path mapping with JSON persistence.

    All reads and writes go through an internal re-entrant lock, so several
    threads sharing one cache (e.g., the HTTP server's worker pool) never
    lose each other's suffixes on save.

    Attributes:
        path: JSON file backing the cache, or None for an in-memory cache
    """

    def __init__(
        self,
        path: Path | None = None,
        entries: dict[str, list[str]] | None = None,
        logger: logging.Logger | None = None,
    ):
        self.path = path
        self._entries: dict[str, list[str]] = dict(entries or {})
        self._lock = threading.RLock()
        self._logger = logger or get_logger("cache")

    @classmethod
    def load(cls, path: Path | None, logger: logging.Logger | None = None) -> PathCache:
        """Load the cache from ``path``.

        A missing, unreadable or corrupt file yields an empty cache; this
        never raises.
        """
        logger = logger or get_logger("cache")
        if path is None:
            return cls(None, logger=logger)
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return cls(path, logger=logger)
        except (OSError, ValueError) as exc:
            log_event(
                logger,
                "Path cache unreadable, starting cold",
                level=logging.WARNING,
                event="cache_load_failed",
                cache_file=str(path),
                error=f"{type(exc).__name__}: {exc}",
            )
            return cls(path, logger=logger)

        if not isinstance(raw, dict):
            log_event(
                logger,
                "Path cache is not a JSON object, starting cold",
                level=logging.WARNING,
                event="cache_load_failed",
                cache_file=str(path),
                error=f"unexpected {type(raw).__name__}",
            )
            return cls(path, logger=logger)

        entries = _valid_entries(raw)
        if len(entries) != len(raw):
            log_event(
                logger,
                "Dropped malformed cache entries",
                level=logging.WARNING,
                event="cache_entries_dropped",
                cache_file=str(path),
                dropped=len(raw) - len(entries),
            )
        return cls(path, entries, logger=logger)

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    def get(self, title: str) -> list[str] | None:
        """Return a copy of the cached path for ``title``, or None."""
        with self._lock:
            cached = self._entries.get(title)
            if not cached:
                return None
            return list(cached)

    def persist_discovered_suffixes(
        self,
        visited: Sequence[str],
        cached_suffix: Sequence[str] = (),
    ) -> list[str]:
        """Store every suffix of the path discovered by a traversal.

        ``cached_suffix`` is the previously cached path that was spliced on
        after ``visited`` (its first element duplicates the node that was
        hit, so it is dropped). For every index ``i`` in ``visited`` the tail
        ``full[i:]`` is stored under ``full[i]`` when it holds more than one
        title. The cache is saved afterwards.

        Returns:
            The full path (``visited`` plus the spliced suffix)

        Raises:
            CacheIOError: If the cache cannot be written to disk
        """
        full = list(visited)
        if cached_suffix:
            full.extend(cached_suffix[1:])

        with self._lock:
            stored = 0
            for i in range(len(visited)):
                suffix = full[i:]
                if len(suffix) > 1:
                    self._entries[full[i]] = suffix
                    stored += 1
            log_event(
                self._logger,
                "Stored path suffixes",
                level=logging.DEBUG,
                event="cache_suffixes_stored",
                start=full[0] if full else None,
                stored=stored,
            )
            self.save()
        return full

    def save(self) -> None:
        """Write the whole mapping to disk.

        The JSON is written to a temporary file in the same directory and
        then moved over the cache file, so a concurrent ``load`` sees either
        the old or the new content, never a partial write.

        Raises:
            CacheIOError: If the file cannot be written
        """
        if self.path is None:
            return
        with self._lock:
            payload = json.dumps(self._entries, ensure_ascii=False, indent=2)
            tmp_name = None
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                fd, tmp_name = tempfile.mkstemp(
                    dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
                )
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(payload)
                os.replace(tmp_name, self.path)
            except OSError as exc:
                if tmp_name is not None and os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise CacheIOError(f"Failed to write path cache {self.path}: {exc}") from exc

    def items(self) -> list[tuple[str, list[str]]]:
        with self._lock:
            return [(title, list(path)) for title, path in self._entries.items()]

    def __contains__(self, title: object) -> bool:
        with self._lock:
            return bool(self._entries.get(title))  # type: ignore[arg-type]

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        with self._lock:
            return iter(list(self._entries))


def _valid_entries(raw: dict[str, Any]) -> dict[str, list[str]]:
    """Keep only entries shaped like ``title -> [title, ...]``."""
    entries: dict[str, list[str]] = {}
    for title, path in raw.items():
        if not isinstance(path, list) or not path:
            continue
        if not all(isinstance(item, str) for item in path):
            continue
        if path[0] != title or len(set(path)) != len(path):
            continue
        entries[title] = path
    return entries
