"""
Batch tester: many random traversals and their aggregate statistics.

Each traversal runs to completion (including its cache save) before the
next one starts. A failing traversal is recorded and the batch goes on.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
import logging
import time

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeRemainingColumn,
)

from .core.engine import PathEngine
from .core.errors import PathError
from .core.types import PathResult
from .utils.logging import get_logger, log_event


@dataclass
class BatchFailure:
    """A traversal that raised before producing a path."""
    index: int
    error: str


@dataclass
class BatchReport:
    """Aggregated results of a batch run.

    Attributes:
        target: Title of the target article
        results: Every traversal that produced a path, in run order
        failures: Traversals that raised before a path existed
        top_articles: How many common articles ``most_common`` reports
    """
    target: str | None
    results: list[PathResult] = field(default_factory=list)
    failures: list[BatchFailure] = field(default_factory=list)
    top_articles: int = 5

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def successful(self) -> list[PathResult]:
        return [r for r in self.results if r.reached]

    @property
    def success_rate(self) -> float:
        if not self.results:
            return 0.0
        return len(self.successful) / len(self.results) * 100

    def _lengths(self) -> list[int]:
        return [len(r.path) for r in self.successful]

    @property
    def average_length(self) -> float | None:
        lengths = self._lengths()
        if not lengths:
            return None
        return sum(lengths) / len(lengths)

    @property
    def shortest(self) -> int | None:
        lengths = self._lengths()
        return min(lengths) if lengths else None

    @property
    def longest(self) -> int | None:
        lengths = self._lengths()
        return max(lengths) if lengths else None

    def most_common(self) -> list[tuple[str, int]]:
        """Articles appearing in the most paths, the target excluded."""
        counts: Counter[str] = Counter()
        for result in self.results:
            counts.update(set(result.path))
        counts.pop(self.target, None)
        # Ties keep first-seen order, matching Counter.most_common.
        return counts.most_common(self.top_articles)


def run_batch(
    engine: PathEngine,
    count: int,
    start_locator: str,
    target_locator: str,
    delay_seconds: float = 0.0,
    top_articles: int = 5,
    show_progress: bool = True,
    console: Console | None = None,
    logger: logging.Logger | None = None,
) -> BatchReport:
    """Run ``count`` traversals from ``start_locator`` and aggregate them."""
    logger = logger or get_logger("batch")
    console = console or Console()
    try:
        target = engine.target_title(target_locator)
    except PathError as exc:
        log_event(logger, "Could not title target article", level=logging.ERROR, event="target_failed", error=str(exc))
        target = None
    report = BatchReport(target=target, top_articles=top_articles)

    log_event(logger, f"Testing {count} random articles for paths to {target}", event="batch_start", count=count)

    if not show_progress:
        for index in range(1, count + 1):
            _run_one(engine, index, start_locator, target_locator, report, logger)
            if delay_seconds and index < count:
                time.sleep(delay_seconds)
    else:
        progress = Progress(
            SpinnerColumn(),
            TextColumn("{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TimeRemainingColumn(),
            console=console,
        )
        with progress:
            task = progress.add_task("Traversals", total=count)
            for index in range(1, count + 1):
                _run_one(engine, index, start_locator, target_locator, report, logger)
                progress.advance(task, 1)
                if delay_seconds and index < count:
                    time.sleep(delay_seconds)

    log_event(
        logger,
        "Batch complete",
        event="batch_complete",
        total=report.total,
        succeeded=len(report.successful),
        failed=len(report.failures),
    )
    return report


def _run_one(
    engine: PathEngine,
    index: int,
    start_locator: str,
    target_locator: str,
    report: BatchReport,
    logger: logging.Logger,
) -> None:
    try:
        result = engine.find_path(start_locator, target_locator)
    except PathError as exc:
        log_event(logger, f"Error in test #{index}: {exc}", level=logging.ERROR, event="traversal_failed", index=index)
        report.failures.append(BatchFailure(index=index, error=str(exc)))
        return
    if report.target is None:
        report.target = result.target
    report.results.append(result)
    log_event(
        logger,
        f"Path {index}: {len(result.path)} articles ({result.outcome.value})",
        event="traversal_done",
        index=index,
        length=len(result.path),
        outcome=result.outcome.value,
        cached=result.cached,
    )
