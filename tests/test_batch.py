"""Tests for the batch tester and its statistics."""

from __future__ import annotations

import io

from rich.console import Console

from philosophy_path.batch import BatchReport, run_batch
from philosophy_path.core.cache import PathCache
from philosophy_path.core.engine import PathEngine
from philosophy_path.core.types import PathOutcome, PathResult

from conftest import RANDOM

TARGET = "Philosophy"


def _engine(make_source, random_targets):
    source = make_source(
        {"A": "M", "M": TARGET, "B": "M", "C": None},
        random_targets=random_targets,
    )
    return PathEngine(source, PathCache()), source


def test_run_batch_aggregates_and_survives_failures(make_source):
    engine, source = _engine(make_source, ["A", "B", "C"])

    report = run_batch(engine, 4, RANDOM, TARGET, show_progress=False)

    assert report.target == TARGET
    assert report.total == 3
    assert [r.path for r in report.results] == [
        ["A", "M", TARGET],
        ["B", "M", TARGET],
        ["C"],
    ]
    assert len(report.successful) == 2
    assert round(report.success_rate, 2) == 66.67
    assert report.average_length == 3.0
    assert report.shortest == 3
    assert report.longest == 3
    assert len(report.failures) == 1
    assert report.failures[0].index == 4
    assert report.most_common()[0] == ("M", 2)
    # The second traversal reused the first one's suffix from M.
    assert source.followed().count("M") == 1


def test_run_batch_with_progress_bar(make_source):
    engine, _ = _engine(make_source, ["A", "B"])
    console = Console(file=io.StringIO(), force_terminal=False)

    report = run_batch(engine, 2, RANDOM, TARGET, show_progress=True, console=console)

    assert report.total == 2
    assert report.success_rate == 100.0


def test_most_common_excludes_target_and_limits_results():
    report = BatchReport(
        target=TARGET,
        top_articles=2,
        results=[
            PathResult(path=["A", "K", "L", TARGET], outcome=PathOutcome.REACHED, target=TARGET),
            PathResult(path=["B", "K", "L", TARGET], outcome=PathOutcome.REACHED, target=TARGET),
            PathResult(path=["C", "L", TARGET], outcome=PathOutcome.REACHED, target=TARGET),
        ],
    )

    assert report.most_common() == [("L", 3), ("K", 2)]


def test_success_counts_only_paths_ending_at_target():
    report = BatchReport(
        target=TARGET,
        results=[
            PathResult(path=["A", TARGET], outcome=PathOutcome.REACHED, target=TARGET),
            PathResult(path=["B", TARGET, "Knowledge"], outcome=PathOutcome.UNREACHED, target=TARGET),
        ],
    )

    assert len(report.successful) == 1
    assert report.success_rate == 50.0


def test_empty_report_has_no_lengths():
    report = BatchReport(target=TARGET)

    assert report.success_rate == 0.0
    assert report.average_length is None
    assert report.shortest is None
    assert report.longest is None
    assert report.most_common() == []
