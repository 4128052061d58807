"""Tests for PathCache loading, saving and suffix storage."""

from __future__ import annotations

import json
from pathlib import Path

from philosophy_path.core.cache import PathCache


def test_load_missing_file_is_empty(tmp_path: Path):
    cache = PathCache.load(tmp_path / "missing.json")

    assert len(cache) == 0
    assert cache.path == tmp_path / "missing.json"


def test_load_corrupt_file_is_empty(tmp_path: Path):
    cache_file = tmp_path / "cache.json"
    cache_file.write_text("[[[ definitely not json", encoding="utf-8")

    assert len(PathCache.load(cache_file)) == 0


def test_load_non_object_is_empty(tmp_path: Path):
    cache_file = tmp_path / "cache.json"
    cache_file.write_text(json.dumps(["A", "B"]), encoding="utf-8")

    assert len(PathCache.load(cache_file)) == 0


def test_load_drops_malformed_entries(tmp_path: Path):
    cache_file = tmp_path / "cache.json"
    cache_file.write_text(
        json.dumps(
            {
                "A": ["A", "B"],
                "B": "oops",
                "C": ["X", "Y"],
                "D": [],
                "E": ["E", "F", "E"],
                "G": ["G", 3],
            }
        ),
        encoding="utf-8",
    )

    cache = PathCache.load(cache_file)

    assert cache.items() == [("A", ["A", "B"])]


def test_persist_stores_each_suffix_longer_than_one(tmp_path: Path):
    cache = PathCache(tmp_path / "cache.json")

    full = cache.persist_discovered_suffixes(["A", "B", "C"])

    assert full == ["A", "B", "C"]
    assert cache.get("A") == ["A", "B", "C"]
    assert cache.get("B") == ["B", "C"]
    assert cache.get("C") is None


def test_persist_with_cached_suffix_drops_duplicate_head():
    cache = PathCache()

    full = cache.persist_discovered_suffixes(["A", "B"], ["B", "C", "D"])

    assert full == ["A", "B", "C", "D"]
    assert cache.get("A") == ["A", "B", "C", "D"]
    assert cache.get("B") == ["B", "C", "D"]
    # Only the visited prefix is written; the spliced tail was already known.
    assert cache.get("C") is None


def test_single_article_path_is_not_stored():
    cache = PathCache()

    cache.persist_discovered_suffixes(["Lonely"])

    assert "Lonely" not in cache
    assert len(cache) == 0


def test_save_and_load_round_trip(tmp_path: Path):
    cache_file = tmp_path / "nested" / "cache.json"
    cache = PathCache(cache_file)
    cache.persist_discovered_suffixes(["Ångström", "Unit of length", "Philosophy"])

    reloaded = PathCache.load(cache_file)

    assert reloaded.items() == cache.items()
    assert reloaded.get("Ångström") == ["Ångström", "Unit of length", "Philosophy"]


def test_save_replaces_file_without_leaving_temp_files(tmp_path: Path):
    cache_file = tmp_path / "cache.json"
    cache_file.write_text("{}", encoding="utf-8")
    cache = PathCache.load(cache_file)

    cache.persist_discovered_suffixes(["A", "B"])
    cache.persist_discovered_suffixes(["C", "D"])

    assert sorted(p.name for p in tmp_path.iterdir()) == ["cache.json"]
    assert json.loads(cache_file.read_text(encoding="utf-8")) == {"A": ["A", "B"], "C": ["C", "D"]}


def test_get_returns_a_copy():
    cache = PathCache(entries={"A": ["A", "B"]})

    path = cache.get("A")
    path.append("C")

    assert cache.get("A") == ["A", "B"]


def test_in_memory_cache_save_is_noop():
    cache = PathCache()
    cache.persist_discovered_suffixes(["A", "B"])
    cache.save()

    assert cache.path is None
    assert list(cache) == ["A"]
