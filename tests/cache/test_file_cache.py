"""Tests for the file-backed cache."""

import logging

from recap.cache import FileCache


def test_missing_key_returns_default(tmp_path):
    cache = FileCache(tmp_path)
    assert cache.get("kom_cache_2024") is None
    assert cache.get("kom_cache_2024", {}) == {}


def test_set_then_get(tmp_path):
    cache = FileCache(tmp_path)
    cache.set("kom_cache_2024", {"1": 2, "3": 0})

    assert cache.get("kom_cache_2024") == {"1": 2, "3": 0}
    # A fresh instance over the same directory sees the value.
    assert FileCache(tmp_path).get("kom_cache_2024") == {"1": 2, "3": 0}


def test_set_overwrites_and_leaves_no_temp_file(tmp_path):
    cache = FileCache(tmp_path)
    cache.set("activities_cache_2024", [{"id": 1}])
    cache.set("activities_cache_2024", [{"id": 2}])

    assert cache.get("activities_cache_2024") == [{"id": 2}]
    assert sorted(p.name for p in tmp_path.iterdir()) == ["activities_cache_2024.json"]


def test_creates_missing_directory(tmp_path):
    cache = FileCache(tmp_path / "nested" / "cache")
    cache.set("k", 1)
    assert cache.get("k") == 1


def test_unsafe_key_stays_inside_directory(tmp_path):
    cache = FileCache(tmp_path / "cache")
    cache.set("../escape/key", "value")

    assert cache.get("../escape/key") == "value"
    assert not (tmp_path / "escape").exists()


def test_corrupt_entry_is_a_miss(tmp_path, caplog):
    cache = FileCache(tmp_path)
    (tmp_path / "kom_cache_2024.json").write_text("{not json", encoding="utf-8")

    with caplog.at_level(logging.WARNING, logger="recap.cache.store"):
        assert cache.get("kom_cache_2024", {}) == {}
    assert "kom_cache_2024" in caplog.text


def test_remove(tmp_path):
    cache = FileCache(tmp_path)
    cache.set("k", [1, 2])
    cache.remove("k")
    assert cache.get("k") is None
    # Removing an absent key is fine.
    cache.remove("k")
