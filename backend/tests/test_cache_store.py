import json
import os
import time

import pytest

from app.services.cache_store import MetricCacheStore, cache_filename


def test_cache_filenames():
    assert cache_filename("nation") == "states_gmv.json"
    assert cache_filename("subregion", "New York") == "cities_gmv_new_york.json"
    with pytest.raises(ValueError):
        cache_filename("subregion", "  ")
    with pytest.raises(ValueError):
        cache_filename("county", "Travis")  # type: ignore[arg-type]


def test_write_then_read_keeps_provenance(tmp_path):
    store = MetricCacheStore(tmp_path / "cache")
    records = [{"state": "Texas", "store_count": 3, "total_gmv": 120.5}]

    store.write("nation", None, records, synthetic=True)
    entry = store.read("nation")

    assert entry is not None
    assert entry.records == records
    assert entry.synthetic is True
    assert entry.age_seconds < 60


def test_missing_file_is_a_miss(tmp_path):
    assert MetricCacheStore(tmp_path).read("subregion", "Texas") is None


@pytest.mark.parametrize("body", ["{not json", '{"records": 3}', '"text"', "[1, 2]"])
def test_unreadable_payloads_are_misses(tmp_path, body):
    store = MetricCacheStore(tmp_path)
    store.path_for("subregion", "Texas").write_text(body, encoding="utf-8")
    assert store.read("subregion", "Texas") is None


def test_bare_list_is_read_as_synthetic(tmp_path):
    store = MetricCacheStore(tmp_path)
    store.path_for("nation").write_text(json.dumps([{"state": "Ohio"}]), encoding="utf-8")
    entry = store.read("nation")
    assert entry is not None
    assert entry.synthetic is True
    assert entry.records == [{"state": "Ohio"}]


def test_identical_writes_produce_identical_bytes(tmp_path):
    store = MetricCacheStore(tmp_path)
    path = store.write("subregion", "Texas", [{"city": "AUSTIN", "total_gmv": 1.0}])
    first = path.read_bytes()
    store.write("subregion", "Texas", [{"total_gmv": 1.0, "city": "AUSTIN"}])
    assert path.read_bytes() == first


def test_stale_entries_are_misses(tmp_path):
    store = MetricCacheStore(tmp_path, max_age_seconds=60)
    path = store.write("nation", None, [])
    old = time.time() - 3600
    os.utime(path, (old, old))
    assert store.read("nation") is None

    fresh = MetricCacheStore(tmp_path, max_age_seconds=0)
    assert fresh.read("nation") is not None


def test_write_creates_directory_lazily(tmp_path):
    store = MetricCacheStore(tmp_path / "a" / "b")
    store.write("nation", None, [])
    assert (tmp_path / "a" / "b" / "states_gmv.json").exists()
    assert not list((tmp_path / "a" / "b").glob(".tmp-*"))


def test_clear_only_removes_cache_documents(tmp_path):
    store = MetricCacheStore(tmp_path)
    store.write("nation", None, [])
    store.write("subregion", "Ohio", [])
    (tmp_path / "users.json").write_text("{}", encoding="utf-8")

    assert store.clear() == 2
    assert (tmp_path / "users.json").exists()
    assert store.read("nation") is None
