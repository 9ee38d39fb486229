import random

import anyio
import pytest

from app.services.cache_store import MetricCacheStore
from app.services.mock_data import MockDataGenerator
from app.services.orchestrator import DataOrchestrator
from app.services.warehouse import WarehouseGateway
from fakes import FakeConnection, is_cities_query, is_states_query

STATES = ["California", "Texas", "Florida", "New York", "Ohio", "Georgia", "Utah"]


def warehouse(sql, params):
    if is_states_query(sql):
        return [
            {"STATE": name, "STORE_COUNT": 10 + i, "TOTAL_GMV": 1000.0 * (len(STATES) - i)}
            for i, name in enumerate(STATES)
        ]
    if is_cities_query(sql):
        region = params["state_0"]
        return [
            {"CITY": f"{region.upper()} CITY", "STORE_COUNT": 2, "TOTAL_GMV": 50.0,
             "TOTAL_LIFETIME_GMV": 400.0, "TOTAL_LIFETIME_ORDERS": 9,
             "LATITUDE": 35.0, "LONGITUDE": -100.0},
        ]
    return []


def failing(sql, params):
    raise RuntimeError("connection reset")


def make_orchestrator(tmp_path, handler=None, *, fanout_limit=5):
    connection = FakeConnection(handler) if handler else None
    orchestrator = DataOrchestrator(
        MetricCacheStore(tmp_path),
        WarehouseGateway(connection),
        MockDataGenerator(random.Random(1)),
        fanout_limit=fanout_limit,
    )
    return orchestrator, connection


@pytest.mark.anyio
async def test_unconfigured_serves_and_caches_synthetic_mock(tmp_path):
    orchestrator, _ = make_orchestrator(tmp_path)

    first = await orchestrator.get_regions()
    entry = orchestrator.cache.read("nation")

    assert len(first) == 50
    assert entry is not None and entry.synthetic is True
    assert await orchestrator.get_regions() == first


@pytest.mark.anyio
async def test_synthetic_cache_does_not_mask_a_live_warehouse(tmp_path):
    orchestrator, conn = make_orchestrator(tmp_path, warehouse)
    orchestrator.cache.write("nation", None, [{"state": "Ohio", "store_count": 1, "total_gmv": 1}], synthetic=True)

    regions = await orchestrator.get_regions()

    assert [r["state"] for r in regions] == STATES
    assert len(conn.calls) == 1
    assert orchestrator.cache.read("nation").synthetic is False


@pytest.mark.anyio
async def test_real_cache_hit_skips_the_warehouse(tmp_path):
    orchestrator, conn = make_orchestrator(tmp_path, failing)
    cached = [{"state": "Ohio", "store_count": 1, "total_gmv": 1.0}]
    orchestrator.cache.write("nation", None, cached)

    assert await orchestrator.get_regions() == cached
    assert conn.calls == []


@pytest.mark.anyio
async def test_query_errors_serve_mock_without_caching(tmp_path):
    orchestrator, _ = make_orchestrator(tmp_path, failing)

    regions = await orchestrator.get_regions()
    sub_regions = await orchestrator.get_sub_regions("Texas")

    assert len(regions) == 50
    assert len(sub_regions) >= 5
    assert orchestrator.cache.read("nation") is None
    assert orchestrator.cache.read("subregion", "Texas") is None


@pytest.mark.anyio
async def test_confirmed_empty_answer_is_cached_as_real(tmp_path):
    orchestrator, conn = make_orchestrator(tmp_path, lambda sql, params: [])

    assert await orchestrator.get_sub_regions("Vermont") == []
    entry = orchestrator.cache.read("subregion", "Vermont")
    assert entry is not None and entry.synthetic is False and entry.records == []

    calls = len(conn.calls)
    assert await orchestrator.get_sub_regions("Vermont") == []
    assert len(conn.calls) == calls


@pytest.mark.anyio
async def test_sub_regions_without_coordinates_are_not_served(tmp_path):
    orchestrator, _ = make_orchestrator(tmp_path)
    orchestrator.cache.write(
        "subregion",
        "Texas",
        [
            {"city": "AUSTIN", "total_gmv": 5.0, "latitude": 30.2, "longitude": -97.7},
            {"city": "GHOST", "total_gmv": 9.0, "latitude": 0, "longitude": 0},
        ],
        synthetic=True,
    )

    served = await orchestrator.get_sub_regions("Texas")

    assert [s["city"] for s in served] == ["AUSTIN"]


@pytest.mark.anyio
async def test_unexpected_failures_fall_back_to_mock(tmp_path, monkeypatch):
    orchestrator, _ = make_orchestrator(tmp_path, warehouse)

    def broken(*args, **kwargs):
        raise RuntimeError("disk gremlin")

    monkeypatch.setattr(orchestrator.cache, "read", broken)

    assert len(await orchestrator.get_regions()) == 50
    assert len(await orchestrator.get_sub_regions("Ohio")) >= 5


@pytest.mark.anyio
async def test_refresh_warms_top_regions_up_to_the_fanout_limit(tmp_path):
    orchestrator, _ = make_orchestrator(tmp_path, warehouse, fanout_limit=3)

    report = await orchestrator.refresh()

    assert report.regions == len(STATES)
    assert report.sub_regions_warmed == STATES[:3]
    assert report.failures == []
    assert orchestrator.cache.read("subregion", "Florida") is not None
    assert orchestrator.cache.read("subregion", "New York") is None


@pytest.mark.anyio
async def test_two_refreshes_of_identical_data_are_byte_identical(tmp_path):
    orchestrator, _ = make_orchestrator(tmp_path, warehouse)

    await orchestrator.refresh()
    first = {p.name: p.read_bytes() for p in tmp_path.glob("*.json")}
    await orchestrator.refresh()
    second = {p.name: p.read_bytes() for p in tmp_path.glob("*.json")}

    assert len(first) == 6
    assert first == second


@pytest.mark.anyio
async def test_failed_nation_pull_skips_fanout(tmp_path):
    orchestrator, conn = make_orchestrator(tmp_path, failing)

    report = await orchestrator.refresh()

    assert report.failures == ["nation"]
    assert report.sub_regions_warmed == []
    assert len(conn.calls) == 1
    assert list(tmp_path.glob("*.json")) == []


@pytest.mark.anyio
async def test_warm_synthetic_only_fills_an_empty_cache(tmp_path):
    orchestrator, _ = make_orchestrator(tmp_path)

    assert await orchestrator.warm_synthetic() is True
    assert await orchestrator.warm_synthetic() is False


@pytest.mark.anyio
async def test_schedule_runs_a_cycle_immediately(tmp_path):
    orchestrator, _ = make_orchestrator(tmp_path, warehouse)
    path = orchestrator.cache.path_for("nation")

    async with anyio.create_task_group() as tg:
        tg.start_soon(orchestrator.run_schedule, 3600)
        with anyio.fail_after(5):
            while not path.exists():
                await anyio.sleep(0.01)
        tg.cancel_scope.cancel()

    assert orchestrator.cache.read("nation").synthetic is False
