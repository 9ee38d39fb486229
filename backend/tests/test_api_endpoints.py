import json

import pytest

from fakes import FakeConnection

TEXAS_STORE = {
    "STORE_ID": 11,
    "STORE_LOCATION_NAME": "Lone Star Market",
    "STORE_CITY": "Austin",
    "STORE_STATE": "Texas",
    "LATITUDE": 30.27,
    "LONGITUDE": -97.74,
    "GMV_LAST_MONTH": 2500.0,
}


def failing(sql, params):
    raise RuntimeError("JDBC driver exploded")


@pytest.mark.anyio
async def test_cities_gmv_without_warehouse_serves_and_caches_mock(running_app):
    async with running_app() as (client, context):
        response = await client.get("/api/cities-gmv/California")

        assert response.status_code == 200
        items = response.json()
        assert len(items) >= 5
        assert all(item["latitude"] and item["longitude"] for item in items)
        totals = [item["total_gmv"] for item in items]
        assert totals == sorted(totals, reverse=True)

        path = context.settings.DATA_CACHE_DIR / "cities_gmv_california.json"
        assert path.exists()
        assert json.loads(path.read_text(encoding="utf-8"))["synthetic"] is True


@pytest.mark.anyio
async def test_states_gmv_without_warehouse_is_warmed_at_startup(running_app):
    async with running_app() as (client, context):
        assert (context.settings.DATA_CACHE_DIR / "states_gmv.json").exists()

        response = await client.get("/api/states-gmv")

        assert response.status_code == 200
        body = response.json()
        assert len(body) == 50
        assert set(body[0]) == {"state", "store_count", "total_gmv"}


@pytest.mark.anyio
async def test_aggregates_stay_200_when_queries_fail(running_app):
    async with running_app(FakeConnection(failing)) as (client, context):
        states = await client.get("/api/states-gmv")
        cities = await client.get("/api/cities-gmv/Texas")

    assert states.status_code == 200 and len(states.json()) == 50
    assert cities.status_code == 200 and len(cities.json()) >= 5


@pytest.mark.anyio
async def test_state_stores_retries_with_alternate_identifier(running_app):
    def handler(sql, params):
        return [TEXAS_STORE] if params.get("state_0") == "Texas" else []

    connection = FakeConnection(handler)
    async with running_app(connection) as (client, _):
        response = await client.get("/api/state-stores/TX")

    assert response.status_code == 200
    body = response.json()
    assert [row["store_id"] for row in body] == [11]
    assert body[0]["store_location_name"] == "Lone Star Market"
    assert len(connection.calls) == 2


@pytest.mark.anyio
async def test_state_sellers_empty_after_alternates_is_404(running_app):
    async with running_app(FakeConnection()) as (client, _):
        response = await client.get("/api/state-sellers/Texas")
    assert response.status_code == 404
    assert "error" in response.json()


@pytest.mark.anyio
async def test_network_without_edges_is_an_empty_list(running_app):
    async with running_app(FakeConnection()) as (client, _):
        response = await client.get("/api/network/Austin/Texas")
    assert response.status_code == 200
    assert response.json() == []


@pytest.mark.anyio
async def test_city_stores_binds_city_and_state(running_app):
    connection = FakeConnection(lambda sql, params: [dict(TEXAS_STORE, SELLER_FULL_NAME="Sam")])
    async with running_app(connection) as (client, _):
        response = await client.get("/api/stores/Austin/Texas")

    assert response.status_code == 200
    assert response.json()[0]["seller_full_name"] == "Sam"
    assert connection.calls[0][1]["city"] == "Austin"


@pytest.mark.anyio
async def test_unknown_store_is_404(running_app):
    async with running_app(FakeConnection()) as (client, _):
        store = await client.get("/api/store/99999")
        seller = await client.get("/api/seller/99999")

    assert store.status_code == 404
    assert store.json() == {"error": "Store not found"}
    assert seller.status_code == 404
    assert seller.json() == {"error": "Seller not found"}


@pytest.mark.anyio
@pytest.mark.parametrize(
    "path, message",
    [
        ("/api/store/abc", "Store not found"),
        ("/api/store/4_2", "Store not found"),
        ("/api/seller/12x", "Seller not found"),
        ("/api/seller/-3", "Seller not found"),
    ],
)
async def test_non_numeric_ids_are_404_without_a_query(running_app, path, message):
    connection = FakeConnection(failing)
    async with running_app(connection) as (client, _):
        response = await client.get(path)

    assert response.status_code == 404
    assert response.json() == {"error": message}
    assert connection.calls == []


@pytest.mark.anyio
async def test_detail_ids_are_bound_as_numbers(running_app):
    connection = FakeConnection()
    async with running_app(connection) as (client, _):
        await client.get("/api/store/42")
    assert connection.calls[0][1] == {"store_id": 42}


@pytest.mark.anyio
async def test_store_detail_returns_one_object(running_app):
    row = dict(TEXAS_STORE, CURRENT_MONTH_GMV=10.0, LAST_MONTH_GMV=20.0, TWO_MONTHS_AGO_GMV=30.0)
    async with running_app(FakeConnection(lambda sql, params: [row])) as (client, _):
        response = await client.get("/api/store/11")

    assert response.status_code == 200
    body = response.json()
    assert body["store_id"] == 11
    assert body["two_months_ago_gmv"] == 30.0


@pytest.mark.anyio
@pytest.mark.parametrize("path", ["/api/state-stores/TX", "/api/network/Austin/Texas", "/api/store/1"])
async def test_detail_routes_without_warehouse_are_503(running_app, path):
    async with running_app() as (client, _):
        response = await client.get(path)
    assert response.status_code == 503
    assert response.json() == {"error": "Database connection unavailable"}


@pytest.mark.anyio
async def test_query_failures_are_500_with_detail_outside_prod(running_app):
    async with running_app(FakeConnection(failing)) as (client, _):
        response = await client.get("/api/state-stores/TX")
    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "Database query failed"
    assert "JDBC driver exploded" in body["message"]


@pytest.mark.anyio
async def test_query_failure_detail_can_be_hidden(running_app):
    async with running_app(FakeConnection(failing), EXPOSE_ERROR_DETAILS=False) as (client, _):
        response = await client.get("/api/seller/5")
    assert response.status_code == 500
    assert response.json() == {"error": "Database query failed"}


@pytest.mark.anyio
async def test_blank_parameters_are_400(running_app):
    async with running_app(FakeConnection()) as (client, _):
        response = await client.get("/api/state-stores/%20")
    assert response.status_code == 400
    assert response.json() == {"error": "state is required"}


@pytest.mark.anyio
async def test_health_and_readiness(running_app):
    async with running_app() as (client, context):
        health = await client.get("/api/healthz", headers={"X-Request-ID": "abc123"})
        ready = await client.get("/api/readyz")

        assert health.json() == {"status": "ok"}
        assert health.headers["X-Request-ID"] == "abc123"
        assert ready.status_code == 200
        assert ready.json()["warehouse"] == "unavailable"

        context.ready = False
        assert (await client.get("/api/readyz")).status_code == 503


@pytest.mark.anyio
async def test_readiness_reports_connected_warehouse(running_app):
    connection = FakeConnection(lambda sql, params: [{"VERSION": "8.40.1"}])
    async with running_app(connection) as (client, _):
        ready = await client.get("/api/readyz")
    assert ready.json() == {"ready": True, "warehouse": "connected", "warehouse_version": "8.40.1"}
