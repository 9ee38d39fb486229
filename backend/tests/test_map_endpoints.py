import pytest

from fakes import FakeConnection

AUSTIN_STORE = {
    "STORE_ID": 11,
    "STORE_LOCATION_NAME": "Lone Star Market",
    "STORE_CITY": "Austin",
    "STORE_STATE": "Texas",
    "LATITUDE": 30.27,
    "LONGITUDE": -97.74,
    "GMV_LAST_MONTH": 2500.0,
}
SELLERS = [
    {"SELLER_ID": 5, "SELLER_FULL_NAME": "Sam", "SELLER_CITY": "Austin", "LATITUDE": 30.3, "LONGITUDE": -97.7},
    {"SELLER_ID": 6, "SELLER_FULL_NAME": "Dee", "SELLER_CITY": "Dallas", "LATITUDE": 32.7, "LONGITUDE": -96.8},
    {"SELLER_ID": 7, "SELLER_FULL_NAME": "Hal", "SELLER_CITY": "Houston", "LATITUDE": 29.7, "LONGITUDE": -95.3},
]
EDGES = [
    {"STORE_ID": 11, "STORE_LOCATION_NAME": "Lone Star Market", "STORE_LAT": 30.27, "STORE_LNG": -97.74,
     "SELLER_ID": 6, "SELLER_FULL_NAME": "Dee", "SELLER_LAT": 32.7, "SELLER_LNG": -96.8,
     "CONNECTION_COUNT": 3, "CONNECTION_GMV": 2500.0},
]


def city_handler(*, sellers_fail=False):
    def handler(sql, params):
        if "CONNECTION_GMV" in sql:
            return EDGES
        if "FROM SELLERS s" in sql:
            if sellers_fail:
                raise RuntimeError("sellers table locked")
            return SELLERS
        return [AUSTIN_STORE]

    return handler


@pytest.mark.anyio
async def test_nation_map_is_a_state_choropleth(running_app):
    async with running_app() as (client, _):
        response = await client.get("/api/map/nation")

    assert response.status_code == 200
    figure = response.json()
    choropleth = figure["data"][0]
    assert choropleth["type"] == "choropleth"
    assert choropleth["locationmode"] == "USA-states"
    assert len(choropleth["locations"]) == 50
    assert "Texas" in choropleth["customdata"]


@pytest.mark.anyio
async def test_state_map_marks_the_same_sub_regions_as_the_list(running_app):
    async with running_app() as (client, _):
        cities = (await client.get("/api/cities-gmv/California")).json()
        response = await client.get("/api/map/state/California", params={"metric": "store_count"})

    assert response.status_code == 200
    trace = response.json()["data"][0]
    assert trace["type"] == "scattergeo"
    assert sorted(trace["customdata"]) == sorted(item["city"] for item in cities)


@pytest.mark.anyio
async def test_state_map_rejects_unknown_metric(running_app):
    async with running_app() as (client, _):
        response = await client.get("/api/map/state/Texas", params={"metric": "bogus"})
    assert response.status_code == 400
    assert response.json() == {"error": "Unknown metric: bogus"}


@pytest.mark.anyio
async def test_city_map_shows_local_and_connected_sellers(running_app):
    async with running_app(FakeConnection(city_handler())) as (client, _):
        markers = await client.get("/api/map/city/Austin/Texas")
        network = await client.get("/api/map/city/Austin/Texas", params={"network": "true"})

    assert markers.status_code == 200
    traces = markers.json()["data"]
    assert [t["mode"] for t in traces] == ["markers", "markers"]
    assert traces[0]["customdata"] == ["Lone Star Market"]
    assert traces[1]["customdata"] == ["Sam", "Dee"]

    assert network.status_code == 200
    traces = network.json()["data"]
    assert [t["mode"] for t in traces] == ["lines", "markers", "markers"]
    assert traces[2]["customdata"] == ["Dee"]


@pytest.mark.anyio
async def test_city_map_survives_a_failed_seller_query(running_app):
    async with running_app(FakeConnection(city_handler(sellers_fail=True))) as (client, _):
        response = await client.get("/api/map/city/Austin/Texas")

    assert response.status_code == 200
    names = [t.get("name") for t in response.json()["data"]]
    assert names == ["store"]


@pytest.mark.anyio
async def test_city_map_needs_the_warehouse(running_app):
    async with running_app() as (client, _):
        response = await client.get("/api/map/city/Austin/Texas")
    assert response.status_code == 503
    assert response.json() == {"error": "Database connection unavailable"}
