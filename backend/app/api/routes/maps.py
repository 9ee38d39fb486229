"""Rendered map figures for the home page.

Each endpoint answers a plotly figure as JSON, built from the same data the
list endpoints serve. The browser draws it with plotly.js.
"""

from fastapi import APIRouter, Depends, Query, Response
from loguru import logger

from app.client import render
from app.client.scaling import DEFAULT_METRIC, METRICS
from app.core.context import AppContext
from app.core.deps import get_context, required_param
from app.core.errors import InvalidParameterError
from app.schemas.geo import dump_records

router = APIRouter(prefix="/map", tags=["map"])


def _figure_response(layer: render.MapLayer) -> Response:
    return Response(content=render.build_figure(layer).to_json(), media_type="application/json")


@router.get("/nation")
async def nation_map(context: AppContext = Depends(get_context)) -> Response:
    regions = await context.orchestrator.get_regions()
    return _figure_response(render.nation_layer(regions))


@router.get("/state/{state}")
async def state_map(
    state: str,
    metric: str = Query(DEFAULT_METRIC),
    context: AppContext = Depends(get_context),
) -> Response:
    state = required_param("state", state)
    if metric not in METRICS:
        raise InvalidParameterError(f"Unknown metric: {metric}")
    sub_regions = await context.orchestrator.get_sub_regions(state)
    return _figure_response(render.state_layer(sub_regions, metric))


@router.get("/city/{city}/{state}")
async def city_map(
    city: str,
    state: str,
    network: bool = Query(False),
    context: AppContext = Depends(get_context),
) -> Response:
    """Stores are required; sellers and network edges degrade to empty."""

    city, state = required_param("city", city), required_param("state", state)
    gateway = context.gateway

    stores = await gateway.fetch_store_locations_by_city(city, state)
    store_records = dump_records(stores.unwrap(not_found=f"No stores found for {city}, {state}"))

    sellers = await gateway.fetch_seller_entities(state)
    edges = await gateway.fetch_network_edges(city, state)
    for part, result in (("sellers", sellers), ("edges", edges)):
        if result.failed:
            logger.bind(part=part, city=city, state=state, error=result.error).warning(
                "city_part_unavailable"
            )
    edge_records = dump_records(edges.records)
    seller_records = render.local_sellers(dump_records(sellers.records), city, edge_records)

    layer = render.city_layer(
        store_records, seller_records, edge_records, network_view=network and bool(edge_records)
    )
    return _figure_response(layer)
