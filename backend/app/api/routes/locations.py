from typing import Any

from fastapi import APIRouter, Depends
from loguru import logger

from app.core.context import AppContext
from app.core.deps import get_context, required_param
from app.core.errors import NotFoundError
from app.schemas.geo import dump_records

router = APIRouter(tags=["locations"])


def _numeric_id(value: str, missing: str) -> int:
    """Store and seller ids are NUMBER columns; anything else cannot match."""

    if not (value.isascii() and value.isdigit()):
        raise NotFoundError(missing)
    return int(value)


@router.get("/state-stores/{state}")
async def state_stores(
    state: str, context: AppContext = Depends(get_context)
) -> list[dict[str, Any]]:
    state = required_param("state", state)
    result = await context.gateway.fetch_store_locations(state)
    return dump_records(result.unwrap(not_found=f"No stores found for {state}"))


@router.get("/state-sellers/{state}")
async def state_sellers(
    state: str, context: AppContext = Depends(get_context)
) -> list[dict[str, Any]]:
    state = required_param("state", state)
    result = await context.gateway.fetch_seller_entities(state)
    return dump_records(result.unwrap(not_found=f"No sellers found for {state}"))


@router.get("/stores/{city}/{state}")
async def city_stores(
    city: str, state: str, context: AppContext = Depends(get_context)
) -> list[dict[str, Any]]:
    city, state = required_param("city", city), required_param("state", state)
    result = await context.gateway.fetch_store_locations_by_city(city, state)
    return dump_records(result.unwrap(not_found=f"No stores found for {city}, {state}"))


@router.get("/network/{city}/{state}")
async def network(
    city: str, state: str, context: AppContext = Depends(get_context)
) -> list[dict[str, Any]]:
    city, state = required_param("city", city), required_param("state", state)
    result = await context.gateway.fetch_network_edges(city, state)
    edges = result.unwrap()
    if not edges:
        logger.bind(city=city, state=state).info("network_empty")
    return dump_records(edges)


@router.get("/store/{store_id}")
async def store_detail(
    store_id: str, context: AppContext = Depends(get_context)
) -> dict[str, Any]:
    store_key = _numeric_id(required_param("store_id", store_id), "Store not found")
    result = await context.gateway.fetch_store_detail(store_key)
    return result.unwrap(not_found="Store not found")[0].model_dump(mode="json")


@router.get("/seller/{seller_id}")
async def seller_detail(
    seller_id: str, context: AppContext = Depends(get_context)
) -> dict[str, Any]:
    seller_key = _numeric_id(required_param("seller_id", seller_id), "Seller not found")
    result = await context.gateway.fetch_seller_detail(seller_key)
    return result.unwrap(not_found="Seller not found")[0].model_dump(mode="json")
