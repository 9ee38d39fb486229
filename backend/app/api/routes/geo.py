"""Aggregate map data: nation choropleth and per-state sub-regions.

Both endpoints always answer 200. The orchestrator falls back to mock data
when the warehouse cannot be used.
"""

from typing import Any

from fastapi import APIRouter, Depends

from app.core.context import AppContext
from app.core.deps import get_context

router = APIRouter(tags=["geo"])


@router.get("/states-gmv")
async def states_gmv(context: AppContext = Depends(get_context)) -> list[dict[str, Any]]:
    return await context.orchestrator.get_regions()


@router.get("/cities-gmv/{state}")
async def cities_gmv(
    state: str, context: AppContext = Depends(get_context)
) -> list[dict[str, Any]]:
    return await context.orchestrator.get_sub_regions(state.strip())
