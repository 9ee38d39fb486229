"""Map drill-down state: nation, state, city and the city network view.

Every navigation takes a fresh token; a response that arrives after a newer
navigation started is dropped, so the latest request always wins.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

import anyio
from loguru import logger

from app.client import render
from app.client.api import ApiError, HeatmapApiClient
from app.client.scaling import DEFAULT_METRIC, METRICS

Listener = Callable[[str, dict[str, Any]], None]


class Level(str, Enum):
    NATION = "nation"
    STATE = "state"
    CITY = "city"


class NavigationError(ValueError):
    """The requested transition is not available from the current view."""


@dataclass(frozen=True)
class ViewState:
    level: Level = Level.NATION
    region: Optional[str] = None
    sub_region: Optional[str] = None
    network_view: bool = False
    metric: str = DEFAULT_METRIC


@dataclass
class Hover:
    seller_id: Optional[int] = None
    edges: list[dict[str, Any]] = field(default_factory=list)
    store_ids: set[int] = field(default_factory=set)
    popup: Optional[dict[str, Any]] = None


class MapNavigator:
    def __init__(self, api: HeatmapApiClient):
        self.api = api
        self.view = ViewState()
        self.regions: list[dict[str, Any]] = []
        self.sub_regions: list[dict[str, Any]] = []
        self.stores: list[dict[str, Any]] = []
        self.sellers: list[dict[str, Any]] = []
        self.edges: list[dict[str, Any]] = []
        self.layer: Optional[render.MapLayer] = None
        self.hover: Optional[Hover] = None
        self.loading = False
        self._token = 0
        self._listeners: list[Listener] = []

    # events

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register for ``navigate``, ``hover`` and ``error`` events."""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, event: str, payload: dict[str, Any]) -> None:
        for listener in list(self._listeners):
            listener(event, payload)

    # request tokens

    def _begin(self) -> int:
        self._token += 1
        self.loading = True
        return self._token

    def _is_current(self, token: int) -> bool:
        return token == self._token

    async def _run(self, token: int, load: Callable[[], Awaitable[Any]]) -> tuple[bool, Any]:
        try:
            result = await load()
        except ApiError as exc:
            if self._is_current(token):
                logger.bind(status=exc.status_code, error=exc.message).warning("navigation_failed")
                self._emit("error", {"status": exc.status_code, "message": exc.message})
            return False, None
        finally:
            if self._is_current(token):
                self.loading = False
        if not self._is_current(token):
            logger.bind(token=token, latest=self._token).debug("navigation_superseded")
            return False, None
        return True, result

    def _settle(self, view: ViewState) -> None:
        self.view = view
        self.hover = None
        self._emit("navigate", {"view": self.view, "layer": self.layer})

    # transitions

    async def show_nation(self) -> bool:
        token = self._begin()
        ok, regions = await self._run(token, self.api.states_gmv)
        if not ok:
            return False
        self.regions = regions
        self.sub_regions, self.stores, self.sellers, self.edges = [], [], [], []
        self.layer = render.nation_layer(regions)
        self._settle(ViewState(metric=self.view.metric))
        return True

    async def select_region(self, region: str) -> bool:
        if self.view.level is Level.CITY:
            raise NavigationError("leave the city view before choosing a state")
        return await self._load_state(region)

    async def _load_state(self, region: str) -> bool:
        token = self._begin()
        ok, sub_regions = await self._run(token, lambda: self.api.cities_gmv(region))
        if not ok:
            return False
        self.sub_regions = sub_regions
        self.stores, self.sellers, self.edges = [], [], []
        self.layer = render.state_layer(sub_regions, self.view.metric)
        self._settle(ViewState(level=Level.STATE, region=region, metric=self.view.metric))
        return True

    def set_metric(self, metric: str) -> None:
        """Switch the sub-region metric; re-renders without fetching."""

        if metric not in METRICS:
            raise ValueError(f"unknown metric: {metric!r}")
        if metric == self.view.metric:
            return
        view = replace(self.view, metric=metric)
        if view.level is Level.STATE:
            self.layer = render.state_layer(self.sub_regions, metric)
        self._settle(view)

    async def select_sub_region(self, city: str) -> bool:
        if self.view.level is not Level.STATE or not self.view.region:
            raise NavigationError("choose a state before a city")
        region = self.view.region
        token = self._begin()

        async def load() -> dict[str, list[dict[str, Any]]]:
            results: dict[str, list[dict[str, Any]]] = {}
            failures: list[ApiError] = []

            async def fetch(key: str, call: Callable[[], Awaitable[Any]], required: bool) -> None:
                try:
                    results[key] = await call()
                except ApiError as exc:
                    results[key] = []
                    if required:
                        failures.append(exc)
                    else:
                        logger.bind(part=key, error=exc.message).warning("city_part_unavailable")

            async with anyio.create_task_group() as tg:
                tg.start_soon(fetch, "stores", lambda: self.api.city_stores(city, region), True)
                tg.start_soon(fetch, "sellers", lambda: self.api.state_sellers(region), False)
                tg.start_soon(fetch, "edges", lambda: self.api.network(city, region), False)
            if failures:
                raise failures[0]
            return results

        ok, results = await self._run(token, load)
        if not ok:
            return False

        self.stores = results["stores"]
        self.edges = results["edges"]
        self.sellers = render.local_sellers(results["sellers"], city, self.edges)
        self.layer = render.city_layer(self.stores, self.sellers, self.edges)
        self._settle(
            ViewState(level=Level.CITY, region=region, sub_region=city, metric=self.view.metric)
        )
        return True

    @property
    def network_available(self) -> bool:
        return self.view.level is Level.CITY and bool(self.edges)

    def toggle_network(self) -> bool:
        """Flip the city view between markers and the store/seller network."""

        if not self.network_available:
            raise NavigationError("no network connections for this city")
        view = replace(self.view, network_view=not self.view.network_view)
        self.layer = render.city_layer(
            self.stores, self.sellers, self.edges, network_view=view.network_view
        )
        self._settle(view)
        return view.network_view

    async def back(self) -> bool:
        """CITY goes back to its STATE, STATE to NATION; both re-fetch."""

        if self.view.level is Level.CITY and self.view.region:
            return await self._load_state(self.view.region)
        if self.view.level is Level.STATE:
            return await self.show_nation()
        return False

    # hover

    def hover_seller(self, seller_id: int) -> Hover:
        if self.view.level is not Level.CITY:
            raise NavigationError("seller highlighting needs the city view")
        incident = [edge for edge in self.edges if edge.get("seller_id") == seller_id]
        self.hover = Hover(
            seller_id=seller_id,
            edges=incident,
            store_ids={int(edge["store_id"]) for edge in incident},
        )
        self._emit("hover", {"hover": self.hover})
        return self.hover

    def hover_edge(self, store_id: int, seller_id: int) -> Optional[dict[str, Any]]:
        """Popup contents for one store/seller connection, or None."""

        for edge in self.edges:
            if edge.get("store_id") == store_id and edge.get("seller_id") == seller_id:
                popup = {
                    "store": edge.get("store_location_name") or f"Store #{store_id}",
                    "seller": edge.get("seller_full_name") or f"Seller #{seller_id}",
                    "orders": edge.get("connection_count") or 0,
                    "gmv": edge.get("connection_gmv") or 0,
                    "position": (
                        (edge["store_lat"] + edge["seller_lat"]) / 2,
                        (edge["store_lng"] + edge["seller_lng"]) / 2,
                    ),
                }
                self.hover = Hover(
                    seller_id=seller_id, edges=[edge], store_ids={store_id}, popup=popup
                )
                self._emit("hover", {"hover": self.hover})
                return popup
        return None

    def clear_hover(self) -> None:
        self.hover = None
        self._emit("hover", {"hover": None})
