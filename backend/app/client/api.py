"""Async HTTP client for the Heatmap Center API."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx


class ApiError(Exception):
    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


def _segment(value: Any) -> str:
    return quote(str(value).strip(), safe="")


class HeatmapApiClient:
    """Thin wrapper over ``httpx.AsyncClient``.

    List endpoints that answer 404 for "nothing here" are mapped to ``[]``;
    other error statuses and transport failures raise ``ApiError``.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:3000",
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ):
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self._owns_client = client is None

    async def __aenter__(self) -> "HeatmapApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _get(self, path: str, *, missing_as_empty: bool = False) -> Any:
        try:
            response = await self._client.get(path)
        except httpx.HTTPError as exc:
            raise ApiError(0, str(exc)) from exc
        if response.status_code == 404 and missing_as_empty:
            return []
        if response.is_error:
            try:
                message = response.json().get("error") or response.reason_phrase
            except ValueError:
                message = response.text or response.reason_phrase
            raise ApiError(response.status_code, message)
        return response.json()

    async def states_gmv(self) -> list[dict[str, Any]]:
        return await self._get("/api/states-gmv")

    async def cities_gmv(self, state: str) -> list[dict[str, Any]]:
        return await self._get(f"/api/cities-gmv/{_segment(state)}")

    async def state_stores(self, state: str) -> list[dict[str, Any]]:
        return await self._get(f"/api/state-stores/{_segment(state)}", missing_as_empty=True)

    async def state_sellers(self, state: str) -> list[dict[str, Any]]:
        return await self._get(f"/api/state-sellers/{_segment(state)}", missing_as_empty=True)

    async def city_stores(self, city: str, state: str) -> list[dict[str, Any]]:
        return await self._get(
            f"/api/stores/{_segment(city)}/{_segment(state)}", missing_as_empty=True
        )

    async def network(self, city: str, state: str) -> list[dict[str, Any]]:
        return await self._get(
            f"/api/network/{_segment(city)}/{_segment(state)}", missing_as_empty=True
        )

    async def store(self, store_id: Any) -> dict[str, Any]:
        return await self._get(f"/api/store/{_segment(store_id)}")

    async def seller(self, seller_id: Any) -> dict[str, Any]:
        return await self._get(f"/api/seller/{_segment(seller_id)}")
