"""Cache-first resolution of map aggregates, plus the periodic refresh."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

import anyio
from loguru import logger
from pydantic import BaseModel

from app.schemas.geo import dump_records
from app.services.cache_store import CacheEntry, DatasetKind, MetricCacheStore
from app.services.mock_data import MockDataGenerator
from app.services.warehouse import FetchResult, FetchStatus, WarehouseGateway


@dataclass
class RefreshReport:
    regions: int = 0
    sub_regions_warmed: list[str] = field(default_factory=list)
    failures: list[str] = field(default_factory=list)


def _has_coordinates(record: dict[str, Any]) -> bool:
    return bool(record.get("latitude")) and bool(record.get("longitude"))


class DataOrchestrator:
    """Resolve nation and sub-region aggregates: cache, then warehouse, then mock.

    ``get_regions`` and ``get_sub_regions`` never raise. Mock data written
    while the warehouse is unconfigured is flagged ``synthetic`` and stops
    counting as a cache hit as soon as a connection exists.
    """

    def __init__(
        self,
        cache: MetricCacheStore,
        gateway: WarehouseGateway,
        mock: MockDataGenerator | None = None,
        *,
        fanout_limit: int = 5,
    ):
        self.cache = cache
        self.gateway = gateway
        self.mock = mock or MockDataGenerator()
        self.fanout_limit = max(0, fanout_limit)

    def _usable(self, entry: CacheEntry | None) -> bool:
        if entry is None:
            return False
        return not entry.synthetic or not self.gateway.configured

    def _store(
        self,
        kind: DatasetKind,
        region: str | None,
        records: list[dict[str, Any]],
        *,
        synthetic: bool = False,
    ) -> bool:
        try:
            self.cache.write(kind, region, records, synthetic=synthetic)
        except OSError as exc:
            logger.bind(kind=kind, region=region, error=str(exc)).error("cache_write_failed")
            return False
        return True

    async def _resolve(
        self,
        kind: DatasetKind,
        region: str | None,
        fetch: Callable[[], Awaitable[FetchResult[Any]]],
        generate: Callable[[], list[BaseModel]],
    ) -> list[dict[str, Any]]:
        entry = self.cache.read(kind, region)
        if self._usable(entry):
            logger.bind(kind=kind, region=region, synthetic=entry.synthetic).debug("cache_hit")
            return entry.records

        result = await fetch()
        if result.status in (FetchStatus.OK, FetchStatus.EMPTY):
            records = dump_records(result.records)
            self._store(kind, region, records)
            return records

        records = dump_records(generate())
        if result.status is FetchStatus.UNCONFIGURED:
            self._store(kind, region, records, synthetic=True)
        logger.bind(
            kind=kind, region=region, status=result.status.value, error=result.error
        ).warning("serving_mock_data")
        return records

    async def get_regions(self) -> list[dict[str, Any]]:
        try:
            return await self._resolve(
                "nation", None, self.gateway.fetch_regions, self.mock.generate_regions
            )
        except Exception:
            logger.exception("regions_resolution_failed")
            return dump_records(self.mock.generate_regions())

    async def get_sub_regions(self, region: str) -> list[dict[str, Any]]:
        """Sub-regions of ``region`` that carry usable coordinates."""

        try:
            records = await self._resolve(
                "subregion",
                region,
                lambda: self.gateway.fetch_sub_regions(region),
                lambda: self.mock.generate_sub_regions(region),
            )
        except Exception:
            logger.bind(region=region).exception("sub_regions_resolution_failed")
            records = dump_records(self.mock.generate_sub_regions(region))
        return [record for record in records if _has_coordinates(record)]

    async def warm_synthetic(self) -> bool:
        """Seed the nation cache with mock data when nothing usable is cached."""

        if self._usable(self.cache.read("nation")):
            return False
        return self._store(
            "nation", None, dump_records(self.mock.generate_regions()), synthetic=True
        )

    async def refresh(self) -> RefreshReport:
        """Pull the nation aggregate and pre-warm the top sub-region caches."""

        report = RefreshReport()
        nation = await self.gateway.fetch_regions()
        if nation.failed:
            report.failures.append("nation")
            logger.bind(status=nation.status.value, error=nation.error).warning(
                "refresh_nation_failed"
            )
            return report

        if not self._store("nation", None, dump_records(nation.records)):
            report.failures.append("nation")
        report.regions = len(nation.records)

        for region in nation.records[: self.fanout_limit]:
            result = await self.gateway.fetch_sub_regions(region.state)
            if result.failed:
                report.failures.append(region.state)
                continue
            if self._store("subregion", region.state, dump_records(result.records)):
                report.sub_regions_warmed.append(region.state)
            else:
                report.failures.append(region.state)

        logger.bind(
            regions=report.regions,
            warmed=len(report.sub_regions_warmed),
            failures=report.failures,
        ).info("refresh_completed")
        return report

    async def run_schedule(self, interval: float) -> None:
        """Refresh now, then every ``interval`` seconds until cancelled."""

        while True:
            try:
                await self.refresh()
            except Exception:
                logger.exception("refresh_cycle_crashed")
            await anyio.sleep(interval)
