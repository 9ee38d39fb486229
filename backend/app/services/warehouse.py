"""Snowflake query gateway for store, seller and order aggregates.

All statements use the connector's ``%(name)s`` binds. Failures never escape
this module: every fetch returns a :class:`FetchResult` whose ``status``
tells a confirmed zero-row answer (``empty``) apart from a broken query
(``error``) or a missing connection (``unconfigured``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Generic, Iterable, Mapping, TypeVar

from loguru import logger
from pydantic import ValidationError

from app.core.concurrency import run_in_thread_warehouse
from app.core.config import Settings
from app.core.errors import (
    ConfigurationError,
    NotFoundError,
    TransientQueryError,
)
from app.schemas.geo import NetworkEdge, Region, SellerEntity, StoreLocation, SubRegion
from app.services.geo_codes import alternate_identifier, identifier_candidates, resolve_code

T = TypeVar("T")


class FetchStatus(str, Enum):
    OK = "ok"
    EMPTY = "empty"
    ERROR = "error"
    UNCONFIGURED = "unconfigured"


@dataclass
class FetchResult(Generic[T]):
    records: list[T] = field(default_factory=list)
    status: FetchStatus = FetchStatus.OK
    error: str | None = None

    @classmethod
    def from_records(cls, records: list[T]) -> "FetchResult[T]":
        return cls(records=records, status=FetchStatus.OK if records else FetchStatus.EMPTY)

    @property
    def ok(self) -> bool:
        return self.status is FetchStatus.OK

    @property
    def failed(self) -> bool:
        """Error or unconfigured; a confirmed empty answer is not a failure."""

        return self.status in (FetchStatus.ERROR, FetchStatus.UNCONFIGURED)

    def first(self) -> T | None:
        return self.records[0] if self.records else None

    def unwrap(self, not_found: str | None = None) -> list[T]:
        """Return the records or raise the matching API error.

        With ``not_found`` set, an empty result raises ``NotFoundError``;
        otherwise an empty list is returned.
        """

        if self.status is FetchStatus.UNCONFIGURED:
            raise ConfigurationError("Database connection unavailable")
        if self.status is FetchStatus.ERROR:
            raise TransientQueryError("Database query failed", detail=self.error)
        if self.status is FetchStatus.EMPTY and not_found:
            raise NotFoundError(not_found)
        return self.records


STATES_GMV_SQL = """
    SELECT
        STORE_STATE AS state,
        COUNT(*) AS store_count,
        SUM(GMV_LAST_MONTH) AS total_gmv
    FROM STORES
    WHERE STORE_STATE IS NOT NULL
      AND GMV_LAST_MONTH > 0
    GROUP BY STORE_STATE
    ORDER BY total_gmv DESC
"""

CITIES_GMV_SQL = """
    SELECT
        COALESCE(STORE_DMA_NAME, STORE_CITY) AS city,
        COUNT(*) AS store_count,
        SUM(GMV_LAST_MONTH) AS total_gmv,
        AVG(GMV_LAST_MONTH) AS avg_gmv_per_store,
        SUM(STORE_LIFETIME_GMV) AS total_lifetime_gmv,
        SUM(STORE_LIFETIME_ORDERS) AS total_lifetime_orders,
        AVG(LATITUDE) AS latitude,
        AVG(LONGITUDE) AS longitude
    FROM STORES
    WHERE {state_clause}
      AND COALESCE(STORE_DMA_NAME, STORE_CITY) IS NOT NULL
    GROUP BY COALESCE(STORE_DMA_NAME, STORE_CITY)
    ORDER BY total_gmv DESC
"""

STATE_STORES_SQL = """
    SELECT
        s.STORE_ID, s.SELLER_ID, s.LATEST_SELLER_ID,
        s.SELLER_FIRST_NAME, s.SELLER_LAST_NAME,
        s.STORE_LOCATION_NAME, s.STORE_ADDRESS, s.STORE_CITY, s.STORE_STATE,
        s.STORE_ZIP_CODE, s.LATITUDE, s.LONGITUDE,
        s.STORE_LIFETIME_GMV, s.STORE_LIFETIME_ORDERS,
        s.GMV_LAST_MONTH, s.GMV_CURRENT_MONTH, s.ORDERS_LAST_MONTH,
        SUM(CASE WHEN MONTH(o.ORDER_CREATED_AT) = MONTH(CURRENT_DATE())
                  AND YEAR(o.ORDER_CREATED_AT) = YEAR(CURRENT_DATE())
            THEN o.ORDER_GMV ELSE 0 END) AS ORDERS_MTD_GMV,
        COUNT(CASE WHEN MONTH(o.ORDER_CREATED_AT) = MONTH(CURRENT_DATE())
                    AND YEAR(o.ORDER_CREATED_AT) = YEAR(CURRENT_DATE())
            THEN o.ORDER_ID ELSE NULL END) AS ORDERS_MTD_COUNT
    FROM STORES s
    LEFT JOIN ORDERS o ON s.STORE_ID = o.STORE_ID
    WHERE {state_clause}
      AND s.LATITUDE IS NOT NULL
      AND s.LONGITUDE IS NOT NULL
    GROUP BY
        s.STORE_ID, s.SELLER_ID, s.LATEST_SELLER_ID, s.SELLER_FIRST_NAME, s.SELLER_LAST_NAME,
        s.STORE_LOCATION_NAME, s.STORE_ADDRESS, s.STORE_CITY, s.STORE_STATE, s.STORE_ZIP_CODE,
        s.LATITUDE, s.LONGITUDE, s.STORE_LIFETIME_GMV, s.STORE_LIFETIME_ORDERS,
        s.GMV_LAST_MONTH, s.GMV_CURRENT_MONTH, s.ORDERS_LAST_MONTH
    ORDER BY s.GMV_LAST_MONTH DESC
    LIMIT 200
"""

STATE_SELLERS_SQL = """
    SELECT
        s.SELLER_ID, s.SELLER_FIRST_NAME, s.SELLER_LAST_NAME, s.SELLER_FULL_NAME,
        s.SELLER_ADDRESS, s.SELLER_CITY, s.SELLER_STATE, s.SELLER_ZIP_CODE,
        s.LATITUDE, s.LONGITUDE, s.SELLER_TOTAL_GMV, s.GMV_LAST_MONTH,
        s.GMV_MTD, s.STORES_LAST_MONTH, s.ORDERS_MTD,
        COUNT(DISTINCT o.STORE_ID) AS ACTIVE_STORES_COUNT,
        SUM(CASE WHEN MONTH(o.ORDER_CREATED_AT) = MONTH(CURRENT_DATE())
                  AND YEAR(o.ORDER_CREATED_AT) = YEAR(CURRENT_DATE())
            THEN o.ORDER_GMV ELSE 0 END) AS ORDERS_MTD_GMV,
        COUNT(CASE WHEN MONTH(o.ORDER_CREATED_AT) = MONTH(CURRENT_DATE())
                    AND YEAR(o.ORDER_CREATED_AT) = YEAR(CURRENT_DATE())
            THEN o.ORDER_ID ELSE NULL END) AS ORDERS_MTD_COUNT
    FROM SELLERS s
    LEFT JOIN ORDERS o ON s.SELLER_ID = o.SELLER_ID
    WHERE {state_clause}
      AND s.LATITUDE IS NOT NULL
      AND s.LONGITUDE IS NOT NULL
    GROUP BY
        s.SELLER_ID, s.SELLER_FIRST_NAME, s.SELLER_LAST_NAME, s.SELLER_FULL_NAME,
        s.SELLER_ADDRESS, s.SELLER_CITY, s.SELLER_STATE, s.SELLER_ZIP_CODE,
        s.LATITUDE, s.LONGITUDE, s.SELLER_TOTAL_GMV, s.GMV_LAST_MONTH,
        s.GMV_MTD, s.STORES_LAST_MONTH, s.ORDERS_MTD
    ORDER BY s.SELLER_TOTAL_GMV DESC
    LIMIT 100
"""

CITY_STORES_SQL = """
    SELECT
        s.STORE_ID, s.STORE_LOCATION_NAME, s.STORE_ADDRESS, s.STORE_CITY, s.STORE_STATE,
        s.STORE_ZIP_CODE, s.LATITUDE, s.LONGITUDE,
        s.STORE_LIFETIME_GMV, s.STORE_LIFETIME_ORDERS,
        s.GMV_LAST_MONTH, s.GMV_CURRENT_MONTH, s.LATEST_SELLER_ID,
        sel.SELLER_FULL_NAME,
        COUNT(o.ORDER_ID) AS TOTAL_ORDERS,
        MAX(o.ORDER_CREATED_AT) AS LAST_ORDER_DATE
    FROM STORES s
    LEFT JOIN ORDERS o ON s.STORE_ID = o.STORE_ID
    LEFT JOIN SELLERS sel ON s.LATEST_SELLER_ID = sel.SELLER_ID
    WHERE s.STORE_CITY = %(city)s
      AND {state_clause}
      AND s.LATITUDE IS NOT NULL
      AND s.LONGITUDE IS NOT NULL
    GROUP BY
        s.STORE_ID, s.STORE_LOCATION_NAME, s.STORE_ADDRESS, s.STORE_CITY,
        s.STORE_STATE, s.STORE_ZIP_CODE, s.LATITUDE, s.LONGITUDE,
        s.STORE_LIFETIME_GMV, s.STORE_LIFETIME_ORDERS, s.GMV_LAST_MONTH,
        s.GMV_CURRENT_MONTH, s.LATEST_SELLER_ID, sel.SELLER_FULL_NAME
    ORDER BY s.GMV_LAST_MONTH DESC
"""

NETWORK_SQL = """
    SELECT
        s.STORE_ID,
        s.STORE_LOCATION_NAME,
        s.LATITUDE AS STORE_LAT,
        s.LONGITUDE AS STORE_LNG,
        o.SELLER_ID,
        sel.SELLER_FULL_NAME,
        sel.LATITUDE AS SELLER_LAT,
        sel.LONGITUDE AS SELLER_LNG,
        COUNT(DISTINCT o.ORDER_ID) AS CONNECTION_COUNT,
        SUM(o.ORDER_GMV) AS CONNECTION_GMV
    FROM STORES s
    JOIN ORDERS o ON s.STORE_ID = o.STORE_ID
    JOIN SELLERS sel ON o.SELLER_ID = sel.SELLER_ID
    WHERE s.STORE_CITY = %(city)s
      AND {state_clause}
      AND s.LATITUDE IS NOT NULL
      AND s.LONGITUDE IS NOT NULL
      AND sel.LATITUDE IS NOT NULL
      AND sel.LONGITUDE IS NOT NULL
    GROUP BY
        s.STORE_ID, s.STORE_LOCATION_NAME, s.LATITUDE, s.LONGITUDE,
        o.SELLER_ID, sel.SELLER_FULL_NAME, sel.LATITUDE, sel.LONGITUDE
    ORDER BY CONNECTION_GMV DESC
"""

STORE_DETAIL_SQL = """
    SELECT
        s.STORE_ID, s.STORE_LOCATION_NAME, s.STORE_ADDRESS, s.STORE_CITY, s.STORE_STATE,
        s.STORE_ZIP_CODE, s.LATITUDE, s.LONGITUDE,
        s.STORE_LIFETIME_GMV, s.STORE_LIFETIME_ORDERS,
        s.GMV_LAST_MONTH, s.GMV_CURRENT_MONTH, s.LATEST_SELLER_ID,
        sel.SELLER_FULL_NAME,
        COUNT(o.ORDER_ID) AS TOTAL_ORDERS,
        MAX(o.ORDER_CREATED_AT) AS LAST_ORDER_DATE,
        SUM(CASE WHEN MONTH(o.ORDER_CREATED_AT) = MONTH(CURRENT_DATE())
                  AND YEAR(o.ORDER_CREATED_AT) = YEAR(CURRENT_DATE())
            THEN o.ORDER_GMV ELSE 0 END) AS CURRENT_MONTH_GMV,
        SUM(CASE WHEN DATEDIFF(month, o.ORDER_CREATED_AT, CURRENT_DATE()) = 1
            THEN o.ORDER_GMV ELSE 0 END) AS LAST_MONTH_GMV,
        SUM(CASE WHEN DATEDIFF(month, o.ORDER_CREATED_AT, CURRENT_DATE()) = 2
            THEN o.ORDER_GMV ELSE 0 END) AS TWO_MONTHS_AGO_GMV
    FROM STORES s
    LEFT JOIN ORDERS o ON s.STORE_ID = o.STORE_ID
    LEFT JOIN SELLERS sel ON s.LATEST_SELLER_ID = sel.SELLER_ID
    WHERE s.STORE_ID = %(store_id)s
    GROUP BY
        s.STORE_ID, s.STORE_LOCATION_NAME, s.STORE_ADDRESS, s.STORE_CITY, s.STORE_STATE,
        s.STORE_ZIP_CODE, s.LATITUDE, s.LONGITUDE, s.STORE_LIFETIME_GMV, s.STORE_LIFETIME_ORDERS,
        s.GMV_LAST_MONTH, s.GMV_CURRENT_MONTH, s.LATEST_SELLER_ID, sel.SELLER_FULL_NAME
"""

SELLER_DETAIL_SQL = """
    SELECT
        s.SELLER_ID, s.SELLER_FULL_NAME, s.SELLER_ADDRESS, s.SELLER_CITY,
        s.SELLER_STATE, s.SELLER_ZIP_CODE, s.LATITUDE, s.LONGITUDE,
        s.SELLER_TOTAL_GMV, s.GMV_LAST_MONTH, s.GMV_MTD, s.STORES_LAST_MONTH, s.ORDERS_MTD,
        COUNT(DISTINCT o.STORE_ID) AS ACTIVE_STORES_COUNT,
        SUM(CASE WHEN DATEDIFF(day, o.ORDER_CREATED_AT, CURRENT_DATE()) <= 30
            THEN o.ORDER_GMV ELSE 0 END) AS LAST_30_DAYS_GMV,
        COUNT(CASE WHEN DATEDIFF(day, o.ORDER_CREATED_AT, CURRENT_DATE()) <= 30
            THEN o.ORDER_ID ELSE NULL END) AS LAST_30_DAYS_ORDERS
    FROM SELLERS s
    LEFT JOIN ORDERS o ON s.SELLER_ID = o.SELLER_ID
    WHERE s.SELLER_ID = %(seller_id)s
    GROUP BY
        s.SELLER_ID, s.SELLER_FULL_NAME, s.SELLER_ADDRESS, s.SELLER_CITY,
        s.SELLER_STATE, s.SELLER_ZIP_CODE, s.LATITUDE, s.LONGITUDE,
        s.SELLER_TOTAL_GMV, s.GMV_LAST_MONTH, s.GMV_MTD, s.STORES_LAST_MONTH, s.ORDERS_MTD
"""


def state_clause(column: str, identifier: str) -> tuple[str, dict[str, str]]:
    """OR-chain across every spelling of ``identifier``, as bind parameters."""

    params: dict[str, str] = {}
    parts = []
    for idx, form in enumerate(identifier_candidates(identifier)):
        key = f"state_{idx}"
        params[key] = form
        parts.append(f"{column} = %({key})s")
    return "(" + " OR ".join(parts) + ")", params


def _plain(value: Any) -> Any:
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    return value


def normalize_row(row: Mapping[str, Any]) -> dict[str, Any]:
    """Lower-case column names; the first non-null value wins on collisions."""

    out: dict[str, Any] = {}
    for key, value in row.items():
        canonical = str(key).strip().lower()
        if out.get(canonical) is None:
            out[canonical] = _plain(value)
    return out


def _number(row: Mapping[str, Any], key: str) -> float:
    value = row.get(key)
    if value is None:
        return 0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0


def _coordinate(row: Mapping[str, Any], key: str) -> float | None:
    value = row.get(key)
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def parse_regions(rows: Iterable[Mapping[str, Any]]) -> list[Region]:
    regions: list[Region] = []
    seen: set[str] = set()
    for raw in rows:
        row = normalize_row(raw)
        state = row.get("state")
        code = resolve_code(str(state)) if state else None
        if code is None:
            logger.bind(state=state).debug("region_dropped_unresolved")
            continue
        if code in seen:
            logger.bind(state=state, code=code).warning("region_dropped_duplicate")
            continue
        seen.add(code)
        regions.append(
            Region(
                state=str(state).strip(),
                store_count=int(_number(row, "store_count")),
                total_gmv=max(0.0, _number(row, "total_gmv")),
            )
        )
    return regions


def parse_sub_regions(rows: Iterable[Mapping[str, Any]]) -> list[SubRegion]:
    """Sub-regions for the map layer; entries without coordinates are dropped."""

    items: list[SubRegion] = []
    for raw in rows:
        row = normalize_row(raw)
        city = row.get("city")
        if not city:
            continue
        item = SubRegion(
            city=str(city),
            store_count=int(_number(row, "store_count")),
            total_gmv=max(0.0, _number(row, "total_gmv")),
            total_lifetime_gmv=max(0.0, _number(row, "total_lifetime_gmv")),
            total_lifetime_orders=max(0.0, _number(row, "total_lifetime_orders")),
            latitude=_coordinate(row, "latitude"),
            longitude=_coordinate(row, "longitude"),
        )
        if item.has_coordinates:
            items.append(item)
    return items


def _parse_models(model: type[T], spatial: bool) -> Callable[[Iterable[Mapping[str, Any]]], list[T]]:
    def parse(rows: Iterable[Mapping[str, Any]]) -> list[T]:
        items: list[T] = []
        for raw in rows:
            # Drop nulls so model defaults (0 for numbers) apply.
            row = {k: v for k, v in normalize_row(raw).items() if v is not None}
            try:
                item = model.model_validate(row)  # type: ignore[attr-defined]
            except ValidationError as exc:
                logger.bind(model=model.__name__, error=str(exc)).debug("row_dropped_invalid")
                continue
            if spatial and not item.has_coordinates:  # type: ignore[attr-defined]
                continue
            items.append(item)
        return items

    return parse


parse_store_locations = _parse_models(StoreLocation, spatial=True)
parse_store_details = _parse_models(StoreLocation, spatial=False)
parse_seller_entities = _parse_models(SellerEntity, spatial=True)
parse_seller_details = _parse_models(SellerEntity, spatial=False)
parse_network_edges = _parse_models(NetworkEdge, spatial=False)


class WarehouseGateway:
    """Parameterized aggregate queries over one shared connection handle."""

    def __init__(self, connection: Any = None, *, timeout: float | None = None):
        self._connection = connection
        self.timeout = timeout

    @property
    def configured(self) -> bool:
        return self._connection is not None

    def attach(self, connection: Any) -> None:
        self._connection = connection

    def close(self) -> None:
        connection, self._connection = self._connection, None
        if connection is None:
            return
        try:
            connection.close()
        except Exception as exc:
            logger.bind(error=str(exc)).warning("warehouse_close_failed")
        else:
            logger.info("warehouse_connection_closed")

    async def execute(self, sql: str, params: Mapping[str, Any] | None = None) -> list[dict[str, Any]]:
        """Run one statement; raises ``TransientQueryError`` on any failure."""

        connection = self._connection
        if connection is None:
            raise ConfigurationError("Database connection unavailable")

        def _run() -> list[dict[str, Any]]:
            cur = connection.cursor()
            try:
                # The driver cancels the statement server-side at the deadline
                cur.execute(sql, dict(params or {}), timeout=self.timeout)
                rows = cur.fetchall()
                columns = [desc[0] for desc in cur.description] if cur.description else []
            finally:
                cur.close()
            return [
                dict(row) if isinstance(row, Mapping) else dict(zip(columns, row))
                for row in rows
            ]

        try:
            return await run_in_thread_warehouse(_run, timeout=self.timeout)
        except TimeoutError as exc:
            raise TransientQueryError(
                "Database query timed out", detail=f"no answer within {self.timeout}s"
            ) from exc
        except Exception as exc:
            raise TransientQueryError("Database query failed", detail=str(exc)) from exc

    async def _fetch(
        self,
        name: str,
        sql: str,
        params: Mapping[str, Any],
        parse: Callable[[list[dict[str, Any]]], list[T]],
    ) -> FetchResult[T]:
        if not self.configured:
            return FetchResult(status=FetchStatus.UNCONFIGURED)
        try:
            rows = await self.execute(sql, params)
        except TransientQueryError as exc:
            logger.bind(query=name, params=dict(params), error=exc.detail).error("warehouse_query_failed")
            return FetchResult(status=FetchStatus.ERROR, error=exc.detail or exc.message)
        result = FetchResult.from_records(parse(rows))
        logger.bind(query=name, rows=len(rows), kept=len(result.records)).info("warehouse_query_completed")
        return result

    async def _fetch_for_region(
        self,
        name: str,
        template: str,
        column: str,
        region: str,
        parse: Callable[[list[dict[str, Any]]], list[T]],
        extra: Mapping[str, Any] | None = None,
    ) -> FetchResult[T]:
        clause, params = state_clause(column, region)
        result = await self._fetch(name, template.format(state_clause=clause), {**(extra or {}), **params}, parse)
        if result.status is not FetchStatus.EMPTY:
            return result

        alternate = alternate_identifier(region)
        if not alternate or set(identifier_candidates(alternate)) <= set(params.values()):
            return result
        logger.bind(query=name, region=region, alternate=alternate).info("warehouse_retry_alternate")
        clause, params = state_clause(column, alternate)
        return await self._fetch(name, template.format(state_clause=clause), {**(extra or {}), **params}, parse)

    async def fetch_regions(self) -> FetchResult[Region]:
        return await self._fetch("states_gmv", STATES_GMV_SQL, {}, parse_regions)

    async def fetch_sub_regions(self, region: str) -> FetchResult[SubRegion]:
        return await self._fetch_for_region(
            "cities_gmv", CITIES_GMV_SQL, "STORE_STATE", region, parse_sub_regions
        )

    async def fetch_store_locations(self, region: str) -> FetchResult[StoreLocation]:
        return await self._fetch_for_region(
            "state_stores", STATE_STORES_SQL, "s.STORE_STATE", region, parse_store_locations
        )

    async def fetch_seller_entities(self, region: str) -> FetchResult[SellerEntity]:
        return await self._fetch_for_region(
            "state_sellers", STATE_SELLERS_SQL, "s.SELLER_STATE", region, parse_seller_entities
        )

    async def fetch_store_locations_by_city(self, city: str, region: str) -> FetchResult[StoreLocation]:
        return await self._fetch_for_region(
            "city_stores",
            CITY_STORES_SQL,
            "s.STORE_STATE",
            region,
            parse_store_locations,
            extra={"city": city},
        )

    async def fetch_network_edges(self, city: str, region: str) -> FetchResult[NetworkEdge]:
        return await self._fetch_for_region(
            "network", NETWORK_SQL, "s.STORE_STATE", region, parse_network_edges, extra={"city": city}
        )

    async def fetch_store_detail(self, store_id: int | str) -> FetchResult[StoreLocation]:
        return await self._fetch(
            "store_detail", STORE_DETAIL_SQL, {"store_id": store_id}, parse_store_details
        )

    async def fetch_seller_detail(self, seller_id: int | str) -> FetchResult[SellerEntity]:
        return await self._fetch(
            "seller_detail", SELLER_DETAIL_SQL, {"seller_id": seller_id}, parse_seller_details
        )

    async def ping(self) -> str | None:
        """Return the warehouse version, or ``None`` when unreachable."""

        if not self.configured:
            return None
        try:
            rows = await self.execute("SELECT CURRENT_VERSION() AS version")
        except TransientQueryError as exc:
            logger.bind(error=exc.detail).warning("warehouse_ping_failed")
            return None
        return str(normalize_row(rows[0]).get("version")) if rows else None

    async def list_tables(self) -> list[str]:
        rows = await self.execute("SHOW TABLES")
        return [str(normalize_row(row).get("name")) for row in rows]


def connect_snowflake(settings: Settings) -> Any:
    """Open a connector session from settings; ``None`` when not configured.

    Connection errors propagate; the caller decides whether to run without
    the warehouse.
    """

    if not settings.warehouse_configured:
        return None

    import snowflake.connector

    options: dict[str, Any] = {
        "account": settings.SNOWFLAKE_ACCOUNT,
        "user": settings.SNOWFLAKE_USER,
        "warehouse": settings.SNOWFLAKE_WAREHOUSE,
        "database": settings.SNOWFLAKE_DATABASE,
        "schema": settings.SNOWFLAKE_SCHEMA,
    }
    if settings.SNOWFLAKE_ROLE:
        options["role"] = settings.SNOWFLAKE_ROLE
    if settings.SNOWFLAKE_PRIVATE_KEY_PATH:
        options["authenticator"] = "SNOWFLAKE_JWT"
        options["private_key_file"] = str(Path(settings.SNOWFLAKE_PRIVATE_KEY_PATH).expanduser())
    else:
        options["password"] = settings.SNOWFLAKE_PASSWORD

    logger.bind(
        account=settings.SNOWFLAKE_ACCOUNT,
        user=settings.SNOWFLAKE_USER,
        database=settings.SNOWFLAKE_DATABASE,
        schema=settings.SNOWFLAKE_SCHEMA,
        auth_type="key_pair" if settings.SNOWFLAKE_PRIVATE_KEY_PATH else "password",
    ).info("warehouse_connecting")
    return snowflake.connector.connect(**options)
