"""Turn fetched map data into drawable layers and plotly figures."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional

import plotly.graph_objects as go

from app.client.scaling import (
    PALETTE,
    SELLER_COLOR,
    STORE_COLOR,
    edge_width,
    format_currency,
    format_number,
    heat_bucket,
    marker_size,
    metric_value,
    network_color,
    value_range,
)
from app.services.geo_codes import resolve_code

Bounds = tuple[tuple[float, float], tuple[float, float]]


@dataclass
class RegionFill:
    code: str
    label: str
    value: float
    bucket: int

    @property
    def color(self) -> str:
        return PALETTE[self.bucket]


@dataclass
class Marker:
    key: str
    kind: str  # sub_region | store | seller
    lat: float
    lng: float
    label: str
    color: str
    size: float
    symbol: str = "circle"
    data: dict[str, Any] = field(default_factory=dict)


@dataclass
class EdgeLine:
    store_id: int
    seller_id: int
    start: tuple[float, float]
    end: tuple[float, float]
    color: str
    width: float
    orders: float
    gmv: float

    @property
    def midpoint(self) -> tuple[float, float]:
        return ((self.start[0] + self.end[0]) / 2, (self.start[1] + self.end[1]) / 2)


@dataclass
class LegendEntry:
    label: str
    color: str


@dataclass
class MapLayer:
    level: str
    fills: list[RegionFill] = field(default_factory=list)
    markers: list[Marker] = field(default_factory=list)
    edges: list[EdgeLine] = field(default_factory=list)
    legend: list[LegendEntry] = field(default_factory=list)
    bounds: Optional[Bounds] = None
    metric: Optional[str] = None


def bounds_of(points: Iterable[tuple[float, float]]) -> Optional[Bounds]:
    points = list(points)
    if not points:
        return None
    lats = [p[0] for p in points]
    lngs = [p[1] for p in points]
    return (min(lats), min(lngs)), (max(lats), max(lngs))


def _heat_legend(low: float, high: float, formatter) -> list[LegendEntry]:
    return [
        LegendEntry(label=f"≤ {formatter(low)}", color=PALETTE[0]),
        LegendEntry(label=f"≥ {formatter(high)}", color=PALETTE[-1]),
    ]


def _coords(record: Mapping[str, Any], lat_key: str, lng_key: str) -> Optional[tuple[float, float]]:
    lat, lng = record.get(lat_key), record.get(lng_key)
    if lat is None or lng is None:
        return None
    try:
        return float(lat), float(lng)
    except (TypeError, ValueError):
        return None


def nation_layer(regions: list[Mapping[str, Any]]) -> MapLayer:
    """Choropleth fills keyed by state code; unresolvable states are skipped."""

    low, high = value_range(metric_value(r, "total_gmv") for r in regions)
    fills = []
    for region in regions:
        code = resolve_code(str(region.get("state") or ""))
        if code is None:
            continue
        value = metric_value(region, "total_gmv")
        fills.append(
            RegionFill(
                code=code,
                label=str(region.get("state")),
                value=value,
                bucket=heat_bucket(value, low, high),
            )
        )
    return MapLayer(
        level="nation",
        fills=fills,
        legend=_heat_legend(low, high, lambda v: format_currency(v, compact=True)),
        metric="total_gmv",
    )


def state_layer(sub_regions: list[Mapping[str, Any]], metric: str) -> MapLayer:
    """Sub-region circles colored and sized by ``metric``."""

    placed = [(r, _coords(r, "latitude", "longitude")) for r in sub_regions]
    placed = [(r, c) for r, c in placed if c is not None]
    low, high = value_range(metric_value(r, metric) for r, _ in placed)
    markers = []
    for record, (lat, lng) in placed:
        value = metric_value(record, metric)
        markers.append(
            Marker(
                key=str(record.get("city")),
                kind="sub_region",
                lat=lat,
                lng=lng,
                label=str(record.get("city")),
                color=PALETTE[heat_bucket(value, low, high)],
                size=marker_size(value, low, high),
                data=dict(record),
            )
        )
    formatter = format_number if metric == "store_count" else (lambda v: format_currency(v, compact=True))
    return MapLayer(
        level="state",
        markers=markers,
        legend=_heat_legend(low, high, formatter),
        bounds=bounds_of((m.lat, m.lng) for m in markers),
        metric=metric,
    )


def _store_markers(stores: list[Mapping[str, Any]], *, network_view: bool) -> list[Marker]:
    placed = [(s, _coords(s, "latitude", "longitude")) for s in stores]
    placed = [(s, c) for s, c in placed if c is not None]
    low, high = value_range(metric_value(s, "gmv_last_month") for s, _ in placed)
    markers = []
    for store, (lat, lng) in placed:
        value = metric_value(store, "gmv_last_month")
        markers.append(
            Marker(
                key=f"store:{store.get('store_id')}",
                kind="store",
                lat=lat,
                lng=lng,
                label=str(store.get("store_location_name") or f"Store #{store.get('store_id')}"),
                color=STORE_COLOR if network_view else PALETTE[heat_bucket(value, low, high)],
                size=8.0 if network_view else marker_size(value, low, high),
                data=dict(store),
            )
        )
    return markers


def _seller_markers(sellers: list[Mapping[str, Any]]) -> list[Marker]:
    markers = []
    for seller in sellers:
        coords = _coords(seller, "latitude", "longitude")
        if coords is None:
            continue
        name = seller.get("seller_full_name") or f"Seller #{seller.get('seller_id')}"
        markers.append(
            Marker(
                key=f"seller:{seller.get('seller_id')}",
                kind="seller",
                lat=coords[0],
                lng=coords[1],
                label=str(name),
                color=SELLER_COLOR,
                size=6.0,
                symbol="cross",
                data=dict(seller),
            )
        )
    return markers


def _edge_lines(edges: list[Mapping[str, Any]]) -> list[EdgeLine]:
    low, high = value_range(metric_value(e, "connection_gmv") for e in edges)
    lines = []
    for edge in edges:
        start = _coords(edge, "store_lat", "store_lng")
        end = _coords(edge, "seller_lat", "seller_lng")
        if start is None or end is None:
            continue
        gmv = metric_value(edge, "connection_gmv")
        lines.append(
            EdgeLine(
                store_id=int(edge["store_id"]),
                seller_id=int(edge["seller_id"]),
                start=start,
                end=end,
                color=network_color(gmv),
                width=edge_width(gmv, low, high),
                orders=metric_value(edge, "connection_count"),
                gmv=gmv,
            )
        )
    return lines


def network_sellers(edges: list[Mapping[str, Any]]) -> list[dict[str, Any]]:
    """Seller nodes implied by the edges, one per seller id."""

    seen: dict[Any, dict[str, Any]] = {}
    for edge in edges:
        seller_id = edge.get("seller_id")
        if seller_id in seen:
            continue
        seen[seller_id] = {
            "seller_id": seller_id,
            "seller_full_name": edge.get("seller_full_name"),
            "latitude": edge.get("seller_lat"),
            "longitude": edge.get("seller_lng"),
        }
    return list(seen.values())


def _same_place(a: Any, b: Any) -> bool:
    return bool(a) and bool(b) and str(a).strip().lower() == str(b).strip().lower()


def local_sellers(
    sellers: list[Mapping[str, Any]], city: str, edges: list[Mapping[str, Any]]
) -> list[dict[str, Any]]:
    """State sellers living in ``city`` or connected to one of its stores."""

    network_seller_ids = {edge.get("seller_id") for edge in edges}
    return [
        dict(seller)
        for seller in sellers
        if _same_place(seller.get("seller_city"), city)
        or seller.get("seller_id") in network_seller_ids
    ]


def city_layer(
    stores: list[Mapping[str, Any]],
    sellers: list[Mapping[str, Any]],
    edges: list[Mapping[str, Any]],
    *,
    network_view: bool = False,
) -> MapLayer:
    if network_view:
        markers = _store_markers(stores, network_view=True) + _seller_markers(network_sellers(edges))
        lines = _edge_lines(edges)
        legend = [
            LegendEntry("Store", STORE_COLOR),
            LegendEntry("Seller", SELLER_COLOR),
            LegendEntry("GMV < $1K", network_color(0)),
            LegendEntry("GMV < $5K", network_color(1000)),
            LegendEntry("GMV < $10K", network_color(5000)),
            LegendEntry("GMV ≥ $10K", network_color(10000)),
        ]
    else:
        markers = _store_markers(stores, network_view=False) + _seller_markers(sellers)
        lines = []
        legend = [LegendEntry("Store", PALETTE[4]), LegendEntry("Seller", SELLER_COLOR)]
    return MapLayer(
        level="city",
        markers=markers,
        edges=lines,
        legend=legend,
        bounds=bounds_of((m.lat, m.lng) for m in markers),
        metric="gmv_last_month",
    )


def _discrete_colorscale() -> list[list[Any]]:
    steps = len(PALETTE)
    scale: list[list[Any]] = []
    for idx, color in enumerate(PALETTE):
        scale.append([idx / steps, color])
        scale.append([(idx + 1) / steps, color])
    return scale


def build_figure(layer: MapLayer) -> go.Figure:
    fig = go.Figure()
    if layer.level == "nation":
        fig.add_trace(
            go.Choropleth(
                locations=[f.code for f in layer.fills],
                z=[f.bucket for f in layer.fills],
                locationmode="USA-states",
                colorscale=_discrete_colorscale(),
                zmin=-0.5,
                zmax=len(PALETTE) - 0.5,
                text=[f"{f.label}: {format_currency(f.value)}" for f in layer.fills],
                customdata=[f.label for f in layer.fills],
                hoverinfo="text",
                showscale=False,
            )
        )
    for edge in layer.edges:
        fig.add_trace(
            go.Scattergeo(
                lat=[edge.start[0], edge.end[0]],
                lon=[edge.start[1], edge.end[1]],
                mode="lines",
                line={"color": edge.color, "width": edge.width},
                hoverinfo="text",
                text=f"{format_number(edge.orders)} orders, {format_currency(edge.gmv)}",
                showlegend=False,
            )
        )
    for kind in ("sub_region", "store", "seller"):
        markers = [m for m in layer.markers if m.kind == kind]
        if not markers:
            continue
        fig.add_trace(
            go.Scattergeo(
                lat=[m.lat for m in markers],
                lon=[m.lng for m in markers],
                mode="markers",
                name=kind.replace("_", " "),
                text=[m.label for m in markers],
                customdata=[m.label for m in markers],
                hoverinfo="text",
                marker={
                    "color": [m.color for m in markers],
                    "size": [m.size * 2 for m in markers],
                    "symbol": [m.symbol for m in markers],
                    "line": {"color": "#fff", "width": 1},
                },
            )
        )
    fig.update_geos(scope="usa")
    if layer.bounds is not None:
        fig.update_geos(fitbounds="locations")
    fig.update_layout(margin={"r": 0, "t": 0, "l": 0, "b": 0})
    return fig
