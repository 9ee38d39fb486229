"""Color and size laws shared by every map layer."""

from __future__ import annotations

import math
from typing import Any, Iterable, Mapping

PALETTE: tuple[str, ...] = (
    "#ffffcc",
    "#ffeda0",
    "#fed976",
    "#feb24c",
    "#fd8d3c",
    "#fc4e2a",
    "#e31a1c",
    "#b10026",
)
NO_DATA_COLOR = "#f5f5f5"

MIN_MARKER_PX = 5.0
MAX_MARKER_PX = 20.0
MIN_EDGE_PX = 1.0
MAX_EDGE_PX = 6.0

STORE_COLOR = "#1a73e8"
SELLER_COLOR = "#34a853"
HIGHLIGHT_COLOR = "#fbbc04"

METRICS = ("total_gmv", "store_count", "avg_gmv_per_store")
DEFAULT_METRIC = "total_gmv"


def heat_bucket(value: float, low: float, high: float) -> int:
    """Palette index for ``value`` on a square-rooted log scale over [low, high]."""

    last = len(PALETTE) - 1
    if low == high:
        return len(PALETTE) // 2
    if value <= low:
        return 0
    if value >= high:
        return last

    log_low = math.log(low if low > 0 else 1)
    log_high = math.log(high if high > 0 else 1)
    log_value = math.log(value if value > 0 else 1)
    if log_high <= log_low:
        return 0
    position = max(0.0, (log_value - log_low) / (log_high - log_low)) ** 0.5
    return min(math.floor(position * len(PALETTE)), last)


def heat_color(value: float, low: float, high: float) -> str:
    return PALETTE[heat_bucket(value, low, high)]


def _linear(value: float, low: float, high: float, out_min: float, out_max: float) -> float:
    if low == high:
        return (out_min + out_max) / 2
    if value <= low:
        return out_min
    if value >= high:
        return out_max
    return out_min + (value - low) / (high - low) * (out_max - out_min)


def marker_size(value: float, low: float, high: float) -> float:
    """Marker radius in pixels, 5 to 20, 12.5 when the range is degenerate."""

    return _linear(value, low, high, MIN_MARKER_PX, MAX_MARKER_PX)


def edge_width(gmv: float, low: float, high: float) -> float:
    return _linear(gmv, low, high, MIN_EDGE_PX, MAX_EDGE_PX)


def network_color(gmv: float) -> str:
    if gmv < 1000:
        return "#3498db"
    if gmv < 5000:
        return "#2980b9"
    if gmv < 10000:
        return "#e67e22"
    return "#d35400"


def metric_value(record: Mapping[str, Any], metric: str) -> float:
    value = record.get(metric)
    if value is None:
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def value_range(values: Iterable[float]) -> tuple[float, float]:
    """(min, max) over positive values; (0, 1) when there are none."""

    positive = [v for v in values if v > 0]
    if not positive:
        return 0.0, 1.0
    return min(positive), max(positive)


def format_currency(value: float | None, compact: bool = False) -> str:
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return "$0.00"
    if compact:
        for threshold, suffix in ((1e9, "B"), (1e6, "M"), (1e3, "K")):
            if abs(value) >= threshold:
                return f"${value / threshold:.1f}{suffix}"
    return f"${value:,.2f}"


def format_number(value: float | None) -> str:
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return "0"
    return f"{value:,.0f}"
