"""Synthetic nation and sub-region aggregates.

Used when the warehouse is unconfigured or failing, so the map always has
something plausible to draw. Pass a seeded ``random.Random`` for stable
output.
"""

from __future__ import annotations

import math
import random

from app.schemas.geo import Region, SubRegion
from app.services.geo_codes import (
    US_STATE_NAMES,
    region_group,
    resolve_code,
    sub_regions_for,
)

MIN_SUB_REGIONS = 5
FALLBACK_DIRECTIONS = ("CENTRAL", "NORTH", "SOUTH", "EAST", "WEST")
PADDING_SUFFIXES = ("AREA", "REGION", "METRO", "ZONE", "DISTRICT")

# Rough centre of each macro-region as (lat, lng).
GROUP_CENTRES: dict[str, tuple[float, float]] = {
    "Northeast": (41.5, -73.0),
    "Southeast": (33.0, -84.0),
    "Midwest": (40.0, -89.0),
    "Southwest": (33.0, -106.0),
    "West": (38.0, -120.0),
    "Northwest": (45.0, -122.0),
}


class MockDataGenerator:
    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    def generate_regions(self) -> list[Region]:
        """One record per US state, sorted by GMV, highest first."""

        rng = self.rng
        regions = [
            Region(
                state=name,
                store_count=math.floor(rng.random() * 500) + 10,
                total_gmv=float(math.floor(rng.random() * 10_000_000) + 100_000),
            )
            for name in US_STATE_NAMES
        ]
        regions.sort(key=lambda r: r.total_gmv, reverse=True)
        return regions

    def sub_region_names(self, region: str) -> list[str]:
        code = resolve_code(region)
        names = sub_regions_for(code)
        if not names:
            prefix = region.strip()[:3].upper()
            names = [f"{prefix} - {direction}" for direction in FALLBACK_DIRECTIONS]
        state_label = region.strip().upper()
        i = len(names)
        while len(names) < MIN_SUB_REGIONS:
            suffix = PADDING_SUFFIXES[i % len(PADDING_SUFFIXES)]
            names.append(f"{state_label} {suffix} {i + 1}")
            i += 1
        return names

    def generate_sub_regions(self, region: str) -> list[SubRegion]:
        """At least five sub-regions placed radially around the state's macro-region."""

        rng = self.rng
        names = self.sub_region_names(region)
        base_lat, base_lng = GROUP_CENTRES[region_group(resolve_code(region))]
        base_lat += (rng.random() - 0.5) * 4
        base_lng += (rng.random() - 0.5) * 4

        count = len(names)
        items: list[SubRegion] = []
        for idx, name in enumerate(names):
            angle = idx / count * 2 * math.pi
            distance = rng.random() * 1.5 + 0.5
            importance = 1 - idx / count

            store_count = math.floor((rng.random() * 40 + 10) * (importance * 0.8 + 0.2))
            avg_per_store = math.floor(rng.random() * 40_000) + 10_000
            total_gmv = store_count * avg_per_store * (0.8 + rng.random() * 0.4)
            lifetime_gmv = total_gmv * (rng.random() * 5 + 5)
            lifetime_orders = math.floor(lifetime_gmv / (rng.random() * 500 + 500))

            items.append(
                SubRegion(
                    city=name,
                    store_count=store_count,
                    total_gmv=total_gmv,
                    total_lifetime_gmv=lifetime_gmv,
                    total_lifetime_orders=lifetime_orders,
                    latitude=base_lat + math.cos(angle) * distance,
                    longitude=base_lng + math.sin(angle) * distance,
                )
            )
        items.sort(key=lambda s: s.total_gmv, reverse=True)
        return items
