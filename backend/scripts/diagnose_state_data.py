"""Diagnose why a state's sub-regions do not show on the map.

Usage: python scripts/diagnose_state_data.py CA [http://localhost:3000]
"""

import asyncio
import sys
import pathlib

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

from app.client.api import ApiError, HeatmapApiClient
from app.core.config import settings
from app.services.cache_store import MetricCacheStore

REQUIRED_FIELDS = ("city", "store_count", "total_gmv", "latitude", "longitude")


def check_cache(state: str) -> None:
    store = MetricCacheStore(settings.DATA_CACHE_DIR)
    print("\n1. Checking data cache directory...")
    if not store.cache_dir.is_dir():
        print("❌ Data cache directory does not exist. Has the app been run yet?")
        return
    print(f"✅ Data cache directory exists: {store.cache_dir}")

    path = store.path_for("subregion", state)
    print(f"\n2. Checking for cached sub-region data at: {path}")
    if not path.exists():
        print("❌ No cached data found for this state.")
        return
    entry = store.read("subregion", state)
    if entry is None:
        print("❌ Found a cache file but it could not be read (invalid JSON or shape).")
        return
    origin = "synthetic (mock)" if entry.synthetic else "warehouse"
    print(f"✅ Found {len(entry.records)} cached sub-regions from {origin} data.")
    if entry.records:
        print("Sample:", entry.records[0])
    else:
        print("⚠️ WARNING: The cached list is empty.")


async def check_api(state: str, base_url: str) -> None:
    print(f"\n3. Calling {base_url}/api/cities-gmv/{state} ...")
    async with HeatmapApiClient(base_url) as api:
        try:
            items = await api.cities_gmv(state)
        except ApiError as exc:
            print(f"❌ API call failed: {exc}")
            return
    if not isinstance(items, list):
        print("❌ API returned data, but it is not a list:", items)
        return
    print(f"✅ API returned {len(items)} sub-regions.")
    if not items:
        print("⚠️ WARNING: The API returned an empty list.")
        return

    print("\n4. Checking for required fields...")
    missing = [f for f in REQUIRED_FIELDS if f not in items[0]]
    if missing:
        print(f"❌ Missing fields: {', '.join(missing)}")
    else:
        print("✅ All required fields are present.")

    print("\n5. Checking for valid coordinates...")
    valid = [i for i in items if i.get("latitude") and i.get("longitude")]
    print(f"{len(valid)} out of {len(items)} items have valid coordinates.")


async def main(state: str, base_url: str = "http://localhost:3000") -> None:
    print(f"Diagnosing data for state: {state}")
    check_cache(state)
    await check_api(state, base_url)
    print("\nDiagnostic complete!")


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(2)
    asyncio.run(main(*sys.argv[1:3]))
