"""Check Snowflake connectivity and run each aggregate query once."""

import asyncio
import sys
import pathlib

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

from app.core.config import settings
from app.services.warehouse import WarehouseGateway, connect_snowflake

REQUIRED_TABLES = ("STORES", "SELLERS", "ORDERS")


async def main(state: str = "CA") -> int:
    print("Connection parameters:")
    print("  Account:", settings.SNOWFLAKE_ACCOUNT)
    print("  Username:", settings.SNOWFLAKE_USER)
    print("  Warehouse:", settings.SNOWFLAKE_WAREHOUSE)
    print("  Database:", settings.SNOWFLAKE_DATABASE)
    print("  Schema:", settings.SNOWFLAKE_SCHEMA)
    print("  Role:", settings.SNOWFLAKE_ROLE)

    if not settings.warehouse_configured:
        print("❌ Snowflake credentials are not configured (or MOCK_DATA_ONLY is set).")
        return 1

    print("\nConnecting to Snowflake...")
    connection = await asyncio.to_thread(connect_snowflake, settings)
    gateway = WarehouseGateway(connection, timeout=settings.WAREHOUSE_QUERY_TIMEOUT_SEC)
    try:
        version = await gateway.ping()
        if version is None:
            print("❌ Connected, but the warehouse did not answer a ping.")
            return 1
        print(f"✅ Connected to Snowflake {version}")

        tables = {name.upper() for name in await gateway.list_tables()}
        missing = [t for t in REQUIRED_TABLES if t not in tables]
        if missing:
            print(f"❌ Missing tables: {', '.join(missing)}")
            return 1
        print(f"✅ Found tables: {', '.join(REQUIRED_TABLES)}")

        regions = await gateway.fetch_regions()
        print(f"\nstates-gmv: {regions.status.value}, {len(regions.records)} states")
        for region in regions.records[:5]:
            print(f"  {region.state}: {region.store_count} stores, ${region.total_gmv:,.2f}")

        for label, fetch in (
            ("cities-gmv", gateway.fetch_sub_regions),
            ("state-stores", gateway.fetch_store_locations),
            ("state-sellers", gateway.fetch_seller_entities),
        ):
            result = await fetch(state)
            print(f"{label} {state}: {result.status.value}, {len(result.records)} rows")
            if result.error:
                print(f"  error: {result.error}")
    finally:
        gateway.close()

    print("\nValidation complete!")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main(*sys.argv[1:2])))
